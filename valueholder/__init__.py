"""Lazy-loading value-holder proxies and their lightweight public API."""

from __future__ import annotations

import importlib
from typing import Any

__version__ = "1.0.0"
__license__ = "MIT"

_LAZY_EXPORTS = {
    "Configuration": ("valueholder.config", "Configuration"),
    "configure_logging": ("valueholder.logging_config", "configure_logging"),
    "LazyLoadingValueHolder": ("valueholder.proxy", "LazyLoadingValueHolder"),
    "LazyLoadingValueHolderFactory": ("valueholder.factory", "LazyLoadingValueHolderFactory"),
    "ProxyGenerator": ("valueholder.generator", "ProxyGenerator"),
    "restore_proxy": ("valueholder.generator", "restore_proxy"),
    "describe": ("valueholder.descriptor", "describe"),
    "CapabilityDescriptor": ("valueholder.descriptor", "CapabilityDescriptor"),
    "ProxyState": ("valueholder.types", "ProxyState"),
    "ValueHolderReference": ("valueholder.types", "ValueHolderReference"),
    "proxy_state": ("valueholder.state_machine", "proxy_state"),
    "proxy_get": ("valueholder.surface", "proxy_get"),
    "proxy_set": ("valueholder.surface", "proxy_set"),
    "proxy_has": ("valueholder.surface", "proxy_has"),
    "proxy_delete": ("valueholder.surface", "proxy_delete"),
    "proxy_invoke": ("valueholder.surface", "proxy_invoke"),
    "proxy_clone": ("valueholder.surface", "proxy_clone"),
    "proxy_serialize": ("valueholder.surface", "proxy_serialize"),
    "proxy_deserialize": ("valueholder.surface", "proxy_deserialize"),
    "from_factory": ("valueholder.initializers", "from_factory"),
    "from_operation_factory": ("valueholder.initializers", "from_operation_factory"),
    "limited_attempts": ("valueholder.initializers", "limited_attempts"),
    "ProxyError": ("valueholder.errors", "ProxyError"),
    "InitializationFailed": ("valueholder.errors", "InitializationFailed"),
    "UninitializedProxy": ("valueholder.errors", "UninitializedProxy"),
    "InvalidProxiedClass": ("valueholder.errors", "InvalidProxiedClass"),
    "ConfigurationError": ("valueholder.errors", "ConfigurationError"),
}


def __getattr__(name: str) -> Any:
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _LAZY_EXPORTS[name]
    module = importlib.import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


__all__ = ["__version__", "__license__", *_LAZY_EXPORTS]
