"""Build one proxy type per wrapped type from its capability descriptor."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from valueholder.config import Configuration
from valueholder.descriptor import CapabilityDescriptor, MethodDescriptor, describe
from valueholder.proxy import PROXY_MANAGEMENT_METHODS, LazyLoadingValueHolder
from valueholder.state_machine import initialize_value_holder

logger = logging.getLogger(__name__)

_PROXY_TYPE_CACHE: Dict[Tuple[type, str, str, bool], type] = {}
_CACHE_LOCK = threading.Lock()


def _forwarding_method(method: MethodDescriptor, owner_qualname: str) -> Callable[..., Any]:
    name = method.name

    if method.is_coroutine:

        async def forward(self, *args: Any, **kwargs: Any) -> Any:
            parameters = method.bind(args, kwargs)
            wrapped = initialize_value_holder(self, name, parameters)
            result = await getattr(wrapped, name)(*args, **kwargs)
            return self if result is wrapped else result

    else:

        def forward(self, *args: Any, **kwargs: Any) -> Any:
            parameters = method.bind(args, kwargs)
            wrapped = initialize_value_holder(self, name, parameters)
            result = getattr(wrapped, name)(*args, **kwargs)
            return self if result is wrapped else result

    forward.__name__ = name
    forward.__qualname__ = f"{owner_qualname}.{name}"
    forward.__doc__ = method.doc
    if method.signature is not None:
        forward.__signature__ = method.signature  # type: ignore[attr-defined]
    return forward


class ProxyGenerator:
    """Generate (and cache) lazy-loading value-holder types for wrapped types."""

    def __init__(self, configuration: Optional[Configuration] = None) -> None:
        self.configuration = configuration or Configuration()

    def proxy_class_name(self, target: type) -> str:
        return f"{target.__name__}{self.configuration.proxy_class_suffix}"

    def generate(self, target: type) -> type:
        key = (
            target,
            self.configuration.proxies_module,
            self.configuration.proxy_class_suffix,
            self.configuration.include_private_members,
        )
        with _CACHE_LOCK:
            proxy_type = _PROXY_TYPE_CACHE.get(key)
            if proxy_type is None:
                proxy_type = self._build(target)
                _PROXY_TYPE_CACHE[key] = proxy_type
        return proxy_type

    def _build(self, target: type) -> type:
        descriptor: CapabilityDescriptor = describe(
            target, include_private=self.configuration.include_private_members
        )
        name = self.proxy_class_name(target)
        namespace: Dict[str, Any] = {
            "__slots__": (),
            "__module__": self.configuration.proxies_module,
            "__qualname__": name,
            "__doc__": f"Lazy-loading value holder for {target.__module__}.{target.__qualname__}.",
            "_proxy_descriptor": descriptor,
            "_proxy_configuration": self.configuration,
        }

        for method in descriptor.methods + descriptor.special_methods:
            if method.name in PROXY_MANAGEMENT_METHODS:
                logger.warning(
                    "%s.%s collides with proxy management API and is reachable only via proxy_invoke",
                    target.__qualname__,
                    method.name,
                )
                continue
            namespace[method.name] = _forwarding_method(method, name)

        proxy_type = type(name, (LazyLoadingValueHolder,), namespace)
        logger.debug(
            "Generated %s.%s mirroring %d methods and %d special methods",
            self.configuration.proxies_module,
            name,
            len(descriptor.methods),
            len(descriptor.special_methods),
        )
        return proxy_type


def restore_proxy(
    target: Optional[type],
    configuration_data: Optional[Dict[str, Any]],
    wrapped: Any,
) -> LazyLoadingValueHolder:
    """Rebuild an already-initialized proxy from persisted wrapped state.

    No initializer is invoked; the restored proxy has none.
    """
    if target is None:
        return LazyLoadingValueHolder._from_wrapped(wrapped)
    configuration = Configuration.model_validate(configuration_data or {})
    proxy_type = ProxyGenerator(configuration).generate(target)
    return proxy_type._from_wrapped(wrapped)
