"""Explicit interception interface for value-holder proxies.

Each entry point runs the initialization state machine first and then
forwards to the wrapped instance. The proxy's own attribute hooks delegate
here, so ``proxy.name`` and ``proxy_get(proxy, "name")`` behave identically.
"""

from __future__ import annotations

import copy
import pickle
from typing import Any, Dict, Optional

from valueholder.state_machine import initialize_value_holder
from valueholder.types import OPERATION_DELETE, OPERATION_GET, OPERATION_HAS, OPERATION_SET


def proxy_get(proxy: Any, name: str) -> Any:
    wrapped = initialize_value_holder(proxy, OPERATION_GET, {})
    return getattr(wrapped, name)


def proxy_set(proxy: Any, name: str, value: Any) -> None:
    wrapped = initialize_value_holder(proxy, OPERATION_SET, {"value": value})
    setattr(wrapped, name, value)


def proxy_has(proxy: Any, name: str) -> bool:
    """Existence check on the wrapped instance's member ``name``."""
    wrapped = initialize_value_holder(proxy, OPERATION_HAS, {"name": name})
    return hasattr(wrapped, name)


def proxy_delete(proxy: Any, name: str) -> None:
    wrapped = initialize_value_holder(proxy, OPERATION_DELETE, {"name": name})
    delattr(wrapped, name)


def invocation_parameters(proxy: Any, name: str, args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Bind call arguments to the parameter names of the mirrored method ``name``."""
    descriptor = getattr(type(proxy), "_proxy_descriptor", None)
    method = descriptor.method(name) if descriptor is not None else None
    if method is None:
        return {"args": tuple(args), "kwargs": dict(kwargs)}
    return method.bind(args, kwargs)


def proxy_invoke(proxy: Any, name: str, *args: Any, **kwargs: Any) -> Any:
    parameters = invocation_parameters(proxy, name, args, kwargs)
    wrapped = initialize_value_holder(proxy, name, parameters)
    result = getattr(wrapped, name)(*args, **kwargs)
    # Fluent methods hand back the proxy, never the wrapped instance.
    return proxy if result is wrapped else result


def proxy_clone(proxy: Any, *, deep: bool = False) -> Any:
    return copy.deepcopy(proxy) if deep else copy.copy(proxy)


def proxy_serialize(proxy: Any, protocol: Optional[int] = None) -> bytes:
    return pickle.dumps(proxy, protocol=protocol)


def proxy_deserialize(data: bytes) -> Any:
    """Rebuild an initialized proxy from :func:`proxy_serialize` output."""
    from valueholder.proxy import LazyLoadingValueHolder

    proxy = pickle.loads(data)
    if not isinstance(proxy, LazyLoadingValueHolder):
        raise TypeError(f"serialized payload holds {type(proxy).__name__}, not a lazy-loading value holder")
    return proxy
