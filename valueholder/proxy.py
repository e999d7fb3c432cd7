"""Lazy-loading value-holder proxy base type."""

from __future__ import annotations

import copy
from typing import Any, List, Optional

from valueholder import surface
from valueholder.state_machine import initialize_value_holder, proxy_state, wrapped_value
from valueholder.types import (
    INITIALIZER_SLOT,
    OPERATION_COPY,
    OPERATION_DEEPCOPY,
    OPERATION_INITIALIZE,
    OPERATION_SERIALIZE,
    VALUE_HOLDER_SLOT,
    InitializerCallback,
    ProxyState,
)

# Proxy bookkeeping names; generated types never mirror wrapped members over these.
PROXY_MANAGEMENT_METHODS = frozenset(
    {
        "set_proxy_initializer",
        "get_proxy_initializer",
        "initialize_proxy",
        "is_proxy_initialized",
        "get_wrapped_value_holder_value",
        "_from_wrapped",
        "_proxy_descriptor",
        "_proxy_configuration",
        VALUE_HOLDER_SLOT,
        INITIALIZER_SLOT,
    }
)


class LazyLoadingValueHolder:
    """Stand-in for a wrapped instance that is built on first use.

    Attribute reads, writes and deletions are forwarded to the wrapped
    instance after the initializer has produced it. Generated subclasses
    (see :mod:`valueholder.generator`) additionally mirror the wrapped type's
    methods and special methods, and report the wrapped type as their
    ``__class__`` so ``isinstance`` checks pass without initializing.
    """

    __slots__ = (VALUE_HOLDER_SLOT, INITIALIZER_SLOT, "__weakref__")

    _proxy_descriptor = None
    _proxy_configuration = None

    def __init__(self, initializer: Optional[InitializerCallback] = None) -> None:
        object.__setattr__(self, VALUE_HOLDER_SLOT, None)
        object.__setattr__(self, INITIALIZER_SLOT, initializer)

    @classmethod
    def _from_wrapped(cls, wrapped: Any, initializer: Optional[InitializerCallback] = None) -> "LazyLoadingValueHolder":
        proxy = cls.__new__(cls)
        object.__setattr__(proxy, VALUE_HOLDER_SLOT, wrapped)
        object.__setattr__(proxy, INITIALIZER_SLOT, initializer)
        return proxy

    # Proxy management

    def set_proxy_initializer(self, initializer: Optional[InitializerCallback] = None) -> None:
        object.__setattr__(self, INITIALIZER_SLOT, initializer)

    def get_proxy_initializer(self) -> Optional[InitializerCallback]:
        return object.__getattribute__(self, INITIALIZER_SLOT)

    def initialize_proxy(self) -> bool:
        initialize_value_holder(self, OPERATION_INITIALIZE, {})
        return True

    def is_proxy_initialized(self) -> bool:
        return wrapped_value(self) is not None

    def get_wrapped_value_holder_value(self) -> Optional[Any]:
        return wrapped_value(self)

    # Attribute interception

    def __getattr__(self, name: str) -> Any:
        if name in (VALUE_HOLDER_SLOT, INITIALIZER_SLOT):
            raise AttributeError(name)
        return surface.proxy_get(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        surface.proxy_set(self, name, value)

    def __delattr__(self, name: str) -> None:
        surface.proxy_delete(self, name)

    @property
    def __class__(self):  # type: ignore[override]
        descriptor = type(self)._proxy_descriptor
        if descriptor is None:
            return type(self)
        return descriptor.target

    def __dir__(self) -> List[str]:
        wrapped = wrapped_value(self)
        if wrapped is not None:
            return dir(wrapped)
        names = set(dir(type(self)))
        descriptor = type(self)._proxy_descriptor
        if descriptor is not None:
            names.update(descriptor.member_names())
        return sorted(names)

    # Generated types replace this with a forwarder when the wrapped type
    # defines __repr__, in which case repr() initializes the proxy.
    def __repr__(self) -> str:
        state = proxy_state(self)
        if state is ProxyState.INITIALIZED:
            return f"<{type(self).__qualname__} wrapping {wrapped_value(self)!r}>"
        return f"<{type(self).__qualname__} {state.value} at {id(self):#x}>"

    # Clone and persisted form

    def __copy__(self) -> "LazyLoadingValueHolder":
        wrapped = initialize_value_holder(self, OPERATION_COPY, {})
        return type(self)._from_wrapped(copy.copy(wrapped), self.get_proxy_initializer())

    def __deepcopy__(self, memo: dict) -> "LazyLoadingValueHolder":
        wrapped = initialize_value_holder(self, OPERATION_DEEPCOPY, {})
        return type(self)._from_wrapped(copy.deepcopy(wrapped, memo), self.get_proxy_initializer())

    def __reduce_ex__(self, protocol: int) -> tuple:
        from valueholder.generator import restore_proxy

        wrapped = initialize_value_holder(self, OPERATION_SERIALIZE, {})
        proxy_type = type(self)
        descriptor = proxy_type._proxy_descriptor
        configuration = proxy_type._proxy_configuration
        return (
            restore_proxy,
            (
                descriptor.target if descriptor is not None else None,
                configuration.model_dump() if configuration is not None else None,
                wrapped,
            ),
        )

    def __reduce__(self) -> tuple:
        return self.__reduce_ex__(2)

