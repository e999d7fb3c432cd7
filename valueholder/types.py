"""Core value-holder proxy types."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Protocol

VALUE_HOLDER_SLOT = "_value_holder"
INITIALIZER_SLOT = "_initializer"

# Operation names reported to initializers for interactions that are not
# mirrored method calls. Mirrored methods report their own name.
OPERATION_GET = "__getattr__"
OPERATION_SET = "__setattr__"
OPERATION_HAS = "__hasattr__"
OPERATION_DELETE = "__delattr__"
OPERATION_COPY = "__copy__"
OPERATION_DEEPCOPY = "__deepcopy__"
OPERATION_SERIALIZE = "__reduce_ex__"
OPERATION_INITIALIZE = "initialize_proxy"


class ProxyState(str, Enum):
    """Initialization state of a value-holder proxy."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    INERT = "inert"


class ValueHolderReference:
    """Write slot handed to initializers for storing the wrapped instance."""

    __slots__ = ("_proxy",)

    def __init__(self, proxy: Any) -> None:
        self._proxy = proxy

    @property
    def value(self) -> Any:
        return object.__getattribute__(self._proxy, VALUE_HOLDER_SLOT)

    @value.setter
    def value(self, wrapped: Any) -> None:
        object.__setattr__(self._proxy, VALUE_HOLDER_SLOT, wrapped)

    def __repr__(self) -> str:
        return f"ValueHolderReference(value={self.value!r})"


class InitializerCallback(Protocol):
    """Callback that produces the wrapped instance of a proxy on demand.

    Implementations write the wrapped instance through ``value_holder`` and
    are expected to clear the proxy's initializer themselves on success
    (``proxy.set_proxy_initializer(None)``). The return value reports
    whether initialization succeeded.
    """

    def __call__(
        self,
        value_holder: ValueHolderReference,
        proxy: Any,
        operation: str,
        parameters: Dict[str, Any],
    ) -> bool:
        ...
