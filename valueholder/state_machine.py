"""Initialization state machine shared by every intercepted interaction."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from valueholder.errors import InitializationFailed, UninitializedProxy
from valueholder.types import INITIALIZER_SLOT, VALUE_HOLDER_SLOT, ProxyState, ValueHolderReference

logger = logging.getLogger(__name__)


def _read_slot(proxy: Any, slot: str) -> Any:
    try:
        return object.__getattribute__(proxy, slot)
    except AttributeError as exc:
        raise TypeError(f"{type(proxy).__name__} object is not a lazy-loading value holder") from exc


def wrapped_value(proxy: Any) -> Optional[Any]:
    """Return the wrapped instance of ``proxy`` without initializing it."""
    return _read_slot(proxy, VALUE_HOLDER_SLOT)


def current_initializer(proxy: Any) -> Optional[Any]:
    return _read_slot(proxy, INITIALIZER_SLOT)


def proxy_state(proxy: Any) -> ProxyState:
    """Classify ``proxy`` without running its initializer."""
    if wrapped_value(proxy) is not None:
        return ProxyState.INITIALIZED
    if current_initializer(proxy) is not None:
        return ProxyState.UNINITIALIZED
    return ProxyState.INERT


def initialize_value_holder(proxy: Any, operation: str, parameters: Dict[str, Any]) -> Any:
    """Guarantee ``proxy`` holds a wrapped instance and return it.

    A present wrapped instance always wins, even if a new initializer was
    installed afterwards. Otherwise the current initializer is invoked once
    for this interaction; exceptions it raises propagate unchanged. The
    initializer is never cleared here.
    """
    wrapped = wrapped_value(proxy)
    if wrapped is not None:
        return wrapped

    proxy_type = type(proxy).__name__
    initializer = current_initializer(proxy)
    if initializer is None:
        logger.error("Proxy %s is inert, %r cannot proceed", proxy_type, operation)
        raise UninitializedProxy(operation=operation, proxy_type=proxy_type)

    logger.debug("Initializing %s triggered by %r", proxy_type, operation)
    succeeded = initializer(ValueHolderReference(proxy), proxy, operation, dict(parameters))
    wrapped = wrapped_value(proxy)

    if not succeeded:
        logger.warning("Initializer for %s reported failure during %r", proxy_type, operation)
        raise InitializationFailed(operation=operation, proxy_type=proxy_type)
    if wrapped is None:
        logger.warning("Initializer for %s reported success without a wrapped instance", proxy_type)
        raise InitializationFailed(
            operation=operation,
            proxy_type=proxy_type,
            reason="initializer reported success without providing a wrapped instance",
        )

    logger.debug("Initialized %s with %s", proxy_type, type(wrapped).__name__)
    return wrapped
