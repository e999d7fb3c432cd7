"""Ready-made initializers that honour the self-clearing contract.

Initializers built here clear the proxy's initializer once they have
written the wrapped instance, so the callback runs at most once per
successful initialization. What happens after a failure is opt-in:
by default the initializer stays installed and the next interaction
retries.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from valueholder.types import InitializerCallback, ValueHolderReference

logger = logging.getLogger(__name__)


def _disable(proxy: Any, initializer: Any) -> None:
    # Leave a replacement installed by the callback itself untouched.
    if proxy.get_proxy_initializer() is initializer:
        proxy.set_proxy_initializer(None)


def from_operation_factory(
    factory: Callable[[str, Dict[str, Any]], Any],
    *,
    retry_on_failure: bool = True,
) -> InitializerCallback:
    """Initializer calling ``factory(operation, parameters)`` to build the wrapped instance.

    A ``None`` result counts as failure. With ``retry_on_failure=False`` a
    failure (``None`` or an exception) also clears the initializer, so the
    proxy becomes inert instead of retrying.
    """

    def initializer(
        value_holder: ValueHolderReference,
        proxy: Any,
        operation: str,
        parameters: Dict[str, Any],
    ) -> bool:
        try:
            instance = factory(operation, parameters)
        except Exception:
            if not retry_on_failure:
                _disable(proxy, initializer)
            raise

        if instance is None:
            logger.debug("Factory for %s returned None", type(proxy).__name__)
            if not retry_on_failure:
                _disable(proxy, initializer)
            return False

        value_holder.value = instance
        _disable(proxy, initializer)
        return True

    return initializer


def from_factory(factory: Callable[[], Any], *, retry_on_failure: bool = True) -> InitializerCallback:
    """Initializer calling a zero-argument ``factory`` to build the wrapped instance."""
    return from_operation_factory(lambda _operation, _parameters: factory(), retry_on_failure=retry_on_failure)


def limited_attempts(initializer: InitializerCallback, max_attempts: int) -> InitializerCallback:
    """Wrap ``initializer`` so the proxy goes inert after ``max_attempts`` failures.

    Both a ``False`` result and a raised exception count as a failed attempt.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempts = 0

    def limited(
        value_holder: ValueHolderReference,
        proxy: Any,
        operation: str,
        parameters: Dict[str, Any],
    ) -> bool:
        nonlocal attempts
        succeeded = False
        try:
            succeeded = initializer(value_holder, proxy, operation, parameters)
        finally:
            if not succeeded:
                attempts += 1
                if attempts >= max_attempts:
                    logger.warning(
                        "Giving up on %s after %d failed initialization attempts",
                        type(proxy).__name__,
                        attempts,
                    )
                    _disable(proxy, limited)
        if succeeded:
            # The inner initializer cleared itself, not this wrapper.
            _disable(proxy, limited)
        return succeeded

    return limited
