"""Factory producing uninitialized lazy-loading value-holder proxies."""

from __future__ import annotations

import logging
from typing import Any, Optional

from valueholder.config import Configuration
from valueholder.generator import ProxyGenerator
from valueholder.proxy import LazyLoadingValueHolder
from valueholder.types import InitializerCallback

logger = logging.getLogger(__name__)


class LazyLoadingValueHolderFactory:
    """Create proxies that build their wrapped instance on first use."""

    def __init__(self, configuration: Optional[Configuration] = None) -> None:
        self.configuration = configuration or Configuration()
        self._generator = ProxyGenerator(self.configuration)

    def proxy_class(self, target: type) -> type:
        return self._generator.generate(target)

    def create_proxy(self, target: type, initializer: InitializerCallback) -> Any:
        if not callable(initializer):
            raise TypeError(f"initializer must be callable, got {type(initializer).__name__}")
        proxy_type = self.proxy_class(target)
        logger.debug("Creating %s", proxy_type.__qualname__)
        proxy: LazyLoadingValueHolder = proxy_type(initializer)
        return proxy
