"""Value-holder proxy error types."""

from __future__ import annotations


class ProxyError(Exception):
    """Base error for value-holder proxy failures."""


class InitializationFailed(ProxyError):
    """Raised when an initializer ran but did not produce a wrapped instance."""

    def __init__(self, *, operation: str, proxy_type: str, reason: str = "initializer reported failure") -> None:
        self.operation = operation
        self.proxy_type = proxy_type
        self.reason = reason
        super().__init__(f"{proxy_type}: initialization triggered by {operation!r} failed: {reason}")


class UninitializedProxy(ProxyError):
    """Raised when a proxy has neither a wrapped instance nor an initializer."""

    def __init__(self, *, operation: str, proxy_type: str) -> None:
        self.operation = operation
        self.proxy_type = proxy_type
        super().__init__(
            f"{proxy_type}: cannot perform {operation!r}, proxy has no wrapped instance and no initializer"
        )


class InvalidProxiedClass(ProxyError, TypeError):
    """Raised when a proxy type cannot be generated for a class."""


class ConfigurationError(ProxyError, ValueError):
    """Raised when configuration values or files are invalid."""
