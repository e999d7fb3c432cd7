"""Configuration for proxy generation and logging."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from valueholder.errors import ConfigurationError

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"


class Configuration(BaseModel):
    """Explicit configuration handed to the proxy factory.

    Only the generation fields (module, suffix, private members) affect which
    proxy type a target maps to; the logging fields are consumed by
    :func:`valueholder.logging_config.configure_logging`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    proxies_module: str = Field(default="valueholder.generated", pattern=rf"^{_IDENTIFIER}(\.{_IDENTIFIER})*$")
    proxy_class_suffix: str = Field(default="LazyProxy", pattern=rf"^{_IDENTIFIER}$")
    include_private_members: bool = False
    log_level: str = Field(default="WARNING", pattern=r"^(CRITICAL|ERROR|WARNING|INFO|DEBUG|NOTSET)$")
    log_file: Optional[Path] = None
    debug_mode: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Configuration":
        """Load configuration from a YAML mapping; an empty file yields defaults."""
        config_path = Path(path).expanduser()
        try:
            payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid YAML in {config_path}: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping, got {type(payload).__name__}")

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ConfigurationError(f"invalid configuration in {config_path}: {exc}") from exc

    def to_yaml(self, path: Union[str, Path]) -> None:
        config_path = Path(path).expanduser()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        serializable = self.model_dump(mode="json", exclude_none=True)
        config_path.write_text(yaml.safe_dump(serializable, sort_keys=False), encoding="utf-8")
