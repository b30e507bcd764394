"""
Calculator configuration.

Settings are read from a YAML file (either flat or nested under a
``calculator:`` key) and can be overridden through environment variables.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError
from .stack import DEFAULT_CAPACITY, GROWTH_INCREMENT

CONFIG_SECTION = "calculator"

ENV_OVERRIDES = {
    "CALCENGINE_HISTORY_FILE": "history_file",
    "CALCENGINE_LOG_LEVEL": "log_level",
    "CALCENGINE_PROMPT": "prompt",
}


class CalculatorConfig(BaseModel):
    """Runtime settings for a calculator session."""

    model_config = ConfigDict(extra="forbid")

    history_enabled: bool = True
    history_file: Path = Path("log.txt")
    history_format: Literal["text", "jsonl"] = "text"
    history_truncate: bool = True
    prompt: str = "> "
    stack_capacity: int = Field(default=DEFAULT_CAPACITY, ge=0)
    stack_growth: int = Field(default=GROWTH_INCREMENT, ge=1)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "CalculatorConfig":
        """Build a config from parsed YAML data."""
        if not data:
            return cls()
        if CONFIG_SECTION in data:
            data = data[CONFIG_SECTION] or {}
        return cls.model_validate(dict(data))

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "CalculatorConfig":
        """Load config from YAML content."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        return cls.from_mapping(data)

    @classmethod
    def from_file(cls, path: Path) -> "CalculatorConfig":
        """Load config from a file; a missing file yields the defaults."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())

    def with_overrides(self, **overrides: Any) -> "CalculatorConfig":
        """Return a copy with the given non-None fields replaced."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(values)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    return {
        field_name: environ[env_name]
        for env_name, field_name in ENV_OVERRIDES.items()
        if environ.get(env_name)
    }


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CalculatorConfig:
    """
    Load configuration from an optional file plus environment overrides.

    Args:
        path: YAML file to read. Defaults are used when omitted or missing.
        environ: Environment mapping, ``os.environ`` by default.

    Returns:
        The validated configuration.
    """
    config = CalculatorConfig.from_file(path) if path else CalculatorConfig()
    overrides = _env_overrides(os.environ if environ is None else environ)
    if overrides:
        config = config.with_overrides(**overrides)
    return config
