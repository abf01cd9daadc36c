"""Configuration loading with environment variable substitution."""

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from worker_kv.observability import LogLevel

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")

# Store names: alphanumeric, underscores, hyphens; must start with letter or number
STORE_NAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} patterns with environment variables."""
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable {var_name} is not set")
            return env_value

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


class StoreConfig(BaseModel):
    """A named store and the binding backend that serves it."""

    name: str
    backend: str = "memory"
    options: dict[str, Any] = Field(default_factory=dict)  # Passed to the backend

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not STORE_NAME_RE.match(value):
            raise ValueError(
                f"Invalid store name {value!r}: must start with alphanumeric and contain "
                "only alphanumeric characters, underscores, and hyphens"
            )
        return value


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: LogLevel = LogLevel.INFO
    format: str = "json"  # json | text

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError(f"Unknown log format {value!r}: expected 'json' or 'text'")
        return value


class Config(BaseModel):
    """Main configuration for worker-kv."""

    stores: list[StoreConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("stores")
    @classmethod
    def _check_unique(cls, stores: list[StoreConfig]) -> list[StoreConfig]:
        seen: set[str] = set()
        for store in stores:
            if store.name in seen:
                raise ValueError(f"Duplicate store name {store.name!r}")
            seen.add(store.name)
        return stores

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML or JSON file."""
        path = Path(path)
        with path.open() as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        data = substitute_env_vars(data or {})
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load configuration from a dictionary."""
        data = substitute_env_vars(data)
        return cls.model_validate(data)
