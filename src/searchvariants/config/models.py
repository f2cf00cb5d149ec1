"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SEARCHVARIANTS__SECTION__KEY)
3. Repo YAML (.searchvariants/config.yaml)
4. Global YAML (~/.config/searchvariants/config.yaml)
5. Built-in defaults (this file)

Examples:
    SEARCHVARIANTS__LOGGING__LEVEL=DEBUG
    SEARCHVARIANTS__SWEEP__LOCK_TIMEOUT_SEC=2.5
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from searchvariants.config.constants import DEFAULT_DEPENDENCIES

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SEARCHVARIANTS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every state activation.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class VariantsConfig(BaseModel):
    """Variant discovery configuration.

    Env vars:
        SEARCHVARIANTS__VARIANTS__DEPENDENCIES: JSON list of dependency names
    """

    dependencies: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DEPENDENCIES),
        description="Host dependency names. A variant is only discovered when its "
        "class name contains one of these and the dependency is importable.",
    )

    @field_validator("dependencies")
    @classmethod
    def validate_dependencies(cls, v: list[str]) -> list[str]:
        if any(not name.strip() for name in v):
            raise ValueError("Dependency names must be non-empty")
        return v


class SweepConfig(BaseModel):
    """Reindex sweep configuration.

    Env vars:
        SEARCHVARIANTS__SWEEP__LOCK_TIMEOUT_SEC: Wait for a running sweep to finish
    """

    lock_timeout_sec: float = Field(
        default=0.0,
        description="How long a sweep waits for another sweep to release the process "
        "lock. 0 fails immediately, negative waits forever.",
    )


class SearchVariantsConfig(BaseModel):
    """Root configuration for searchvariants."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    variants: VariantsConfig = Field(default_factory=VariantsConfig)
    sweep: SweepConfig = Field(default_factory=SweepConfig)
