"""Search variant error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Variant / state
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Variant (3xxx)
    VARIANT_ACTIVATION_FAILED = 3001
    VARIANT_DEPENDENCY_UNAVAILABLE = 3002
    SWEEP_IN_PROGRESS = 3003
    VARIANT_RESTORE_FAILED = 3004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_TIMEOUT = 9002


@dataclass(frozen=True, slots=True)
class SearchVariantsError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SearchVariantsError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class VariantError(SearchVariantsError):
    """Variant activation and reindex sweep errors."""

    @classmethod
    def activation_failed(cls, variant_id: str, state: Any, reason: str) -> "VariantError":
        return cls(
            code=ErrorCode.VARIANT_ACTIVATION_FAILED,
            message=f"Cannot activate state {state!r} on {variant_id}: {reason}",
            details={"variant": variant_id, "state": repr(state), "reason": reason},
        )

    @classmethod
    def dependency_unavailable(cls, variant_id: str, dependency: str) -> "VariantError":
        return cls(
            code=ErrorCode.VARIANT_DEPENDENCY_UNAVAILABLE,
            message=f"{variant_id} needs '{dependency}' but it is not available",
            details={"variant": variant_id, "dependency": dependency},
        )

    @classmethod
    def sweep_in_progress(cls, target: str) -> "VariantError":
        return cls(
            code=ErrorCode.SWEEP_IN_PROGRESS,
            message=f"Another reindex sweep is running; cannot start sweep for {target}",
            retryable=True,
            details={"target": target},
        )

    @classmethod
    def restore_failed(cls, failures: dict[str, BaseException]) -> "VariantError":
        """Restore tried every variant and these ones raised."""
        return cls(
            code=ErrorCode.VARIANT_RESTORE_FAILED,
            message=f"Could not restore state for {', '.join(failures)}",
            details={"failures": {variant_id: repr(e) for variant_id, e in failures.items()}},
        )


class InternalError(SearchVariantsError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
