"""Config module exports."""

from searchvariants.config.loader import load_config
from searchvariants.config.models import (
    LoggingConfig,
    SearchVariantsConfig,
    SweepConfig,
    VariantsConfig,
)

__all__ = [
    "load_config",
    "SearchVariantsConfig",
    "LoggingConfig",
    "SweepConfig",
    "VariantsConfig",
]
