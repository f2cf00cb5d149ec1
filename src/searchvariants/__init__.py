"""Variant-aware reindexing core for search indexes."""

from searchvariants.variants import (
    ActivationOutcome,
    ReindexSweep,
    Variant,
    VariantRegistry,
    expand_writes,
    variant_registry,
)

__all__ = [
    "ActivationOutcome",
    "ReindexSweep",
    "Variant",
    "VariantRegistry",
    "expand_writes",
    "variant_registry",
]
