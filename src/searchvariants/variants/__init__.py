"""Variant registry, state combination engine and write expansion."""

from searchvariants.variants.base import (
    ALTER_DEFINITION,
    ALTER_QUERY,
    EXTRACT_WRITE_STATE,
    MISSING,
    ActivationOutcome,
    Variant,
)
from searchvariants.variants.context import has_active_request, request_scope
from searchvariants.variants.dispatch import VariantCaller
from searchvariants.variants.hierarchy import (
    RuntimeHierarchy,
    StaticHierarchy,
    TypeHierarchy,
    has_extension,
)
from searchvariants.variants.registry import VariantRegistry, variant_registry
from searchvariants.variants.states import (
    ActivationReport,
    ReindexCombinations,
    activate_state,
    current_state,
    preserved_state,
    reindex_combinations,
    restore_state,
)
from searchvariants.variants.subsites import SubsitesVariant, bind_subsite_backend
from searchvariants.variants.sweep import ReindexSweep, reindex
from searchvariants.variants.versioned import VersionedVariant, bind_stage_backend
from searchvariants.variants.writes import (
    PendingWrite,
    StatefulId,
    WriteBatch,
    WriteRecord,
    add_write,
    expand_writes,
    write_records,
)

__all__ = [
    # Contract
    "ALTER_DEFINITION",
    "ALTER_QUERY",
    "EXTRACT_WRITE_STATE",
    "MISSING",
    "ActivationOutcome",
    "Variant",
    # Context
    "has_active_request",
    "request_scope",
    # Hierarchy
    "RuntimeHierarchy",
    "StaticHierarchy",
    "TypeHierarchy",
    "has_extension",
    # Registry / dispatch
    "VariantCaller",
    "VariantRegistry",
    "variant_registry",
    # States
    "ActivationReport",
    "ReindexCombinations",
    "activate_state",
    "current_state",
    "preserved_state",
    "reindex_combinations",
    "restore_state",
    "ReindexSweep",
    "reindex",
    # Writes
    "PendingWrite",
    "StatefulId",
    "WriteBatch",
    "WriteRecord",
    "add_write",
    "expand_writes",
    "write_records",
    # Built-in variants
    "SubsitesVariant",
    "VersionedVariant",
    "bind_stage_backend",
    "bind_subsite_backend",
]
