"""Variant base class.

A variant handles one orthogonal dimension of content state, for instance
multi-tenant subsites or draft/published versioning, where the items to
reindex or search through differ from the default state.

Each variant defines:
- Which content classes it applies to
- The current value of its dimension
- Every value that must be visited to reindex all items
- How to switch the running process into one of those values

Variants may also implement optional capabilities, called by name through
VariantCaller: ``alter_definition(base, index)``, ``alter_query(query, index)``
and ``extract_manipulation_write_state(writes)``.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from enum import Enum
from typing import Any, ClassVar

from searchvariants.variants.hierarchy import RuntimeHierarchy, TypeHierarchy

StateValue = Any
"""Opaque per-variant state value. Only the owning variant interprets it."""

ALTER_DEFINITION = "alter_definition"
ALTER_QUERY = "alter_query"
EXTRACT_WRITE_STATE = "extract_manipulation_write_state"


class _Missing:
    """Query filter value matching documents that have no value for a field."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


class ActivationOutcome(Enum):
    """Result of asking a variant to activate a state."""

    APPLIED = "applied"
    DEFERRED = "deferred"  # Recorded for the next request, not applied now


class Variant(abc.ABC):
    """Base class for variants.

    Subclasses are instantiated once per registry and live for the life of
    the process.
    """

    # Explicit host dependency (importable module name). When None, the
    # registry matches the class name against its dependency allow-list.
    requires: ClassVar[str | None] = None

    def __init__(self, hierarchy: TypeHierarchy | None = None) -> None:
        self.hierarchy: TypeHierarchy = hierarchy or RuntimeHierarchy()

    @classmethod
    def variant_id(cls) -> str:
        """Identity used as the key in snapshots, combinations and write state."""
        return cls.__name__

    @abc.abstractmethod
    def applies_to(self, cls: type, include_subclasses: bool) -> bool:
        """Return True if this variant applies to cls (or a subclass, if requested)."""

    @abc.abstractmethod
    def current_state(self) -> StateValue:
        """Return the currently active state."""

    @abc.abstractmethod
    def reindex_states(self) -> Sequence[StateValue]:
        """Return every state to step through to reindex all items.

        An empty sequence means this variant adds no reindex dimension.
        """

    @abc.abstractmethod
    def activate_state(self, state: StateValue) -> ActivationOutcome | None:
        """Activate state. Return DEFERRED if it could only be recorded for later.

        Returning None means the state was applied.
        """
