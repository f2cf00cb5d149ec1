"""Write expansion: one content mutation -> one write per dimension state.

A batch maps ``"<base>:<id>"`` to a PendingWrite. Each write starts with a
single stateful id carrying an empty state. Variants expand the batch in
registry order through the ``extract_manipulation_write_state`` capability,
each one multiplying the stateful ids left by the previous variants.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from searchvariants.variants.base import EXTRACT_WRITE_STATE

if TYPE_CHECKING:
    from searchvariants.variants.registry import VariantRegistry

logger = structlog.get_logger()


@dataclass
class StatefulId:
    """A record id plus the dimension values it is valid under."""

    id: Any
    state: dict[str, Any] = field(default_factory=dict)


@dataclass
class PendingWrite:
    """A content mutation waiting to be flushed to the index."""

    target_class: type
    id: Any
    base: str = ""
    fields: dict[str, Any] = field(default_factory=dict)
    stateful_ids: list[StatefulId] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.base:
            self.base = self.target_class.__name__
        if not self.stateful_ids:
            self.stateful_ids = [StatefulId(self.id)]

    @property
    def key(self) -> str:
        return f"{self.base}:{self.id}"


@dataclass(frozen=True)
class WriteRecord:
    """One flattened write: class, id and the full state tag."""

    target_class: type
    id: Any
    state: dict[str, Any]


WriteBatch = dict[str, PendingWrite]


def add_write(
    batch: WriteBatch,
    target_class: type,
    id: Any,
    *,
    base: str = "",
    fields: dict[str, Any] | None = None,
) -> PendingWrite:
    """Add (or merge into) the pending write for target_class/id."""
    write = PendingWrite(target_class, id, base=base, fields=dict(fields or {}))
    existing = batch.get(write.key)
    if existing is not None:
        existing.fields.update(write.fields)
        return existing
    batch[write.key] = write
    return write


def fan_out(write: PendingWrite, variant_id: str, values: Iterable[Any]) -> None:
    """Replace write's stateful ids with one entry per (stateful id, value)."""
    values = list(values)
    if not values:
        return
    write.stateful_ids = [
        StatefulId(stateful.id, {**stateful.state, variant_id: value})
        for stateful in write.stateful_ids
        for value in values
    ]


def expand_writes(batch: WriteBatch, registry: VariantRegistry) -> WriteBatch:
    """Expand every pending write across the dimensions of its variants.

    The input batch is left untouched, so expanding the same batch again
    gives the same result without double counting.
    """
    expanded = copy.deepcopy(batch)
    registry.call(EXTRACT_WRITE_STATE, expanded)

    logger.debug(
        "writes_expanded",
        writes=len(batch),
        records=sum(len(write.stateful_ids) for write in expanded.values()),
    )
    return expanded


def write_records(batch: WriteBatch) -> list[WriteRecord]:
    """Flatten a batch into one record per stateful id."""
    return [
        WriteRecord(write.target_class, stateful.id, dict(stateful.state))
        for write in batch.values()
        for stateful in write.stateful_ids
    ]
