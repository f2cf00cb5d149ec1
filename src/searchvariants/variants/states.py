"""State combinations, snapshots and activation.

Iteration and activation are separate steps: ``ReindexCombinations`` only
produces assignments, and nothing changes until ``activate_state`` is
called with one of them.
"""

from __future__ import annotations

import copy
import itertools
import math
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from searchvariants.core.errors import InternalError, VariantError
from searchvariants.variants.base import ActivationOutcome

if TYPE_CHECKING:
    from searchvariants.variants.registry import VariantRegistry

logger = structlog.get_logger()

Assignment = dict[str, Any]
"""Variant id -> state value. Used for combinations and snapshots alike."""


class ReindexCombinations:
    """Cartesian product of reindex states, one assignment per combination.

    Lazy and restartable: every ``iter()`` starts a fresh product. The last
    variant varies fastest.
    """

    def __init__(self, states: Mapping[str, Sequence[Any]]) -> None:
        self._states = {variant_id: tuple(values) for variant_id, values in states.items()}

    @property
    def dimensions(self) -> dict[str, tuple[Any, ...]]:
        return dict(self._states)

    def __iter__(self) -> Iterator[Assignment]:
        if not self._states:
            yield {}
            return
        variant_ids = list(self._states)
        for values in itertools.product(*self._states.values()):
            yield dict(zip(variant_ids, values, strict=True))

    def __len__(self) -> int:
        return math.prod(len(values) for values in self._states.values())

    def __repr__(self) -> str:
        return f"ReindexCombinations({self._states!r})"


@dataclass
class ActivationReport:
    """Which variants were switched, and which only deferred."""

    applied: list[str] = field(default_factory=list)
    deferred: list[str] = field(default_factory=list)

    @property
    def fully_applied(self) -> bool:
        return not self.deferred


def reindex_combinations(
    registry: VariantRegistry,
    cls: type | None = None,
    include_subclasses: bool = True,
) -> ReindexCombinations:
    """Get every state combination to step through to reindex cls.

    Variants with no reindex states add no dimension. With no dimensions at
    all the result holds a single empty assignment: reindex once, unchanged.
    """
    all_states: dict[str, Sequence[Any]] = {}
    for variant_id, variant in registry.variants(cls, include_subclasses).items():
        states = tuple(variant.reindex_states() or ())
        if states:
            all_states[variant_id] = states
    return ReindexCombinations(all_states)


def current_state(
    registry: VariantRegistry,
    cls: type | None = None,
    include_subclasses: bool = True,
) -> Assignment:
    """Snapshot the current state of every variant in scope."""
    return {
        variant_id: copy.deepcopy(variant.current_state())
        for variant_id, variant in registry.variants(cls, include_subclasses).items()
    }


def _record_outcome(report: ActivationReport, variant_id: str, outcome: Any) -> None:
    if outcome is None or outcome is ActivationOutcome.APPLIED:
        report.applied.append(variant_id)
    elif outcome is ActivationOutcome.DEFERRED:
        report.deferred.append(variant_id)
    else:
        raise InternalError.unexpected(
            "activate_state returned an unknown outcome",
            variant=variant_id,
            outcome=repr(outcome),
        )


def activate_state(registry: VariantRegistry, state: Mapping[str, Any]) -> ActivationReport:
    """Activate every state in the passed mapping.

    Accepts a combination, a snapshot from current_state(), or a hand-built
    partial mapping. Ids that are not discovered variants are ignored.
    Errors raised by a variant propagate.
    """
    report = ActivationReport()
    for variant_id, variant in registry.all().items():
        if variant_id in state:
            _record_outcome(report, variant_id, variant.activate_state(state[variant_id]))

    if report.deferred:
        logger.warning("state_activation_deferred", variants=report.deferred)
    logger.debug("state_activated", applied=report.applied, deferred=report.deferred)
    return report


def restore_state(registry: VariantRegistry, snapshot: Mapping[str, Any]) -> ActivationReport:
    """Re-activate a snapshot, trying every variant even if some fail.

    Raises:
        VariantError: VARIANT_RESTORE_FAILED once every variant has been
            tried, chained from the first failure.
    """
    report = ActivationReport()
    failures: dict[str, Exception] = {}
    for variant_id, variant in registry.all().items():
        if variant_id not in snapshot:
            continue
        try:
            _record_outcome(report, variant_id, variant.activate_state(snapshot[variant_id]))
        except Exception as e:
            logger.error("state_restore_failed", variant=variant_id, error=str(e))
            failures[variant_id] = e

    if failures:
        raise VariantError.restore_failed(failures) from next(iter(failures.values()))
    if report.deferred:
        logger.warning("state_activation_deferred", variants=report.deferred)
    logger.debug("state_restored", applied=report.applied, deferred=report.deferred)
    return report


@contextmanager
def preserved_state(
    registry: VariantRegistry,
    cls: type | None = None,
    include_subclasses: bool = True,
) -> Iterator[Assignment]:
    """Capture the current state and restore it on exit, including on error.

    Yields the captured snapshot.
    """
    snapshot = current_state(registry, cls, include_subclasses)
    try:
        yield snapshot
    finally:
        restore_state(registry, snapshot)
