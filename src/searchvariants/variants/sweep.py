"""Reindex sweep: step through every state combination, then restore.

Activating a state changes process-wide context that all other code reads,
so only one sweep may run per process at a time.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from searchvariants.core.errors import VariantError
from searchvariants.variants.states import (
    ActivationReport,
    Assignment,
    ReindexCombinations,
    activate_state,
    current_state,
    reindex_combinations,
    restore_state,
)

if TYPE_CHECKING:
    from searchvariants.config.models import SweepConfig
    from searchvariants.variants.registry import VariantRegistry

logger = structlog.get_logger()

T = TypeVar("T")

_sweep_lock = threading.Lock()
_sweep_owner: int | None = None


class ReindexSweep:
    """Context manager around one capture -> activate... -> restore cycle.

    Usage:
        with ReindexSweep(registry, Page) as sweep:
            for assignment in sweep.combinations:
                sweep.activate(assignment)
                submit(extract_documents())

    The baseline is captured for all variants (not just those applying to
    the target class) and re-activated on every exit path.
    """

    def __init__(
        self,
        registry: VariantRegistry,
        cls: type | None = None,
        include_subclasses: bool = True,
        *,
        lock_timeout_sec: float = 0.0,
    ) -> None:
        self.registry = registry
        self.cls = cls
        self.include_subclasses = include_subclasses
        self.lock_timeout_sec = lock_timeout_sec
        self.baseline: Assignment | None = None
        self._combinations: ReindexCombinations | None = None

    @classmethod
    def from_config(
        cls,
        config: SweepConfig,
        registry: VariantRegistry,
        target: type | None = None,
        include_subclasses: bool = True,
    ) -> ReindexSweep:
        """Build a sweep that waits for the lock as configured."""
        return cls(
            registry, target, include_subclasses, lock_timeout_sec=config.lock_timeout_sec
        )

    @property
    def target(self) -> str:
        return self.cls.__name__ if self.cls is not None else "*"

    @property
    def combinations(self) -> ReindexCombinations:
        if self._combinations is None:
            self._combinations = reindex_combinations(
                self.registry, self.cls, self.include_subclasses
            )
        return self._combinations

    def __enter__(self) -> ReindexSweep:
        global _sweep_owner
        # The lock is not reentrant, so waiting on it here would never return
        if _sweep_owner == threading.get_ident():
            raise VariantError.sweep_in_progress(self.target)

        if self.lock_timeout_sec < 0:
            acquired = _sweep_lock.acquire()
        elif self.lock_timeout_sec == 0:
            acquired = _sweep_lock.acquire(blocking=False)
        else:
            acquired = _sweep_lock.acquire(timeout=self.lock_timeout_sec)
        if not acquired:
            raise VariantError.sweep_in_progress(self.target)
        _sweep_owner = threading.get_ident()

        try:
            self.baseline = current_state(self.registry)
            combinations = len(self.combinations)
        except BaseException:
            self.baseline = None
            _sweep_owner = None
            _sweep_lock.release()
            raise
        logger.info("reindex_sweep_started", target=self.target, combinations=combinations)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        global _sweep_owner
        try:
            if self.baseline is not None:
                restore_state(self.registry, self.baseline)
            logger.info(
                "reindex_sweep_restored",
                target=self.target,
                failed=exc_type is not None,
            )
        finally:
            self.baseline = None
            _sweep_owner = None
            _sweep_lock.release()

    def activate(self, assignment: Assignment) -> ActivationReport:
        """Switch the process into one combination."""
        if self.baseline is None:
            raise VariantError.activation_failed(
                "ReindexSweep", assignment, "sweep is not active; use it as a context manager"
            )
        return activate_state(self.registry, assignment)

    def run(self, extract: Callable[[Assignment], T]) -> list[tuple[Assignment, T]]:
        """Activate each combination in turn and call extract with it."""
        results: list[tuple[Assignment, T]] = []
        for assignment in self.combinations:
            self.activate(assignment)
            results.append((assignment, extract(assignment)))
        return results


def reindex(
    registry: VariantRegistry,
    cls: type | None,
    extract: Callable[[Assignment], Any],
    include_subclasses: bool = True,
    *,
    lock_timeout_sec: float = 0.0,
) -> list[tuple[Assignment, Any]]:
    """Run extract once per reindex combination for cls, then restore state."""
    with ReindexSweep(
        registry, cls, include_subclasses, lock_timeout_sec=lock_timeout_sec
    ) as sweep:
        return sweep.run(extract)
