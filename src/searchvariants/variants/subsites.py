"""Multi-tenant subsite variant.

Content classes carrying the ``SubsiteAware`` marker are indexed once per
subsite. The main site is subsite ``0``. The host application binds a
``SubsiteBackend`` that knows the current subsite and how to change it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import structlog

from searchvariants.config.constants import ROOT_VARIANT_STATE
from searchvariants.core.errors import VariantError
from searchvariants.variants.base import MISSING, ActivationOutcome, Variant
from searchvariants.variants.context import defer_state, has_active_request
from searchvariants.variants.hierarchy import has_extension
from searchvariants.variants.registry import variant_registry
from searchvariants.variants.writes import WriteBatch, fan_out

logger = structlog.get_logger()

SUBSITE_FIELD = "_subsite"


class SubsiteAware:
    """Marker mixin for content classes that can be shown on several subsites."""


class SubsiteBackend(Protocol):
    """Host hooks for subsite state."""

    def current_subsite_id(self) -> int: ...

    def change_subsite(self, subsite_id: int) -> None: ...

    def subsite_ids(self) -> Sequence[int]: ...


_backend: SubsiteBackend | None = None


def bind_subsite_backend(backend: SubsiteBackend | None) -> None:
    """Install (or with None, remove) the host subsite backend."""
    global _backend
    _backend = backend


@variant_registry.register
class SubsitesVariant(Variant):
    """Indexes SubsiteAware content once per subsite, main site included."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._subsite_ids: list[int] | None = None

    def _require_backend(self) -> SubsiteBackend:
        if _backend is None:
            raise VariantError.dependency_unavailable(self.variant_id(), "subsites")
        return _backend

    def known_subsite_ids(self) -> list[int]:
        """Main site plus every subsite, loaded once and then cached."""
        if self._subsite_ids is None:
            ids = [ROOT_VARIANT_STATE]
            for subsite_id in self._require_backend().subsite_ids():
                if subsite_id != ROOT_VARIANT_STATE:
                    ids.append(subsite_id)
            self._subsite_ids = ids
        return list(self._subsite_ids)

    def refresh(self) -> None:
        """Forget the cached subsite list."""
        self._subsite_ids = None

    def applies_to(self, cls: type, include_subclasses: bool) -> bool:
        return has_extension(cls, SubsiteAware, include_subclasses, self.hierarchy)

    def current_state(self) -> int:
        return self._require_backend().current_subsite_id()

    def reindex_states(self) -> list[int]:
        return self.known_subsite_ids()

    def activate_state(self, state: int) -> ActivationOutcome:
        backend = self._require_backend()
        if has_active_request():
            backend.change_subsite(state)
            return ActivationOutcome.APPLIED

        # Workaround: changing subsite needs a live request (session storage).
        # Outside one the value is parked for the next request to pick up.
        defer_state(self.variant_id(), state)
        logger.warning("subsite_change_deferred", subsite=state)
        return ActivationOutcome.DEFERRED

    def alter_definition(self, base: str, index: Any) -> None:
        index.filter_fields[SUBSITE_FIELD] = {
            "name": SUBSITE_FIELD,
            "field": SUBSITE_FIELD,
            "fullfield": SUBSITE_FIELD,
            "base": base,
            "origin": base,
            "type": "Int",
            "lookup_chain": [
                {"call": "variant", "variant": self.variant_id(), "method": "current_state"}
            ],
        }

    def alter_query(self, query: Any, index: Any) -> None:  # noqa: ARG002
        query.filter(SUBSITE_FIELD, [self.current_state(), MISSING])

    def extract_manipulation_write_state(self, writes: WriteBatch) -> None:
        # Finding only the subsites a write actually changed would need the
        # version history, so every write goes to all subsites.
        variant_id = self.variant_id()
        for write in writes.values():
            if not self.applies_to(write.target_class, True):
                continue
            fan_out(write, variant_id, self.known_subsite_ids())
