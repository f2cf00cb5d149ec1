"""Draft/published stage variant.

Content classes carrying the ``Versioned`` marker exist in a draft stage
(``Stage``) and a published stage (``Live``); each is indexed separately.
"""

from __future__ import annotations

from typing import Any, Protocol

from searchvariants.core.errors import VariantError
from searchvariants.variants.base import Variant
from searchvariants.variants.hierarchy import has_extension
from searchvariants.variants.registry import variant_registry
from searchvariants.variants.writes import WriteBatch, fan_out

STAGE_FIELD = "_versionedstage"
STAGES = ("Stage", "Live")


class Versioned:
    """Marker mixin for content classes with draft and published stages."""


class StageBackend(Protocol):
    """Host hooks for the current reading stage."""

    def current_stage(self) -> str: ...

    def set_stage(self, stage: str) -> None: ...


_backend: StageBackend | None = None


def bind_stage_backend(backend: StageBackend | None) -> None:
    global _backend
    _backend = backend


@variant_registry.register
class VersionedVariant(Variant):
    """Indexes Versioned content once for the draft stage and once for live."""

    def _require_backend(self) -> StageBackend:
        if _backend is None:
            raise VariantError.dependency_unavailable(self.variant_id(), "versioned")
        return _backend

    def applies_to(self, cls: type, include_subclasses: bool) -> bool:
        return has_extension(cls, Versioned, include_subclasses, self.hierarchy)

    def current_state(self) -> str:
        return self._require_backend().current_stage()

    def reindex_states(self) -> list[str]:
        return list(STAGES)

    def activate_state(self, state: str) -> None:
        if state not in STAGES:
            raise VariantError.activation_failed(
                self.variant_id(), state, f"stage must be one of {', '.join(STAGES)}"
            )
        self._require_backend().set_stage(state)

    def alter_definition(self, base: str, index: Any) -> None:
        index.filter_fields[STAGE_FIELD] = {
            "name": STAGE_FIELD,
            "field": STAGE_FIELD,
            "fullfield": STAGE_FIELD,
            "base": base,
            "origin": base,
            "type": "String",
            "lookup_chain": [
                {"call": "variant", "variant": self.variant_id(), "method": "current_state"}
            ],
        }

    def alter_query(self, query: Any, index: Any) -> None:  # noqa: ARG002
        query.filter(STAGE_FIELD, [self.current_state()])

    def extract_manipulation_write_state(self, writes: WriteBatch) -> None:
        variant_id = self.variant_id()
        for write in writes.values():
            if self.applies_to(write.target_class, True):
                fan_out(write, variant_id, STAGES)
