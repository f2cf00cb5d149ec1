"""Broadcast a named capability to every variant that implements it."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from searchvariants.config.constants import MAX_CALL_ARGS
from searchvariants.variants.base import Variant

logger = structlog.get_logger()


class VariantCaller:
    """Calls a method on all variants that support it and gathers the results.

    Works like extension hooks: variants opt in to a capability simply by
    defining a method with that name. Exceptions raised by a variant are not
    caught, so one failing variant aborts the whole broadcast.
    """

    def __init__(self, variants: Mapping[str, Variant]) -> None:
        self._variants = dict(variants)

    @property
    def variants(self) -> dict[str, Variant]:
        return dict(self._variants)

    def implementers(self, method: str) -> list[str]:
        """Ids of the variants exposing method, in iteration order."""
        return [
            variant_id
            for variant_id, variant in self._variants.items()
            if callable(getattr(variant, method, None))
        ]

    def call(self, method: str, *args: Any) -> list[Any]:
        """Call method(*args) on every implementing variant.

        Returns the non-None return values in variant order.

        Raises:
            TypeError: If more than MAX_CALL_ARGS arguments are passed.
        """
        if len(args) > MAX_CALL_ARGS:
            raise TypeError(
                f"call() forwards at most {MAX_CALL_ARGS} arguments, got {len(args)}"
            )

        values: list[Any] = []
        for variant_id in self.implementers(method):
            value = getattr(self._variants[variant_id], method)(*args)
            if value is not None:
                values.append(value)

        logger.debug(
            "variant_capability_called",
            method=method,
            variants=len(self._variants),
            results=len(values),
        )
        return values
