"""Fixtures for variant tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from searchvariants.variants.base import Variant
from searchvariants.variants.context import clear_deferred_states
from searchvariants.variants.registry import VariantRegistry
from tests.variants.fakes import StageVariant, TenantVariant


@pytest.fixture
def make_registry() -> Callable[..., VariantRegistry]:
    """Build a registry where every dependency is available by default."""

    def _make(
        *classes: type[Variant],
        available: Callable[[str], bool] = lambda _name: True,
        **kwargs: Any,
    ) -> VariantRegistry:
        registry = VariantRegistry(is_available=available, **kwargs)
        for cls in classes:
            registry.register(cls)
        return registry

    return _make


@pytest.fixture
def registry(make_registry: Callable[..., VariantRegistry]) -> VariantRegistry:
    """Registry with the tenant and stage variants."""
    return make_registry(TenantVariant, StageVariant)


@pytest.fixture(autouse=True)
def _clean_deferred() -> Iterator[None]:
    clear_deferred_states()
    yield
    clear_deferred_states()
