"""Variant registry: discovery, applicability caching and broadcast callers.

Discovery scans the registered candidate classes once per process. A
candidate is kept only if it is concrete and the host dependency it belongs
to is importable. Candidates excluded at discovery time stay excluded until
``reset()``; there is no re-discovery.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable, Iterable
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from searchvariants.config.constants import DEFAULT_DEPENDENCIES
from searchvariants.variants.base import Variant
from searchvariants.variants.dispatch import VariantCaller
from searchvariants.variants.hierarchy import RuntimeHierarchy, TypeHierarchy

if TYPE_CHECKING:
    from searchvariants.config.models import VariantsConfig

logger = structlog.get_logger()

V = TypeVar("V", bound=type[Variant])

_ClassKey = tuple[type | None, bool]


def module_available(name: str) -> bool:
    """Check if a host dependency module can be imported."""
    try:
        return find_spec(name) is not None
    except (ImportError, ValueError):
        return False


class VariantRegistry:
    """Registry of variant classes and their process-lifetime instances."""

    def __init__(
        self,
        dependencies: Iterable[str] = DEFAULT_DEPENDENCIES,
        *,
        is_available: Callable[[str], bool] = module_available,
        hierarchy: TypeHierarchy | None = None,
    ) -> None:
        self._candidates: list[type[Variant]] = []
        self._dependencies = tuple(dependencies)
        self._is_available = is_available
        self.hierarchy: TypeHierarchy = hierarchy or RuntimeHierarchy()

        self._lock = threading.RLock()
        self._variants: dict[str, Variant] | None = None
        self._class_variants: dict[_ClassKey, dict[str, Variant]] = {}
        self._callers: dict[_ClassKey, VariantCaller] = {}

    @classmethod
    def from_config(
        cls,
        config: VariantsConfig,
        *,
        candidates: Iterable[type[Variant]] = (),
        is_available: Callable[[str], bool] = module_available,
        hierarchy: TypeHierarchy | None = None,
    ) -> VariantRegistry:
        """Build a registry using the configured dependency allow-list."""
        registry = cls(config.dependencies, is_available=is_available, hierarchy=hierarchy)
        for variant_class in candidates:
            registry.register(variant_class)
        return registry

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def register(self, variant_class: V) -> V:
        """Register a candidate variant class. Usable as a decorator."""
        if variant_class not in self._candidates:
            self._candidates.append(variant_class)
        return variant_class

    def candidates(self) -> list[type[Variant]]:
        return list(self._candidates)

    def reset(self) -> None:
        """Drop every cache so the next lookup rediscovers. For tests."""
        with self._lock:
            self._variants = None
            self._class_variants.clear()
            self._callers.clear()

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def _dependency_for(self, variant_class: type[Variant]) -> str | None:
        """Find the dependency a candidate belongs to, if it is present."""
        if variant_class.requires is not None:
            return variant_class.requires if self._is_available(variant_class.requires) else None

        # Relies on variants being named after their dependency
        name = variant_class.__name__.lower()
        for dependency in self._dependencies:
            if dependency.lower() in name and self._is_available(dependency):
                return dependency
        return None

    def _discover(self) -> dict[str, Variant]:
        found: dict[str, Variant] = {}
        for variant_class in self._candidates:
            variant_id = variant_class.variant_id()
            if inspect.isabstract(variant_class):
                logger.debug("variant_excluded", variant=variant_id, reason="abstract")
                continue

            dependency = self._dependency_for(variant_class)
            if dependency is None:
                logger.debug("variant_excluded", variant=variant_id, reason="dependency_missing")
                continue

            try:
                found[variant_id] = variant_class(hierarchy=self.hierarchy)
            except Exception as e:
                logger.warning("variant_excluded", variant=variant_id, reason=str(e))
                continue

        logger.info("variants_discovered", variants=list(found))
        return found

    def all(self) -> dict[str, Variant]:
        """Return every discovered variant keyed by variant id, in catalog order."""
        variants = self._variants
        if variants is None:
            with self._lock:
                if self._variants is None:
                    self._variants = self._discover()
                variants = self._variants
        return dict(variants)

    def for_class(self, cls: type, include_subclasses: bool = True) -> dict[str, Variant]:
        """Return the variants that apply to cls.

        Args:
            cls: Content class to get variants for
            include_subclasses: Also include variants that apply to at least
                one subclass of cls
        """
        key = (cls, include_subclasses)
        cached = self._class_variants.get(key)
        if cached is None:
            with self._lock:
                cached = self._class_variants.get(key)
                if cached is None:
                    cached = {
                        variant_id: variant
                        for variant_id, variant in self.all().items()
                        if variant.applies_to(cls, include_subclasses)
                    }
                    self._class_variants[key] = cached
        return dict(cached)

    def variants(
        self, cls: type | None = None, include_subclasses: bool = True
    ) -> dict[str, Variant]:
        """All variants with no class, else the variants applying to cls."""
        if cls is None:
            return self.all()
        return self.for_class(cls, include_subclasses)

    def get(self, variant_id: str) -> Variant | None:
        return self.all().get(variant_id)

    # -------------------------------------------------------------------------
    # Broadcast
    # -------------------------------------------------------------------------

    def with_(self, cls: type | None = None, include_subclasses: bool = True) -> VariantCaller:
        """Get a caller over the variants for cls (all variants if cls is None).

        Usage: registry.with_(Page).call("alter_query", query, index)
        """
        key: _ClassKey = (cls, include_subclasses if cls is not None else True)
        caller = self._callers.get(key)
        if caller is None:
            with self._lock:
                caller = self._callers.get(key)
                if caller is None:
                    caller = VariantCaller(self.variants(cls, include_subclasses))
                    self._callers[key] = caller
        return caller

    def call(self, method: str, *args: Any) -> list[Any]:
        """Shortcut for with_().call(method, *args)."""
        return self.with_().call(method, *args)


# Global registry instance
variant_registry = VariantRegistry()
