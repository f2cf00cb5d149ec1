"""Type-relationship oracles used to decide variant applicability.

Variants decide whether they apply to a content class by asking whether the
class (or, optionally, any of its subclasses) carries a marker extension.
The relationship lookup is behind a small protocol so tests and hosts with
their own class registries can supply an explicit table instead of relying
on the Python type system.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol


class TypeHierarchy(Protocol):
    """Answers ancestor/descendant questions about content classes."""

    def ancestors(self, cls: type) -> Sequence[type]:
        """Return cls followed by every class it derives from."""
        ...

    def descendants(self, cls: type) -> Sequence[type]:
        """Return every class deriving from cls, excluding cls itself."""
        ...


class RuntimeHierarchy:
    """Hierarchy backed by the live Python class graph."""

    def ancestors(self, cls: type) -> Sequence[type]:
        return cls.__mro__

    def descendants(self, cls: type) -> Sequence[type]:
        found: list[type] = []
        seen: set[type] = set()
        stack = list(cls.__subclasses__())
        while stack:
            sub = stack.pop(0)
            if sub in seen:
                continue
            seen.add(sub)
            found.append(sub)
            stack.extend(sub.__subclasses__())
        return found


class StaticHierarchy:
    """Hierarchy defined by an explicit child -> parents table.

    Classes absent from the table have no parents.
    """

    def __init__(self, parents: Mapping[type, Sequence[type]]) -> None:
        self._parents = {child: tuple(bases) for child, bases in parents.items()}

    def ancestors(self, cls: type) -> Sequence[type]:
        order: list[type] = []
        queue = [cls]
        while queue:
            current = queue.pop(0)
            if current in order:
                continue
            order.append(current)
            queue.extend(self._parents.get(current, ()))
        return order

    def descendants(self, cls: type) -> Sequence[type]:
        return [
            child
            for child in self._parents
            if child is not cls and cls in self.ancestors(child)
        ]


def has_extension(
    cls: type,
    extension: type,
    include_subclasses: bool,
    hierarchy: TypeHierarchy,
) -> bool:
    """Check whether cls, or with include_subclasses any subclass, carries extension."""
    if extension in hierarchy.ancestors(cls):
        return True
    if include_subclasses:
        return any(extension in hierarchy.ancestors(sub) for sub in hierarchy.descendants(cls))
    return False
