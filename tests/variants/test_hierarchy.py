"""Tests for type-relationship oracles."""

from searchvariants.variants.hierarchy import RuntimeHierarchy, StaticHierarchy, has_extension


class Marker:
    pass


class Base:
    pass


class Child(Base):
    pass


class MarkedGrandchild(Child, Marker):
    pass


class Unrelated:
    pass


class TestRuntimeHierarchy:
    def test_ancestors_start_with_class(self) -> None:
        ancestors = RuntimeHierarchy().ancestors(Child)
        assert ancestors[0] is Child
        assert Base in ancestors

    def test_descendants_are_transitive(self) -> None:
        assert list(RuntimeHierarchy().descendants(Base)) == [Child, MarkedGrandchild]

    def test_descendants_exclude_class(self) -> None:
        assert Unrelated not in RuntimeHierarchy().descendants(Unrelated)


class TestStaticHierarchy:
    def test_ancestors_follow_table(self) -> None:
        hierarchy = StaticHierarchy({Child: [Base], Base: [Marker]})
        assert list(hierarchy.ancestors(Child)) == [Child, Base, Marker]

    def test_unknown_class_has_only_itself(self) -> None:
        assert list(StaticHierarchy({}).ancestors(Unrelated)) == [Unrelated]

    def test_descendants(self) -> None:
        hierarchy = StaticHierarchy({Child: [Base], MarkedGrandchild: [Child]})
        assert list(hierarchy.descendants(Base)) == [Child, MarkedGrandchild]

    def test_ignores_python_inheritance(self) -> None:
        hierarchy = StaticHierarchy({})
        assert not has_extension(MarkedGrandchild, Marker, True, hierarchy)


class TestHasExtension:
    def test_direct_and_inherited(self) -> None:
        hierarchy = RuntimeHierarchy()
        assert has_extension(MarkedGrandchild, Marker, False, hierarchy)
        assert not has_extension(Child, Marker, False, hierarchy)

    def test_subclass_counts_only_when_requested(self) -> None:
        hierarchy = RuntimeHierarchy()
        assert has_extension(Base, Marker, True, hierarchy)
        assert not has_extension(Base, Marker, False, hierarchy)

    def test_unrelated(self) -> None:
        assert not has_extension(Unrelated, Marker, True, RuntimeHierarchy())

    def test_static_table_marks_class(self) -> None:
        hierarchy = StaticHierarchy({Unrelated: [Marker]})
        assert has_extension(Unrelated, Marker, False, hierarchy)
