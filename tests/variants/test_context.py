"""Tests for the ambient request context and deferred side channel."""

import pytest

from searchvariants.core.logging import clear_request_id, get_request_id, set_request_id
from searchvariants.variants.context import (
    clear_deferred_states,
    defer_state,
    deferred_states,
    has_active_request,
    pop_deferred_state,
    request_scope,
)


class TestRequestScope:
    def setup_method(self) -> None:
        clear_request_id()

    def test_outside_scope_no_request(self) -> None:
        assert has_active_request() is False

    def test_inside_scope_active(self) -> None:
        with request_scope("req-1") as rid:
            assert rid == "req-1"
            assert has_active_request() is True
            assert get_request_id() == "req-1"
        assert has_active_request() is False
        assert get_request_id() is None

    def test_generates_request_id(self) -> None:
        with request_scope() as rid:
            assert len(rid) == 12

    def test_restores_outer_request_id(self) -> None:
        set_request_id("outer")
        try:
            with request_scope("inner"):
                assert get_request_id() == "inner"
            assert get_request_id() == "outer"
        finally:
            clear_request_id()

    def test_reset_on_error(self) -> None:
        with pytest.raises(ValueError), request_scope():
            raise ValueError("handler failed")
        assert has_active_request() is False


class TestDeferredStates:
    def test_defer_and_pop(self) -> None:
        defer_state("SubsitesVariant", 3)
        assert deferred_states() == {"SubsitesVariant": 3}
        assert pop_deferred_state("SubsitesVariant") == 3
        assert pop_deferred_state("SubsitesVariant", "none") == "none"

    def test_latest_value_wins(self) -> None:
        defer_state("SubsitesVariant", 3)
        defer_state("SubsitesVariant", 4)
        assert deferred_states() == {"SubsitesVariant": 4}

    def test_clear(self) -> None:
        defer_state("A", 1)
        clear_deferred_states()
        assert deferred_states() == {}

    def test_snapshot_is_copy(self) -> None:
        defer_state("A", 1)
        deferred_states().clear()
        assert deferred_states() == {"A": 1}
