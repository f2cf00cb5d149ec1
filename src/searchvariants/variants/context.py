"""Ambient request context for variant activation.

Some hosts keep dimension state (current subsite, reading stage) in session
storage that can only be changed while a request is being served. Variants
check ``has_active_request()`` before switching state; outside a request
they record the wanted value in the deferred side channel instead, and the
host applies it when its next request starts (``pop_deferred_state``).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from searchvariants.core.logging import clear_request_id, get_request_id, set_request_id

_active_request: ContextVar[bool] = ContextVar("active_request", default=False)

# Process-wide, like request parameters; not per-context.
_deferred: dict[str, Any] = {}


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Mark the enclosed block as serving a live request.

    Yields the request correlation id.
    """
    previous_id = get_request_id()
    token = _active_request.set(True)
    rid = set_request_id(request_id)
    try:
        yield rid
    finally:
        _active_request.reset(token)
        if previous_id is None:
            clear_request_id()
        else:
            set_request_id(previous_id)


def has_active_request() -> bool:
    return _active_request.get()


def defer_state(variant_id: str, state: Any) -> None:
    """Record a state to apply when the next request starts."""
    _deferred[variant_id] = state


def deferred_states() -> dict[str, Any]:
    return dict(_deferred)


def pop_deferred_state(variant_id: str, default: Any = None) -> Any:
    return _deferred.pop(variant_id, default)


def clear_deferred_states() -> None:
    _deferred.clear()
