"""Configuration constants.

Values here are implementation limits and conventions, not user settings.
For configurable values, see models.py.
"""

MAX_CALL_ARGS = 7
"""Maximum positional arguments forwarded by a capability broadcast."""

DEFAULT_DEPENDENCIES: tuple[str, ...] = ("subsites", "versioned")
"""Host dependency names a variant class name may match (case-insensitive)."""

ROOT_VARIANT_STATE = 0
"""State value of the main (non-tenant) site."""
