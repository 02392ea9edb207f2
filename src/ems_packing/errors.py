"""Exception taxonomy for the packing engine.

Unplaceable items are never errors: they end up in
``PackingState.unpacked_items``.  The classes below cover configuration
problems caught before a run and invariant violations found in debug mode.
"""


class PackingError(Exception):
    """Base class for all packing engine errors."""


class ConfigurationError(PackingError):
    """Settings are malformed or describe a degenerate run."""


class GeometryInvariantError(PackingError):
    """A packing state breaks a geometric invariant (programming error)."""
