"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime combatant cannot be created."""


class SnapshotError(Exception):
    """Raised when a combat snapshot cannot be serialized or restored."""
