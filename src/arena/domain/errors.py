"""Domain-level exceptions."""


class CombatStateError(RuntimeError):
    """Raised when combat turn discipline or combatant contracts are violated."""
