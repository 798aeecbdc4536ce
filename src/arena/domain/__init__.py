"""Combat domain: combatants, archetype behaviors, status effects and AI."""
