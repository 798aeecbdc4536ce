"""Application services: factories, the combat orchestrator and snapshots."""
