"""Turn-based arena combat engine."""

__version__ = "0.1.0"
