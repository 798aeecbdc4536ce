"""Presentation adapters; they read engine state and never mutate it."""
