"""Text-mode CLI adapter."""
