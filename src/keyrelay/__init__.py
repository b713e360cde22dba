"""Keystroke dispatch engine for one-unit-per-callback line editors."""

__all__ = [
    "actions",
    "adapters",
    "dispatch",
    "keymaps",
    "runtime",
]

__version__ = "0.1.0"
