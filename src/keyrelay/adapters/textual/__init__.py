"""Textual host integration."""

from .controller import TextualKeyAdapter, TextualUIHooks

__all__ = ["TextualKeyAdapter", "TextualUIHooks"]
