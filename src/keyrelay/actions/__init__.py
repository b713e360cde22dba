"""Reusable handlers for common bindings."""

from .text import send_text, swallow

__all__ = ["send_text", "swallow"]
