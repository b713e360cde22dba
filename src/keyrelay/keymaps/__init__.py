"""Scoped keymap tables and the prefix index derived from them."""

from .models import Binding, ConfigError, Handler, Mode, Scope
from .prefixes import PrefixIndex
from .store import BindingStore, StoreStats

__all__ = [
    "Binding",
    "BindingStore",
    "ConfigError",
    "Handler",
    "Mode",
    "PrefixIndex",
    "Scope",
    "StoreStats",
]
