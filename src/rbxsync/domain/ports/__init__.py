"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import LedgerStore
from .remote import RemotePlatform

__all__ = [
    "LedgerStore",
    "RemotePlatform",
]
