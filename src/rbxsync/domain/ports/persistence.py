"""Port for persisting the ledger between runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rbxsync.domain.ledger import Ledger


@runtime_checkable
class LedgerStore(Protocol):
    """Load and save the whole ledger of one project."""

    def load(self) -> Ledger: ...

    def save(self, ledger: Ledger) -> None: ...
