"""In-memory ledger of what previous runs did on the remote platform."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .model import LedgerEntry, ResourceCategory

if TYPE_CHECKING:
    from collections.abc import Mapping


def _empty_sections() -> dict[ResourceCategory, dict[int, LedgerEntry]]:
    return {category: {} for category in ResourceCategory}


@dataclass(slots=True)
class Ledger:
    """Remote identifiers and last-synced attributes, one section per category.

    ``assets`` indexes every icon upload by content hash so identical bytes are
    never uploaded twice, even after an entry moved on to a newer icon.
    """

    sections: dict[ResourceCategory, dict[int, LedgerEntry]] = field(
        default_factory=_empty_sections
    )
    assets: dict[str, int] = field(default_factory=dict[str, int])

    def entries(self, category: ResourceCategory) -> Mapping[int, LedgerEntry]:
        return self.sections.setdefault(category, {})

    def find_by_id(self, category: ResourceCategory, identifier: int) -> LedgerEntry | None:
        return self.entries(category).get(identifier)

    def find_by_name(
        self, category: ResourceCategory, name: str
    ) -> tuple[int, LedgerEntry] | None:
        # Projects hold tens of resources per category; a scan is fine.
        wanted = name.casefold()
        for identifier, entry in self.entries(category).items():
            if entry.name.casefold() == wanted:
                return identifier, entry
        return None

    def upsert(self, category: ResourceCategory, identifier: int, entry: LedgerEntry) -> None:
        """Replace whatever was recorded for ``identifier`` with ``entry``."""

        section = self.sections.setdefault(category, {})
        # A rename must not leave the old identifier claiming the same name.
        for other_id, other in list(section.items()):
            if other_id != identifier and other.name.casefold() == entry.name.casefold():
                del section[other_id]
        section[identifier] = entry
        if entry.icon_hash is not None and entry.icon_asset_id is not None:
            self.assets[entry.icon_hash] = entry.icon_asset_id

    def known_asset(self, icon_hash: str) -> int | None:
        return self.assets.get(icon_hash)

    def copy(self) -> Ledger:
        return Ledger(
            sections={category: dict(section) for category, section in self.sections.items()},
            assets=dict(self.assets),
        )

    def __len__(self) -> int:
        return sum(len(section) for section in self.sections.values())
