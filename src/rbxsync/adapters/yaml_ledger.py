"""Ledger persistence as a YAML document under ``.rbxsync/state.yaml``."""

from __future__ import annotations

import os
import tempfile
from logging import getLogger
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rbxsync.config.storage import STATE_DIR_NAME, STATE_FILENAME
from rbxsync.domain.errors import LedgerFormatError
from rbxsync.domain.ledger import Ledger
from rbxsync.domain.model import LedgerEntry, ResourceCategory

log = getLogger(__name__)

LEDGER_VERSION = 1


class LedgerRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0)
    name: str
    description: str | None = None
    price: int | None = None
    enabled: bool | None = None
    icon_hash: str | None = None
    icon_asset_id: int | None = None

    def to_entry(self) -> LedgerEntry:
        return LedgerEntry(
            name=self.name,
            description=self.description,
            price=self.price,
            enabled=self.enabled,
            icon_hash=self.icon_hash,
            icon_asset_id=self.icon_asset_id,
        )


class LedgerDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = LEDGER_VERSION
    assets: dict[str, int] = Field(default_factory=dict)
    game_passes: list[LedgerRecord] = Field(default_factory=list)
    developer_products: list[LedgerRecord] = Field(default_factory=list)
    badges: list[LedgerRecord] = Field(default_factory=list)


class YamlLedgerStore:
    """Load and save the ledger of the project rooted at ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.path = root / STATE_DIR_NAME / STATE_FILENAME

    def load(self) -> Ledger:
        if not self.path.exists():
            log.debug("No ledger at %s, starting empty", self.path)
            return Ledger()

        try:
            payload = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise LedgerFormatError(f"Could not parse ledger {self.path}: {exc}") from exc

        try:
            document = LedgerDocument.model_validate(payload if payload is not None else {})
            ledger = _to_ledger(document)
        except (ValidationError, ValueError) as exc:
            raise LedgerFormatError(f"Invalid ledger {self.path}: {exc}") from exc

        log.debug("Loaded %s ledger entries from %s", len(ledger), self.path)
        return ledger

    def save(self, ledger: Ledger) -> None:
        text = yaml.safe_dump(_to_payload(ledger), sort_keys=True, allow_unicode=True)
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{STATE_FILENAME}.", dir=directory)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        log.debug("Saved %s ledger entries to %s", len(ledger), self.path)


def _to_ledger(document: LedgerDocument) -> Ledger:
    ledger = Ledger(assets=dict(document.assets))
    for category in ResourceCategory:
        records: list[LedgerRecord] = getattr(document, category.value)
        section = ledger.sections[category]
        for record in records:
            if record.id in section:
                raise ValueError(f"duplicate {category.label} id {record.id}")
            section[record.id] = record.to_entry()
    return ledger


def _to_payload(ledger: Ledger) -> dict[str, object]:
    payload: dict[str, object] = {
        "version": LEDGER_VERSION,
        "assets": dict(ledger.assets),
    }
    for category in ResourceCategory:
        payload[category.value] = [
            LedgerRecord(
                id=identifier,
                name=entry.name,
                description=entry.description,
                price=entry.price,
                enabled=entry.enabled,
                icon_hash=entry.icon_hash,
                icon_asset_id=entry.icon_asset_id,
            ).model_dump()
            for identifier, entry in sorted(ledger.entries(category).items())
        ]
    return payload
