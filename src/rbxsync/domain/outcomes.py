"""Per-resource results collected over a sync run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import ResourceCategory


class SyncAction(StrEnum):
    CREATED = "created"
    ADOPTED = "adopted"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceOutcome:
    category: ResourceCategory
    name: str
    action: SyncAction
    identifier: int | None = None
    icon_uploaded: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.action is SyncAction.FAILED

    @classmethod
    def failure(
        cls, category: ResourceCategory, name: str, error: BaseException
    ) -> ResourceOutcome:
        return cls(
            category=category,
            name=name,
            action=SyncAction.FAILED,
            error=f"{type(error).__name__}: {error}",
        )


@dataclass(slots=True)
class SyncReport:
    """Summary of one run; the ledger is returned alongside it."""

    outcomes: list[ResourceOutcome] = field(default_factory=list["ResourceOutcome"])
    universe_updated: bool = False
    universe_error: str | None = None

    @property
    def failures(self) -> list[ResourceOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def succeeded(self) -> list[ResourceOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.failed]

    @property
    def uploads(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.icon_uploaded)

    @property
    def ok(self) -> bool:
        return self.universe_error is None and not self.failures

    def count(self, action: SyncAction) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action is action)
