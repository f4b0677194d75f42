"""Read-only snapshot of the monetization resources of a universe."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .directory import list_all
from .model import ResourceCategory

if TYPE_CHECKING:
    from .model import RemoteResource
    from .ports.remote import RemotePlatform

log = getLogger(__name__)


@dataclass(slots=True)
class ExportSnapshot:
    universe_id: int
    resources: dict[ResourceCategory, list[RemoteResource]] = field(
        default_factory=dict["ResourceCategory", "list[RemoteResource]"]
    )

    def of(self, category: ResourceCategory) -> list[RemoteResource]:
        return self.resources.get(category, [])

    def to_dict(self) -> dict[str, object]:
        return {
            "universe_id": self.universe_id,
            **{
                category.value: [
                    {
                        "id": item.identifier,
                        "name": item.name,
                        "description": item.description,
                        "price": item.price,
                        "enabled": item.enabled,
                    }
                    for item in self.of(category)
                ]
                for category in ResourceCategory
            },
        }


def export_universe(remote: RemotePlatform, universe_id: int) -> ExportSnapshot:
    """List every category of ``universe_id`` in full, ordered by identifier."""

    log.info("Exporting universe %s...", universe_id)
    snapshot = ExportSnapshot(universe_id=universe_id)
    for category in ResourceCategory:
        items = list_all(remote, category, universe_id)
        snapshot.resources[category] = sorted(items, key=lambda item: item.identifier)
    return snapshot
