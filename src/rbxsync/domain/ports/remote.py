"""Port for the remote platform that owns the monetization resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from rbxsync.domain.model import (
        AssetOperation,
        OperationStatus,
        ResourceCategory,
        ResourceFields,
        ResourcePage,
        UniverseSettings,
    )


@runtime_checkable
class RemotePlatform(Protocol):
    """Blocking view of the platform operations the engine relies on.

    Implementations raise ``RemoteError`` for non-success responses and
    ``ParseError`` for bodies they cannot turn into the returned records.
    """

    def list_resources(
        self,
        category: ResourceCategory,
        universe_id: int,
        cursor: str | None = None,
    ) -> ResourcePage: ...

    def create_resource(
        self,
        category: ResourceCategory,
        universe_id: int,
        fields: ResourceFields,
    ) -> int: ...

    def update_resource(
        self,
        category: ResourceCategory,
        universe_id: int,
        identifier: int,
        fields: ResourceFields,
    ) -> None: ...

    def upload_asset(self, path: Path, display_name: str) -> AssetOperation: ...

    def poll_operation(self, handle: str) -> OperationStatus: ...

    def update_universe_settings(self, universe_id: int, settings: UniverseSettings) -> None: ...

    def publish_place(self, universe_id: int, place_id: int, path: Path) -> int: ...
