"""Application orchestration entry points."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from rbxsync.adapters.luau import render_luau
from rbxsync.adapters.roblox import RobloxClient
from rbxsync.adapters.yaml_ledger import YamlLedgerStore
from rbxsync.config import (
    MissingConfigurationError,
    get_roblox_config,
    get_storage_config,
    get_sync_config,
    load_project_config,
)
from rbxsync.domain import AssetUploader, RbxSyncError, export_universe, run_sync

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rbxsync.config import CreatorConfig, ProjectConfig, RobloxConfig
    from rbxsync.domain import SyncReport
    from rbxsync.domain.ports import LedgerStore, RemotePlatform

type ExportFormat = Literal["luau", "lua", "json"]

log = getLogger(__name__)

_DEFAULT_EXPORT_NAMES: dict[ExportFormat, str] = {
    "luau": "config.luau",
    "lua": "config.lua",
    "json": "config.json",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class PublishResult:
    place_id: int
    file_path: Path
    version: int | None = None
    skipped: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def _require_universe(config: RobloxConfig) -> int:
    if config.universe_id is None:
        raise MissingConfigurationError(
            "Missing configuration for: ROBLOX_UNIVERSE_ID (or pass --universe-id)"
        )
    return config.universe_id


@contextmanager
def _open_remote(
    remote: RemotePlatform | None,
    config: RobloxConfig,
    creator: CreatorConfig | None = None,
) -> Iterator[RemotePlatform]:
    if remote is not None:
        yield remote
        return
    with RobloxClient(config=config, creator=creator) as client:
        yield client


def sync_project(
    *,
    project_file: Path | None = None,
    project_root: Path | None = None,
    universe_id: int | None = None,
    remote: RemotePlatform | None = None,
    store: LedgerStore | None = None,
) -> SyncReport:
    """Synchronise the monetization resources declared in the project file."""

    storage = get_storage_config(project_root=project_root, project_file=project_file)
    project_config: ProjectConfig = load_project_config(storage.project_path())
    roblox_config = get_roblox_config(universe_id=universe_id)
    effective_universe = _require_universe(roblox_config)
    sync_config = get_sync_config()
    effective_store = store or YamlLedgerStore(storage.resolve_root())

    log.info(
        "Syncing %s declared resource(s) from %s",
        len(project_config.project.resources),
        storage.project_path(),
    )
    with _open_remote(remote, roblox_config, project_config.creator) as platform:
        uploader = AssetUploader(
            platform,
            poll_interval=sync_config.poll_interval_seconds,
            max_attempts=sync_config.max_poll_attempts,
        )
        return run_sync(
            project_config.project,
            remote=platform,
            store=effective_store,
            universe_id=effective_universe,
            uploader=uploader,
            project_root=storage.resolve_root(),
        )


def export_project(
    *,
    universe_id: int | None = None,
    output: Path | None = None,
    export_format: ExportFormat = "luau",
    remote: RemotePlatform | None = None,
) -> Path:
    """Write the remote resources of a universe to ``output`` and return its path."""

    roblox_config = get_roblox_config(universe_id=universe_id)
    effective_universe = _require_universe(roblox_config)
    with _open_remote(remote, roblox_config) as platform:
        snapshot = export_universe(platform, effective_universe)

    if export_format == "json":
        text = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        text = render_luau(snapshot)

    target = output or Path(_DEFAULT_EXPORT_NAMES[export_format])
    target.write_text(text, encoding="utf-8")
    log.info("Exported to %s", target)
    return target


def publish_places(
    *,
    project_file: Path | None = None,
    project_root: Path | None = None,
    universe_id: int | None = None,
    remote: RemotePlatform | None = None,
) -> list[PublishResult]:
    """Upload every place marked for publishing; failures are logged and collected."""

    storage = get_storage_config(project_root=project_root, project_file=project_file)
    project = load_project_config(storage.project_path()).project
    roblox_config = get_roblox_config(universe_id=universe_id)
    effective_universe = _require_universe(roblox_config)
    root = storage.resolve_root()

    results: list[PublishResult] = []
    with _open_remote(remote, roblox_config) as platform:
        for place in project.places:
            if not place.publish:
                continue
            path = Path(place.file_path)
            if not path.is_absolute():
                path = root / path
            log.info("Publishing place %s from %s", place.place_id, path)
            if not path.exists():
                log.error("File not found: %s", path)
                results.append(
                    PublishResult(
                        place_id=place.place_id,
                        file_path=path,
                        skipped=True,
                        error="file not found",
                    )
                )
                continue
            try:
                version = platform.publish_place(effective_universe, place.place_id, path)
            except RbxSyncError as exc:
                log.error("Failed to publish place %s: %s", place.place_id, exc)  # noqa: TRY400
                results.append(
                    PublishResult(
                        place_id=place.place_id,
                        file_path=path,
                        error=f"{type(exc).__name__}: {exc}",
                    )
                )
                continue
            log.info("Published place %s as version %s", place.place_id, version)
            results.append(PublishResult(place_id=place.place_id, file_path=path, version=version))
    return results
