"""Run coordination: universe settings, then each resource category, then persistence."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import RbxSyncError
from .model import ResourceCategory
from .outcomes import SyncAction, SyncReport
from .reconciler import ResourceReconciler
from .uploads import AssetUploader

if TYPE_CHECKING:
    from .ledger import Ledger
    from .model import SyncProject
    from .ports.persistence import LedgerStore
    from .ports.remote import RemotePlatform

log = getLogger(__name__)


def reconcile(
    project: SyncProject,
    ledger: Ledger,
    *,
    remote: RemotePlatform,
    universe_id: int,
    uploader: AssetUploader | None = None,
    project_root: Path | None = None,
) -> tuple[Ledger, SyncReport]:
    """Reconcile ``project`` against the platform and return the updated ledger.

    The input ledger is left untouched; callers decide whether to persist the
    returned copy.
    """

    updated = ledger.copy()
    report = SyncReport()
    _sync_universe(project, remote=remote, universe_id=universe_id, report=report)

    assets_dir = Path(project.assets_dir)
    if project_root is not None and not assets_dir.is_absolute():
        assets_dir = project_root / assets_dir

    reconciler = ResourceReconciler(
        remote=remote,
        ledger=updated,
        uploader=uploader or AssetUploader(remote),
        universe_id=universe_id,
        assets_dir=assets_dir,
    )
    for category in ResourceCategory:
        report.outcomes.extend(
            reconciler.reconcile_category(category, project.resources_for(category))
        )

    log.info(
        "Reconciled %s resource(s): created=%s, adopted=%s, updated=%s, failed=%s, uploads=%s",
        len(report.outcomes),
        report.count(SyncAction.CREATED),
        report.count(SyncAction.ADOPTED),
        report.count(SyncAction.UPDATED),
        report.count(SyncAction.FAILED),
        report.uploads,
    )
    return updated, report


def run_sync(
    project: SyncProject,
    *,
    remote: RemotePlatform,
    store: LedgerStore,
    universe_id: int,
    uploader: AssetUploader | None = None,
    project_root: Path | None = None,
) -> SyncReport:
    """Load the ledger, reconcile, and save the ledger once at the end."""

    log.info("Starting sync of universe %s", universe_id)
    ledger = store.load()
    updated, report = reconcile(
        project,
        ledger,
        remote=remote,
        universe_id=universe_id,
        uploader=uploader,
        project_root=project_root,
    )
    store.save(updated)
    log.info("Sync complete, ledger holds %s resource(s)", len(updated))
    return report


def _sync_universe(
    project: SyncProject,
    *,
    remote: RemotePlatform,
    universe_id: int,
    report: SyncReport,
) -> None:
    if project.universe.is_empty():
        return
    log.info("Syncing universe settings...")
    try:
        remote.update_universe_settings(universe_id, project.universe)
    except RbxSyncError as exc:
        log.error("Failed to update universe settings: %s", exc)  # noqa: TRY400
        report.universe_error = f"{type(exc).__name__}: {exc}"
        return
    report.universe_updated = True
    log.info("Universe settings updated.")
