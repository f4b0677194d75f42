"""Per-category reconciliation of declared resources against ledger and platform.

For every declared resource:
1) resolve the icon: reuse the recorded asset when the content hash matches,
   otherwise upload it
2) resolve the identity: ledger first, then the remote directory, else create
3) always issue a full update with the declared fields
4) record the declared fields and icon pair in the ledger

A failure in steps 1 to 3 is reported as a failed outcome for that resource
only; the ledger keeps whatever it held for it before the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from .directory import lookup, resolve_directory
from .errors import RbxSyncError
from .fingerprint import fingerprint_file
from .model import LedgerEntry, ResourceFields
from .outcomes import ResourceOutcome, SyncAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ledger import Ledger
    from .model import DeclaredResource, ResourceCategory
    from .ports.remote import RemotePlatform
    from .uploads import AssetUploader

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedIcon:
    icon_hash: str
    asset_id: int
    uploaded: bool


@dataclass(slots=True)
class ResourceReconciler:
    """Reconcile resources of one universe; mutates ``ledger`` in place."""

    remote: RemotePlatform
    ledger: Ledger
    uploader: AssetUploader
    universe_id: int
    assets_dir: Path

    def reconcile_category(
        self,
        category: ResourceCategory,
        resources: Sequence[DeclaredResource],
    ) -> list[ResourceOutcome]:
        if not resources:
            return []

        log.info("Syncing %s...", category.label)
        try:
            # One snapshot per category, taken before any mutation.
            directory = resolve_directory(self.remote, category, self.universe_id)
        except RbxSyncError as exc:
            log.error("Could not list remote %s: %s", category.label, exc)  # noqa: TRY400
            return [ResourceOutcome.failure(category, resource.name, exc) for resource in resources]

        return [self.reconcile_resource(resource, directory=directory) for resource in resources]

    def reconcile_resource(
        self,
        resource: DeclaredResource,
        *,
        directory: dict[str, int],
    ) -> ResourceOutcome:
        try:
            return self._reconcile(resource, directory)
        except RbxSyncError as exc:
            log.error(  # noqa: TRY400
                "Failed to sync %s %r: %s", resource.category.label, resource.name, exc
            )
            return ResourceOutcome.failure(resource.category, resource.name, exc)

    def _reconcile(self, resource: DeclaredResource, directory: dict[str, int]) -> ResourceOutcome:
        category = resource.category
        known = self.ledger.find_by_name(category, resource.name)
        icon = self._resolve_icon(resource, known[1] if known is not None else None)
        icon_asset_id = icon.asset_id if icon is not None else None

        if known is not None:
            identifier = known[0]
            action = SyncAction.UPDATED
        else:
            remote_id = lookup(directory, resource.name)
            if remote_id is not None:
                log.info("Adopting existing %s %r (%s)", category.label, resource.name, remote_id)
                identifier = remote_id
                action = SyncAction.ADOPTED
            else:
                log.info("Creating %s %r", category.label, resource.name)
                identifier = self.remote.create_resource(
                    category,
                    self.universe_id,
                    ResourceFields.from_declared(resource, icon_asset_id=icon_asset_id),
                )
                action = SyncAction.CREATED

        log.info("Updating %s %r (%s)", category.label, resource.name, identifier)
        self.remote.update_resource(
            category,
            self.universe_id,
            identifier,
            ResourceFields.from_declared(resource, icon_asset_id=icon_asset_id),
        )

        self.ledger.upsert(
            category,
            identifier,
            LedgerEntry.from_declared(
                resource,
                icon_hash=icon.icon_hash if icon is not None else None,
                icon_asset_id=icon_asset_id,
            ),
        )
        return ResourceOutcome(
            category=category,
            name=resource.name,
            action=action,
            identifier=identifier,
            icon_uploaded=icon is not None and icon.uploaded,
        )

    def _resolve_icon(
        self,
        resource: DeclaredResource,
        entry: LedgerEntry | None,
    ) -> ResolvedIcon | None:
        if resource.icon is None:
            return None

        path = self.assets_dir / resource.icon
        icon_hash = fingerprint_file(path)

        if entry is not None and entry.icon_hash == icon_hash and entry.icon_asset_id is not None:
            log.debug("Icon for %r unchanged, reusing asset %s", resource.name, entry.icon_asset_id)
            return ResolvedIcon(icon_hash=icon_hash, asset_id=entry.icon_asset_id, uploaded=False)

        known_asset = self.ledger.known_asset(icon_hash)
        if known_asset is not None:
            log.debug("Icon for %r already uploaded as asset %s", resource.name, known_asset)
            return ResolvedIcon(icon_hash=icon_hash, asset_id=known_asset, uploaded=False)

        asset_id = self.uploader.upload(path, Path(resource.icon).stem)
        return ResolvedIcon(icon_hash=icon_hash, asset_id=asset_id, uploaded=True)
