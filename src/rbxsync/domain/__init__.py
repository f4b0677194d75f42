"""Reconciliation engine for declaratively synced monetization resources."""

from __future__ import annotations

from .coordinator import reconcile, run_sync
from .errors import (
    AssetNotFoundError,
    AssetReadError,
    LedgerFormatError,
    LocalIOError,
    ParseError,
    RbxSyncError,
    RemoteError,
    UploadError,
    UploadFailedError,
    UploadTimeoutError,
)
from .export import ExportSnapshot, export_universe
from .ledger import Ledger
from .model import (
    AssetOperation,
    CompletedOperation,
    DeclaredResource,
    LedgerEntry,
    OperationStatus,
    PaymentSource,
    PendingOperation,
    PlaceTarget,
    RemoteResource,
    ResourceCategory,
    ResourceFields,
    ResourcePage,
    SyncProject,
    UniverseSettings,
)
from .outcomes import ResourceOutcome, SyncAction, SyncReport
from .uploads import AssetUploader

__all__ = [
    "AssetNotFoundError",
    "AssetOperation",
    "AssetReadError",
    "AssetUploader",
    "CompletedOperation",
    "DeclaredResource",
    "ExportSnapshot",
    "Ledger",
    "LedgerEntry",
    "LedgerFormatError",
    "LocalIOError",
    "OperationStatus",
    "ParseError",
    "PaymentSource",
    "PendingOperation",
    "PlaceTarget",
    "RbxSyncError",
    "RemoteError",
    "RemoteResource",
    "ResourceCategory",
    "ResourceFields",
    "ResourceOutcome",
    "ResourcePage",
    "SyncAction",
    "SyncProject",
    "SyncReport",
    "UniverseSettings",
    "UploadError",
    "UploadFailedError",
    "UploadTimeoutError",
    "export_universe",
    "reconcile",
    "run_sync",
]
