"""Error taxonomy shared by the reconciliation engine and its adapters."""

from __future__ import annotations


class RbxSyncError(Exception):
    """Base class for failures that are scoped to a single resource or category."""


class LocalIOError(RbxSyncError):
    """Raised when a local file needed for a sync step cannot be read."""


class AssetNotFoundError(LocalIOError):
    """Raised when a declared icon or place file does not exist."""


class AssetReadError(LocalIOError):
    """Raised when a local file exists but cannot be read."""


class RemoteError(RbxSyncError):
    """Raised when the remote platform answers with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(RbxSyncError):
    """Raised when a payload does not have the shape the engine relies on."""


class LedgerFormatError(ParseError):
    """Raised when the persisted ledger cannot be decoded."""


class UploadError(RbxSyncError):
    """Base class for terminal failures of the asset upload pipeline."""


class UploadFailedError(UploadError):
    """Raised when the platform reports a failed asset operation."""


class UploadTimeoutError(UploadError):
    """Raised when an asset operation does not finish within the poll budget."""

    def __init__(self, handle: str, *, attempts: int) -> None:
        super().__init__(f"Operation {handle} did not complete after {attempts} attempts")
        self.handle = handle
        self.attempts = attempts
