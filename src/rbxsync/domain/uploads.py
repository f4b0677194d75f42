"""Asset upload pipeline: submit a binary, then poll its operation to completion."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import UploadFailedError, UploadTimeoutError
from .model import PendingOperation

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from .ports.remote import RemotePlatform

log = getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_POLL_ATTEMPTS = 30


@dataclass(slots=True)
class AssetUploader:
    """Upload assets and resolve their identifiers.

    The uploader keeps no local state, so an upload abandoned mid-poll can be
    retried from scratch on the next run.
    """

    remote: RemotePlatform
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    sleep: Callable[[float], None] = field(default=time.sleep)

    def upload(self, path: Path, display_name: str) -> int:
        log.info("Uploading asset %s as %r", path, display_name)
        operation = self.remote.upload_asset(path, display_name)
        if isinstance(operation, PendingOperation):
            asset_id = self.wait(operation.handle)
        else:
            log.debug("Upload of %s completed immediately", path)
            asset_id = operation.asset_id
        log.info("Asset %s uploaded with id %s", path, asset_id)
        return asset_id

    def wait(self, handle: str) -> int:
        """Poll ``handle`` until it reaches a terminal state."""

        for attempt in range(1, self.max_attempts + 1):
            log.debug("Polling operation %s (attempt %s/%s)", handle, attempt, self.max_attempts)
            status = self.remote.poll_operation(handle)
            if status.error is not None:
                raise UploadFailedError(f"Asset operation failed: {status.error}")
            if status.done:
                if status.asset_id is None:
                    raise UploadFailedError("no identifier returned")
                return status.asset_id
            if attempt < self.max_attempts:
                self.sleep(self.poll_interval)
        raise UploadTimeoutError(handle, attempts=self.max_attempts)
