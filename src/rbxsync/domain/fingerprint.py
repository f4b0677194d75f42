"""Content fingerprints for local icon files."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from .errors import AssetNotFoundError, AssetReadError

if TYPE_CHECKING:
    from pathlib import Path


def fingerprint_bytes(data: bytes) -> str:
    """Return the SHA-256 hex digest of ``data``."""

    return hashlib.sha256(data).hexdigest()


def fingerprint_file(path: Path) -> str:
    """Return the SHA-256 hex digest of the file at ``path``."""

    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise AssetNotFoundError(f"Icon file not found: {path}") from exc
    except OSError as exc:
        raise AssetReadError(f"Could not read {path}: {exc}") from exc
    return fingerprint_bytes(data)
