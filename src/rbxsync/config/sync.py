"""Synchronization defaults for the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass

from rbxsync.domain.uploads import DEFAULT_MAX_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL_SECONDS

from .env import env_float, optional_positive_int


@dataclass(frozen=True, slots=True)
class SyncConfig:
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS


def get_sync_config() -> SyncConfig:
    max_attempts = optional_positive_int("RBXSYNC_MAX_POLL_ATTEMPTS")
    return SyncConfig(
        poll_interval_seconds=env_float("RBXSYNC_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS),
        max_poll_attempts=max_attempts if max_attempts is not None else DEFAULT_MAX_POLL_ATTEMPTS,
    )
