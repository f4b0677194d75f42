from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.remote import FakeRemotePlatform, InMemoryLedgerStore

if TYPE_CHECKING:
    from pathlib import Path

_ENV_VARS = (
    "ROBLOX_API_KEY",
    "ROBLOX_UNIVERSE_ID",
    "RBXSYNC_POLL_INTERVAL",
    "RBXSYNC_MAX_POLL_ATTEMPTS",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def remote() -> FakeRemotePlatform:
    return FakeRemotePlatform()


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "assets"
    directory.mkdir()
    return directory
