"""Project file locations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

STATE_DIR_NAME: Final[str] = ".rbxsync"
STATE_FILENAME: Final[str] = "state.yaml"
PROJECT_FILENAME: Final[str] = "rbxsync.yaml"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    project_root: Path
    project_file: Path | None = None

    def resolve_root(self) -> Path:
        return self.project_root.expanduser().resolve()

    def project_path(self) -> Path:
        if self.project_file is not None:
            return self.project_file.expanduser().resolve()
        return self.resolve_root() / PROJECT_FILENAME

    def state_dir(self) -> Path:
        return self.resolve_root() / STATE_DIR_NAME

    def state_path(self) -> Path:
        return self.state_dir() / STATE_FILENAME


def get_storage_config(
    *, project_root: Path | None = None, project_file: Path | None = None
) -> StorageConfig:
    """Root defaults to the directory of ``project_file``, else the working directory."""

    if project_root is None:
        project_root = project_file.parent if project_file is not None else Path.cwd()
    return StorageConfig(project_root=project_root, project_file=project_file)
