"""Local filesystem workspace store.

Layout::

    {root}/config.json
    {root}/workspaces/{name}.json

Writes are atomic per file: data is written to a temporary file in the same
directory, then renamed to the target path.  Updating the config and a
workspace record together is NOT atomic as a pair, and no file locking is
done; the store assumes one sequential CLI process at a time.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from snapshot_creator.tracker.models.workspace import Workspace, WorkspaceConfig
from snapshot_creator.tracker.store.base import (
    InvalidWorkspaceNameError,
    StoreIOError,
    StoreParseError,
)

CONFIG_FILE = "config.json"
WORKSPACES_DIR = "workspaces"

M = TypeVar("M", bound=BaseModel)


class LocalWorkspaceStore:
    """Local filesystem implementation of the WorkspaceStore protocol."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()
        self._config_path = self.root / CONFIG_FILE
        self._workspaces = self.root / WORKSPACES_DIR

    def workspace_path(self, name: str) -> Path:
        if not name or name.startswith(".") or "/" in name or "\\" in name or "\0" in name:
            raise InvalidWorkspaceNameError(name)
        return self._workspaces / f"{name}.json"

    # -- Config ----------------------------------------------------------------

    def read_config(self) -> WorkspaceConfig | None:
        return _read_model(self._config_path, WorkspaceConfig)

    def write_config(self, config: WorkspaceConfig) -> None:
        _atomic_write(self._config_path, config.to_json())

    # -- Workspaces ------------------------------------------------------------

    def read_workspace(self, name: str) -> Workspace | None:
        return _read_model(self.workspace_path(name), Workspace)

    def write_workspace(self, workspace: Workspace) -> None:
        _atomic_write(self.workspace_path(workspace.name), workspace.to_json())

    def workspace_exists(self, name: str) -> bool:
        return self.workspace_path(name).is_file()

    def delete_workspace(self, name: str) -> bool:
        path = self.workspace_path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StoreIOError(f"Cannot delete {path}: {exc}") from exc
        logger.debug("Store: deleted {}", path)
        return True


# -- Helpers -------------------------------------------------------------------


def _read_model(path: Path, model: type[M]) -> M | None:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise StoreParseError(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise StoreIOError(f"Cannot read {path}: {exc}") from exc
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise StoreParseError(f"Invalid record in {path}: {exc}") from exc


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    except OSError as exc:
        raise StoreIOError(f"Cannot write {path}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.write("\n")
        os.replace(tmp_path, path)
    except BaseException as exc:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        if isinstance(exc, OSError):
            raise StoreIOError(f"Cannot write {path}: {exc}") from exc
        raise
    logger.debug("Store: wrote {}", path)
