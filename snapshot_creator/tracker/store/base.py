"""Workspace store interface.

The store is raw persistence only: it reads and writes the config record and
the per-workspace data records.  Defaults, name resolution and the
config/workspace bookkeeping live in ``managers.workspaces``.

Every method raises ``StoreIOError`` when the backing medium cannot be read
or written, and the read methods raise ``StoreParseError`` when a record
exists but is not a valid record.  A missing record is not an error: reads
return ``None``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from snapshot_creator.tracker.models.workspace import Workspace, WorkspaceConfig


class StoreError(Exception):
    """Base class for workspace store failures."""


class StoreIOError(StoreError):
    """The store could not be read or written."""


class StoreParseError(StoreError):
    """A persisted record is not valid structured text."""


class InvalidWorkspaceNameError(ValueError):
    """The name cannot be used as a workspace record key."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid workspace name: {name!r}")


@runtime_checkable
class WorkspaceStore(Protocol):
    """Protocol for reading and writing workspace records.

    Records are keyed by workspace name; one config record exists per store.
    """

    def read_config(self) -> WorkspaceConfig | None:
        """Read the config record, or ``None`` if none was saved yet."""
        ...

    def write_config(self, config: WorkspaceConfig) -> None:
        """Persist the config record."""
        ...

    def read_workspace(self, name: str) -> Workspace | None:
        """Read a workspace record, or ``None`` if it does not exist."""
        ...

    def write_workspace(self, workspace: Workspace) -> None:
        """Persist a workspace record under ``workspace.name``."""
        ...

    def workspace_exists(self, name: str) -> bool:
        """Check whether a data record exists for the workspace."""
        ...

    def delete_workspace(self, name: str) -> bool:
        """Delete a workspace record.  Returns ``False`` if it did not exist."""
        ...
