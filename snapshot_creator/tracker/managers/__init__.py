"""Workspace managers.

Managers take an injected ``WorkspaceStore`` and raise domain exceptions
(``LookupError``, ``ValueError``, ``StoreError``), never CLI exceptions --
that translation is the command's responsibility.
"""

from snapshot_creator.tracker.managers.workspaces import (
    DuplicateWorkspaceError,
    WorkspaceManager,
    WorkspaceNotFoundError,
    WorkspaceSaveError,
)

__all__ = [
    "DuplicateWorkspaceError",
    "WorkspaceManager",
    "WorkspaceNotFoundError",
    "WorkspaceSaveError",
]
