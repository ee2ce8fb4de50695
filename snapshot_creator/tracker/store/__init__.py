"""Workspace store implementations."""

from snapshot_creator.tracker.store.base import (
    InvalidWorkspaceNameError,
    StoreError,
    StoreIOError,
    StoreParseError,
    WorkspaceStore,
)
from snapshot_creator.tracker.store.local import LocalWorkspaceStore

__all__ = [
    "InvalidWorkspaceNameError",
    "LocalWorkspaceStore",
    "StoreError",
    "StoreIOError",
    "StoreParseError",
    "WorkspaceStore",
]
