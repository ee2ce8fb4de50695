"""Data models for the tracker."""

from snapshot_creator.tracker.models.enums import DependencySection, PublishOutcome, UpsertAction
from snapshot_creator.tracker.models.manifest import ManifestInfo
from snapshot_creator.tracker.models.workspace import (
    DEFAULT_WORKSPACE,
    PackageEntry,
    Workspace,
    WorkspaceConfig,
    WorkspaceSummary,
)

__all__ = [
    "DEFAULT_WORKSPACE",
    # Enums
    "DependencySection",
    # Manifest
    "ManifestInfo",
    # Workspace
    "PackageEntry",
    "PublishOutcome",
    "UpsertAction",
    "Workspace",
    "WorkspaceConfig",
    "WorkspaceSummary",
]
