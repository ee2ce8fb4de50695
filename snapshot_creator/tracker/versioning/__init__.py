"""Manifest versioning: text patching, snapshot derivation, dependency sync."""

from snapshot_creator.tracker.versioning.manifest import (
    ManifestError,
    ManifestIOError,
    ManifestParseError,
    ProjectManifest,
    read_manifest,
    read_manifest_text,
    write_manifest,
)
from snapshot_creator.tracker.versioning.patch import patch_string_field, update_manifest_version
from snapshot_creator.tracker.versioning.snapshot import (
    InvalidVersionError,
    SnapshotResult,
    create_snapshot,
    derive_snapshot_version,
    slugify_workspace,
)
from snapshot_creator.tracker.versioning.sync import (
    CurrentDependency,
    DependencyUpdate,
    SyncResult,
    sync_dependencies,
)

__all__ = [
    "CurrentDependency",
    "DependencyUpdate",
    "InvalidVersionError",
    "ManifestError",
    "ManifestIOError",
    "ManifestParseError",
    "ProjectManifest",
    "SnapshotResult",
    "SyncResult",
    "create_snapshot",
    "derive_snapshot_version",
    "patch_string_field",
    "read_manifest",
    "read_manifest_text",
    "slugify_workspace",
    "sync_dependencies",
    "update_manifest_version",
    "write_manifest",
]
