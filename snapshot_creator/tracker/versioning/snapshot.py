"""Snapshot version derivation.

A snapshot version embeds a revision identifier in a pre-release tag::

    2.3.0  --(rev abc123ef)-->  2.4.0-abc123ef-SNAPSHOT
    2.4.0-abc123ef-SNAPSHOT  --(rev def456ab)-->  2.4.0-def456ab-SNAPSHOT

The minor component is bumped only when leaving a release version; later
snapshots in the same development cycle just swap the revision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from snapshot_creator.tracker.versioning.manifest import (
    DEFAULT_MANIFEST,
    ManifestParseError,
    read_manifest,
    write_manifest,
)
from snapshot_creator.tracker.versioning.patch import update_manifest_version

if TYPE_CHECKING:
    from snapshot_creator.tracker.execution.external import RevisionProvider

SNAPSHOT_MARKER = "snapshot"

_NUMERIC = re.compile(r"[0-9]+")
_SLUG_UNSAFE = re.compile(r"[^a-z0-9]")


class InvalidVersionError(ValueError):
    """The version's minor component is missing or not an integer."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Cannot bump minor component of version {version!r}")
        self.version = version


def slugify_workspace(name: str) -> str:
    """Lower-case ``name`` and replace every char outside ``[a-z0-9]`` with ``-``."""
    return _SLUG_UNSAFE.sub("-", name.lower())


def is_snapshot(version: str) -> bool:
    return SNAPSHOT_MARKER in version.lower()


def derive_snapshot_version(current_version: str, revision_id: str, workspace_slug: str | None = None) -> str:
    """Compute the next snapshot version.

    Fresh snapshot: ``MAJOR.(MINOR+1).0-REV[-SLUG]-SNAPSHOT``; the patch
    component is always reset and any pre-release tag dropped.  Existing
    snapshot: ``CORE-REV[-SLUG]-SNAPSHOT`` with the numeric core kept as is.
    """
    core = current_version.split("-", 1)[0]
    tag = f"-{revision_id}"
    if workspace_slug:
        tag += f"-{workspace_slug}"

    if is_snapshot(current_version):
        return f"{core}{tag}-SNAPSHOT"

    parts = core.split(".")
    if len(parts) < 2 or not _NUMERIC.fullmatch(parts[1]):
        raise InvalidVersionError(current_version)
    minor = int(parts[1]) + 1
    return f"{parts[0]}.{minor}.0{tag}-SNAPSHOT"


@dataclass
class SnapshotResult:
    path: Path
    old_version: str
    new_version: str
    revision: str
    fresh: bool
    """True when the minor component was bumped (leaving a release version)."""


def create_snapshot(
    project_dir: str | Path,
    revisions: RevisionProvider,
    *,
    manifest_name: str = DEFAULT_MANIFEST,
    workspace_name: str | None = None,
) -> SnapshotResult:
    """Rewrite the manifest's ``version`` to the next snapshot version.

    The revision is looked up before anything is derived or written; if it
    fails, ``ExternalActionError`` propagates and the manifest is untouched.
    """
    manifest = read_manifest(project_dir, manifest_name)
    revision = revisions.current_revision(project_dir)

    old_version = manifest.info.version
    slug = slugify_workspace(workspace_name) if workspace_name else None
    new_version = derive_snapshot_version(old_version, revision, slug)

    patched = update_manifest_version(manifest.text, new_version)
    if patched == manifest.text and new_version != old_version:
        raise ManifestParseError(f'No top-level "version" string found in {manifest.path}')

    write_manifest(manifest.path, patched)
    logger.info("Snapshot {} -> {} ({})", old_version, new_version, manifest.path)
    return SnapshotResult(
        path=manifest.path,
        old_version=old_version,
        new_version=new_version,
        revision=revision,
        fresh=not is_snapshot(old_version),
    )
