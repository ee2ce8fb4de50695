"""Publish-then-record orchestration.

One publish invocation ends in one of three states:

- ``RECORDED``: the package was published and its entry saved to the
  current workspace with ``published=True``.
- ``PUBLISHED_NOT_RECORDED``: the package is live, but the revision lookup
  or the workspace bookkeeping failed.  A publish cannot be rolled back, so
  this is reported separately for the operator to reconcile.
- ``FAILED``: the publish action failed; no workspace mutation happened.

``add`` tracks a package with ``published=False`` and never publishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from snapshot_creator.tracker.execution.external import ExternalActionError, Publisher, RevisionProvider
from snapshot_creator.tracker.managers.workspaces import WorkspaceManager
from snapshot_creator.tracker.models.enums import PublishOutcome, UpsertAction
from snapshot_creator.tracker.models.workspace import PackageEntry
from snapshot_creator.tracker.store.base import StoreError
from snapshot_creator.tracker.versioning.manifest import (
    DEFAULT_MANIFEST,
    ManifestParseError,
    ProjectManifest,
    read_manifest,
)


@dataclass
class TrackResult:
    workspace: str
    entry: PackageEntry
    action: UpsertAction


@dataclass
class PublishReport:
    outcome: PublishOutcome
    package: str
    version: str
    output: str = ""
    track: TrackResult | None = None
    error: Exception | None = None


class PackageTracker:
    """Records packages built in a project directory into the current workspace."""

    def __init__(
        self,
        manager: WorkspaceManager,
        publisher: Publisher,
        revisions: RevisionProvider,
        *,
        manifest_name: str = DEFAULT_MANIFEST,
    ) -> None:
        self.manager = manager
        self.publisher = publisher
        self.revisions = revisions
        self.manifest_name = manifest_name

    def publish(self, project_dir: str | Path) -> PublishReport:
        """Publish, then record on success.

        Manifest errors propagate before anything is published.
        """
        manifest = self._read_package(project_dir)
        name, version = manifest.info.name, manifest.info.version
        logger.info("Publishing {}@{} from {}", name, version, project_dir)

        try:
            output = self.publisher.publish(project_dir)
        except ExternalActionError as exc:
            logger.error("Publish of {}@{} failed: {}", name, version, exc)
            return PublishReport(
                outcome=PublishOutcome.FAILED,
                package=name,
                version=version,
                output="\n".join(part for part in (exc.stdout, exc.stderr) if part),
                error=exc,
            )

        try:
            track = self._record(manifest, project_dir, published=True)
        except (ExternalActionError, StoreError, ValueError) as exc:
            logger.error("{}@{} was published but not recorded: {}", name, version, exc)
            return PublishReport(
                outcome=PublishOutcome.PUBLISHED_NOT_RECORDED,
                package=name,
                version=version,
                output=output,
                error=exc,
            )

        return PublishReport(
            outcome=PublishOutcome.RECORDED,
            package=name,
            version=version,
            output=output,
            track=track,
        )

    def add(self, project_dir: str | Path) -> TrackResult:
        """Track the project's package without publishing it.

        Raises ``ManifestError``, ``ExternalActionError`` or ``StoreError``.
        """
        manifest = self._read_package(project_dir)
        return self._record(manifest, project_dir, published=False)

    def _read_package(self, project_dir: str | Path) -> ProjectManifest:
        manifest = read_manifest(project_dir, self.manifest_name)
        if not manifest.info.name:
            raise ManifestParseError(f"{manifest.path} has no package name to track")
        return manifest

    def _record(self, manifest: ProjectManifest, project_dir: str | Path, *, published: bool) -> TrackResult:
        revision = self.revisions.current_revision(project_dir)
        workspace = self.manager.ensure_workspace()
        entry = PackageEntry(
            name=manifest.info.name,
            version=manifest.info.version,
            git_hash=revision,
            path=str(Path(project_dir).resolve()),
            description=manifest.info.description or "",
            published=published,
        )
        action = self.manager.upsert_package_entry(workspace, entry)
        self.manager.save_workspace(workspace)
        logger.info("{} {} in workspace '{}'", entry.name, action, workspace.name)
        return TrackResult(workspace=workspace.name, entry=entry, action=action)
