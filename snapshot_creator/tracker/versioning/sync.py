"""Dependency synchronization against a workspace.

Cross-references the four dependency sections of a manifest with the
versions tracked in a workspace and patches mismatches in place.  Nothing is
written here; the caller decides what to do with ``SyncResult``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from snapshot_creator.tracker.models.enums import DependencySection
from snapshot_creator.tracker.models.workspace import Workspace
from snapshot_creator.tracker.versioning.manifest import DEFAULT_MANIFEST, load_manifest_json
from snapshot_creator.tracker.versioning.patch import patch_string_field


@dataclass
class DependencyUpdate:
    name: str
    section: DependencySection
    old_version: str
    new_version: str


@dataclass
class CurrentDependency:
    name: str
    section: DependencySection
    version: str


@dataclass
class SyncResult:
    patched_document: str
    updates: list[DependencyUpdate] = field(default_factory=list)
    current: list[CurrentDependency] = field(default_factory=list)
    failed: list[DependencyUpdate] = field(default_factory=list)
    """Mismatches the text patch could not locate (document left as is)."""

    @property
    def current_count(self) -> int:
        return len(self.current)

    @property
    def matched(self) -> bool:
        """Whether any declared dependency is tracked in the workspace."""
        return bool(self.updates or self.current or self.failed)


def declared_dependencies(data: dict, section: DependencySection) -> dict[str, object]:
    value = data.get(section.value)
    return value if isinstance(value, dict) else {}


def sync_dependencies(document: str, workspace: Workspace, source: str = DEFAULT_MANIFEST) -> SyncResult:
    """Patch every declared dependency whose version differs from the tracked one.

    Sections are visited in ``DependencySection`` order; within a section,
    in the manifest's declared key order.  Raises ``ManifestParseError`` if
    the document is not a JSON object.
    """
    data = load_manifest_json(document, source)
    tracked = workspace.tracked_versions()
    result = SyncResult(patched_document=document)

    for section in DependencySection:
        for name, declared in declared_dependencies(data, section).items():
            if name not in tracked:
                continue
            if not isinstance(declared, str):
                logger.warning("Skipping {} in {}: version is not a string ({!r})", name, section, declared)
                continue

            new_version = tracked[name]
            if declared == new_version:
                result.current.append(CurrentDependency(name=name, section=section, version=new_version))
                continue

            update = DependencyUpdate(name=name, section=section, old_version=declared, new_version=new_version)
            try:
                patched = patch_string_field(result.patched_document, name, new_version, section=section.value)
            except ValueError as exc:
                logger.warning("Cannot patch {} in {}: {}", name, section, exc)
                patched = result.patched_document
            if patched == result.patched_document:
                logger.warning("Could not locate {} in {} for patching", name, section)
                result.failed.append(update)
                continue
            result.patched_document = patched
            result.updates.append(update)

    logger.debug(
        "Sync against '{}': {} updated, {} current, {} failed",
        workspace.name,
        len(result.updates),
        result.current_count,
        len(result.failed),
    )
    return result
