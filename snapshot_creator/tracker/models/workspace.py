"""Workspace data models.

A workspace is a named, independently persisted list of tracked package
entries.  The process-wide ``WorkspaceConfig`` records which workspace is
current and a summary of every known workspace.

On disk every model uses camelCase keys (``currentWorkspace``, ``gitHash``,
``lastModified``) and ISO-8601 timestamps, so records written by earlier
releases of the tool load unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from snapshot_creator.tracker.models.enums import UpsertAction

DEFAULT_WORKSPACE = "default"


def utcnow() -> datetime:
    return datetime.now(UTC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# -- Package entry -----------------------------------------------------------


class PackageEntry(_CamelModel):
    """One tracked (name, source path) pair."""

    name: str
    version: str
    git_hash: str = ""
    path: str
    timestamp: datetime = Field(default_factory=utcnow)
    description: str = ""
    published: bool = False

    @property
    def identity(self) -> tuple[str, str]:
        """Uniqueness key: the same name may be tracked from two directories."""
        return (self.name, self.path)


# -- Workspace ---------------------------------------------------------------


class Workspace(_CamelModel):
    """Workspace data record (one file per workspace)."""

    name: str
    packages: list[PackageEntry] = Field(default_factory=list)
    created: datetime = Field(default_factory=utcnow)
    last_modified: datetime | None = None

    def upsert(self, entry: PackageEntry) -> UpsertAction:
        """Replace the entry with the same identity in place, else append."""
        for index, existing in enumerate(self.packages):
            if existing.identity == entry.identity:
                self.packages[index] = entry
                return UpsertAction.UPDATED
        self.packages.append(entry)
        return UpsertAction.INSERTED

    def tracked_versions(self) -> dict[str, str]:
        """Package name -> version; later entries win over earlier ones."""
        versions: dict[str, str] = {}
        for entry in self.packages:
            versions[entry.name] = entry.version
        return versions


class WorkspaceSummary(_CamelModel):
    """Per-workspace metadata kept in the config record."""

    created: datetime = Field(default_factory=utcnow)
    last_modified: datetime = Field(default_factory=utcnow)


# -- Config ------------------------------------------------------------------


class WorkspaceConfig(_CamelModel):
    """Process-wide config record."""

    current_workspace: str = DEFAULT_WORKSPACE
    workspaces: dict[str, WorkspaceSummary] = Field(default_factory=dict)
    created: datetime = Field(default_factory=utcnow)

    @field_validator("current_workspace", mode="before")
    @classmethod
    def _empty_when_unset(cls, value: object) -> object:
        return value or ""
