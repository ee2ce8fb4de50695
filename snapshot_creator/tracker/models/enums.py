"""Shared enumerations used across the tracker."""

from __future__ import annotations

from enum import StrEnum

# -- Workspace ---------------------------------------------------------------


class UpsertAction(StrEnum):
    """What ``upsert_package_entry`` did with the entry."""

    INSERTED = "inserted"
    UPDATED = "updated"


# -- Manifest ----------------------------------------------------------------


class DependencySection(StrEnum):
    """Manifest sections holding name -> version-range mappings.

    Declaration order is the order the synchronizer visits them in.
    """

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"
    PEER_DEPENDENCIES = "peerDependencies"
    OPTIONAL_DEPENDENCIES = "optionalDependencies"


# -- Publish -----------------------------------------------------------------


class PublishOutcome(StrEnum):
    """Terminal state of one publish invocation."""

    RECORDED = "recorded"
    PUBLISHED_NOT_RECORDED = "published_not_recorded"
    FAILED = "failed"
