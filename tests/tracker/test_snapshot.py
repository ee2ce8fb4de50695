"""Unit tests for snapshot version derivation and manifest rewriting."""

from __future__ import annotations

import json

import pytest

from snapshot_creator.tracker.execution.external import ExternalActionError
from snapshot_creator.tracker.versioning.manifest import ManifestIOError, ManifestParseError
from snapshot_creator.tracker.versioning.snapshot import (
    InvalidVersionError,
    create_snapshot,
    derive_snapshot_version,
    slugify_workspace,
)

# ---------------------------------------------------------------------------
# derive_snapshot_version
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("2.3.0", "2.4.0-abc123ef-SNAPSHOT"),
        ("0.0.7", "0.1.0-abc123ef-SNAPSHOT"),
        ("1.9.4", "1.10.0-abc123ef-SNAPSHOT"),
        ("3.1.2-beta.1", "3.2.0-abc123ef-SNAPSHOT"),
        ("1.2", "1.3.0-abc123ef-SNAPSHOT"),
    ],
)
def test_fresh_snapshot_bumps_minor_and_resets_patch(version: str, expected: str) -> None:
    assert derive_snapshot_version(version, "abc123ef") == expected


def test_existing_snapshot_keeps_core() -> None:
    assert derive_snapshot_version("2.4.0-abc123ef-SNAPSHOT", "def456ab") == "2.4.0-def456ab-SNAPSHOT"


def test_snapshot_marker_case_insensitive() -> None:
    assert derive_snapshot_version("2.4.0-abc-snapshot", "def") == "2.4.0-def-SNAPSHOT"


def test_repeated_derivation_does_not_rebump() -> None:
    first = derive_snapshot_version("2.3.0", "abc123ef")
    second = derive_snapshot_version(first, "def456ab")
    third = derive_snapshot_version(second, "0badc0de")
    assert first == "2.4.0-abc123ef-SNAPSHOT"
    assert second == "2.4.0-def456ab-SNAPSHOT"
    assert third == "2.4.0-0badc0de-SNAPSHOT"


def test_workspace_slug_inserted() -> None:
    assert derive_snapshot_version("2.3.0", "abc", "feature-x") == "2.4.0-abc-feature-x-SNAPSHOT"
    assert derive_snapshot_version("2.4.0-abc-feature-x-SNAPSHOT", "def", "feature-x") == (
        "2.4.0-def-feature-x-SNAPSHOT"
    )


@pytest.mark.parametrize("version", ["1.x.0", "1", "1..0", "v1.-2.0"])
def test_non_numeric_minor_raises(version: str) -> None:
    with pytest.raises(InvalidVersionError):
        derive_snapshot_version(version, "abc")


def test_invalid_version_is_value_error() -> None:
    with pytest.raises(ValueError, match="minor component"):
        derive_snapshot_version("latest", "abc")


@pytest.mark.parametrize(
    ("name", "slug"),
    [
        ("default", "default"),
        ("Feature/Login", "feature-login"),
        ("team_a 2", "team-a-2"),
        ("ÜBER", "-ber"),
    ],
)
def test_slugify_workspace(name: str, slug: str) -> None:
    assert slugify_workspace(name) == slug


# ---------------------------------------------------------------------------
# create_snapshot
# ---------------------------------------------------------------------------


def test_create_snapshot_end_to_end(project, write_manifest, revisions) -> None:
    original = '{\n    "name": "my-lib",\n    "version": "2.3.0",\n    "scripts": {"build": "tsc"}\n}\n'
    manifest = write_manifest(original)

    result = create_snapshot(project, revisions)
    assert result.old_version == "2.3.0"
    assert result.new_version == "2.4.0-abc123ef-SNAPSHOT"
    assert result.fresh is True
    assert manifest.read_text() == original.replace("2.3.0", "2.4.0-abc123ef-SNAPSHOT")

    revisions.revision = "def456ab"
    result = create_snapshot(project, revisions)
    assert result.new_version == "2.4.0-def456ab-SNAPSHOT"
    assert result.fresh is False
    assert json.loads(manifest.read_text())["version"] == "2.4.0-def456ab-SNAPSHOT"


def test_create_snapshot_with_workspace(project, write_manifest, revisions) -> None:
    manifest = write_manifest({"name": "my-lib", "version": "1.0.0"})
    result = create_snapshot(project, revisions, workspace_name="Team A")
    assert result.new_version == "1.1.0-abc123ef-team-a-SNAPSHOT"
    assert json.loads(manifest.read_text())["version"] == result.new_version


def test_create_snapshot_revision_failure_leaves_manifest(project, write_manifest, revisions) -> None:
    manifest = write_manifest({"name": "my-lib", "version": "1.0.0"})
    before = manifest.read_text()
    revisions.fail = True

    with pytest.raises(ExternalActionError):
        create_snapshot(project, revisions)
    assert manifest.read_text() == before


def test_create_snapshot_invalid_version_leaves_manifest(project, write_manifest, revisions) -> None:
    manifest = write_manifest({"name": "my-lib", "version": "next"})
    before = manifest.read_text()

    with pytest.raises(InvalidVersionError):
        create_snapshot(project, revisions)
    assert manifest.read_text() == before


def test_create_snapshot_missing_manifest(project, revisions) -> None:
    with pytest.raises(ManifestIOError):
        create_snapshot(project, revisions)
    assert revisions.calls == []


def test_create_snapshot_invalid_json(project, write_manifest, revisions) -> None:
    write_manifest('{"name": "x", "version": ')
    with pytest.raises(ManifestParseError):
        create_snapshot(project, revisions)


def test_create_snapshot_preserves_crlf(project, revisions) -> None:
    manifest = project / "package.json"
    manifest.write_bytes(b'{\r\n  "name": "x",\r\n  "version": "1.0.0"\r\n}\r\n')

    create_snapshot(project, revisions)
    assert manifest.read_bytes() == b'{\r\n  "name": "x",\r\n  "version": "1.1.0-abc123ef-SNAPSHOT"\r\n}\r\n'


def test_create_snapshot_without_package_name(project, write_manifest, revisions) -> None:
    manifest = write_manifest({"private": True, "version": "1.0.0"})
    result = create_snapshot(project, revisions)
    assert result.new_version == "1.1.0-abc123ef-SNAPSHOT"
    assert json.loads(manifest.read_text()) == {"private": True, "version": "1.1.0-abc123ef-SNAPSHOT"}


def test_create_snapshot_invalid_utf8(project, revisions) -> None:
    (project / "package.json").write_bytes(b'{"version": "1.0.0", "description": "\xff"}')
    with pytest.raises(ManifestParseError, match="UTF-8"):
        create_snapshot(project, revisions)
    assert revisions.calls == []
