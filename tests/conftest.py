"""Shared test fixtures.

No network, registry or git remote is needed: the workspace store lives
under ``tmp_path`` and external collaborators are replaced with fakes.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from snapshot_creator.tracker.execution.external import ExternalActionError
from snapshot_creator.tracker.managers.workspaces import WorkspaceManager
from snapshot_creator.tracker.settings import _get_settings_cached
from snapshot_creator.tracker.store.local import LocalWorkspaceStore

# ---------------------------------------------------------------------------
# Fakes for external collaborators
# ---------------------------------------------------------------------------


class FakeRevisions:
    """RevisionProvider returning a fixed revision, or failing."""

    def __init__(self, revision: str = "abc123ef", *, fail: bool = False) -> None:
        self.revision = revision
        self.fail = fail
        self.calls: list[Path] = []

    def current_revision(self, project_dir: str | Path) -> str:
        self.calls.append(Path(project_dir))
        if self.fail:
            raise ExternalActionError("fatal: not a git repository", stderr="fatal: not a git repository")
        return self.revision


class FakePublisher:
    """Publisher recording calls, optionally failing."""

    def __init__(self, output: str = "+ pkg@1.0.0", *, fail: bool = False) -> None:
        self.output = output
        self.fail = fail
        self.calls: list[Path] = []

    def publish(self, project_dir: str | Path) -> str:
        self.calls.append(Path(project_dir))
        if self.fail:
            raise ExternalActionError("npm publish exited with status 1", stderr="E403 Forbidden", returncode=1)
        return self.output


# ---------------------------------------------------------------------------
# Store and manager
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def store(home: Path) -> LocalWorkspaceStore:
    return LocalWorkspaceStore(home)


@pytest.fixture
def manager(store: LocalWorkspaceStore) -> WorkspaceManager:
    return WorkspaceManager(store)


# ---------------------------------------------------------------------------
# Project directory with a manifest
# ---------------------------------------------------------------------------


@pytest.fixture
def project(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def write_manifest(project: Path) -> Callable[..., Path]:
    """Write ``package.json`` into the project, from a dict or raw text."""

    def _write(content: dict | str) -> Path:
        text = content if isinstance(content, str) else json.dumps(content, indent=2) + "\n"
        manifest = project / "package.json"
        manifest.write_text(text, encoding="utf-8")
        return manifest

    return _write


# ---------------------------------------------------------------------------
# Collaborator fixtures (flip ``.fail`` to simulate failures)
# ---------------------------------------------------------------------------


@pytest.fixture
def revisions() -> FakeRevisions:
    return FakeRevisions()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()
