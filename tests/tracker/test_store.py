"""Unit tests for LocalWorkspaceStore.

No network required -- uses a temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from snapshot_creator.tracker.models.workspace import PackageEntry, Workspace, WorkspaceConfig, WorkspaceSummary
from snapshot_creator.tracker.store.base import (
    InvalidWorkspaceNameError,
    StoreIOError,
    StoreParseError,
    WorkspaceStore,
)
from snapshot_creator.tracker.store.local import LocalWorkspaceStore


def test_implements_protocol(store: LocalWorkspaceStore) -> None:
    assert isinstance(store, WorkspaceStore)


def test_read_missing_records(store: LocalWorkspaceStore) -> None:
    assert store.read_config() is None
    assert store.read_workspace("default") is None
    assert store.workspace_exists("default") is False


def test_write_and_read_workspace(store: LocalWorkspaceStore, home: Path) -> None:
    ws = Workspace(name="team")
    ws.packages.append(PackageEntry(name="left-pad", version="1.2.0", git_hash="f" * 40, path="/src/left-pad"))
    store.write_workspace(ws)

    assert (home / "workspaces" / "team.json").is_file()
    result = store.read_workspace("team")
    assert result is not None
    assert result.name == "team"
    assert result.packages[0].version == "1.2.0"
    assert result.packages[0].git_hash == "f" * 40
    assert store.workspace_exists("team") is True


def test_records_use_camel_case_keys(store: LocalWorkspaceStore, home: Path) -> None:
    ws = Workspace(name="team")
    ws.packages.append(PackageEntry(name="a", version="1.0.0", git_hash="abc", path="/a"))
    store.write_workspace(ws)
    store.write_config(WorkspaceConfig(workspaces={"team": WorkspaceSummary()}))

    ws_data = json.loads((home / "workspaces" / "team.json").read_text())
    assert set(ws_data) == {"name", "packages", "created", "lastModified"}
    assert set(ws_data["packages"][0]) == {
        "name",
        "version",
        "gitHash",
        "path",
        "timestamp",
        "description",
        "published",
    }
    cfg_data = json.loads((home / "config.json").read_text())
    assert cfg_data["currentWorkspace"] == "default"
    assert set(cfg_data["workspaces"]["team"]) == {"created", "lastModified"}


def test_reads_records_from_earlier_releases(store: LocalWorkspaceStore, home: Path) -> None:
    home.mkdir(parents=True)
    (home / "config.json").write_text(
        json.dumps({
            "currentWorkspace": "",
            "workspaces": {
                "default": {
                    "name": "default",
                    "created": "2024-05-01T10:00:00.000Z",
                    "lastModified": "2024-05-02T10:00:00.000Z",
                }
            },
            "created": "2024-05-01T10:00:00.000Z",
        })
    )
    config = store.read_config()
    assert config is not None
    assert config.current_workspace == ""
    assert config.workspaces["default"].last_modified.day == 2


def test_delete_workspace(store: LocalWorkspaceStore) -> None:
    store.write_workspace(Workspace(name="team"))
    assert store.delete_workspace("team") is True
    assert store.workspace_exists("team") is False
    assert store.delete_workspace("team") is False


def test_invalid_json_raises_parse_error(store: LocalWorkspaceStore, home: Path) -> None:
    home.mkdir(parents=True)
    (home / "config.json").write_text("{not json")
    with pytest.raises(StoreParseError):
        store.read_config()


def test_invalid_utf8_raises_parse_error(store: LocalWorkspaceStore, home: Path) -> None:
    home.mkdir(parents=True)
    (home / "config.json").write_bytes(b'{"currentWorkspace": "\xff"}')
    with pytest.raises(StoreParseError, match="UTF-8"):
        store.read_config()


def test_invalid_record_raises_parse_error(store: LocalWorkspaceStore, home: Path) -> None:
    (home / "workspaces").mkdir(parents=True)
    (home / "workspaces" / "team.json").write_text('{"packages": "nope"}')
    with pytest.raises(StoreParseError):
        store.read_workspace("team")


def test_unwritable_root_raises_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = LocalWorkspaceStore(blocker / "home")
    with pytest.raises(StoreIOError):
        store.write_config(WorkspaceConfig())


def test_write_leaves_no_temp_files(store: LocalWorkspaceStore, home: Path) -> None:
    store.write_config(WorkspaceConfig())
    store.write_workspace(Workspace(name="default"))
    assert sorted(p.name for p in home.rglob("*") if p.is_file()) == ["config.json", "default.json"]


@pytest.mark.parametrize("name", ["", "../escape", "a/b", "a\\b", ".hidden"])
def test_invalid_workspace_names(store: LocalWorkspaceStore, name: str) -> None:
    with pytest.raises(InvalidWorkspaceNameError):
        store.workspace_path(name)


def test_workspace_named_config_does_not_clash(store: LocalWorkspaceStore) -> None:
    store.write_config(WorkspaceConfig(current_workspace="config"))
    store.write_workspace(Workspace(name="config"))

    config = store.read_config()
    ws = store.read_workspace("config")
    assert config is not None and config.current_workspace == "config"
    assert ws is not None and ws.name == "config"
