"""Workspace operations on top of a WorkspaceStore.

Encapsulates workspace lifecycle and bookkeeping: default-name resolution,
init-on-miss, the config summary kept alongside each workspace record,
package upserts, deletion with current-workspace reassignment, and
switching.
"""

from __future__ import annotations

from loguru import logger

from snapshot_creator.tracker.models.enums import UpsertAction
from snapshot_creator.tracker.models.workspace import (
    DEFAULT_WORKSPACE,
    PackageEntry,
    Workspace,
    WorkspaceConfig,
    WorkspaceSummary,
    utcnow,
)
from snapshot_creator.tracker.store.base import StoreError, WorkspaceStore


class WorkspaceNotFoundError(LookupError):
    """The named workspace has no data record."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace '{name}' does not exist")
        self.name = name


class DuplicateWorkspaceError(ValueError):
    """Raised when creating a workspace that already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace '{name}' already exists")
        self.name = name


class WorkspaceSaveError(StoreError):
    """One or both writes of ``save_workspace`` failed.

    Both writes are always attempted; the flags tell which one landed.
    """

    def __init__(self, name: str, *, workspace_saved: bool, config_saved: bool, errors: list[str]) -> None:
        super().__init__(f"Failed to save workspace '{name}': " + "; ".join(errors))
        self.name = name
        self.workspace_saved = workspace_saved
        self.config_saved = config_saved
        self.errors = errors


class WorkspaceManager:
    """Workspace lifecycle backed by an injected store."""

    def __init__(self, store: WorkspaceStore, default_workspace: str = DEFAULT_WORKSPACE) -> None:
        self.store = store
        self.default_workspace = default_workspace

    # -- Config ----------------------------------------------------------------

    def load_config(self) -> WorkspaceConfig:
        """Return the persisted config, or a fresh unsaved one."""
        config = self.store.read_config()
        if config is None:
            return WorkspaceConfig(current_workspace=self.default_workspace)
        if not config.current_workspace:
            config.current_workspace = self.default_workspace
        return config

    def save_config(self, config: WorkspaceConfig) -> None:
        self.store.write_config(config)

    def resolve_name(self, name: str | None = None, config: WorkspaceConfig | None = None) -> str:
        """Explicit name, else the current workspace, else the default."""
        if name:
            return name
        if config is None:
            config = self.load_config()
        return config.current_workspace or self.default_workspace

    def current_workspace(self) -> str:
        return self.resolve_name()

    # -- Workspace lifecycle ---------------------------------------------------

    def ensure_workspace(self, name: str | None = None) -> Workspace:
        """Return the workspace, creating and registering it if absent.

        Idempotent: a second call with the same name reads the record the
        first call wrote.
        """
        config = self.load_config()
        ws_name = self.resolve_name(name, config)

        existing = self.store.read_workspace(ws_name)
        if existing is not None:
            return _bind_name(existing, ws_name)

        workspace = Workspace(name=ws_name)
        workspace.last_modified = workspace.created
        self.store.write_workspace(workspace)

        config.workspaces[ws_name] = WorkspaceSummary(created=workspace.created, last_modified=workspace.created)
        self.store.write_config(config)
        logger.info("Workspace '{}' initialized", ws_name)
        return workspace

    def load_workspace(self, name: str | None = None) -> Workspace:
        ws_name = self.resolve_name(name)
        workspace = self.store.read_workspace(ws_name)
        if workspace is None:
            return self.ensure_workspace(ws_name)
        return _bind_name(workspace, ws_name)

    def create_workspace(self, name: str) -> Workspace:
        """Create a new workspace.  Raises ``DuplicateWorkspaceError`` if it exists."""
        config = self.load_config()
        if name in config.workspaces or self.store.workspace_exists(name):
            raise DuplicateWorkspaceError(name)
        return self.ensure_workspace(name)

    def save_workspace(self, workspace: Workspace, name: str | None = None) -> None:
        """Persist the workspace record, then its summary in the config.

        The two writes are not a transaction.  Both are attempted even if
        the first fails; any failure raises ``WorkspaceSaveError`` afterwards.
        """
        errors: list[str] = []

        config: WorkspaceConfig | None
        try:
            config = self.load_config()
        except StoreError as exc:
            logger.error("Cannot load config while saving workspace: {}", exc)
            errors.append(str(exc))
            config = None

        ws_name = name or workspace.name or (config.current_workspace if config else self.default_workspace)
        workspace.name = ws_name
        workspace.last_modified = utcnow()

        workspace_saved = False
        try:
            self.store.write_workspace(workspace)
            workspace_saved = True
        except StoreError as exc:
            logger.error("Cannot write workspace '{}': {}", ws_name, exc)
            errors.append(str(exc))

        config_saved = False
        if config is not None:
            config.workspaces[ws_name] = WorkspaceSummary(
                created=workspace.created,
                last_modified=workspace.last_modified,
            )
            try:
                self.store.write_config(config)
                config_saved = True
            except StoreError as exc:
                logger.error("Cannot write config for workspace '{}': {}", ws_name, exc)
                errors.append(str(exc))

        if errors:
            raise WorkspaceSaveError(
                ws_name,
                workspace_saved=workspace_saved,
                config_saved=config_saved,
                errors=errors,
            )
        logger.debug("Workspace '{}' saved ({} packages)", ws_name, len(workspace.packages))

    def delete_workspace(self, name: str | None = None) -> WorkspaceConfig:
        """Delete a workspace record and its config entry.

        If it was current, the first remaining workspace (config order)
        becomes current, else the default name.  Raises
        ``WorkspaceNotFoundError`` if neither a record nor a config entry
        exists.
        """
        config = self.load_config()
        ws_name = self.resolve_name(name, config)

        deleted = self.store.delete_workspace(ws_name)
        listed = config.workspaces.pop(ws_name, None) is not None
        if not deleted and not listed:
            raise WorkspaceNotFoundError(ws_name)
        if not deleted:
            logger.warning("Workspace '{}' had no data record; dropping its config entry", ws_name)

        if config.current_workspace == ws_name:
            config.current_workspace = next(iter(config.workspaces), self.default_workspace)
            logger.info("Current workspace reassigned to '{}'", config.current_workspace)

        self.store.write_config(config)
        logger.info("Workspace '{}' deleted", ws_name)
        return config

    def switch_workspace(self, name: str) -> WorkspaceConfig:
        """Make ``name`` current.  Never creates the workspace."""
        if not self.store.workspace_exists(name):
            raise WorkspaceNotFoundError(name)
        config = self.load_config()
        config.current_workspace = name
        self.store.write_config(config)
        logger.info("Switched to workspace '{}'", name)
        return config

    def list_workspaces(self) -> list[tuple[str, WorkspaceSummary, bool]]:
        """Return ``(name, summary, is_current)`` for every registered workspace."""
        config = self.load_config()
        return [
            (ws_name, summary, ws_name == config.current_workspace) for ws_name, summary in config.workspaces.items()
        ]

    # -- Packages --------------------------------------------------------------

    def upsert_package_entry(self, workspace: Workspace, entry: PackageEntry) -> UpsertAction:
        """Insert or replace by ``(name, path)``; does not save."""
        action = workspace.upsert(entry)
        logger.debug("Package {} {} in workspace '{}' ({})", entry.name, action, workspace.name, entry.path)
        return action


def _bind_name(workspace: Workspace, key: str) -> Workspace:
    if workspace.name != key:
        logger.warning("Workspace record '{}' is named '{}'; using the record key", key, workspace.name)
        workspace.name = key
    return workspace
