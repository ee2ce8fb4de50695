from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click
from loguru import logger

from snapshot_creator.tracker.execution.external import CommandPublisher, ExternalActionError, GitRevisionProvider
from snapshot_creator.tracker.execution.publish import PackageTracker, TrackResult
from snapshot_creator.tracker.log import setup_logging
from snapshot_creator.tracker.managers.workspaces import (
    DuplicateWorkspaceError,
    WorkspaceManager,
    WorkspaceNotFoundError,
)
from snapshot_creator.tracker.models.enums import PublishOutcome, UpsertAction
from snapshot_creator.tracker.settings import SnapshotSettings, get_settings
from snapshot_creator.tracker.store.base import InvalidWorkspaceNameError, StoreError
from snapshot_creator.tracker.store.local import LocalWorkspaceStore
from snapshot_creator.tracker.versioning.manifest import ManifestError, read_manifest_text, write_manifest
from snapshot_creator.tracker.versioning.snapshot import InvalidVersionError, create_snapshot
from snapshot_creator.tracker.versioning.sync import sync_dependencies

_OPERATION_ERRORS = (
    ManifestError,
    StoreError,
    ExternalActionError,
    InvalidVersionError,
    InvalidWorkspaceNameError,
)


@dataclass
class AppContext:
    settings: SnapshotSettings
    manager: WorkspaceManager
    project_dir: Path

    def tracker(self) -> PackageTracker:
        return PackageTracker(
            self.manager,
            CommandPublisher(self.settings.publish_command),
            GitRevisionProvider(),
            manifest_name=self.settings.manifest_name,
        )


pass_app = click.make_pass_decorator(AppContext)


@contextmanager
def _operation(action: str) -> Iterator[None]:
    """Turn domain failures into a CLI error (exit status 1)."""
    try:
        yield
    except _OPERATION_ERRORS as exc:
        logger.opt(exception=exc).debug("{} failed", action)
        raise click.ClickException(f"{action} failed: {exc}") from exc


def _echo_track(result: TrackResult) -> None:
    verb = "Updated" if result.action == UpsertAction.UPDATED else "Added"
    prep = "in" if result.action == UpsertAction.UPDATED else "to"
    click.echo(f"{verb} {result.entry.name} {prep} workspace '{result.workspace}'")


# ---------------------------------------------------------------------------
# Root group and snapshot creation
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace store directory (default: from SS_HOME or ~/.snapshot-creator).",
)
@click.option(
    "--project-dir",
    "-C",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Project directory holding the manifest (default: current directory).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr.")
@click.option(
    "--workspace",
    "-w",
    is_flag=True,
    default=False,
    help="Include the current workspace name in the snapshot version.",
)
@click.pass_context
def main(ctx: click.Context, home: Path | None, project_dir: Path, verbose: bool, workspace: bool) -> None:
    """snapshot-creator - snapshot versions and workspace-tracked dependencies.

    Without a command, creates a snapshot version for the current project.
    """
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)

    store = LocalWorkspaceStore(home or settings.home)
    ctx.obj = AppContext(
        settings=settings,
        manager=WorkspaceManager(store, settings.default_workspace),
        project_dir=project_dir.resolve(),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(create, workspace=workspace)


@main.command()
@click.option(
    "--workspace",
    "-w",
    is_flag=True,
    default=False,
    help="Include the current workspace name in the snapshot version.",
)
@pass_app
def create(app: AppContext, workspace: bool) -> None:
    """Write a new snapshot version into the project's manifest."""
    with _operation("Snapshot"):
        ws_name = app.manager.current_workspace() if workspace else None
        try:
            result = create_snapshot(
                app.project_dir,
                GitRevisionProvider(),
                manifest_name=app.settings.manifest_name,
                workspace_name=ws_name,
            )
        except ExternalActionError as exc:
            logger.opt(exception=exc).debug("Revision lookup failed")
            msg = f"{exc}\nYou may not currently be using this command in a git repo."
            raise click.ClickException(msg) from exc

    if result.fresh:
        click.echo("Creating brand new snapshot (minor version bumped)...")
    else:
        click.echo("Previous snapshot found, replacing revision...")
    if ws_name:
        click.echo(f"Creating snapshot for workspace '{ws_name}': {result.new_version}")
    else:
        click.echo(f"Creating snapshot: {result.new_version}")
    click.echo("Success!")


main.add_command(create, name="build")


# ---------------------------------------------------------------------------
# Publish / track
# ---------------------------------------------------------------------------


@click.command()
@pass_app
@click.pass_context
def publish(ctx: click.Context, app: AppContext) -> None:
    """Publish the current package and add it to the workspace on success."""
    with _operation("Publish"):
        report = app.tracker().publish(app.project_dir)

    if report.output:
        click.echo(report.output.rstrip())

    if report.outcome == PublishOutcome.FAILED:
        raise click.ClickException(
            f"Failed to publish {report.package}@{report.version}: {report.error}\n"
            "Package was not added to workspace due to publish failure."
        )

    click.echo(f"Package {report.package}@{report.version} published successfully!")

    if report.outcome == PublishOutcome.PUBLISHED_NOT_RECORDED:
        click.echo(
            f"Package published but failed to add to workspace: {report.error}\n"
            "Run 'ss workspace add' in this directory to record it.",
            err=True,
        )
        ctx.exit(2)

    if report.track is not None:
        _echo_track(report.track)
    click.echo("Package added to workspace!")


main.add_command(publish)


# ---------------------------------------------------------------------------
# Workspace management
# ---------------------------------------------------------------------------


@main.group()
def workspace() -> None:
    """Manage your snapshot workspaces."""


main.add_command(workspace, name="ws")
workspace.add_command(publish)


@workspace.command()
@pass_app
def add(app: AppContext) -> None:
    """Add the current package to the workspace without publishing."""
    with _operation("Add to workspace"):
        result = app.tracker().add(app.project_dir)
    _echo_track(result)
    click.echo("Workspace saved successfully!")


@workspace.command()
@pass_app
@click.pass_context
def sync(ctx: click.Context, app: AppContext) -> None:
    """Sync workspace versions into the manifest's dependencies."""
    with _operation("Sync"):
        path, text = read_manifest_text(app.project_dir, app.settings.manifest_name)
        ws = app.manager.load_workspace()
        if not ws.packages:
            click.echo(f"Workspace '{ws.name}' is empty. Use \"ss workspace publish\" to publish and add packages first.")
            return

        click.echo(f"Syncing dependencies of {path} against workspace '{ws.name}'...")
        result = sync_dependencies(text, ws, source=str(path))

        for update in result.updates:
            click.echo(f"  {update.name}: {update.old_version} -> {update.new_version} ({update.section})")
        for current in result.current:
            click.echo(f"  {current.name}: already at {current.version} ({current.section})")
        for failed in result.failed:
            click.echo(
                f"  {failed.name}: could not patch {failed.old_version} -> {failed.new_version} ({failed.section})",
                err=True,
            )

        if not result.matched:
            click.echo("No matching packages found in workspace for current dependencies.")
            return

        if result.updates:
            write_manifest(path, result.patched_document)

    if result.updates:
        click.echo(f"\nSuccessfully updated {len(result.updates)} dependencies!")
        if result.current_count:
            click.echo(f"{result.current_count} dependencies were already up to date.")
        click.echo('\nDon\'t forget to run "npm install" to install the updated dependencies.')
    elif result.current_count and not result.failed:
        click.echo(f"\nAll {result.current_count} matching dependencies are already up to date!")

    if result.failed:
        click.echo(f"\n{len(result.failed)} dependencies could not be patched; edit them by hand.", err=True)
        ctx.exit(1)


@workspace.command(name="list")
@click.option("--name", "-n", default=None, help="Workspace name to list (defaults to current workspace).")
@pass_app
def list_packages(app: AppContext, name: str | None) -> None:
    """List all packages in a workspace."""
    with _operation("List"):
        ws_name = app.manager.resolve_name(name)
        ws = app.manager.store.read_workspace(ws_name)

    if ws is None or not ws.packages:
        click.echo(f"Workspace '{ws_name}' is empty. Use \"ss workspace publish\" to publish and add packages.")
        return

    click.echo(f"\n=== Workspace: {ws_name} ===")
    click.echo(f"Total packages: {len(ws.packages)}")
    click.echo(f"Workspace created: {ws.created.astimezone():%Y-%m-%d}\n")
    for index, pkg in enumerate(ws.packages, start=1):
        click.echo(f"{index}. {pkg.name}")
        click.echo(f"   Version: {pkg.version}")
        click.echo(f"   Git Hash: {pkg.git_hash[:8]}...")
        click.echo(f"   Path: {pkg.path}")
        click.echo(f"   Added: {pkg.timestamp.astimezone():%Y-%m-%d %H:%M:%S}")
        click.echo(f"   Published: {'Yes' if pkg.published else 'No'}")
        if pkg.description:
            click.echo(f"   Description: {pkg.description}")
        click.echo("")


@workspace.command()
@click.option("--name", "-n", default=None, help="Workspace name to clear (defaults to current workspace).")
@pass_app
def clear(app: AppContext, name: str | None) -> None:
    """Delete a workspace."""
    with _operation("Clear"):
        ws_name = app.manager.resolve_name(name)
        try:
            config = app.manager.delete_workspace(ws_name)
        except WorkspaceNotFoundError:
            click.echo(f"No workspace '{ws_name}' found to clear.")
            return

    click.echo(f"Workspace '{ws_name}' cleared successfully!")
    click.echo(f"Current workspace: {config.current_workspace}")


@workspace.command(name="create")
@click.option("--name", "-n", required=True, help="Name of the workspace to create.")
@pass_app
def create_workspace(app: AppContext, name: str) -> None:
    """Create a new workspace."""
    with _operation("Create workspace"):
        try:
            app.manager.create_workspace(name)
        except DuplicateWorkspaceError:
            click.echo(f"Workspace '{name}' already exists.")
            return
    click.echo(f"Workspace '{name}' created successfully!")


@workspace.command()
@click.option("--name", "-n", required=True, help="Name of the workspace to switch to.")
@pass_app
@click.pass_context
def use(ctx: click.Context, app: AppContext, name: str) -> None:
    """Switch to a different workspace."""
    with _operation("Switch workspace"):
        try:
            app.manager.switch_workspace(name)
        except WorkspaceNotFoundError:
            click.echo(f"Workspace '{name}' does not exist. Available workspaces:", err=True)
            ctx.invoke(ls)
            ctx.exit(1)
    click.echo(f"Switched to workspace '{name}'")


@workspace.command()
@pass_app
def current(app: AppContext) -> None:
    """Show the current workspace."""
    with _operation("Current workspace"):
        click.echo(f"Current workspace: {app.manager.current_workspace()}")


@workspace.command()
@pass_app
def ls(app: AppContext) -> None:
    """List all available workspaces."""
    with _operation("List workspaces"):
        entries = app.manager.list_workspaces()

    if not entries:
        click.echo('No workspaces found. Use "ss workspace create --name <name>" to create one.')
        return

    click.echo("\n=== Available Workspaces ===")
    for ws_name, summary, is_current in entries:
        marker = "* " if is_current else "  "
        click.echo(f"{marker}{ws_name} (created: {summary.created.astimezone():%Y-%m-%d})")
    click.echo("")


if __name__ == "__main__":
    main()
