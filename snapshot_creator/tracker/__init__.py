"""Workspace store, manifest versioning and publish tracking behind the ``ss`` CLI."""
