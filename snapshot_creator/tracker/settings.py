"""Tool configuration loaded from SS_* environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class SnapshotSettings(BaseSettings):
    """snapshot-creator settings.

    All fields are read from environment variables with the ``SS_`` prefix.
    For example, ``SS_LOG_LEVEL=DEBUG`` maps to ``log_level``.  Command-line
    flags take precedence over these values for a single invocation.
    """

    model_config = SettingsConfigDict(
        env_prefix="SS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Workspace store -------------------------------------------------------
    home: Path = Path.home() / ".snapshot-creator"
    """Directory holding ``config.json`` and the per-workspace records."""

    default_workspace: str = "default"
    """Workspace used when none is selected and no name is given."""

    # -- Project ---------------------------------------------------------------
    manifest_name: str = "package.json"

    publish_command: str = "npm publish"
    """Shell-split command run in the project directory by ``ss publish``.

    No timeout is applied: the command blocks until it exits.
    """


def get_settings() -> SnapshotSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to
    force a re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> SnapshotSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return SnapshotSettings()


from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
