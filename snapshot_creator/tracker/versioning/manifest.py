"""Reading and rewriting the project manifest.

The manifest is always kept as raw text alongside its parsed view: the
parsed view answers questions (name, version, declared dependencies), the
raw text is what gets patched and written back.  Line endings are preserved
as found.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from snapshot_creator.tracker.models.manifest import ManifestInfo

DEFAULT_MANIFEST = "package.json"


class ManifestError(Exception):
    """Base class for manifest failures."""


class ManifestIOError(ManifestError):
    """The manifest could not be read or written."""


class ManifestParseError(ManifestError, ValueError):
    """The manifest is not valid JSON or lacks a required field."""


@dataclass
class ProjectManifest:
    path: Path
    text: str
    info: ManifestInfo


def load_manifest_json(text: str, source: str = DEFAULT_MANIFEST) -> dict:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestParseError(f"{source} must contain a JSON object")
    return data


def parse_manifest(text: str, source: str = DEFAULT_MANIFEST) -> ManifestInfo:
    data = load_manifest_json(text, source)
    try:
        return ManifestInfo.model_validate(data)
    except ValidationError as exc:
        raise ManifestParseError(f"{source} is missing required fields: {exc}") from exc


def read_manifest_text(project_dir: str | Path, manifest_name: str = DEFAULT_MANIFEST) -> tuple[Path, str]:
    path = Path(project_dir) / manifest_name
    try:
        with path.open(encoding="utf-8", newline="") as f:
            return path, f.read()
    except UnicodeDecodeError as exc:
        raise ManifestParseError(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ManifestIOError(f"Cannot read {path}: {exc}") from exc


def read_manifest(project_dir: str | Path, manifest_name: str = DEFAULT_MANIFEST) -> ProjectManifest:
    """Read and parse ``{project_dir}/{manifest_name}``."""
    path, text = read_manifest_text(project_dir, manifest_name)
    return ProjectManifest(path=path, text=text, info=parse_manifest(text, str(path)))


def write_manifest(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        raise ManifestIOError(f"Cannot write {path}: {exc}") from exc
    logger.debug("Manifest written: {}", path)
