"""Manifest loading and merging with command-line overrides.

A manifest lists one or more applications.  The command-line flags
describe at most one application, and the two are combined as follows:

- no manifest entries: the flags application is used and must be named;
- one entry: every non-empty flag value overwrites the manifest field;
- several entries: a flag name selects one entry, otherwise all are used.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pydantic
import yaml

from ocf.core.errors import AppConfigError
from ocf.models.application import Application, Manifest, normalize_memory

logger = logging.getLogger(__name__)

# Flag values that mean "reset to the platform default".
_RESET_VALUES = frozenset({"null", "default"})

# Fields a flag may override on a single manifest entry.
_OVERRIDABLE_FIELDS = ("name", "buildpack", "command", "memory", "path")


def resolve_manifest_path(
    manifest_path: str | Path | None,
    manifest_name: str = "manifest.yml",
) -> Path:
    """Return the manifest file to read.

    A directory means ``<dir>/<manifest_name>``; no path means the current
    working directory.
    """
    path = Path(manifest_path) if manifest_path else Path.cwd()
    if path.is_dir():
        path = path / manifest_name
    return path


def load_manifest_apps(
    manifest_path: str | Path | None = None,
    manifest_name: str = "manifest.yml",
) -> list[Application]:
    """Read the applications listed in a manifest.

    A missing file is not an error; it yields no applications.
    """
    path = resolve_manifest_path(manifest_path, manifest_name)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No manifest at %s", path)
        return []
    except OSError as exc:
        raise AppConfigError(f"Could not read manifest {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text) or {}
        manifest = Manifest.model_validate(data)
    except yaml.YAMLError as exc:
        raise AppConfigError(f"Invalid manifest {path}: {exc}") from exc
    except pydantic.ValidationError as exc:
        raise AppConfigError(f"Invalid manifest {path}: {exc}") from exc

    logger.debug("Manifest %s: %s", path, manifest)
    return list(manifest.applications)


def flags_app(
    name: str = "",
    *,
    buildpack: str = "",
    command: str = "",
    memory: str = "",
    path: str = "",
) -> Application:
    """Build the application described by command-line flags."""
    if buildpack in _RESET_VALUES:
        buildpack = ""
    if command in _RESET_VALUES:
        command = ""
    if memory:
        try:
            memory = normalize_memory(memory)
        except ValueError as exc:
            raise AppConfigError(str(exc)) from exc
    return Application(
        name=name, buildpack=buildpack, command=command, memory=memory, path=path
    )


def merge_apps(
    manifest_apps: list[Application],
    flags: Application,
    cwd: str | None = None,
) -> list[Application]:
    """Combine manifest entries with the flags application.

    Raises ``AppConfigError`` when no usable application can be produced.
    """
    if not manifest_apps:
        if not flags.name:
            raise AppConfigError(
                "Manifest file is not found in the current directory, "
                "please provide either an app name or manifest"
            )
        selected = [flags]
    elif len(manifest_apps) == 1:
        overrides = {
            field: getattr(flags, field)
            for field in _OVERRIDABLE_FIELDS
            if getattr(flags, field)
        }
        selected = [manifest_apps[0].model_copy(update=overrides)]
    elif flags.name:
        selected = [app for app in manifest_apps if app.name == flags.name]
        if not selected:
            raise AppConfigError(f"Could not find app named {flags.name} in manifest")
    else:
        selected = list(manifest_apps)

    return [_finalize(app, cwd) for app in selected]


def _finalize(app: Application, cwd: str | None) -> Application:
    if not app.name:
        raise AppConfigError("App name is a required field")
    if not app.path:
        app = app.model_copy(update={"path": cwd or os.getcwd()})
    return app
