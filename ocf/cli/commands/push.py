"""``ocf push`` — create a new application or update an existing one.

Emulates Cloud Foundry's ``cf push`` against OpenShift.  Applications come
from ``manifest.yml`` merged with the flags below; each one is pushed in
turn and the first failure stops the command.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from ocf.cli.commands import _shared
from ocf.config import OcfConfig
from ocf.core.errors import OcfError
from ocf.core.manifest import flags_app, load_manifest_apps, merge_apps
from ocf.core.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

console = Console()

PUSH_EXAMPLES = (
    "[bold]Examples[/bold]\n\n"
    "Create a new application named my-new-app from the code in the current "
    "directory: [cyan]ocf push my-new-app[/cyan]\n\n"
    "Create or update applications from ./manifest.yml: [cyan]ocf push[/cyan]"
)


def push_cmd(
    name: str = typer.Argument(
        None,
        help="Application name; selects an entry when the manifest lists several.",
        show_default=False,
    ),
    buildpack: str = typer.Option(
        "",
        "--buildpack",
        "-b",
        help=(
            "Custom buildpack by Git URL (e.g. "
            "'https://github.com/cloudfoundry/java-buildpack.git'), optionally "
            "with '#branch-or-tag'. Use 'default' or 'null' for built-in buildpacks."
        ),
    ),
    command: str = typer.Option(
        "",
        "--command",
        "-c",
        help="Startup command, set to null to reset to default start command.",
    ),
    manifest_path: str = typer.Option(
        "",
        "--manifest-path",
        "-f",
        help="Path to manifest.",
    ),
    memory: str = typer.Option(
        "",
        "--memory",
        "-m",
        help="Memory limit (e.g. 256M, 1024M, 1G).",
    ),
    path: str = typer.Option(
        "",
        "--path",
        "-p",
        help="Path to app directory or to a zip file of the contents of the app directory.",
    ),
    image: str = typer.Option(
        None,
        "--image",
        help="Base Docker image to use when building and deploying applications.",
        show_default=False,
    ),
) -> None:
    """Create a new application or update an existing one."""
    settings = OcfConfig()
    try:
        flags = flags_app(
            name or "", buildpack=buildpack, command=command, memory=memory, path=path
        )
        logger.debug("Flags app: %s", flags)
        manifest_apps = load_manifest_apps(manifest_path or None, settings.manifest_name)
        apps = merge_apps(manifest_apps, flags)
        logger.debug("Merged apps: %s", apps)

        platform = _shared.build_platform(console, settings)
        for app in apps:
            orchestrator = Orchestrator(
                app, platform, console, service_port=settings.service_port
            )
            orchestrator.push(image or settings.default_image)
    except OcfError as exc:
        _shared.fail(console, exc)
