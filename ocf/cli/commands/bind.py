"""``ocf bind-service APP SERVICE`` and ``ocf unbind-service APP SERVICE``.

Emulate Cloud Foundry's ``cf bind-service`` / ``cf unbind-service`` by
copying (or removing) the service's credentials in the application's
deployment config environment.
"""

from __future__ import annotations

import typer
from rich.console import Console

from ocf.cli.commands import _shared
from ocf.config import OcfConfig
from ocf.core.errors import OcfError
from ocf.core.orchestrator import Orchestrator
from ocf.models.application import Application

console = Console()


def _orchestrator(app_name: str) -> Orchestrator:
    settings = OcfConfig()
    platform = _shared.build_platform(console, settings)
    return Orchestrator(
        Application(name=app_name), platform, console, service_port=settings.service_port
    )


def bind_cmd(
    app_name: str = typer.Argument(..., metavar="APP", help="Application to bind to."),
    service: str = typer.Argument(..., metavar="SERVICE", help="Service to bind."),
) -> None:
    """Bind a service to an application.

    Example: ``ocf bind-service my-app rails-postgres``
    """
    try:
        _orchestrator(app_name).bind_service(service)
    except OcfError as exc:
        _shared.fail(console, exc)
    console.print(
        f"[green]Bound service[/green] {service} [green]to[/green] {app_name}",
        highlight=False,
    )


def unbind_cmd(
    app_name: str = typer.Argument(..., metavar="APP", help="Application to unbind from."),
    service: str = typer.Argument(..., metavar="SERVICE", help="Service to unbind."),
) -> None:
    """Unbind a service from an application.

    Example: ``ocf unbind-service my-app rails-postgres``
    """
    try:
        _orchestrator(app_name).unbind_service(service)
    except OcfError as exc:
        _shared.fail(console, exc)
    console.print(
        f"[green]Unbound service[/green] {service} [green]from[/green] {app_name}",
        highlight=False,
    )
