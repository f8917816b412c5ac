"""Helpers shared by the CLI commands: platform wiring and error reporting."""

from __future__ import annotations

import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from ocf.config import OcfConfig
from ocf.core.errors import CommandError, OcfError, PlatformError
from ocf.core.exec import OcRunner
from ocf.core.oc import OcClient, PlatformClient

logger = logging.getLogger(__name__)


def build_platform(console: Console, settings: OcfConfig) -> PlatformClient:
    """Return the default platform client for *settings*."""
    return OcClient(OcRunner(settings.oc_binary), console=console)


def fail(console: Console, exc: OcfError) -> NoReturn:
    """Print *exc* (and any captured platform output) and exit with code 1."""
    output = ""
    if isinstance(exc, CommandError):
        output = exc.output_text
    elif isinstance(exc, PlatformError):
        output = exc.output
    if output and output not in str(exc):
        console.out(output, highlight=False)
    logger.debug("Command failed", exc_info=exc)
    console.print(
        f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}",
        highlight=False,
        soft_wrap=True,
    )
    raise typer.Exit(code=1)
