"""Main Typer application — imports and registers all CLI commands.

Entry point: ``ocf`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ocf.cli.commands.bind import bind_cmd, unbind_cmd
from ocf.cli.commands.push import PUSH_EXAMPLES, push_cmd
from ocf.config import OcfConfig

app = typer.Typer(
    name="ocf",
    help=(
        "A tool to ease migration from Cloud Foundry to OpenShift.\n\n"
        "Provides Cloud Foundry style commands that run against OpenShift."
    ),
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(
    name="push",
    help="Create a new application or update an existing one.",
    epilog=PUSH_EXAMPLES,
)(push_cmd)
app.command(name="bind-service", help="Bind a service to an application.")(bind_cmd)
app.command(name="unbind-service", help="Unbind a service from an application.")(unbind_cmd)


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """A tool to ease migration from Cloud Foundry to OpenShift."""
    settings = OcfConfig()
    configure_logging("DEBUG" if debug else settings.effective_log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
