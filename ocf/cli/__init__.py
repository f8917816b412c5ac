"""ocf CLI — Typer-based command-line interface.

Provides the ``ocf`` command with ``push``, ``bind-service`` and
``unbind-service`` subcommands.

All output uses Rich for formatted terminal display.
"""
