"""Exception hierarchy shared by the core modules.

Library code raises; only the CLI decides how an error is reported and
which exit code the process ends with.
"""

from __future__ import annotations

from collections.abc import Sequence


class OcfError(RuntimeError):
    """Base class for every error the CLI reports to the user."""


class CommandError(OcfError):
    """Raised when an external command cannot be spawned or exits non-zero.

    Parameters
    ----------
    args:
        The full argument vector of the failed command.
    returncode:
        Exit status, or ``None`` when the process could not be started.
    output:
        Combined stdout/stderr captured from the command, if any.
    """

    def __init__(
        self,
        args: Sequence[str],
        returncode: int | None,
        output: bytes = b"",
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"Could not run {' '.join(self.command)}"
        else:
            message = f"{' '.join(self.command)} exited with status {returncode}"
        super().__init__(message)

    @property
    def output_text(self) -> str:
        return self.output.decode("utf-8", errors="replace")


class PlatformError(OcfError):
    """Raised when a typed platform operation fails."""

    def __init__(self, message: str, output: str = "") -> None:
        self.output = output
        super().__init__(message)


class AppConfigError(OcfError):
    """Raised for invalid application settings or manifest selection."""


class BindingError(OcfError):
    """Raised when a service cannot be bound to or unbound from an app."""
