"""Pluggable command execution for platform calls.

Defines the ``Command`` and ``CommandRunner`` Protocols that the platform
client is built on, along with the default subprocess-backed
implementations.

Every call spawns exactly one external process and blocks until it exits.
There are no retries and no timeouts.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ocf.core.errors import CommandError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class Command(Protocol):
    """A single prepared external command."""

    def run(self) -> None:
        """Run the command, raising ``CommandError`` on failure."""
        ...

    def combined_output(self) -> bytes:
        """Run the command and return stdout and stderr merged.

        Raises ``CommandError`` carrying the captured output on failure.
        """
        ...

    def attach_interactive_io(self) -> None:
        """Connect the command to the caller's stdin, stdout and stderr."""
        ...

    def args_string(self) -> str:
        """Render the argument vector for progress messages."""
        ...


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for raw process execution backends.

    Any object with an ``execute(*args) -> Command`` method satisfies this
    protocol.  Tests substitute fakes that record the argument vectors.
    """

    def execute(self, *args: str) -> Command:
        ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------


class SubprocessCommand:
    """``Command`` backed by :func:`subprocess.run`.

    Parameters
    ----------
    args:
        Full argument vector, binary first.
    """

    def __init__(self, args: Sequence[str]) -> None:
        self.args = list(args)
        self._interactive = False

    def attach_interactive_io(self) -> None:
        self._interactive = True

    def args_string(self) -> str:
        return " ".join(self.args)

    def run(self) -> None:
        # Without interactive IO the output is discarded.
        stream = None if self._interactive else subprocess.DEVNULL
        self._spawn(stdin=stream, stdout=stream, stderr=stream)

    def combined_output(self) -> bytes:
        return self._spawn(stdout=subprocess.PIPE, stderr=subprocess.STDOUT)

    def _spawn(self, **streams) -> bytes:
        logger.debug("Executing: %s", self.args_string())
        try:
            result = subprocess.run(self.args, check=False, **streams)
        except OSError as exc:
            raise CommandError(self.args, None, str(exc).encode()) from exc

        output = result.stdout or b""
        if result.returncode != 0:
            logger.debug(
                "Command %s exited with status %d", self.args[0], result.returncode
            )
            raise CommandError(self.args, result.returncode, output)
        return output


class OcRunner:
    """Default ``CommandRunner`` that prefixes every call with the ``oc`` binary.

    Parameters
    ----------
    binary:
        Name or path of the platform binary.
    """

    def __init__(self, binary: str = "oc") -> None:
        self.binary = binary

    def execute(self, *args: str) -> SubprocessCommand:
        return SubprocessCommand([self.binary, *args])
