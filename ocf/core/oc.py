"""Typed platform operations on top of a ``CommandRunner``.

``OcClient`` is the only place that knows the ``oc`` argument syntax for
the operations below and how to read their output.

Existence detection relies on ``oc`` printing the literal text
``not found`` for absent objects.  A change in that wording silently
breaks ``exists``; keep the check as is until ``oc`` offers a
machine-readable status that can be relied on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from rich.console import Console

from ocf.core.env_codec import encode_env, parse_env_listing
from ocf.core.errors import CommandError, PlatformError
from ocf.core.exec import Command, CommandRunner
from ocf.models.platform import EnvironmentMap, ResourceType

logger = logging.getLogger(__name__)

NOT_FOUND_MARKER = "not found"


@runtime_checkable
class PlatformClient(Protocol):
    """Protocol for typed platform operations.

    The orchestrator depends only on this protocol, so tests can replace
    the whole platform layer without faking individual commands.
    """

    def logged_in(self) -> bool: ...

    def current_project(self) -> str: ...

    def exists(self, obj_type: ResourceType, name: str) -> bool: ...

    def create_build(self, image: str, name: str, env: Mapping[str, str]) -> None: ...

    def read_env(self, obj_type: ResourceType, name: str) -> EnvironmentMap: ...

    def write_env(self, obj_type: ResourceType, name: str, env: Mapping[str, str]) -> None: ...

    def command(self, *args: str) -> Command: ...


class OcClient:
    """Default ``PlatformClient`` built purely on a ``CommandRunner``.

    Parameters
    ----------
    runner:
        Process execution backend.
    console:
        Rich Console used for progress lines and echoed output.
    """

    def __init__(self, runner: CommandRunner, console: Console | None = None) -> None:
        self._runner = runner
        self.console = console or Console()

    def command(self, *args: str) -> Command:
        return self._runner.execute(*args)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def logged_in(self) -> bool:
        """Whether ``oc whoami`` succeeds.  Any failure means not logged in."""
        try:
            self.command("whoami").run()
        except CommandError:
            return False
        return True

    def current_project(self) -> str:
        """Return the raw ``oc project -q`` output.

        Raises ``CommandError`` unchanged when the query fails.
        """
        output = self.command("project", "-q").combined_output()
        return output.decode(errors="replace")

    def exists(self, obj_type: ResourceType, name: str) -> bool:
        """Whether the object exists.

        Output containing ``not found`` means absent even if the command
        failed; any other failure raises ``PlatformError``.
        """
        error: CommandError | None = None
        try:
            output = self.command("get", str(obj_type), name).combined_output()
        except CommandError as exc:
            output = exc.output
            error = exc

        text = output.decode(errors="replace")
        if NOT_FOUND_MARKER in text:
            return False
        if error is not None:
            raise PlatformError(f"Error getting {obj_type} {name}: {text}", text) from error
        return True

    def read_env(self, obj_type: ResourceType, name: str) -> EnvironmentMap:
        try:
            output = self.command("env", str(obj_type), name, "--list").combined_output()
        except CommandError as exc:
            raise PlatformError(
                f"Error: {obj_type} {name} not found", exc.output_text
            ) from exc
        return parse_env_listing(output.decode(errors="replace"))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_build(self, image: str, name: str, env: Mapping[str, str]) -> None:
        """Create a binary build config.

        ``oc new-build`` exits non-zero for ignorable conditions, so the
        result is logged and echoed but never raised.
        """
        cmd = self.command(
            "new-build", image, "--binary=true", f"--name={name}", *encode_env(env)
        )
        self.console.print(
            f"==> Creating build with command: {cmd.args_string()}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        try:
            output = cmd.combined_output()
        except CommandError as exc:
            logger.warning("new-build for %s reported: %s", name, exc)
            output = exc.output
        self.console.out(output.decode(errors="replace"), highlight=False)

    def write_env(self, obj_type: ResourceType, name: str, env: Mapping[str, str]) -> None:
        cmd = self.command("env", str(obj_type), name, *encode_env(env))
        self.console.print(
            f"==> Updating environment variables with command: {cmd.args_string()}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        try:
            cmd.combined_output()
        except CommandError as exc:
            raise PlatformError(
                f"Error updating environment: {exc.output_text}", exc.output_text
            ) from exc
