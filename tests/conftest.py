"""Shared test fixtures and fakes for ocf."""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import Any

import pytest
from rich.console import Console

from ocf.core.env_codec import DELETION_MARKER
from ocf.core.errors import CommandError, PlatformError
from ocf.models.application import Application
from ocf.models.platform import ResourceType


# ---------------------------------------------------------------------------
# Command layer fakes
# ---------------------------------------------------------------------------


class FakeCommand:
    """Scripted ``Command``: returns *output* or fails with *returncode*."""

    def __init__(self, args: list[str], output: bytes = b"", returncode: int = 0) -> None:
        self.args = list(args)
        self.output = output
        self.returncode = returncode
        self.interactive = False
        self.runs = 0

    def attach_interactive_io(self) -> None:
        self.interactive = True

    def args_string(self) -> str:
        return " ".join(self.args)

    def run(self) -> None:
        self.runs += 1
        if self.returncode != 0:
            raise CommandError(self.args, self.returncode, self.output)

    def combined_output(self) -> bytes:
        self.runs += 1
        if self.returncode != 0:
            raise CommandError(self.args, self.returncode, self.output)
        return self.output


class FakeRunner:
    """``CommandRunner`` that hands out scripted commands and records them.

    Unscripted argument vectors succeed with empty output.
    """

    def __init__(self) -> None:
        self._script: dict[tuple[str, ...], tuple[bytes, int]] = {}
        self.commands: list[FakeCommand] = []

    def script(self, *args: str, output: bytes | str = b"", returncode: int = 0) -> None:
        if isinstance(output, str):
            output = output.encode()
        self._script[tuple(args)] = (output, returncode)

    def execute(self, *args: str) -> FakeCommand:
        output, returncode = self._script.get(tuple(args), (b"", 0))
        cmd = FakeCommand(list(args), output, returncode)
        self.commands.append(cmd)
        return cmd

    @property
    def calls(self) -> list[list[str]]:
        return [cmd.args for cmd in self.commands]

    def find(self, *prefix: str) -> FakeCommand | None:
        for cmd in self.commands:
            if tuple(cmd.args[: len(prefix)]) == prefix:
                return cmd
        return None


# ---------------------------------------------------------------------------
# Platform layer fake
# ---------------------------------------------------------------------------


class FakePlatform:
    """In-memory ``PlatformClient``.

    Objects listed in ``objects`` exist; ``envs`` holds their environments.
    ``write_env`` applies deltas, honouring the deletion marker, and records
    each call in ``writes``.
    """

    def __init__(self) -> None:
        self.objects: set[tuple[ResourceType, str]] = set()
        self.envs: dict[tuple[ResourceType, str], dict[str, str]] = {}
        self.writes: list[tuple[ResourceType, str, dict[str, str]]] = []
        self.builds: list[tuple[str, str, dict[str, str]]] = []
        self.runner = FakeRunner()
        self.is_logged_in = True
        self.project = "test-project"

    def add(self, obj_type: ResourceType, name: str, env: Mapping[str, str] | None = None) -> None:
        self.objects.add((obj_type, name))
        self.envs[(obj_type, name)] = dict(env or {})

    def env_of(self, obj_type: ResourceType, name: str) -> dict[str, str]:
        return self.envs[(obj_type, name)]

    def logged_in(self) -> bool:
        return self.is_logged_in

    def current_project(self) -> str:
        return self.project

    def exists(self, obj_type: ResourceType, name: str) -> bool:
        return (obj_type, name) in self.objects

    def create_build(self, image: str, name: str, env: Mapping[str, str]) -> None:
        self.builds.append((image, name, dict(env)))
        self.add(ResourceType.BUILD_CONFIG, name, env)

    def read_env(self, obj_type: ResourceType, name: str) -> dict[str, str]:
        if (obj_type, name) not in self.objects:
            raise PlatformError(f"Error: {obj_type} {name} not found")
        return dict(self.envs.get((obj_type, name), {}))

    def write_env(self, obj_type: ResourceType, name: str, env: Mapping[str, str]) -> None:
        self.writes.append((obj_type, name, dict(env)))
        current = self.envs.setdefault((obj_type, name), {})
        for key, value in env.items():
            if value == DELETION_MARKER:
                current.pop(key, None)
            else:
                current[key] = value

    def command(self, *args: str) -> FakeCommand:
        return self.runner.execute(*args)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner() -> FakeRunner:
    """Provide a fresh scripted command runner."""
    return FakeRunner()


@pytest.fixture
def platform() -> FakePlatform:
    """Provide an empty in-memory platform."""
    return FakePlatform()


@pytest.fixture
def console() -> Console:
    """Provide a Console that records output instead of writing to a terminal."""
    return Console(record=True, width=200, force_terminal=False, file=io.StringIO())


@pytest.fixture
def make_app():
    """Factory fixture: build an Application with sensible defaults."""

    def _factory(**overrides: Any) -> Application:
        defaults: dict[str, Any] = {"name": "foo", "path": "."}
        defaults.update(overrides)
        return Application(**defaults)

    return _factory

