"""Unit tests for the subprocess-backed command runner."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from ocf.core.errors import CommandError
from ocf.core.exec import Command, CommandRunner, OcRunner, SubprocessCommand


class _Recorder:
    """Stand-in for subprocess.run that records its keyword arguments."""

    def __init__(self, returncode: int = 0, stdout: bytes | None = b"") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        return SimpleNamespace(returncode=self.returncode, stdout=self.stdout)


class TestProtocols:
    def test_oc_runner_satisfies_protocol(self):
        assert isinstance(OcRunner(), CommandRunner)

    def test_subprocess_command_satisfies_protocol(self):
        assert isinstance(SubprocessCommand(["oc"]), Command)


class TestOcRunner:
    def test_prefixes_binary(self):
        cmd = OcRunner().execute("get", "dc", "foo")
        assert cmd.args == ["oc", "get", "dc", "foo"]

    def test_custom_binary(self):
        cmd = OcRunner("/opt/bin/oc").execute("whoami")
        assert cmd.args_string() == "/opt/bin/oc whoami"


class TestSubprocessCommand:
    def test_combined_output_merges_streams(self, monkeypatch):
        recorder = _Recorder(stdout=b"hello\n")
        monkeypatch.setattr(subprocess, "run", recorder)

        output = SubprocessCommand(["oc", "project", "-q"]).combined_output()

        assert output == b"hello\n"
        _, kwargs = recorder.calls[0]
        assert kwargs["stdout"] is subprocess.PIPE
        assert kwargs["stderr"] is subprocess.STDOUT

    def test_combined_output_failure_carries_output(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", _Recorder(returncode=1, stdout=b"not found"))

        with pytest.raises(CommandError) as excinfo:
            SubprocessCommand(["oc", "get", "dc", "foo"]).combined_output()

        assert excinfo.value.returncode == 1
        assert excinfo.value.output == b"not found"
        assert excinfo.value.command == ["oc", "get", "dc", "foo"]

    def test_run_discards_output_by_default(self, monkeypatch):
        recorder = _Recorder(stdout=None)
        monkeypatch.setattr(subprocess, "run", recorder)

        SubprocessCommand(["oc", "whoami"]).run()

        _, kwargs = recorder.calls[0]
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL

    def test_run_interactive_inherits_streams(self, monkeypatch):
        recorder = _Recorder(stdout=None)
        monkeypatch.setattr(subprocess, "run", recorder)

        cmd = SubprocessCommand(["oc", "login"])
        cmd.attach_interactive_io()
        cmd.run()

        _, kwargs = recorder.calls[0]
        assert kwargs["stdin"] is None
        assert kwargs["stdout"] is None
        assert kwargs["stderr"] is None

    def test_run_failure_raises(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", _Recorder(returncode=2, stdout=None))

        with pytest.raises(CommandError, match="exited with status 2"):
            SubprocessCommand(["oc", "whoami"]).run()

    def test_missing_binary_raises_command_error(self, monkeypatch):
        def _boom(args, **kwargs):
            raise FileNotFoundError("no such file: oc")

        monkeypatch.setattr(subprocess, "run", _boom)

        with pytest.raises(CommandError) as excinfo:
            SubprocessCommand(["oc", "whoami"]).run()
        assert excinfo.value.returncode is None
        assert "Could not run" in str(excinfo.value)
