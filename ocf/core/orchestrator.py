"""Deployment orchestrator — push, bind-service and unbind-service workflows.

The Orchestrator composes a ``PlatformClient`` with the binding env codec
into the application lifecycle.  No state is kept between invocations:
every step re-reads what it needs from the platform, and every ``ensure_*``
step is idempotent, so re-running an interrupted push converges.

Failures are raised as ``OcfError`` subclasses.  The pipeline stops at the
first one; deciding the process exit code is left to the caller.
"""

from __future__ import annotations

import logging
import os
import stat

from rich.console import Console

from ocf.core import env_codec
from ocf.core.env_codec import BOUND_SERVICES, BUILDPACK_URL, DELETION_MARKER
from ocf.core.errors import BindingError, PlatformError
from ocf.core.exec import Command
from ocf.core.oc import PlatformClient
from ocf.models.application import Application
from ocf.models.platform import ResourceType

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_PORT = 8080


class Orchestrator:
    """Reconciles one application against the platform.

    Parameters
    ----------
    app:
        The desired application configuration.
    platform:
        Typed platform operations.  The CLI supplies ``OcClient``.
    console:
        Rich Console for progress lines and echoed platform output.
    service_port:
        Port exposed by the service created for the deployment.
    """

    def __init__(
        self,
        app: Application,
        platform: PlatformClient,
        console: Console | None = None,
        *,
        service_port: int = DEFAULT_SERVICE_PORT,
    ) -> None:
        self.app = app
        self.platform = platform
        self.console = console or Console()
        self.service_port = service_port

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def push(self, image: str) -> None:
        """Create or update the application from *image*.

        Steps run in order and are not retried; the first failure raises.
        """
        logger.debug("Pushing %s with image %s", self.app.name, image)
        self.ensure_logged_in()
        self.display_project()
        self.ensure_build_exists(image)
        self.start_build()
        self.ensure_deployment_exists()
        self.ensure_service_exists()
        self.ensure_route_exists()
        self.display_route()

    def bind_service(self, service: str) -> None:
        """Copy *service*'s credentials into the application's environment."""
        prefix = self._service_prefix(service)
        self.ensure_logged_in()
        self.display_project()
        self._require_deployment()

        env = self.env_for_service_binding(service, prefix)
        app_env = self.platform.read_env(ResourceType.DEPLOYMENT_CONFIG, self.app.name)

        bound = app_env.get(BOUND_SERVICES, "")
        if env_codec.is_bound(bound, prefix):
            raise BindingError(
                f"Error: Service {service} already bound to application {self.app.name}"
            )

        env[BOUND_SERVICES] = f"{bound} {prefix}".lstrip(" ")
        self.platform.write_env(ResourceType.DEPLOYMENT_CONFIG, self.app.name, env)

    def unbind_service(self, service: str) -> None:
        """Remove *service*'s binding keys from the application's environment."""
        prefix = self._service_prefix(service)
        self.ensure_logged_in()
        self.display_project()
        self._require_deployment()

        app_env = self.platform.read_env(ResourceType.DEPLOYMENT_CONFIG, self.app.name)

        bound = app_env.get(BOUND_SERVICES, "")
        if prefix not in bound:
            raise BindingError(
                f"Error: Service {service} not bound to application {self.app.name}"
            )

        delta = {key: DELETION_MARKER for key in app_env if key.startswith(prefix)}
        delta[BOUND_SERVICES] = bound.replace(prefix, "").strip(" ")
        self.platform.write_env(ResourceType.DEPLOYMENT_CONFIG, self.app.name, delta)

    # ------------------------------------------------------------------
    # Push steps
    # ------------------------------------------------------------------

    def ensure_logged_in(self) -> None:
        if self.platform.logged_in():
            return
        login = self.platform.command("login")
        login.attach_interactive_io()
        login.run()

    def display_project(self) -> str:
        # TODO: let the user pick a project instead of using the current one
        project = self.platform.current_project().strip()
        self.console.print(
            f"Using project {project}", markup=False, highlight=False, soft_wrap=True
        )
        return project

    def ensure_build_exists(self, image: str) -> None:
        name = self.app.name
        if not self.platform.exists(ResourceType.BUILD_CONFIG, name):
            env = {BUILDPACK_URL: self.app.buildpack} if self.app.buildpack else {}
            self.platform.create_build(image, name, env)
            return

        self._progress(f"Build configuration already exists for {name}, updating")
        build_env = self.platform.read_env(ResourceType.BUILD_CONFIG, name)
        current = build_env.get(BUILDPACK_URL, "")
        if self.app.buildpack == current:
            return
        buildpack = self.app.buildpack or DELETION_MARKER
        self.platform.write_env(ResourceType.BUILD_CONFIG, name, {BUILDPACK_URL: buildpack})

    def start_build(self) -> None:
        cmd = self.platform.command(
            "start-build", self.app.name, self._source_arg(), "--follow"
        )
        cmd.attach_interactive_io()
        self._progress(f"Starting build with command: {cmd.args_string()}")
        cmd.run()

    def ensure_deployment_exists(self) -> None:
        name = self.app.name
        if self.platform.exists(ResourceType.DEPLOYMENT_CONFIG, name):
            self._progress(f"Deployment config already exists for {name}, redeploying")
            self._echo(self.platform.command("deploy", name, "--latest").combined_output())
            return

        repo_and_image = self.platform.command(
            "get", str(ResourceType.IMAGE_STREAM), name,
            "-o", "template", "--template={{.status.dockerImageRepository}}",
        ).combined_output().decode(errors="replace").strip()
        env = self.env_for_service_bindings()
        cmd = self.platform.command(*self.deployment_args(repo_and_image, env))
        self._create(cmd, "deployment config")

    def ensure_service_exists(self) -> None:
        name = self.app.name
        if self.platform.exists(ResourceType.SERVICE, name):
            self._progress(f"Service already exists for {name}, skipping creating one")
            return
        cmd = self.platform.command(
            "expose", str(ResourceType.DEPLOYMENT_CONFIG), name,
            f"--port={self.service_port}",
        )
        self._create(cmd, "service")

    def ensure_route_exists(self) -> None:
        name = self.app.name
        if self.platform.exists(ResourceType.ROUTE, name):
            self._progress(f"Route already exists for {name}, skipping creating one")
            return
        cmd = self.platform.command("expose", str(ResourceType.SERVICE), name)
        self._create(cmd, "route")

    def display_route(self) -> str:
        host = self.platform.command(
            "get", str(ResourceType.ROUTE), self.app.name,
            "-o", "template", "--template={{.spec.host}}",
        ).combined_output().decode(errors="replace").strip()
        self._progress(f"Your application is available at {host}")
        return host

    # ------------------------------------------------------------------
    # Binding env
    # ------------------------------------------------------------------

    def env_for_service_bindings(self) -> list[str]:
        """Return ``KEY=VALUE`` entries binding every service in ``app.services``.

        ``CF_BOUND_SERVICES`` is appended last, and only when there is at
        least one service.
        """
        env: list[str] = []
        prefixes: list[str] = []
        for service in self.app.services:
            prefix = env_codec.binding_prefix(service)
            prefixes.append(prefix)
            for key, value in self.env_for_service_binding(service, prefix).items():
                env.append(f"{key}={value}")
        if prefixes:
            env.append(f"{BOUND_SERVICES}={' '.join(prefixes)}")
        return env

    def env_for_service_binding(self, service: str, prefix: str) -> dict[str, str]:
        try:
            service_env = self.platform.read_env(ResourceType.DEPLOYMENT_CONFIG, service)
        except PlatformError as exc:
            raise BindingError(f"Error: Bound service {service} not found") from exc
        return env_codec.derive_binding_env(service_env, prefix)

    def deployment_args(self, repo_and_image: str, env: list[str]) -> list[str]:
        """Assemble the ``oc run`` arguments for a new deployment config."""
        env = list(env)
        args = ["run", self.app.name, f"--image={repo_and_image}"]
        if self.app.memory:
            args.append(f"--limits=memory={self.app.memory}")
            env.append(f"{env_codec.MEMORY_LIMIT}={self.app.memory}")
        if self.app.command:
            env.append(f"{env_codec.CF_COMMAND}={self.app.command}")
        if env:
            args.append(f"--env={','.join(env)}")
        return args

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_deployment(self) -> None:
        if not self.platform.exists(ResourceType.DEPLOYMENT_CONFIG, self.app.name):
            raise BindingError(f"Error: Application {self.app.name} not found")

    @staticmethod
    def _service_prefix(service: str) -> str:
        # An empty prefix would match every key and every bound token.
        prefix = env_codec.binding_prefix(service)
        if not prefix.strip():
            raise BindingError("Error: Service name is required")
        return prefix

    def _source_arg(self) -> str:
        path = self.app.path
        try:
            mode = os.stat(path).st_mode
        except OSError:
            return f"--from-dir={path}"
        if stat.S_ISDIR(mode):
            return f"--from-dir={path}"
        return f"--from-file={path}"

    def _create(self, cmd: Command, what: str) -> None:
        self._progress(f"Creating {what} with command: {cmd.args_string()}")
        # On failure the CommandError carries the output to the caller.
        self._echo(cmd.combined_output())

    def _progress(self, message: str) -> None:
        self.console.print(
            f"==> {message}", markup=False, highlight=False, soft_wrap=True
        )

    def _echo(self, output: bytes) -> None:
        if output:
            self.console.out(output.decode(errors="replace"), highlight=False)
