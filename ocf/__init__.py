"""ocf: Cloud Foundry style push and service binding for OpenShift.

Translates an application manifest into idempotent ``oc`` calls that
create or update a build config, deployment config, service and route,
and binds services to applications by writing their credentials into
the application's environment.
"""

__version__ = "0.2.0"
__description__ = "Cloud Foundry style push and service binding for OpenShift"

from ocf.core.orchestrator import Orchestrator
from ocf.cli.app import app as cli

__all__ = ["Orchestrator", "cli", "__version__"]
