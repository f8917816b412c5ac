"""Platform object identifiers."""

from __future__ import annotations

from enum import Enum


class ResourceType(str, Enum):
    """Object types the tool queries and reconciles, by their ``oc`` short name."""

    BUILD_CONFIG = "bc"
    DEPLOYMENT_CONFIG = "dc"
    SERVICE = "svc"
    ROUTE = "route"
    IMAGE_STREAM = "is"

    def __str__(self) -> str:
        return self.value


# A flat string map of environment variables stored on one platform object.
EnvironmentMap = dict[str, str]
