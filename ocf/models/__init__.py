"""ocf data models — Pydantic v2, frozen (immutable)."""

from ocf.models.application import Application, Manifest, normalize_memory
from ocf.models.platform import EnvironmentMap, ResourceType

__all__ = [
    # application
    "Application",
    "Manifest",
    "normalize_memory",
    # platform
    "EnvironmentMap",
    "ResourceType",
]
