"""Application and manifest models."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_MEMORY_PATTERN = re.compile(r"^\d+[EPTGMK]?$")

MEMORY_FORMAT_MESSAGE = (
    "Memory string must be in the format of 8690K, 256M, 256MB, 1G, 1GB, etc"
)


def normalize_memory(value: str) -> str:
    """Upper-case a memory quantity and drop a trailing ``B``.

    Raises ``ValueError`` when the result is not a valid quantity.
    """
    memory = value.upper().removesuffix("B")
    if not _MEMORY_PATTERN.match(memory):
        raise ValueError(MEMORY_FORMAT_MESSAGE)
    return memory


class Application(BaseModel):
    """Desired configuration of one deployable application.

    Built once per invocation by merging a manifest entry with command-line
    overrides; immutable afterwards.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    buildpack: str = ""
    command: str = ""
    disk_quota: str = ""
    instances: int = 0
    memory: str = ""
    path: str = ""
    services: list[str] = Field(default_factory=list)

    @field_validator("memory")
    @classmethod
    def _check_memory(cls, value: str) -> str:
        return normalize_memory(value) if value else value

    @field_validator("buildpack", "command", "disk_quota", "memory", "name", "path", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        # YAML `key:` with no value loads as None; `memory: 1024` as an int.
        if value is None:
            return ""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("services", mode="before")
    @classmethod
    def _none_as_no_services(cls, value: object) -> object:
        return [] if value is None else value


class Manifest(BaseModel):
    """Parsed contents of a ``manifest.yml`` file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    applications: list[Application] = Field(default_factory=list)

    @field_validator("applications", mode="before")
    @classmethod
    def _none_as_no_apps(cls, value: object) -> object:
        return [] if value is None else value
