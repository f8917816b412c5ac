"""Environment-variable encoding for service bindings.

A binding is not stored anywhere except in the target deployment's
environment.  The service name is canonicalized into a prefix, the bound
service's credentials are copied under ``{PREFIX}_USER``,
``{PREFIX}_PASSWORD`` and ``{PREFIX}_DATABASE``, its technology family is
recorded under ``{PREFIX}_LABEL``, and ``CF_BOUND_SERVICES`` lists every
bound prefix separated by spaces.

Everything here is pure; no function performs I/O.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

BOUND_SERVICES = "CF_BOUND_SERVICES"
BUILDPACK_URL = "BUILDPACK_URL"
MEMORY_LIMIT = "MEMORY_LIMIT"
CF_COMMAND = "CF_COMMAND"

# Writing this value removes the key instead of setting it.
DELETION_MARKER = "-"

# Key prefix -> label, checked in order for every source key.
LABEL_MARKERS: tuple[tuple[str, str], ...] = (
    ("POSTGRESQL", "postgresql"),
    ("MYSQL", "mysql"),
    ("MONGODB", "mongodb"),
)

CREDENTIAL_SUFFIXES: tuple[str, ...] = ("_USER", "_PASSWORD", "_DATABASE")


def binding_prefix(service_name: str) -> str:
    """Return the env key prefix for *service_name* (``rails-pg`` -> ``RAILS_PG``)."""
    return service_name.replace("-", "_").upper()


def derive_binding_env(service_env: Mapping[str, str], prefix: str) -> dict[str, str]:
    """Build the binding keys for a service from that service's own environment.

    The label is taken from the last key, in the source map's order, that
    starts with a known marker.  A service exposing keys from two families
    therefore gets whichever family appears last.
    """
    env: dict[str, str] = {}
    label = ""
    for key in service_env:
        for marker, marker_label in LABEL_MARKERS:
            if key.startswith(marker):
                label = marker_label
                break

    for key, value in service_env.items():
        for suffix in CREDENTIAL_SUFFIXES:
            if key.endswith(suffix):
                env[f"{prefix}{suffix}"] = value
                break

    env[f"{prefix}_LABEL"] = label
    return env


def bound_prefixes(env: Mapping[str, str]) -> list[str]:
    """Return the prefixes listed in ``CF_BOUND_SERVICES``, in order."""
    return env.get(BOUND_SERVICES, "").split()


def is_bound(bound_services: str, prefix: str) -> bool:
    """Whether *prefix* appears as a whole whitespace-delimited token."""
    pattern = rf"(^|\s){re.escape(prefix)}(\s|$)"
    return re.search(pattern, bound_services) is not None


def encode_env(env: Mapping[str, str]) -> list[str]:
    """Encode an env delta as ``KEY=VALUE`` arguments (``KEY-`` to delete)."""
    return [
        f"{key}-" if value == DELETION_MARKER else f"{key}={value}"
        for key, value in env.items()
    ]


def parse_env_listing(text: str) -> dict[str, str]:
    """Parse ``oc env --list`` output.

    Only lines that split into exactly a key and a value on ``=`` are kept;
    blank lines, comments and values containing ``=`` are skipped.
    """
    env: dict[str, str] = {}
    for line in text.split("\n"):
        parts = line.split("=")
        if len(parts) == 2:
            env[parts[0]] = parts[1]
    return env
