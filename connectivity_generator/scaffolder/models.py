"""Pydantic v2 models shared by the scaffolder components.

Covers the project identifier, the selectable service keys, the network
topology variants and the result objects returned by the assembler and the
scaffolder.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ServiceKey(str, Enum):
    """Optional infrastructure services an operator can add to a project."""
    MYSQL = "mysql"
    PSQL = "psql"
    SMTP = "smtp"
    VALKEY = "valkey"
    QUEUE = "queue"


APP_KEY = "app"
"""Implicit service that is always part of the manifest."""


# ---------------------------------------------------------------------------
# Project identifier
# ---------------------------------------------------------------------------

_PROJECT_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


class ProjectName(BaseModel):
    """Validated, lowercased project identifier with its derived forms."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Lowercased project name")

    @field_validator("value")
    @classmethod
    def _validate(cls, value: str) -> str:
        if not value:
            raise ValueError("Project name cannot be empty.")
        if not _PROJECT_NAME_RE.match(value):
            raise ValueError(
                "Project name can only contain letters, numbers, hyphens, and underscores."
            )
        return value.lower()

    @classmethod
    def parse(cls, raw: str) -> "ProjectName":
        return cls(value=raw.strip())

    @property
    def dash(self) -> str:
        """``my_app`` -> ``my-app``; used for service names."""
        return self.value.replace("_", "-")

    @property
    def underscore(self) -> str:
        """``my-app`` -> ``my_app``; used for container names."""
        return self.value.replace("-", "_")

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Network topology
# ---------------------------------------------------------------------------

class SharedNetwork(BaseModel):
    """Join the external network of the shared bookingkit stack (Traefik)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["shared"] = "shared"
    name: str = Field(default="bookingkit-network")
    domain: Optional[str] = Field(
        default=None, description="Hostname used for Traefik Host() rules"
    )

    def network_name(self, project: ProjectName) -> str:
        return self.name


class LocalNetwork(BaseModel):
    """Create a network private to the project."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"

    def network_name(self, project: ProjectName) -> str:
        return f"{project}-network"


NetworkTopology = Union[SharedNetwork, LocalNetwork]


def topology_domain(topology: NetworkTopology) -> Optional[str]:
    """Return the routing domain, which only a shared topology can carry."""
    if isinstance(topology, SharedNetwork):
        return topology.domain or None
    return None


# ---------------------------------------------------------------------------
# Interview result
# ---------------------------------------------------------------------------

class ProjectOptions(BaseModel):
    """Everything the operator decided during the interview."""

    model_config = ConfigDict(frozen=True)

    project: ProjectName
    services: tuple[ServiceKey, ...] = Field(default=())
    topology: NetworkTopology = Field(default_factory=SharedNetwork, discriminator="kind")
    deploy_root: str = Field(..., description="Path written to the deployment-root variable")

    @field_validator("services")
    @classmethod
    def _dedupe(cls, services: tuple[ServiceKey, ...]) -> tuple[ServiceKey, ...]:
        return tuple(dict.fromkeys(services))

    @property
    def domain(self) -> Optional[str]:
        return topology_domain(self.topology)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ComposeResult(BaseModel):
    """Finalized manifest plus what went into it."""

    content: str
    services: list[str] = Field(default_factory=list, description="Included fragment keys")
    volumes: list[str] = Field(default_factory=list, description="Declared named volumes")
    warnings: list[str] = Field(default_factory=list)


class ScaffoldResult(BaseModel):
    """Outcome of one scaffolding run."""

    project_path: Path
    compose_path: Path
    env_path: Path
    script_path: Optional[Path] = None
    warnings: list[str] = Field(default_factory=list)
