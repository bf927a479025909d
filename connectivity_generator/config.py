"""Connectivity Generator configuration.

Centralised, typed configuration for the scaffolder. Settings use Pydantic v2
models so they are validated at construction time and can be overridden from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_PACKAGE_DIR = Path(__file__).parent

DEFAULT_TEMPLATE_REPO = "https://git.bookingkit.de/bkconnect/connectivity-app-template.git"


class Config(BaseModel):
    """Global Connectivity Generator configuration.

    Instances are created once by the CLI entry point and then passed to the
    interview and the scaffolder.
    """

    output_dir: Path = Field(default=Path("."))
    stubs_dir: Path = Field(default=_PACKAGE_DIR / "scaffolder" / "stubs")
    template_repo: str = Field(default=DEFAULT_TEMPLATE_REPO)
    shared_network: str = Field(default="bookingkit-network")
    domain_suffix: str = Field(default="bookingkit.test")
    deploy_root_key: str = Field(
        default="BOOKINGKIT_ROOT",
        description="Name of the .env variable that receives the deployment root",
    )
    default_deploy_root: str = Field(
        default_factory=lambda: str(Path.home() / "bookingkit-local")
    )
    clone_timeout: int = Field(default=300, ge=10, description="git clone timeout in seconds")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def default_domain(self, project: str) -> str:
        """Return the suggested Traefik domain for *project*."""
        return f"{project}.{self.domain_suffix}"

    def project_path(self, project: str) -> Path:
        """Directory the project named *project* is scaffolded into."""
        return self.output_dir / project

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CG_OUTPUT_DIR, CG_STUBS_DIR, CG_TEMPLATE_REPO, CG_SHARED_NETWORK,
            CG_DOMAIN_SUFFIX, CG_DEPLOY_ROOT, CG_CLONE_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CG_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CG_OUTPUT_DIR"])
        if os.environ.get("CG_STUBS_DIR"):
            kwargs["stubs_dir"] = Path(os.environ["CG_STUBS_DIR"])
        if os.environ.get("CG_TEMPLATE_REPO"):
            kwargs["template_repo"] = os.environ["CG_TEMPLATE_REPO"]
        if os.environ.get("CG_SHARED_NETWORK"):
            kwargs["shared_network"] = os.environ["CG_SHARED_NETWORK"]
        if os.environ.get("CG_DOMAIN_SUFFIX"):
            kwargs["domain_suffix"] = os.environ["CG_DOMAIN_SUFFIX"]
        if os.environ.get("CG_DEPLOY_ROOT"):
            kwargs["default_deploy_root"] = os.environ["CG_DEPLOY_ROOT"]
        if os.environ.get("CG_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = int(os.environ["CG_CLONE_TIMEOUT"])
        return cls(**kwargs)
