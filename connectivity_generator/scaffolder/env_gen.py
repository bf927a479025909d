"""``.env`` generation from the template repository's ``.env.example``.

The example file is copied verbatim and then rewritten key by key.  Each
rule replaces a whole ``KEY=...`` line; keys the example does not define are
never added.
"""

from __future__ import annotations

import base64
import re
import secrets
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from connectivity_generator.utils import write_text_atomic

from .errors import EnvTemplateNotFoundError, ScaffoldError
from .models import NetworkTopology, ProjectName, ServiceKey, topology_domain

ENV_EXAMPLE = ".env.example"
ENV_FILE = ".env"


def set_env_value(text: str, key: str, value: str) -> str:
    """Replace the value of every ``KEY=`` line in *text* with *value*."""
    pattern = re.compile(rf"^{re.escape(key)}=[^\r\n]*", re.MULTILINE)
    return pattern.sub(lambda _m: f"{key}={value}", text)


def generate_app_key() -> str:
    """Return a fresh Laravel application key (``base64:`` + 32 random bytes)."""
    return "base64:" + base64.b64encode(secrets.token_bytes(32)).decode("ascii")


class EnvRewriter:
    """Derives ``.env`` settings for a scaffolded project."""

    def __init__(self, deploy_root_key: str = "BOOKINGKIT_ROOT") -> None:
        self.deploy_root_key = deploy_root_key

    def settings(
        self,
        project: ProjectName,
        services: Sequence[ServiceKey],
        topology: NetworkTopology,
        deploy_root: str,
    ) -> dict[str, str]:
        """Compute the key -> value pairs to apply, in application order."""
        selected = {ServiceKey(s) for s in services}
        name = project.value
        values: dict[str, str] = {"APP_NAME": name}

        domain = topology_domain(topology)
        if domain:
            values["APP_URL"] = f"https://{domain}"

        if ServiceKey.PSQL in selected:
            values["DB_CONNECTION"] = "pgsql"
            values["DB_HOST"] = f"{name}-postgres"
        else:
            values["DB_CONNECTION"] = "mysql"
            values["DB_HOST"] = f"{name}-mysql"
        values["DB_DATABASE"] = name
        values["DB_USERNAME"] = name

        if ServiceKey.VALKEY in selected:
            values["REDIS_HOST"] = f"{name}-valkey"
        if ServiceKey.SMTP in selected:
            values["MAIL_HOST"] = f"{name}-smtp"

        values["APP_KEY"] = generate_app_key()
        values[self.deploy_root_key] = deploy_root
        return values

    def rewrite(
        self,
        text: str,
        project: ProjectName,
        services: Sequence[ServiceKey],
        topology: NetworkTopology,
        deploy_root: str,
    ) -> str:
        """Apply every rule to *text* and return the new file content."""
        for key, value in self.settings(project, services, topology, deploy_root).items():
            text = set_env_value(text, key, value)
        return text

    def write(
        self,
        project_dir: Path,
        project: ProjectName,
        services: Sequence[ServiceKey],
        topology: NetworkTopology,
        deploy_root: str,
        example_name: Optional[str] = None,
    ) -> Path:
        """Create ``<project_dir>/.env`` from ``.env.example``.

        Raises:
            EnvTemplateNotFoundError: If the example file does not exist.
            ScaffoldError: If the example cannot be decoded or ``.env`` cannot
                be written.
        """
        example = project_dir / (example_name or ENV_EXAMPLE)
        target = project_dir / ENV_FILE
        if not example.is_file():
            raise EnvTemplateNotFoundError(".env.example not found in project directory", example)

        try:
            with example.open(encoding="utf-8", newline="") as fh:
                content = fh.read()
        except UnicodeDecodeError as exc:
            raise ScaffoldError(".env.example is not valid UTF-8", example) from exc
        except OSError as exc:
            raise ScaffoldError(f"Failed to read .env.example ({exc.strerror or exc})", example) from exc

        try:
            shutil.copyfile(example, target)
            content = self.rewrite(content, project, services, topology, deploy_root)
            write_text_atomic(target, content)
        except OSError as exc:
            raise ScaffoldError(f"Failed to write .env file ({exc.strerror or exc})", target) from exc
        return target
