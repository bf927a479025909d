"""Docker Compose manifest assembly from service fragments.

The manifest is built as text: the ``app`` fragment, the optional queue
worker, the remaining selected fragments, then generated ``volumes`` and
``networks`` sections.  The finished buffer goes through placeholder
substitution, Traefik host-rule rewriting and container-name normalisation.
Each of those rewrites is a standalone text-in/text-out function.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from .catalog import ServiceCatalog
from .errors import FragmentNotFoundError
from .models import (
    APP_KEY,
    ComposeResult,
    NetworkTopology,
    ProjectName,
    ServiceKey,
    SharedNetwork,
    topology_domain,
)
from .placeholders import substitute_placeholders
from .volumes import extract_named_volumes

_HOST_RULE_RE = re.compile(r"Host\(`[^`]+`\)")


# ---------------------------------------------------------------------------
# Section builders
# ---------------------------------------------------------------------------


def render_volumes_section(volumes: Iterable[str]) -> str:
    """Render a top-level ``volumes:`` block pinning each volume's name.

    Returns an empty string when there is nothing to declare.
    """
    names = list(volumes)
    if not names:
        return ""
    lines = ["volumes:"]
    for name in names:
        lines.append(f"    {name}:")
        lines.append(f"        name: {name}")
    return "\n".join(lines)


def render_networks_section(topology: NetworkTopology, project: ProjectName) -> str:
    """Render the top-level ``networks:`` block with a single ``default``."""
    lines = [
        "networks:",
        "    default:",
        f"        name: {topology.network_name(project)}",
    ]
    if isinstance(topology, SharedNetwork):
        lines.append("        external: true")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Rewrite rules
# ---------------------------------------------------------------------------


def rewrite_host_rules(text: str, domain: str) -> str:
    """Point every Traefik ``Host(`...`)`` rule at *domain*."""
    return _HOST_RULE_RE.sub(lambda _m: f"Host(`{domain}`)", text)


def normalize_container_names(
    text: str,
    project: ProjectName,
    service_keys: Iterable[str],
) -> str:
    """Rewrite ``container_name: ...<dash>-<key>`` to ``<underscore>_<key>``."""
    for key in service_keys:
        pattern = re.compile(rf"container_name:.*{re.escape(project.dash)}-{re.escape(key)}")
        replacement = f"container_name: {project.underscore}_{key}"
        text = pattern.sub(lambda _m, r=replacement: r, text)
    return text


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class ComposeAssembler:
    """Builds ``docker-compose.yml`` content from a :class:`ServiceCatalog`."""

    def __init__(self, catalog: ServiceCatalog) -> None:
        self.catalog = catalog

    def assemble(
        self,
        project: ProjectName,
        services: Sequence[ServiceKey],
        topology: NetworkTopology,
    ) -> ComposeResult:
        """Assemble the manifest for *project*.

        Args:
            project: Validated project identifier.
            services: Selected services in selection order.
            topology: Shared or local network.

        Returns:
            A :class:`ComposeResult` with the final text, the fragments that
            made it in, the declared volumes and any warnings.

        Raises:
            FragmentNotFoundError: If the ``app`` fragment cannot be loaded.
        """
        selected = [ServiceKey(s) for s in dict.fromkeys(services)]
        warnings: list[str] = []

        app_fragment = self.catalog.load_fragment(APP_KEY)
        if app_fragment is None:
            raise FragmentNotFoundError(
                "App stub not found", self.catalog.fragment_path(APP_KEY)
            )

        fragments: list[tuple[str, str]] = [(APP_KEY, app_fragment)]

        # Queue workers share the app image and sit right after it.
        ordered = sorted(selected, key=lambda s: s is not ServiceKey.QUEUE)
        for key in ordered:
            fragment = self.catalog.load_fragment(key)
            if fragment is None:
                path = self.catalog.fragment_path(key)
                warnings.append(f"Service stub not found: {path if path else key.value}")
                continue
            fragments.append((key.value, fragment))

        volumes: dict[str, None] = {}
        for _key, fragment in fragments:
            for name in extract_named_volumes(fragment, project, self.catalog.keys):
                volumes[name] = None

        sections = [fragment for _key, fragment in fragments]
        volumes_section = render_volumes_section(volumes)
        if volumes_section:
            sections.append(volumes_section)
        sections.append(render_networks_section(topology, project))

        content = "\n".join(sections) + "\n"
        content = substitute_placeholders(content, project, self.catalog.keys)

        domain = topology_domain(topology)
        if domain:
            content = rewrite_host_rules(content, domain)

        container_keys = [APP_KEY] + [key.value for key in selected]
        content = normalize_container_names(content, project, container_keys)

        return ComposeResult(
            content=content,
            services=[key for key, _fragment in fragments],
            volumes=list(volumes),
            warnings=warnings,
        )
