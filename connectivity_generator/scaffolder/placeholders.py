"""Placeholder substitution for service fragments.

Fragments are authored against the generic project name ``connectivity``.
Service-specific compound tokens (``connectivity_valkey``,
``connectivity-valkey``) map to the underscore and dash forms of the project
identifier; every remaining bare token maps to the lowercase identifier.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import ProjectName

PLACEHOLDER = "connectivity"
IMAGE_PLACEHOLDER = f"{PLACEHOLDER}/php:"


def build_replacements(project: ProjectName, service_keys: Iterable[str]) -> dict[str, str]:
    """Return the token -> replacement table for *project*.

    The project's own derived forms map to themselves so that a second pass
    over already substituted text leaves them alone, even when the project
    name contains the bare placeholder.
    """
    table: dict[str, str] = {}
    for key in service_keys:
        table[f"{PLACEHOLDER}_{key}"] = f"{project.underscore}_{key}"
        table[f"{PLACEHOLDER}-{key}"] = f"{project.dash}-{key}"
    table[IMAGE_PLACEHOLDER] = f"{project.value}/php:"
    table[PLACEHOLDER] = project.value
    for form in (project.value, project.underscore, project.dash):
        table.setdefault(form, form)
    return table


def substitute_placeholders(
    text: str,
    project: ProjectName,
    service_keys: Iterable[str],
) -> str:
    """Replace every placeholder token in *text* with project identifiers.

    Runs as one regex pass whose alternatives are ordered longest first, so a
    compound token always wins over the bare ``connectivity`` it starts with.
    The result is stable under re-application.
    """
    table = build_replacements(project, service_keys)
    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(table, key=len, reverse=True))
    )
    return pattern.sub(lambda m: table[m.group(0)], text)
