"""Named-volume discovery in service fragments."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import ProjectName
from .placeholders import substitute_placeholders

# A ``volumes:`` line followed by its indented list items.
_VOLUMES_BLOCK_RE = re.compile(
    r"^[ \t]*volumes:[ \t]*\r?\n((?:[ \t]+-[ \t]+[^\n]*(?:\n|$))*)",
    re.MULTILINE,
)
_VOLUME_ITEM_RE = re.compile(r"^[ \t]+-[ \t]+'([^':]+):[^']*'", re.MULTILINE)

_PATH_PREFIXES = ("./", "../", "/")


def is_named_volume(source: str) -> bool:
    """``True`` for a logical volume name, ``False`` for a bind-mount path."""
    return not source.startswith(_PATH_PREFIXES)


def extract_named_volumes(
    text: str,
    project: ProjectName,
    service_keys: Iterable[str] = (),
) -> list[str]:
    """Return the named volumes declared by the first ``volumes:`` block.

    Only items written as ``- '<name>:<target>'`` are considered; bind mounts
    (``./``, ``../``, ``/``) are skipped.  Names are resolved with
    :func:`substitute_placeholders` over *service_keys*, so they match the
    references left in the substituted manifest.  Order of first appearance
    is kept and duplicates are dropped.  A fragment without a block yields ``[]``.
    """
    block = _VOLUMES_BLOCK_RE.search(text)
    if block is None:
        return []

    keys = list(service_keys)
    names: dict[str, None] = {}
    for match in _VOLUME_ITEM_RE.finditer(block.group(1)):
        source = match.group(1)
        if is_named_volume(source):
            names[substitute_placeholders(source, project, keys)] = None
    return list(names)
