"""Jinja2 template rendering for scaffolded helper files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``connectivity_generator/scaffolder/templates/`` directory and renders them
with project-specific context data.
"""

from __future__ import annotations

import asyncio
import stat
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from connectivity_generator.utils import write_text_atomic


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders ``.j2`` templates with a context dictionary.

    Undefined variables raise ``jinja2.UndefinedError`` instead of rendering
    as empty strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["shell_quote"] = _shell_quote_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"configure-domain.sh.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
        *,
        executable: bool = False,
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  With *executable* the
        file is made runnable (``0755``).
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content, executable)
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _shell_quote_filter(value: str) -> str:
    """Quote *value* for use inside a double-quoted bash string."""
    escaped = str(value)
    for char in ("\\", '"', "$", "`"):
        escaped = escaped.replace(char, "\\" + char)
    return escaped


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str, executable: bool) -> None:
    """Synchronous helper: create parent dirs, write content, set mode."""
    path.parent.mkdir(parents=True, exist_ok=True)
    write_text_atomic(path, content)
    if executable:
        path.chmod(
            stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
        )
