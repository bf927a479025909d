"""Certificate helper script generation (``configure-domain.sh``)."""

from __future__ import annotations

from pathlib import Path

from .errors import ScaffoldError
from .models import ProjectName
from .templates import TemplateRenderer

SCRIPT_TEMPLATE = "configure-domain.sh.j2"
SCRIPT_NAME = "configure-domain.sh"


class DomainScriptGenerator:
    """Writes the executable script that provisions TLS for a custom domain."""

    def __init__(self, renderer: TemplateRenderer, deploy_root_key: str = "BOOKINGKIT_ROOT") -> None:
        self.renderer = renderer
        self.deploy_root_key = deploy_root_key

    async def generate(
        self,
        project_dir: Path,
        project: ProjectName,
        domain: str,
        deploy_root: str,
    ) -> Path:
        """Render ``configure-domain.sh`` into *project_dir*.

        Raises:
            ScaffoldError: If the script cannot be written or made executable.
        """
        context = {
            "project_name": project.value,
            "domain": domain,
            "deploy_root": deploy_root,
            "deploy_root_key": self.deploy_root_key,
        }
        target = project_dir / SCRIPT_NAME
        try:
            return await self.renderer.render_to_file(
                SCRIPT_TEMPLATE, target, context, executable=True
            )
        except OSError as exc:
            raise ScaffoldError("Failed to create configure-domain.sh script", target) from exc
