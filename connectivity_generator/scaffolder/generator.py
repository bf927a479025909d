"""Main scaffolding orchestrator.

Takes the operator's ``ProjectOptions`` and produces a ready-to-run project
directory: the cloned application template, a ``docker-compose.yml``
assembled from service stubs, a configured ``.env`` and, for projects served
behind the shared Traefik, a ``configure-domain.sh`` certificate script.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from connectivity_generator.config import Config
from connectivity_generator.utils import print_info, print_success, print_warning, write_text_atomic

from .catalog import ServiceCatalog
from .compose_gen import ComposeAssembler
from .env_gen import EnvRewriter
from .errors import ScaffoldError
from .models import ProjectOptions, ScaffoldResult
from .repository import RepositoryProvisioner
from .script_gen import DomainScriptGenerator
from .templates import TemplateRenderer

COMPOSE_FILE = "docker-compose.yml"


class ProjectScaffolder:
    """Runs one scaffolding pass.

    Steps, each a single attempt that aborts the run on failure:

    1. Create the project directory.
    2. Clone the template repository into it.
    3. Assemble and write ``docker-compose.yml``.
    4. Derive and write ``.env``.
    5. Emit ``configure-domain.sh`` when a custom domain is configured.

    Collaborators default to the standard implementations built from
    *config* and can be replaced for testing.
    """

    def __init__(
        self,
        config: Config,
        *,
        catalog: Optional[ServiceCatalog] = None,
        assembler: Optional[ComposeAssembler] = None,
        env_rewriter: Optional[EnvRewriter] = None,
        provisioner: Optional[RepositoryProvisioner] = None,
        script_gen: Optional[DomainScriptGenerator] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog or ServiceCatalog.from_directory(config.stubs_dir)
        self.assembler = assembler or ComposeAssembler(self.catalog)
        self.env_rewriter = env_rewriter or EnvRewriter(config.deploy_root_key)
        self.provisioner = provisioner or RepositoryProvisioner(
            config.template_repo, timeout=config.clone_timeout
        )
        self.script_gen = script_gen or DomainScriptGenerator(
            TemplateRenderer(), deploy_root_key=config.deploy_root_key
        )

    # -- Public API --------------------------------------------------------

    async def scaffold(self, options: ProjectOptions, output_dir: str | Path | None = None) -> ScaffoldResult:
        """Generate the project described by *options*.

        Args:
            options: Interview result.
            output_dir: Parent directory of the project folder. Defaults to
                ``config.output_dir``.

        Returns:
            A :class:`ScaffoldResult` listing the written files and warnings.

        Raises:
            ScaffoldError: On any fatal step failure (subclasses name the
                specific cause).
        """
        base = Path(output_dir) if output_dir is not None else self.config.output_dir
        project_root = base / options.project.value

        # 1. Project directory
        print_info(f"📁 Creating project folder: {options.project}")
        await self._create_project_dir(project_root)

        # 2. Template repository
        print_info("📥 Cloning connectivity-app-template repository...")
        await self.provisioner.clone(project_root)
        print_success("✅ Repository cloned successfully!")

        # 3. docker-compose.yml
        print_info("🐳 Creating docker-compose.yml...")
        compose = self.assembler.assemble(options.project, options.services, options.topology)
        for warning in compose.warnings:
            print_warning(f"⚠️  {warning}")
        compose_path = project_root / COMPOSE_FILE
        await self._write(compose_path, compose.content, "Failed to write docker-compose.yml file")
        print_success("✅ docker-compose.yml created successfully!")

        # 4. .env
        print_info("⚙️  Configuring .env file...")
        env_path = await asyncio.to_thread(
            self.env_rewriter.write,
            project_root,
            options.project,
            options.services,
            options.topology,
            options.deploy_root,
        )
        print_success("✅ .env file configured successfully!")

        # 5. configure-domain.sh
        script_path: Optional[Path] = None
        if options.domain:
            print_info("🔐 Creating configure-domain.sh script...")
            script_path = await self.script_gen.generate(
                project_root, options.project, options.domain, options.deploy_root
            )
            print_success("✅ configure-domain.sh script created and made executable!")

        return ScaffoldResult(
            project_path=project_root.resolve(),
            compose_path=compose_path,
            env_path=env_path,
            script_path=script_path,
            warnings=list(compose.warnings),
        )

    # -- Steps -------------------------------------------------------------

    async def _create_project_dir(self, root: Path) -> None:
        if root.exists():
            raise ScaffoldError("Project directory already exists", root)
        try:
            await asyncio.to_thread(root.mkdir, mode=0o755, parents=True)
        except OSError as exc:
            raise ScaffoldError("Failed to create project directory", root) from exc

    async def _write(self, path: Path, content: str, message: str) -> None:
        try:
            await asyncio.to_thread(write_text_atomic, path, content)
        except OSError as exc:
            raise ScaffoldError(message, path) from exc
