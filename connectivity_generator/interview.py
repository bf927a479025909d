"""Operator interview.

Collects the project name, the services to include, the network topology
and the bookingkit deployment root, validating every answer before it
reaches the scaffolder.  Answers can be supplied up front (CLI flags); only
the missing ones are asked for.  In non-interactive mode the defaults are
taken instead of prompting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from connectivity_generator.config import Config
from connectivity_generator.scaffolder.catalog import DEFAULT_SELECTION, ServiceCatalog
from connectivity_generator.scaffolder.errors import ScaffoldError
from connectivity_generator.scaffolder.models import (
    LocalNetwork,
    NetworkTopology,
    ProjectName,
    ProjectOptions,
    ServiceKey,
    SharedNetwork,
)
from connectivity_generator.utils import console as default_console
from connectivity_generator.utils import remove_tree

DEPLOY_ROOT_SUFFIX = "bookingkit-local"
DEPLOY_ROOT_MARKER = "docker-compose.dev.yml"


def parse_services(raw: str, catalog: ServiceCatalog) -> tuple[ServiceKey, ...]:
    """Parse ``"psql, valkey"`` (keys or labels) into service keys.

    Raises:
        ValueError: If any entry is not a selectable service.
    """
    lookup = {entry.key: entry.key for entry in catalog.selectable}
    lookup.update({entry.label.lower(): entry.key for entry in catalog.selectable})
    keys: list[ServiceKey] = []
    unknown: list[str] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if item.lower() in lookup:
            keys.append(ServiceKey(lookup[item.lower()]))
            continue
        # "psql valkey"
        for word in item.split():
            if word.lower() in lookup:
                keys.append(ServiceKey(lookup[word.lower()]))
            else:
                unknown.append(word)
    if unknown:
        raise ValueError(f"Unknown service(s): {', '.join(unknown)}")
    return tuple(dict.fromkeys(keys))


def deploy_root_warnings(path: str) -> list[str]:
    """Return the reasons *path* does not look like a bookingkit checkout."""
    warnings: list[str] = []
    root = Path(path).expanduser()
    if not root.is_dir():
        warnings.append(f"The directory '{path}' does not exist.")
    elif not (root / DEPLOY_ROOT_MARKER).exists():
        warnings.append(
            f"'{DEPLOY_ROOT_MARKER}' not found in '{path}'. "
            "This might not be a valid bookingkit project directory."
        )
    if not path.rstrip("/").endswith(DEPLOY_ROOT_SUFFIX):
        warnings.append(
            f"The path should end with '{DEPLOY_ROOT_SUFFIX}' "
            f"(expected format: /path/to/{DEPLOY_ROOT_SUFFIX}, current path: {path})."
        )
    return warnings


class Interview:
    """Asks the operator for everything a scaffolding run needs."""

    def __init__(
        self,
        config: Config,
        catalog: Optional[ServiceCatalog] = None,
        *,
        interactive: bool = True,
        overwrite: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog or ServiceCatalog.from_directory(config.stubs_dir)
        self.interactive = interactive
        self.overwrite = overwrite
        self.console = console or default_console

    def run(
        self,
        *,
        name: Optional[str] = None,
        services: Optional[str] = None,
        shared_network: Optional[bool] = None,
        domain: Optional[str] = None,
        deploy_root: Optional[str] = None,
    ) -> ProjectOptions:
        """Conduct the interview, using any pre-supplied answers."""
        project = self.ask_project_name(name)
        self.console.print(f"[green]Project name: {project}[/green]")
        selected = self.ask_services(services)
        topology = self.ask_network(project, shared_network, domain)
        root = self.ask_deploy_root(deploy_root)
        return ProjectOptions(
            project=project,
            services=selected,
            topology=topology,
            deploy_root=root,
        )

    # -- Project name ------------------------------------------------------

    def ask_project_name(self, preset: Optional[str] = None) -> ProjectName:
        """Ask until a valid name whose directory is free (or cleared) is given."""
        answer = preset
        while True:
            if answer is None:
                self._require_interactive("project name")
                answer = Prompt.ask("Enter your project name", console=self.console)
            try:
                project = ProjectName.parse(answer or "")
            except ValidationError as exc:
                message = exc.errors()[0]["msg"].removeprefix("Value error, ")
                if not self.interactive:
                    raise ValueError(message) from exc
                self.console.print(f"[bold red]{message} Please try again.[/bold red]")
                answer = None
                continue

            target = self.config.project_path(project.value)
            if not target.exists():
                return project

            self.console.print(f"[bold yellow]Directory '{target}' already exists.[/bold yellow]")
            if self.overwrite or (
                self.interactive
                and Confirm.ask("Do you want to overwrite it?", default=False, console=self.console)
            ):
                self.console.print(f"Removing existing directory '{target}'...")
                try:
                    remove_tree(target)
                except OSError as exc:
                    raise ScaffoldError("Directory still exists after removal", target) from exc
                if target.exists():
                    raise ScaffoldError("Directory still exists after removal", target)
                return project
            if not self.interactive:
                raise ScaffoldError("Project directory already exists", target)
            answer = None

    # -- Services ----------------------------------------------------------

    def ask_services(self, preset: Optional[str] = None) -> tuple[ServiceKey, ...]:
        """Ask which optional services to include and confirm the choice."""
        if preset is not None:
            return parse_services(preset, self.catalog)
        if not self.interactive:
            return DEFAULT_SELECTION

        default = ",".join(key.value for key in DEFAULT_SELECTION)
        while True:
            self._print_catalog()
            raw = Prompt.ask(
                "Select the services you want to include (comma separated)",
                default=default,
                console=self.console,
            )
            try:
                selected = parse_services(raw, self.catalog)
            except ValueError as exc:
                self.console.print(f"[bold red]{exc}[/bold red]")
                continue

            self.console.print()
            self.console.print("[green]Selected services:[/green]")
            for key in selected:
                self.console.print(f"  ✓ {self.catalog.label(key)}")
            self.console.print()
            if Confirm.ask("Do you want to proceed with these services?", default=True, console=self.console):
                return selected

    def _print_catalog(self) -> None:
        table = Table(title="Available Docker Services", show_header=True, header_style="bold cyan")
        table.add_column("Key", style="dim", no_wrap=True)
        table.add_column("Service")
        for entry in self.catalog.selectable:
            table.add_row(entry.key, entry.label)
        self.console.print(table)

    # -- Network -----------------------------------------------------------

    def ask_network(
        self,
        project: ProjectName,
        shared: Optional[bool] = None,
        domain: Optional[str] = None,
    ) -> NetworkTopology:
        """Choose the shared bookingkit network (with a domain) or a local one."""
        if shared is None:
            if domain is not None or not self.interactive:
                shared = True
            else:
                shared = Confirm.ask(
                    "Do you want to connect to the bookingkit network?",
                    default=True,
                    console=self.console,
                )
        if not shared:
            if domain:
                self.console.print(
                    f"[bold yellow]⚠️  Ignoring domain '{domain}': a local network has no Traefik routing.[/bold yellow]"
                )
            return LocalNetwork()

        default_domain = self.config.default_domain(project.value)
        if domain is None:
            domain = (
                Prompt.ask(
                    "Enter custom domain for your application",
                    default=default_domain,
                    console=self.console,
                )
                if self.interactive
                else default_domain
            )
        return SharedNetwork(name=self.config.shared_network, domain=domain.strip() or default_domain)

    # -- Deployment root ---------------------------------------------------

    def ask_deploy_root(self, preset: Optional[str] = None) -> str:
        """Ask for the bookingkit checkout path, warning on suspicious answers."""
        answer = preset
        while True:
            if answer is None:
                answer = (
                    Prompt.ask(
                        "Enter the path to your bookingkit project",
                        default=self.config.default_deploy_root,
                        console=self.console,
                    )
                    if self.interactive
                    else self.config.default_deploy_root
                )
            problems = deploy_root_warnings(answer)
            for problem in problems:
                self.console.print(f"[bold yellow]⚠️  Warning: {problem}[/bold yellow]")
            if (
                not problems
                or not self.interactive
                or Confirm.ask("Do you want to continue anyway?", default=False, console=self.console)
            ):
                return answer
            answer = None

    # -- Helpers -----------------------------------------------------------

    def _require_interactive(self, what: str) -> None:
        if not self.interactive:
            raise ValueError(f"A {what} is required in non-interactive mode.")
