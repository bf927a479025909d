"""Banner and post-run instructions printed to the operator."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel

from connectivity_generator.scaffolder.models import ProjectOptions, ScaffoldResult, ServiceKey
from connectivity_generator.utils import console as default_console

BANNER = (
    "░█▀▀░█▀█░█▀█░█▀█░█▀▀░█▀▀░▀█▀░▀█▀░█░█░▀█▀░▀█▀░█░█\n"
    "░█░░░█░█░█░█░█░█░█▀▀░█░░░░█░░░█░░▀▄▀░░█░░░█░░░█░\n"
    "░▀▀▀░▀▀▀░▀░▀░▀░▀░▀▀▀░▀▀▀░░▀░░▀▀▀░░▀░░▀▀▀░░▀░░░▀░"
)

LOCAL_APP_URL = "http://localhost:8020"
MAILPIT_URL = "http://localhost:8030"


def print_banner(console: Optional[Console] = None) -> None:
    out = console or default_console
    out.print()
    out.print(f"[cyan]{BANNER}[/cyan]")
    out.print()


def build_instructions(options: ProjectOptions) -> list[str]:
    """Return the next-step lines (rich markup) for a finished project."""
    domain = options.domain
    lines = [
        "[cyan]🚀 Next steps:[/cyan]",
        "1. 📁 Navigate to your project directory:",
        f"   [yellow]cd {options.project}[/yellow]",
    ]
    step = 2
    if domain:
        lines += [
            "",
            f"{step}. 🔐 Generate SSL certificates for your domain:",
            "   [yellow]./configure-domain.sh[/yellow]",
        ]
        step += 1
        lines += [
            "",
            f"{step}. 🐳 Start the bookingkit containers first (required for Traefik):",
            f"   [yellow]docker-compose -f {options.deploy_root}/docker-compose.dev.yml up -d[/yellow]",
        ]
    else:
        lines += [
            "",
            f"{step}. 🐳 Start the bookingkit containers first:",
            f"   [yellow]docker-compose -f {options.deploy_root}/docker-compose.yml up -d[/yellow]",
        ]
    step += 1
    lines += [
        "",
        f"{step}. 🚀 Start the Docker containers:",
        "   [yellow]docker-compose up -d[/yellow]",
        "",
        f"{step + 1}. 🗄️  Run database migrations:",
        "   [yellow]docker-compose exec app php artisan migrate[/yellow]",
        "",
        "[cyan]🌐 Access your application:[/cyan]",
    ]
    if domain:
        lines.append(f"   [green]📱 Main Application:[/green] https://{domain}")
        lines.append(f"   [dim]💡 APP_URL has been set to https://{domain} in .env file[/dim]")
    else:
        lines.append(f"   [green]📱 Main Application:[/green] {LOCAL_APP_URL}")
    if ServiceKey.SMTP in options.services:
        lines.append(f"   [green]📧 Mailpit Dashboard:[/green] {MAILPIT_URL}")
    lines += [
        "",
        "[cyan]🛠️  Useful commands:[/cyan]",
        "   [yellow]docker-compose logs -f[/yellow] - View logs",
        "   [yellow]docker-compose down[/yellow] - Stop containers",
        "   [yellow]docker-compose exec app bash[/yellow] - Access container shell",
    ]
    return lines


def print_final_instructions(
    options: ProjectOptions,
    result: ScaffoldResult,
    console: Optional[Console] = None,
) -> None:
    """Print the completion panel followed by the next steps."""
    out = console or default_console
    out.print()
    out.print(Panel.fit("Setup Complete!", style="bold green"))
    out.print(f"📂 Project created in: {result.project_path}")
    for warning in result.warnings:
        out.print(f"[bold yellow]⚠️  {warning}[/bold yellow]")
    out.print()
    for line in build_instructions(options):
        out.print(line)
    out.print()
    out.print("[green]🎉 Happy coding! 🚀[/green]")
