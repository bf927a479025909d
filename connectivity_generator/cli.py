"""Connectivity Generator command line.

Usage::

    connectivity-generator generate
    connectivity-generator generate --name booking-sync --services psql,valkey --yes
    connectivity-generator generate --name billing --local-network --deploy-root ~/bookingkit-local
    connectivity-generator services
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from connectivity_generator.config import Config
from connectivity_generator.instructions import print_banner, print_final_instructions
from connectivity_generator.interview import Interview
from connectivity_generator.scaffolder import ProjectScaffolder, ScaffoldError, ServiceCatalog
from connectivity_generator.scaffolder.errors import RepositoryCloneError
from connectivity_generator.utils import console, print_error, print_summary_table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="connectivity-generator",
        description="Connectivity Generator -- scaffold a connectivity application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  connectivity-generator generate\n"
            "  connectivity-generator generate --name my-app --services psql,valkey --yes\n"
            "  connectivity-generator services\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Build a connectivity application template")
    generate.add_argument("--output", "-o", default=None, help="Parent directory of the project (default: .)")
    generate.add_argument("--name", default=None, help="Project name (letters, numbers, '-' and '_')")
    generate.add_argument(
        "--services",
        default=None,
        help="Comma-separated services to include, e.g. psql,valkey,queue",
    )
    network = generate.add_mutually_exclusive_group()
    network.add_argument(
        "--shared-network",
        dest="shared_network",
        action="store_const",
        const=True,
        default=None,
        help="Join the external bookingkit network (Traefik)",
    )
    network.add_argument(
        "--local-network",
        dest="shared_network",
        action="store_const",
        const=False,
        help="Create a project-specific network",
    )
    generate.add_argument("--domain", default=None, help="Custom domain for Traefik routing")
    generate.add_argument("--deploy-root", default=None, help="Path to the bookingkit-local checkout")
    generate.add_argument("--template-repo", default=None, help="Override the template repository URL")
    generate.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; use defaults for anything not given on the command line",
    )
    generate.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing project directory without asking",
    )

    subparsers.add_parser("services", help="List the services that can be added to a project")
    return parser


def _config_from_args(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    updates: dict[str, object] = {}
    if getattr(args, "output", None):
        updates["output_dir"] = Path(args.output)
    if getattr(args, "template_repo", None):
        updates["template_repo"] = args.template_repo
    return config.model_copy(update=updates) if updates else config


def _list_services(config: Config) -> int:
    catalog = ServiceCatalog.from_directory(config.stubs_dir)
    print_summary_table(
        {entry.key: entry.label for entry in catalog.selectable},
        title="Available Docker Services",
    )
    return 0


def _generate(args: argparse.Namespace, config: Config) -> int:
    print_banner()
    catalog = ServiceCatalog.from_directory(config.stubs_dir)
    interview = Interview(
        config,
        catalog,
        interactive=not args.yes,
        overwrite=args.force,
    )
    try:
        options = interview.run(
            name=args.name,
            services=args.services,
            shared_network=args.shared_network,
            domain=args.domain,
            deploy_root=args.deploy_root,
        )
    except ScaffoldError as exc:
        print_error(f"❌ {exc}")
        return 1
    except ValueError as exc:
        print_error(f"Error: {exc}")
        return 1

    scaffolder = ProjectScaffolder(config, catalog=catalog)
    try:
        result = asyncio.run(scaffolder.scaffold(options))
    except RepositoryCloneError as exc:
        print_error(f"❌ {exc}")
        if exc.output:
            print_error(f"Output: {exc.output}")
        return 1
    except ScaffoldError as exc:
        print_error(f"❌ {exc}")
        return 1

    print_final_instructions(options, result)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for ``connectivity-generator``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "generate" and args.domain and args.shared_network is False:
        parser.error("--domain cannot be combined with --local-network")
    config = _config_from_args(args)

    try:
        if args.command == "services":
            return _list_services(config)
        return _generate(args, config)
    except KeyboardInterrupt:
        console.print()
        print_error("Aborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
