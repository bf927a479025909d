"""Shared pytest fixtures for the Connectivity Generator test suite.

Provides reusable fixtures for:
- The packaged service stubs and a synthetic stub catalog
- Project identifiers and interview results
- A fake cloned template repository with an ``.env.example``
- A Config pointing at temporary directories
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from connectivity_generator.config import Config
from connectivity_generator.scaffolder.catalog import ServiceCatalog
from connectivity_generator.scaffolder.models import (
    LocalNetwork,
    ProjectName,
    ProjectOptions,
    ServiceKey,
    SharedNetwork,
)

PACKAGED_STUBS = Path(__file__).parent.parent / "connectivity_generator" / "scaffolder" / "stubs"


# ---------------------------------------------------------------------------
# Stubs & catalogs
# ---------------------------------------------------------------------------

@pytest.fixture
def packaged_catalog() -> ServiceCatalog:
    """Catalog over the stubs shipped with the package."""
    return ServiceCatalog.from_directory(PACKAGED_STUBS)


def _service(text: str) -> str:
    """Dedent a service fragment and nest it under ``services:``."""
    return textwrap.indent(textwrap.dedent(text), "    ")


SYNTHETIC_STUBS: dict[str, str] = {
    "app": textwrap.dedent("""\
        services:
            connectivity-app:
                image: 'connectivity/php:8.4-alpine'
                container_name: connectivity-app
                volumes:
                    - './:/var/www/html'
                labels:
                    - 'traefik.http.routers.connectivity.rule=Host(`connectivity.bookingkit.test`)'
        """),
    "queue": _service("""\
            connectivity-queue:
                image: 'connectivity/php:8.4-alpine'
                container_name: connectivity-queue
                volumes:
                    - './:/var/www/html'
        """),
    "psql": _service("""\
            connectivity-postgres:
                image: 'postgres:17-alpine'
                container_name: connectivity-psql
                volumes:
                    - 'connectivity-pgdata:/var/lib/postgresql/data'
        """),
    "mysql": _service("""\
            connectivity-mysql:
                image: 'mariadb:11'
                container_name: connectivity-mysql
                volumes:
                    - 'connectivity-dbdata:/var/lib/mysql'
        """),
    "valkey": _service("""\
            connectivity-valkey:
                image: 'valkey/valkey:8-alpine'
                container_name: connectivity-valkey
                volumes:
                    - 'connectivity-cache:/data'
        """),
    "smtp": _service("""\
            connectivity-smtp:
                image: 'axllent/mailpit:latest'
                container_name: connectivity-smtp
        """),
}


@pytest.fixture
def stubs_dir(tmp_path: Path) -> Path:
    """A temporary stubs directory populated with small synthetic fragments."""
    directory = tmp_path / "stubs"
    directory.mkdir()
    for key, content in SYNTHETIC_STUBS.items():
        (directory / f"{key}.stub").write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def catalog(stubs_dir: Path) -> ServiceCatalog:
    """Synthetic catalog over ``stubs_dir``."""
    return ServiceCatalog.from_directory(stubs_dir)


# ---------------------------------------------------------------------------
# Projects & options
# ---------------------------------------------------------------------------

@pytest.fixture
def project() -> ProjectName:
    return ProjectName.parse("acme-shop")


@pytest.fixture
def shared_options(project: ProjectName) -> ProjectOptions:
    """Options for a project on the shared network with a custom domain."""
    return ProjectOptions(
        project=project,
        services=(ServiceKey.PSQL, ServiceKey.VALKEY),
        topology=SharedNetwork(domain="acme-shop.bookingkit.test"),
        deploy_root="/srv/bookingkit-local",
    )


@pytest.fixture
def local_options(project: ProjectName) -> ProjectOptions:
    """Options for a self-contained project without a domain."""
    return ProjectOptions(
        project=project,
        services=(ServiceKey.MYSQL, ServiceKey.SMTP),
        topology=LocalNetwork(),
        deploy_root="/srv/bookingkit-local",
    )


# ---------------------------------------------------------------------------
# Template repository
# ---------------------------------------------------------------------------

ENV_EXAMPLE = textwrap.dedent("""\
    APP_NAME=Laravel
    APP_ENV=local
    APP_KEY=
    APP_DEBUG=true
    APP_URL=http://localhost

    DB_CONNECTION=mysql
    DB_HOST=127.0.0.1
    DB_PORT=3306
    DB_DATABASE=laravel
    DB_USERNAME=root
    DB_PASSWORD=

    REDIS_HOST=127.0.0.1
    REDIS_PORT=6379

    MAIL_MAILER=smtp
    MAIL_HOST=127.0.0.1
    MAIL_PORT=2525

    BOOKINGKIT_ROOT=

    VITE_APP_NAME="${APP_NAME}"
    """)


@pytest.fixture
def env_example_text() -> str:
    return ENV_EXAMPLE


@pytest.fixture
def template_repo(tmp_path: Path) -> Path:
    """A directory standing in for a freshly cloned template repository."""
    repo = tmp_path / "template"
    repo.mkdir()
    (repo / ".env.example").write_text(ENV_EXAMPLE, encoding="utf-8")
    (repo / "artisan").write_text("#!/usr/bin/env php\n", encoding="utf-8")
    return repo


@pytest.fixture
def config(tmp_path: Path, stubs_dir: Path) -> Config:
    """Config writing projects under ``tmp_path/out`` using the synthetic stubs."""
    out = tmp_path / "out"
    out.mkdir()
    return Config(
        output_dir=out,
        stubs_dir=stubs_dir,
        template_repo=str(tmp_path / "template"),
        default_deploy_root="/srv/bookingkit-local",
    )
