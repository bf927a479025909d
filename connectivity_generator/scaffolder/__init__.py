"""Connectivity Generator scaffolder -- builds a project from service stubs.

Takes the operator's ``ProjectOptions`` and produces a project directory with
the cloned application template, a ``docker-compose.yml`` assembled from the
selected service stubs and a configured ``.env``.

Quick usage::

    from connectivity_generator.config import Config
    from connectivity_generator.scaffolder import (
        ProjectName, ProjectOptions, ProjectScaffolder, ServiceKey, SharedNetwork,
    )

    options = ProjectOptions(
        project=ProjectName.parse("booking-sync"),
        services=(ServiceKey.PSQL, ServiceKey.VALKEY),
        topology=SharedNetwork(domain="booking-sync.bookingkit.test"),
        deploy_root="/srv/bookingkit-local",
    )
    result = await ProjectScaffolder(Config()).scaffold(options)
"""

from connectivity_generator.scaffolder.catalog import ServiceCatalog
from connectivity_generator.scaffolder.compose_gen import ComposeAssembler
from connectivity_generator.scaffolder.env_gen import EnvRewriter
from connectivity_generator.scaffolder.errors import (
    EnvTemplateNotFoundError,
    FragmentNotFoundError,
    RepositoryCloneError,
    ScaffoldError,
)
from connectivity_generator.scaffolder.generator import ProjectScaffolder
from connectivity_generator.scaffolder.models import (
    LocalNetwork,
    ProjectName,
    ProjectOptions,
    ServiceKey,
    SharedNetwork,
)
from connectivity_generator.scaffolder.placeholders import substitute_placeholders
from connectivity_generator.scaffolder.volumes import extract_named_volumes

__all__ = [
    "ComposeAssembler",
    "EnvRewriter",
    "EnvTemplateNotFoundError",
    "FragmentNotFoundError",
    "LocalNetwork",
    "ProjectName",
    "ProjectOptions",
    "ProjectScaffolder",
    "RepositoryCloneError",
    "ScaffoldError",
    "ServiceCatalog",
    "ServiceKey",
    "SharedNetwork",
    "extract_named_volumes",
    "substitute_placeholders",
]
