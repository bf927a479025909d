"""Tests for docker-compose manifest assembly.

Covers:
- Section builders (volumes, networks)
- Host rule rewriting and container-name normalisation
- Fragment ordering (app, queue, selection order)
- Volume collection across fragments
- Missing fragments (fatal for app, warning otherwise)
- Manifests built from the packaged stubs parse as YAML
"""

from __future__ import annotations

import re

import pytest
import yaml

from connectivity_generator.scaffolder.catalog import ServiceCatalog
from connectivity_generator.scaffolder.compose_gen import (
    ComposeAssembler,
    normalize_container_names,
    render_networks_section,
    render_volumes_section,
    rewrite_host_rules,
)
from connectivity_generator.scaffolder.errors import FragmentNotFoundError
from connectivity_generator.scaffolder.models import (
    LocalNetwork,
    ProjectName,
    ServiceKey,
    SharedNetwork,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def assembler(catalog: ServiceCatalog) -> ComposeAssembler:
    return ComposeAssembler(catalog)


# ---------------------------------------------------------------------------
# Section builders
# ---------------------------------------------------------------------------


class TestRenderVolumesSection:
    def test_empty(self):
        assert render_volumes_section([]) == ""

    def test_pins_names(self):
        section = render_volumes_section(["acme-data", "acme-cache"])
        assert section.splitlines() == [
            "volumes:",
            "    acme-data:",
            "        name: acme-data",
            "    acme-cache:",
            "        name: acme-cache",
        ]


class TestRenderNetworksSection:
    def test_shared(self, project):
        section = render_networks_section(SharedNetwork(), project)
        assert "name: bookingkit-network" in section
        assert "external: true" in section

    def test_local(self, project):
        section = render_networks_section(LocalNetwork(), project)
        assert "name: acme-shop-network" in section
        assert "external" not in section

    def test_shared_custom_name(self, project):
        section = render_networks_section(SharedNetwork(name="edge"), project)
        assert "name: edge" in section


# ---------------------------------------------------------------------------
# Rewrite rules
# ---------------------------------------------------------------------------


class TestRewriteHostRules:
    def test_rewrites_every_rule(self):
        text = "a=Host(`one.test`)\nb=Host(`two.test`)\n"
        assert rewrite_host_rules(text, "app.example.test") == (
            "a=Host(`app.example.test`)\nb=Host(`app.example.test`)\n"
        )

    def test_without_rule_unchanged(self):
        text = "image: nginx\n"
        assert rewrite_host_rules(text, "x.test") == text


class TestNormalizeContainerNames:
    def test_dash_to_underscore(self, project):
        text = "container_name: acme-shop-app\ncontainer_name: acme-shop-psql\n"
        result = normalize_container_names(text, project, ["app", "psql"])
        assert result == "container_name: acme_shop_app\ncontainer_name: acme_shop_psql\n"

    def test_only_listed_keys(self, project):
        text = "container_name: acme-shop-smtp\n"
        assert normalize_container_names(text, project, ["app"]) == text

    def test_underscore_project_input(self):
        project = ProjectName.parse("acme_shop")
        result = normalize_container_names("container_name: acme-shop-valkey", project, ["valkey"])
        assert result == "container_name: acme_shop_valkey"


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class TestAssemble:
    def test_app_only(self, assembler, project):
        result = assembler.assemble(project, [], LocalNetwork())
        assert result.services == ["app"]
        assert result.volumes == []
        assert "\nvolumes:" not in result.content
        assert result.content.rstrip().endswith("name: acme-shop-network")

    def test_queue_follows_app(self, assembler, project):
        result = assembler.assemble(
            project, [ServiceKey.PSQL, ServiceKey.VALKEY, ServiceKey.QUEUE], LocalNetwork()
        )
        assert result.services == ["app", "queue", "psql", "valkey"]
        content = result.content
        assert content.index("acme-shop-app:") < content.index("acme-shop-queue:")
        assert content.index("acme-shop-queue:") < content.index("acme-shop-postgres:")

    def test_selection_order_kept(self, assembler, project):
        result = assembler.assemble(project, [ServiceKey.VALKEY, ServiceKey.MYSQL], LocalNetwork())
        assert result.services == ["app", "valkey", "mysql"]

    def test_volumes_collected_and_declared(self, assembler, project):
        result = assembler.assemble(project, [ServiceKey.PSQL, ServiceKey.VALKEY], LocalNetwork())
        assert result.volumes == ["acme-shop-pgdata", "acme-shop-cache"]
        assert "\nvolumes:\n    acme-shop-pgdata:\n        name: acme-shop-pgdata" in result.content

    def test_duplicate_selection_collapsed(self, assembler, project):
        result = assembler.assemble(project, [ServiceKey.PSQL, ServiceKey.PSQL], LocalNetwork())
        assert result.services == ["app", "psql"]
        assert result.content.count("acme-shop-postgres:") == 1

    def test_shared_without_domain_keeps_host_rule(self, assembler, project):
        result = assembler.assemble(project, [], SharedNetwork())
        assert "external: true" in result.content
        assert "name: bookingkit-network" in result.content
        assert "Host(`acme-shop.bookingkit.test`)" in result.content

    def test_shared_with_domain_rewrites_host(self, assembler, project):
        result = assembler.assemble(project, [], SharedNetwork(domain="shop.example.test"))
        assert "Host(`shop.example.test`)" in result.content
        assert "bookingkit.test`)" not in result.content

    def test_local_ignores_host_rules(self, assembler, project):
        result = assembler.assemble(project, [], LocalNetwork())
        assert "Host(`acme-shop.bookingkit.test`)" in result.content
        assert "external" not in result.content

    def test_container_names_underscore(self, assembler, project):
        result = assembler.assemble(project, [ServiceKey.PSQL, ServiceKey.QUEUE], LocalNetwork())
        names = re.findall(r"container_name: (\S+)", result.content)
        assert names == ["acme_shop_app", "acme_shop_queue", "acme_shop_psql"]

    def test_placeholders_resolved(self, assembler, project):
        result = assembler.assemble(project, list(ServiceKey), SharedNetwork(domain="a.test"))
        assert "connectivity" not in result.content
        assert "image: 'acme-shop/php:8.4-alpine'" in result.content

    def test_missing_app_is_fatal(self, stubs_dir, project):
        (stubs_dir / "app.stub").unlink()
        assembler = ComposeAssembler(ServiceCatalog.from_directory(stubs_dir))
        with pytest.raises(FragmentNotFoundError) as exc_info:
            assembler.assemble(project, [ServiceKey.PSQL], LocalNetwork())
        assert exc_info.value.path == stubs_dir / "app.stub"

    def test_missing_service_warns_and_continues(self, stubs_dir, project):
        (stubs_dir / "valkey.stub").unlink()
        assembler = ComposeAssembler(ServiceCatalog.from_directory(stubs_dir))
        result = assembler.assemble(project, [ServiceKey.PSQL, ServiceKey.VALKEY], LocalNetwork())
        assert result.services == ["app", "psql"]
        assert len(result.warnings) == 1
        assert "valkey.stub" in result.warnings[0]
        assert "acme-shop-postgres:" in result.content
        assert "valkey" not in result.content

    def test_missing_queue_warns(self, stubs_dir, project):
        (stubs_dir / "queue.stub").unlink()
        assembler = ComposeAssembler(ServiceCatalog.from_directory(stubs_dir))
        result = assembler.assemble(project, [ServiceKey.QUEUE], LocalNetwork())
        assert result.services == ["app"]
        assert result.warnings


class TestPackagedStubs:
    @pytest.mark.parametrize(
        "topology",
        [LocalNetwork(), SharedNetwork(domain="acme-shop.bookingkit.test")],
        ids=["local", "shared"],
    )
    def test_full_manifest_is_valid_yaml(self, packaged_catalog, project, topology):
        result = ComposeAssembler(packaged_catalog).assemble(project, list(ServiceKey), topology)
        doc = yaml.safe_load(result.content)

        assert set(doc["services"]) == {
            "acme-shop-app",
            "acme-shop-queue",
            "acme-shop-mysql",
            "acme-shop-postgres",
            "acme-shop-smtp",
            "acme-shop-valkey",
        }
        assert doc["services"]["acme-shop-app"]["container_name"] == "acme_shop_app"
        assert doc["services"]["acme-shop-postgres"]["container_name"] == "acme_shop_psql"
        assert set(doc["volumes"]) == {
            "acme-shop-mariadb-data",
            "acme-shop-postgres-data",
            "acme-shop-redis-data",
            "acme-shop-mailpit-data",
        }
        for name, declared in doc["volumes"].items():
            assert declared == {"name": name}
        assert "default" in doc["networks"]

    def test_declared_volumes_are_used(self, packaged_catalog):
        project = ProjectName.parse("acme_shop")
        result = ComposeAssembler(packaged_catalog).assemble(
            project, [ServiceKey.PSQL, ServiceKey.VALKEY], LocalNetwork()
        )
        doc = yaml.safe_load(result.content)
        used = {
            mount.split(":", 1)[0]
            for service in doc["services"].values()
            for mount in service.get("volumes", [])
        }
        assert set(doc["volumes"]) <= used


class TestVolumeConsistency:
    def test_compound_volume_name_matches_mount(self, stubs_dir):
        (stubs_dir / "valkey.stub").write_text(
            "    connectivity-valkey:\n"
            "        image: 'valkey/valkey:8-alpine'\n"
            "        volumes:\n"
            "            - 'connectivity-valkey-data:/data'\n",
            encoding="utf-8",
        )
        project = ProjectName.parse("acme_shop")
        result = ComposeAssembler(ServiceCatalog.from_directory(stubs_dir)).assemble(
            project, [ServiceKey.VALKEY], LocalNetwork()
        )
        doc = yaml.safe_load(result.content)
        mounts = {m.split(":", 1)[0] for m in doc["services"]["acme-shop-valkey"]["volumes"]}
        assert result.volumes == ["acme-shop-valkey-data"]
        assert set(doc["volumes"]) == {"acme-shop-valkey-data"}
        assert set(doc["volumes"]) <= mounts
