"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from kompass.config import ClusterConfig, KompassConfig, RegistryConfig, save_config
from kompass.errors import SourceUnavailableError
from kompass.models import ComponentEntry, DevfileCatalog, DevfileEntry, ImageCatalog, Registry
from kompass.tags import SupportedImages

NODEJS_10 = "centos/nodejs-10-centos7:latest"
NODEJS_8 = "centos/nodejs-8-centos7:latest"
UNSUPPORTED_IMAGE = "example/nodejs-experimental:latest"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def lookup():
    """Support lookup that knows the nodejs 8 and 10 builder images."""
    return SupportedImages([NODEJS_8, NODEJS_10])


@pytest.fixture
def nodejs_entry():
    """Image entry with two supported tags and one unsupported tag."""
    return ComponentEntry(
        name="nodejs",
        namespace="openshift",
        tags=("8", "10", "unsupported-tag"),
        tag_images={"8": NODEJS_8, "10": NODEJS_10, "unsupported-tag": UNSUPPORTED_IMAGE},
    )


@pytest.fixture
def registry():
    return Registry(name="DefaultDevfileRegistry", url="https://registry.example.com")


@pytest.fixture
def devfiles(registry):
    """One supported and one unsupported devfile entry."""
    return [
        DevfileEntry(name="java-maven", registry=registry, description="Upstream Maven", supported=True),
        DevfileEntry(name="php-mysql", registry=registry, description="PHP with MySQL", supported=False),
    ]


class FakeClusterClient:
    """Stands in for ClusterClient in CLI tests."""

    items: list[ComponentEntry] = []
    error: str | None = None

    def __init__(self, config, transport=None):
        self.config = config

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def list_components(self) -> ImageCatalog:
        if self.error is not None:
            raise SourceUnavailableError("image", self.error)
        return ImageCatalog(items=list(self.items))


class FakeRegistryClient:
    """Stands in for RegistryClient in CLI tests."""

    items: list[DevfileEntry] = []
    registries: list[Registry] = []

    def __init__(self, registries, timeout=30.0, transport=None):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        pass

    def list_devfile_components(self, registry_filter: str = "") -> DevfileCatalog:
        return DevfileCatalog(items=list(self.items), registries=list(self.registries))


@pytest.fixture
def fake_clients(monkeypatch):
    """Replace the backend clients used by the CLI; returns (cluster, registry) classes."""
    cluster = type("FakeCluster", (FakeClusterClient,), {"items": [], "error": None})
    registry = type("FakeRegistry", (FakeRegistryClient,), {"items": [], "registries": []})
    monkeypatch.setattr("kompass.cli.ClusterClient", cluster)
    monkeypatch.setattr("kompass.cli.RegistryClient", registry)
    return cluster, registry


@pytest.fixture
def config_file(temp_dir):
    """Config file with experimental mode on and active namespace myproject."""
    path = temp_dir / "kompass.yaml"
    config = KompassConfig(
        cluster=ClusterConfig(server="https://cluster.example.com", namespace="myproject"),
        registries=[RegistryConfig(name="DefaultDevfileRegistry", url="https://registry.example.com")],
        experimental=True,
        push_target="cluster",
        supported_images=[NODEJS_8, NODEJS_10],
    )
    save_config(config, path)
    return path
