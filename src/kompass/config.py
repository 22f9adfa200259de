"""kompass configuration management."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

# Default paths
DEFAULT_CONFIG_DIR = Path.home() / ".kompass"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "kompass.yaml"

DEFAULT_REGISTRY_NAME = "DefaultDevfileRegistry"
DEFAULT_REGISTRY_URL = "https://registry.devfile.io"

# Builder images known to build with this version of the tool
DEFAULT_SUPPORTED_IMAGES = [
    "redhat-openjdk-18/openjdk18-openshift:latest",
    "openjdk/openjdk-11-rhel8:latest",
    "openjdk/openjdk-11-rhel7:latest",
    "ubi8/openjdk-11:latest",
    "centos/nodejs-10-centos7:latest",
    "centos/nodejs-12-centos7:latest",
    "rhscl/nodejs-10-rhel7:latest",
    "rhscl/nodejs-12-rhel7:latest",
    "rhoar-nodejs/nodejs-10:latest",
    "ubi8/nodejs-12:latest",
]


class ClusterConfig(BaseModel):
    """Connection settings for the cluster holding builder image streams."""
    model_config = ConfigDict(validate_assignment=True)

    server: str = "https://localhost:6443"
    namespace: str = "default"  # active namespace
    builder_namespace: str = "openshift"
    token: str | None = None
    timeout: float = Field(default=30.0, gt=0)
    verify_tls: bool = True

    def model_post_init(self, __context: Any) -> None:
        """Apply environment variable fallbacks."""
        if self.token is None:
            self.token = os.getenv("KOMPASS_TOKEN")


class RegistryConfig(BaseModel):
    """A devfile registry."""
    name: str
    url: str


class KompassConfig(BaseModel):
    """Main kompass configuration."""
    model_config = ConfigDict(validate_assignment=True)

    version: str = "1.0"
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    registries: list[RegistryConfig] = Field(default_factory=list)
    experimental: bool | None = None
    push_target: str | None = None  # cluster, docker
    supported_images: list[str] = Field(default_factory=lambda: list(DEFAULT_SUPPORTED_IMAGES))
    max_concurrent: int = Field(default=2, ge=1)
    log_level: str = "WARNING"

    def model_post_init(self, __context: Any) -> None:
        """Apply environment variable fallbacks."""
        if self.experimental is None:
            self.experimental = os.getenv("KOMPASS_EXPERIMENTAL", "").lower() in ("true", "1", "yes", "on")
        if self.push_target is None:
            self.push_target = os.getenv("KOMPASS_PUSH_TARGET", "cluster").lower()

    @property
    def push_target_docker(self) -> bool:
        return self.push_target == "docker"

    def get_registry(self, name: str) -> RegistryConfig | None:
        """Get a configured registry by name."""
        for registry in self.registries:
            if registry.name == name:
                return registry
        return None


def get_default_config() -> KompassConfig:
    """Get default configuration with the public devfile registry."""
    return KompassConfig(
        registries=[
            RegistryConfig(name=DEFAULT_REGISTRY_NAME, url=DEFAULT_REGISTRY_URL),
        ],
    )


def get_config_path() -> Path:
    """Get the config file path (KOMPASS_CONFIG overrides the default)."""
    env_path = os.getenv("KOMPASS_CONFIG")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def load_config(config_path: Path | None = None) -> KompassConfig:
    """Load configuration from file or return defaults."""
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)
            if data:
                return KompassConfig.model_validate(data)

    return get_default_config()


def save_config(config: KompassConfig, config_path: Path | None = None) -> None:
    """Save configuration to file."""
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def get_nested_value(config: KompassConfig, key: str) -> Any:
    """Get a config value by dotted key, e.g. "cluster.namespace" or "registries.0.url"."""
    obj: Any = config

    for part in key.split("."):
        if isinstance(obj, list):
            try:
                obj = obj[int(part)]
            except (ValueError, IndexError):
                return None
        elif isinstance(obj, BaseModel) and part in type(obj).model_fields:
            obj = getattr(obj, part)
        else:
            return None

    return obj


def set_nested_value(config: KompassConfig, key: str, value: str) -> None:
    """Set a scalar config value by dotted key, e.g. "cluster.namespace".

    The string is validated (and coerced) by the field's type; raises
    KeyError for unknown or non-scalar keys and pydantic's ValidationError
    for values the field rejects.
    """
    *path, final_key = key.split(".")
    obj: Any = config

    for part in path:
        if not isinstance(obj, BaseModel) or part not in type(obj).model_fields:
            raise KeyError(f"Invalid config key: {key}")
        obj = getattr(obj, part)

    if not isinstance(obj, BaseModel) or final_key not in type(obj).model_fields:
        raise KeyError(f"Invalid config key: {key}")
    if isinstance(getattr(obj, final_key), (list, BaseModel)):
        raise KeyError(f"Not a single value: {key}")

    setattr(obj, final_key, value)
