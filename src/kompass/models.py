"""Catalog records.

Records are immutable for the duration of a command invocation. Derived
rows (e.g. the supported and unsupported projections of one image entry)
are built with dataclasses.replace instead of mutating the source record.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Registry:
    """A devfile registry."""
    name: str
    url: str


@dataclass(frozen=True)
class ComponentEntry:
    """A builder image stream offered as a component type."""
    name: str
    namespace: str
    tags: tuple[str, ...] = ()
    # tag -> image reference, e.g. "10" -> "centos/nodejs-10-centos7:latest"
    tag_images: dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    non_hidden_tags: tuple[str, ...] | None = None

    def with_tags(self, tags: list[str] | tuple[str, ...]) -> "ComponentEntry":
        """Project this entry onto a subset of its tags."""
        if self.non_hidden_tags is not None:
            raise ValueError(f"Tags of {self.namespace}/{self.name} already assigned")
        return ComponentEntry(
            name=self.name,
            namespace=self.namespace,
            tags=self.tags,
            tag_images=self.tag_images,
            non_hidden_tags=tuple(tags),
        )

    def to_dict(self, supported_tags: list[str] | None = None) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": "ComponentType",
            "apiVersion": "kompass.dev/v1alpha1",
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {
                "allTags": list(self.tags),
                "nonHiddenTags": list(self.non_hidden_tags if self.non_hidden_tags is not None else self.tags),
            },
        }
        if supported_tags is not None:
            data["spec"]["supportedTags"] = list(supported_tags)
        return data


@dataclass(frozen=True)
class DevfileEntry:
    """A devfile component type from a registry."""
    name: str
    registry: Registry
    display_name: str = ""
    description: str = ""
    link: str = ""
    supported: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "DisplayName": self.display_name,
            "Description": self.description,
            "Link": self.link,
            "Registry": {"Name": self.registry.name, "URL": self.registry.url},
            "Support": self.supported,
        }


@dataclass
class ImageCatalog:
    """Image-based listing."""
    items: list[ComponentEntry] = field(default_factory=list)


@dataclass
class DevfileCatalog:
    """Descriptor-based listing and the registries it was read from."""
    items: list[DevfileEntry] = field(default_factory=list)
    registries: list[Registry] = field(default_factory=list)


@dataclass
class AggregateResult:
    """Both listings after the fetch join.

    A listing that was never fetched, or whose failure was suppressed, is
    marked unavailable; an available listing may still be empty.
    """
    images: ImageCatalog = field(default_factory=ImageCatalog)
    devfiles: DevfileCatalog = field(default_factory=DevfileCatalog)
    image_available: bool = False
    devfile_available: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.images.items and not self.devfiles.items
