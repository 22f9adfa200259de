"""Cluster client listing builder image streams as component types."""

from typing import Any

import httpx

from kompass.config import ClusterConfig
from kompass.errors import SourceUnavailableError
from kompass.models import ComponentEntry, ImageCatalog
from kompass.tags import filter_hidden_tags
from kompass.utils.logging import get_logger

logger = get_logger(__name__)

IMAGE_STREAMS_PATH = "/apis/image.openshift.io/v1/namespaces/{namespace}/imagestreams"

# An alias chain longer than this is treated as unresolvable
MAX_ALIAS_DEPTH = 10


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _annotation_tags(tag: dict[str, Any]) -> list[str]:
    value = _mapping(tag.get("annotations")).get("tags", "")
    if not isinstance(value, str):
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def _resolve_image(tag_name: str, tags_by_name: dict[str, dict[str, Any]]) -> str | None:
    """Follow ImageStreamTag aliases down to a docker image reference."""
    for _ in range(MAX_ALIAS_DEPTH):
        tag = tags_by_name.get(tag_name)
        if tag is None:
            return None
        source = _mapping(tag.get("from"))
        kind = source.get("kind")
        name = source.get("name")
        if not name or not isinstance(name, str):
            return None
        if kind == "DockerImage":
            return name
        if kind == "ImageStreamTag":
            # "nodejs:10" within the same stream, or plain "10"
            tag_name = name.rsplit(":", 1)[-1]
            continue
        return None
    return None


def parse_image_stream(item: dict[str, Any]) -> ComponentEntry | None:
    """Turn an image stream into a component entry.

    Returns None when the stream has no builder tags. Hidden builder tags
    are dropped, which may leave an entry without tags. Malformed tag
    entries are skipped.
    """
    metadata = _mapping(item.get("metadata"))
    spec_tags = _mapping(item.get("spec")).get("tags") or []
    if not isinstance(spec_tags, list):
        spec_tags = []
    tags_by_name = {
        tag["name"]: tag
        for tag in spec_tags
        if isinstance(tag, dict) and tag.get("name") and isinstance(tag["name"], str)
    }

    builder_tags = [name for name, tag in tags_by_name.items() if "builder" in _annotation_tags(tag)]
    if not builder_tags:
        return None

    hidden = [name for name in builder_tags if "hidden" in _annotation_tags(tags_by_name[name])]
    visible = filter_hidden_tags(builder_tags, hidden)

    tag_images = {}
    for name in visible:
        image = _resolve_image(name, tags_by_name)
        if image is not None:
            tag_images[name] = image

    return ComponentEntry(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        tags=tuple(visible),
        tag_images=tag_images,
    )


class ClusterClient:
    """Lists builder image streams from the builder and active namespaces."""

    def __init__(self, config: ClusterConfig, transport: httpx.BaseTransport | None = None) -> None:
        self.config = config
        headers = {"Accept": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = httpx.Client(
            base_url=config.server,
            headers=headers,
            timeout=config.timeout,
            verify=config.verify_tls,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ClusterClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _list_namespace(self, namespace: str, required: bool) -> list[ComponentEntry]:
        path = IMAGE_STREAMS_PATH.format(namespace=namespace)
        try:
            response = self._client.get(path)
        except httpx.HTTPError as e:
            raise SourceUnavailableError("image", f"Unable to reach cluster at {self.config.server}: {e}") from e

        if not required and response.status_code in (403, 404):
            logger.debug(f"Skipping image streams in namespace {namespace}: HTTP {response.status_code}")
            return []
        if response.status_code >= 400:
            raise SourceUnavailableError(
                "image",
                f"Unable to list image streams in namespace {namespace}: HTTP {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailableError("image", f"Invalid image stream list from cluster: {e}") from e

        items = (data.get("items") or []) if isinstance(data, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise SourceUnavailableError(
                "image", f"Invalid image stream list from cluster for namespace {namespace}"
            )

        entries = []
        for item in items:
            entry = parse_image_stream(item)
            if entry is not None:
                entries.append(entry)
        return entries

    def list_components(self) -> ImageCatalog:
        """List component types from builder image streams."""
        catalog = ImageCatalog()
        catalog.items.extend(self._list_namespace(self.config.builder_namespace, required=True))
        if self.config.namespace != self.config.builder_namespace:
            catalog.items.extend(self._list_namespace(self.config.namespace, required=False))
        logger.debug(f"Found {len(catalog.items)} image components")
        return catalog
