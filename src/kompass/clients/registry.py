"""Devfile registry client."""

from typing import Any

import httpx
import yaml

from kompass.config import RegistryConfig
from kompass.errors import SourceUnavailableError
from kompass.models import DevfileCatalog, DevfileEntry, Registry
from kompass.utils.logging import get_logger

logger = get_logger(__name__)

INDEX_PATH = "/devfiles/index.json"

RUN_COMMAND_IDS = {"run", "devrun"}


def devfile_url(registry: Registry, link: str) -> str:
    """Absolute URL of a devfile linked from a registry index."""
    if link.startswith(("http://", "https://")):
        return link
    return f"{registry.url.rstrip('/')}/{link.lstrip('/')}"


def is_devfile_supported(devfile: dict[str, Any]) -> bool:
    """Check whether a devfile can be deployed by this tool.

    It needs a container component (``container`` in 2.x, ``dockerimage``
    in 1.x) and a run command.
    """
    components = devfile.get("components")
    if not isinstance(components, list):
        return False
    has_container = any(
        isinstance(c, dict) and ("container" in c or c.get("type") == "dockerimage")
        for c in components
    )
    if not has_container:
        return False

    commands = devfile.get("commands")
    for command in commands if isinstance(commands, list) else []:
        if not isinstance(command, dict):
            continue
        name = str(command.get("id") or command.get("name") or "").lower()
        if name in RUN_COMMAND_IDS:
            return True
        exec_ = command.get("exec")
        group = exec_.get("group") if isinstance(exec_, dict) else None
        if isinstance(group, dict) and group.get("kind") == "run":
            return True
    return False


class RegistryClient:
    """Lists devfile components from the configured registries."""

    def __init__(
        self,
        registries: list[RegistryConfig],
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.registries = [Registry(name=r.name, url=r.url) for r in registries]
        self._client = httpx.Client(timeout=timeout, transport=transport, follow_redirects=True)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get(self, url: str) -> httpx.Response:
        response = self._client.get(url)
        response.raise_for_status()
        return response

    def _check_support(self, registry: Registry, link: str) -> bool:
        if not link:
            return False
        try:
            devfile = yaml.safe_load(self._get(devfile_url(registry, link)).text)
        except (httpx.HTTPError, yaml.YAMLError) as e:
            logger.debug(f"Unable to read devfile {link} from {registry.name}: {e}")
            return False
        return isinstance(devfile, dict) and is_devfile_supported(devfile)

    def list_registry(self, registry: Registry) -> list[DevfileEntry]:
        """List the devfile components of one registry."""
        index_url = f"{registry.url.rstrip('/')}{INDEX_PATH}"
        try:
            index = self._get(index_url).json()
        except httpx.HTTPError as e:
            raise SourceUnavailableError("devfile", f"Unable to read registry {registry.name}: {e}") from e
        except ValueError as e:
            raise SourceUnavailableError("devfile", f"Invalid index in registry {registry.name}: {e}") from e

        index = index or []
        if not isinstance(index, list) or not all(isinstance(item, dict) for item in index):
            raise SourceUnavailableError(
                "devfile", f"Invalid index in registry {registry.name}: expected a list of devfiles"
            )

        entries = []
        for item in index:
            links = item.get("links")
            link = links.get("self", "") if isinstance(links, dict) else ""
            if not isinstance(link, str):
                link = ""
            name = str(item.get("name") or item.get("displayName") or "")
            entries.append(DevfileEntry(
                name=name,
                registry=registry,
                display_name=str(item.get("displayName") or name),
                description=str(item.get("description") or ""),
                link=link,
                supported=self._check_support(registry, link),
            ))
        logger.debug(f"Registry {registry.name}: {len(entries)} devfile components")
        return entries

    def list_devfile_components(self, registry_filter: str = "") -> DevfileCatalog:
        """List devfile components, optionally from one named registry only."""
        catalog = DevfileCatalog()
        for registry in self.registries:
            if registry_filter and registry.name != registry_filter:
                continue
            catalog.registries.append(registry)
            catalog.items.extend(self.list_registry(registry))
        return catalog
