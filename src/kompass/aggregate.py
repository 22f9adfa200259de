"""Concurrent collection of the image and devfile listings."""

from collections.abc import Callable
from dataclasses import dataclass

from kompass.config import KompassConfig
from kompass.errors import REGISTRY_MISCONFIGURED, EmptyAggregateError, SourceUnavailableError
from kompass.models import AggregateResult, DevfileCatalog, ImageCatalog
from kompass.tags import filter_hidden_components
from kompass.tasks import ConcurrentTasks
from kompass.utils.logging import get_logger

logger = get_logger(__name__)

FetchImageCatalog = Callable[[], ImageCatalog]
FetchDevfileCatalog = Callable[[str], DevfileCatalog]


@dataclass(frozen=True)
class AggregatorSettings:
    """Flags that decide which sources are queried and how failures are treated."""
    experimental: bool = False
    push_target_docker: bool = False
    registry_filter: str = ""
    max_concurrent: int = 2

    @classmethod
    def from_config(cls, config: KompassConfig) -> "AggregatorSettings":
        return cls(
            experimental=bool(config.experimental),
            push_target_docker=config.push_target_docker,
            max_concurrent=config.max_concurrent,
        )


class CatalogAggregator:
    """Fetches both listings concurrently and validates the combination.

    The image listing is skipped when pushing to docker. The devfile listing
    is only fetched in experimental mode, and in that mode a failing image
    fetch (typically: not logged in to a cluster) is downgraded to a debug
    message and the image listing is left empty.
    """

    def __init__(
        self,
        settings: AggregatorSettings,
        fetch_images: FetchImageCatalog,
        fetch_devfiles: FetchDevfileCatalog,
    ) -> None:
        self.settings = settings
        self.fetch_images = fetch_images
        self.fetch_devfiles = fetch_devfiles

    def _image_task(self, result: AggregateResult) -> Callable[[], None]:
        def run() -> None:
            try:
                catalog = self.fetch_images()
            except SourceUnavailableError as e:
                if not self.settings.experimental:
                    raise
                logger.debug(f"Please log in to a cluster to list image components ({e})")
                return
            catalog.items = filter_hidden_components(catalog.items)
            result.images = catalog
            result.image_available = True

        return run

    def _devfile_task(self, result: AggregateResult) -> Callable[[], None]:
        def run() -> None:
            catalog = self.fetch_devfiles(self.settings.registry_filter)
            if not catalog.registries:
                result.warnings.append(REGISTRY_MISCONFIGURED)
            result.devfiles = catalog
            result.devfile_available = True

        return run

    def fetch(self) -> AggregateResult:
        """Run the fetch tasks; raises the first non-suppressed fetch error."""
        result = AggregateResult()
        tasks = ConcurrentTasks(self.settings.max_concurrent)

        if not self.settings.push_target_docker:
            tasks.add(self._image_task(result))
        if self.settings.experimental:
            tasks.add(self._devfile_task(result))

        logger.debug(f"Fetching catalog from {len(tasks)} source(s)")
        tasks.run()
        return result

    @staticmethod
    def validate(result: AggregateResult) -> None:
        """Fail when neither listing has any entry."""
        if result.is_empty:
            raise EmptyAggregateError()

    def collect(self) -> AggregateResult:
        """Fetch both listings, then validate."""
        result = self.fetch()
        self.validate(result)
        return result
