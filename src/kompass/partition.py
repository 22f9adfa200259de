"""Split the merged catalog into supported and unsupported sections."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from kompass.models import ComponentEntry, DevfileEntry

TagSupportLookup = Callable[[ComponentEntry], tuple[list[str], list[str]]]


@dataclass
class PartitionedCatalog:
    """Catalog rows grouped by listing type and support."""
    supported_images: list[ComponentEntry] = field(default_factory=list)
    unsupported_images: list[ComponentEntry] = field(default_factory=list)
    supported_devfiles: list[DevfileEntry] = field(default_factory=list)
    unsupported_devfiles: list[DevfileEntry] = field(default_factory=list)

    @property
    def has_images(self) -> bool:
        return bool(self.supported_images or self.unsupported_images)

    @property
    def has_devfiles(self) -> bool:
        return bool(self.supported_devfiles or self.unsupported_devfiles)


def partition_images(
    images: Iterable[ComponentEntry],
    lookup: TagSupportLookup,
) -> tuple[list[ComponentEntry], list[ComponentEntry]]:
    """Project each image entry onto its supported and unsupported tags.

    An entry with both kinds of tags yields one row in each list, each
    carrying only its own subset. An entry without tags yields none.
    """
    supported_rows: list[ComponentEntry] = []
    unsupported_rows: list[ComponentEntry] = []
    for entry in images:
        supported, unsupported = lookup(entry)
        if supported:
            supported_rows.append(entry.with_tags(supported))
        if unsupported:
            unsupported_rows.append(entry.with_tags(unsupported))
    return supported_rows, unsupported_rows


def partition_catalog(
    images: Iterable[ComponentEntry],
    devfiles: Iterable[DevfileEntry],
    lookup: TagSupportLookup,
    show_all_devfiles: bool = False,
) -> PartitionedCatalog:
    """Partition both listings.

    Unsupported devfile entries are only kept when show_all_devfiles is
    set; unsupported image rows are always kept.
    """
    result = PartitionedCatalog()
    result.supported_images, result.unsupported_images = partition_images(images, lookup)

    for devfile in devfiles:
        if devfile.supported:
            result.supported_devfiles.append(devfile)
        elif show_all_devfiles:
            result.unsupported_devfiles.append(devfile)

    return result
