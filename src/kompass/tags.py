"""Tag classification and builder image support lookup."""

from collections.abc import Callable, Iterable

from kompass.models import ComponentEntry


def classify_tags(
    tags: Iterable[str],
    is_supported: Callable[[str], bool],
) -> tuple[list[str], list[str]]:
    """Split tags into (supported, unsupported), preserving order in each."""
    supported: list[str] = []
    unsupported: list[str] = []
    for tag in tags:
        if is_supported(tag):
            supported.append(tag)
        else:
            unsupported.append(tag)
    return supported, unsupported


def normalize_image(image: str) -> str:
    """Normalize an image reference for comparison.

    Drops a registry host ("docker.io/centos/x" -> "centos/x") and an
    image digest, and defaults a missing tag to "latest".
    """
    image = image.split("@", 1)[0]
    parts = image.split("/")
    if len(parts) > 2 and ("." in parts[0] or ":" in parts[0] or parts[0] == "localhost"):
        parts = parts[1:]
    image = "/".join(parts)
    if ":" not in parts[-1]:
        image = f"{image}:latest"
    return image


class SupportedImages:
    """Lookup of builder images this tool is known to build successfully."""

    def __init__(self, images: Iterable[str]) -> None:
        self._images = {normalize_image(image) for image in images}

    def __contains__(self, image: str) -> bool:
        return normalize_image(image) in self._images

    def slice_supported_tags(self, entry: ComponentEntry) -> tuple[list[str], list[str]]:
        """Split an entry's tags by whether the image behind each tag is supported."""

        def is_supported(tag: str) -> bool:
            image = entry.tag_images.get(tag)
            return image is not None and image in self

        return classify_tags(entry.tags, is_supported)


def filter_hidden_tags(tags: Iterable[str], hidden: Iterable[str]) -> list[str]:
    """Drop hidden tags."""
    hidden_set = set(hidden)
    return [tag for tag in tags if tag not in hidden_set]


def filter_hidden_components(entries: Iterable[ComponentEntry]) -> list[ComponentEntry]:
    """Drop entries that have no visible tags left."""
    return [entry for entry in entries if entry.tags]
