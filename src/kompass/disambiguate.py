"""Display labels for image components that share a name across namespaces."""

from collections.abc import Sequence

from kompass.models import ComponentEntry

MARKER = "(*)"


def display_name(entry: ComponentEntry, section: Sequence[ComponentEntry], active_namespace: str) -> str:
    """Label for one row of a rendered section.

    A row from the active namespace gets the marker when the same section
    holds another row with the same name from a different namespace. This
    scans the whole section, O(n^2) over display_names; catalogs hold tens
    of entries.
    """
    if entry.namespace != active_namespace:
        return entry.name
    for other in section:
        if other.name == entry.name and other.namespace != entry.namespace:
            return f"{entry.name} {MARKER}"
    return entry.name


def display_names(section: Sequence[ComponentEntry], active_namespace: str) -> list[str]:
    """Labels for every row of a section, in order."""
    return [display_name(entry, section, active_namespace) for entry in section]
