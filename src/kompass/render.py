"""Output rendering for the component catalog.

Two modes: a single JSON document holding both listings, or up to two
tables (image components, devfile components) printed to a rich console.
"""

import json
import sys
from typing import Any, TextIO

from rich.console import Console, Group, RenderableType
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from kompass.disambiguate import display_names
from kompass.models import AggregateResult, ComponentEntry, DevfileEntry
from kompass.partition import PartitionedCatalog, TagSupportLookup

LIST_KIND = "List"
API_VERSION = "kompass.dev/v1alpha1"

IMAGE_SECTION_TITLE = "Image Components:"
DEVFILE_SECTION_TITLE = "Devfile Components:"
IMAGE_COLUMNS = ("NAME", "PROJECT", "TAGS", "SUPPORTED")
DEVFILE_COLUMNS = ("NAME", "DESCRIPTION", "REGISTRY", "SUPPORTED")

COLUMN_PADDING = 3
UNBOUNDED_WIDTH = 10_000


def render_json(result: AggregateResult, lookup: TagSupportLookup) -> dict[str, Any]:
    """Build the structured document.

    Image items carry only their supported tags. Both item lists are always
    present, even when empty.
    """
    s2i_items = []
    for entry in result.images.items:
        supported, _ = lookup(entry)
        s2i_items.append(entry.to_dict(supported_tags=supported))

    return {
        "kind": LIST_KIND,
        "apiVersion": API_VERSION,
        "metadata": {},
        "s2iItems": s2i_items,
        "devfileItems": [devfile.to_dict() for devfile in result.devfiles.items],
    }


def emit_json(document: dict[str, Any], stream: TextIO | None = None) -> None:
    """Write the document in one write call."""
    stream = stream or sys.stdout
    stream.write(json.dumps(document, indent=2) + "\n")
    stream.flush()


def fit_table(table: Table, console: Console) -> Table:
    """Size the table to its content so rows are never wrapped or truncated."""
    options = console.options.update_width(UNBOUNDED_WIDTH)
    table.width = Measurement.get(console, options, table).maximum
    return table


def _new_table(columns: tuple[str, ...]) -> Table:
    table = Table(
        box=None,
        show_edge=False,
        pad_edge=False,
        padding=(0, COLUMN_PADDING),
        header_style=None,
    )
    for column in columns:
        table.add_column(column, justify="left", no_wrap=True)
    return table


def _add_image_rows(table: Table, section: list[ComponentEntry], active_namespace: str, supported: str) -> None:
    for entry, label in zip(section, display_names(section, active_namespace)):
        tags = ",".join(entry.non_hidden_tags or ())
        table.add_row(Text(label), Text(entry.namespace), Text(tags), supported)


def _add_devfile_rows(table: Table, section: list[DevfileEntry], supported: str) -> None:
    for devfile in section:
        table.add_row(Text(devfile.name), Text(devfile.description), Text(devfile.registry.name), supported)


def build_tables(
    partitioned: PartitionedCatalog,
    active_namespace: str,
    show_all_devfiles: bool = False,
) -> list[RenderableType]:
    """Build the table sections that have rows to show."""
    renderables: list[RenderableType] = []

    if partitioned.has_images:
        table = _new_table(IMAGE_COLUMNS)
        if partitioned.supported_images:
            _add_image_rows(table, partitioned.supported_images, active_namespace, "YES")
        if partitioned.unsupported_images:
            _add_image_rows(table, partitioned.unsupported_images, active_namespace, "NO")
        renderables.extend([Text(IMAGE_SECTION_TITLE), table, Text("")])

    show_unsupported = show_all_devfiles and bool(partitioned.unsupported_devfiles)
    if partitioned.supported_devfiles or show_unsupported:
        table = _new_table(DEVFILE_COLUMNS)
        if partitioned.supported_devfiles:
            _add_devfile_rows(table, partitioned.supported_devfiles, "YES")
        if show_unsupported:
            _add_devfile_rows(table, partitioned.unsupported_devfiles, "NO")
        renderables.extend([Text(DEVFILE_SECTION_TITLE), table, Text("")])

    return renderables


def render_tables(
    partitioned: PartitionedCatalog,
    active_namespace: str,
    show_all_devfiles: bool,
    console: Console,
) -> None:
    """Print the table sections in a single console write.

    Tables keep their natural width: long rows run past the terminal width
    instead of being cut.
    """
    renderables = build_tables(partitioned, active_namespace, show_all_devfiles)
    if renderables:
        for renderable in renderables:
            if isinstance(renderable, Table):
                fit_table(renderable, console)
        console.print(Group(*renderables), crop=False)
