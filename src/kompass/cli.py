"""kompass CLI entry point."""

import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kompass import __version__
from kompass.aggregate import AggregatorSettings, CatalogAggregator
from kompass.clients import ClusterClient, RegistryClient
from kompass.config import (
    RegistryConfig,
    get_config_path,
    get_default_config,
    get_nested_value,
    load_config,
    save_config,
    set_nested_value,
)
from kompass.errors import KompassError
from kompass.partition import partition_catalog
from kompass.render import COLUMN_PADDING, emit_json, fit_table, render_json, render_tables
from kompass.tags import SupportedImages
from kompass.utils.logging import get_logger, setup_logging

console = Console()
err_console = Console(stderr=True, soft_wrap=True)

logger = get_logger(__name__)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True, highlight=False)


def print_error(message: str, detail: str | None = None) -> None:
    """Print error message."""
    err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
    if detail:
        err_console.print(f"  [dim]{escape(detail)}[/dim]", highlight=False)


def print_warning(message: str) -> None:
    """Print warning message."""
    err_console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)


@click.group()
@click.version_option(version=__version__, prog_name="kompass")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """kompass: list the component types you can deploy.

    Combines builder images from the cluster with devfile registries.
    """
    config_path = config_path or get_config_path()
    try:
        config = load_config(config_path)
    except (ValidationError, yaml.YAMLError) as e:
        print_error(f"Invalid config file: {config_path}", str(e))
        sys.exit(1)
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = {"config_path": config_path, "config": config}


@main.command()
@click.option("--all", "-a", "list_all", is_flag=True, help="List both supported and unsupported devfile components.")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_obj
def components(obj: dict, list_all: bool, output: str) -> None:
    """List all component types.

    Lists builder images from the cluster and, in experimental mode,
    components from the configured devfile registries.
    """
    config = obj["config"]
    settings = AggregatorSettings.from_config(config)
    lookup = SupportedImages(config.supported_images)

    with ClusterClient(config.cluster) as cluster, \
            RegistryClient(config.registries, timeout=config.cluster.timeout) as registry:
        aggregator = CatalogAggregator(settings, cluster.list_components, registry.list_devfile_components)
        try:
            result = aggregator.fetch()
            for warning in result.warnings:
                print_warning(warning)
            aggregator.validate(result)
        except KompassError as e:
            print_error(str(e))
            sys.exit(1)

    logger.debug(
        f"Collected {len(result.images.items)} image and {len(result.devfiles.items)} devfile components"
    )

    if output == "json":
        emit_json(render_json(result, lookup.slice_supported_tags))
        return

    partitioned = partition_catalog(
        result.images.items,
        result.devfiles.items,
        lookup.slice_supported_tags,
        show_all_devfiles=list_all,
    )
    render_tables(partitioned, config.cluster.namespace, list_all, console)


@main.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_obj
def init(obj: dict, force: bool) -> None:
    """Write a default configuration file."""
    config_path = obj["config_path"]
    if config_path.exists() and not force:
        print_warning(f"Config already exists: {config_path}")
        return

    save_config(get_default_config(), config_path)
    print_success(f"kompass initialized: {config_path}")


@main.group()
def config() -> None:
    """Read and change configuration values."""


@config.command("get")
@click.argument("key")
@click.pass_obj
def config_get(obj: dict, key: str) -> None:
    """Show a config value (dotted key, e.g. cluster.namespace)."""
    value = get_nested_value(obj["config"], key)
    if value is None:
        print_error(f"Not set: {key}")
        sys.exit(1)
    click.echo(value)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set(obj: dict, key: str, value: str) -> None:
    """Set a config value (dotted key, e.g. experimental true)."""
    cfg = obj["config"]
    try:
        set_nested_value(cfg, key, value)
    except (KeyError, ValidationError) as e:
        print_error("Cannot set config value", str(e))
        sys.exit(1)

    save_config(cfg, obj["config_path"])
    print_success(f"{key} = {get_nested_value(cfg, key)}")


@main.group()
def registry() -> None:
    """Manage devfile registries."""


@registry.command("list")
@click.pass_obj
def registry_list(obj: dict) -> None:
    """List configured devfile registries."""
    registries = obj["config"].registries
    if not registries:
        print_warning("No devfile registries configured")
        return

    table = Table(box=None, show_edge=False, pad_edge=False, padding=(0, COLUMN_PADDING), header_style=None)
    table.add_column("NAME", no_wrap=True)
    table.add_column("URL", no_wrap=True)
    for reg in registries:
        table.add_row(reg.name, reg.url)
    console.print(fit_table(table, console), crop=False)


@registry.command("add")
@click.argument("name")
@click.argument("url")
@click.pass_obj
def registry_add(obj: dict, name: str, url: str) -> None:
    """Add a devfile registry."""
    cfg = obj["config"]
    if cfg.get_registry(name) is not None:
        print_error(f"Registry {name} already exists")
        sys.exit(1)

    cfg.registries.append(RegistryConfig(name=name, url=url))
    save_config(cfg, obj["config_path"])
    print_success(f"Registry {name} added")


@registry.command("delete")
@click.argument("name")
@click.pass_obj
def registry_delete(obj: dict, name: str) -> None:
    """Remove a devfile registry."""
    cfg = obj["config"]
    reg = cfg.get_registry(name)
    if reg is None:
        print_error(f"Registry {name} not found")
        sys.exit(1)

    cfg.registries.remove(reg)
    save_config(cfg, obj["config_path"])
    print_success(f"Registry {name} deleted")


if __name__ == "__main__":
    main()
