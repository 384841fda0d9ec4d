"""CLI for steam-library tool."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from steam_library import __version__
from steam_library.aggregator import (
    apply_sorting,
    categorize_by_playtime,
    compute_dashboard,
    compute_detailed_stats,
    minutes_to_hours,
)
from steam_library.config import Config, ConfigError, is_valid_steam_id
from steam_library.export import EXPORT_FORMATS, LibraryExporter
from steam_library.models import LibraryItem
from steam_library.steam_client import SteamClient, SteamPayloadError

console = Console()
# Logs go to stderr so --json output stays parseable
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

EXIT_CONFIG = 1
EXIT_FETCH = 2
EXIT_PAYLOAD = 3


def get_data_dir() -> Path:
    """Get data directory from env or default."""
    env_dir = os.environ.get("STEAM_LIBRARY_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.cwd() / "data"


def setup_logging(log_path: Path, verbose: bool = False) -> None:
    """Log to the data directory, and to the console when verbose."""
    package_logger = logging.getLogger("steam_library")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger.addHandler(file_handler)

    if verbose:
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def load_config() -> Config:
    """Load config and set up logging, exiting when unusable."""
    config = Config(data_dir=get_data_dir())
    verbose = click.get_current_context().find_root().params.get("verbose", False)
    setup_logging(config.log_path, verbose=verbose)

    try:
        config.load()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(EXIT_CONFIG)

    if not config.configured:
        console.print("[red]No Steam API key configured.[/red]")
        console.print("Run [bold]steam-library setup[/bold] or set STEAM_API_KEY.")
        raise SystemExit(EXIT_CONFIG)

    return config


def resolve_steam_id(config: Config, steam_id: Optional[str]) -> str:
    """Use the given Steam ID or the configured default."""
    try:
        return config.resolve_steam_id(steam_id)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(EXIT_CONFIG)


def fetch_items(config: Config, steam_id: Optional[str]) -> List[LibraryItem]:
    """Fetch a library, mapping failures to exit codes."""
    steam_id = resolve_steam_id(config, steam_id)
    client = SteamClient(api_key=config.api_key, timeout=config.timeout)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Fetching library for {steam_id}...", total=None)
        try:
            result = client.fetch_library(steam_id)
        except SteamPayloadError as e:
            logger.error("Malformed payload for %s: %s", steam_id, e)
            console.print(f"[red]Steam returned an unexpected response:[/red] {escape(str(e))}")
            raise SystemExit(EXIT_PAYLOAD)

    if not result.ok:
        console.print(f"[red]Error:[/red] {result.reason}")
        raise SystemExit(EXIT_FETCH)

    return result.items


def print_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def format_playtime(minutes: int) -> str:
    """Human readable playtime: never played, minutes, or hours."""
    if minutes == 0:
        return "Never played"
    if minutes < 60:
        return f"{minutes}min"
    return f"{minutes_to_hours(minutes)}h"


def games_table(title: str, items: List[LibraryItem]) -> Table:
    """Build a table of games with their playtime."""
    table = Table(title=title)
    table.add_column("App ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Playtime", style="green", justify="right")

    for item in items:
        table.add_row(item.app_id, item.name, format_playtime(item.playtime_forever))
    return table


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Show log output on the console")
def cli(verbose):
    """Steam library viewer - Browse and summarize owned Steam games."""
    pass


@cli.command()
def setup():
    """Interactive setup wizard to configure the Steam API key."""
    data_dir = get_data_dir()
    config = Config(data_dir=data_dir)

    # Warn if config exists
    if config.exists():
        console.print(
            "[yellow]Configuration already exists at:[/yellow] "
            f"{config.config_path}"
        )
        if not click.confirm("Overwrite existing configuration?"):
            console.print("[dim]Setup cancelled.[/dim]")
            return

    console.print("\n[bold]Steam Library Setup[/bold]\n")
    console.print("[dim]Get a key at https://steamcommunity.com/dev/apikey[/dim]")

    api_key = click.prompt("Steam API key", hide_input=True, type=str).strip()
    steam_id = click.prompt(
        "Default SteamID64 (optional)",
        default="",
        show_default=False,
        type=str,
    ).strip()

    if steam_id and not is_valid_steam_id(steam_id):
        console.print(
            f"[red]Invalid Steam ID:[/red] {escape(steam_id)}\n"
            "Expected a 17-digit SteamID64 such as 76561198000000000."
        )
        raise SystemExit(EXIT_CONFIG)

    console.print("\n[dim]Checking API key...[/dim]")

    client = SteamClient(api_key=api_key, timeout=config.timeout)
    if not client.test_connection(steam_id or "0"):
        console.print("[red]Steam rejected the API key or is unreachable.[/red]")
        raise SystemExit(EXIT_CONFIG)

    config.set_steam_credentials(api_key=api_key, default_steam_id=steam_id)
    config.save()

    console.print("\n[green]✓ Setup complete![/green]")
    console.print(f"  Config saved to: {config.config_path}")
    console.print("\nRun [bold]steam-library dashboard[/bold] to see your library.")


@cli.command()
@click.argument("steam_id", required=False)
@click.option(
    "--sort-by",
    help="Sort order: playtime or name (unknown values use playtime)",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def games(steam_id, sort_by, as_json):
    """List owned games."""
    config = load_config()
    items = fetch_items(config, steam_id)
    items = apply_sorting(items, sort_by or config.default_sort)

    if as_json:
        print_json([item.to_dict() for item in items])
        return

    if not items:
        console.print("[yellow]No games found.[/yellow]")
        return

    console.print(games_table(f"{len(items)} games", items))


@cli.command()
@click.argument("steam_id", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def dashboard(steam_id, as_json):
    """Show library totals and most played games."""
    config = load_config()
    summary = compute_dashboard(fetch_items(config, steam_id))

    if as_json:
        print_json(summary.to_dict())
        return

    table = Table(title="Library Dashboard")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Games", str(summary.total_games))
    table.add_row("Total Minutes", str(summary.total_minutes))
    table.add_row("Total Hours", f"{summary.total_hours:.1f}")
    if summary.most_recent_game:
        table.add_row("Newest Game (by app id)", summary.most_recent_game.name)
    table.add_row("Generated", summary.generated_at)

    console.print(table)

    if summary.top5_most_played:
        console.print(games_table("Most Played", summary.top5_most_played))


@cli.command()
@click.argument("steam_id", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def stats(steam_id, as_json):
    """Show played vs. never played statistics."""
    config = load_config()
    detailed = compute_detailed_stats(fetch_items(config, steam_id))

    if as_json:
        print_json(detailed.to_dict())
        return

    table = Table(title="Library Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Games", str(detailed.total_games))
    table.add_row("Played", str(detailed.games_with_playtime))
    table.add_row("Never Played", str(detailed.games_never_played))
    table.add_row("Average Hours (played)", f"{detailed.average_playtime:.1f}")
    if detailed.longest_session:
        table.add_row(
            "Most Played",
            f"{detailed.longest_session.name} "
            f"({format_playtime(detailed.longest_session.playtime_forever)})",
        )

    console.print(table)


@cli.command()
@click.argument("steam_id", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def categories(steam_id, as_json):
    """Group games by how long they have been played."""
    config = load_config()
    buckets = categorize_by_playtime(fetch_items(config, steam_id))

    if as_json:
        print_json(buckets.to_dict())
        return

    table = Table(title="Playtime Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Playtime", style="dim")
    table.add_column("Games", style="green", justify="right")

    table.add_row("Never Played", "0h", str(len(buckets.never_played)))
    table.add_row("Casual", "up to 3h", str(len(buckets.casual)))
    table.add_row("Regular", "3h-20h", str(len(buckets.regular)))
    table.add_row("Hardcore", "over 20h", str(len(buckets.hardcore)))

    console.print(table)


@cli.command()
@click.argument("steam_id", required=False)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(EXPORT_FORMATS),
    default="yaml",
    help="Export file format",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (defaults to data/exports/)",
)
def export(steam_id, fmt, output):
    """Export a snapshot of a library to a file."""
    config = load_config()
    steam_id = resolve_steam_id(config, steam_id)
    items = fetch_items(config, steam_id)

    exporter = LibraryExporter(export_dir=config.export_dir)
    path = exporter.export(steam_id, items, fmt=fmt, path=output)
    logger.info("Exported %d games to %s", len(items), path)

    console.print(f"\n[green]✓ Exported {len(items)} games[/green]")
    console.print(f"  Saved to: {path}")


@cli.command()
def validate():
    """Validate configuration and test the Steam API key."""
    config = load_config()

    console.print(f"[dim]Config:[/dim] {config.config_path}")
    if config.default_steam_id:
        console.print(f"[dim]Default Steam ID:[/dim] {config.default_steam_id}")

    console.print("\n[dim]Testing connection...[/dim]")

    client = SteamClient(api_key=config.api_key, timeout=config.timeout)
    if client.test_connection(config.default_steam_id or "0"):
        console.print("[green]✓ Connection valid![/green]")
    else:
        console.print("[red]✗ Connection failed.[/red]")
        console.print("Check your API key or run [bold]steam-library setup[/bold] again.")
        raise SystemExit(EXIT_FETCH)


@cli.command()
def info():
    """Show tool information and usage."""
    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Name", "Steam Library Viewer")
    table.add_row("Version", __version__)
    table.add_row("Description", "Browse and summarize a Steam game library")
    table.add_row("Usage", "steam-library games STEAM_ID --sort-by name|playtime")

    console.print(table)


if __name__ == "__main__":
    cli()
