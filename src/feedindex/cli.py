"""CLI entry point for feedindex."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from feedindex.config.logging import setup_logging
from feedindex.config.manager import ConfigManager
from feedindex.config.schema import GlobalConfig
from feedindex.episodes.index import GROUPING_FIELDS, FeedIndex
from feedindex.episodes.loader import load_episodes
from feedindex.episodes.models import EpisodeRecord
from feedindex.episodes.query import QueryCriteria
from feedindex.episodes.years import YearSpan
from feedindex.utils.errors import FeedIndexError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="feedindex",
    help="Group, filter and sort podcast episode metadata",
    no_args_is_help=True,
)
console = Console()

EpisodeFile = Annotated[Path, typer.Argument(help="JSON or YAML file of episode descriptors")]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def _fail(message: str) -> NoReturn:
    console.print(f"[red]✗[/red] {escape(message)}")
    sys.exit(1)


def _config(ctx: typer.Context) -> GlobalConfig:
    if ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]
    return GlobalConfig()


def _build_index(
    ctx: typer.Context, path: Path, year_threshold: int | None = None
) -> FeedIndex:
    index_config = _config(ctx).index
    if year_threshold is not None:
        index_config = index_config.model_copy(
            update={"min_year_group_threshold": year_threshold}
        )
    metadata, episodes = load_episodes(path)
    logger.debug("Building index from %s", path)
    return FeedIndex(episodes, config=index_config, metadata=metadata)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory holding config.yaml"
    ),
) -> None:
    """feedindex - browse episode metadata by tag, model, location and year."""
    try:
        config = ConfigManager(config_dir=config_dir).load_config()
    except FeedIndexError as e:
        setup_logging(verbose=verbose, log_file=log_file)
        _fail(str(e))

    setup_logging(verbose=verbose, log_file=log_file, level=config.log_level)
    ctx.obj = {"config": config}


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from feedindex import __version__

    console.print(f"[bold cyan]feedindex[/bold cyan] v{__version__}")


@app.command("groups")
def show_groups(
    ctx: typer.Context,
    path: EpisodeFile,
    by: Annotated[
        str, typer.Option("--by", "-b", help=f"Field to group by ({', '.join(GROUPING_FIELDS)})")
    ] = "tag",
    json_output: JsonOption = False,
) -> None:
    """Show episode groups for a field.

    Examples:
        feedindex groups episodes.json --by tag

        feedindex groups episodes.json --by year --json
    """
    try:
        index = _build_index(ctx, path)
        groups = index.get_episodes_by(by)
    except FeedIndexError as e:
        _fail(str(e))

    if json_output:
        result = {
            "field": by,
            "groups": [
                {"key": key, "count": len(episodes), "ids": [ep.id for ep in episodes]}
                for key, episodes in groups.items()
            ],
        }
        print(json.dumps(result, indent=2))
        return

    if not groups:
        console.print(f"[yellow]No episodes to group by {escape(by)}.[/yellow]")
        return

    table = Table(title=f"[bold]Episodes by {escape(by)}[/bold]")
    table.add_column("Group", style="cyan", no_wrap=True)
    table.add_column("Episodes", justify="right")
    table.add_column("Latest title", style="dim")

    for key, episodes in groups.items():
        table.add_row(escape(key), str(len(episodes)), escape(episodes[0].title))

    console.print(table)
    console.print(f"\n[dim]Total: {len(groups)} group(s)[/dim]")


@app.command("available")
def show_available(
    ctx: typer.Context,
    path: EpisodeFile,
    field: Annotated[
        str, typer.Option("--field", "-f", help=f"Field ({', '.join(GROUPING_FIELDS)})")
    ] = "tag",
    json_output: JsonOption = False,
) -> None:
    """List the values a filter panel would offer for a field."""
    try:
        values = _build_index(ctx, path).get_available(field)
    except FeedIndexError as e:
        _fail(str(e))

    if json_output:
        print(json.dumps({"field": field, "values": values}, indent=2))
        return

    if not values:
        console.print(f"[yellow]No values available for {escape(field)}.[/yellow]")
        return

    for value in values:
        console.print(f"  • {escape(value)}")
    console.print(f"\n[dim]Total: {len(values)} value(s)[/dim]")


@app.command("years")
def show_years(
    ctx: typer.Context,
    path: EpisodeFile,
    threshold: Annotated[
        int | None,
        typer.Option("--threshold", "-t", help="Episodes per span (overrides config)", min=1),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Show year spans and their episode counts."""
    try:
        index = _build_index(ctx, path, year_threshold=threshold)
    except FeedIndexError as e:
        _fail(str(e))

    rows: list[dict[str, Any]] = []
    for label in index.get_available_years():
        span = YearSpan.parse(label)
        count = sum(len(index.get_episodes_for_year(year)) for year in span.years())
        rows.append({"span": label, "count": count})

    if json_output:
        print(json.dumps({"spans": rows}, indent=2))
        return

    if not rows:
        console.print("[yellow]No dated episodes.[/yellow]")
        return

    table = Table(title="[bold]Year Spans[/bold]")
    table.add_column("Span", style="cyan", no_wrap=True)
    table.add_column("Episodes", justify="right")
    for row in rows:
        table.add_row(row["span"], str(row["count"]))
    console.print(table)


def _episode_row(episode: EpisodeRecord) -> list[str]:
    return [
        escape(episode.title),
        episode.published.strftime("%Y-%m-%d") if episode.published else "-",
        escape(episode.model),
        escape(episode.location) or "-",
        episode.integrity_label,
    ]


@app.command("query")
def run_query(
    ctx: typer.Context,
    path: EpisodeFile,
    search: Annotated[str | None, typer.Option("--search", "-s", help="Free-text search")] = None,
    tag: Annotated[str | None, typer.Option("--tag", help="Tag (or 'Misc Tags')")] = None,
    model: Annotated[str | None, typer.Option("--model", help="Exact model")] = None,
    origin: Annotated[str | None, typer.Option("--origin", help="Exact origin")] = None,
    zone: Annotated[str | None, typer.Option("--zone", help="Exact zone")] = None,
    locale: Annotated[str | None, typer.Option("--locale", help="Exact locale")] = None,
    region: Annotated[str | None, typer.Option("--region", help="Exact region")] = None,
    year: Annotated[
        str | None, typer.Option("--year", "-y", help="YYYY, YYYY-YYYY or 'All Years'")
    ] = None,
    sort_by: Annotated[
        str | None,
        typer.Option("--sort-by", help="published, title, duration or integrity"),
    ] = None,
    ascending: Annotated[
        bool | None,
        typer.Option(
            "--ascending/--descending", "-a/-d", help="Sort direction (default from config)"
        ),
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Maximum rows to show", min=1)
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Filter and sort episodes.

    Examples:
        feedindex query episodes.json --tag sci-fi --sort-by title --ascending

        feedindex query episodes.json --year 2020-2021 --json
    """
    config = _config(ctx)
    criteria = QueryCriteria(
        search_query=search,
        tag=tag,
        model=model,
        origin=origin,
        zone=zone,
        locale=locale,
        region=region,
        year=year,
        sort_by=sort_by or config.default_sort_by,
        sort_ascending=(
            config.default_sort_ascending if ascending is None else ascending
        ),
    )

    try:
        results = _build_index(ctx, path).get_filtered_and_sorted_list(criteria)
    except FeedIndexError as e:
        _fail(str(e))

    total = len(results)
    if limit is not None:
        results = results[:limit]

    if json_output:
        print(
            json.dumps(
                {"episodes": [ep.to_dict() for ep in results], "total": total},
                indent=2,
            )
        )
        return

    if not results:
        console.print("[yellow]No episodes match the query.[/yellow]")
        return

    table = Table(title="[bold]Episodes[/bold]")
    table.add_column("Title", style="cyan")
    table.add_column("Published", style="dim")
    table.add_column("Model")
    table.add_column("Location")
    table.add_column("Integrity", justify="right")
    for episode in results:
        table.add_row(*_episode_row(episode))

    console.print(table)
    console.print(f"\n[dim]Showing {len(results)} of {total} episode(s)[/dim]")


if __name__ == "__main__":
    app()
