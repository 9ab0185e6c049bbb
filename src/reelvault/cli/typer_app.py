"""
ReelVault Typer CLI Application

Thin command-line front end over :class:`~reelvault.services.ImdbClient`
and :class:`~reelvault.services.cache.FileCache`. Every command renders a
Rich table by default or a JSON document with ``--json``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from reelvault.cli.error_handler import format_json_output, handle_cli_error
from reelvault.config import Settings, load_settings
from reelvault.core.collection import Collection
from reelvault.core.entities import Title
from reelvault.services.cache import FileCache
from reelvault.services.imdb_client import ImdbClient
from reelvault.shared.constants import CLICommands, CLIDefaults, CLIHelp
from reelvault.shared.logging import setup_structured_logger

__version__ = CLIDefaults.VERSION

console = Console()

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CLIHelp.CONFIG_HELP),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    try:
        settings = load_settings(config)
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, "main-callback")) from e

    setup_structured_logger(
        level=log_level or settings.logging.level,
        log_file=settings.logging.file,
        use_rich_console=settings.logging.console_output,
    )
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _client(settings: Settings, *, use_cache: bool = True) -> ImdbClient:
    if not use_cache:
        settings = settings.model_copy(
            update={"cache": settings.cache.model_copy(update={"enabled": False})},
        )
    return ImdbClient(settings)


def _title_table(title: Title) -> Table:
    table = Table(title=f"{title.title} ({title.year})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    rows: list[tuple[str, Any]] = [
        ("ID", title.id),
        ("Type", "TV series" if title.is_tv_series else "Movie"),
        ("Original title", title.original_title),
        ("Length", f"{title.length} min" if title.length else None),
        ("Rating", f"{title.rating} ({title.rating_votes} votes)" if title.rating else None),
        ("Genres", ", ".join(title.genres)),
        ("Cast", title.actors.pluck("name").to_string() if title.actors else None),
        ("Plot", title.plot),
        ("Link", title.link),
    ]
    for label, value in rows:
        if value:
            table.add_row(label, str(value))
    return table


def _results_table(results: Collection[Any]) -> Table:
    table = Table(title="Search results")
    for column in ("ID", "Title", "Year", "Category", "Starring"):
        table.add_column(column)
    for result in results:
        table.add_row(
            result.id or "",
            result.title or "",
            str(result.year or ""),
            result.category or "",
            result.starring or "",
        )
    return table


@app.command(CLICommands.LOOKUP, help=CLIHelp.LOOKUP_HELP)
def lookup_command(
    ctx: typer.Context,
    imdb_id: str = typer.Argument(..., help="IMDb identifier"),
    no_cache: bool = typer.Option(False, "--no-cache", help=CLIHelp.NO_CACHE_HELP),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    try:
        title = _client(_settings(ctx), use_cache=not no_cache).lookup_by_identifier(imdb_id)
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.LOOKUP, json_output=json_output)) from e

    if json_output:
        typer.echo(format_json_output(CLICommands.LOOKUP, success=True, data=title.to_dict()))
    else:
        console.print(_title_table(title))


@app.command(CLICommands.SEARCH, help=CLIHelp.SEARCH_HELP)
def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Free-text title query"),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    try:
        results = _client(_settings(ctx), use_cache=False).search(query)
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.SEARCH, json_output=json_output)) from e

    if json_output:
        data = [result.to_dict() for result in results]
        typer.echo(format_json_output(CLICommands.SEARCH, success=True, data=data))
    elif results.count() == 0:
        console.print(f"No search results for '{query}'")
    else:
        console.print(_results_table(results))


@app.command(CLICommands.RESOLVE, help=CLIHelp.RESOLVE_HELP)
def resolve_command(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Free-text title query"),
    category: str = typer.Option(CLIDefaults.CATEGORY, "--category", help=CLIHelp.CATEGORY_HELP),
    year: Optional[int] = typer.Option(None, "--year", help=CLIHelp.YEAR_HELP),
    first: bool = typer.Option(False, "--first", help=CLIHelp.FIRST_HELP),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    try:
        client = _client(_settings(ctx), use_cache=False)
        imdb_id = client.resolver.narrow(query, category, force_first=first, year=year)
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.RESOLVE, json_output=json_output)) from e

    if json_output:
        typer.echo(
            format_json_output(
                CLICommands.RESOLVE,
                success=imdb_id is not None,
                data={"query": query, "category": category, "imdb_id": imdb_id},
            ),
        )
    elif imdb_id is None:
        console.print(f"No confident match for '{query}'")
    else:
        console.print(imdb_id)

    if imdb_id is None:
        raise typer.Exit(CLIDefaults.EXIT_NO_MATCH)


@app.command(CLICommands.CACHE_STATS, help=CLIHelp.CACHE_STATS_HELP)
def cache_stats_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Cache key, e.g. an IMDb identifier"),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    settings = _settings(ctx)
    try:
        cache = FileCache(settings.cache.directory, settings.cache.ttl)
        stats = cache.get_compression_stats(key)
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.CACHE_STATS, json_output=json_output)) from e

    if json_output:
        typer.echo(format_json_output(CLICommands.CACHE_STATS, success=stats is not None, data=stats))
    elif stats is None:
        console.print(f"No compressed entry for '{key}'")
    else:
        table = Table(title=f"Cache entry {key}", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for field, value in stats.items():
            table.add_row(field, str(value))
        console.print(table)

    if stats is None:
        raise typer.Exit(CLIDefaults.EXIT_NO_MATCH)


@app.command(CLICommands.CACHE_CLEAR, help=CLIHelp.CACHE_CLEAR_HELP)
def cache_clear_command(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    settings = _settings(ctx)
    try:
        cleared = FileCache(settings.cache.directory, settings.cache.ttl).clear()
    except Exception as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.CACHE_CLEAR, json_output=json_output)) from e

    if json_output:
        typer.echo(format_json_output(CLICommands.CACHE_CLEAR, success=cleared))
    else:
        console.print("Cache cleared" if cleared else "Cache could not be scanned")

    if not cleared:
        raise typer.Exit(CLIDefaults.EXIT_ERROR)


__all__ = ["app"]
