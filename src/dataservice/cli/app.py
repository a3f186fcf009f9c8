"""Typer CLI for inspecting and pruning persisted service payloads."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.table import Table

from dataservice.exceptions import ConfigurationError
from dataservice.persistence import StoreError, decode_record

from .deps import get_settings, get_store

app = typer.Typer(help="dataservice command-line interface")
cache_app = typer.Typer(help="Persistent cache utilities")
app.add_typer(cache_app, name="cache")

console = Console()


@app.callback()
def main(
    env_file: Path | None = typer.Option(
        None, "--env-file", help="Load settings from this .env file"
    ),
) -> None:
    """Load environment overrides and configure logging."""

    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    settings = get_settings()
    try:
        level = settings.resolved_log_level()
    except ConfigurationError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    settings = get_settings()
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Cache URL:\t" + (settings.cache_url or "(in-memory)"))
    typer.echo("Log level:\t" + settings.log_level)


@cache_app.command("list")
def cache_list() -> None:
    """List persisted cache entries."""

    try:
        store = get_store()
        keys = store.keys()
        rows = []
        for key in keys:
            raw = store.get(key)
            record = decode_record(raw) if raw is not None else None
            if record is None:
                rows.append((key, "?", "?"))
            else:
                rows.append((key, record.mode.value, record.stored_at.isoformat()))
    except (ConfigurationError, StoreError) as exc:
        typer.echo(f"Unable to read cache: {exc}")
        raise typer.Exit(code=1) from exc

    if not rows:
        typer.echo("No cache entries found")
        return

    table = Table(title="Cache entries")
    table.add_column("Key", overflow="fold")
    table.add_column("Mode")
    table.add_column("Stored at")
    for row in rows:
        table.add_row(*row)
    console.print(table)
    console.print(f"Total entries: {len(rows)}")


@cache_app.command("show")
def cache_show(key: str) -> None:
    """Display the stored record for a cache key."""

    try:
        raw = get_store().get(key)
    except (ConfigurationError, StoreError) as exc:
        typer.echo(f"Unable to read cache: {exc}")
        raise typer.Exit(code=1) from exc
    if raw is None:
        typer.echo(f"No cache entry for {key}")
        raise typer.Exit(code=1)

    record = decode_record(raw)
    if record is None:
        typer.echo(f"Entry {key} is not a valid cache record:")
        typer.echo(raw)
        return
    typer.echo(json.dumps(record.model_dump(mode="json"), indent=2, sort_keys=True))


@cache_app.command("remove")
def cache_remove(key: str) -> None:
    """Remove a single cache entry."""

    try:
        store = get_store()
        existed = store.get(key) is not None
        store.delete(key)
    except (ConfigurationError, StoreError) as exc:
        typer.echo(f"Unable to update cache: {exc}")
        raise typer.Exit(code=1) from exc
    if existed:
        typer.echo(f"Removed {key}")
    else:
        typer.echo(f"No cache entry for {key}")


@cache_app.command("clear")
def cache_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Remove every cache entry."""

    if not yes:
        typer.confirm("Remove all cache entries?", abort=True)
    try:
        store = get_store()
        count = len(store.keys())
        store.clear()
    except (ConfigurationError, StoreError) as exc:
        typer.echo(f"Unable to update cache: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Removed {count} cache entries")
