"""CLI `resource-client` (Typer + Rich).

Por qué una CLI:
- Permite explorar un backend REST con el mismo contrato que usan los
  clientes de dominio (mismas reglas de URL, parámetros y errores).
- Los comandos de lectura usan `ResourceClient` (fallos -> "sin datos");
  `fields` y `choices` usan la capa explícita para poder explicar el fallo.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from adapters.http_client import build_async_client
from adapters.json_exporter import export_payload_json
from cli.doctor import app as doctor_app
from cli.ui_components import (
    build_choices_table,
    build_error_panel,
    build_fields_table,
    build_page_footer,
    build_results_table,
    configure_logging,
)
from core.config import AppSettings
from core.services.resource_client import ResourceClient

app = typer.Typer(no_args_is_help=True, help="Generic client for REST-style resource backends.")
app.add_typer(doctor_app, name="doctor")

_console = Console()

R = TypeVar("R")


def parse_params(values: list[str] | None) -> list[tuple[str, str]]:
    """`["k=v", ...]` -> pares; la misma clave puede repetirse."""

    pairs: list[tuple[str, str]] = []
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got {raw!r}", param_hint="--param")
        key, value = raw.split("=", 1)
        pairs.append((key, value))
    return pairs


def _run_with_client(path: str, params: list[tuple[str, str]], fn: Callable[[ResourceClient[Any]], Awaitable[R]]) -> R:
    settings = AppSettings()

    async def _go() -> R:
        async with build_async_client(settings) as http:
            client: ResourceClient[Any] = ResourceClient(http, path, settings=settings)
            for key, value in params:
                client.add_parameter(key, value)
            return await fn(client)

    return asyncio.run(_go())


def _maybe_export(payload: Any, json_output: Path | None) -> None:
    if json_output is None:
        return
    written = export_payload_json(payload=payload, output_path=json_output)
    _console.print(f"[green]Saved JSON to:[/green] {written}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging (stderr)."),
) -> None:
    level = "DEBUG" if verbose else AppSettings().log_level
    configure_logging(level)


@app.command(name="list")
def list_resources(
    path: str = typer.Argument(..., help="Resource path relative to the base URL, e.g. 'tasks/'."),
    route: str | None = typer.Option(None, "--route", "-r", help="Nested list route."),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Query parameter key=value (repeatable)."),
    paginated: bool = typer.Option(False, "--paginated", help="Expect a count/next/previous/results envelope."),
    json_output: Path | None = typer.Option(None, "--json-output", help="Also write the raw response to this file."),
) -> None:
    """List a collection (GET {base}{path}[{route}/])."""

    params = parse_params(param)
    if paginated:
        page = _run_with_client(path, params, lambda c: c.get_paginated(route))
        if page is None:
            _console.print("[yellow]No data.[/yellow]")
            raise typer.Exit(code=1)
        _console.print(build_results_table(page.get("results") or [], title=path))
        _console.print(build_page_footer(page))
        _maybe_export(page, json_output)
        return

    rows = _run_with_client(path, params, lambda c: c.get_all(route))
    if not rows:
        _console.print("[yellow]No data.[/yellow]")
        return
    _console.print(build_results_table(rows, title=path))
    _maybe_export(rows, json_output)


@app.command(name="get")
def get_resource(
    path: str = typer.Argument(..., help="Resource path relative to the base URL."),
    resource_id: str = typer.Argument(..., metavar="ID", help="Resource id."),
    route: str | None = typer.Option(None, "--route", "-r", help="Nested detail route."),
    json_output: Path | None = typer.Option(None, "--json-output", help="Also write the raw response to this file."),
) -> None:
    """Fetch one resource (GET {base}{path}{id}/[{route}/])."""

    item = _run_with_client(path, [], lambda c: c.get_by_id(resource_id, route))
    if item is None:
        _console.print("[yellow]No data.[/yellow]")
        raise typer.Exit(code=1)
    _console.print_json(json.dumps(item, ensure_ascii=False, default=str))
    _maybe_export(item, json_output)


@app.command()
def fields(
    path: str = typer.Argument(..., help="Resource path relative to the base URL."),
    json_output: Path | None = typer.Option(None, "--json-output", help="Also write the schema to this file."),
) -> None:
    """Show writable fields discovered through OPTIONS."""

    outcome = _run_with_client(path, [], lambda c: c.endpoint.options())
    if not outcome.ok:
        _console.print(build_error_panel(str(outcome.error), title="OPTIONS failed"))
        raise typer.Exit(code=1)
    schema = outcome.unwrap()
    try:
        post_fields = schema.post_fields()
    except KeyError as exc:
        _console.print(build_error_panel(str(exc), title="No writable fields"))
        raise typer.Exit(code=1) from exc
    _console.print(build_fields_table(post_fields))
    _maybe_export(schema, json_output)


@app.command()
def choices(
    path: str = typer.Argument(..., help="Resource path relative to the base URL."),
    field: str = typer.Argument(..., help="Field name under actions.POST."),
) -> None:
    """Show the enumerated legal values of a field."""

    outcome = _run_with_client(path, [], lambda c: c.endpoint.get_choices(field))
    if not outcome.ok:
        _console.print(build_error_panel(str(outcome.error), title=f"No choices for '{field}'"))
        raise typer.Exit(code=1)
    _console.print(build_choices_table(field, outcome.unwrap()))


@app.command()
def download(
    path: str = typer.Argument(..., help="Resource path relative to the base URL."),
    route: str = typer.Argument(..., help="List route serving the file."),
    output: Path = typer.Option(..., "--output", "-o", help="Destination file."),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Query parameter key=value (repeatable)."),
) -> None:
    """Download a binary file (GET {base}{path}{route}/)."""

    blob = _run_with_client(path, parse_params(param), lambda c: c.get_file_from_list_route(route))
    if blob is None:
        _console.print("[yellow]No data.[/yellow]")
        raise typer.Exit(code=1)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(blob)
    _console.print(f"[green]Saved {len(blob)} bytes to:[/green] {output}")


@app.command()
def watch(
    route: str = typer.Argument(..., help="Socket route, e.g. 'events'."),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Query parameter key=value (repeatable)."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Stop after N messages."),
) -> None:
    """Print messages from {socket_url}/{route}/ until closed (or --limit)."""

    async def _consume(client: ResourceClient[Any]) -> int:
        received = 0
        async with client.connect_stream(route) as channel:
            _console.print(f"[dim]Connected to {channel.url}[/dim]")
            async for message in channel:
                _console.print_json(json.dumps(message, ensure_ascii=False, default=str))
                received += 1
                if limit is not None and received >= limit:
                    break
        return received

    received = _run_with_client("", parse_params(param), _consume)
    _console.print(f"[dim]{received} message(s) received.[/dim]")


def run() -> None:
    app()
