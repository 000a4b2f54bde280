"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from urllib.parse import urlsplit

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.options(settings.base_url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def check_socket_url(url: str) -> tuple[bool, str]:
    """Static check only: opening a socket needs a concrete route."""

    parts = urlsplit(url)
    if parts.scheme not in ("ws", "wss"):
        return False, f"expected ws:// or wss://, got {parts.scheme or 'no scheme'}"
    if url.endswith("/"):
        return False, "trailing slash produces '//' in channel URLs"
    return True, url


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="resource-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.base_url)
    if not settings.base_url.endswith("/"):
        table.add_row("Base URL slash", "WARN", "resource paths are concatenated without a separator")
    ok_socket, detail_socket = check_socket_url(settings.socket_url)
    table.add_row("Socket URL", "OK" if ok_socket else "WARN", detail_socket)
    stored = read_user_env_vars()
    table.add_row(
        "User config",
        "OK" if stored else "OPTIONAL",
        f"{get_user_env_file()} ({len(stored)} key(s))",
    )

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Read commands report 'No data.' when the backend is unreachable."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores base/socket URLs in the user config .env)."""

    current = AppSettings()
    base_url = typer.prompt("Base URL", default=current.base_url, show_default=True).strip()
    socket_url = typer.prompt("Socket URL", default=current.socket_url, show_default=True).strip()

    if not base_url or not socket_url:
        raise typer.BadParameter("base URL and socket URL are required")

    env_path = write_user_env_vars(
        {
            "RESOURCE_CLIENT_BASE_URL": base_url,
            "RESOURCE_CLIENT_SOCKET_URL": socket_url,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
