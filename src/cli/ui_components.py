"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import PaginatedResult, SchemaChoice, SchemaField

_MAX_CELL = 60


def configure_logging(level: str, console: Console | None = None) -> None:
    """Logging a stderr vía Rich; stdout queda libre para los resultados."""

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    if len(text) > _MAX_CELL:
        return text[: _MAX_CELL - 1] + "…"
    return text


def build_results_table(rows: Sequence[Any], *, title: str = "Results") -> Table:
    """Tabla genérica: columnas = claves vistas en las filas (en orden de aparición)."""

    columns: list[str] = []
    for row in rows:
        if isinstance(row, Mapping):
            for key in row:
                if key not in columns:
                    columns.append(str(key))

    table = Table(title=title)
    if not columns:
        table.add_column("value", style="white")
        for row in rows:
            table.add_row(_cell(row))
        return table

    for index, column in enumerate(columns):
        table.add_column(column, style="cyan" if index == 0 else "white", no_wrap=index == 0)
    for row in rows:
        if isinstance(row, Mapping):
            table.add_row(*(_cell(row.get(column)) for column in columns))
        else:
            table.add_row(_cell(row), *([""] * (len(columns) - 1)))
    return table


def build_page_footer(page: PaginatedResult[Any]) -> Text:
    footer = Text()
    footer.append(f"count: {page.get('count')}", style="bold")
    if page.get("previous"):
        footer.append(f"\nprevious: {page['previous']}", style="dim")
    if page.get("next"):
        footer.append(f"\nnext: {page['next']}", style="dim")
    return footer


def build_fields_table(fields: Mapping[str, SchemaField]) -> Table:
    table = Table(title="Writable fields (actions.POST)")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Type", style="white")
    table.add_column("Required", style="green")
    table.add_column("Read only", style="yellow")
    table.add_column("Label", style="magenta")
    table.add_column("Choices", style="dim")
    for name, meta in fields.items():
        table.add_row(
            name,
            meta.type or "",
            "yes" if meta.required else "",
            "yes" if meta.read_only else "",
            meta.label or "",
            str(len(meta.choices)) if meta.choices is not None else "",
        )
    return table


def build_choices_table(field: str, choices: Sequence[SchemaChoice]) -> Table:
    table = Table(title=f"Choices for '{field}'")
    table.add_column("Value", style="cyan", no_wrap=True)
    table.add_column("Display name", style="white")
    for choice in choices:
        table.add_row(_cell(choice.value), choice.display_name or "")
    return table


def build_error_panel(message: str, *, title: str = "Error") -> Panel:
    return Panel(Text(message, style="red"), title=title, border_style="red")
