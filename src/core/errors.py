"""Excepciones propias del cliente de recursos.

Los fallos de transporte NO se envuelven: se propagan las excepciones
originales de httpx (`HTTPStatusError`, `TransportError`) o el `ValueError`
de un JSON inválido. Aquí solo viven los errores que produce el propio Core.
"""

from __future__ import annotations


class ResourceClientError(Exception):
    """Base exception for errors raised by the resource client itself."""


class SchemaFieldNotFoundError(ResourceClientError, KeyError):
    """The OPTIONS payload lacks the requested `actions.POST[...]` entry.

    Subclasses `KeyError` so callers that expect a plain lookup failure from
    schema projection keep working.
    """

    def __init__(self, path: str, field: str | None = None) -> None:
        self.path = path
        self.field = field
        super().__init__(path)

    def __str__(self) -> str:
        return f"schema path not found: {self.path}"


class StreamClosedError(ResourceClientError):
    """A closed stream channel was used again; call `reopen()` instead."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"stream channel already closed: {url}")
