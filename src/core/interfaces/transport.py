"""Contratos de transporte (HTTP y streaming).

Por qué Protocol:
- El cliente de recursos depende de la forma de `httpx.AsyncClient`, no de la
  clase concreta: en tests se inyecta un `AsyncClient` con `MockTransport`.
- El canal de streaming se abre a través de un conector intercambiable
  (websockets en producción, un fake en memoria en tests).
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol, runtime_checkable

import httpx


@runtime_checkable
class HTTPTransport(Protocol):
    """Subconjunto de `httpx.AsyncClient` que usa el cliente de recursos."""

    async def get(self, url: str, **kwargs: Any) -> httpx.Response: ...

    async def post(self, url: str, **kwargs: Any) -> httpx.Response: ...

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response: ...

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response: ...

    async def options(self, url: str, **kwargs: Any) -> httpx.Response: ...


@runtime_checkable
class StreamConnection(Protocol):
    """Conexión full-duplex ya abierta.

    Iterarla produce frames crudos hasta que el otro extremo cierra.
    """

    async def send(self, message: str | bytes) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


@runtime_checkable
class StreamConnector(Protocol):
    """Fábrica de conexiones: dado un URL, abre un canal bidireccional."""

    async def connect(self, url: str) -> StreamConnection: ...
