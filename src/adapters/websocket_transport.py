"""Conector websocket (librería `websockets`).

Implementa `StreamConnector`: abre una conexión y la devuelve tal cual. La
`ClientConnection` de websockets ya cumple `StreamConnection` (send, close e
iteración asíncrona que termina cuando el servidor cierra limpiamente).
"""

from __future__ import annotations

from websockets.asyncio.client import connect

from core.config import AppSettings
from core.interfaces.transport import StreamConnection


class WebSocketConnector:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        extra_headers: dict[str, str] | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._extra_headers = extra_headers

    async def connect(self, url: str) -> StreamConnection:
        return await connect(
            url,
            additional_headers=self._extra_headers,
            user_agent_header=self._settings.user_agent,
            open_timeout=self._settings.http_timeout_seconds,
        )
