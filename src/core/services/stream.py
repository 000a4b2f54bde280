"""Canal de streaming (websocket) asociado a un recurso.

El cliente solo calcula el URL y delega en un `StreamConnector`; no gestiona
reconexión, backoff ni framing. El canal es perezoso: la conexión se abre al
entrar en `async with`, al primer `send` o al empezar a iterar.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Callable, Generic, TypeVar

from core.errors import StreamClosedError
from core.interfaces.transport import StreamConnection, StreamConnector

logger = logging.getLogger(__name__)

K = TypeVar("K")

Decoder = Callable[[str | bytes], Any]


class StreamChannel(Generic[K]):
    """Handle bidireccional: iterable de mensajes decodificados + `send`."""

    def __init__(
        self,
        connector: StreamConnector,
        url: str,
        *,
        decoder: Decoder = json.loads,
    ) -> None:
        self.url = url
        self._connector = connector
        self._decoder = decoder
        self._connection: StreamConnection | None = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._connection is not None and not self._closed

    async def open(self) -> StreamConnection:
        if self._closed:
            raise StreamClosedError(self.url)
        if self._connection is None:
            logger.debug("Opening stream channel %s", self.url)
            self._connection = await self._connector.connect(self.url)
        return self._connection

    async def send(self, message: Any) -> None:
        """Send `message`; non str/bytes payloads are JSON-encoded."""

        connection = await self.open()
        if not isinstance(message, (str, bytes)):
            message = json.dumps(message)
        await connection.send(message)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._connection is not None:
            logger.debug("Closing stream channel %s", self.url)
            await self._connection.close()

    def reopen(self) -> "StreamChannel[K]":
        """Fresh, unopened channel on the same URL (reconnect is up to the caller)."""

        return StreamChannel(self._connector, self.url, decoder=self._decoder)

    async def __aenter__(self) -> "StreamChannel[K]":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def __aiter__(self) -> AsyncIterator[K]:
        return self._messages()

    async def _messages(self) -> AsyncIterator[K]:
        connection = await self.open()
        async for frame in connection:
            yield self._decoder(frame)
