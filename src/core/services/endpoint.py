"""Endpoint de recurso sin estado compartido.

Cada método:
1. compone el URL absoluto (ver `core.services.urls`),
2. congela la `RequestConfig` recibida (params + tipo de respuesta),
3. devuelve un awaitable que, al esperarse, llama al transporte y produce un
   `Outcome` (éxito con el payload decodificado o fallo con la causa original).

Los pasos 1 y 2 ocurren en la llamada, no al hacer `await`: la foto de los
parámetros siempre refleja el estado del momento de la llamada.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Generic, Iterable, TypeVar

import httpx
from pydantic import ValidationError

from core.config import AppSettings
from core.domain.models import PaginatedResult, SchemaChoice, SchemaMetadata
from core.domain.outcome import Outcome
from core.errors import SchemaFieldNotFoundError
from core.interfaces.transport import HTTPTransport, StreamConnector
from core.services.parameters import RequestConfig
from core.services.stream import Decoder, StreamChannel
from core.services.urls import (
    ResourceId,
    bulk_delete_url,
    detail_url,
    list_url,
    socket_url,
    with_query,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NO_BODY = object()

_VERBS = ("GET", "POST", "PATCH", "DELETE", "OPTIONS")


class ResourceEndpoint(Generic[T]):
    """Superficie de peticiones de un recurso, con resultados explícitos."""

    def __init__(
        self,
        http: HTTPTransport,
        path: str,
        *,
        settings: AppSettings | None = None,
        connector: StreamConnector | None = None,
    ) -> None:
        settings = settings or AppSettings()
        self.http = http
        self.path = path
        self.base_url = settings.base_url
        self.socket_url = settings.socket_url
        self._full_url = f"{self.base_url}{path}"
        self._settings = settings
        self._connector = connector

    @property
    def full_url(self) -> str:
        return self._full_url

    @property
    def connector(self) -> StreamConnector:
        if self._connector is None:
            from adapters.websocket_transport import WebSocketConnector  # noqa: PLC0415

            self._connector = WebSocketConnector(self._settings)
        return self._connector

    # -- dispatch -------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        config: RequestConfig | None = None,
        *,
        body: Any = _NO_BODY,
    ) -> Awaitable[Outcome[Any]]:
        """Dispatch one verb against an absolute URL.

        `body` is JSON-encoded when given. Blob responses yield `bytes`; an
        empty body yields `None`.
        """

        verb = method.upper()
        if verb not in _VERBS:
            raise ValueError(f"unsupported HTTP verb: {method}")
        config = config or RequestConfig()
        target = with_query(url, config.params)
        kwargs: dict[str, Any] = {}
        if body is not _NO_BODY:
            kwargs["json"] = body
        return self._send(verb, target, config.response_kind, kwargs)

    async def _send(self, verb: str, url: str, response_kind: str, kwargs: dict[str, Any]) -> Outcome[Any]:
        call = getattr(self.http, verb.lower())
        try:
            response = await call(url, **kwargs)
            response.raise_for_status()
            if response_kind == "blob":
                payload: Any = response.content
            elif not response.content:
                payload = None
            else:
                payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.debug("%s %s failed: %r", verb, url, exc)
            return Outcome.failure(exc)
        logger.debug("%s %s -> %s", verb, url, response.status_code)
        return Outcome.success(payload)

    # -- lecturas -------------------------------------------------------

    def get_all(self, route: str | None = None, config: RequestConfig | None = None) -> Awaitable[Outcome[list[T]]]:
        return self.request("GET", list_url(self.full_url, route), config)

    def get_paginated(
        self, route: str | None = None, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[PaginatedResult[T]]]:
        return self.request("GET", list_url(self.full_url, route), config)

    def get_paginated_from_detail_route(
        self, resource_id: ResourceId | None, route: str, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[PaginatedResult[Any]]]:
        return self.request("GET", detail_url(self.full_url, resource_id, route), config)

    def get_paginated_from_list_route(
        self, route: str, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[PaginatedResult[Any]]]:
        return self.request("GET", list_url(self.full_url, route), config)

    def get_from_detail_route(
        self, resource_id: ResourceId | None, route: str, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("GET", detail_url(self.full_url, resource_id, route), config)

    def get_from_list_route(self, route: str, config: RequestConfig | None = None) -> Awaitable[Outcome[Any]]:
        return self.request("GET", list_url(self.full_url, route), config)

    def get_by_id(
        self, resource_id: ResourceId, route: str | None = None, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[T]]:
        return self.request("GET", detail_url(self.full_url, resource_id, route), config)

    def get_by_url(self, url: str, config: RequestConfig | None = None) -> Awaitable[Outcome[T]]:
        """GET an absolute URL verbatim (e.g. a `next` pagination link)."""

        return self.request("GET", url, config)

    load_url = get_by_url

    # -- escrituras -----------------------------------------------------

    def save(self, entity: Any, config: RequestConfig | None = None) -> Awaitable[Outcome[T]]:
        return self.request("POST", self.full_url, config, body=entity)

    def post_from_detail_route(
        self, resource_id: ResourceId | None, route: str, entity: Any, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("POST", detail_url(self.full_url, resource_id, route), config, body=entity)

    def post_from_list_route(
        self, route: str, entity: Any, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("POST", list_url(self.full_url, route), config, body=entity)

    def patch_from_detail_route(
        self, resource_id: ResourceId | None, route: str, entity: Any, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("PATCH", detail_url(self.full_url, resource_id, route), config, body=entity)

    def patch_from_list_route(
        self, route: str, entity: Any, config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("PATCH", list_url(self.full_url, route), config, body=entity)

    def update(self, resource_id: ResourceId, entity: Any, config: RequestConfig | None = None) -> Awaitable[Outcome[T]]:
        return self.request("PATCH", detail_url(self.full_url, resource_id), config, body=entity)

    def delete(self, resource_id: ResourceId, config: RequestConfig | None = None) -> Awaitable[Outcome[Any]]:
        return self.request("DELETE", detail_url(self.full_url, resource_id), config)

    def delete_from_list_route(
        self, route: str, ids: Iterable[ResourceId], config: RequestConfig | None = None
    ) -> Awaitable[Outcome[Any]]:
        return self.request("DELETE", bulk_delete_url(self.full_url, route, ids), config)

    # -- binarios -------------------------------------------------------

    def load_file(self, route: str, data: Any, config: RequestConfig | None = None) -> Awaitable[Outcome[bytes]]:
        """POST `data` as JSON and read the response as an opaque blob."""

        config = (config or RequestConfig()).as_blob()
        return self.request("POST", list_url(self.full_url, route), config, body=data)

    def get_file_from_list_route(self, route: str, config: RequestConfig | None = None) -> Awaitable[Outcome[bytes]]:
        config = (config or RequestConfig()).as_blob()
        return self.request("GET", list_url(self.full_url, route), config)

    # -- introspección --------------------------------------------------

    def options(self, config: RequestConfig | None = None) -> Awaitable[Outcome[SchemaMetadata]]:
        return self._schema(self.request("OPTIONS", self.full_url, config))

    def get_choices(self, field: str, config: RequestConfig | None = None) -> Awaitable[Outcome[list[SchemaChoice]]]:
        return self._choices(self.request("OPTIONS", self.full_url, config), field)

    async def _schema(self, pending: Awaitable[Outcome[Any]]) -> Outcome[SchemaMetadata]:
        outcome = await pending
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        payload = outcome.value if isinstance(outcome.value, dict) else {}
        try:
            schema = SchemaMetadata.model_validate(payload)
        except ValidationError as exc:
            logger.debug("OPTIONS %s returned an unexpected schema: %s", self.full_url, exc)
            return Outcome.failure(exc)
        return Outcome.success(schema)

    async def _choices(self, pending: Awaitable[Outcome[Any]], field: str) -> Outcome[list[SchemaChoice]]:
        schema = await self._schema(pending)
        if not schema.ok:
            return Outcome.failure(schema.error)  # type: ignore[arg-type]
        try:
            return Outcome.success(schema.unwrap().choices_for(field))
        except SchemaFieldNotFoundError as exc:
            return Outcome.failure(exc)

    # -- streaming ------------------------------------------------------

    def connect_stream(
        self,
        route: str,
        config: RequestConfig | None = None,
        *,
        decoder: Decoder | None = None,
    ) -> StreamChannel[Any]:
        config = config or RequestConfig()
        url = socket_url(self.socket_url, route, config.params)
        if decoder is None:
            return StreamChannel(self.connector, url)
        return StreamChannel(self.connector, url, decoder=decoder)
