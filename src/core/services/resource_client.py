"""Cliente genérico de recursos REST (patrón acumular-y-despachar).

Por qué existe:
- Los clientes de dominio heredan de `ResourceClient[T]` y obtienen un contrato
  uniforme (URLs, query-params, paginación, rutas anidadas, ficheros, esquema y
  websocket) sin reimplementar la lógica por recurso.
- Construido sobre `ResourceEndpoint`; esta capa añade el estado de parámetros
  y la política de errores clásica.

Política de errores:
- Todas las operaciones tragan los fallos de transporte y completan "vacías"
  (`None`; `[]` en `get_all`), con un WARNING en el log.
- `update` es la excepción: propaga el fallo original (`httpx.HTTPStatusError`, ...).
- `options` / `get_choices` proyectan `actions.POST[...]` sin comprobar que
  exista: una forma inesperada lanza `KeyError`/`TypeError`.

`save`, `delete` y `update` vacían los parámetros antes de despachar para que
un filtro de una consulta previa no se cuele en una mutación.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Generic, Iterable, Mapping, TypeVar

import httpx

from core.config import AppSettings
from core.domain.models import PaginatedResult
from core.domain.outcome import Outcome
from core.interfaces.transport import HTTPTransport, StreamConnector
from core.services.endpoint import ResourceEndpoint
from core.services.parameters import ParameterAccumulator, QueryParamsLike, RequestConfig
from core.services.stream import Decoder, StreamChannel
from core.services.urls import ResourceId

logger = logging.getLogger(__name__)

T = TypeVar("T")
D = TypeVar("D")


class ResourceClient(Generic[T]):
    """Cliente de un recurso del backend (`{base_url}{path}`).

    Ejemplo::

        class TaskClient(ResourceClient[Task]):
            def __init__(self, http):
                super().__init__(http, "tasks/")

        tasks.add_parameter("status", "open")
        page = await tasks.get_paginated()
    """

    def __init__(
        self,
        http: HTTPTransport,
        path: str,
        *,
        settings: AppSettings | None = None,
        connector: StreamConnector | None = None,
    ) -> None:
        self.endpoint: ResourceEndpoint[T] = ResourceEndpoint(
            http, path, settings=settings, connector=connector
        )
        self._parameters = ParameterAccumulator()

    @property
    def http(self) -> HTTPTransport:
        return self.endpoint.http

    @property
    def path(self) -> str:
        return self.endpoint.path

    @property
    def base_url(self) -> str:
        return self.endpoint.base_url

    @property
    def socket_url(self) -> str:
        return self.endpoint.socket_url

    @property
    def full_url(self) -> str:
        return self.endpoint.full_url

    # -- parámetros -----------------------------------------------------

    def clear_parameters(self) -> None:
        self._parameters.clear()

    def set_parameters(self, params: QueryParamsLike | None = None) -> None:
        self._parameters.set_all(params)

    def add_parameter(self, key: str, value: Any) -> None:
        self._parameters.append(key, value)

    def add_parameters(self, params: Mapping[str, Any]) -> None:
        self._parameters.append_all(params)

    def get_parameters(self) -> httpx.QueryParams:
        return self._parameters.snapshot()

    def _config(self) -> RequestConfig:
        return RequestConfig(params=self._parameters.snapshot())

    # -- pipeline -------------------------------------------------------

    def _log_swallowed(self, operation: str, error: BaseException | None) -> None:
        logger.warning("%s on %s failed, completing empty: %s", operation, self.full_url, error)

    async def _swallow(self, operation: str, pending: Awaitable[Outcome[Any]], default: D = None) -> Any | D:
        outcome = await pending
        if not outcome.ok:
            self._log_swallowed(operation, outcome.error)
            return default
        return outcome.value

    async def _propagate(self, pending: Awaitable[Outcome[Any]]) -> Any:
        outcome = await pending
        return outcome.unwrap()

    async def _project(self, operation: str, pending: Awaitable[Outcome[Any]], *keys: str) -> Any:
        outcome = await pending
        if not outcome.ok:
            self._log_swallowed(operation, outcome.error)
            return None
        payload = outcome.value
        # Sin comprobación de existencia: una forma inesperada es un error fatal.
        for key in keys:
            payload = payload[key]
        return payload

    # -- lecturas -------------------------------------------------------

    def get_all(self, route: str | None = None) -> Awaitable[list[T]]:
        return self._swallow("get_all", self.endpoint.get_all(route, self._config()), [])

    def get_paginated(self, route: str | None = None) -> Awaitable[PaginatedResult[T] | None]:
        return self._swallow("get_paginated", self.endpoint.get_paginated(route, self._config()))

    def get_paginated_from_detail_route(
        self, resource_id: ResourceId | None, route: str
    ) -> Awaitable[PaginatedResult[Any] | None]:
        """Paginated nested route; `resource_id=None` targets `{full_url}{route}/`."""

        return self._swallow(
            "get_paginated_from_detail_route",
            self.endpoint.get_paginated_from_detail_route(resource_id, route, self._config()),
        )

    def get_paginated_from_list_route(self, route: str) -> Awaitable[PaginatedResult[Any] | None]:
        return self._swallow(
            "get_paginated_from_list_route",
            self.endpoint.get_paginated_from_list_route(route, self._config()),
        )

    def get_from_detail_route(self, resource_id: ResourceId, route: str) -> Awaitable[Any]:
        return self._swallow(
            "get_from_detail_route",
            self.endpoint.get_from_detail_route(resource_id, route, self._config()),
        )

    def get_from_list_route(self, route: str) -> Awaitable[Any]:
        return self._swallow("get_from_list_route", self.endpoint.get_from_list_route(route, self._config()))

    def get_by_id(self, resource_id: ResourceId, route: str | None = None) -> Awaitable[T | None]:
        return self._swallow("get_by_id", self.endpoint.get_by_id(resource_id, route, self._config()))

    def get_by_url(self, url: str) -> Awaitable[T | None]:
        return self._swallow("get_by_url", self.endpoint.get_by_url(url, self._config()))

    def load_url(self, url: str) -> Awaitable[T | None]:
        return self._swallow("load_url", self.endpoint.load_url(url, self._config()))

    # -- escrituras -----------------------------------------------------

    def save(self, entity: T) -> Awaitable[T | None]:
        self.clear_parameters()
        return self._swallow("save", self.endpoint.save(entity, self._config()))

    def post_from_detail_route(self, resource_id: ResourceId, route: str, entity: Any) -> Awaitable[Any]:
        return self._swallow(
            "post_from_detail_route",
            self.endpoint.post_from_detail_route(resource_id, route, entity, self._config()),
        )

    def post_from_list_route(self, route: str, entity: Any) -> Awaitable[Any]:
        return self._swallow(
            "post_from_list_route",
            self.endpoint.post_from_list_route(route, entity, self._config()),
        )

    def patch_from_detail_route(self, resource_id: ResourceId, route: str, entity: Any) -> Awaitable[Any]:
        return self._swallow(
            "patch_from_detail_route",
            self.endpoint.patch_from_detail_route(resource_id, route, entity, self._config()),
        )

    def patch_from_list_route(self, route: str, entity: Any) -> Awaitable[Any]:
        return self._swallow(
            "patch_from_list_route",
            self.endpoint.patch_from_list_route(route, entity, self._config()),
        )

    def update(self, resource_id: ResourceId, entity: Any) -> Awaitable[Any]:
        """PATCH `{full_url}{id}/`. Unlike every other call, failures propagate."""

        self.clear_parameters()
        return self._propagate(self.endpoint.update(resource_id, entity, self._config()))

    def delete(self, resource_id: ResourceId) -> Awaitable[Any]:
        self.clear_parameters()
        return self._swallow("delete", self.endpoint.delete(resource_id, self._config()))

    def delete_from_list_route(self, route: str, ids: Iterable[ResourceId]) -> Awaitable[Any]:
        return self._swallow(
            "delete_from_list_route",
            self.endpoint.delete_from_list_route(route, ids, self._config()),
        )

    # -- esquema --------------------------------------------------------

    def options(self) -> Awaitable[Any]:
        """Writable fields: the `actions.POST` object of the OPTIONS response."""

        pending = self.endpoint.request("OPTIONS", self.full_url, self._config())
        return self._project("options", pending, "actions", "POST")

    def get_choices(self, field: str) -> Awaitable[Any]:
        pending = self.endpoint.request("OPTIONS", self.full_url, self._config())
        return self._project("get_choices", pending, "actions", "POST", field, "choices")

    # -- binarios / streaming -------------------------------------------

    def load_file(self, route: str, data: Any) -> Awaitable[bytes | None]:
        return self._swallow("load_file", self.endpoint.load_file(route, data, self._config()))

    def get_file_from_list_route(self, route: str) -> Awaitable[bytes | None]:
        return self._swallow(
            "get_file_from_list_route",
            self.endpoint.get_file_from_list_route(route, self._config()),
        )

    def connect_stream(self, route: str, *, decoder: Decoder | None = None) -> StreamChannel[Any]:
        return self.endpoint.connect_stream(route, self._config(), decoder=decoder)
