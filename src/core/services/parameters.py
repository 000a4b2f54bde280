"""Estado de query-params y configuración inmutable por petición.

`ParameterAccumulator` reproduce el patrón acumular-y-despachar: un multi-map
mutable con semántica de append (claves repetidas permitidas). Cada petición
toma una foto inmutable (`RequestConfig`) en el momento de la llamada, así que
mutaciones posteriores no afectan a peticiones ya creadas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

import httpx

ResponseKind = Literal["json", "blob"]

QueryParamsLike = httpx.QueryParams | Mapping[str, Any]


@dataclass(frozen=True)
class RequestConfig:
    """Configuración explícita de una petición (params + tipo de respuesta)."""

    params: httpx.QueryParams = field(default_factory=httpx.QueryParams)
    response_kind: ResponseKind = "json"

    @classmethod
    def of(cls, params: QueryParamsLike | None = None, *, response_kind: ResponseKind = "json") -> "RequestConfig":
        return cls(params=httpx.QueryParams(params or {}), response_kind=response_kind)

    def as_blob(self) -> "RequestConfig":
        return RequestConfig(params=self.params, response_kind="blob")


class ParameterAccumulator:
    """Query-params acumulados de un cliente.

    Ninguna operación valida claves ni valores; `httpx.QueryParams` convierte
    primitivos a string (`True` -> `"true"`, `None` -> `""`).
    """

    def __init__(self, params: QueryParamsLike | None = None) -> None:
        self._params = httpx.QueryParams(params or {})

    def clear(self) -> None:
        self._params = httpx.QueryParams()

    def set_all(self, params: QueryParamsLike | None = None) -> None:
        self._params = httpx.QueryParams(params or {})

    def append(self, key: str, value: Any) -> None:
        self._params = self._params.add(key, value)

    def append_all(self, params: Mapping[str, Any]) -> None:
        for key in params:
            self.append(key, params[key])

    def snapshot(self) -> httpx.QueryParams:
        # QueryParams es inmutable: devolverlo no expone el estado interno.
        return self._params

    def __len__(self) -> int:
        return len(self._params.multi_items())

    def __bool__(self) -> bool:
        return bool(self._params)

    def __str__(self) -> str:
        return str(self._params)

    def __repr__(self) -> str:
        return f"ParameterAccumulator({self._params.multi_items()!r})"
