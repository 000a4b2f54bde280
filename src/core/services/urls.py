"""Reglas de composición de URLs del cliente de recursos.

Concatenación pura de strings: no se normalizan barras duplicadas ni se
añade nada que el caller no haya pedido. Convenciones del backend:
- list route:   `{full_url}` o `{full_url}{route}/`
- detail route: `{full_url}{id}/` o `{full_url}{id}/{route}/`
- bulk delete:  `{full_url}{route}/?ids=1,2,3` (separador sin codificar)
- socket:       `{socket_url}/{route}/[?{params}]`
"""

from __future__ import annotations

from typing import Iterable

import httpx

ResourceId = int | str


def list_url(full_url: str, route: str | None = None) -> str:
    if route:
        return f"{full_url}{route}/"
    return full_url


def detail_url(full_url: str, resource_id: ResourceId | None, route: str | None = None) -> str:
    """Detail route; `resource_id=None` falls back to the list route.

    This lets one nested-route call serve both the collection-level and the
    instance-level endpoint.
    """

    if resource_id is None:
        return list_url(full_url, route)
    if route:
        return f"{full_url}{resource_id}/{route}/"
    return f"{full_url}{resource_id}/"


def bulk_delete_url(full_url: str, route: str, ids: Iterable[ResourceId]) -> str:
    joined = ",".join(str(i) for i in ids)
    return f"{full_url}{route}/?ids={joined}"


def with_query(url: str, params: httpx.QueryParams | None) -> str:
    """Append serialized `params` to `url`; no `?` when there are none."""

    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{params}"


def socket_url(socket_base: str, route: str, params: httpx.QueryParams | None = None) -> str:
    return with_query(f"{socket_base}/{route}/", params)
