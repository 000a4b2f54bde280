"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y redirects para todos los clientes de recursos.
- Facilita testeo: se puede pasar un `transport` (p.ej. `httpx.MockTransport`).

No añade autenticación ni reintentos: quedan fuera del cliente de recursos.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults para un backend JSON.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los recursos se comporten igual.
    - La CLI y los tests construyen el transporte por la misma vía.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
