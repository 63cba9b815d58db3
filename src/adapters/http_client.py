"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, reintentos y logging para toda llamada a la API.
- Facilita testeo: se puede inyectar un `httpx.MockTransport` como transporte base.
"""

from __future__ import annotations

import httpx

from adapters.transport import LoggingTransport, RetryTransport
from core.config import AppSettings


def build_transport(
    settings: AppSettings,
    *,
    verbose: bool = False,
    base: httpx.BaseTransport | None = None,
) -> httpx.BaseTransport:
    """Compone logging (opcional) -> reintentos -> transporte base."""

    transport: httpx.BaseTransport = RetryTransport(
        base or httpx.HTTPTransport(),
        settings.retry_policy(),
    )
    if verbose:
        transport = LoggingTransport(transport)
    return transport


def build_http_client(
    settings: AppSettings | None = None,
    *,
    verbose: bool = False,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` contra la API de Memegen con defaults seguros."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.api_key:
        headers["X-API-KEY"] = settings.api_key
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=settings.api_base_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=build_transport(settings, verbose=verbose, base=transport),
    )
