"""Errores del dominio.

Taxonomía:
- `TransportFailure`: falló la capa HTTP subyacente (DNS, conexión, TLS).
- `RetryCancelled`: la cancelación llegó durante una espera de backoff.
- `BodyCloneError`: hacía falta reintentar pero el body no es re-legible.
- `APIError`: la API respondió con un status no-2xx.
- `ConfigError` / `DownloadError`: configuración local y descargas.

Todas heredan de `MemelinkError`, que es lo único que la CLI captura.
"""

from __future__ import annotations

from http import HTTPStatus


class MemelinkError(Exception):
    """Base de todos los errores de memelink."""


class TransportFailure(MemelinkError):
    def __init__(self, method: str, url: str, cause: Exception) -> None:
        super().__init__(f"round trip {method} {url}: {cause}")
        self.method = method
        self.url = url
        self.cause = cause


class RetryCancelled(MemelinkError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"retry wait cancelled: {reason}")
        self.reason = reason


class BodyCloneError(MemelinkError):
    """El request no puede reenviarse: su body era un stream de un solo uso."""


class APIError(MemelinkError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"memegen api: {message} (HTTP {status_code})")
        self.status_code = status_code
        self.message = message


class ConfigError(MemelinkError):
    pass


class DownloadError(MemelinkError):
    pass


_STATUS_MESSAGES: dict[int, str] = {
    HTTPStatus.NOT_FOUND: "template not found",
    HTTPStatus.REQUEST_URI_TOO_LONG: "text too long (max 200 chars per line)",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "could not download image URL",
    HTTPStatus.UNPROCESSABLE_ENTITY: "invalid style or missing image URL",
    HTTPStatus.TOO_MANY_REQUESTS: "rate limited, try again later",
}


def status_message(status_code: int) -> str:
    """Mensaje legible para un status de la API de Memegen."""

    return _STATUS_MESSAGES.get(status_code, f"unexpected error (HTTP {status_code})")
