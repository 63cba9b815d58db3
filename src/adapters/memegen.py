"""Cliente de la API de Memegen (https://api.memegen.link).

Responsabilidad:
- Serializar payloads (`core.domain.models`) como bytes JSON: el body queda
  re-legible para que `RetryTransport` pueda reenviarlo.
- Convertir respuestas no-2xx en `APIError` con un mensaje legible.
- Parsear respuestas JSON a modelos del dominio.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from adapters.http_client import build_http_client
from adapters.transport import CANCEL_EXTENSION
from core.cancellation import CancelToken
from core.config import AppSettings
from core.domain.models import (
    AutomaticRequest,
    AutomaticResponse,
    CustomRequest,
    Font,
    GenerateRequest,
    GenerateResponse,
    Template,
)
from core.errors import APIError, MemelinkError, status_message


def check_image_response(response: httpx.Response) -> None:
    """Valida endpoints que devuelven imágenes (los errores también son imágenes)."""

    if response.is_success:
        return
    raise APIError(response.status_code, status_message(response.status_code))


def check_json_response(response: httpx.Response) -> None:
    """Valida endpoints JSON: usa `{"error": "..."}` si viene, si no el status."""

    if response.is_success:
        return

    message = None
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError, httpx.ResponseNotRead):
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str) and payload["error"]:
        message = payload["error"]

    raise APIError(response.status_code, message or status_message(response.status_code))


def append_query_params(base_url: str, params: dict[str, str]) -> str:
    """Añade parámetros de presentación (color, width, ...) a la URL del meme.

    Los parámetros existentes con la misma clave se sobrescriben.
    """

    if not params:
        return base_url

    parts = urlsplit(base_url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update(params)
    return urlunsplit(parts._replace(query=urlencode(sorted(query.items()))))


class MemegenClient:
    """Implementación HTTP de `core.interfaces.api.MemeAPI`.

    `deadline_seconds` acota cada llamada lógica (reintentos y esperas
    incluidos) cuando el caller no pasa su propio `CancelToken`.
    """

    def __init__(self, http: httpx.Client, *, deadline_seconds: float | None = None) -> None:
        self._http = http
        self._deadline_seconds = deadline_seconds

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "MemegenClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        *,
        payload: BaseModel | None = None,
        params: dict[str, str] | None = None,
        cancel: CancelToken | None = None,
    ) -> Any:
        content: bytes | None = None
        headers: dict[str, str] = {}
        if payload is not None:
            body = payload.model_dump(mode="json", exclude_none=True)
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")
            headers["Content-Type"] = "application/json"

        extensions: dict[str, Any] = {}
        if cancel is None and self._deadline_seconds is not None:
            cancel = CancelToken(timeout=self._deadline_seconds)
        if cancel is not None:
            extensions[CANCEL_EXTENSION] = cancel

        response = self._http.request(
            method,
            path,
            content=content,
            params=params,
            headers=headers,
            extensions=extensions,
        )
        try:
            check_json_response(response)
            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise MemelinkError(f"decoding {method} {path} response: {exc}") from exc
        finally:
            response.close()

    def _parse(self, data: Any, model: Any, what: str) -> Any:
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as exc:
            raise MemelinkError(f"decoding {what}: {exc}") from exc

    def generate_automatic(
        self, request: AutomaticRequest, *, cancel: CancelToken | None = None
    ) -> AutomaticResponse:
        data = self._send("POST", "/images/automatic", payload=request, cancel=cancel)
        return self._parse(data, AutomaticResponse, "automatic response")

    def generate(self, request: GenerateRequest, *, cancel: CancelToken | None = None) -> GenerateResponse:
        data = self._send("POST", "/images", payload=request, cancel=cancel)
        return self._parse(data, GenerateResponse, "generate response")

    def generate_custom(self, request: CustomRequest, *, cancel: CancelToken | None = None) -> GenerateResponse:
        data = self._send("POST", "/images/custom", payload=request, cancel=cancel)
        return self._parse(data, GenerateResponse, "custom response")

    def list_templates(self, filter_text: str = "", *, cancel: CancelToken | None = None) -> list[Template]:
        params = {"filter": filter_text} if filter_text else None
        data = self._send("GET", "/templates", params=params, cancel=cancel)
        return self._parse(data, list[Template], "templates")

    def get_template(self, template_id: str, *, cancel: CancelToken | None = None) -> Template:
        data = self._send("GET", f"/templates/{quote(template_id, safe='')}", cancel=cancel)
        return self._parse(data, Template, f"template {template_id!r}")

    def list_fonts(self, *, cancel: CancelToken | None = None) -> list[Font]:
        data = self._send("GET", "/fonts", cancel=cancel)
        return self._parse(data, list[Font], "fonts")

    def get_font(self, font_id: str, *, cancel: CancelToken | None = None) -> Font:
        data = self._send("GET", f"/fonts/{quote(font_id, safe='')}", cancel=cancel)
        return self._parse(data, Font, f"font {font_id!r}")


def build_memegen_client(settings: AppSettings | None = None, *, verbose: bool = False) -> MemegenClient:
    settings = settings or AppSettings()
    return MemegenClient(
        build_http_client(settings, verbose=verbose),
        deadline_seconds=settings.http_timeout_seconds,
    )
