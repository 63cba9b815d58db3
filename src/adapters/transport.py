"""Transportes httpx con reintentos y logging.

Composición (de fuera hacia dentro):
    LoggingTransport -> RetryTransport -> httpx.HTTPTransport

Reglas del reintento:
- Solo se reintentan 429 y 500-504; cualquier otro status se devuelve tal cual.
- Un error de transporte (DNS, conexión, TLS) nunca se reintenta.
- El body se re-materializa en cada reintento: `extensions["body_factory"]`
  o los bytes ya leídos del request. Un stream de un solo uso no es reenviable.
- El bucle es un `tenacity.Retrying`: backoff `base_delay * 2**intento` sin
  tope, y la espera compite con `extensions["cancel"]` (`CancelToken`).
"""

from __future__ import annotations

import logging
import time
from http import HTTPStatus

import httpx
from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_exponential

from core.cancellation import CancelToken
from core.config import RetryPolicy
from core.errors import BodyCloneError, RetryCancelled, TransportFailure

logger = logging.getLogger(__name__)

CANCEL_EXTENSION = "cancel"
BODY_FACTORY_EXTENSION = "body_factory"


def should_retry(status_code: int) -> bool:
    """True para 429 y 500..504 (ambos inclusive); 505 en adelante no."""

    return status_code == HTTPStatus.TOO_MANY_REQUESTS or (
        HTTPStatus.INTERNAL_SERVER_ERROR <= status_code <= HTTPStatus.GATEWAY_TIMEOUT
    )


def _rebuild_request(request: httpx.Request) -> httpx.Request:
    factory = request.extensions.get(BODY_FACTORY_EXTENSION)
    if factory is not None:
        try:
            content = factory()
        except Exception as exc:
            raise BodyCloneError(f"cloning request body: {exc}") from exc
    else:
        try:
            content = request.content
        except httpx.RequestNotRead as exc:
            raise BodyCloneError(
                f"cloning request body: {request.method} {request.url} has a one-shot stream body; "
                "pass bytes or a body_factory to allow retries"
            ) from exc

    # Framing headers are recomputed from the new content.
    headers = request.headers.copy()
    headers.pop("Content-Length", None)
    headers.pop("Transfer-Encoding", None)
    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=content,
        extensions=request.extensions,
    )


def _close_before_retry(retry_state: RetryCallState) -> None:
    response = retry_state.outcome.result()
    response.close()
    logger.debug(
        "HTTP %d on attempt %d, retrying in %.2fs",
        response.status_code,
        retry_state.attempt_number,
        retry_state.next_action.sleep,
    )


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    response = retry_state.outcome.result()
    logger.debug("retries exhausted after %d attempts (HTTP %d)", retry_state.attempt_number, response.status_code)
    return response


class RetryTransport(httpx.BaseTransport):
    """Reintenta fallos transitorios con backoff exponencial."""

    def __init__(self, transport: httpx.BaseTransport, policy: RetryPolicy | None = None) -> None:
        self._transport = transport
        self._policy = policy or RetryPolicy()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        cancel: CancelToken = request.extensions.get(CANCEL_EXTENSION) or CancelToken()
        attempts = 0

        def send() -> httpx.Response:
            nonlocal attempts
            attempt_request = request if attempts == 0 else _rebuild_request(request)
            attempts += 1
            try:
                return self._transport.handle_request(attempt_request)
            except httpx.TransportError as exc:
                raise TransportFailure(request.method, str(request.url), exc) from exc

        def sleep(seconds: float) -> None:
            if cancel.wait(seconds):
                raise RetryCancelled(cancel.reason or "cancelled")

        retrying = Retrying(
            retry=retry_if_result(lambda response: should_retry(response.status_code)),
            stop=stop_after_attempt(self._policy.max_retries + 1),
            wait=wait_exponential(multiplier=self._policy.base_delay, exp_base=2),
            sleep=sleep,
            before_sleep=_close_before_retry,
            retry_error_callback=_last_response,
        )
        return retrying(send)

    def close(self) -> None:
        self._transport.close()


class LoggingTransport(httpx.BaseTransport):
    """Registra método, URL, status/error y duración de cada llamada.

    Va por fuera de `RetryTransport`: registra una vez por llamada lógica, no por
    intento. No altera el resultado.
    """

    def __init__(self, transport: httpx.BaseTransport, log: logging.Logger | None = None) -> None:
        self._transport = transport
        self._log = log or logger

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        start = time.perf_counter()
        self._log.debug("http request method=%s url=%s", request.method, request.url)
        try:
            response = self._transport.handle_request(request)
        except Exception as exc:
            self._log.debug(
                "http error method=%s url=%s error=%s duration=%.3fs",
                request.method,
                request.url,
                exc,
                time.perf_counter() - start,
            )
            raise

        self._log.debug(
            "http response method=%s url=%s status=%d duration=%.3fs",
            request.method,
            request.url,
            response.status_code,
            time.perf_counter() - start,
        )
        return response

    def close(self) -> None:
        self._transport.close()
