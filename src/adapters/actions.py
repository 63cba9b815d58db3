"""Acciones post-generación: abrir en el navegador y descargar la imagen."""

from __future__ import annotations

import os
import tempfile
import webbrowser
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from adapters.memegen import check_image_response
from core.config import AppSettings
from core.errors import APIError, DownloadError, MemelinkError

DEFAULT_FILENAME = "meme.jpg"


def open_in_browser(url: str) -> None:
    if not webbrowser.open(url):
        raise MemelinkError(f"no browser available to open {url}")


def auto_filename(url: str) -> str:
    """Nombre de fichero a partir del último segmento de la URL del meme."""

    if not url:
        return DEFAULT_FILENAME
    try:
        path = urlsplit(url).path
    except ValueError:
        return DEFAULT_FILENAME
    base = path.rstrip("/").rsplit("/", 1)[-1]
    if base in ("", ".", ".."):
        return DEFAULT_FILENAME
    return base


def _write_stream_atomic(response: httpx.Response, dest: Path) -> None:
    """Vuelca el body a un temporal junto a `dest` y lo renombra al terminar."""

    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=".tmp-", suffix=dest.suffix)
    try:
        with os.fdopen(fd, "wb") as handle:
            for chunk in response.iter_bytes():
                handle.write(chunk)
        os.replace(tmp_name, dest)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def download_file(
    url: str,
    dest: Path,
    *,
    settings: AppSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Descarga `url` en `dest`. Las URLs de memes son públicas (CDN), sin auth."""

    settings = settings or AppSettings()
    try:
        with httpx.Client(
            timeout=httpx.Timeout(settings.download_timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
            transport=transport,
        ) as client:
            with client.stream("GET", url) as response:
                if response.status_code != httpx.codes.OK:
                    response.read()
                    check_image_response(response)
                    raise APIError(response.status_code, f"unexpected HTTP status {response.status_code}")
                _write_stream_atomic(response, dest)
    except APIError as exc:
        raise DownloadError(f"downloading {url}: {exc.message} (HTTP {exc.status_code})") from exc
    except httpx.HTTPError as exc:
        raise DownloadError(f"downloading {url}: {exc}") from exc
    except OSError as exc:
        raise DownloadError(f"writing {dest}: {exc}") from exc
    return dest
