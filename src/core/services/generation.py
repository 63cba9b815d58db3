"""Generación de memes: resolución de opciones y despacho a la API.

Este módulo concentra la lógica que antes vivía en la capa CLI:
- Cascada de opciones: flag explícito > preferencia del usuario > default.
- Elección del modo: automático (solo texto), plantilla o fondo custom.
- Parámetros de presentación que viajan en la query de la URL devuelta.

No imprime nada ni ejecuta acciones (navegador, descargas): eso es de la CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from adapters.memegen import append_query_params
from core.cancellation import CancelToken
from core.codec import encode, normalize_quotes
from core.domain.formats import ImageFormat, Layout
from core.domain.models import AutomaticRequest, CustomRequest, GenerateRequest, GenerateResponse
from core.errors import MemelinkError
from core.interfaces.api import MemeAPI
from core.preferences import UserConfig

CUSTOM_TEMPLATE = "custom"
BLANK_LINE = "_"


@dataclass
class MemeOptions:
    """Parámetros de una generación tal como llegan de la CLI."""

    template: str = ""
    texts: list[str] = field(default_factory=list)
    image_format: str | None = None
    font: str | None = None
    layout: str | None = None
    text_colors: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    width: int | None = None
    height: int | None = None
    center: str | None = None
    scale: str | None = None
    safe: bool = False
    background: str | None = None
    open_browser: bool = False


@dataclass
class GenerationResult:
    url: str
    generator: str | None = None
    confidence: float | None = None

    def as_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url}
        if self.generator is not None:
            payload["generator"] = self.generator
            payload["confidence"] = self.confidence
        return payload


def effective_format(flag: str | None, prefs: UserConfig | None) -> str:
    if flag:
        return flag
    if prefs is not None and prefs.default_format:
        return prefs.default_format
    return ImageFormat.default().value


def effective_layout(flag: str | None, prefs: UserConfig | None) -> str:
    if flag:
        return flag
    if prefs is not None and prefs.default_layout:
        return prefs.default_layout
    return Layout.default().value


def effective_font(flag: str | None, prefs: UserConfig | None) -> str | None:
    """Fuente explícita o de preferencias; None deja el default de la API."""

    if flag:
        return flag
    if prefs is not None and prefs.default_font:
        return prefs.default_font
    return None


def effective_safe(flag: bool, prefs: UserConfig | None) -> bool:
    if flag:
        return True
    return bool(prefs is not None and prefs.safe)


def effective_open(flag: bool, prefs: UserConfig | None) -> bool:
    if flag:
        return True
    return bool(prefs is not None and prefs.auto_open)


def validate_options(options: MemeOptions, prefs: UserConfig | None) -> None:
    if not options.template and not options.texts:
        raise MemelinkError("provide text or template ID; run 'memelink --help' for usage")

    image_format = effective_format(options.image_format, prefs)
    if image_format not in ImageFormat.values():
        raise MemelinkError(
            f"invalid format {image_format!r}: must be one of {', '.join(ImageFormat.values())}"
        )

    layout = effective_layout(options.layout, prefs)
    if layout not in Layout.values():
        raise MemelinkError(f"invalid layout {layout!r}: must be one of {', '.join(Layout.values())}")

    if options.template == CUSTOM_TEMPLATE and options.texts and not options.background:
        raise MemelinkError("--background required when using 'custom' template")


def query_params(options: MemeOptions, prefs: UserConfig | None) -> dict[str, str]:
    """Parámetros de presentación añadidos a la URL devuelta (no van en el POST)."""

    params: dict[str, str] = {}
    if options.text_colors:
        params["color"] = ",".join(options.text_colors)
    if options.width and options.width > 0:
        params["width"] = str(options.width)
    if options.height and options.height > 0:
        params["height"] = str(options.height)
    if options.center:
        params["center"] = options.center
    if options.scale:
        params["scale"] = options.scale
    if effective_safe(options.safe, prefs):
        params["safe"] = "true"
    return params


def generate_from_template(
    api: MemeAPI,
    template_id: str,
    texts: list[str],
    prefs: UserConfig | None = None,
    *,
    image_format: str | None = None,
    font: str | None = None,
    layout: str | None = None,
    styles: list[str] | None = None,
    cancel: CancelToken | None = None,
) -> GenerateResponse:
    """`POST /images` con la cascada de preferencias; admite cero líneas de texto."""

    return api.generate(
        GenerateRequest(
            template_id=template_id,
            text=[normalize_quotes(text) for text in texts],
            extension=effective_format(image_format, prefs),
            font=effective_font(font, prefs),
            layout=effective_layout(layout, prefs),
            style=styles or None,
        ),
        cancel=cancel,
    )


def generate_meme(
    api: MemeAPI,
    options: MemeOptions,
    prefs: UserConfig | None = None,
    *,
    cancel: CancelToken | None = None,
) -> GenerationResult:
    """Valida, elige el modo y devuelve la URL final del meme."""

    validate_options(options, prefs)
    texts = [normalize_quotes(text) for text in options.texts]

    if not texts:
        automatic = api.generate_automatic(
            AutomaticRequest(
                text=normalize_quotes(options.template),
                safe=effective_safe(options.safe, prefs),
            ),
            cancel=cancel,
        )
        return GenerationResult(
            url=append_query_params(automatic.url, query_params(options, prefs)),
            generator=automatic.generator,
            confidence=automatic.confidence,
        )

    image_format = effective_format(options.image_format, prefs)
    font = effective_font(options.font, prefs)
    layout = effective_layout(options.layout, prefs)

    if options.template == CUSTOM_TEMPLATE:
        response = api.generate_custom(
            CustomRequest(
                background=options.background or "",
                text=texts,
                extension=image_format,
                font=font,
                layout=layout,
                style=",".join(options.styles) or None,
            ),
            cancel=cancel,
        )
    else:
        response = generate_from_template(
            api,
            options.template,
            texts,
            prefs,
            image_format=image_format,
            font=font,
            layout=layout,
            styles=options.styles,
            cancel=cancel,
        )

    return GenerationResult(url=append_query_params(response.url, query_params(options, prefs)))


def build_template_url(
    base_url: str,
    template_id: str,
    lines: list[str],
    image_format: str = "jpg",
) -> str:
    """URL de imagen por ruta (`/images/<id>/<linea>/...<ext>`), sin llamar a la API.

    Cada línea pasa por `normalize_quotes` + `encode`; las líneas vacías se
    envían como `_`.
    """

    segments = [encode(normalize_quotes(line)) or BLANK_LINE for line in lines] or [BLANK_LINE]
    path = "/".join([quote(template_id, safe=""), *segments])
    return f"{base_url.rstrip('/')}/images/{path}.{image_format}"
