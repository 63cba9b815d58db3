"""Codificación de texto para las rutas de Memegen.

Memegen usa un segmento de ruta por línea de texto, así que caracteres como
`/`, `?`, `%` o `#` nunca pueden aparecer literalmente.

Reglas:
- El orden de `encode` es parte del contrato: `_` y `-` se duplican ANTES de
  convertir espacios en `_`.
- `decode` invierte el proceso salvo un caso ambiguo conocido: varios espacios
  seguidos (`"a  b"` -> `"a__b"` -> `"a_b"`). El decodificador de la API hace
  lo mismo, así que no se corrige aquí.
"""

from __future__ import annotations

_SPECIAL_ESCAPES: tuple[tuple[str, str], ...] = (
    ("?", "~q"),
    ("%", "~p"),
    ("#", "~h"),
    ('"', "''"),
    ("/", "~s"),
    ("\\", "~b"),
    ("\n", "~n"),
    ("&", "~a"),
    ("<", "~l"),
    (">", "~g"),
)

_SMART_PUNCTUATION: tuple[tuple[str, str], ...] = (
    ("’", "'"),
    ("“", '"'),
    ("”", '"'),
    ("–", "-"),
    ("—", "--"),
)

# Placeholders; control bytes never appear in decoded meme text.
_UNDERSCORE_SENTINEL = "\x00"
_DASH_SENTINEL = "\x01"


def encode(text: str) -> str:
    """Convierte texto libre al formato de ruta de Memegen."""

    text = text.replace("_", "__")
    text = text.replace("-", "--")

    text = text.replace(" ", "_")

    for raw, escaped in _SPECIAL_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def decode(text: str) -> str:
    """Revierte `encode` (ver el caso ambiguo en el docstring del módulo)."""

    for raw, escaped in _SPECIAL_ESCAPES:
        text = text.replace(escaped, raw)

    text = text.replace("__", _UNDERSCORE_SENTINEL)
    text = text.replace("_", " ")
    text = text.replace(_UNDERSCORE_SENTINEL, "_")

    text = text.replace("--", _DASH_SENTINEL)
    text = text.replace(_DASH_SENTINEL, "-")
    return text


def normalize_quotes(text: str) -> str:
    """Reemplaza comillas/guiones tipográficos por sus equivalentes ASCII.

    Se aplica antes de `encode` para que texto pegado desde editores de texto
    enriquecido se codifique igual que texto escrito a mano.
    """

    for fancy, ascii_value in _SMART_PUNCTUATION:
        text = text.replace(fancy, ascii_value)
    return text
