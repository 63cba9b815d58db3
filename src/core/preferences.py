"""Preferencias del usuario (`memelink config ...`).

Formato:
- JSON en `<config_dir>/config.json`; las claves ausentes significan "sin valor"
  y se resuelven con la cascada flag > preferencia > default.
- Escritura atómica (fichero temporal + rename) para no dejar JSON a medias.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ValidationError
from pydantic.config import ConfigDict

from adapters.json_exporter import write_json_atomic
from core.domain.formats import ImageFormat, Layout
from core.errors import ConfigError

DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: str) -> float:
    """Parsea duraciones tipo `24h`, `90m`, `1h30m`, `45s` a segundos."""

    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration {value!r} (examples: 24h, 90m, 1h30m)")
    return total


class UserConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    default_format: str | None = None
    default_font: str | None = None
    default_layout: str | None = None
    safe: bool | None = None
    auto_open: bool | None = None
    preview: bool | None = None
    cache_ttl: str | None = None

    def cache_ttl_seconds(self) -> float:
        """TTL de la caché de plantillas; 24h si no está definido o es inválido."""

        if not self.cache_ttl:
            return DEFAULT_CACHE_TTL_SECONDS
        try:
            return parse_duration(self.cache_ttl)
        except ValueError:
            return DEFAULT_CACHE_TTL_SECONDS


def _validate_choice(choice: type[ImageFormat] | type[Layout]) -> Callable[[str], object]:
    def _validate(value: str) -> object:
        return choice.parse(value).value

    return _validate


def _validate_bool(value: str) -> object:
    if value not in ("true", "false"):
        raise ValueError("must be true or false")
    return value == "true"


def _validate_duration(value: str) -> object:
    parse_duration(value)
    return value


def _validate_text(value: str) -> object:
    return value


_KNOWN_KEYS: dict[str, Callable[[str], object]] = {
    "default_format": _validate_choice(ImageFormat),
    "default_font": _validate_text,
    "default_layout": _validate_choice(Layout),
    "safe": _validate_bool,
    "auto_open": _validate_bool,
    "preview": _validate_bool,
    "cache_ttl": _validate_duration,
}


# Accepted and stored, but nothing reads them yet.
RESERVED_KEYS: dict[str, str] = {
    "preview": "reserved: inline image preview is not supported",
}


def known_keys() -> list[str]:
    return sorted(_KNOWN_KEYS)


def _check_key(key: str) -> Callable[[str], object]:
    validator = _KNOWN_KEYS.get(key)
    if validator is None:
        raise ConfigError(f"unknown config key: {key} (valid keys: {', '.join(known_keys())})")
    return validator


def get_value(config: UserConfig, key: str) -> str | None:
    """Valor como texto (`true`/`false` para booleanos); None si no está definido."""

    _check_key(key)
    value = getattr(config, key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_value(config: UserConfig, key: str, value: str) -> None:
    validator = _check_key(key)
    try:
        parsed = validator(value)
    except ValueError as exc:
        raise ConfigError(f"invalid value for {key}: {exc}") from exc
    setattr(config, key, parsed)


def unset_value(config: UserConfig, key: str) -> None:
    _check_key(key)
    setattr(config, key, None)


def load_user_config(path: Path) -> UserConfig:
    """Lee la configuración; un fichero inexistente equivale a config vacía."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return UserConfig()
    except OSError as exc:
        raise ConfigError(f"reading config: {exc}") from exc

    try:
        data = json.loads(raw) if raw.strip() else {}
        return UserConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"parsing config {path}: {exc}") from exc


def save_user_config(path: Path, config: UserConfig) -> Path:
    payload = config.model_dump(mode="json", exclude_none=True)
    try:
        return write_json_atomic(path, payload)
    except OSError as exc:
        raise ConfigError(f"writing config: {exc}") from exc
