"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP, caché) lean config de forma consistente.

Las preferencias editables por el usuario (`memelink config set ...`) viven
en `core.preferences`; aquí solo está lo que llega por entorno/.env.
"""

from __future__ import annotations

import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "memelink"
DEFAULT_BASE_URL = "https://api.memegen.link"


def app_version() -> str:
    try:
        return version(APP_NAME)
    except PackageNotFoundError:
        return "dev"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_cache_dir() -> Path:
    """Directorio de caché por usuario (plantillas descargadas)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", str(Path.home())))
        return base / APP_NAME / "cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_NAME

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".cache" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_user_config_file() -> Path:
    return get_user_config_dir() / "config.json"


def get_templates_cache_file() -> Path:
    return get_user_cache_dir() / "templates.json"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# memelink user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class RetryPolicy(BaseModel):
    """Política de reintentos del transporte HTTP (inmutable).

    `max_retries=3` significa hasta 4 intentos en total. El backoff es
    `base_delay * 2**intento`, sin tope: con el límite por defecto la espera
    máxima es 4 * base_delay.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, le=10)
    base_delay: float = Field(default=1.0, ge=0)


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="MEMELINK_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="Base URL de la API de Memegen.",
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("MEMELINK_API_KEY", "MEMEGEN_API_KEY", "api_key"),
        description="API key opcional (header X-API-KEY).",
    )
    user_agent: str = Field(
        default_factory=lambda: f"memelink-cli/{app_version()}",
        min_length=1,
        description="User-Agent enviado a la API.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Reintentos máximos ante fallos transitorios (429, 500-504).",
    )
    retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera base del backoff exponencial (segundos).",
    )
    download_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout para descargar la imagen generada (segundos).",
    )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_retries=self.max_retries, base_delay=self.retry_base_delay_seconds)
