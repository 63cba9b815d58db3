"""Caché en disco de `GET /templates` con TTL.

Lógica:
- Si el fichero no existe, está corrupto o expiró -> miss (`None`).
- Cualquier otro error de lectura se propaga.
- No hay política de expulsión: un único fichero que se sobrescribe.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from adapters.json_exporter import write_json_atomic
from core.domain.models import Template, TemplateCache

logger = logging.getLogger(__name__)


def load_templates(path: Path, ttl_seconds: float, *, now: datetime | None = None) -> list[Template] | None:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None

    try:
        cache = TemplateCache.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        logger.debug("ignoring corrupt template cache at %s", path)
        return None

    fetched_at = cache.fetched_at
    if fetched_at.tzinfo is None:
        fetched_at = fetched_at.replace(tzinfo=timezone.utc)
    age = ((now or datetime.now(timezone.utc)) - fetched_at).total_seconds()
    if age > ttl_seconds:
        logger.debug("template cache expired (age=%.0fs ttl=%.0fs)", age, ttl_seconds)
        return None
    return cache.templates


def save_templates(path: Path, templates: list[Template], *, now: datetime | None = None) -> Path:
    cache = TemplateCache(templates=templates, fetched_at=now or datetime.now(timezone.utc))
    return write_json_atomic(path, cache)
