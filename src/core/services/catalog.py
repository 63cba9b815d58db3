"""Catálogo de plantillas: API + caché en disco.

Reglas:
- La caché solo se usa para listados completos (sin filtro) y sin `--refresh`.
- Guardar la caché es best-effort: un fallo de escritura no rompe el listado.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from adapters import template_cache
from core.cancellation import CancelToken
from core.domain.models import Template
from core.interfaces.api import MemeAPI

logger = logging.getLogger(__name__)


def load_templates(
    api: MemeAPI,
    *,
    filter_text: str = "",
    refresh: bool = False,
    cache_path: Path | None = None,
    ttl_seconds: float = 0,
    cancel: CancelToken | None = None,
) -> list[Template]:
    use_cache = cache_path is not None and not filter_text and not refresh

    if use_cache:
        try:
            cached = template_cache.load_templates(cache_path, ttl_seconds)
        except OSError as exc:
            logger.debug("template cache unreadable: %s", exc)
            cached = None
        if cached is not None:
            logger.debug("using %d cached templates from %s", len(cached), cache_path)
            return cached

    templates = api.list_templates(filter_text, cancel=cancel)

    if cache_path is not None and not filter_text:
        try:
            template_cache.save_templates(cache_path, templates)
        except OSError as exc:
            logger.debug("could not write template cache: %s", exc)
    return templates


def only_animated(templates: Sequence[Template]) -> list[Template]:
    return [template for template in templates if template.animated]
