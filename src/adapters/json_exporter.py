"""Serialización JSON (salida `--json`, config y caché).

Formato estable:
- UTF-8 sin escapar (`ensure_ascii=False`), indentado a 2 espacios.
- Los ficheros se escriben vía temporal + `os.replace` en el mismo directorio.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel


def _to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    if isinstance(payload, (list, tuple)):
        return [_to_jsonable(item) for item in payload]
    if isinstance(payload, dict):
        return {key: _to_jsonable(value) for key, value in payload.items()}
    return payload


def dump_json(payload: Any) -> str:
    return json.dumps(_to_jsonable(payload), ensure_ascii=False, indent=2) + "\n"


def write_json(stream: TextIO, payload: Any) -> None:
    stream.write(dump_json(payload))
    stream.flush()


def write_json_atomic(path: Path, payload: Any) -> Path:
    """Escribe `payload` como JSON en `path` sin dejar ficheros a medias."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(dump_json(payload))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
