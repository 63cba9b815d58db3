"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de lo que devuelve la API de Memegen sin acoplar el Core
  a librerías de I/O.
- `model_dump(mode="json", by_alias=True)` produce exactamente el payload que
  espera la API y lo que imprime `--json`.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TemplateExample(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: list[str] = Field(default_factory=list)
    url: str = ""


class Template(BaseModel):
    """Plantilla de meme tal como la describe `GET /templates`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1, description="Identificador usado en las URLs.")
    name: str = Field(default="", description="Nombre legible de la plantilla.")
    lines: int = Field(default=0, ge=0, description="Número de líneas de texto.")
    overlays: int = Field(default=0, ge=0, description="Número de overlays admitidos.")
    styles: list[str] = Field(
        default_factory=list,
        description="Estilos alternativos (p.ej. 'animated').",
    )
    blank: str = Field(default="", description="URL de la plantilla sin texto.")
    example: TemplateExample = Field(default_factory=TemplateExample)
    source: str | None = Field(default=None, description="Origen/atribución de la imagen.")
    keywords: list[str] = Field(default_factory=list)
    self_url: str = Field(default="", alias="_self")

    @property
    def animated(self) -> bool:
        return "animated" in self.styles

    def matches(self, query: str) -> bool:
        """Búsqueda simple por id, nombre o keywords (case-insensitive)."""

        needle = query.strip().lower()
        if not needle:
            return True
        haystack = [self.id, self.name, *self.keywords]
        return any(needle in item.lower() for item in haystack)


class Font(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1)
    alias: str | None = Field(default=None, description="Alias corto (nullable en la API).")
    filename: str = ""
    self_url: str = Field(default="", alias="_self")


class AutomaticRequest(BaseModel):
    """Payload de `POST /images/automatic`."""

    text: str = Field(..., min_length=1)
    safe: bool = False


class AutomaticResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str
    generator: str = ""
    confidence: float = 0.0


class GenerateRequest(BaseModel):
    """Payload de `POST /images` (meme a partir de una plantilla)."""

    template_id: str = Field(..., min_length=1)
    text: list[str] = Field(default_factory=list)
    extension: str | None = None
    font: str | None = None
    layout: str | None = None
    style: list[str] | None = None
    redirect: bool = False


class CustomRequest(BaseModel):
    """Payload de `POST /images/custom` (fondo arbitrario)."""

    background: str = Field(..., min_length=1)
    text: list[str] = Field(default_factory=list)
    extension: str | None = None
    font: str | None = None
    layout: str | None = None
    style: str | None = None
    redirect: bool = False


class GenerateResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str


class TemplateCache(BaseModel):
    """Representación en disco de la caché de plantillas."""

    templates: list[Template] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
