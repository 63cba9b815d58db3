"""Contrato de la API de memes.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- La CLI y los servicios dependen de `MemeAPI`; los tests inyectan un fake sin
  tocar la red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.cancellation import CancelToken
from core.domain.models import (
    AutomaticRequest,
    AutomaticResponse,
    CustomRequest,
    Font,
    GenerateRequest,
    GenerateResponse,
    Template,
)


@runtime_checkable
class MemeAPI(Protocol):
    """Operaciones mínimas que necesita la CLI.

    Reglas de diseño:
    - Los errores de la API se levantan como `core.errors.APIError`.
    - `cancel` permite abortar una espera de reintento en curso.
    """

    def generate_automatic(
        self, request: AutomaticRequest, *, cancel: CancelToken | None = None
    ) -> AutomaticResponse: ...

    def generate(self, request: GenerateRequest, *, cancel: CancelToken | None = None) -> GenerateResponse: ...

    def generate_custom(
        self, request: CustomRequest, *, cancel: CancelToken | None = None
    ) -> GenerateResponse: ...

    def list_templates(self, filter_text: str = "", *, cancel: CancelToken | None = None) -> list[Template]: ...

    def get_template(self, template_id: str, *, cancel: CancelToken | None = None) -> Template: ...

    def list_fonts(self, *, cancel: CancelToken | None = None) -> list[Font]: ...

    def get_font(self, font_id: str, *, cancel: CancelToken | None = None) -> Font: ...

    def close(self) -> None: ...
