"""Shared fixtures.

Every test runs with isolated config/cache directories and without any
`MEMELINK_*` variables leaking in from the developer's shell.
"""

from __future__ import annotations

import os
from typing import Any

import pytest

from core.domain.models import (
    AutomaticRequest,
    AutomaticResponse,
    CustomRequest,
    Font,
    GenerateRequest,
    GenerateResponse,
    Template,
)
from core.errors import APIError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in list(os.environ):
        if name.startswith("MEMELINK_") or name == "MEMEGEN_API_KEY":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    yield


def make_template(template_id: str, name: str = "", lines: int = 2, **extra: Any) -> Template:
    return Template.model_validate({"id": template_id, "name": name or template_id.title(), "lines": lines, **extra})


class FakeMemeAPI:
    """In-memory `MemeAPI` that records every call."""

    def __init__(self, templates: list[Template] | None = None, fonts: list[Font] | None = None) -> None:
        self.templates = templates or []
        self.fonts = fonts or []
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def generate_automatic(self, request: AutomaticRequest, *, cancel=None) -> AutomaticResponse:
        self.calls.append(("automatic", request))
        return AutomaticResponse(url="https://api.memegen.link/images/auto.jpg", generator="Pattern", confidence=0.5)

    def generate(self, request: GenerateRequest, *, cancel=None) -> GenerateResponse:
        self.calls.append(("generate", request))
        return GenerateResponse(url=f"https://api.memegen.link/images/{request.template_id}/x.{request.extension}")

    def generate_custom(self, request: CustomRequest, *, cancel=None) -> GenerateResponse:
        self.calls.append(("custom", request))
        return GenerateResponse(url=f"https://api.memegen.link/images/custom/x.{request.extension}")

    def list_templates(self, filter_text: str = "", *, cancel=None) -> list[Template]:
        self.calls.append(("list_templates", filter_text))
        return [t for t in self.templates if t.matches(filter_text)]

    def get_template(self, template_id: str, *, cancel=None) -> Template:
        self.calls.append(("get_template", template_id))
        for template in self.templates:
            if template.id == template_id:
                return template
        raise APIError(404, "template not found")

    def list_fonts(self, *, cancel=None) -> list[Font]:
        self.calls.append(("list_fonts", None))
        return self.fonts

    def get_font(self, font_id: str, *, cancel=None) -> Font:
        self.calls.append(("get_font", font_id))
        return next(font for font in self.fonts if font.id == font_id)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_api() -> FakeMemeAPI:
    return FakeMemeAPI(
        templates=[
            make_template("drake", "Drakeposting", keywords=["hotline bling"]),
            make_template("fry", "Futurama Fry", styles=["animated"]),
            make_template("ds", "Daily Struggle", lines=3),
            make_template("blank", "Blank", lines=0),
        ],
        fonts=[
            Font.model_validate({"id": "impact", "alias": "thick", "filename": "impact.ttf"}),
            Font.model_validate({"id": "notosans", "alias": None, "filename": "NotoSans-Bold.ttf"}),
        ],
    )
