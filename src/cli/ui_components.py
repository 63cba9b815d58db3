"""Componentes de UI para CLI (Rich).

Tablas y paneles reutilizados por `templates`, `fonts`, el picker interactivo
y `doctor`. Ningún componente imprime: devuelven renderables de Rich.
"""

from __future__ import annotations

from typing import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Font, Template

HEADER_STYLE = "bold #7c3aed"


def build_templates_table(templates: Sequence[Template], *, numbered: bool = False) -> Table:
    table = Table(header_style=HEADER_STYLE)
    if numbered:
        table.add_column("#", style="dim", justify="right", no_wrap=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Lines", justify="right")
    table.add_column("Animated", style="green")

    for index, template in enumerate(templates, start=1):
        row = [Text(template.id), Text(template.name), str(template.lines), "yes" if template.animated else ""]
        if numbered:
            row.insert(0, str(index))
        table.add_row(*row)
    return table


def build_fonts_table(fonts: Sequence[Font]) -> Table:
    table = Table(header_style=HEADER_STYLE)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Alias", style="white")
    table.add_column("Filename", style="dim")
    for font in fonts:
        table.add_row(Text(font.id), Text(font.alias or "-"), Text(font.filename))
    return table


def _details_grid(rows: Sequence[tuple[str, str]]) -> Table:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    for label, value in rows:
        grid.add_row(f"{label}:", Text(value))
    return grid


def build_template_panel(template: Template) -> Panel:
    """Vista de detalle de una plantilla; omite los campos vacíos."""

    rows: list[tuple[str, str]] = [
        ("ID", template.id),
        ("Name", template.name),
        ("Lines", str(template.lines)),
        ("Overlays", str(template.overlays)),
    ]
    if template.styles:
        rows.append(("Styles", ", ".join(template.styles)))
    if template.blank:
        rows.append(("Blank", template.blank))
    if template.example.url:
        rows.append(("Example", template.example.url))
    if template.keywords:
        rows.append(("Keywords", ", ".join(template.keywords)))
    if template.source:
        rows.append(("Source", template.source))

    return Panel(_details_grid(rows), title=Text(template.name or template.id, style="bold cyan"), border_style="cyan")


def build_font_panel(font: Font) -> Panel:
    rows = [("ID", font.id), ("Alias", font.alias or "-"), ("Filename", font.filename)]
    return Panel(_details_grid(rows), title=Text(font.id, style="bold cyan"), border_style="cyan")
