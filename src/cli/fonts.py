"""`memelink fonts`: listado de fuentes o detalle de una."""

from __future__ import annotations

from typing import Optional

import typer

from cli.state import get_state, handle_errors
from cli.ui_components import build_font_panel, build_fonts_table


def fonts(
    ctx: typer.Context,
    font_id: Optional[str] = typer.Argument(None, help="Show details for a single font."),
) -> None:
    """List the fonts available for meme text."""

    state = get_state(ctx)
    with handle_errors(state):
        result = state.api.get_font(font_id) if font_id else state.api.list_fonts()

    if state.json_output:
        state.emit_json(result)
    elif font_id:
        state.console.print(build_font_panel(result))
    else:
        state.console.print(build_fonts_table(result))
