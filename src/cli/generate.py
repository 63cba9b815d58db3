"""`memelink generate` (aliases `gen`, `g`).

Modos según los argumentos posicionales:
- `generate "texto libre"`           -> automático (la API elige plantilla).
- `generate custom a b --background` -> fondo arbitrario.
- `generate drake a b`               -> plantilla.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from adapters.actions import auto_filename, download_file, open_in_browser
from cli.state import CliState, get_state, handle_errors
from core.errors import DownloadError, MemelinkError
from core.services.generation import GenerationResult, MemeOptions, effective_open, generate_meme


def run_actions(
    state: CliState,
    url: str,
    *,
    open_browser: bool = False,
    output: Path | None = None,
    auto_output: bool = False,
) -> None:
    """Acciones posteriores a generar; sus fallos son avisos, no errores."""

    if effective_open(open_browser, state.preferences):
        try:
            open_in_browser(url)
        except MemelinkError as exc:
            state.warn(f"could not open browser: {exc}")

    dest = output
    if dest is None and auto_output:
        dest = Path(auto_filename(url))
    if dest is None:
        return

    try:
        saved = download_file(url, dest, settings=state.settings)
    except DownloadError as exc:
        state.warn(str(exc))
    else:
        state.err_console.print(f"Saved to {saved}", markup=False, highlight=False)


def _print_result(state: CliState, result: GenerationResult) -> None:
    if state.json_output:
        state.emit_json(result.as_json())
        return
    state.console.print(result.url, markup=False, soft_wrap=True)
    if result.generator:
        state.err_console.print(
            f"[dim]template picked by {escape(result.generator)} (confidence {result.confidence:.2f})[/dim]",
            highlight=False,
        )


def generate(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template ID, 'custom', or free text for automatic mode."),
    texts: Optional[List[str]] = typer.Argument(None, help="One argument per text line."),
    image_format: Optional[str] = typer.Option(None, "--format", "-f", help="Image format: jpg, png, gif or webp."),
    font: Optional[str] = typer.Option(None, "--font", help="Font ID or alias (see `memelink fonts`)."),
    text_colors: Optional[List[str]] = typer.Option(None, "--text-color", help="Text color per line (repeatable)."),
    layout: Optional[str] = typer.Option(None, "--layout", help="Text layout: default or top."),
    styles: Optional[List[str]] = typer.Option(None, "--style", help="Template style or overlay URL (repeatable)."),
    width: Optional[int] = typer.Option(None, "--width", min=0, help="Image width in pixels."),
    height: Optional[int] = typer.Option(None, "--height", min=0, help="Image height in pixels."),
    center: Optional[str] = typer.Option(None, "--center", help="Overlay center as x,y."),
    scale: Optional[str] = typer.Option(None, "--scale", help="Overlay scale factor."),
    safe: bool = typer.Option(False, "--safe", help="Filter NSFW content."),
    background: Optional[str] = typer.Option(None, "--background", help="Background image URL for 'custom'."),
    open_browser: bool = typer.Option(False, "--open", "-o", help="Open the meme in the browser."),
    output: Optional[Path] = typer.Option(None, "--output", help="Download the image to this path."),
    auto_output: bool = typer.Option(False, "-O", "--auto-output", help="Download using the URL's file name."),
) -> None:
    """Generate a meme and print its URL."""

    state = get_state(ctx)
    options = MemeOptions(
        template=template,
        texts=list(texts or []),
        image_format=image_format,
        font=font,
        layout=layout,
        text_colors=list(text_colors or []),
        styles=list(styles or []),
        width=width,
        height=height,
        center=center,
        scale=scale,
        safe=safe,
        background=background,
        open_browser=open_browser,
    )

    with handle_errors(state):
        if output is not None and auto_output:
            raise MemelinkError("--output and --auto-output are mutually exclusive")
        result = generate_meme(state.api, options, state.preferences)

    _print_result(state, result)
    run_actions(state, result.url, open_browser=open_browser, output=output, auto_output=auto_output)
