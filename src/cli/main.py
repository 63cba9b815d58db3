"""CLI principal (Typer).

Por qué este archivo es "thin":
- La CLI solo orquesta: parsea flags, arma `CliState` y delega en servicios.
- La lógica (codec, generación, catálogo) vive en `core` y los detalles de I/O
  en `adapters`.

Salida:
- stdout: resultados (URL, tablas o JSON con `--json`).
- stderr: errores, avisos, prompts y logs (`--verbose`).
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.memegen import build_memegen_client
from cli import config_cmd, doctor, fonts, generate, templates
from cli.state import CliState, get_state, handle_errors
from core.codec import decode
from core.config import APP_NAME, AppSettings, app_version, get_user_config_file
from core.domain.formats import ColorMode, ImageFormat
from core.errors import ConfigError, MemelinkError
from core.preferences import UserConfig, load_user_config
from core.services.generation import build_template_url, effective_format

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name=APP_NAME,
    help="Generate memes from the terminal with the Memegen API.",
    no_args_is_help=True,
    add_completion=False,
)

app.command("generate")(generate.generate)
app.command("gen", hidden=True)(generate.generate)
app.command("g", hidden=True)(generate.generate)
app.command("templates")(templates.templates)
app.command("fonts")(fonts.fonts)
app.add_typer(config_cmd.app, name="config")
app.add_typer(doctor.app, name="doctor")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    if verbose:
        for name in ("cli", "core", "adapters"):
            logging.getLogger(name).setLevel(logging.DEBUG)


def _build_consoles(color: ColorMode, json_output: bool) -> tuple[Console, Console]:
    no_color = json_output or color is ColorMode.NEVER
    force_terminal = True if color is ColorMode.ALWAYS and not json_output else None
    console = Console(no_color=no_color, force_terminal=force_terminal, highlight=False)
    err_console = Console(stderr=True, no_color=no_color, force_terminal=force_terminal, highlight=False)
    return console, err_console


def _load_preferences() -> UserConfig:
    try:
        return load_user_config(get_user_config_file())
    except ConfigError as exc:
        logger.warning("ignoring user config: %s", exc)
        return UserConfig()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {app_version()}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print machine-readable JSON to stdout."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic and internals to stderr."),
    no_input: bool = typer.Option(False, "--no-input", help="Never prompt; disables the interactive picker."),
    color: ColorMode = typer.Option(ColorMode.AUTO, "--color", help="Colorize output: auto, always or never."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    _setup_logging(verbose)
    console, err_console = _build_consoles(color, json_output)

    try:
        settings = AppSettings()
    except ValidationError as exc:
        err_console.print(f"[red]Error:[/red] invalid environment configuration: {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc

    state = CliState(
        console=console,
        err_console=err_console,
        settings=settings,
        preferences=_load_preferences(),
        api_factory=lambda: build_memegen_client(settings, verbose=verbose),
        json_output=json_output,
        verbose=verbose,
        no_input=no_input,
    )
    ctx.obj = state
    ctx.call_on_close(state.close)


@app.command("version")
def version_command(ctx: typer.Context) -> None:
    """Show the memelink version."""

    state = get_state(ctx)
    if state.json_output:
        state.emit_json({"version": app_version()})
    else:
        state.console.print(f"{APP_NAME} {app_version()}", markup=False)


@app.command("url")
def url_command(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template ID, e.g. 'drake'."),
    texts: Optional[List[str]] = typer.Argument(None, help="One argument per text line."),
    image_format: Optional[str] = typer.Option(None, "--format", "-f", help="Image format: jpg, png, gif or webp."),
) -> None:
    """Build a template image URL locally, without calling the API."""

    state = get_state(ctx)
    with handle_errors(state):
        extension = effective_format(image_format, state.preferences)
        if extension not in ImageFormat.values():
            raise MemelinkError(f"invalid format {extension!r}: must be one of {', '.join(ImageFormat.values())}")
        url = build_template_url(state.settings.api_base_url, template, list(texts or []), extension)

    if state.json_output:
        state.emit_json({"url": url})
    else:
        state.console.print(url, markup=False, soft_wrap=True)


@app.command("decode")
def decode_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Encoded URL segment, e.g. 'hello_world~q'."),
) -> None:
    """Decode a Memegen URL segment back to plain text."""

    state = get_state(ctx)
    decoded = decode(text)
    if state.json_output:
        state.emit_json({"text": decoded})
    else:
        state.console.print(decoded, markup=False, soft_wrap=True)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
