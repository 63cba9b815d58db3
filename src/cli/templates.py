"""`memelink templates`: detalle, listado o picker interactivo."""

from __future__ import annotations

import functools
import sys
from typing import Optional

import typer

from adapters.memegen import append_query_params
from cli.generate import run_actions
from cli.picker import run_picker
from cli.state import CliState, get_state, handle_errors
from cli.ui_components import build_template_panel, build_templates_table
from core.config import get_templates_cache_file
from core.domain.models import Template
from core.services.catalog import load_templates, only_animated
from core.services.generation import MemeOptions, generate_from_template, query_params


def _is_interactive(state: CliState, filter_text: str) -> bool:
    if state.json_output or state.no_input or filter_text:
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


def _show_detail(state: CliState, template_id: str) -> None:
    with handle_errors(state):
        template = state.api.get_template(template_id)
    if state.json_output:
        state.emit_json(template)
    else:
        state.console.print(build_template_panel(template))


def _show_list(state: CliState, listing: list[Template]) -> None:
    if state.json_output:
        state.emit_json(listing)
        return
    if not listing:
        state.err_console.print("No templates found.")
        return
    state.console.print(build_templates_table(listing))
    state.err_console.print(f"[dim]{len(listing)} templates[/dim]")


def _pick_and_generate(state: CliState, listing: list[Template]) -> None:
    picker = run_picker(listing, state.err_console, prompt=functools.partial(typer.prompt, err=True))
    if picker.cancelled or picker.selected is None:
        state.err_console.print("Cancelled.")
        return

    with handle_errors(state):
        response = generate_from_template(state.api, picker.selected.id, picker.texts, state.preferences)
    url = append_query_params(response.url, query_params(MemeOptions(), state.preferences))
    state.console.print(url, markup=False, soft_wrap=True)
    run_actions(state, url)


def templates(
    ctx: typer.Context,
    template_id: Optional[str] = typer.Argument(None, help="Show details for a single template."),
    filter_text: Optional[str] = typer.Option(None, "--filter", help="Server-side search by name or keyword."),
    animated: bool = typer.Option(False, "--animated", help="Only templates with an animated style."),
    refresh: bool = typer.Option(False, "--refresh", help="Ignore the local template cache."),
) -> None:
    """List templates, show one, or pick one interactively."""

    state = get_state(ctx)
    if template_id:
        _show_detail(state, template_id)
        return

    with handle_errors(state):
        listing = load_templates(
            state.api,
            filter_text=filter_text or "",
            refresh=refresh,
            cache_path=get_templates_cache_file(),
            ttl_seconds=state.preferences.cache_ttl_seconds(),
        )
    if animated:
        listing = only_animated(listing)

    if _is_interactive(state, filter_text or ""):
        _pick_and_generate(state, listing)
    else:
        _show_list(state, listing)
