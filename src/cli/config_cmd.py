"""`memelink config`: preferencias persistentes del usuario.

`set`/`unset` releen el fichero del disco antes de escribir, así no se
pisan cambios hechos desde otra sesión.
"""

from __future__ import annotations

import typer
from rich.table import Table
from rich.text import Text

from cli.state import get_state, handle_errors
from cli.ui_components import HEADER_STYLE
from core.config import get_user_config_file
from core.preferences import (
    RESERVED_KEYS,
    get_value,
    known_keys,
    load_user_config,
    save_user_config,
    set_value,
    unset_value,
)

app = typer.Typer(no_args_is_help=True, help="Show and change user preferences.")

UNSET = "(unset)"


@app.command("path")
def path_command(ctx: typer.Context) -> None:
    """Print the path of the preferences file."""

    state = get_state(ctx)
    path = get_user_config_file()
    if state.json_output:
        state.emit_json({"path": str(path)})
    else:
        state.console.print(str(path), markup=False, soft_wrap=True)


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """Show every known preference and its value."""

    state = get_state(ctx)
    with handle_errors(state):
        config = load_user_config(get_user_config_file())
    values = {key: get_value(config, key) for key in known_keys()}

    if state.json_output:
        state.emit_json(values)
        return

    table = Table(header_style=HEADER_STYLE)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Note", style="dim")
    for key, value in values.items():
        table.add_row(
            key,
            Text(value) if value is not None else Text(UNSET, style="dim"),
            RESERVED_KEYS.get(key, ""),
        )
    state.console.print(table)


@app.command("get")
def get_command(ctx: typer.Context, key: str = typer.Argument(..., help="Preference name.")) -> None:
    """Print the value of one preference."""

    state = get_state(ctx)
    with handle_errors(state):
        value = get_value(load_user_config(get_user_config_file()), key)

    if state.json_output:
        state.emit_json({"key": key, "value": value})
    else:
        state.console.print(value if value is not None else UNSET, markup=False)


@app.command("set")
def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Preference name."),
    value: str = typer.Argument(..., help="New value."),
) -> None:
    """Set a preference, e.g. `memelink config set default_format png`."""

    state = get_state(ctx)
    path = get_user_config_file()
    with handle_errors(state):
        config = load_user_config(path)
        set_value(config, key, value)
        save_user_config(path, config)

    if state.json_output:
        state.emit_json({"key": key, "value": get_value(config, key)})
    else:
        state.err_console.print(f"Set {key} = {value}", markup=False)


@app.command("unset")
def unset_command(ctx: typer.Context, key: str = typer.Argument(..., help="Preference name.")) -> None:
    """Remove a preference so the built-in default applies again."""

    state = get_state(ctx)
    path = get_user_config_file()
    with handle_errors(state):
        config = load_user_config(path)
        unset_value(config, key)
        save_user_config(path, config)

    if state.json_output:
        state.emit_json({"key": key, "value": None})
    else:
        state.err_console.print(f"Unset {key}", markup=False)
