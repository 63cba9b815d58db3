"""Doctor command for environment diagnostics."""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from adapters.template_cache import load_templates
from cli.state import CliState, get_state, handle_errors
from core.config import get_templates_cache_file, get_user_config_file, write_user_env_vars
from core.errors import ConfigError, MemelinkError
from core.preferences import load_user_config

app = typer.Typer(invoke_without_command=True, help="Environment diagnostics and configuration checks.")

Check = tuple[str, str, str]


def _check_config() -> Check:
    path = get_user_config_file()
    if not path.exists():
        return ("Config file", "OPTIONAL", f"{path} (not created yet)")
    try:
        load_user_config(path)
    except ConfigError as exc:
        return ("Config file", "FAIL", str(exc))
    return ("Config file", "OK", str(path))


def _check_cache(state: CliState) -> Check:
    path = get_templates_cache_file()
    if not path.exists():
        return ("Template cache", "EMPTY", f"{path} (filled by `memelink templates`)")
    try:
        cached = load_templates(path, state.preferences.cache_ttl_seconds())
    except OSError as exc:
        return ("Template cache", "FAIL", str(exc))
    if cached is None:
        return ("Template cache", "STALE", f"{path} (expired or unreadable, will refresh)")
    return ("Template cache", "OK", f"{len(cached)} templates in {path}")


def _check_api(state: CliState) -> Check:
    try:
        fonts = state.api.list_fonts()
    except MemelinkError as exc:
        return ("API connectivity", "FAIL", str(exc))
    return ("API connectivity", "OK", f"{len(fonts)} fonts available")


@app.callback()
def doctor(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    if ctx.invoked_subcommand is not None:
        return

    state = get_state(ctx)
    settings = state.settings

    checks: list[Check] = []
    if settings.api_key:
        checks.append(("API key", "OK", "Sent as X-API-KEY"))
    else:
        checks.append(("API key", "OPTIONAL", "No key set -> anonymous requests (watermarked images)"))
    checks.append(("API base URL", "OK", settings.api_base_url))
    checks.append(_check_config())
    checks.append(_check_cache(state))
    checks.append(_check_api(state))

    if state.json_output:
        state.emit_json([{"check": name, "status": status, "details": details} for name, status, details in checks])
        return

    table = Table(title="memelink doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    for row in checks:
        name, status, details = row
        table.add_row(name, status, Text(details))
    state.console.print(table)

    if any(status == "FAIL" for _, status, _ in checks):
        state.err_console.print(
            "\n[yellow]Note:[/yellow] run with `--verbose` to see the HTTP traffic behind a failed check."
        )


@app.command(name="set-api-key")
def set_api_key(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(None, "--key", help="API key; prompted for when omitted."),
) -> None:
    """Store a Memegen API key in the user config .env."""

    state = get_state(ctx)
    with handle_errors(state):
        if key is None:
            if state.no_input:
                raise MemelinkError("--key is required with --no-input")
            key = typer.prompt("Memegen API key", hide_input=True, err=True)
        key = key.strip()
        if not key:
            raise MemelinkError("API key must not be empty")
        try:
            env_path = write_user_env_vars({"MEMELINK_API_KEY": key})
        except OSError as exc:
            raise ConfigError(f"writing API key: {exc}") from exc

    state.err_console.print(f"[green]Saved API key to:[/green] {escape(str(env_path))}", highlight=False)
