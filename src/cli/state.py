"""Request-scoped dependencies shared by every command.

The root callback builds one `CliState` per invocation and stores it in
`typer.Context.obj`; commands receive everything explicitly from there.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

import typer
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import write_json
from core.config import AppSettings
from core.errors import MemelinkError
from core.interfaces.api import MemeAPI
from core.preferences import UserConfig

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    console: Console
    err_console: Console
    settings: AppSettings
    preferences: UserConfig
    api_factory: Callable[[], MemeAPI]
    json_output: bool = False
    verbose: bool = False
    no_input: bool = False
    _api: MemeAPI | None = field(default=None, repr=False)

    @property
    def api(self) -> MemeAPI:
        if self._api is None:
            self._api = self.api_factory()
        return self._api

    def close(self) -> None:
        if self._api is not None:
            self._api.close()
            self._api = None

    def emit_json(self, payload: Any) -> None:
        write_json(self.console.file, payload)

    def warn(self, message: str) -> None:
        self.err_console.print(f"[yellow]warning:[/yellow] {escape(message)}", highlight=False)


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.find_object(CliState)
    if state is None:
        raise RuntimeError("CLI state not initialised; the root callback did not run")
    return state


@contextmanager
def handle_errors(state: CliState) -> Iterator[None]:
    """Render `MemelinkError` as `Error: ...` (or `{"error": ...}`) and exit 1."""

    try:
        yield
    except MemelinkError as exc:
        logger.debug("command failed", exc_info=exc)
        if state.json_output:
            state.emit_json({"error": str(exc)})
        else:
            state.err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1) from exc
