"""Interactive template picker.

`TemplatePicker` is a small state machine with no I/O:

    PICKING --select--> INPUTTING --submit last line--> DONE
       ^                   |
       +-------back--------+
    PICKING / INPUTTING --cancel--> CANCELLED

Templates with zero text lines go straight from PICKING to DONE.
`run_picker` drives it with Rich tables and typer prompts.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

import typer
from rich.console import Console
from rich.markup import escape

from cli.ui_components import build_templates_table
from core.domain.models import Template

BACK_COMMAND = ":back"
QUIT_COMMANDS = ("q", ":q", ":quit")
MAX_VISIBLE = 20


class PickerState(str, Enum):
    PICKING = "picking"
    INPUTTING = "inputting"
    DONE = "done"
    CANCELLED = "cancelled"


class TemplatePicker:
    def __init__(self, templates: Sequence[Template]) -> None:
        self._templates = list(templates)
        self.state = PickerState.PICKING
        self.query = ""
        self.selected: Template | None = None
        self.focus = 0
        self._inputs: list[str] = []

    @property
    def visible(self) -> list[Template]:
        return [t for t in self._templates if t.matches(self.query)]

    @property
    def cancelled(self) -> bool:
        return self.state is PickerState.CANCELLED

    @property
    def texts(self) -> list[str]:
        """Entered lines; empty until the picker is DONE."""

        if self.state is not PickerState.DONE:
            return []
        return list(self._inputs)

    @property
    def placeholders(self) -> list[str]:
        if self.selected is None:
            return []
        example = self.selected.example.text
        return [example[i] if i < len(example) else "" for i in range(self.selected.lines)]

    def filter(self, query: str) -> None:
        self._require(PickerState.PICKING)
        self.query = query

    def select(self, index: int) -> None:
        """Pick the template at 0-based `index` of the visible list."""

        self._require(PickerState.PICKING)
        visible = self.visible
        if not 0 <= index < len(visible):
            raise ValueError(f"no template #{index + 1} (showing {len(visible)})")

        self.selected = visible[index]
        self.focus = 0
        self._inputs = [""] * self.selected.lines
        if self.selected.lines == 0:
            self.state = PickerState.DONE
        else:
            self.state = PickerState.INPUTTING

    def next(self) -> bool:
        self._require(PickerState.INPUTTING)
        if self.focus >= len(self._inputs) - 1:
            return False
        self.focus += 1
        return True

    def previous(self) -> bool:
        self._require(PickerState.INPUTTING)
        if self.focus == 0:
            return False
        self.focus -= 1
        return True

    def submit(self, value: str) -> None:
        """Store `value` for the focused line and advance; the last line confirms."""

        self._require(PickerState.INPUTTING)
        self._inputs[self.focus] = value
        if not self.next():
            self.state = PickerState.DONE

    def back(self) -> None:
        self._require(PickerState.INPUTTING)
        self.state = PickerState.PICKING
        self.selected = None
        self.focus = 0
        self._inputs = []

    def cancel(self) -> None:
        if self.state in (PickerState.PICKING, PickerState.INPUTTING):
            self.state = PickerState.CANCELLED

    def _require(self, state: PickerState) -> None:
        if self.state is not state:
            raise RuntimeError(f"picker is {self.state.value}, expected {state.value}")


Prompt = Callable[..., str]


def run_picker(templates: Sequence[Template], console: Console, prompt: Prompt = typer.prompt) -> TemplatePicker:
    """Run the picker until DONE or CANCELLED. Ctrl+C cancels."""

    picker = TemplatePicker(templates)
    try:
        while picker.state in (PickerState.PICKING, PickerState.INPUTTING):
            if picker.state is PickerState.PICKING:
                _pick_step(picker, console, prompt)
            else:
                _input_step(picker, console, prompt)
    except typer.Abort:
        picker.cancel()
    return picker


def _pick_step(picker: TemplatePicker, console: Console, prompt: Prompt) -> None:
    visible = picker.visible
    if visible:
        console.print(build_templates_table(visible[:MAX_VISIBLE], numbered=True))
        if len(visible) > MAX_VISIBLE:
            console.print(f"[dim]... {len(visible) - MAX_VISIBLE} more, type to narrow the list[/dim]")
    else:
        console.print(f"[yellow]No templates match {escape(repr(picker.query))}.[/yellow]")

    answer = prompt("Number to pick, text to filter, q to quit", default="", show_default=False).strip()
    if answer.lower() in QUIT_COMMANDS:
        picker.cancel()
    elif answer.isdigit():
        try:
            picker.select(int(answer) - 1)
        except ValueError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
    else:
        picker.filter(answer)


def _input_step(picker: TemplatePicker, console: Console, prompt: Prompt) -> None:
    selected = picker.selected
    if selected is None:
        raise RuntimeError("picker is inputting without a selected template")
    if picker.focus == 0:
        console.print(f"[bold cyan]{escape(selected.name)}[/bold cyan] [dim]({BACK_COMMAND} to go back)[/dim]")

    placeholder = picker.placeholders[picker.focus]
    label = f"Line {picker.focus + 1}/{selected.lines}"
    if placeholder:
        label += f" (e.g. {placeholder})"
    value = prompt(label, default="", show_default=False)
    if value.strip() == BACK_COMMAND:
        picker.back()
    else:
        picker.submit(value)
