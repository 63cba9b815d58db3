from __future__ import annotations

import io

import pytest
import typer
from rich.console import Console

from conftest import make_template

from cli.picker import PickerState, TemplatePicker, run_picker

TEMPLATES = [
    make_template("drake", "Drakeposting", keywords=["hotline bling"], example={"text": ["no", "yes"]}),
    make_template("fry", "Futurama Fry"),
    make_template("blank", "Blank", lines=0),
]


def test_filter_matches_name_id_and_keywords():
    picker = TemplatePicker(TEMPLATES)
    picker.filter("HOTLINE")
    assert [t.id for t in picker.visible] == ["drake"]
    picker.filter("fry")
    assert [t.id for t in picker.visible] == ["fry"]
    picker.filter("")
    assert len(picker.visible) == 3


def test_select_then_fill_every_line():
    picker = TemplatePicker(TEMPLATES)
    picker.select(0)
    assert picker.state is PickerState.INPUTTING
    assert picker.placeholders == ["no", "yes"]

    picker.submit("top")
    assert picker.texts == []
    picker.submit("bottom")

    assert picker.state is PickerState.DONE
    assert picker.texts == ["top", "bottom"]


def test_zero_line_template_skips_input():
    picker = TemplatePicker(TEMPLATES)
    picker.filter("blank")
    picker.select(0)
    assert picker.state is PickerState.DONE
    assert picker.texts == []


def test_focus_navigation_and_back():
    picker = TemplatePicker(TEMPLATES)
    picker.select(1)
    assert picker.previous() is False
    assert picker.next() is True
    assert picker.next() is False
    assert picker.focus == 1

    picker.back()
    assert picker.state is PickerState.PICKING
    assert picker.selected is None


def test_cancel_from_any_active_state():
    picker = TemplatePicker(TEMPLATES)
    picker.select(0)
    picker.cancel()
    assert picker.cancelled
    assert picker.texts == []


def test_out_of_range_selection():
    picker = TemplatePicker(TEMPLATES)
    with pytest.raises(ValueError, match="no template #4"):
        picker.select(3)
    assert picker.state is PickerState.PICKING


def test_wrong_state_transitions_raise():
    picker = TemplatePicker(TEMPLATES)
    with pytest.raises(RuntimeError):
        picker.submit("x")


def _scripted(*answers: str):
    replies = iter(answers)

    def prompt(*args, **kwargs) -> str:
        return next(replies)

    return prompt


def _console() -> Console:
    return Console(file=io.StringIO(), width=120)


def test_run_picker_filters_selects_and_fills():
    picker = run_picker(TEMPLATES, _console(), prompt=_scripted("fry", "1", "top", "bottom"))
    assert picker.selected is not None and picker.selected.id == "fry"
    assert picker.texts == ["top", "bottom"]


def test_run_picker_back_returns_to_list():
    picker = run_picker(TEMPLATES, _console(), prompt=_scripted("1", ":back", "3"))
    assert picker.state is PickerState.DONE
    assert picker.selected.id == "blank"


def test_run_picker_quit_and_abort_cancel():
    assert run_picker(TEMPLATES, _console(), prompt=_scripted("q")).cancelled

    def aborting(*args, **kwargs) -> str:
        raise typer.Abort()

    assert run_picker(TEMPLATES, _console(), prompt=aborting).cancelled


def test_run_picker_prints_bracketed_names_and_queries():
    odd = make_template("odd", "[/odd] Template")
    console = _console()
    picker = run_picker([odd], console, prompt=_scripted("[/x]", "", "1", "only", "line"))
    assert picker.state is PickerState.DONE
    output = console.file.getvalue()
    assert "No templates match '[/x]'" in output
    assert "[/odd] Template" in output
