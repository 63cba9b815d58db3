from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from conftest import FakeMemeAPI, make_template
from core.config import get_templates_cache_file, get_user_config_file, get_user_env_file

runner = CliRunner()


@pytest.fixture
def api(monkeypatch, fake_api: FakeMemeAPI) -> FakeMemeAPI:
    monkeypatch.setattr(cli_main, "build_memegen_client", lambda settings, verbose=False: fake_api)
    return fake_api


def invoke(*args: str):
    return runner.invoke(cli_main.app, list(args))


def test_version_flag():
    result = invoke("--version")
    assert result.exit_code == 0
    assert result.stdout.startswith("memelink ")


def test_version_command_json():
    result = invoke("--json", "version")
    assert result.exit_code == 0
    assert "version" in json.loads(result.stdout)


def test_generate_template_json(api):
    result = invoke("--json", "generate", "drake", "top", "bottom")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"url": "https://api.memegen.link/images/drake/x.jpg"}
    assert api.calls[0][1].text == ["top", "bottom"]
    assert api.closed


def test_generate_alias_and_plain_output(api):
    result = invoke("g", "drake", "a", "b", "--format", "png", "--width", "300")
    assert result.exit_code == 0, result.output
    assert "https://api.memegen.link/images/drake/x.png?width=300" in result.stdout


def test_generate_automatic_mode(api):
    result = invoke("--json", "gen", "when the tests pass")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["generator"] == "Pattern"
    assert api.calls[0][0] == "automatic"


def test_generate_custom_requires_background(api):
    result = invoke("generate", "custom", "a")
    assert result.exit_code == 1
    assert "--background required" in result.output
    assert api.calls == []


def test_generate_error_as_json(api):
    result = invoke("--json", "generate", "drake", "a", "--format", "bmp")
    assert result.exit_code == 1
    assert "invalid format" in json.loads(result.stdout)["error"]


def test_generate_uses_saved_preferences(api):
    assert invoke("config", "set", "default_format", "webp").exit_code == 0
    result = invoke("--json", "generate", "drake", "a")
    assert result.exit_code == 0, result.output
    assert api.calls[0][1].extension == "webp"


def test_generate_open_warns_when_no_browser(api, monkeypatch):
    monkeypatch.setattr("adapters.actions.webbrowser.open", lambda url: False)
    result = invoke("generate", "drake", "a", "--open")
    assert result.exit_code == 0
    assert "could not open browser" in result.output


def test_broken_config_does_not_block_generation(api):
    path = get_user_config_file()
    path.parent.mkdir(parents=True)
    path.write_text("{oops", encoding="utf-8")
    result = invoke("--json", "generate", "drake", "a")
    assert result.exit_code == 0, result.output


def test_templates_list_json_and_cache(api):
    result = invoke("--json", "templates")
    assert result.exit_code == 0, result.output
    assert [t["id"] for t in json.loads(result.stdout)] == ["drake", "fry", "ds", "blank"]
    assert get_templates_cache_file().exists()

    api.templates = []
    cached = invoke("--json", "templates")
    assert len(json.loads(cached.stdout)) == 4


def test_templates_filter_and_animated(api):
    filtered = invoke("--json", "templates", "--filter", "struggle")
    assert [t["id"] for t in json.loads(filtered.stdout)] == ["ds"]

    animated = invoke("--json", "templates", "--animated", "--refresh")
    assert [t["id"] for t in json.loads(animated.stdout)] == ["fry"]


def test_templates_table_without_tty(api):
    result = invoke("templates")
    assert result.exit_code == 0, result.output
    assert "drake" in result.stdout
    assert "Drakeposting" in result.stdout


def test_template_detail(api):
    result = invoke("--json", "templates", "drake")
    assert json.loads(result.stdout)["id"] == "drake"

    missing = invoke("templates", "nope")
    assert missing.exit_code == 1
    assert "template not found" in missing.output


def test_fonts(api):
    listing = invoke("--json", "fonts")
    assert [f["alias"] for f in json.loads(listing.stdout)] == ["thick", None]

    detail = invoke("fonts", "impact")
    assert detail.exit_code == 0
    assert "impact.ttf" in detail.stdout


def test_config_commands():
    assert invoke("config", "path").stdout.strip() == str(get_user_config_file())

    assert invoke("config", "set", "safe", "true").exit_code == 0
    assert invoke("config", "get", "safe").stdout.strip() == "true"
    assert json.loads(invoke("--json", "config", "list").stdout)["safe"] == "true"

    assert invoke("config", "unset", "safe").exit_code == 0
    assert invoke("config", "get", "safe").stdout.strip() == "(unset)"


def test_config_rejects_bad_input():
    unknown = invoke("config", "set", "colour", "red")
    assert unknown.exit_code == 1
    assert "unknown config key: colour" in unknown.output

    invalid = invoke("config", "set", "default_format", "bmp")
    assert invalid.exit_code == 1
    assert "invalid value for default_format" in invalid.output


def test_url_command_builds_path_locally():
    result = invoke("url", "drake", "top text", "why?")
    assert result.exit_code == 0
    assert result.stdout.strip() == "https://api.memegen.link/images/drake/top_text/why~q.jpg"


def test_decode_command():
    result = invoke("--json", "decode", "hello_world~q")
    assert json.loads(result.stdout) == {"text": "hello world?"}


def test_doctor_json(api):
    result = invoke("--json", "doctor")
    assert result.exit_code == 0, result.output
    checks = {row["check"]: row["status"] for row in json.loads(result.stdout)}
    assert checks["API connectivity"] == "OK"
    assert checks["API key"] == "OPTIONAL"
    assert checks["Template cache"] == "EMPTY"


def test_doctor_set_api_key():
    result = invoke("--no-input", "doctor", "set-api-key", "--key", "abc123")
    assert result.exit_code == 0, result.output
    assert "MEMELINK_API_KEY=abc123" in get_user_env_file().read_text(encoding="utf-8")


def test_error_message_with_brackets_is_printed_verbatim():
    result = invoke("url", "drake", "a", "--format", "[/x]")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "[/x]" in result.output


def test_config_list_shows_values_with_brackets():
    assert invoke("config", "set", "default_font", "[/oops]").exit_code == 0
    result = invoke("config", "list")
    assert result.exit_code == 0, result.output
    assert "[/oops]" in result.stdout


def test_config_list_marks_preview_as_reserved():
    result = invoke("config", "list")
    assert result.exit_code == 0, result.output
    preview_line = next(line for line in result.stdout.splitlines() if "preview" in line)
    assert "reserved" in preview_line


def test_templates_table_renders_bracketed_names(api):
    api.templates.append(make_template("odd", "[bold]Odd[/nope]"))
    result = invoke("templates", "--refresh")
    assert result.exit_code == 0, result.output
    assert "[bold]Odd[/nope]" in result.stdout
