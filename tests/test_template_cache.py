from __future__ import annotations

from datetime import datetime, timedelta, timezone

from conftest import FakeMemeAPI, make_template

from adapters.template_cache import load_templates, save_templates
from core.services import catalog

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_missing_cache_is_a_miss(tmp_path):
    assert load_templates(tmp_path / "templates.json", 3600) is None


def test_fresh_cache_round_trip(tmp_path):
    path = tmp_path / "nested" / "templates.json"
    save_templates(path, [make_template("drake")], now=NOW)
    cached = load_templates(path, 3600, now=NOW + timedelta(minutes=30))
    assert cached is not None
    assert [t.id for t in cached] == ["drake"]


def test_expired_cache_is_a_miss(tmp_path):
    path = tmp_path / "templates.json"
    save_templates(path, [make_template("drake")], now=NOW)
    assert load_templates(path, 3600, now=NOW + timedelta(hours=2)) is None


def test_corrupt_cache_is_a_miss(tmp_path):
    path = tmp_path / "templates.json"
    path.write_text("[[[", encoding="utf-8")
    assert load_templates(path, 3600) is None


def test_catalog_fills_then_reuses_cache(tmp_path):
    path = tmp_path / "templates.json"
    api = FakeMemeAPI(templates=[make_template("drake"), make_template("fry")])

    first = catalog.load_templates(api, cache_path=path, ttl_seconds=3600)
    api.templates = []
    second = catalog.load_templates(api, cache_path=path, ttl_seconds=3600)

    assert [t.id for t in first] == [t.id for t in second] == ["drake", "fry"]
    assert api.calls == [("list_templates", "")]


def test_catalog_refresh_and_filter_bypass_cache(tmp_path):
    path = tmp_path / "templates.json"
    save_templates(path, [make_template("stale")])
    api = FakeMemeAPI(templates=[make_template("drake"), make_template("fry")])

    refreshed = catalog.load_templates(api, refresh=True, cache_path=path, ttl_seconds=3600)
    filtered = catalog.load_templates(api, filter_text="fry", cache_path=path, ttl_seconds=3600)

    assert [t.id for t in refreshed] == ["drake", "fry"]
    assert [t.id for t in filtered] == ["fry"]
    assert [t.id for t in load_templates(path, 3600)] == ["drake", "fry"]


def test_only_animated():
    templates = [make_template("drake"), make_template("fry", styles=["animated"])]
    assert [t.id for t in catalog.only_animated(templates)] == ["fry"]
