import json
from pathlib import Path

import pytest

from jobbrowser.config import access
from jobbrowser.config.loader import camel_to_snake, convert_keys, load_config, save_config
from jobbrowser.config.schema import Config


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "absent.json")
    assert cfg.job_browser.url == ""
    assert cfg.job_browser.module_name == "JobBrowserBFF"
    assert cfg.job_browser.dialect == "2.0"
    assert cfg.job_browser.timeout_seconds == 30.0
    assert cfg.query.time_range_days == 7
    assert cfg.query.page_size == 20


def test_camel_case_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "jobBrowser": {"url": "https://kbase.test/bff", "timeoutSeconds": 5, "queryTimeoutMs": 15000},
                "query": {"timeRangeDays": 30, "pageSize": 50},
            }
        )
    )
    cfg = load_config(path)
    assert cfg.job_browser.url == "https://kbase.test/bff"
    assert cfg.job_browser.timeout_seconds == 5.0
    assert cfg.job_browser.query_timeout_ms == 15000
    assert cfg.query.time_range_days == 30
    assert cfg.query.page_size == 50


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", json.dumps({"jobBrowser": {"dialect": "3.0"}})])
def test_malformed_file_raises_value_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ValueError) as err:
        load_config(path)
    assert str(path) in str(err.value)


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    cfg = Config()
    cfg.job_browser.version = "beta"
    save_config(cfg, path)
    assert "jobBrowser" in json.loads(path.read_text())
    assert load_config(path).job_browser.version == "beta"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("JOBBROWSER_JOB_BROWSER__URL", "https://env.test/bff")
    monkeypatch.setenv("JOBBROWSER_QUERY__PAGE_SIZE", "100")
    cfg = Config()
    assert cfg.job_browser.url == "https://env.test/bff"
    assert cfg.query.page_size == 100


def test_key_conversion() -> None:
    assert camel_to_snake("queryTimeoutMs") == "query_timeout_ms"
    assert convert_keys({"serviceWizard": [{"timeoutSeconds": 1}]}) == {"service_wizard": [{"timeout_seconds": 1}]}


def test_get_config_uses_cache_and_force_reload(monkeypatch):
    calls = {"n": 0}

    def _fake_load_config(_path=None):
        calls["n"] += 1
        cfg = Config()
        cfg.query.page_size = 10 + calls["n"]
        return cfg

    monkeypatch.setattr(access, "load_config", _fake_load_config)
    access.clear_config_cache()

    first = access.get_config()
    second = access.get_config()
    third = access.get_config(force_reload=True)

    assert first.query.page_size == second.query.page_size
    assert third.query.page_size != second.query.page_size
    assert calls["n"] == 2
    access.clear_config_cache()


def test_get_config_is_keyed_by_path(tmp_path: Path) -> None:
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    first.write_text(json.dumps({"query": {"pageSize": 11}}))
    second.write_text(json.dumps({"query": {"pageSize": 22}}))
    access.clear_config_cache()
    try:
        assert access.get_config(first).query.page_size == 11
        assert access.get_config(second).query.page_size == 22
        first.write_text(json.dumps({"query": {"pageSize": 33}}))
        assert access.get_config(first).query.page_size == 11
        access.clear_config_cache(first)
        assert access.get_config(first).query.page_size == 33
    finally:
        access.clear_config_cache()


def test_resolve_config_prefers_explicit_config(monkeypatch) -> None:
    monkeypatch.setattr(access, "load_config", lambda _path=None: pytest.fail("must not load"))
    explicit = Config()
    assert access.resolve_config(explicit) is explicit
