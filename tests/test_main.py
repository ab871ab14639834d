from __future__ import annotations

from askservice import main as main_module
from askservice.core import settings as settings_module
from askservice.core.settings import CONFIG_PATH_ENV


def _capture_run(monkeypatch):
    runs: list[dict] = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: runs.append(kwargs))
    monkeypatch.setattr(settings_module, "load_env", lambda: [])
    return runs


def test_config_error_exits_with_status_2(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.toml"
    path.write_text("[gigachat]\ntimeout_seconds = -5\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    runs = _capture_run(monkeypatch)

    assert main_module.main([]) == 2
    assert runs == []
    assert "configuration error" in capsys.readouterr().err


def test_server_address_from_config(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[server]\nhost = "0.0.0.0"\nport = 9001\n', encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    runs = _capture_run(monkeypatch)

    assert main_module.main([]) == 0
    assert runs[0]["host"] == "0.0.0.0"
    assert runs[0]["port"] == 9001


def test_explicit_port_zero_is_honoured(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text("[server]\nport = 9001\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(path))
    runs = _capture_run(monkeypatch)

    assert main_module.main(["--port", "0"]) == 0
    assert runs[0]["port"] == 0
