"""Тесты CLI и вспомогательных функций модуля main."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pytest
from docker.errors import DockerException
from typer.testing import CliRunner

from dockwatch import __version__
from dockwatch import main as main_module
from dockwatch.connections.models import Connection
from dockwatch.docker_api.client import DockerClientWrapper
from dockwatch.docker_api.models import ContainerRecord
from dockwatch.main import app, initialize_workdir, pump, setup_logging_from_settings
from dockwatch.settings.groups import LoggingSettings
from dockwatch.settings.registry import SettingsRegistry
from dockwatch.watch.watcher import Watcher

runner = CliRunner()


class DummySettings:
    def __init__(self, enabled: bool = True, level: str = "INFO") -> None:
        self.logging = LoggingSettings()
        self.logging.set("enabled", enabled)
        self.logging.set("level", level)

    def get_group(self, name: str):  # type: ignore[override]
        if name == "logging":
            return self.logging
        raise KeyError(name)


class ScriptedAPI:
    """Низкоуровневый API docker-py: отдаёт заданные ответы по очереди."""

    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def containers(self, all: bool = False, size: bool = False) -> List[Dict[str, Any]]:
        self.calls.append({"all": all, "size": size})
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class FakeRawClient:
    def __init__(self, api: ScriptedAPI, *, online: bool = True) -> None:
        self.api = api
        self.online = online
        self.closed = False

    def ping(self) -> bool:
        if not self.online:
            raise DockerException("connection refused")
        return True

    def version(self) -> Dict[str, Any]:
        return {"Version": "25.0.3"}

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DOCKWATCH_HOME", str(tmp_path))
    SettingsRegistry.reset_instance()
    yield tmp_path
    SettingsRegistry.reset_instance()
    logging.disable(logging.NOTSET)


def _install_client(monkeypatch: pytest.MonkeyPatch, raw: FakeRawClient) -> DockerClientWrapper:
    wrapper = DockerClientWrapper(Connection(base_url="unix:///var/run/docker.sock"), raw_client=raw)
    monkeypatch.setattr(main_module, "build_client", lambda settings: wrapper)
    return wrapper


def _json_lines(text: str) -> List[Dict[str, Any]]:
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


def test_initialize_workdir_creates_structure(tmp_path: Path) -> None:
    assert initialize_workdir(tmp_path / ".dockwatch")
    assert (tmp_path / ".dockwatch" / "logs").exists()


def test_setup_logging_enabled_creates_log(tmp_path: Path) -> None:
    logging.disable(logging.NOTSET)
    setup_logging_from_settings(tmp_path, DummySettings(enabled=True, level="INFO"))
    logging.getLogger("test").info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()
    log_file = tmp_path / "logs" / "dockwatch.log"
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_setup_logging_disabled(tmp_path: Path) -> None:
    setup_logging_from_settings(tmp_path, DummySettings(enabled=False))
    assert logging.root.manager.disable >= logging.CRITICAL


def test_pump_delivers_errors_and_events() -> None:
    class OneShotLister:
        def __init__(self) -> None:
            self.calls = 0

        def list_containers(self):
            self.calls += 1
            if self.calls == 1:
                raise DockerException("boom")
            return [ContainerRecord(id="a"), ContainerRecord(id="b")]

    watcher = Watcher(OneShotLister())
    watcher.tick()
    watcher.tick()
    events: List[Any] = []
    errors: List[Any] = []
    assert pump(watcher, events.append, errors.append, timeout=0) == 2
    assert [event.container.id for event in events] == ["a", "b"]
    assert len(errors) == 1


def test_version_option() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_watch_prints_json_events(monkeypatch: pytest.MonkeyPatch) -> None:
    api = ScriptedAPI(
        [
            [{"Id": "aaa", "Names": ["/web"], "State": "running"}],
            [{"Id": "aaa", "Names": ["/web"], "State": "exited"}, {"Id": "bbb", "Names": ["/db"]}],
        ]
    )
    raw = FakeRawClient(api)
    _install_client(monkeypatch, raw)

    result = runner.invoke(app, ["watch", "--json", "--ticks", "2", "--interval", "0.1"])

    assert result.exit_code == 0, result.output
    events = _json_lines(result.output)
    assert [(event["type"], event["container"]["id"]) for event in events] == [
        ("CREATE", "aaa"),
        ("UPDATE", "aaa"),
        ("CREATE", "bbb"),
    ]
    assert events[1]["original"]["state"] == "running"
    assert raw.closed


def test_watch_text_output_shows_changed_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    api = ScriptedAPI(
        [
            [{"Id": "aaa", "Names": ["/web"], "State": "running"}],
            [{"Id": "aaa", "Names": ["/web"], "State": "exited"}],
        ]
    )
    _install_client(monkeypatch, FakeRawClient(api))

    result = runner.invoke(app, ["watch", "--ticks", "2", "--interval", "0.1"])

    assert result.exit_code == 0, result.output
    assert "CREATE" in result.output
    assert "UPDATE" in result.output
    assert "state" in result.output
    assert "exited" in result.output


def test_watch_reports_fetch_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    api = ScriptedAPI([DockerException("daemon went away"), []])
    _install_client(monkeypatch, FakeRawClient(api))

    result = runner.invoke(app, ["watch", "--ticks", "2", "--interval", "0.1"])

    assert result.exit_code == 0, result.output
    assert "daemon went away" in result.output


def test_watch_applies_label_filter_and_options(monkeypatch: pytest.MonkeyPatch) -> None:
    api = ScriptedAPI(
        [
            [
                {"Id": "aaa", "Names": ["/web"], "Labels": {"dockwatch.enable": "true"}},
                {"Id": "bbb", "Names": ["/db"], "Labels": {}},
            ]
        ]
    )
    _install_client(monkeypatch, FakeRawClient(api))

    result = runner.invoke(
        app,
        ["watch", "--json", "--ticks", "1", "-l", "dockwatch.enable", "--all", "--sizes"],
    )

    assert result.exit_code == 0, result.output
    assert [event["container"]["id"] for event in _json_lines(result.output)] == ["aaa"]
    assert api.calls[0] == {"all": True, "size": True}


def test_watch_rejects_invalid_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_client(monkeypatch, FakeRawClient(ScriptedAPI([[]])))
    result = runner.invoke(app, ["watch", "--interval", "0.01", "--ticks", "1"])
    assert result.exit_code == 2


def test_snapshot_prints_table(monkeypatch: pytest.MonkeyPatch) -> None:
    api = ScriptedAPI([[{"Id": "aaa", "Names": ["/web"], "Image": "nginx", "State": "running"}]])
    _install_client(monkeypatch, FakeRawClient(api))

    result = runner.invoke(app, ["snapshot"])

    assert result.exit_code == 0, result.output
    assert "web" in result.output
    assert "nginx" in result.output


def test_ping_online(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_client(monkeypatch, FakeRawClient(ScriptedAPI([[]])))
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "25.0.3" in result.output


def test_ping_offline(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_client(monkeypatch, FakeRawClient(ScriptedAPI([[]]), online=False))
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 1
