"""Тесты обёртки над docker-py."""

from __future__ import annotations

from typing import Any, Dict

import pytest
from docker.errors import DockerException

from dockwatch.connections.models import Connection
from dockwatch.docker_api import client as client_module
from dockwatch.docker_api.client import DockerClientWrapper
from dockwatch.docker_api.exceptions import DockerAPIError


class FakeDockerClient:
    def __init__(self, *, online: bool = True) -> None:
        self.online = online
        self.closed = False

    def ping(self) -> bool:
        if not self.online:
            raise DockerException("daemon unreachable")
        return True

    def version(self) -> Dict[str, Any]:
        if not self.online:
            raise DockerException("daemon unreachable")
        return {"Version": "25.0.3"}

    def close(self) -> None:
        self.closed = True


def test_ping_and_version() -> None:
    wrapper = DockerClientWrapper(Connection(), raw_client=FakeDockerClient())
    assert wrapper.ping()
    assert wrapper.version() == "25.0.3"


def test_ping_offline_returns_false() -> None:
    wrapper = DockerClientWrapper(Connection(), raw_client=FakeDockerClient(online=False))
    assert wrapper.ping() is False
    with pytest.raises(DockerAPIError):
        wrapper.version()


def test_create_client_with_base_url(monkeypatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_client(**kwargs: Any) -> FakeDockerClient:
        captured.update(kwargs)
        return FakeDockerClient()

    monkeypatch.setattr(client_module.docker, "DockerClient", fake_client)
    DockerClientWrapper(Connection(base_url="tcp://10.0.0.5:2375", timeout_sec=7))
    assert captured == {"base_url": "tcp://10.0.0.5:2375", "timeout": 7}


def test_create_client_from_environment(monkeypatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_from_env(**kwargs: Any) -> FakeDockerClient:
        captured.update(kwargs)
        return FakeDockerClient()

    monkeypatch.setattr(client_module.docker, "from_env", fake_from_env)
    DockerClientWrapper(Connection(timeout_sec=3))
    assert captured == {"timeout": 3}


def test_create_client_failure_raises(monkeypatch) -> None:
    def broken(**kwargs: Any) -> None:
        raise DockerException("Error while fetching server API version")

    monkeypatch.setattr(client_module.docker, "from_env", broken)
    with pytest.raises(DockerAPIError) as excinfo:
        DockerClientWrapper(Connection())
    assert "server API version" in excinfo.value.reason


def test_close_closes_raw_client() -> None:
    raw = FakeDockerClient()
    DockerClientWrapper(Connection(), raw_client=raw).close()
    assert raw.closed
