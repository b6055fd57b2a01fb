"""Общие фикстуры тестов dockwatch."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Callable, Dict

import pytest

from dockwatch.docker_api.models import ContainerRecord, MountPoint, PortMapping
from dockwatch.settings.registry import SettingsRegistry

RecordFactory = Callable[..., ContainerRecord]


def _base_fields(identifier: str) -> Dict[str, Any]:
    return {
        "id": identifier,
        "names": (f"/{identifier}-web",),
        "image": "nginx:1.25",
        "image_id": "sha256:feed",
        "command": "nginx -g 'daemon off;'",
        "state": "running",
        "status": "Up 5 minutes",
        "created": 1_700_000_000,
        "ports": (
            PortMapping(private_port=80, public_port=8080, type="tcp", ip="0.0.0.0"),
            PortMapping(private_port=443, type="tcp"),
            PortMapping(private_port=53, public_port=5353, type="udp", ip="0.0.0.0"),
        ),
        "mounts": (
            MountPoint(destination="/var/log/nginx", source="/srv/logs", mode="rw"),
            MountPoint(destination="/etc/nginx", source="/srv/conf", mode="ro", rw=False),
        ),
        "labels": {"com.docker.compose.project": "demo", "tier": "frontend"},
        "host_config": {"NetworkMode": "bridge"},
        "network_settings": {"Networks": {"bridge": {"IPAddress": "172.17.0.2"}}},
    }


@pytest.fixture
def make_record() -> RecordFactory:
    """Фабрика ContainerRecord с правдоподобными значениями по умолчанию."""

    def factory(identifier: str = "a", **overrides: Any) -> ContainerRecord:
        fields = _base_fields(identifier)
        fields.update(overrides)
        return ContainerRecord(**fields)

    return factory


@pytest.fixture
def registry(tmp_path):
    SettingsRegistry.reset_instance()
    reg = SettingsRegistry(tmp_path / "config.json")
    reg.reset_to_defaults()
    yield reg
    SettingsRegistry.reset_instance()


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Убирает обработчики, установленные configure_logging во время теста."""

    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RotatingFileHandler) or type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
            handler.close()
