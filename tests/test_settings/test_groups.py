"""Тесты групп настроек."""

from __future__ import annotations

import pytest

from dockwatch.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from dockwatch.settings.groups import DockerSettings, LoggingSettings, WatcherSettings


def test_watcher_group_defaults() -> None:
    group = WatcherSettings()
    assert group.to_dict() == {
        "interval_sec": 1.0,
        "event_buffer": 16,
        "error_buffer": 16,
        "include_sizes": True,
        "label_filter": [],
    }


def test_reset_does_not_share_list_defaults() -> None:
    first = WatcherSettings()
    first.get("label_filter").append("mutated")
    assert WatcherSettings().get("label_filter") == []
    first.reset_to_defaults()
    assert first.get("label_filter") == []


@pytest.mark.parametrize(
    "value",
    ["", "unix:///var/run/docker.sock", "tcp://10.0.0.1:2376", "ssh://user@host", "/run/docker.sock"],
)
def test_docker_base_url_accepts(value: str) -> None:
    group = DockerSettings()
    group.set("base_url", value)
    assert group.get("base_url") == value


def test_unknown_key_raises() -> None:
    with pytest.raises(SettingsNotFoundError):
        LoggingSettings().set("colour", True)


def test_from_dict_validates() -> None:
    with pytest.raises(SettingsValidationError):
        WatcherSettings().from_dict({"include_sizes": "yes"})


def test_from_dict_ignores_unknown_keys() -> None:
    group = DockerSettings()
    group.from_dict({"timeout_sec": 10, "legacy": 1})
    assert group.get("timeout_sec") == 10
