"""Параметры подключения к Docker Engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dockwatch.utils.helpers import normalize_socket_path

DEFAULT_SOCKET = "unix:///var/run/docker.sock"
DEFAULT_TIMEOUT_SEC = 60


@dataclass(slots=True)
class Connection:
    """Описание одного подключения к Docker."""

    base_url: str = ""  # пусто: взять из окружения (DOCKER_HOST)
    timeout_sec: int = DEFAULT_TIMEOUT_SEC
    name: str = "default"

    def __post_init__(self) -> None:
        self.base_url = normalize_socket_path(self.base_url)

    @property
    def uses_environment(self) -> bool:
        return not self.base_url

    @property
    def display_url(self) -> str:
        """Адрес для сообщений и логов."""

        if self.base_url:
            return self.base_url
        return os.environ.get("DOCKER_HOST") or DEFAULT_SOCKET

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, *, timeout_sec: int = DEFAULT_TIMEOUT_SEC
    ) -> "Connection":
        """Создаёт подключение по DOCKER_HOST либо к локальному сокету."""

        source = os.environ if env is None else env
        return cls(
            base_url=source.get("DOCKER_HOST") or DEFAULT_SOCKET,
            timeout_sec=timeout_sec,
            name="env",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "base_url": self.base_url,
            "timeout_sec": self.timeout_sec,
        }
