"""Обёртка над docker-py с безопасной инициализацией."""

from __future__ import annotations

import logging
from typing import Any

import docker
from docker.errors import DockerException
from requests.exceptions import RequestException

from dockwatch.connections.models import Connection
from dockwatch.docker_api.exceptions import DockerAPIError

LOGGER = logging.getLogger(__name__)

# Ошибки транспорта docker-py пробрасывает как исключения requests
CLIENT_ERRORS = (DockerException, RequestException)


class DockerClientWrapper:
    """Управляет созданием и использованием docker API client."""

    def __init__(self, connection: Connection, raw_client: Any | None = None) -> None:
        self.connection = connection  # Сохраняем описание соединения
        self._client = raw_client or self._create_client()  # Создаём docker client

    def _create_client(self) -> Any:
        try:
            if self.connection.uses_environment:
                return docker.from_env(timeout=self.connection.timeout_sec)
            return docker.DockerClient(
                base_url=self.connection.base_url,
                timeout=self.connection.timeout_sec,
            )
        except CLIENT_ERRORS as exc:
            LOGGER.error(
                "Docker client init error for connection %s via %s: %s",
                self.connection.name,
                self.connection.display_url,
                exc,
            )
            raise DockerAPIError(str(exc), base_url=self.connection.display_url) from exc

    def get_raw_client(self) -> Any:
        """Возвращает внутренний docker client."""

        return self._client

    def ping(self) -> bool:
        """Проверяет доступность Docker."""

        try:
            self._client.ping()
            return True
        except CLIENT_ERRORS as exc:
            LOGGER.error("Docker ping failed: %s", exc)
            return False

    def version(self) -> str:
        """Версия Docker Engine, либо DockerAPIError."""

        try:
            version_info = self._client.version()
        except CLIENT_ERRORS as exc:
            raise DockerAPIError(str(exc), base_url=self.connection.display_url) from exc
        return str(version_info.get("Version", "unknown"))

    def close(self) -> None:
        """Закрывает HTTP-сессию клиента."""

        self._client.close()
