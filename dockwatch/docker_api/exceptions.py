"""Исключения слоя docker_api."""

from __future__ import annotations

from typing import Optional

from dockwatch.watch.exceptions import FetchError


class DockerAPIError(FetchError):
    """Ошибка обращения к Docker Engine (сеть, API, авторизация)."""

    def __init__(self, reason: str, *, base_url: Optional[str] = None) -> None:
        self.base_url = base_url
        super().__init__(reason, source=base_url or "docker")
