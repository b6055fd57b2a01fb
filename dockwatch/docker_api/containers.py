"""Получение снимка контейнеров через Docker client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from dockwatch.docker_api.client import CLIENT_ERRORS, DockerClientWrapper
from dockwatch.docker_api.exceptions import DockerAPIError
from dockwatch.docker_api.models import ContainerRecord

LOGGER = logging.getLogger(__name__)


def list_raw_containers(
    client: DockerClientWrapper,
    *,
    all_containers: bool = False,
    include_size: bool = False,
) -> List[Dict[str, Any]]:
    """Возвращает ответ ``GET /containers/json`` без преобразований."""

    raw = client.get_raw_client()
    try:
        return list(raw.api.containers(all=all_containers, size=include_size))
    except CLIENT_ERRORS as exc:
        raise DockerAPIError(str(exc), base_url=client.connection.display_url) from exc


def list_containers(
    client: DockerClientWrapper,
    *,
    all_containers: bool = False,
    include_size: bool = False,
) -> Tuple[ContainerRecord, ...]:
    """Возвращает снимок контейнеров в виде ContainerRecord."""

    payload = list_raw_containers(
        client,
        all_containers=all_containers,
        include_size=include_size,
    )
    try:
        return tuple(ContainerRecord.from_api(entry) for entry in payload)
    except (TypeError, ValueError) as exc:
        LOGGER.error("Malformed container list payload: %s", exc)
        raise DockerAPIError(
            f"Malformed container list: {exc}", base_url=client.connection.display_url
        ) from exc


class DockerContainerLister:
    """Источник снимков для Watcher поверх docker-py."""

    def __init__(
        self,
        client: DockerClientWrapper,
        *,
        all_containers: bool = False,
        include_size: bool = False,
    ) -> None:
        self._client = client
        self.all_containers = all_containers
        self.include_size = include_size

    def list_containers(self) -> Tuple[ContainerRecord, ...]:
        return list_containers(
            self._client,
            all_containers=self.all_containers,
            include_size=self.include_size,
        )
