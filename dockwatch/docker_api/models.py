"""Структуры данных, описывающие контейнер в одном снимке Docker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class PortMapping:
    """Проброс порта контейнера."""

    private_port: int
    public_port: int = 0
    type: str = "tcp"
    ip: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PortMapping":
        return cls(
            private_port=int(data.get("PrivatePort") or 0),
            public_port=int(data.get("PublicPort") or 0),
            type=data.get("Type") or "tcp",
            ip=data.get("IP") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "private_port": self.private_port,
            "public_port": self.public_port,
            "type": self.type,
            "ip": self.ip,
        }


@dataclass(frozen=True, slots=True)
class MountPoint:
    """Точка монтирования; внутри контейнера однозначно задаётся destination."""

    destination: str
    source: str = ""
    mode: str = ""
    type: str = ""
    name: str = ""
    driver: str = ""
    rw: bool = True
    propagation: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "MountPoint":
        return cls(
            destination=data.get("Destination") or "",
            source=data.get("Source") or "",
            mode=data.get("Mode") or "",
            type=data.get("Type") or "",
            name=data.get("Name") or "",
            driver=data.get("Driver") or "",
            rw=bool(data.get("RW", True)),
            propagation=data.get("Propagation") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": self.destination,
            "source": self.source,
            "mode": self.mode,
            "type": self.type,
            "name": self.name,
            "driver": self.driver,
            "rw": self.rw,
            "propagation": self.propagation,
        }


@dataclass(frozen=True, slots=True)
class ContainerRecord:
    """Наблюдаемые метаданные одного контейнера в момент опроса.

    Единственный ключ сопоставления между снимками — ``id``. Остальные поля
    участвуют только в сравнении содержимого (см. ``watch.comparator``).
    """

    id: str
    names: Tuple[str, ...] = ()
    image: str = ""
    image_id: str = ""
    command: str = ""
    state: str = ""
    status: str = ""
    size_rw: int = 0
    size_root_fs: int = 0
    created: int = 0
    ports: Tuple[PortMapping, ...] = ()
    mounts: Tuple[MountPoint, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)
    host_config: Mapping[str, Any] = field(default_factory=dict)
    network_settings: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ContainerRecord":
        """Строит запись из ответа ``GET /containers/json``."""

        identifier = data.get("Id")
        if not identifier:
            raise ValueError("Container payload without 'Id'")
        return cls(
            id=identifier,
            names=tuple(data.get("Names") or ()),
            image=data.get("Image") or "",
            image_id=data.get("ImageID") or "",
            command=data.get("Command") or "",
            state=data.get("State") or "",
            status=data.get("Status") or "",
            size_rw=int(data.get("SizeRw") or 0),
            size_root_fs=int(data.get("SizeRootFs") or 0),
            created=int(data.get("Created") or 0),
            ports=tuple(PortMapping.from_api(port) for port in data.get("Ports") or ()),
            mounts=tuple(MountPoint.from_api(mount) for mount in data.get("Mounts") or ()),
            labels=dict(data.get("Labels") or {}),
            host_config=dict(data.get("HostConfig") or {}),
            network_settings=dict(data.get("NetworkSettings") or {}),
        )

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def display_name(self) -> str:
        """Первое имя без ведущего слэша, либо короткий id."""

        if not self.names:
            return self.short_id
        return self.names[0].lstrip("/")

    def to_dict(self) -> Dict[str, Any]:
        """Сериализует запись в обычные структуры Python."""

        return {
            "id": self.id,
            "names": list(self.names),
            "image": self.image,
            "image_id": self.image_id,
            "command": self.command,
            "state": self.state,
            "status": self.status,
            "size_rw": self.size_rw,
            "size_root_fs": self.size_root_fs,
            "created": self.created,
            "ports": [port.to_dict() for port in self.ports],
            "mounts": [mount.to_dict() for mount in self.mounts],
            "labels": dict(self.labels),
            "host_config": dict(self.host_config),
            "network_settings": dict(self.network_settings),
        }
