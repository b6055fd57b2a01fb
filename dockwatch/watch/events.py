"""События изменения контейнеров."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from dockwatch.docker_api.models import ContainerRecord
from dockwatch.watch.comparator import ContainerComparator


class EventType(str, Enum):
    """Тип изменения контейнера между двумя снимками."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class Event:
    """Одно изменение: текущее представление и, для UPDATE, предыдущее."""

    type: EventType
    container: ContainerRecord
    original: Optional[ContainerRecord] = None

    def __post_init__(self) -> None:
        if (self.type is EventType.UPDATE) != (self.original is not None):
            raise ValueError("Only UPDATE events carry the original container")

    @property
    def container_id(self) -> str:
        return self.container.id

    def changed_fields(self, comparator: Optional[ContainerComparator] = None) -> List[str]:
        """Имена отличающихся полей; пусто для CREATE и DELETE.

        Событие не хранит компаратор, которым его получили. Без аргумента
        используется ``ContainerComparator()`` по умолчанию, который учитывает
        размеры; наблюдатель с ``include_sizes=False`` должен передать свой.
        """

        if self.original is None:
            return []
        comparator = comparator or ContainerComparator()
        return comparator.changed_fields(self.original, self.container)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "container": self.container.to_dict(),
            "original": self.original.to_dict() if self.original else None,
        }
