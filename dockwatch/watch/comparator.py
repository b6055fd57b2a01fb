"""Сравнение двух наблюдений одного и того же контейнера.

Docker не гарантирует стабильный порядок элементов в ``Ports`` и ``Mounts``
между двумя запросами к неизменному контейнеру, поэтому для каждого
отслеживаемого поля явно задана политика сравнения:

* ``SCALAR``: простое равенство, проверяется первым;
* ``SET``: коллекция без значимого порядка, перед сравнением сортируется по
  ключу поля;
* ``ORDERED``: последовательность, порядок которой значим (``names``);
* ``STRUCTURAL``: полное структурное равенство (словари, вложенные данные).

Поля, не перечисленные в ``FIELD_POLICIES``, в сравнении не участвуют.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple

from dockwatch.docker_api.models import ContainerRecord, MountPoint, PortMapping
from dockwatch.watch.exceptions import IdentityMismatchError

SortKey = Callable[[Any], Any]


class FieldPolicy(str, Enum):
    """Способ сравнения отдельного поля."""

    SCALAR = "scalar"
    SET = "set"
    ORDERED = "ordered"
    STRUCTURAL = "structural"


@dataclass(frozen=True, slots=True)
class TrackedField:
    """Строка таблицы политик: имя поля, политика и ключ сортировки для SET."""

    name: str
    policy: FieldPolicy
    sort_key: Optional[SortKey] = None


def _port_key(port: PortMapping) -> Tuple[int, str, int, str]:
    # public_port/ip только разрешают ничьи (IPv4 и IPv6 привязки одного порта)
    return port.private_port, port.type, port.public_port, port.ip


def _mount_key(mount: MountPoint) -> str:
    return mount.destination


FIELD_POLICIES: Tuple[TrackedField, ...] = (
    TrackedField("id", FieldPolicy.SCALAR),
    TrackedField("image", FieldPolicy.SCALAR),
    TrackedField("image_id", FieldPolicy.SCALAR),
    TrackedField("command", FieldPolicy.SCALAR),
    TrackedField("state", FieldPolicy.SCALAR),
    TrackedField("status", FieldPolicy.SCALAR),
    TrackedField("size_rw", FieldPolicy.SCALAR),
    TrackedField("size_root_fs", FieldPolicy.SCALAR),
    TrackedField("ports", FieldPolicy.SET, sort_key=_port_key),
    TrackedField("mounts", FieldPolicy.SET, sort_key=_mount_key),
    TrackedField("names", FieldPolicy.ORDERED),
    TrackedField("created", FieldPolicy.STRUCTURAL),
    TrackedField("labels", FieldPolicy.STRUCTURAL),
    TrackedField("host_config", FieldPolicy.STRUCTURAL),
    TrackedField("network_settings", FieldPolicy.STRUCTURAL),
)

SIZE_FIELDS = frozenset({"size_rw", "size_root_fs"})


class ContainerComparator:
    """Решает, совпадают ли по содержимому две записи с одинаковым id."""

    def __init__(
        self,
        *,
        include_sizes: bool = True,
        policies: Iterable[TrackedField] = FIELD_POLICIES,
    ) -> None:
        self.include_sizes = include_sizes
        selected = [
            tracked
            for tracked in policies
            if include_sizes or tracked.name not in SIZE_FIELDS
        ]
        for tracked in selected:
            if tracked.policy is FieldPolicy.SET and tracked.sort_key is None:
                raise ValueError(f"Field '{tracked.name}' with SET policy needs a sort key")
        # стабильная сортировка: скаляры вперёд, остальные в порядке таблицы
        self._fields: Tuple[TrackedField, ...] = tuple(
            sorted(selected, key=lambda tracked: tracked.policy is not FieldPolicy.SCALAR)
        )

    @property
    def fields(self) -> Tuple[str, ...]:
        """Имена полей в порядке проверки."""

        return tuple(tracked.name for tracked in self._fields)

    def equal(self, left: ContainerRecord, right: ContainerRecord) -> bool:
        """Возвращает True, если записи семантически одинаковы.

        Первое же расхождение завершает проверку; дорогие коллекции не
        сортируются, если отличается какой-либо скаляр.
        """

        self._require_same_identity(left, right)
        return all(self._field_equal(tracked, left, right) for tracked in self._fields)

    def changed_fields(self, left: ContainerRecord, right: ContainerRecord) -> List[str]:
        """Список отличающихся полей с той же нормализацией, что и в ``equal``."""

        self._require_same_identity(left, right)
        return [
            tracked.name
            for tracked in self._fields
            if not self._field_equal(tracked, left, right)
        ]

    @staticmethod
    def _require_same_identity(left: ContainerRecord, right: ContainerRecord) -> None:
        if left.id != right.id:
            raise IdentityMismatchError(left.id, right.id)

    @staticmethod
    def _field_equal(tracked: TrackedField, left: ContainerRecord, right: ContainerRecord) -> bool:
        left_value = getattr(left, tracked.name)
        right_value = getattr(right, tracked.name)
        if tracked.policy is FieldPolicy.SET:
            return sorted(left_value, key=tracked.sort_key) == sorted(
                right_value, key=tracked.sort_key
            )
        if tracked.policy is FieldPolicy.ORDERED:
            return tuple(left_value) == tuple(right_value)
        return left_value == right_value


_DEFAULT_COMPARATOR = ContainerComparator()


def equal(left: ContainerRecord, right: ContainerRecord) -> bool:
    """Сравнение с политиками по умолчанию (размеры учитываются)."""

    return _DEFAULT_COMPARATOR.equal(left, right)
