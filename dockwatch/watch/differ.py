"""Сверка двух снимков контейнеров по id."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from dockwatch.docker_api.models import ContainerRecord
from dockwatch.watch.comparator import ContainerComparator
from dockwatch.watch.events import Event, EventType
from dockwatch.watch.exceptions import DuplicateIdentifierError

LOGGER = logging.getLogger(__name__)

Snapshot = Sequence[ContainerRecord]

_DEFAULT_COMPARATOR = ContainerComparator()


def index_by_id(snapshot: Snapshot, *, name: str = "snapshot") -> Dict[str, ContainerRecord]:
    """Строит индекс id -> запись, отказываясь принимать повторяющиеся id."""

    index: Dict[str, ContainerRecord] = {}
    for record in snapshot:
        if record.id in index:
            raise DuplicateIdentifierError(record.id, snapshot=name)
        index[record.id] = record
    return index


def diff(
    previous: Snapshot,
    next: Snapshot,  # noqa: A002 - имя из контракта diff(previous, next)
    comparator: Optional[ContainerComparator] = None,
) -> List[Event]:
    """Возвращает упорядоченный список событий между двумя снимками.

    Сначала идут CREATE и UPDATE в порядке ``next``, затем DELETE в порядке
    ``previous``. Повтор id в любом снимке прерывает сверку исключением
    ``DuplicateIdentifierError``.
    """

    if not previous and not next:
        return []

    comparator = comparator or _DEFAULT_COMPARATOR
    previous_index = index_by_id(previous, name="previous snapshot")
    next_index = index_by_id(next, name="next snapshot")

    events: List[Event] = []
    for record in next:
        original = previous_index.get(record.id)
        if original is None:
            events.append(Event(EventType.CREATE, record))
        elif not comparator.equal(record, original):
            events.append(Event(EventType.UPDATE, record, original=original))

    for record in previous:
        if record.id not in next_index:
            events.append(Event(EventType.DELETE, record))

    LOGGER.debug(
        "Diff of %d -> %d containers produced %d events",
        len(previous),
        len(next),
        len(events),
    )
    return events
