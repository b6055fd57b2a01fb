"""Ядро: сравнение записей, diff снимков и цикл опроса."""

from dockwatch.watch.comparator import ContainerComparator, FieldPolicy, equal
from dockwatch.watch.differ import diff
from dockwatch.watch.events import Event, EventType
from dockwatch.watch.exceptions import (
    DuplicateIdentifierError,
    FetchError,
    IdentityMismatchError,
    InvariantViolation,
    WatchError,
)
from dockwatch.watch.watcher import ContainerLister, Watcher, WatcherState

__all__ = [
    "ContainerComparator",
    "ContainerLister",
    "DuplicateIdentifierError",
    "Event",
    "EventType",
    "FetchError",
    "FieldPolicy",
    "IdentityMismatchError",
    "InvariantViolation",
    "WatchError",
    "Watcher",
    "WatcherState",
    "diff",
    "equal",
]
