"""Фоновый цикл опроса: хранит базовый снимок и публикует события."""

from __future__ import annotations

import logging
import math
import threading
import time
from enum import Enum
from queue import Full, Queue
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from dockwatch.docker_api.models import ContainerRecord
from dockwatch.watch.comparator import ContainerComparator
from dockwatch.watch.differ import diff
from dockwatch.watch.events import Event
from dockwatch.watch.exceptions import FetchError, InvariantViolation, WatchError

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 1.0
DEFAULT_BUFFER_SIZE = 16
PUBLISH_POLL_SEC = 0.1


class ContainerLister(Protocol):
    """Источник снимков: возвращает текущий список контейнеров."""

    def list_containers(self) -> Sequence[ContainerRecord]:  # pragma: no cover - протокол
        """Возвращает снимок или поднимает FetchError."""


class WatcherState(str, Enum):
    """Состояние цикла опроса."""

    IDLE = "idle"
    RECONCILING = "reconciling"


class Watcher:
    """Периодически сверяет список контейнеров с последним удачным снимком.

    События публикуются в ``events``, ошибки тиков в ``errors``. Обе очереди
    ограничены: если потребитель отстаёт, цикл блокируется на публикации до
    тех пор, пока не появится место или не будет вызван ``stop()``.
    Просроченные тики (сверка дольше интервала) пропускаются, одновременно
    выполняется не более одной сверки.
    """

    def __init__(
        self,
        lister: ContainerLister,
        *,
        interval: float = DEFAULT_INTERVAL_SEC,
        comparator: Optional[ContainerComparator] = None,
        event_buffer: int = DEFAULT_BUFFER_SIZE,
        error_buffer: int = DEFAULT_BUFFER_SIZE,
        label_filter: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        if event_buffer < 1 or error_buffer < 1:
            raise ValueError("Queue buffers must hold at least one item")

        self.events: "Queue[Event]" = Queue(maxsize=event_buffer)
        self.errors: "Queue[WatchError]" = Queue(maxsize=error_buffer)
        self.interval = interval
        self.label_filter: Tuple[str, ...] = tuple(label_filter)

        self._lister = lister
        self._comparator = comparator or ContainerComparator()
        self._clock = clock
        self._baseline: Tuple[ContainerRecord, ...] = ()
        self._state = WatcherState.IDLE
        self._ticks = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # --------------------------------------------------------------- properties
    @property
    def baseline(self) -> Tuple[ContainerRecord, ...]:
        """Последний снимок, с которым прошла успешная сверка."""

        return self._baseline

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def ticks_completed(self) -> int:
        """Число завершённых тиков, включая неудачные."""

        return self._ticks

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ---------------------------------------------------------------- lifecycle
    def start(self) -> None:
        """Запускает цикл опроса в фоновом потоке."""

        if self._thread is not None:
            raise RuntimeError("Watcher already started")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="dockwatch-watcher", daemon=True)
        self._thread.start()
        LOGGER.info(
            "Watcher started (interval=%ss, labels=%s)",
            self.interval,
            list(self.label_filter) or "*",
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Останавливает цикл на границе тика.

        Текущий запрос к lister не прерывается, ожидание места в очереди
        прерывается.
        """

        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                LOGGER.warning("Watcher thread did not stop within %ss", timeout)
                return
            self._thread = None
        LOGGER.info("Watcher stopped")

    # --------------------------------------------------------------------- tick
    def tick(self) -> List[Event]:
        """Одна сверка: получить снимок, сравнить, опубликовать, сохранить.

        При ошибке базовый снимок не меняется, событий нет, а в ``errors``
        попадает ровно одна ошибка. Если во время публикации запрошена
        остановка, оставшиеся события отбрасываются и базовый снимок тоже
        не меняется.
        """

        self._state = WatcherState.RECONCILING
        try:
            try:
                snapshot = self._fetch_snapshot()
                events = diff(self._baseline, snapshot, self._comparator)
            except (FetchError, InvariantViolation) as exc:
                LOGGER.debug("Tick aborted, baseline kept: %s", exc)
                self._publish(self.errors, exc)
                return []

            published: List[Event] = []
            for event in events:
                if not self._publish(self.events, event):
                    LOGGER.info(
                        "Stop requested, dropped %d unpublished events",
                        len(events) - len(published),
                    )
                    return published
                published.append(event)
            self._baseline = snapshot
            LOGGER.debug("Tick published %d events for %d containers", len(events), len(snapshot))
            return events
        finally:
            self._ticks += 1
            self._state = WatcherState.IDLE

    # ------------------------------------------------------------------ helpers
    def _publish(self, queue: "Queue", item: object) -> bool:
        """Кладёт элемент в очередь, ожидая место; False, если запрошена остановка."""

        while not self._stop_event.is_set():
            try:
                queue.put(item, timeout=PUBLISH_POLL_SEC)
                return True
            except Full:
                continue
        return False

    def _fetch_snapshot(self) -> Tuple[ContainerRecord, ...]:
        try:
            snapshot = tuple(self._lister.list_containers())
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(str(exc), source=type(self._lister).__name__) from exc
        if self.label_filter:
            snapshot = tuple(record for record in snapshot if self._matches_labels(record))
        return snapshot

    def _matches_labels(self, record: ContainerRecord) -> bool:
        return any(key in record.labels for key in self.label_filter)

    def _run(self) -> None:
        deadline = self._clock()
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as exc:
                LOGGER.debug("Unexpected tick failure", exc_info=True)
                self._publish(
                    self.errors,
                    WatchError(f"Tick failed: {exc}", context={"error": type(exc).__name__}),
                )
            deadline = next_deadline(deadline, self._clock(), self.interval)
            if self._stop_event.wait(max(0.0, deadline - self._clock())):
                break


def next_deadline(previous: float, now: float, interval: float) -> float:
    """Ближайшая точка сетки ``previous + k * interval``, не раньше ``now``.

    Точки, пропущенные из-за долгой сверки, отбрасываются.
    """

    candidate = previous + interval
    if candidate >= now:
        return candidate
    skipped = math.floor((now - previous) / interval)
    LOGGER.debug("Reconciliation overran %d tick(s), skipping", skipped)
    return previous + (skipped + 1) * interval
