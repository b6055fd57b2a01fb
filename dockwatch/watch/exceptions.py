"""Исключения ядра наблюдения за контейнерами."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


class WatchError(Exception):
    """Базовое исключение наблюдателя с поддержкой контекста."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        """Сохраняет сообщение и контекст, логируя ошибку."""

        self.message = message
        self.context = context or {}
        super().__init__(message)
        LOGGER.error("%s | context=%s", message, self.context)


class FetchError(WatchError):
    """Не удалось получить список контейнеров; тик пропускается."""

    def __init__(self, reason: str, *, source: str = "lister") -> None:
        self.reason = reason
        self.source = source
        super().__init__(
            f"Failed to list containers from {source}: {reason}",
            context={"source": source, "reason": reason},
        )


class InvariantViolation(WatchError):
    """Входные данные нарушают инварианты модели; diff прерывается."""


class DuplicateIdentifierError(InvariantViolation):
    """Один и тот же id встретился в снимке дважды."""

    def __init__(self, container_id: str, *, snapshot: str = "snapshot") -> None:
        self.container_id = container_id
        super().__init__(
            f"Duplicate container id '{container_id}' in {snapshot}",
            context={"container_id": container_id, "snapshot": snapshot},
        )


class IdentityMismatchError(InvariantViolation):
    """Сравниваются записи разных контейнеров."""

    def __init__(self, left_id: str, right_id: str) -> None:
        self.left_id = left_id
        self.right_id = right_id
        super().__init__(
            f"Cannot compare containers with different ids: '{left_id}' != '{right_id}'",
            context={"left_id": left_id, "right_id": right_id},
        )
