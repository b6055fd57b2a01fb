"""Различные вспомогательные функции."""

from __future__ import annotations

from typing import Any


_SOCKET_SCHEMES = ("unix://", "tcp://", "npipe://", "http://", "https://", "ssh://")


def normalize_socket_path(raw_value: str) -> str:
    """Возвращает адрес Docker с корректным префиксом unix:// для путей."""

    value = raw_value.strip()
    if not value:
        return value
    lowered = value.lower()
    if lowered.startswith(_SOCKET_SCHEMES):
        return value
    if value.startswith("/"):
        return f"unix://{value}"
    return value


def format_bytes(value: Any) -> str:
    """Переводит число байт в удобочитаемую строку."""

    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return "N/A"
    units = ["B", "KB", "MB", "GB", "TB"]
    index = 0
    while numeric >= 1024 and index < len(units) - 1:
        numeric /= 1024.0
        index += 1
    return f"{numeric:.1f} {units[index]}"
