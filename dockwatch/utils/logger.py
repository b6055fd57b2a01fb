"""Вспомогательные функции для настройки логирования."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, cast

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_log_level(level_name: str) -> int:
    """Преобразует строковый уровень логирования в числовой."""

    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return cast(int, level)


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = "dockwatch.log",
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    console: bool = True,
) -> None:
    """Создаёт конфигурацию логирования с ротацией файлов и выводом в консоль.

    Консольный обработчик пишет в stderr: stdout занят потоком событий CLI.
    """

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name
    log_level = resolve_log_level(level_name)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handlers: List[logging.Handler] = [file_handler]

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(stream_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Удобная обёртка над logging.getLogger."""

    return logging.getLogger(name)
