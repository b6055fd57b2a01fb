"""Централизованное описание путей приложения."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_config_dir() -> Path:
    """Базовая директория настроек и логов; DOCKWATCH_HOME заменяет домашнюю."""

    home_dir = Path(os.environ.get("DOCKWATCH_HOME") or Path.home())
    return home_dir / ".dockwatch"


# CONFIG_DIR — базовая директория, где сохраняются настройки и логи
CONFIG_DIR = resolve_config_dir()
