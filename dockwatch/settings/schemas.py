"""Схема конфигурации по умолчанию."""

from __future__ import annotations

from typing import Any, Dict

# DEFAULT_CONFIG служит шаблоном для начального config.json
DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",
    "logging": {
        "enabled": True,
        "level": "INFO",
        "max_file_size_mb": 10,
        "max_archived_files": 5,
    },
    "docker": {
        "base_url": "",
        "timeout_sec": 60,
        "all_containers": False,
    },
    "watcher": {
        "interval_sec": 1.0,
        "event_buffer": 16,
        "error_buffer": 16,
        "include_sizes": True,
        "label_filter": [],
    },
}
