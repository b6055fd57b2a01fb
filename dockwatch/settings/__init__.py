"""Настройки dockwatch: группы, валидация и хранение в config.json."""
