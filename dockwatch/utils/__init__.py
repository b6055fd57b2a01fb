"""Вспомогательные утилиты: логирование, пути, нормализация адресов."""
