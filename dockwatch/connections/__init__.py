"""Описание подключений к Docker."""
