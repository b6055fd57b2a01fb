"""Запуск через ``python -m dockwatch``."""

from dockwatch.main import app

app(prog_name="dockwatch")
