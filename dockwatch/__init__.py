"""dockwatch — поток изменений контейнеров Docker на основе опроса."""

__version__ = "0.3.0"
