"""Слой доступа к Docker Engine через docker-py."""
