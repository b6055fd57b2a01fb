"""Форматирование вывода CLI с помощью Rich."""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.pretty import Pretty
from rich.table import Table

from dockwatch.docker_api.models import ContainerRecord, PortMapping
from dockwatch.utils.helpers import format_bytes
from dockwatch.watch.comparator import ContainerComparator
from dockwatch.watch.events import Event, EventType

console = Console()
err_console = Console(stderr=True)

EVENT_STYLES = {
    EventType.CREATE: "bold green",
    EventType.UPDATE: "bold yellow",
    EventType.DELETE: "bold red",
}


def print_error(msg: str) -> None:
    """Печатает сообщение об ошибке в stderr."""

    err_console.print(f"[bold red]Error:[/bold red] {escape(msg)}", soft_wrap=True)


def print_success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(msg)}")


def print_info(msg: str) -> None:
    err_console.print(f"[cyan]{escape(msg)}[/cyan]", soft_wrap=True)


def format_ports(ports: Iterable[PortMapping]) -> str:
    """Строка вида ``0.0.0.0:8080->80/tcp, 443/tcp``."""

    parts: List[str] = []
    for port in ports:
        target = f"{port.private_port}/{port.type}"
        if port.public_port:
            host = f"{port.ip}:" if port.ip else ""
            parts.append(f"{host}{port.public_port}->{target}")
        else:
            parts.append(target)
    return ", ".join(parts)


def event_headline(event: Event) -> str:
    """Заголовок события: тип, имена и id контейнера (с разметкой Rich)."""

    style = EVENT_STYLES[event.type]
    names = escape(", ".join(event.container.names) or "-")
    return f"[{style}]{event.type.value}[/{style}]: {names} ({event.container.id})"


def print_event(event: Event, comparator: Optional[ContainerComparator] = None) -> None:
    """Печатает событие: для UPDATE изменённые поля, иначе полную запись."""

    console.print(event_headline(event))
    if event.type is EventType.UPDATE and event.original is not None:
        before = event.original.to_dict()
        after = event.container.to_dict()
        grid = Table.grid(padding=(0, 1))
        for name in event.changed_fields(comparator):
            grid.add_row(f"  [bold]{name}[/bold]", "[red]-[/red]", Pretty(before[name]))
            grid.add_row("", "[green]+[/green]", Pretty(after[name]))
        console.print(grid)
        return
    console.print(Pretty(event.container.to_dict()))


def print_event_json(event: Event) -> None:
    """Одна строка JSON на событие."""

    console.out(json.dumps(event.to_dict(), ensure_ascii=False, default=str), highlight=False)


def snapshot_table(records: Iterable[ContainerRecord], *, show_sizes: bool = False) -> Table:
    """Таблица текущего снимка контейнеров."""

    table = Table(title="Containers")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Image")
    table.add_column("State")
    table.add_column("Status")
    table.add_column("Ports")
    if show_sizes:
        table.add_column("Size", justify="right")

    for record in records:
        row: List[Any] = [
            record.short_id,
            record.display_name,
            record.image,
            record.state,
            record.status,
            format_ports(record.ports),
        ]
        if show_sizes:
            row.append(f"{format_bytes(record.size_rw)} (virtual {format_bytes(record.size_root_fs)})")
        table.add_row(*row)
    return table
