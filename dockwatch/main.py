"""Точка входа CLI dockwatch."""

from __future__ import annotations

import logging
from pathlib import Path
from queue import Empty
from typing import Callable, List, Optional

import typer

from dockwatch import __version__
from dockwatch.connections.models import Connection
from dockwatch.docker_api import containers
from dockwatch.docker_api.client import DockerClientWrapper
from dockwatch.docker_api.exceptions import DockerAPIError
from dockwatch.settings.exceptions import SettingsError
from dockwatch.settings.observers import LoggingSettingsObserver
from dockwatch.settings.registry import SettingsRegistry
from dockwatch.utils import output
from dockwatch.utils.logger import configure_logging
from dockwatch.utils.paths import resolve_config_dir
from dockwatch.watch.comparator import ContainerComparator
from dockwatch.watch.events import Event
from dockwatch.watch.exceptions import WatchError
from dockwatch.watch.watcher import Watcher

LOGGER = logging.getLogger(__name__)

app = typer.Typer(
    name="dockwatch",
    help="Changefeed of Docker containers built by polling and diffing snapshots",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


# ------------------------------------------------------------------ bootstrap
def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую структуру (~/.dockwatch, logs)."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Не удалось инициализировать рабочую директорию: %s", exc)
        return False


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Получает singleton реестр настроек и загружает config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk()
    registry.register_observer(LoggingSettingsObserver())
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    """Настраивает логирование в соответствии с LoggingSettings."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level", "INFO"),
        max_bytes=logging_settings.get("max_file_size_mb", 10) * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files", 5),
    )


def bootstrap(base_dir: Optional[Path] = None) -> SettingsRegistry:
    """Готовит рабочую директорию, настройки и логирование."""

    base_dir = base_dir or resolve_config_dir()
    if not initialize_workdir(base_dir):
        raise typer.Exit(code=1)
    try:
        settings = initialize_settings(base_dir / "config.json")
    except SettingsError as exc:
        output.print_error(exc.message)
        raise typer.Exit(code=1) from exc
    setup_logging_from_settings(base_dir, settings)
    return settings


def apply_overrides(settings: SettingsRegistry, group: str, **overrides: object) -> None:
    """Переносит заданные опции CLI в настройки (None означает "не задано")."""

    for key, value in overrides.items():
        if value is None:
            continue
        try:
            settings.set_value(group, key, value)
        except SettingsError as exc:
            output.print_error(exc.message)
            raise typer.Exit(code=2) from exc


# ------------------------------------------------------------------- factories
def build_client(settings: SettingsRegistry) -> DockerClientWrapper:
    """Создаёт Docker client по группе настроек ``docker``."""

    connection = Connection(
        base_url=settings.get_value("docker", "base_url", default=""),
        timeout_sec=settings.get_value("docker", "timeout_sec"),
    )
    return DockerClientWrapper(connection)


def build_watcher(client: DockerClientWrapper, settings: SettingsRegistry) -> Watcher:
    """Собирает Watcher с источником снимков поверх Docker client."""

    include_sizes = settings.get_value("watcher", "include_sizes")
    lister = containers.DockerContainerLister(
        client,
        all_containers=settings.get_value("docker", "all_containers"),
        include_size=include_sizes,
    )
    return Watcher(
        lister,
        interval=float(settings.get_value("watcher", "interval_sec")),
        comparator=ContainerComparator(include_sizes=include_sizes),
        event_buffer=settings.get_value("watcher", "event_buffer"),
        error_buffer=settings.get_value("watcher", "error_buffer"),
        label_filter=settings.get_value("watcher", "label_filter"),
    )


def pump(
    watcher: Watcher,
    on_event: Callable[[Event], None],
    on_error: Callable[[WatchError], None],
    *,
    timeout: float = 0.1,
) -> int:
    """Разбирает обе очереди наблюдателя; возвращает число событий.

    Ждёт не дольше ``timeout`` первого события, затем забирает всё доступное.
    """

    handled = 0
    while True:
        try:
            on_error(watcher.errors.get_nowait())
        except Empty:
            break
    try:
        event = watcher.events.get(timeout=timeout)
    except Empty:
        return handled
    on_event(event)
    handled += 1
    while True:
        try:
            event = watcher.events.get_nowait()
        except Empty:
            return handled
        on_event(event)
        handled += 1


def _connect(settings: SettingsRegistry) -> DockerClientWrapper:
    try:
        return build_client(settings)
    except DockerAPIError as exc:
        output.print_error(exc.reason)
        raise typer.Exit(code=1) from exc


# -------------------------------------------------------------------- commands
def version_callback(value: bool) -> None:
    if value:
        output.console.print(f"dockwatch version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """dockwatch - live changefeed over Docker containers.

    Polls the container list on a fixed interval and prints CREATE, UPDATE
    and DELETE events between successive snapshots.
    """


@app.command()
def watch(
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Poll interval in seconds"
    ),
    label: Optional[List[str]] = typer.Option(
        None, "--label", "-l", help="Only watch containers carrying this label key (repeatable)"
    ),
    all_containers: Optional[bool] = typer.Option(
        None, "--all/--running", "-a", help="Include stopped containers"
    ),
    sizes: Optional[bool] = typer.Option(
        None, "--sizes/--no-sizes", help="Request and compare container sizes"
    ),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Docker daemon address"),
    json_output: bool = typer.Option(False, "--json", help="Print one JSON object per event"),
    ticks: int = typer.Option(0, "--ticks", "-n", min=0, help="Stop after N polls (0 = forever)"),
) -> None:
    """Watch containers and print change events until interrupted."""

    settings = bootstrap()
    apply_overrides(settings, "docker", base_url=host, all_containers=all_containers)
    apply_overrides(
        settings,
        "watcher",
        interval_sec=interval,
        include_sizes=sizes,
        label_filter=list(label) if label else None,
    )

    client = _connect(settings)
    watcher = build_watcher(client, settings)
    comparator = ContainerComparator(include_sizes=settings.get_value("watcher", "include_sizes"))

    def on_event(event: Event) -> None:
        if json_output:
            output.print_event_json(event)
        else:
            output.print_event(event, comparator)

    def on_error(error: WatchError) -> None:
        output.print_error(error.message)

    output.print_info(f"Watching {client.connection.display_url} every {watcher.interval}s")
    watcher.start()
    try:
        while ticks == 0 or watcher.ticks_completed < ticks:
            pump(watcher, on_event, on_error)
    except KeyboardInterrupt:
        output.print_info("Interrupted")
    finally:
        watcher.stop(timeout=client.connection.timeout_sec)
        pump(watcher, on_event, on_error, timeout=0)
        client.close()


@app.command()
def snapshot(
    all_containers: Optional[bool] = typer.Option(
        None, "--all/--running", "-a", help="Include stopped containers"
    ),
    sizes: bool = typer.Option(False, "--sizes", "-s", help="Request container sizes"),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Docker daemon address"),
) -> None:
    """Print the current container list once."""

    settings = bootstrap()
    apply_overrides(settings, "docker", base_url=host, all_containers=all_containers)
    client = _connect(settings)
    try:
        records = containers.list_containers(
            client,
            all_containers=settings.get_value("docker", "all_containers"),
            include_size=sizes,
        )
    except DockerAPIError as exc:
        output.print_error(exc.reason)
        raise typer.Exit(code=1) from exc
    finally:
        client.close()
    output.console.print(output.snapshot_table(records, show_sizes=sizes))


@app.command()
def ping(
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Docker daemon address"),
) -> None:
    """Check that the Docker daemon is reachable."""

    settings = bootstrap()
    apply_overrides(settings, "docker", base_url=host)
    client = _connect(settings)
    try:
        if not client.ping():
            output.print_error(f"Docker at {client.connection.display_url} is not reachable")
            raise typer.Exit(code=1)
        version = client.version()
    except DockerAPIError as exc:
        output.print_error(exc.reason)
        raise typer.Exit(code=1) from exc
    finally:
        client.close()
    output.print_success(f"Docker {version} at {client.connection.display_url}")


if __name__ == "__main__":
    app()
