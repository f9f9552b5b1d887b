"""Read-only status report: running instances and disk usage."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__, docker
from ..constants import APP_NAME, CONTAINER_PREFIX, LOCAL_DIR, STATUS_SEARCH_DEPTH
from ..logging import get_logger
from ..paths import SharedLayout, dir_size, find_project_data_dirs, format_size

console = Console(highlight=False, soft_wrap=True)
logger = get_logger(__name__)


def _print_containers() -> None:
    console.print("[bold]Running containers:[/bold]")
    containers = docker.list_containers(name_filter=CONTAINER_PREFIX)
    if not containers:
        console.print("   (none)")
        return

    table = Table(box=None, padding=(0, 3))
    table.add_column("NAME", style="cyan")
    table.add_column("STATUS")
    table.add_column("CREATED", style="dim")
    for container in containers:
        table.add_row(container.name, container.status, container.running_for)
    console.print(table)


def _shared_subdirs(shared: SharedLayout) -> list[Path]:
    try:
        return sorted(p for p in shared.root.iterdir() if p.is_dir())
    except OSError as e:
        # Missing or unreadable shared root
        logger.debug("Cannot list %s: %s", shared.root, e)
        return []


def _print_shared(shared: SharedLayout) -> None:
    console.print("[bold]Shared data:[/bold]")
    subdirs = _shared_subdirs(shared)
    if not subdirs:
        console.print("   (empty)")
        return
    for subdir in subdirs:
        console.print(f"   {escape(subdir.name):<25} {format_size(dir_size(subdir))}")


def _print_projects(home: Path) -> None:
    console.print(
        f"[bold]Projects with {LOCAL_DIR}/ "
        f"(searching ~, max depth {STATUS_SEARCH_DEPTH}):[/bold]"
    )
    data_dirs = find_project_data_dirs(home, STATUS_SEARCH_DEPTH)
    if not data_dirs:
        console.print("   (none found)")
        return
    for data_dir in data_dirs:
        console.print(f"   {escape(str(data_dir.parent)):<50} {format_size(dir_size(data_dir))}")


def show_status(shared: SharedLayout, home: Path) -> None:
    """Print running instances, shared data sizes and per-project data sizes."""
    console.print(f"{APP_NAME} v{__version__}")
    console.print()
    _print_containers()
    console.print()
    _print_shared(shared)
    console.print()
    _print_projects(home)
