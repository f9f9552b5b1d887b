"""Run operations for confined-claude.

Handles the launch workflow: preflight, image, directories, credential sync,
.gitignore, mounts, stale-instance removal and the supervised container run.
"""

from __future__ import annotations

import signal
import subprocess
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .. import __version__, docker
from ..config import Command, get_host_claude_dir, get_host_gitconfig
from ..constants import LOCAL_DIR, PROJECT_LABEL
from ..errors import DockerNotFoundError
from ..generator import get_docker_run_cmd, get_user_ids
from ..gitignore import GitignoreResult, ensure_gitignore
from ..logging import get_logger
from ..paths import ProjectLayout, SharedLayout, get_project_layout, get_shared_layout
from ..sync import SyncResult, sync_credentials
from .build import ensure_image
from .utils import check_docker

if TYPE_CHECKING:
    from pathlib import Path

    from ..run_config import RunConfig

console = Console(highlight=False, soft_wrap=True)
logger = get_logger(__name__)

# Sent to the launcher (Ctrl+C, kill, closed terminal); relayed to `docker run`
FORWARDED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def report_sync(result: SyncResult, host_dir: Path) -> None:
    if not result.host_found:
        console.print(f"  [dim]Note: No host Claude config found at {escape(str(host_dir))}[/dim]")
        console.print("  [dim]You'll need to authenticate inside the container.[/dim]")
        return
    for filename, error in result.failed.items():
        console.print(f"  [yellow]Warning: could not copy {filename}: {escape(error)}[/yellow]")
    if result.synced:
        console.print(f"  Synced credentials from {escape(str(host_dir))}")


def report_gitignore(result: GitignoreResult) -> None:
    if result is GitignoreResult.APPENDED:
        console.print(f"  Added '{LOCAL_DIR}/' to .gitignore")
    elif result is GitignoreResult.CREATED:
        console.print(f"  Created .gitignore with '{LOCAL_DIR}/'")


def print_summary(project: ProjectLayout, shared: SharedLayout, command: Command) -> None:
    lines = [
        f"[bold]Confined Claude v{__version__}[/bold]",
        f"Project:    {escape(project.name)}",
        f"Directory:  {escape(str(project.project_dir))}",
        f"Running as: {get_user_ids()}",
        "",
        f"Per-project (in {LOCAL_DIR}/):",
        f"  venvs/       {escape(str(project.venvs))}",
        f"  local-bin/   {escape(str(project.local_bin))}",
        "",
        "Shared (across all containers):",
        f"  config       {escape(str(shared.claude_config))}",
        f"  pip-cache    {escape(str(shared.pip_cache))}",
        f"  npm-cache    {escape(str(shared.npm_cache))}",
        "",
        f"Starting container '{project.container_name}' ...",
        "Helpers:  mkvenv <name> | lsvenvs | diskuse",
    ]
    if command is Command.SHELL:
        lines.append("[cyan]Mode: shell (type 'claude' to start Claude Code)[/cyan]")
    elif command is Command.YOLO:
        lines.append(
            "[yellow]Mode: --dangerously-skip-permissions (you're in a container, YOLO)[/yellow]"
        )
    console.print()
    console.print(Panel.fit("\n".join(lines), border_style="blue"))
    console.print()


def remove_stale_container(project: ProjectLayout) -> None:
    """Force-remove any container already holding this project's instance name.

    Distinct project paths can share a slug; when the existing container was
    started from another directory, say so before replacing it.
    """
    name = project.container_name
    owner = docker.get_container_label(name, PROJECT_LABEL)
    if owner and owner != str(project.project_dir):
        console.print(
            f"[yellow]Warning: replacing container '{name}' "
            f"started from {escape(owner)}[/yellow]"
        )
    if docker.remove_container(name, force=True):
        logger.debug("Removed stale container %s", name)


def diagnose_container_failure(returncode: int) -> None:
    """Print a one-line hint for well-known container exit codes."""
    if returncode == 125:
        console.print("[red]Docker could not start the container[/red]")
    elif returncode == 137:
        console.print("[yellow]Container was killed (OOM or manual stop)[/yellow]")
    elif returncode == 139:
        console.print("[yellow]Container crashed (segmentation fault)[/yellow]")
    else:
        console.print(f"[dim]Container exited with code {returncode}[/dim]")


def execute_container(cmd: list[str]) -> int:
    """Run the container in the foreground and wait for it.

    SIGINT/SIGTERM/SIGHUP received by the launcher are relayed to
    `docker run`, which passes them on to the container. No timeout is
    applied.

    Returns:
        Exit status of `docker run` (the container's exit status). When the
        docker client itself is killed by signal N, 128+N as a shell reports it.
    """
    logger.debug("Launching: %s", " ".join(cmd))
    try:
        proc = subprocess.Popen(cmd)
    except FileNotFoundError as e:
        raise DockerNotFoundError("Docker is not installed or not in PATH.") from e

    def _forward(signum: int, _frame: object) -> None:
        logger.debug("Forwarding signal %d to docker run", signum)
        if proc.poll() is None:
            proc.send_signal(signum)

    previous = {sig: signal.signal(sig, _forward) for sig in FORWARDED_SIGNALS}
    try:
        returncode = proc.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 128 - returncode if returncode < 0 else returncode


def launch(config: RunConfig) -> int:
    """Prepare host state and run the container for a launching command.

    Returns:
        The container's exit status.
    """
    logger.info("Starting launch workflow: dir=%s, command=%s", config.project_dir, config.command)
    check_docker()
    ensure_image()

    project = get_project_layout(config.project_dir)
    shared = get_shared_layout()
    project.ensure()
    shared.ensure()

    host_dir = get_host_claude_dir()
    report_sync(sync_credentials(host_dir, shared.claude_config), host_dir)
    report_gitignore(ensure_gitignore(project.project_dir))

    cmd = get_docker_run_cmd(project, shared, config.command, gitconfig=get_host_gitconfig())
    print_summary(project, shared, config.command)
    remove_stale_container(project)

    returncode = execute_container(cmd)
    if returncode not in (0, 130):  # 130 = Ctrl+C
        diagnose_container_failure(returncode)
    return returncode
