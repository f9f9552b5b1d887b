"""CLI utilities for confined-claude.

Docker preflight checks, confirmation prompts and error printing.
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from .. import docker
from ..errors import ConfinedClaudeError, DockerNotFoundError, DockerNotRunningError

console = Console(highlight=False, soft_wrap=True)


def check_docker() -> None:
    """Fail fast when Docker is missing or unreachable.

    Raises:
        DockerNotFoundError: docker is not on PATH.
        DockerNotRunningError: `docker info` fails.
    """
    if not docker.docker_installed():
        raise DockerNotFoundError("Docker is not installed or not in PATH.")
    if not docker.check_docker_status():
        raise DockerNotRunningError("Cannot connect to Docker.")


def confirm(question: str = "Continue? [y/N]") -> bool:
    """Ask for confirmation; only 'y' or 'Y' confirms.

    Empty input and end-of-input (non-interactive use) cancel.
    """
    try:
        answer = click.prompt(question, default="", show_default=False, prompt_suffix=" ")
    except click.Abort:
        console.print()
        return False
    return answer.strip() in ("y", "Y")


def print_error(error: ConfinedClaudeError) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    if error.hint:
        console.print(escape(error.hint))
