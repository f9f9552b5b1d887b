"""Docker operations for confined-claude.

This module contains Docker-specific utilities and operations,
separated from CLI logic for better modularity.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import DOCKER_COMMAND_TIMEOUT
from .errors import DockerNotFoundError, DockerTimeoutError
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = get_logger(__name__)

__all__ = [
    "ContainerInfo",
    "safe_docker_run",
    "docker_installed",
    "check_docker_status",
    "image_exists",
    "build_image",
    "remove_container",
    "get_container_label",
    "list_containers",
]


@dataclass(frozen=True)
class ContainerInfo:
    """One row of `docker ps` output."""

    name: str
    status: str
    running_for: str


def safe_docker_run(
    cmd: Sequence[str],
    *,
    timeout: int | None = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a Docker command with consistent error handling.

    Args:
        cmd: Command to run (should start with 'docker').
        timeout: Command timeout in seconds (None for no timeout).
        capture_output: Capture stdout/stderr if True.
        check: Raise CalledProcessError on non-zero exit.

    Returns:
        CompletedProcess with command result.

    Raises:
        DockerNotFoundError: If docker command is not found.
        DockerTimeoutError: If command times out.
        subprocess.CalledProcessError: If check=True and command fails.
    """
    cmd_str = " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check,
            timeout=timeout,
        )
        logger.debug("Docker command completed: exit=%d", result.returncode)
        return result
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", cmd_str)
        raise DockerNotFoundError("Docker is not installed or not in PATH.") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Docker command timed out after %ss: %s", timeout, cmd_str)
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e


def docker_installed() -> bool:
    """Check if the docker executable is on PATH."""
    return shutil.which("docker") is not None


def check_docker_status() -> bool:
    """Check if Docker daemon is responsive.

    Returns:
        True if Docker is running and responsive, False otherwise.
    """
    try:
        result = safe_docker_run(["docker", "info"])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def image_exists(image_name: str) -> bool:
    """Check if a Docker image exists locally."""
    try:
        result = safe_docker_run(["docker", "image", "inspect", image_name])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def build_image(
    image_name: str,
    context_dir: Path,
    *,
    no_cache: bool = False,
) -> int:
    """Build an image from context_dir/Dockerfile with progress on the terminal.

    BuildKit is enabled. No timeout is applied: builds block until done.

    Returns:
        Exit code of `docker build`.

    Raises:
        DockerNotFoundError: If docker command is not found.
    """
    cmd = [
        "docker",
        "build",
        "-t",
        image_name,
        "-f",
        str(context_dir / "Dockerfile"),
    ]
    if no_cache:
        cmd.append("--no-cache")
    cmd.extend(["--progress=auto", str(context_dir)])

    env = os.environ.copy()
    env["DOCKER_BUILDKIT"] = "1"

    logger.debug("Building image %s (no_cache=%s) from %s", image_name, no_cache, context_dir)
    try:
        # Redirect stderr to stdout so build progress doesn't appear as errors
        result = subprocess.run(cmd, check=False, env=env, stderr=subprocess.STDOUT)
    except FileNotFoundError as e:
        raise DockerNotFoundError("Docker is not installed or not in PATH.") from e
    logger.debug("Image build finished: exit=%d", result.returncode)
    return result.returncode


def remove_container(container_name: str, *, force: bool = True) -> bool:
    """Remove a Docker container.

    Args:
        container_name: Container name or ID to remove.
        force: Force removal (stops it first) if True.

    Returns:
        True if container was removed, False otherwise (including "no such container").
    """
    try:
        cmd = ["docker", "rm"]
        if force:
            cmd.append("-f")
        cmd.append(container_name)
        result = safe_docker_run(cmd)
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def get_container_label(container_name: str, label: str) -> str | None:
    """Read one label of an existing container.

    Returns:
        The label value, "" if the container lacks the label, or None if the
        container does not exist (or Docker is unavailable).
    """
    try:
        result = safe_docker_run(
            [
                "docker",
                "inspect",
                "--format",
                f'{{{{index .Config.Labels "{label}"}}}}',
                container_name,
            ]
        )
    except (DockerNotFoundError, DockerTimeoutError):
        return None
    if result.returncode != 0:
        return None
    value = result.stdout.strip()
    return "" if value == "<no value>" else value


def list_containers(name_filter: str | None = None) -> list[ContainerInfo]:
    """List running Docker containers, optionally filtered by name.

    Returns:
        Containers matching the filter, or empty list on failure.
    """
    try:
        cmd = ["docker", "ps", "--format", "{{.Names}}\t{{.Status}}\t{{.RunningFor}}"]
        if name_filter:
            cmd.extend(["--filter", f"name={name_filter}"])

        result = safe_docker_run(cmd)
        if result.returncode != 0:
            return []
    except (DockerNotFoundError, DockerTimeoutError):
        return []

    containers = []
    for line in result.stdout.strip().split("\n"):
        if not line:
            continue
        parts = line.split("\t")
        parts += [""] * (3 - len(parts))
        containers.append(ContainerInfo(parts[0], parts[1], parts[2]))
    return containers
