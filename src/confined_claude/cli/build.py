"""Build operations for confined-claude.

Handles the first-launch image build and forced rebuilds.
"""

from __future__ import annotations

from rich.console import Console

from .. import docker
from ..config import get_install_dir
from ..constants import IMAGE_NAME
from ..errors import ImageBuildError
from ..generator import write_build_files
from ..logging import get_logger

console = Console(highlight=False, soft_wrap=True)
logger = get_logger(__name__)


def _build(no_cache: bool) -> None:
    build_dir = write_build_files(get_install_dir())
    returncode = docker.build_image(IMAGE_NAME, build_dir, no_cache=no_cache)
    if returncode != 0:
        raise ImageBuildError(f"Failed to build image '{IMAGE_NAME}'.", returncode)


def ensure_image() -> bool:
    """Build the image if it does not exist yet.

    Two first launches at the same time may both build; builds are idempotent
    and the last tag wins.

    Returns:
        True if a build was performed.

    Raises:
        ImageBuildError: If the build fails.
    """
    if docker.image_exists(IMAGE_NAME):
        logger.debug("Image %s present", IMAGE_NAME)
        return False

    console.print(f"Image '{IMAGE_NAME}' not found. Building ...")
    _build(no_cache=False)
    console.print("[green]Built.[/green]")
    console.print()
    return True


def rebuild_image() -> None:
    """Rebuild the image from scratch (--no-cache), whether or not it exists.

    Raises:
        ImageBuildError: If the build fails.
    """
    console.print(f"Force-rebuilding image '{IMAGE_NAME}' ...")
    _build(no_cache=True)
    console.print("[green]Image rebuilt.[/green]")
