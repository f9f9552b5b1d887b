"""One-way credential sync from the host Claude config into the container's.

Policy:
    - Credential files are copied on every launch (host credentials may rotate).
    - settings.json is copied only when the container does not have one yet,
      so settings customized inside the container are never clobbered.
    - Nothing is ever copied back to the host.

The container's config directory is shared by all instances; concurrent
launches copy from the same host source and the last writer wins.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .constants import CREDENTIAL_FILES, SETTINGS_FILE
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class SyncResult:
    """Outcome of one credential sync."""

    host_found: bool
    copied: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    settings_seeded: bool = False

    @property
    def synced(self) -> bool:
        """True if anything was copied into the container config."""
        return bool(self.copied)


def _copy(src: Path, dest: Path, result: SyncResult) -> None:
    try:
        # shutil.copy keeps the permission bits (credentials stay 0600)
        shutil.copy(src, dest)
    except OSError as e:
        logger.warning("Could not copy %s: %s", src, e)
        result.failed[src.name] = str(e)
        return
    logger.debug("Copied %s -> %s", src, dest)
    result.copied.append(src.name)


def sync_credentials(host_dir: Path, container_config_dir: Path) -> SyncResult:
    """Copy credentials (always) and settings (once) from host_dir.

    Never raises for an absent host directory or a failed copy: the launch
    goes on and the user can authenticate inside the container.

    Args:
        host_dir: Host Configuration Root. Read only.
        container_config_dir: Shared Configuration Directory.

    Returns:
        What was copied.
    """
    if not host_dir.is_dir():
        logger.debug("No host config at %s, skipping sync", host_dir)
        return SyncResult(host_found=False)

    container_config_dir.mkdir(parents=True, exist_ok=True)
    result = SyncResult(host_found=True)

    for filename in CREDENTIAL_FILES:
        src = host_dir / filename
        if src.is_file():
            _copy(src, container_config_dir / filename, result)

    host_settings = host_dir / SETTINGS_FILE
    container_settings = container_config_dir / SETTINGS_FILE
    if host_settings.is_file() and not container_settings.exists():
        _copy(host_settings, container_settings, result)
        result.settings_seeded = SETTINGS_FILE in result.copied
    elif host_settings.is_file():
        logger.debug("Container already has %s, leaving it alone", SETTINGS_FILE)

    return result
