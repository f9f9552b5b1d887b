"""Docker build context and `docker run` command generation."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import NamedTuple

from .config import LAUNCH_COMMANDS, Command
from .constants import (
    CONTAINER_CLAUDE_DIR,
    CONTAINER_GITCONFIG,
    CONTAINER_HOME,
    CONTAINER_LOCAL_BIN,
    CONTAINER_NPM_CACHE,
    CONTAINER_PIP_CACHE,
    CONTAINER_VENVS,
    CONTAINER_WORKSPACE,
    IMAGE_NAME,
    PROJECT_LABEL,
)
from .paths import ProjectLayout, SharedLayout

# Base system: git for marketplace clones, python3 + venv for mkvenv
SYSTEM_PACKAGES = """
RUN apt-get update && apt-get install -y --no-install-recommends \\
        git curl wget ca-certificates gnupg \\
        python3 python3-pip python3-venv \\
        jq ripgrep vim-tiny build-essential sudo \\
    && rm -rf /var/lib/apt/lists/*
"""

NODE_INSTALL = """
RUN curl -fsSL https://deb.nodesource.com/setup_22.x | bash - \\
    && apt-get install -y --no-install-recommends nodejs \\
    && rm -rf /var/lib/apt/lists/*
"""

CLAUDE_INSTALL = """
RUN npm install -g @anthropic-ai/claude-code
"""

MKVENV_SCRIPT = """#!/usr/bin/env bash
set -euo pipefail
NAME="${1:?Usage: mkvenv <name>}"
VENV_PATH="$HOME/venvs/$NAME"
if [ -d "$VENV_PATH" ]; then
    echo "Venv '$NAME' already exists."
else
    echo "Creating venv '$NAME' ..."
    python3 -m venv "$VENV_PATH"
    echo "Created."
fi
echo "Activate with:  source ~/venvs/$NAME/bin/activate"
"""

LSVENVS_SCRIPT = """#!/usr/bin/env bash
echo "Python virtual environments (this project):"
echo ""
if [ -z "$(ls -A "$HOME/venvs" 2>/dev/null)" ]; then
    echo "  (none - create one with: mkvenv <name>)"
else
    du -sh "$HOME/venvs"/*/ 2>/dev/null
fi
"""

DISKUSE_SCRIPT = """#!/usr/bin/env bash
echo "Persistent volume usage:"
echo ""
echo "  Venvs:     $(du -sh "$HOME/venvs" 2>/dev/null | cut -f1)"
echo "  Pip cache: $(du -sh "$HOME/.cache/pip" 2>/dev/null | cut -f1)"
echo "  npm cache: $(du -sh "$HOME/.cache/npm" 2>/dev/null | cut -f1)"
echo "  Local bin: $(du -sh "$HOME/.local/bin" 2>/dev/null | cut -f1)"
"""

# Installed globally so they work regardless of the UID the container runs as
HELPER_SCRIPTS: dict[str, str] = {
    "mkvenv": MKVENV_SCRIPT,
    "lsvenvs": LSVENVS_SCRIPT,
    "diskuse": DISKUSE_SCRIPT,
}


def _helper_install(name: str, script: str) -> str:
    return (
        f"\nRUN cat > /usr/local/bin/{name} <<'SCRIPT' && chmod +x /usr/local/bin/{name}\n"
        f"{script}SCRIPT\n"
    )


def generate_dockerfile() -> str:
    """Generate the Dockerfile for the confined-claude image."""
    helpers = "".join(_helper_install(name, script) for name, script in HELPER_SCRIPTS.items())
    return f"""# syntax=docker/dockerfile:1
FROM debian:bookworm-slim
{SYSTEM_PACKAGES}{NODE_INSTALL}{CLAUDE_INSTALL}{helpers}
# Runs as the host user's numeric UID, which has no passwd entry
RUN mkdir -p {CONTAINER_WORKSPACE} && chmod 0777 {CONTAINER_HOME}

WORKDIR {CONTAINER_WORKSPACE}

CMD ["claude"]
"""


def write_build_files(install_dir: Path) -> Path:
    """Write the Dockerfile into the install root and return the build context."""
    install_dir.mkdir(parents=True, exist_ok=True)
    # Unix line endings regardless of platform
    with open(install_dir / "Dockerfile", "w", encoding="utf-8", newline="\n") as f:
        f.write(generate_dockerfile())
    return install_dir


class Mount(NamedTuple):
    """One bind mount: host path -> container path."""

    host: Path
    container: str
    read_only: bool = False

    def to_arg(self) -> str:
        return f"{self.host}:{self.container}" + (":ro" if self.read_only else "")


def build_mounts(
    project: ProjectLayout,
    shared: SharedLayout,
    gitconfig: Path | None = None,
) -> list[Mount]:
    """Assemble the bind-mount set for one launch.

    Per-project: workspace, venvs, local-bin. Shared: container config and
    caches. The host git identity is mounted read-only when given.
    """
    mounts = [
        Mount(project.project_dir, CONTAINER_WORKSPACE),
        Mount(shared.claude_config, CONTAINER_CLAUDE_DIR),
        Mount(shared.pip_cache, CONTAINER_PIP_CACHE),
        Mount(shared.npm_cache, CONTAINER_NPM_CACHE),
        Mount(project.venvs, CONTAINER_VENVS),
        Mount(project.local_bin, CONTAINER_LOCAL_BIN),
    ]
    if gitconfig is not None:
        mounts.append(Mount(gitconfig, CONTAINER_GITCONFIG, read_only=True))
    return mounts


def _build_env_args(project: ProjectLayout) -> list[str]:
    env = {
        "HOME": CONTAINER_HOME,
        "CLAUDE_CONFIG_DIR": CONTAINER_CLAUDE_DIR,
        "PIP_CACHE_DIR": CONTAINER_PIP_CACHE,
        "npm_config_cache": CONTAINER_NPM_CACHE,
        "CONFINED_CLAUDE_PROJECT": project.name,
        "TERM": os.environ.get("TERM") or "xterm-256color",
    }
    args: list[str] = []
    for key, value in env.items():
        args.extend(["-e", f"{key}={value}"])
    return args


def get_user_ids() -> str:
    """Return "uid:gid" of the invoking user (1000:1000 where unavailable)."""
    getuid = getattr(os, "getuid", None)
    getgid = getattr(os, "getgid", None)
    uid = getuid() if getuid else 1000
    gid = getgid() if getgid else 1000
    return f"{uid}:{gid}"


def get_docker_run_cmd(
    project: ProjectLayout,
    shared: SharedLayout,
    command: Command,
    *,
    gitconfig: Path | None = None,
) -> list[str]:
    """Generate the foreground `docker run` command for a launch.

    Args:
        project: Layout of the project being launched.
        shared: Layout of the shared tree.
        command: One of the launching commands (LAUNCH, YOLO, SHELL).
        gitconfig: Host git identity file to mount read-only, if any.
    """
    cmd = ["docker", "run", "--rm"]

    # No TTY when stdin is not a terminal (piped input, CI)
    cmd.append("-it" if sys.stdin.isatty() else "-i")

    cmd.extend(
        [
            "--init",
            "--name",
            project.container_name,
            "--label",
            f"{PROJECT_LABEL}={project.project_dir}",
            "--user",
            get_user_ids(),
        ]
    )

    for mount in build_mounts(project, shared, gitconfig):
        cmd.extend(["-v", mount.to_arg()])

    cmd.extend(_build_env_args(project))
    cmd.extend(["-w", CONTAINER_WORKSPACE, IMAGE_NAME])
    cmd.extend(LAUNCH_COMMANDS[command])
    return cmd
