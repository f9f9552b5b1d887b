"""Constants module for confined-claude.

All names, container paths and timeout values are defined here (SSOT).
"""

from __future__ import annotations

# === Names ===
APP_NAME = "confined-claude"
IMAGE_NAME = "confined-claude"
CONTAINER_PREFIX = "confined-claude-"  # Instance names: confined-claude-<slug>
PROJECT_LABEL = "confined-claude.project-dir"  # Label holding the host project path

# === Host paths ===
INSTALL_DIR = "~/.local/share/confined-claude"  # Install root (expandable)
HOST_CLAUDE_DIR = "~/.claude"  # Default Host Configuration Root
HOST_CLAUDE_DIR_ENV = "CLAUDE_CONFIG_DIR"  # Override for the Host Configuration Root
HOST_GITCONFIG = "~/.gitconfig"
LOCAL_DIR = ".confined-claude"  # Per-project data directory name

# Shared tree under the install root
SHARED_DIRNAME = "shared"
PIP_CACHE_DIRNAME = "pip-cache"
NPM_CACHE_DIRNAME = "npm-cache"
CLAUDE_CONFIG_DIRNAME = "claude-config"  # Container's OWN ~/.claude/

# Per-project tree under <project>/.confined-claude
VENVS_DIRNAME = "venvs"
LOCAL_BIN_DIRNAME = "local-bin"

# === Credential sync ===
CREDENTIAL_FILES = ("credentials.json", ".credentials.json", "auth.json")
SETTINGS_FILE = "settings.json"

# === Container paths ===
CONTAINER_HOME = "/home/claude"
CONTAINER_WORKSPACE = "/home/claude/workspace"
CONTAINER_CLAUDE_DIR = "/home/claude/.claude"
CONTAINER_PIP_CACHE = "/home/claude/.cache/pip"
CONTAINER_NPM_CACHE = "/home/claude/.cache/npm"
CONTAINER_VENVS = "/home/claude/venvs"
CONTAINER_LOCAL_BIN = "/home/claude/.local/bin"
CONTAINER_GITCONFIG = "/home/claude/.gitconfig"

# === Command Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, inspect, ps, rm)
GIT_COMMAND_TIMEOUT = 10  # rev-parse, check-ignore

# === Status ===
STATUS_SEARCH_DEPTH = 4  # Max depth below ~ when looking for project data dirs
