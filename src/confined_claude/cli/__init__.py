"""CLI package for confined-claude.

This package contains the CLI command and supporting modules:
- run: Launch workflow and supervised container run
- build: Image building operations
- cleanup: Project and shared data cleanup
- status: Read-only status report
- utils: Docker preflight, prompts, error printing

Heavy modules are imported lazily inside the command so --help/--version
stay fast.
"""

from __future__ import annotations

from pathlib import Path

import click

from .. import __version__
from ..config import Command
from ..constants import APP_NAME
from ..errors import ConfinedClaudeError, ImageBuildError, ValidationError
from ..logging import set_debug
from ..paths import get_project_layout, get_shared_layout
from ..run_config import RunConfig
from .utils import check_docker, print_error

__all__ = ["cli", "dispatch"]

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

EPILOG = """\b
Environment variables:
  CLAUDE_CONFIG_DIR      Host Claude config to copy auth from (default: ~/.claude)
  CONFINED_CLAUDE_DEBUG  Set to 1 for debug logging on stderr

\b
Isolation model:
  Auth credentials are COPIED from your host ~/.claude/ on each launch.
  The container maintains its own separate plugin/marketplace ecosystem.
  Your host ~/.claude/ is never mounted and never modified.

\b
What gets created:
  .confined-claude/                  In each project directory (per-project)
      venvs/                         Python virtual environments
      local-bin/                     Custom CLI tools
  ~/.local/share/confined-claude/    User-level installation
      shared/pip-cache/              Shared pip download cache
      shared/npm-cache/              Shared npm cache (for plugin deps)
      shared/claude-config/          Container's own Claude config and plugins

\b
Inside the container:
  mkvenv <name>    Create a persistent Python virtual environment
  lsvenvs          List venvs and their disk usage
  diskuse          Show all persistent volume sizes
"""


def dispatch(config: RunConfig) -> int:
    """Run the decoded command and return the process exit code."""
    if config.command is Command.STATUS:
        from .status import show_status

        show_status(get_shared_layout(), Path.home())
        return 0

    if config.command is Command.CLEAN:
        from .cleanup import clean_project

        clean_project(get_project_layout(config.project_dir))
        return 0

    if config.command is Command.CLEAN_GLOBAL:
        from .cleanup import clean_global

        clean_global(get_shared_layout())
        return 0

    if config.command is Command.REBUILD:
        from .build import rebuild_image

        check_docker()
        rebuild_image()
        return 0

    if config.command.launches_container:
        # Lazy import: run module pulls in generator, sync and gitignore
        from .run import launch

        return launch(config)

    raise AssertionError(f"Unhandled command: {config.command}")


@click.command(context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option("--yolo", is_flag=True, help="Launch with --dangerously-skip-permissions")
@click.option("--shell", is_flag=True, help="Drop into bash inside the container")
@click.option("--status", "-s", is_flag=True, help="Running instances and disk usage")
@click.option("--clean", is_flag=True, help="Remove this project's persistent data")
@click.option(
    "--clean-global",
    is_flag=True,
    help="Remove shared data (caches, container config)",
)
@click.option("--rebuild", is_flag=True, help="Force-rebuild the Docker image")
@click.option("--debug", is_flag=True, help="Debug logging on stderr")
@click.version_option(
    __version__,
    "--version",
    "-v",
    prog_name=APP_NAME,
    message="%(prog)s v%(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    yolo: bool,
    shell: bool,
    status: bool,
    clean: bool,
    clean_global: bool,
    rebuild: bool,
    debug: bool,
) -> None:
    """confined-claude - Run Claude Code in an isolated Docker container.

    Run 'confined-claude' in any project directory to start.
    """
    try:
        config = RunConfig.from_cli(
            yolo=yolo,
            shell=shell,
            status=status,
            clean=clean,
            clean_global=clean_global,
            rebuild=rebuild,
            debug=debug,
        )
    except ValidationError as e:
        raise click.UsageError(str(e), ctx=ctx) from e

    if config.debug:
        set_debug(True)

    try:
        exit_code = dispatch(config)
    except ImageBuildError as e:
        print_error(e)
        ctx.exit(e.returncode)
    except ConfinedClaudeError as e:
        print_error(e)
        ctx.exit(1)
    ctx.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    cli()
