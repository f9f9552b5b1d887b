"""Run configuration dataclass for confined-claude.

Bundles the decoded command-line flags into a single configuration object
for cleaner function signatures and easier testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import Command
from .errors import ValidationError


@dataclass(frozen=True)
class RunConfig:
    """Configuration for one confined-claude invocation.

    Immutable so the command decoded at the CLI boundary cannot change later.
    """

    command: Command = Command.LAUNCH
    project_dir: Path = field(default_factory=Path.cwd)
    debug: bool = False

    @classmethod
    def from_cli(
        cls,
        *,
        yolo: bool = False,
        shell: bool = False,
        status: bool = False,
        clean: bool = False,
        clean_global: bool = False,
        rebuild: bool = False,
        debug: bool = False,
        project_dir: Path | None = None,
    ) -> RunConfig:
        """Create RunConfig from CLI flags.

        Raises:
            ValidationError: If more than one command flag is given.
        """
        flags = {
            Command.YOLO: yolo,
            Command.SHELL: shell,
            Command.STATUS: status,
            Command.CLEAN: clean,
            Command.CLEAN_GLOBAL: clean_global,
            Command.REBUILD: rebuild,
        }
        chosen = [command for command, enabled in flags.items() if enabled]
        if len(chosen) > 1:
            names = ", ".join(f"--{command.value}" for command in chosen)
            raise ValidationError(f"Options are mutually exclusive: {names}")

        return cls(
            command=chosen[0] if chosen else Command.LAUNCH,
            project_dir=(project_dir or Path.cwd()).resolve(),
            debug=debug,
        )
