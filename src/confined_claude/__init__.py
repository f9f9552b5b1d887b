"""confined-claude - Run Claude Code in an isolated Docker container."""

__version__ = "0.2.0"
