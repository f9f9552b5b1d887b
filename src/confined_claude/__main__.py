"""Allow `python -m confined_claude`."""

from .cli import cli

cli(prog_name="confined-claude")
