"""Subcommand modules for themeguard.

Provides register_commands() which uses deferred imports to keep
``themeguard --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the check group and the standalone commands on the root group."""
    from themeguard.commands.check import check

    cli.add_command(check)

    from themeguard.commands.compile_cmd import compile_cmd
    from themeguard.commands.extract import extract

    cli.add_command(compile_cmd)
    cli.add_command(extract)
