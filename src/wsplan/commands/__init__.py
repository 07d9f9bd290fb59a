"""Subcommand modules for wsplan.

Provides register_commands() which uses deferred imports to keep
``wsplan --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from wsplan.commands.artifact import artifact
    from wsplan.commands.graph import graph

    cli.add_command(graph)
    cli.add_command(artifact)

    # --- Standalone commands ---
    from wsplan.commands.plan import check, plan
    from wsplan.commands.projects import projects

    cli.add_command(projects)
    cli.add_command(plan)
    cli.add_command(check)
