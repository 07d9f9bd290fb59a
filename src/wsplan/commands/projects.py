"""Command: list discovered projects."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wsplan.commands._base import WsCommand

if TYPE_CHECKING:
    from wsplan.commands._context import AppContext


@click.command(
    cls=WsCommand,
    examples="""\
  wsplan projects
  wsplan -v projects
  wsplan --json projects""",
)
@click.pass_obj
def projects(app: AppContext) -> None:
    """List workspace projects and their in-workspace dependencies."""
    from wsplan.services.projects import ProjectService

    app.emit(ProjectService(app.workspace).list_projects())
