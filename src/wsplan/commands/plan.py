"""Commands: build plan and cycle check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wsplan.commands._base import WsCommand

if TYPE_CHECKING:
    from wsplan.commands._context import AppContext


@click.command(
    cls=WsCommand,
    examples="""\
  wsplan plan
  wsplan plan --only @acme/web
  wsplan -q plan | while read -r name; do [ -n "$name" ] && pnpm --filter "$name" build; done
  wsplan -q plan | awk -v RS= '{ gsub(/\\n/, " --filter "); system("pnpm --filter " $0 " build") }'
  wsplan --json plan""",
)
@click.option(
    "--only",
    "only",
    multiple=True,
    help="Limit the plan to this project and its dependencies (repeatable).",
)
@click.pass_obj
def plan(app: AppContext, only: tuple[str, ...]) -> None:
    """Print the parallel build order as batches."""
    from wsplan.services.plan import PlanService

    app.emit(PlanService(app.workspace).plan(only=list(only) or None))


@click.command(
    cls=WsCommand,
    examples="""\
  wsplan check
  wsplan --json check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Fail if the workspace has a circular dependency."""
    from wsplan.services.plan import PlanService

    app.emit(PlanService(app.workspace).check())
