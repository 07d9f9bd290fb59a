"""Command group: transitive dependency queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wsplan.commands._base import WsGroup
from wsplan.services.graph import GraphService

if TYPE_CHECKING:
    from wsplan.commands._context import AppContext


@click.group(cls=WsGroup)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Query the workspace dependency graph."""


@graph.command(
    examples="""\
  wsplan graph affected @acme/core
  wsplan -q graph affected @acme/core @acme/utils"""
)
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def affected(app: AppContext, names: tuple[str, ...]) -> None:
    """List projects to rebuild when NAMES change, in build order."""
    app.emit(GraphService(app.workspace).affected(list(names)))


@graph.command(
    examples="""\
  wsplan graph requires @acme/web
  wsplan --json graph requires @acme/web"""
)
@click.argument("name")
@click.pass_obj
def requires(app: AppContext, name: str) -> None:
    """List projects NAME needs built first, in build order."""
    app.emit(GraphService(app.workspace).requires(name))
