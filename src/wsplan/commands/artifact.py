"""Command group: artifact descriptors."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from wsplan.commands._base import WsGroup
from wsplan.services.artifact import ArtifactService

if TYPE_CHECKING:
    from wsplan.commands._context import AppContext


@click.group(cls=WsGroup)
@click.pass_obj
def artifact(app: AppContext) -> None:
    """Write artifact descriptors for packed projects."""


@artifact.command(
    examples="""\
  wsplan artifact generate
  wsplan artifact generate packages/web --version 1.2.3
  ARTIFACT_OUTPUT_DIR=out wsplan artifact generate --registry npm-public"""
)
@click.argument(
    "project_dir",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option("--version", "version", default=None, help="Override the manifest version.")
@click.option(
    "--registry",
    "registries",
    multiple=True,
    help="Registry ID to publish to (repeatable; default from config).",
)
@click.pass_obj
def generate(
    app: AppContext,
    project_dir: Path | None,
    version: str | None,
    registries: tuple[str, ...],
) -> None:
    """Write the npm artifact descriptor for the project in PROJECT_DIR."""
    app.emit(
        ArtifactService(app.workspace).generate(
            project_dir or Path.cwd(),
            version=version,
            registries=list(registries) or None,
        )
    )
