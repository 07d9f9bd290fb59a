"""AppContext — per-invocation state handed to every command via ``@click.pass_obj``.

Commands only build a service and pass its result to :meth:`AppContext.emit`;
stream routing and exit codes live here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wsplan.config.logging import configure_logging
from wsplan.output.formatters import OutputSettings, format_result
from wsplan.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from wsplan.config.settings import WsplanSettings
    from wsplan.infrastructure.workspace import Workspace
    from wsplan.services.result import ServiceResult


class AppContext:
    """Settings, logging and the lazily discovered workspace.

    Discovery waits for the first command that needs the workspace, so
    ``--help`` and ``--examples`` never scan the filesystem.
    """

    def __init__(self, settings: WsplanSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from wsplan.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Plans and listings go to stdout so they can be piped. Failures go to
        stderr and exit with status 1. Warnings go to stderr prefixed
        ``WARNING:``, except in JSON mode where they are part of the payload.
        """
        settings = self.output_settings
        rendered = format_result(result, settings=settings)
        if not result.ok:
            click.echo(rendered, err=True)
            raise SystemExit(1)

        click.echo(rendered)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
