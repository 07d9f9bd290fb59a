"""Root CLI group for wsplan with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from wsplan import __version__
from wsplan.commands import register_commands
from wsplan.commands._base import WsGroup
from wsplan.commands._context import AppContext
from wsplan.config.settings import WsplanSettings


@click.group(cls=WsGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wsplan")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--root",
    "workspace_root",
    default=None,
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path),
    help="Workspace root (default: directory of wsplan.toml, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    workspace_root: Path | None,
) -> None:
    """wsplan — plan parallel build order across workspace projects."""
    ctx.ensure_object(dict)
    settings = WsplanSettings.from_cli(
        config_path=config_path,
        workspace_root=workspace_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
