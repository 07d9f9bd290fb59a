"""Locating and validating ``wsplan.toml``.

The file is searched for from the workspace root upwards, the way git
finds ``.git/``. ``WSPLAN_CONFIG`` names a file directly and disables the
search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

import click
from pydantic import ValidationError

from wsplan.config.models import WsplanConfig

CONFIG_FILENAME = "wsplan.toml"
CONFIG_ENV_VAR = "WSPLAN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the wsplan.toml governing *start* (default: cwd), or None.

    A ``WSPLAN_CONFIG`` that points at a missing file yields None rather
    than falling back to the search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> WsplanConfig:
    """Parse and validate a wsplan.toml.

    With no *path* the file is located with :func:`find_config`; no file at
    all means every section keeps its defaults.

    Raises:
        click.ClickException: The file is not TOML, or a section does not
            match its model. The message names the file.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return WsplanConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

    try:
        return WsplanConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid config in {path}: {exc}"
        raise click.ClickException(msg) from exc
