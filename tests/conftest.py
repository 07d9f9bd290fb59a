"""Shared pytest fixtures and test helpers for wsplan tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from wsplan.config.settings import WsplanSettings
from wsplan.infrastructure.workspace import Workspace
from wsplan.services.telemetry import _active_span, disable_telemetry


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by configure_logging (CLI tests call it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("wsplan")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """`-v` CLI runs enable telemetry for the whole thread."""
    yield
    disable_telemetry()
    _active_span.set(None)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment out of config and artifact resolution."""
    for var in ("WSPLAN_CONFIG", "ARTIFACT_OUTPUT_DIR", "PROJECT_VERSION", "PROJECT_NAME"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def _write_manifest(directory: Path, manifest: dict[str, Any] | str) -> Path:
    """Write a package.json into *directory* (a raw string is written as-is)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    text = manifest if isinstance(manifest, str) else json.dumps(manifest)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """A small monorepo.

    Layout (manifest path order = discovery order)::

        package.json                 acme (private root, no deps)
        packages/core/package.json   @acme/core   -> lodash (external)
        packages/utils/package.json  @acme/utils  -> @acme/core
        packages/web/package.json    @acme/web    -> @acme/utils, dev @acme/core
        packages/web/node_modules/.. ignored
    """
    _write_manifest(tmp_path, {"name": "acme", "private": True})
    _write_manifest(
        tmp_path / "packages" / "core",
        {"name": "@acme/core", "version": "1.0.0", "dependencies": {"lodash": "^4.17.21"}},
    )
    _write_manifest(
        tmp_path / "packages" / "utils",
        {
            "name": "@acme/utils",
            "version": "1.1.0",
            "dependencies": {"@acme/core": "workspace:*"},
        },
    )
    _write_manifest(
        tmp_path / "packages" / "web",
        """{
          "name": "@acme/web",
          "version": "2.0.0",
          // the app
          "dependencies": {"@acme/utils": "workspace:*"},
          "devDependencies": {"@acme/core": "workspace:*", "vitest": "^1.0.0",},
        }""",
    )
    _write_manifest(
        tmp_path / "packages" / "web" / "node_modules" / "left-pad", {"name": "left-pad"}
    )
    return tmp_path


@pytest.fixture
def workspace(workspace_root: Path) -> Workspace:
    """Workspace over the sample monorepo."""
    return Workspace(WsplanSettings.from_cli(workspace_root=workspace_root))
