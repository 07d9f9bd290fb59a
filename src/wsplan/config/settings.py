"""WsplanSettings — one object for CLI flags, ``WSPLAN_*`` env vars and wsplan.toml.

Priority chain (highest to lowest):
  1. CLI flags passed by Click (init kwargs)
  2. ``WSPLAN_*`` env vars, nested sections via ``__``
     (``WSPLAN_ARTIFACTS__OUTPUT_DIR=out``)
  3. ``wsplan.toml`` found by walking up from the workspace root
  4. Section model defaults

The workspace root is the ``--root`` flag, else the directory holding
wsplan.toml, else the working directory.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wsplan.config.discovery import find_config, load_config
from wsplan.config.models import ArtifactsConfig, WorkspaceConfig

# Config file chosen by ``from_cli``; read by the TOML source during __init__.
_pending_toml: ContextVar[Path | None] = ContextVar("wsplan_pending_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a single ``wsplan.toml``.

    The file is validated by :func:`load_config` first; only the keys it
    actually sets are passed on, so env vars still merge into a section.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is not None and toml_path.is_file():
            self._data = load_config(toml_path).model_dump(exclude_unset=True)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class WsplanSettings(BaseSettings):
    """Resolved settings for one wsplan invocation.

    Attributes:
        workspace_root: Directory scanned for project manifests.
        config_path: The wsplan.toml in effect, or None.
        workspace: ``[workspace]`` discovery and graph options.
        artifacts: ``[artifacts]`` descriptor options.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WSPLAN_",
        "env_nested_delimiter": "__",
    }

    # Resolved by from_cli, never read from TOML
    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Output flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # wsplan.toml sections
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Flags, then env vars, then wsplan.toml; no dotenv or secrets dir."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _pending_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> WsplanSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* that does not exist is ignored rather
        than falling back to walk-up discovery.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(workspace_root)

        if workspace_root is None:
            workspace_root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _pending_toml.set(toml_path)
        try:
            return cls(workspace_root=workspace_root, config_path=toml_path, **cli_flags)
        finally:
            _pending_toml.reset(token)
