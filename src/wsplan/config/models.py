"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, wsplan.toml only contains overrides.
A workspace with no config file behaves like a plain pnpm/npm monorepo.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- wsplan.toml sections ---


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    patterns: list[str] = Field(default_factory=lambda: ["**/package.json"])
    ignore: list[str] = Field(default_factory=lambda: ["node_modules", "dist"])
    include_dev_dependencies: bool = True


class ArtifactsConfig(BaseModel):
    """[artifacts] section."""

    model_config = {"frozen": True}

    output_dir: str = ".artifacts"
    registries: list[str] = Field(default_factory=lambda: ["github-npm"])


class WsplanConfig(BaseModel):
    """The whole wsplan.toml.

    Unknown top-level keys are rejected, so a misspelt section name is
    reported instead of silently ignored.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
