"""Artifact descriptor models.

One descriptor per project lists everything that project's pack step
produced. The on-disk format uses camelCase keys (``tempTag``,
``pushedAt``, ...); models accept either the alias or the field name.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class _ArtifactBase(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}


class NpmArtifact(_ArtifactBase):
    """npm tarball produced by ``pack``."""

    type: Literal["npm"] = "npm"
    name: str
    path: str  # .tgz path relative to the project root
    registries: list[str] | None = None


class DockerArtifact(_ArtifactBase):
    """Container image pushed under a temporary tag."""

    type: Literal["docker"] = "docker"
    name: str
    temp_tag: str = Field(alias="tempTag")
    final_tag: str = Field(alias="finalTag")
    digest: str
    registry: str
    pushed_at: str = Field(alias="pushedAt")  # ISO timestamp
    registries: list[str] | None = None


class NuGetArtifact(_ArtifactBase):
    """NuGet package."""

    type: Literal["nuget"] = "nuget"
    name: str
    path: str
    registries: list[str] | None = None


class ReleaseAttachment(_ArtifactBase):
    """Arbitrary file attached to a release."""

    type: Literal["release-attachment"] = "release-attachment"
    name: str
    path: str
    content_type: str = Field(alias="contentType")


Artifact = Annotated[
    NpmArtifact | DockerArtifact | NuGetArtifact | ReleaseAttachment,
    Field(discriminator="type"),
]


class ProjectArtifactDescriptor(BaseModel):
    """All artifacts produced by one project."""

    model_config = {"frozen": True}

    project: str
    artifacts: list[Artifact] = Field(default_factory=list)
