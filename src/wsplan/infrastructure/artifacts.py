"""Artifact descriptor files — ``{project}.artifact.yml``.

A project's pack step writes one descriptor listing what it produced;
the release stage later reads them back. Files are YAML with camelCase
keys, 2-space indentation and no line wrapping.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path

from ruamel.yaml import YAML

from wsplan.domain.artifacts import ProjectArtifactDescriptor

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".artifact.yml"


def _new_yaml() -> YAML:
    """Create a fresh YAML emitter (ruamel's YAML objects are stateful)."""
    y = YAML()
    y.default_flow_style = False
    y.indent(mapping=2, sequence=4, offset=2)
    y.width = 2**16
    return y


def artifact_path(output_dir: Path, project_name: str) -> Path:
    """Path of the descriptor file for *project_name* inside *output_dir*."""
    return output_dir / f"{project_name}{ARTIFACT_SUFFIX}"


def render_artifact(descriptor: ProjectArtifactDescriptor) -> str:
    """Serialize *descriptor* to YAML text."""
    data = descriptor.model_dump(mode="json", by_alias=True, exclude_none=True)
    buf = StringIO()
    _new_yaml().dump(data, buf)
    return buf.getvalue()


def write_artifact(
    descriptor: ProjectArtifactDescriptor,
    *,
    output_dir: Path | None,
    project_name: str | None,
) -> Path:
    """Write *descriptor* to ``{output_dir}/{project_name}.artifact.yml``.

    Parent directories are created as needed.

    Raises:
        ValueError: If *output_dir* or *project_name* is missing.
    """
    if not output_dir:
        msg = "ARTIFACT_OUTPUT_DIR is required to write an artifact descriptor"
        raise ValueError(msg)
    if not project_name:
        msg = "PROJECT_NAME is required to write an artifact descriptor"
        raise ValueError(msg)

    path = artifact_path(Path(output_dir), project_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_artifact(descriptor), encoding="utf-8")
    logger.info("Generated artifact descriptor: %s", path)
    return path


def read_artifact(path: Path) -> ProjectArtifactDescriptor:
    """Load and validate a descriptor file."""
    data = YAML(typ="safe").load(path.read_text(encoding="utf-8"))
    return ProjectArtifactDescriptor.model_validate(data)
