"""ArtifactService — write the npm artifact descriptor for a packed project.

Run from a project's pack step. The descriptor records the tarball
``pnpm pack`` produced so the release stage can publish it without
re-discovering the workspace.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from wsplan.domain.artifacts import NpmArtifact, ProjectArtifactDescriptor
from wsplan.domain.projects import ProjectDescriptor, safe_name
from wsplan.infrastructure.artifacts import write_artifact
from wsplan.infrastructure.discovery import MANIFEST_FILENAME
from wsplan.infrastructure.jsonc import parse_json
from wsplan.services.base import BaseService
from wsplan.services.result import ErrorCode, ServiceError, ServiceResult
from wsplan.services.telemetry import traced

OUTPUT_DIR_ENV_VAR = "ARTIFACT_OUTPUT_DIR"
VERSION_ENV_VAR = "PROJECT_VERSION"


class ArtifactService(BaseService):
    """Generates artifact descriptor files."""

    @traced
    def generate(
        self,
        project_dir: Path,
        *,
        version: str | None = None,
        registries: Sequence[str] | None = None,
    ) -> ServiceResult:
        """Write ``{safe-name}.artifact.yml`` for the project in *project_dir*.

        Version resolution: *version*, then ``PROJECT_VERSION``, then the
        manifest. Output directory: ``ARTIFACT_OUTPUT_DIR``, then
        ``[artifacts] output_dir``, resolved against *project_dir*.
        """
        op = "generate_artifact"
        manifest_path = project_dir / MANIFEST_FILENAME
        if not manifest_path.is_file():
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=ErrorCode.NOT_FOUND,
                    message=f"No {MANIFEST_FILENAME} in {project_dir}",
                    detail={"path": str(manifest_path)},
                ),
            )

        try:
            manifest = parse_json(manifest_path.read_text(encoding="utf-8"))
            if not isinstance(manifest, dict):
                msg = f"{manifest_path}: manifest is not a JSON object"
                raise ValueError(msg)
            project = ProjectDescriptor.from_manifest(manifest, manifest_path=manifest_path)
        except (OSError, ValueError) as exc:
            return self._invalid(op, manifest_path, str(exc))

        resolved_version = version or os.environ.get(VERSION_ENV_VAR) or project.version
        if not resolved_version:
            return self._invalid(op, manifest_path, f"{project.name} has no version")

        cfg = self._workspace.settings.artifacts
        output_dir = project_dir / (os.environ.get(OUTPUT_DIR_ENV_VAR) or cfg.output_dir)
        project_name = safe_name(project.name)
        # Tarball path is relative to the project root: "<output dir name>/<file>".
        tarball = f"{output_dir.name or '.artifacts'}/{project_name}-{resolved_version}.tgz"

        descriptor = ProjectArtifactDescriptor(
            project=project.name,
            artifacts=[
                NpmArtifact(
                    name=project.name,
                    path=tarball,
                    registries=list(registries if registries is not None else cfg.registries),
                )
            ],
        )
        path = write_artifact(descriptor, output_dir=output_dir, project_name=project_name)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": project.name,
                "version": resolved_version,
                "path": str(path),
                "tarball": tarball,
            },
        )

    @staticmethod
    def _invalid(op: str, path: Path, message: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=ErrorCode.INVALID_MANIFEST, message=message, detail={"path": str(path)}
            ),
        )
