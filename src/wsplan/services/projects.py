"""ProjectService — what was discovered and how it is wired."""

from __future__ import annotations

from typing import Any

from wsplan.domain.errors import WorkspaceGraphError
from wsplan.services.base import BaseService
from wsplan.services.result import ServiceResult
from wsplan.services.telemetry import traced


class ProjectService(BaseService):
    """Lists workspace projects with their in-workspace edges."""

    @traced
    def list_projects(self) -> ServiceResult:
        """List every discovered project in discovery order.

        ``dependencies`` and ``dependents`` only name workspace projects;
        external packages are not part of the graph.
        """
        try:
            graph = self._workspace.graph
        except WorkspaceGraphError as exc:
            return self._graph_failure("list_projects", exc)

        root = self._workspace.root
        items: list[dict[str, Any]] = []
        for node in graph.get_all_nodes():
            project = node.project
            directory = project.directory
            if directory is not None and directory.is_relative_to(root):
                directory = directory.relative_to(root)
            items.append(
                {
                    "id": node.name,
                    "version": project.version,
                    "private": project.private,
                    "directory": str(directory) if directory is not None else None,
                    "dependencies": list(node.dependencies),
                    "dependents": list(node.dependents),
                }
            )

        return self._ok("list_projects", {"count": len(items), "items": items})
