"""GraphService — transitive queries over the dependency graph.

``affected`` answers "what must be rebuilt if these change";
``requires`` answers "what must be built before this". Both return names
in build order so the answer can be fed straight to a runner.
"""

from __future__ import annotations

from collections.abc import Sequence

from wsplan.domain.errors import WorkspaceGraphError
from wsplan.services.base import BaseService
from wsplan.services.result import ServiceResult
from wsplan.services.telemetry import traced


class GraphService(BaseService):
    """Handles dependency/dependent closure queries."""

    def _in_build_order(self, names: set[str]) -> list[str]:
        order = self._workspace.graph.get_topological_order()
        return [name for name in order if name in names]

    @traced
    def affected(self, names: Sequence[str]) -> ServiceResult:
        """The given projects plus every project that transitively depends on them."""
        try:
            graph = self._workspace.graph
        except WorkspaceGraphError as exc:
            return self._graph_failure("affected", exc)

        closure: set[str] = set()
        for name in names:
            if name not in graph:
                return self._unknown_name("affected", name)
            closure.add(name)
            closure |= self._workspace.engine.dependents_of(name)

        try:
            items = self._in_build_order(closure)
        except WorkspaceGraphError as exc:
            return self._graph_failure("affected", exc)

        return self._ok("affected", {"sources": list(names), "count": len(items), "items": items})

    @traced
    def requires(self, name: str) -> ServiceResult:
        """Every project *name* transitively depends on, excluding itself."""
        try:
            graph = self._workspace.graph
        except WorkspaceGraphError as exc:
            return self._graph_failure("requires", exc)

        if name not in graph:
            return self._unknown_name("requires", name)

        try:
            items = self._in_build_order(self._workspace.engine.dependencies_of(name))
        except WorkspaceGraphError as exc:
            return self._graph_failure("requires", exc)

        return self._ok("requires", {"source_id": name, "count": len(items), "items": items})
