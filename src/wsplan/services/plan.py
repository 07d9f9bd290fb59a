"""PlanService — build order and cycle checks for the whole workspace.

``plan`` is what a build runner consumes: an ordered list of batches where
every project in a batch may run concurrently and batch N+1 starts only
after batch N has finished.
"""

from __future__ import annotations

from collections.abc import Sequence

from wsplan.domain.errors import CircularDependencyError, WorkspaceGraphError
from wsplan.services.base import BaseService
from wsplan.services.result import ServiceResult
from wsplan.services.telemetry import trace_span, traced


class PlanService(BaseService):
    """Computes the parallel build plan."""

    @traced
    def plan(self, *, only: Sequence[str] | None = None) -> ServiceResult:
        """Return the workspace's build batches.

        Args:
            only: Restrict the plan to these projects plus everything they
                depend on. Batch order is unchanged; batches left empty by
                the restriction are dropped.
        """
        with trace_span("discover") as span:
            projects = self._workspace.projects
            if span:
                span.annotate("projects", len(projects))

        try:
            with trace_span("build_graph"):
                graph = self._workspace.graph
            with trace_span("schedule") as span:
                batches = graph.get_topological_batches()
                if span:
                    span.annotate("batches", len(batches))
        except WorkspaceGraphError as exc:
            return self._graph_failure("plan", exc)

        names = [[p.name for p in batch] for batch in batches]
        if only:
            selected: set[str] = set()
            for name in only:
                if name not in graph:
                    return self._unknown_name("plan", name)
                selected.add(name)
                selected |= self._workspace.engine.dependencies_of(name)
            names = [[n for n in batch if n in selected] for batch in names]
            names = [batch for batch in names if batch]

        return self._ok(
            "plan",
            {
                "count": sum(len(batch) for batch in names),
                "batch_count": len(names),
                "batches": [
                    {"index": i, "projects": batch} for i, batch in enumerate(names, start=1)
                ],
            },
        )

    @traced
    def check(self) -> ServiceResult:
        """Fail with the cycle trace if the workspace has a circular dependency."""
        try:
            graph = self._workspace.graph
        except WorkspaceGraphError as exc:
            return self._graph_failure("check", exc)

        cycle = graph.detect_cycle()
        if cycle is not None:
            return self._graph_failure("check", CircularDependencyError(cycle))

        return self._ok("check", {"count": len(graph), "cycle": None})
