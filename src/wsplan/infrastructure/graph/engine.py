"""GraphEngine — lazy-built NetworkX view of a DependencyGraph.

The domain graph owns construction, cycle detection and batching; this
view exists for transitive queries (ancestors / descendants) that NetworkX
already answers. Edges point from dependent to dependency, matching
``GraphNode.dependencies``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from wsplan.domain.graph import DependencyGraph

type _Graph = nx.DiGraph


class GraphEngine:
    """Lazy-loading analysis view over a dependency graph."""

    def __init__(self, dependency_graph: DependencyGraph) -> None:
        self._source = dependency_graph
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the view, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached view, forcing rebuild on next access."""
        self._graph = None

    def dependencies_of(self, name: str) -> set[str]:
        """Every project *name* needs, directly or transitively."""
        return nx.descendants(self.graph, name)

    def dependents_of(self, name: str) -> set[str]:
        """Every project that needs *name*, directly or transitively."""
        return nx.ancestors(self.graph, name)

    def _build(self) -> _Graph:
        """Copy nodes first (so isolated projects are present), then edges."""
        g: _Graph = nx.DiGraph()
        for node in self._source.get_all_nodes():
            g.add_node(node.name, version=node.project.version)
        for node in self._source.get_all_nodes():
            for dep in node.dependencies:
                g.add_edge(node.name, dep)
        return g
