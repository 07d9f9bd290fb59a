"""Workspace dependency graph — construction, cycle detection, batch scheduling.

Nodes are keyed by project name and reference each other by name only
(``dependencies`` / ``dependents`` hold names, never nodes). The graph is
write-once: populate with :meth:`DependencyGraph.add_project` and
:meth:`DependencyGraph.add_dependency`, then query.

Every collection here is insertion-ordered so cycle traces and the
contents of each batch are reproducible for a fixed input order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from wsplan.domain.errors import (
    CircularDependencyError,
    DuplicateProjectError,
    SchedulingInvariantError,
    UnknownProjectReferenceError,
)
from wsplan.domain.projects import ProjectDescriptor

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class GraphNode:
    """One project within the graph.

    ``dependencies`` and ``dependents`` are ordered sets (dict keys).
    """

    name: str
    project: ProjectDescriptor
    dependencies: dict[str, None] = field(default_factory=dict)
    dependents: dict[str, None] = field(default_factory=dict)


class DependencyGraph:
    """Directed "depends on" graph over workspace projects."""

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_project(self, project: ProjectDescriptor) -> None:
        """Insert a node for *project*; a name already present is left untouched."""
        if project.name not in self._nodes:
            self._nodes[project.name] = GraphNode(name=project.name, project=project)

    def add_dependency(self, source: str, target: str) -> None:
        """Record that *source* depends on *target*.

        Self-dependencies are accepted here and surface as a cycle later.

        Raises:
            UnknownProjectReferenceError: If either project is not in the graph.
        """
        source_node = self._nodes.get(source)
        if source_node is None:
            raise UnknownProjectReferenceError(source, "from")
        target_node = self._nodes.get(target)
        if target_node is None:
            raise UnknownProjectReferenceError(target, "to")

        source_node.dependencies[target] = None
        target_node.dependents[source] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_node(self, name: str) -> GraphNode | None:
        return self._nodes.get(name)

    def get_all_nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    def get_all_project_names(self) -> list[str]:
        return list(self._nodes)

    def detect_cycle(self) -> list[str] | None:
        """Return the first cycle found by depth-first search, or None.

        Roots are tried in insertion order and dependencies followed in
        insertion order. The returned trace starts at the project where the
        search re-entered its own stack; following it and stepping back to
        its first element walks the cycle. This is the first cycle found,
        not necessarily the shortest.

        The search keeps an explicit stack instead of recursing, so deep
        dependency chains cannot exhaust the interpreter's recursion limit.
        """
        visited: set[str] = set()
        on_stack: set[str] = set()

        for root in self._nodes:
            if root in visited:
                continue

            visited.add(root)
            on_stack.add(root)
            path: list[str] = [root]
            pending: list[Iterator[str]] = [iter(self._nodes[root].dependencies)]

            while pending:
                dep = next(pending[-1], None)
                if dep is None:
                    pending.pop()
                    on_stack.discard(path.pop())
                    continue
                if dep in on_stack:
                    return path[path.index(dep) :]
                if dep in visited:
                    continue
                visited.add(dep)
                on_stack.add(dep)
                path.append(dep)
                pending.append(iter(self._nodes[dep].dependencies))

        return None

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def get_topological_batches(self) -> list[list[ProjectDescriptor]]:
        """Group projects into ordered batches that are safe to run in parallel.

        Every project in batch N depends only on projects in batches
        before N, never on a project in the same batch. Within a batch,
        projects keep graph insertion order.

        Raises:
            CircularDependencyError: If the graph has a cycle. No batches
                are returned in that case.
            SchedulingInvariantError: If layering stalls despite the graph
                being acyclic (an internal bug).
        """
        cycle = self.detect_cycle()
        if cycle is not None:
            raise CircularDependencyError(cycle)

        batches: list[list[ProjectDescriptor]] = []
        processed: set[str] = set()
        remaining: dict[str, GraphNode] = dict(self._nodes)

        while remaining:
            ready = [
                node
                for node in remaining.values()
                if all(dep in processed for dep in node.dependencies)
            ]
            if not ready:
                raise SchedulingInvariantError(list(remaining))

            batches.append([node.project for node in ready])
            for node in ready:
                processed.add(node.name)
                del remaining[node.name]

        return batches

    def get_topological_order(self) -> list[str]:
        """Project names in batch order, flattened."""
        return [project.name for batch in self.get_topological_batches() for project in batch]


def build_dependency_graph(
    projects: Iterable[ProjectDescriptor],
    workspace_project_names: set[str] | frozenset[str] | None = None,
    *,
    include_dev: bool = True,
    warnings: list[str] | None = None,
) -> DependencyGraph:
    """Build a graph from *projects*, keeping only in-workspace edges.

    A dependency becomes an edge when it names one of *projects*. A
    dependency that names a project in *workspace_project_names* but not in
    *projects* (filtered out of discovery, say) is reported as a warning
    and dropped. Anything else is an external package and ignored.

    Args:
        projects: Descriptors to add, in the order that drives batch order.
        workspace_project_names: Every project name known to the
            workspace, used only to tell "not discovered" from "external".
        include_dev: Treat dev dependencies as edges too.
        warnings: If given, diagnostics are appended here for the caller to
            report; otherwise they are logged at WARNING.

    Raises:
        DuplicateProjectError: If two distinct descriptors share a name.
    """
    projects = list(projects)
    by_name: dict[str, ProjectDescriptor] = {}
    for project in projects:
        seen = by_name.setdefault(project.name, project)
        if seen is not project:
            raise DuplicateProjectError(project.name, [seen.manifest_path, project.manifest_path])

    graph = DependencyGraph()
    for project in projects:
        graph.add_project(project)

    for project in projects:
        for dep_name in project.dependency_names(include_dev=include_dev):
            if dep_name in by_name:
                graph.add_dependency(project.name, dep_name)
            elif workspace_project_names is not None and dep_name in workspace_project_names:
                msg = (
                    f"{project.name} depends on {dep_name} which is in workspace "
                    "but not discovered"
                )
                if warnings is not None:
                    warnings.append(msg)
                else:
                    logger.warning(msg)

    return graph
