"""Workspace — the single dependency injected into every service.

Owns the discovered projects, the dependency graph built from them and
the NetworkX analysis view. Everything is computed lazily on first access
and then held for the lifetime of the instance (one CLI invocation);
there is no cross-invocation cache.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wsplan.domain.graph import DependencyGraph, build_dependency_graph
from wsplan.infrastructure.discovery import discover_projects, workspace_package_names
from wsplan.infrastructure.graph.engine import GraphEngine

if TYPE_CHECKING:
    from pathlib import Path

    from wsplan.config.settings import WsplanSettings
    from wsplan.domain.projects import ProjectDescriptor

logger = logging.getLogger(__name__)


class Workspace:
    """Lazily discovered set of projects and their dependency graph.

    Diagnostics from discovery and graph construction accumulate in
    :attr:`warnings` so services can surface them in their results.
    """

    def __init__(self, settings: WsplanSettings) -> None:
        self._settings = settings
        self.warnings: list[str] = []
        self._projects: list[ProjectDescriptor] | None = None
        self._graph: DependencyGraph | None = None
        self._engine: GraphEngine | None = None

    @property
    def root(self) -> Path:
        return self._settings.workspace_root

    @property
    def settings(self) -> WsplanSettings:
        return self._settings

    @property
    def projects(self) -> list[ProjectDescriptor]:
        """Discovered projects, in sorted manifest-path order."""
        if self._projects is None:
            cfg = self._settings.workspace
            self._projects = discover_projects(
                self.root,
                patterns=cfg.patterns,
                ignore=cfg.ignore,
                warnings=self.warnings,
            )
        return self._projects

    @property
    def graph(self) -> DependencyGraph:
        """Dependency graph over :attr:`projects` (built on first access).

        Raises:
            DuplicateProjectError: If two manifests declare the same name.
        """
        if self._graph is None:
            cfg = self._settings.workspace
            known = workspace_package_names(self.root, ignore=cfg.ignore)
            self._graph = build_dependency_graph(
                self.projects,
                known,
                include_dev=cfg.include_dev_dependencies,
                warnings=self.warnings,
            )
            logger.debug("Built dependency graph with %d node(s)", len(self._graph))
        return self._graph

    @property
    def engine(self) -> GraphEngine:
        """NetworkX analysis view over :attr:`graph`."""
        if self._engine is None:
            self._engine = GraphEngine(self.graph)
        return self._engine
