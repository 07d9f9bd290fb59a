"""Typed failures raised by the dependency graph and its builder.

The service layer maps each of these to a ``ServiceError`` code so the
CLI can report the offending project names without re-running discovery.
"""

from __future__ import annotations

from pathlib import Path


class WorkspaceGraphError(Exception):
    """Base class for dependency graph failures."""


class UnknownProjectReferenceError(WorkspaceGraphError, LookupError):
    """An edge referenced a project that is not a node of the graph."""

    def __init__(self, name: str, side: str) -> None:
        self.name = name
        self.side = side
        super().__init__(f"Project not found in graph: {name} ({side})")


class CircularDependencyError(WorkspaceGraphError, ValueError):
    """The graph contains a cycle, so no build order exists."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        self.trace = format_cycle(self.cycle)
        super().__init__(f"Circular dependency detected: {self.trace}")


class SchedulingInvariantError(WorkspaceGraphError, RuntimeError):
    """Layering stalled with projects left over.

    Unreachable once cycle detection has passed; seeing it means a bug.
    """

    def __init__(self, remaining: list[str]) -> None:
        self.remaining = list(remaining)
        super().__init__(
            "Unable to determine topological order. Possible circular dependency "
            f"among: {', '.join(self.remaining)}"
        )


class DuplicateProjectError(WorkspaceGraphError, ValueError):
    """Two descriptors declared the same project name."""

    def __init__(self, name: str, locations: list[Path | None]) -> None:
        self.name = name
        self.locations = list(locations)
        where = ", ".join(str(loc) if loc is not None else "<unknown>" for loc in locations)
        super().__init__(f"Duplicate project name {name!r} declared by: {where}")


def format_cycle(cycle: list[str]) -> str:
    """Join a cycle trace with arrows, closing back on its first element.

    Examples:
        >>> format_cycle(["a", "b"])
        'a -> b -> a'
        >>> format_cycle(["a"])
        'a -> a'
    """
    if not cycle:
        return ""
    return " -> ".join([*cycle, cycle[0]])
