"""BaseService — shared foundation for wsplan services.

Every service receives a :class:`Workspace` at construction time and
translates graph failures into structured ``ServiceResult`` errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wsplan.domain.errors import (
    CircularDependencyError,
    DuplicateProjectError,
    SchedulingInvariantError,
    UnknownProjectReferenceError,
    WorkspaceGraphError,
)
from wsplan.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from wsplan.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class PlanService(BaseService):
            def plan(self) -> ServiceResult:
                try:
                    batches = self._workspace.graph.get_topological_batches()
                except WorkspaceGraphError as exc:
                    return self._graph_failure("plan", exc)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _ok(self, op: str, data: dict[str, Any]) -> ServiceResult:
        """Successful result carrying the workspace diagnostics as warnings."""
        return ServiceResult(ok=True, op=op, data=data, warnings=list(self._workspace.warnings))

    def _graph_failure(self, op: str, exc: WorkspaceGraphError) -> ServiceResult:
        """Map a graph exception to a failed ServiceResult."""
        detail: dict[str, Any]
        match exc:
            case CircularDependencyError():
                code = ErrorCode.CIRCULAR_DEPENDENCY
                detail = {"cycle": exc.cycle, "trace": exc.trace}
            case UnknownProjectReferenceError():
                code = ErrorCode.UNKNOWN_PROJECT
                detail = {"name": exc.name, "side": exc.side}
            case DuplicateProjectError():
                code = ErrorCode.DUPLICATE_PROJECT
                detail = {"name": exc.name, "locations": [str(p) for p in exc.locations]}
            case SchedulingInvariantError():
                logger.error("Scheduling invariant violated: %s", exc)
                code, detail = ErrorCode.SCHEDULING_FAILED, {"remaining": exc.remaining}
            case _:
                code, detail = ErrorCode.GRAPH_ERROR, {}
        return ServiceResult(
            ok=False,
            op=op,
            warnings=list(self._workspace.warnings),
            error=ServiceError(code=code, message=str(exc), detail=detail),
        )

    def _unknown_name(self, op: str, name: str) -> ServiceResult:
        """NOT_FOUND result for a requested project the workspace does not contain."""
        return ServiceResult(
            ok=False,
            op=op,
            warnings=list(self._workspace.warnings),
            error=ServiceError(
                code=ErrorCode.NOT_FOUND,
                message=f"No project named {name} in the workspace",
                detail={"name": name},
            ),
        )
