"""ServiceResult — what every service method hands back to the CLI.

Services never raise for expected failures (cycles, unknown names, bad
manifests). They return ``ok=False`` with a :class:`ServiceError` whose
``code`` is one of :class:`ErrorCode` and whose ``detail`` names the
offending projects, so ``--json`` consumers can act without parsing text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Stable machine-readable failure codes."""

    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"
    UNKNOWN_PROJECT = "UNKNOWN_PROJECT"
    DUPLICATE_PROJECT = "DUPLICATE_PROJECT"
    SCHEDULING_FAILED = "SCHEDULING_FAILED"
    GRAPH_ERROR = "GRAPH_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_MANIFEST = "INVALID_MANIFEST"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False when ``error`` is set.
        op: Operation name; selects the human renderer (``"plan"``,
            ``"affected"``, ...).
        data: Operation payload. Empty on failure.
        warnings: Diagnostics that did not stop the operation, such as
            skipped manifests.
        error: Failure details when ``ok`` is False.
        meta: Telemetry and other extras, only with ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
