"""Planning telemetry: phase spans for ``--verbose`` runs.

A ``@traced`` service call opens a root span; ``trace_span`` blocks inside
it record the planning phases (discovery, graph build, scheduling) as
children. The finished tree lands in ``ServiceResult.meta["telemetry"]``.
With tracing off every hook is a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from wsplan.services.result import ServiceResult

_tracing_enabled: ContextVar[bool] = ContextVar("wsplan_tracing_enabled", default=False)
_active_span: ContextVar[Span | None] = ContextVar("wsplan_active_span", default=None)

_log = structlog.get_logger("wsplan.telemetry")


@dataclass
class Span:
    """One timed phase, with nested phases and counters."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started_at: float = field(default_factory=time.perf_counter)
    finished_at: float | None = None

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; 0.0 while the span is still open."""
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at) * 1000

    def finish(self) -> None:
        self.finished_at = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready tree; empty ``annotations`` / ``children`` are omitted."""
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Record a phase under the active span.

    Yields None when tracing is off or no ``@traced`` call is running, so
    callers guard annotations with ``if span:``.
    """
    parent = _active_span.get() if _tracing_enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name)
    parent.children.append(span)
    token = _active_span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active_span.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service operation and attach its span tree to the result's meta."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _tracing_enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _active_span.set(root)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = True
        finally:
            root.finish()
            _active_span.reset(token)
            _log.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                phases=[child.name for child in root.children],
                ok=ok,
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn tracing on for the current context (``--verbose``)."""
    _tracing_enabled.set(True)


def disable_telemetry() -> None:
    _tracing_enabled.set(False)
