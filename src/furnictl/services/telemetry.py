"""Span timing for service calls, surfaced by ``--verbose``.

A traced service method opens a root span; ``trace_span`` blocks and any
traced methods it calls hang their spans underneath.  Only the outermost
traced call copies the finished tree into ``ServiceResult.meta["telemetry"]``,
so a dashboard built from several analytics calls reports one tree:

    AnalyticsService.dashboard
        kpis
            AnalyticsService.kpis
        ...

With tracing off every hook is a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from furnictl.services.result import ServiceResult

log = structlog.get_logger("furnictl.telemetry")

_tracing: ContextVar[bool] = ContextVar("furnictl_tracing", default=False)
_active_span: ContextVar[Span | None] = ContextVar("furnictl_active_span", default=None)


@dataclass
class Span:
    """One timed step, with nested steps and free-form notes."""

    name: str
    children: list[Span] = field(default_factory=list)
    notes: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def elapsed_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def close(self) -> None:
        if self.finished is None:
            self.finished = time.perf_counter()

    def note(self, **values: Any) -> None:
        self.notes.update(values)

    def open_child(self, name: str) -> Span:
        child = Span(name=name)
        self.children.append(child)
        return child

    def as_dict(self) -> dict[str, Any]:
        """Serialisable tree; renderers read ``name``, ``duration_ms``, ``annotations``."""
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms, 3)}
        if self.notes:
            tree["annotations"] = dict(self.notes)
        if self.children:
            tree["children"] = [child.as_dict() for child in self.children]
        return tree


def enable_tracing() -> None:
    _tracing.set(True)


def disable_tracing() -> None:
    _tracing.set(False)


def current_span() -> Span | None:
    """The innermost open span, or None when tracing is off."""
    return _active_span.get() if _tracing.get() else None


@contextmanager
def _entered(span: Span) -> Iterator[Span]:
    token = _active_span.set(span)
    try:
        yield span
    finally:
        span.close()
        _active_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the open span.

    Yields None (and records nothing) outside a traced call.
    """
    parent = current_span()
    if parent is None:
        yield None
        return
    with _entered(parent.open_child(name)) as span:
        yield span


def traced[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Time a service method.

    A top-level call gets its span tree attached to the returned
    ServiceResult's meta.  A call made while another span is open only
    adds a child span.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if not _tracing.get():
            return func(*args, **kwargs)

        parent = _active_span.get()
        span = parent.open_child(func.__qualname__) if parent else Span(name=func.__qualname__)
        with _entered(span):
            result = func(*args, **kwargs)

        if parent is None and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.as_dict()}
            log.debug("trace.complete", op=result.op, ok=result.ok, ms=round(span.elapsed_ms, 3))
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper
