"""Stage timing for kernel invocations.

``run`` is wrapped with :func:`traced`; ``execute`` opens one
:func:`trace_span` per pipeline stage. With telemetry off (the default)
both reduce to a ContextVar lookup. With ``--verbose`` the root span's
tree lands in ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from relcore.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("relcore_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("relcore_active_span", default=None)

log = structlog.get_logger("relcore.telemetry")


@dataclass
class Span:
    """One timed region; children are the stages opened while it was active."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        end = self.finished if self.finished is not None else self.started
        return (end - self.started) * 1000

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def open_child(self, name: str) -> Span:
        child = Span(name=name)
        self.children.append(child)
        return child

    def close(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage under the active span; yields None when there is none."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _activate(parent.open_child(name)) as child:
        yield child


P = ParamSpec("P")


def traced(func: Callable[P, ServiceResult]) -> Callable[P, ServiceResult]:
    """Make *func* the root span and attach its tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        with _activate(root):
            result = func(*args, **kwargs)
        root.annotate("ok", result.ok)
        log.debug(
            "span.complete",
            span_name=root.name,
            duration_ms=round(root.duration_ms, 2),
            ok=result.ok,
            stages=[child.name for child in root.children],
        )
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, for ad-hoc annotations inside a stage."""
    return _active.get() if _enabled.get() else None
