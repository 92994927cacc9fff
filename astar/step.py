"""
step.py — Search Step Events
=============================
The search is a generator that yields one Step per observable unit of
progress.  Unlike a frame snapshot, a Step says what just HAPPENED; the
host folds the stream into whatever picture it wants (vertex colours,
an open-list panel, a log).

Vocabulary (closed set, in the order a run produces them):

    BeginSearch                                    exactly once, first
    VisitVertex(vertex)                            vertex popped + expanded
    ConsiderVertex(source, target, g_score)        neighbour edge examined
    OpenVertex(vertex, g_score, f_score)           first score recorded
    UpdateVertex(vertex, g_score, f_score)         cheaper path recorded
    DiscardPath(source, target, reason, path)      vertices / edge retired
    EndSearch(path, cost)                          exactly once, last

Design decisions:
  - Every Step is a frozen dataclass.  Once yielded the search keeps no
    reference, so the caller owns it outright.
  - Vertices travel as references; `to_dict()` flattens them to ids for
    JSON.
  - `describe()` is the plain-English "why" line for a learning panel.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple

from graph import Vertex


class DiscardPathReason(Enum):
    DEAD_END             = "dead_end"               # the path leads nowhere new
    SHORTER_ROUTE_FOUND  = "shorter_route_found"    # the old path into `target` lost
    SHORTER_ROUTE_EXISTS = "shorter_route_exists"   # `source` → `target` is not an improvement


@dataclass(frozen=True)
class Step:
    """Base class for every search event."""

    kind: ClassVar[str] = "step"

    def describe(self) -> str:
        return self.kind

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "explanation": self.describe()}


@dataclass(frozen=True)
class BeginSearch(Step):
    kind: ClassVar[str] = "begin_search"

    def describe(self) -> str:
        return "Search started: every vertex and edge reset, start pushed into the open set."


@dataclass(frozen=True)
class VisitVertex(Step):
    vertex: Vertex

    kind: ClassVar[str] = "visit_vertex"

    def describe(self) -> str:
        return f"Pop '{self.vertex.label}' (lowest f-score) and expand it."

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "vertex": self.vertex.id}


@dataclass(frozen=True)
class ConsiderVertex(Step):
    source:  Vertex
    target:  Vertex
    g_score: float

    kind: ClassVar[str] = "consider_vertex"

    def describe(self) -> str:
        return (
            f"Consider {self.source.label}→{self.target.label}: "
            f"tentative g={self.g_score:.2f}."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "source":  self.source.id,
            "target":  self.target.id,
            "g_score": self.g_score,
        }


@dataclass(frozen=True)
class OpenVertex(Step):
    vertex:  Vertex
    g_score: float
    f_score: float

    kind: ClassVar[str] = "open_vertex"

    def describe(self) -> str:
        return (
            f"'{self.vertex.label}' enters the open set: "
            f"g={self.g_score:.2f}, f={self.f_score:.2f}."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "vertex":  self.vertex.id,
            "g_score": self.g_score,
            "f_score": self.f_score,
        }


@dataclass(frozen=True)
class UpdateVertex(Step):
    vertex:  Vertex
    g_score: float
    f_score: float

    kind: ClassVar[str] = "update_vertex"

    def describe(self) -> str:
        return (
            f"Cheaper path to '{self.vertex.label}' found: "
            f"g={self.g_score:.2f}, f={self.f_score:.2f}. UPDATE!"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "vertex":  self.vertex.id,
            "g_score": self.g_score,
            "f_score": self.f_score,
        }


@dataclass(frozen=True)
class DiscardPath(Step):
    """
    Attributes:
        source : Vertex being expanded (for DEAD_END, the dead end itself).
        target : Vertex the discarded path led to.
        reason : Why it was discarded.
        path   : Retired vertices, root first.  For SHORTER_ROUTE_EXISTS
                 just (source, target): only the edge between them goes.
    """

    source: Vertex
    target: Vertex
    reason: DiscardPathReason
    path:   Tuple[Vertex, ...]

    kind: ClassVar[str] = "discard_path"

    def describe(self) -> str:
        trail = " → ".join(v.label for v in self.path)
        if self.reason is DiscardPathReason.DEAD_END:
            return f"'{self.target.label}' is a dead end. Discard {trail}."
        if self.reason is DiscardPathReason.SHORTER_ROUTE_FOUND:
            return f"Shorter route to '{self.target.label}' found. Discard old path {trail}."
        return (
            f"A route to '{self.target.label}' at least as short already exists. "
            f"Discard edge {self.source.label}→{self.target.label}."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "source": self.source.id,
            "target": self.target.id,
            "reason": self.reason.value,
            "path":   [v.id for v in self.path],
        }


@dataclass(frozen=True)
class EndSearch(Step):
    path: Tuple[Vertex, ...] = ()
    cost: float = 0.0

    kind: ClassVar[str] = "end_search"

    @property
    def success(self) -> bool:
        return bool(self.path)

    def describe(self) -> str:
        if not self.success:
            return "Open set empty. Goal not reachable."
        trail = " → ".join(v.label for v in self.path)
        return f"Goal '{self.path[-1].label}' reached! Optimal cost = {self.cost:.2f}. Path: {trail}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "success": self.success,
            "path":    [v.id for v in self.path],
            "cost":    self.cost,
        }
