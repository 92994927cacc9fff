"""
open_list.py — Open-Set Side Panel Model
=========================================
Host-side mirror of the search frontier, kept purely from the Step
stream: a card per open vertex showing its g and f, ordered by f.

    panel = OpenList()
    for step in stepper.run():
        panel.apply(step)
        render(panel.entries)
"""

import itertools
from dataclasses import dataclass
from typing import Dict, List

from graph import Vertex
from astar import BeginSearch, EndSearch, OpenVertex, Step, UpdateVertex, VisitVertex


@dataclass
class OpenEntry:
    vertex:  Vertex
    g_score: float
    f_score: float
    order:   int = 0       # insertion order, breaks f ties

    def to_dict(self) -> dict:
        return {
            "vertex":  self.vertex.id,
            "label":   self.vertex.label,
            "g_score": self.g_score,
            "f_score": self.f_score,
        }


class OpenList:
    """Open vertices keyed by id; `entries` returns them sorted by f."""

    def __init__(self):
        self._entries: Dict[str, OpenEntry] = {}
        self._order = itertools.count()

    def apply(self, step: Step) -> None:
        if isinstance(step, BeginSearch):
            self._entries.clear()
        elif isinstance(step, OpenVertex):
            self._entries[step.vertex.id] = OpenEntry(step.vertex, step.g_score, step.f_score, next(self._order))
        elif isinstance(step, UpdateVertex):
            entry = self._entries.get(step.vertex.id)
            if entry is None:
                # panel attached mid-run, never saw the OpenVertex
                self._entries[step.vertex.id] = OpenEntry(step.vertex, step.g_score, step.f_score, next(self._order))
            else:
                entry.g_score = step.g_score
                entry.f_score = step.f_score
        elif isinstance(step, VisitVertex):
            self._entries.pop(step.vertex.id, None)
        elif isinstance(step, EndSearch) and not step.success:
            self._entries.clear()

    @property
    def entries(self) -> List[OpenEntry]:
        return sorted(self._entries.values(), key=lambda e: (e.f_score, e.order))

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self.entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, vertex: Vertex) -> bool:
        return vertex.id in self._entries
