"""
edge.py — Graph Edge
====================
Joins two distinct vertices.  Undirected: `a` and `b` are just the order
the endpoints were given in.

Design decisions:
  - Endpoints are Vertex references, not ids.  The search walks from an
    edge to its far end constantly and the vertices already own the
    adjacency, so there is nothing to serialise through here.
  - Weight defaults to the Euclidean distance between the endpoints and
    is read live, so dragging a vertex in the editor keeps it honest.
    An explicit weight pins it.
  - `state` is the same tag enum vertices use.
"""

import uuid
from typing import Optional

from graph.vertex import State, Vertex


class Edge:
    """
    Attributes:
        id     : Unique identifier.
        a, b   : The two endpoints (never equal).
        state  : State tag for visual encoding.
    """

    __slots__ = ("id", "a", "b", "state", "_weight")

    def __init__(self, a: Vertex, b: Vertex, weight: Optional[float] = None, edge_id: Optional[str] = None):
        if a == b:
            raise ValueError(f"Edge endpoints must differ, got {a.label} twice")
        self.id:      str             = edge_id or str(uuid.uuid4())[:8]
        self.a:       Vertex          = a
        self.b:       Vertex          = b
        self.state:   State           = State.NONE
        self._weight: Optional[float] = weight

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def weight(self) -> float:
        """Traversal cost."""
        if self._weight is not None:
            return self._weight
        return self.a.distance_to(self.b)

    @property
    def has_explicit_weight(self) -> bool:
        return self._weight is not None

    def is_incident_to(self, vertex: Vertex) -> bool:
        return vertex == self.a or vertex == self.b

    def other_end(self, vertex: Vertex) -> Vertex:
        """Given one endpoint, return the other."""
        if vertex == self.a:
            return self.b
        if vertex == self.b:
            return self.a
        raise ValueError(f"{vertex.label} is not an endpoint of {self!r}")

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":              self.id,
            "a":               self.a.id,
            "b":               self.b.id,
            "weight":          self.weight,
            "explicit_weight": self.has_explicit_weight,
            "state":           self.state.value,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.a.label} ↔ {self.b.label}, w={self.weight:.2f}, state={self.state.value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
