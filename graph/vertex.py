"""
vertex.py — Graph Vertex
========================
A point in the plane that edges hang off.  Vertices own their adjacency:
every incident edge is filed under the neighbour it leads to, so
`connect` / `disconnect` keep both ends in sync and symmetry can never
be left to the caller.

Design decisions:
  - Adjacency is a dict  `neighbour → Edge`, which gives "at most one edge
    per pair" for free.
  - `state` is a visual tag only.  The search writes it, the host reads it;
    nothing in the shortest-path logic ever branches on it except the
    dead-end bookkeeping.
  - Position is used for distance only (edge weight + Euclidean heuristic).
"""

import logging
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from graph.edge import Edge


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# State Enum — shared by vertices and edges
# ---------------------------------------------------------------------------
class State(Enum):
    NONE       = "none"         # not part of any search
    UNVISITED  = "unvisited"    # reset at the start of a search
    INSPECTING = "inspecting"   # being expanded / considered RIGHT NOW
    POTENTIAL  = "potential"    # still part of some possible route
    ELIMINATED = "eliminated"   # provably useless for the rest of the search
    SUCCESS    = "success"      # on the final shortest path


# ---------------------------------------------------------------------------
# Vertex
# ---------------------------------------------------------------------------
class Vertex:
    """
    Attributes:
        id     : Unique identifier (short uuid by default, or user-supplied).
        label  : Human-readable name.
        x, y   : Position, used for distances.
        state  : Current State tag.
    """

    __slots__ = ("id", "label", "x", "y", "state", "_edges")

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
        vertex_id: Optional[str] = None,
    ):
        self.id:     str   = vertex_id or str(uuid.uuid4())[:8]
        self.label:  str   = label or self.id
        self.x:      float = x
        self.y:      float = y
        self.state:  State = State.NONE
        self._edges: Dict["Vertex", "Edge"] = {}

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------
    @property
    def connections(self) -> List["Vertex"]:
        """Neighbouring vertices, in the order they were connected."""
        return list(self._edges.keys())

    @property
    def edges(self) -> List["Edge"]:
        return list(self._edges.values())

    def connect(
        self,
        other: "Vertex",
        weight: Optional[float] = None,
        edge_id: Optional[str] = None,
    ) -> Optional["Edge"]:
        """
        Create an edge to `other` and register it on both ends.
        Returns None (no-op) for a self-loop or an existing connection.
        """
        from graph.edge import Edge

        if other is self or other in self._edges:
            logger.debug("connect %s-%s: no-op", self.label, other.label)
            return None

        if self in other._edges:
            raise RuntimeError(f"Asymmetric adjacency between {self.label} and {other.label}")

        edge = Edge(self, other, weight=weight, edge_id=edge_id)
        self._edges[other] = edge
        other._edges[self] = edge
        return edge

    def disconnect(self, other: "Vertex") -> Optional["Edge"]:
        """Remove the edge to `other` from both ends.  None if not connected."""
        edge = self._edges.pop(other, None)
        if edge is None:
            logger.debug("disconnect %s-%s: not connected", self.label, other.label)
            return None
        if other._edges.pop(self, None) is None:
            raise RuntimeError(f"Asymmetric adjacency between {self.label} and {other.label}")
        return edge

    def is_connected_to(self, other: "Vertex") -> bool:
        return other in self._edges

    def edge_between(self, other: "Vertex") -> "Edge":
        """The edge to `other`.  Asking for a missing edge is a programming error."""
        try:
            return self._edges[other]
        except KeyError:
            raise KeyError(f"{self.label} is not connected to {other.label}") from None

    def live_edge_count(self) -> int:
        """Incident edges that have not been eliminated."""
        return sum(1 for e in self._edges.values() if e.state is not State.ELIMINATED)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Vertex") -> float:
        """Euclidean distance — default edge weight and A* heuristic."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vertex":
        return cls(x=data["x"], y=data["y"], label=data.get("label"), vertex_id=data["id"])

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Vertex(id={self.id}, label={self.label}, state={self.state.value}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Vertex) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
