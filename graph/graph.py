"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for the graph the editor builds and the search
walks.  The vertices own the adjacency; this container just keeps them
in a stable order and offers id-based lookups on top.

Responsibilities:
  1. CRUD on vertices                        (add / create / remove / get)
  2. Connect / disconnect by id              (symmetric, via Vertex)
  3. Adjacency queries                       (edges, neighbours, edge_between)
  4. Graph-generation factory methods        (random geometric, grid)
  5. Serialisation round-trip                (to_dict / from_dict)
  6. Reset helpers                           (wipe search tags, keep structure)

Design decisions:
  - Vertices stored in a plain dict keyed by id (insertion-ordered), so
    iteration order — and therefore search tie-breaking — is stable.
  - Edges are not stored separately; `edges` derives the distinct set
    from the vertices on demand.  Nothing can go stale.
"""

import math
import random
from typing import Dict, List, Optional, Set, Tuple

from graph.edge import Edge
from graph.labels import base26
from graph.vertex import State, Vertex


class Graph:
    """
    Attributes:
        vertices   : {vertex_id: Vertex}
    """

    def __init__(self):
        self.vertices: Dict[str, Vertex] = {}
        self._next_label: int = 0

    # ==================================================================
    # VERTEX CRUD
    # ==================================================================
    def add_vertex(self, vertex: Vertex) -> Vertex:
        if vertex.id in self.vertices:
            raise ValueError(f"Duplicate vertex id: {vertex.id}")
        self.vertices[vertex.id] = vertex
        return vertex

    def create_vertex(
        self,
        x: float,
        y: float,
        label: Optional[str] = None,
        vertex_id: Optional[str] = None,
    ) -> Vertex:
        """Convenience: create + add in one call.  Unlabelled vertices get A, B, C, …"""
        if label is None:
            label = base26(self._next_label)
            self._next_label += 1
        return self.add_vertex(Vertex(x=x, y=y, label=label, vertex_id=vertex_id))

    def remove_vertex(self, vertex_id: str) -> Optional[Vertex]:
        vertex = self.vertices.pop(vertex_id, None)
        if vertex is None:
            return None
        for nbr in vertex.connections:
            vertex.disconnect(nbr)
        return vertex

    def get_vertex(self, vertex_id: str) -> Optional[Vertex]:
        return self.vertices.get(vertex_id)

    def __contains__(self, vertex: Vertex) -> bool:
        return self.vertices.get(vertex.id) is vertex

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def connect(self, a: str, b: str, weight: Optional[float] = None, edge_id: Optional[str] = None) -> Optional[Edge]:
        """Connect two vertices by id.  None if a == b or they are already connected."""
        return self._require(a).connect(self._require(b), weight=weight, edge_id=edge_id)

    def disconnect(self, a: str, b: str) -> Optional[Edge]:
        """Remove the edge between two vertices.  None if they were not connected."""
        return self._require(a).disconnect(self._require(b))

    def edge_between(self, a: str, b: str) -> Edge:
        return self._require(a).edge_between(self._require(b))

    @property
    def edges(self) -> List[Edge]:
        """Distinct edges, in the order their first endpoint was added."""
        seen: Dict[str, Edge] = {}
        for vertex in self.vertices.values():
            for edge in vertex.edges:
                seen.setdefault(edge.id, edge)
        return list(seen.values())

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, vertex_id: str) -> List[Vertex]:
        return self._require(vertex_id).connections

    def degree(self, vertex_id: str) -> int:
        return len(self._require(vertex_id).edges)

    def _require(self, vertex_id: str) -> Vertex:
        vertex = self.vertices.get(vertex_id)
        if vertex is None:
            raise KeyError(f"Unknown vertex id: {vertex_id}")
        return vertex

    # ==================================================================
    # RESET (keep structure, wipe search tags)
    # ==================================================================
    def reset_state(self) -> None:
        for vertex in self.vertices.values():
            vertex.state = State.NONE
        for edge in self.edges:
            edge.state = State.NONE

    def clear(self) -> None:
        for vertex in list(self.vertices.values()):
            for nbr in vertex.connections:
                vertex.disconnect(nbr)
        self.vertices.clear()
        self._next_label = 0

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "vertices": [v.to_dict() for v in self.vertices.values()],
            "edges":    [e.to_dict() for e in self.edges],
            "next_label": self._next_label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        for vd in data.get("vertices", []):
            g.add_vertex(Vertex.from_dict(vd))
        for ed in data.get("edges", []):
            weight = ed.get("weight") if ed.get("explicit_weight") else None
            g.connect(ed["a"], ed["b"], weight=weight, edge_id=ed.get("id"))
        g._next_label = data.get("next_label", len(g.vertices))
        return g

    # ==================================================================
    # GENERATORS — Factory class-methods
    # ==================================================================

    # ---------- Random Geometric Graph ----------
    @classmethod
    def generate_random(
        cls,
        num_vertices: int = 12,
        connect_radius: float = 200.0,
        seed: Optional[int] = None,
        width: float = 800,
        height: float = 500,
    ) -> "Graph":
        """
        Scatter vertices over the canvas and connect every pair closer
        than `connect_radius`.  Weights are the Euclidean lengths, so the
        straight-line heuristic stays admissible.
        """
        rng = random.Random(seed)
        g = cls()
        margin = 40

        verts: List[Vertex] = []
        for _ in range(num_vertices):
            x = rng.uniform(margin, width - margin)
            y = rng.uniform(margin, height - margin)
            verts.append(g.create_vertex(x, y))

        for i, a in enumerate(verts):
            for b in verts[i + 1:]:
                if a.distance_to(b) <= connect_radius:
                    a.connect(b)

        # guarantee connectivity: bridge every stray component to the nearest
        # vertex already reachable from the first one
        if verts:
            reached = _component(verts[0])
            for v in verts[1:]:
                if v in reached:
                    continue
                stray = _component(v)
                a, b = min(
                    ((s, r) for s in stray for r in reached),
                    key=lambda pair: pair[0].distance_to(pair[1]),
                )
                a.connect(b)
                reached |= stray

        return g

    # ---------- Grid Graph ----------
    @classmethod
    def generate_grid(
        cls,
        rows: int = 5,
        cols: int = 7,
        spacing: float = 80.0,
        wall_prob: float = 0.0,
        seed: Optional[int] = None,
    ) -> "Graph":
        """
        4-connected lattice.  If wall_prob > 0 some interior vertices are
        left out → maze feel.
        """
        rng = random.Random(seed)
        g = cls()
        pad = 50

        cells: Dict[Tuple[int, int], Vertex] = {}
        for r in range(rows):
            for c in range(cols):
                interior = 0 < r < rows - 1 and 0 < c < cols - 1
                if interior and rng.random() < wall_prob:
                    continue
                cells[(r, c)] = g.create_vertex(pad + c * spacing, pad + r * spacing)

        for (r, c), vertex in cells.items():
            for dr, dc in ((0, 1), (1, 0)):   # right and down; edges are undirected
                nbr = cells.get((r + dr, c + dc))
                if nbr is not None:
                    vertex.connect(nbr)

        return g

    # ---------- Circle Layout from Edge List ----------
    @classmethod
    def from_edge_list(
        cls,
        pairs: List[Tuple[str, str]],
        radius: float = 200.0,
        center: Tuple[float, float] = (400.0, 250.0),
    ) -> "Graph":
        """
        Build a graph from label pairs, laying the vertices out on a
        circle.  Labels double as ids.
        """
        g = cls()
        labels: List[str] = []
        for a, b in pairs:
            for lbl in (a, b):
                if lbl not in labels:
                    labels.append(lbl)

        n = len(labels)
        for i, lbl in enumerate(labels):
            angle = 2 * math.pi * i / max(n, 1)
            g.add_vertex(Vertex(
                x=center[0] + radius * math.cos(angle),
                y=center[1] + radius * math.sin(angle),
                label=lbl,
                vertex_id=lbl,
            ))
        for a, b in pairs:
            g.connect(a, b)
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    def vertex_ids(self) -> List[str]:
        return list(self.vertices.keys())

    def __repr__(self) -> str:
        return f"Graph(vertices={self.vertex_count()}, edges={self.edge_count()})"


def _component(vertex: Vertex) -> Set[Vertex]:
    """Every vertex reachable from `vertex`."""
    seen = {vertex}
    stack = [vertex]
    while stack:
        for nbr in stack.pop().connections:
            if nbr not in seen:
                seen.add(nbr)
                stack.append(nbr)
    return seen
