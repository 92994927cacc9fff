"""
search.py — Resumable A* Search
================================
Generator-based A* over an undirected weighted graph.  The search owns
its working set (open set, visited set, came-from tree, g/f tables) as
plain attributes so it can be inspected between yields, and `search()`
walks the algorithm yielding one Step per observable action.

A generator is already a suspendable state machine: each `next()` runs
the loop body up to the following `yield` and parks there.  The
Stepper in engine/ drives it one event at a time.

On top of textbook A*, the search retires vertices and edges that can no
longer lie on any useful route (see elimination.py).  Those marks are
for the host's picture only; expansion order and the returned path
depend on g-scores and the came-from tree alone.
"""

import heapq
import itertools
from typing import Dict, Generator, Iterable, List, Set, Tuple

from graph import Edge, State, Vertex
from astar.elimination import eliminate_path
from astar.heuristics import HeuristicFunc
from astar.step import (
    BeginSearch,
    ConsiderVertex,
    DiscardPath,
    DiscardPathReason,
    EndSearch,
    OpenVertex,
    Step,
    UpdateVertex,
    VisitVertex,
)


INF = float("inf")


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(start, goal, h):",                              # 0
    "    g[start] ← 0;  f[start] ← h(start)",                  # 1
    "    open_set ← [(f[start], start)]",                      # 2
    "    while open_set:",                                     # 3
    "        node ← open_set.pop_min()",                       # 4
    "        if node in visited: continue",                    # 5
    "        visited.add(node)",                               # 6
    "        if node == goal: return path(node)",              # 7
    "        for nbr in adj(node) - visited:",                 # 8
    "            tentative_g ← g[node] + w(node, nbr)",        # 9
    "            if tentative_g < g[nbr]:",                    # 10
    "                came_from[nbr] ← node",                   # 11
    "                g[nbr] ← tentative_g",                    # 12
    "                f[nbr] ← g[nbr] + h(nbr)",                # 13
    "                open_set.push((f[nbr], nbr))",            # 14
    "    return NOT FOUND",                                    # 15
]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
class AStarSearch:
    """
    One run of A* from `start` to `goal`.  Callers are expected to have
    checked that start / goal belong to `vertices` (the Stepper does).

    Attributes:
        open_set  : Heap of (f, seq, vertex).  May hold stale entries for
                    vertices already visited; they are skipped on pop.
                    `seq` breaks f ties by push order.
        visited   : Vertices expanded so far (each at most once).
        came_from : vertex → predecessor on its best known path.
        g_score   : vertex → best known cost from start (absent = ∞).
        f_score   : vertex → g + h (absent = ∞).
    """

    def __init__(
        self,
        vertices: Iterable[Vertex],
        edges: Iterable[Edge],
        heuristic: HeuristicFunc,
        start: Vertex,
        goal: Vertex,
    ):
        self.vertices:  Tuple[Vertex, ...] = tuple(vertices)
        self.edges:     Tuple[Edge, ...]   = tuple(edges)
        self.heuristic: HeuristicFunc      = heuristic
        self.start:     Vertex             = start
        self.goal:      Vertex             = goal

        self.open_set:  List[Tuple[float, int, Vertex]] = []
        self.visited:   Set[Vertex]                     = set()
        self.came_from: Dict[Vertex, Vertex]            = {}
        self.g_score:   Dict[Vertex, float]             = {}
        self.f_score:   Dict[Vertex, float]             = {}

        self._seq = itertools.count()

    # ------------------------------------------------------------------
    # Generator
    # ------------------------------------------------------------------
    def search(self) -> Generator[Step, None, None]:
        start, goal, h = self.start, self.goal, self.heuristic

        for vertex in self.vertices:
            vertex.state = State.UNVISITED
        for edge in self.edges:
            edge.state = State.UNVISITED

        self.g_score[start] = 0.0
        self.f_score[start] = h(start, goal)
        self._push(start)

        yield BeginSearch()

        while self.open_set:
            _, _, current = heapq.heappop(self.open_set)

            # stale duplicate left behind by an UpdateVertex re-push
            if current in self.visited:
                continue
            self.visited.add(current)

            current.state = State.INSPECTING
            yield VisitVertex(current)

            if current == goal:
                path = self._mark_success(goal)
                yield EndSearch(path=path, cost=self.g_score[goal])
                return

            for neighbor in current.connections:
                if neighbor in self.visited:
                    continue
                yield from self._consider(current, neighbor)

            if current != start and current.live_edge_count() <= 1:
                eliminated = eliminate_path(current, self.came_from)
                if eliminated:
                    yield DiscardPath(current, current, DiscardPathReason.DEAD_END, tuple(eliminated))
            else:
                current.state = State.POTENTIAL

        yield EndSearch()

    def _consider(self, current: Vertex, neighbor: Vertex) -> Generator[Step, None, None]:
        """Relax the edge current → neighbor."""
        edge = current.edge_between(neighbor)
        tentative_g = self.g_score[current] + edge.weight

        edge.state = State.INSPECTING
        yield ConsiderVertex(current, neighbor, tentative_g)

        if tentative_g < self.g_score.get(neighbor, INF):
            already_scored = neighbor in self.g_score

            # the old route in loses: retire what only it was using
            if neighbor in self.came_from:
                eliminated = eliminate_path(neighbor, self.came_from)
                yield DiscardPath(current, neighbor, DiscardPathReason.SHORTER_ROUTE_FOUND, tuple(eliminated))

            f = tentative_g + self.heuristic(neighbor, self.goal)
            self.came_from[neighbor] = current
            self.g_score[neighbor] = tentative_g
            self.f_score[neighbor] = f

            edge.state = State.POTENTIAL
            neighbor.state = State.POTENTIAL
            self._push(neighbor)

            if already_scored:
                yield UpdateVertex(neighbor, tentative_g, f)
            else:
                yield OpenVertex(neighbor, tentative_g, f)
        else:
            edge.state = State.ELIMINATED
            yield DiscardPath(current, neighbor, DiscardPathReason.SHORTER_ROUTE_EXISTS, (current, neighbor))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _push(self, vertex: Vertex) -> None:
        heapq.heappush(self.open_set, (self.f_score[vertex], next(self._seq), vertex))

    def reconstruct_path(self, vertex: Vertex) -> Tuple[Vertex, ...]:
        """Walk came-from back to the root; returned root first."""
        path = [vertex]
        while path[-1] in self.came_from:
            path.append(self.came_from[path[-1]])
        path.reverse()
        return tuple(path)

    def _mark_success(self, goal: Vertex) -> Tuple[Vertex, ...]:
        path = self.reconstruct_path(goal)
        for prev, nxt in zip(path, path[1:]):
            prev.edge_between(nxt).state = State.SUCCESS
        for vertex in path:
            vertex.state = State.SUCCESS
        return path

    def open_vertices(self) -> List[Vertex]:
        """Distinct vertices still waiting in the open set, by f then push order."""
        seen: Set[Vertex] = set()
        result = []
        for _, _, vertex in sorted(self.open_set, key=lambda entry: entry[:2]):
            if vertex not in self.visited and vertex not in seen:
                seen.add(vertex)
                result.append(vertex)
        return result
