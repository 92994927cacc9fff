"""
elimination.py — Path Elimination
==================================
Bookkeeping for the visual trace only.  When the best path into a vertex
is replaced, or a vertex turns out to be a dead end, walk back up the
came-from tree retiring every vertex (and the edge behind it) that no
other route can still use.  The walk stops at the first ancestor that
keeps more than one live edge: it is still load-bearing.

Nothing here feeds back into g-scores or the open set, so skipping it
would find the same path and merely draw it less clearly.
"""

from collections import deque
from typing import Deque, List, Mapping

from graph import State, Vertex


def eliminate_path(vertex: Vertex, came_from: Mapping[Vertex, Vertex]) -> List[Vertex]:
    """
    Retire the tail of the came-from chain ending at `vertex`.

    Returns the affected vertices root first.  The root is included even
    when it keeps live edges (and so stays un-eliminated).  A vertex that
    is already fully retired yields an empty list and changes nothing.
    """
    parent = came_from.get(vertex)
    if vertex.state is State.ELIMINATED and (
        parent is None or vertex.edge_between(parent).state is State.ELIMINATED
    ):
        return []

    eliminated: Deque[Vertex] = deque()
    current = vertex
    while current in came_from:
        previous = came_from[current]
        eliminated.appendleft(current)
        current.state = State.ELIMINATED
        current.edge_between(previous).state = State.ELIMINATED
        current = previous

        # an ancestor with more than one live edge still serves another route
        if current.live_edge_count() > 1:
            break

    eliminated.appendleft(current)
    if current.live_edge_count() == 0:
        current.state = State.ELIMINATED

    return list(eliminated)
