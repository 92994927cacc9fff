"""
heuristics.py — A* Heuristics
==============================
A heuristic takes (current, goal) vertices and returns a non-negative
estimate of the remaining cost.  Two built-ins:

  • zero       – h = 0, A* degrades to uniform-cost (Dijkstra) search
  • euclidean  – straight-line distance, admissible whenever edge
                 weights are at least the distance between endpoints
                 (the default weighting)

Admissibility is the caller's business; the search never checks it.
"""

from typing import Callable, Dict, Union

from graph import Vertex

HeuristicFunc = Callable[[Vertex, Vertex], float]


def zero(current: Vertex, goal: Vertex) -> float:
    """h=0 → A* degrades to Dijkstra.  Useful for teaching."""
    return 0.0


def euclidean(current: Vertex, goal: Vertex) -> float:
    return current.distance_to(goal)


HEURISTICS: Dict[str, HeuristicFunc] = {
    "zero":      zero,
    "euclidean": euclidean,
}


def get_heuristic(heuristic: Union[str, HeuristicFunc, None]) -> HeuristicFunc:
    """Resolve a registry key or pass a callable through."""
    if heuristic is None:
        raise TypeError("A heuristic is required")
    if isinstance(heuristic, str):
        try:
            return HEURISTICS[heuristic]
        except KeyError:
            raise ValueError(f"Unknown heuristic: {heuristic}") from None
    if not callable(heuristic):
        raise TypeError(f"Heuristic must be callable, got {type(heuristic).__name__}")
    return heuristic


def heuristic_name(heuristic: HeuristicFunc) -> str:
    """Registry key for a built-in, otherwise the function's own name."""
    for key, fn in HEURISTICS.items():
        if fn is heuristic:
            return key
    return getattr(heuristic, "__name__", "custom")
