"""
astar/
------
The incremental A* search: heuristics, the step vocabulary, path
elimination and the resumable search itself.

    from astar import AStarSearch, HEURISTICS, VisitVertex, ...
"""

from astar.heuristics  import HEURISTICS, HeuristicFunc, euclidean, get_heuristic, heuristic_name, zero
from astar.step        import (
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
from astar.elimination import eliminate_path
from astar.search      import PSEUDOCODE, AStarSearch

__all__ = [
    "AStarSearch",
    "PSEUDOCODE",
    "eliminate_path",
    # heuristics
    "HEURISTICS",
    "HeuristicFunc",
    "euclidean",
    "zero",
    "get_heuristic",
    "heuristic_name",
    # steps
    "Step",
    "BeginSearch",
    "VisitVertex",
    "ConsiderVertex",
    "OpenVertex",
    "UpdateVertex",
    "DiscardPath",
    "DiscardPathReason",
    "EndSearch",
]
