"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete search run (all Steps), then computes the analytics
the host shows after a run and in Comparison Mode.

Usage:
    rec = Recorder(Stepper(g.vertices.values(), None, "euclidean", a, b))
    rec.run_to_completion()          # drains the stepper
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable snapshot for save/replay

Comparison Mode:
    Run two Recorders on copies of the SAME graph (say, zero vs euclidean
    heuristic), then compare(rec1, rec2) → ComparisonResult.

Replay:
    replay(vertices, steps) rebuilds every vertex / edge State tag from
    the event stream alone.  A host that only keeps the Steps can redraw
    any run without touching the graph's live tags.
"""

import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from graph import State, Vertex
from astar import (
    BeginSearch,
    ConsiderVertex,
    DiscardPath,
    DiscardPathReason,
    EndSearch,
    OpenVertex,
    Step,
    UpdateVertex,
    VisitVertex,
    heuristic_name,
)
from engine.stepper import Stepper


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    start:              str   = ""
    goal:               str   = ""
    heuristic:          str   = ""
    vertices_visited:   int   = 0
    edges_considered:   int   = 0
    vertices_opened:    int   = 0
    vertices_updated:   int   = 0
    paths_discarded:    Dict[str, int] = field(default_factory=dict)   # reason → count
    path_length:        int   = 0          # number of edges on the final path
    path_cost:          float = 0.0        # total weight of the final path
    total_steps:        int   = 0          # number of Steps yielded
    wall_time_ms:       float = 0.0        # wall-clock time to run to completion
    memory_bytes:       int   = 0          # approx size of the step buffer
    path_found:         bool  = False


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_visited: str = ""   # which heuristic expanded fewer vertices
    winner_steps:   str = ""
    winner_path:    str = ""   # which found the cheaper path (tie when both admissible)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        stepper : The Stepper being recorded.
        steps   : Every Step pulled from it so far.
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self, stepper: Stepper):
        self.stepper: Stepper              = stepper
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def record_step(self) -> Optional[Step]:
        """Advance the stepper once, keeping the Step."""
        step = self.stepper.step()
        if step is not None:
            self.steps.append(step)
        return step

    def run_to_completion(self) -> RunMetrics:
        """Drain the stepper, record every step, compute metrics."""
        started = time.monotonic()
        for step in self.stepper.run():
            self.steps.append(step)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "start":     self.stepper.start.id,
            "goal":      self.stepper.goal.id,
            "heuristic": heuristic_name(self.stepper.heuristic),
            "state":     self.stepper.state.value,
            "metrics":   asdict(self.metrics) if self.metrics else {},
            "steps":     [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        metrics = RunMetrics(
            start=self.stepper.start.id,
            goal=self.stepper.goal.id,
            heuristic=heuristic_name(self.stepper.heuristic),
            total_steps=len(self.steps),
            wall_time_ms=round(wall_ms, 2),
        )

        for step in self.steps:
            if isinstance(step, VisitVertex):
                metrics.vertices_visited += 1
            elif isinstance(step, ConsiderVertex):
                metrics.edges_considered += 1
            elif isinstance(step, OpenVertex):
                metrics.vertices_opened += 1
            elif isinstance(step, UpdateVertex):
                metrics.vertices_updated += 1
            elif isinstance(step, DiscardPath):
                key = step.reason.value
                metrics.paths_discarded[key] = metrics.paths_discarded.get(key, 0) + 1
            elif isinstance(step, EndSearch):
                metrics.path_found = step.success
                metrics.path_cost = step.cost
                metrics.path_length = len(step.path) - 1 if len(step.path) > 1 else 0

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s)
        metrics.memory_bytes = mem

        return metrics


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val):
        if l_val == r_val:
            return "tie"
        return l.heuristic if l_val < r_val else r.heuristic

    return ComparisonResult(
        left=l,
        right=r,
        winner_visited=winner(l.vertices_visited, r.vertices_visited),
        winner_steps=winner(l.total_steps, r.total_steps),
        winner_path=winner(l.path_cost, r.path_cost),
    )


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------
def replay(vertices: Iterable[Vertex], steps: Iterable[Step]) -> Tuple[Dict[str, State], Dict[str, State]]:
    """
    Fold a Step stream into final tags: ({vertex_id: State}, {edge_id: State}).
    Reads only topology from `vertices`, never their live `state`.
    """
    vertices = list(vertices)
    v_states: Dict[str, State] = {v.id: State.NONE for v in vertices}
    e_states: Dict[str, State] = {e.id: State.NONE for v in vertices for e in v.edges}

    expanding: Optional[Vertex] = None      # visited vertex whose expansion is still open
    last_edge: Optional[str]    = None      # edge of the latest ConsiderVertex

    def finish_expansion():
        # an expansion that did not end in a dead end leaves the vertex potential
        nonlocal expanding
        if expanding is not None:
            v_states[expanding.id] = State.POTENTIAL
            expanding = None

    for step in steps:
        if isinstance(step, BeginSearch):
            for key in v_states:
                v_states[key] = State.UNVISITED
            for key in e_states:
                e_states[key] = State.UNVISITED
            expanding = None

        elif isinstance(step, VisitVertex):
            finish_expansion()
            v_states[step.vertex.id] = State.INSPECTING
            expanding = step.vertex

        elif isinstance(step, ConsiderVertex):
            last_edge = step.source.edge_between(step.target).id
            e_states[last_edge] = State.INSPECTING

        elif isinstance(step, (OpenVertex, UpdateVertex)):
            # always preceded by the ConsiderVertex for the same edge
            v_states[step.vertex.id] = State.POTENTIAL
            e_states[last_edge] = State.POTENTIAL

        elif isinstance(step, DiscardPath):
            if step.reason is DiscardPathReason.SHORTER_ROUTE_EXISTS:
                e_states[step.source.edge_between(step.target).id] = State.ELIMINATED
                continue
            if not step.path:
                continue
            for prev, nxt in zip(step.path, step.path[1:]):
                v_states[nxt.id] = State.ELIMINATED
                e_states[nxt.edge_between(prev).id] = State.ELIMINATED
            root = step.path[0]
            if all(e_states[e.id] is State.ELIMINATED for e in root.edges):
                v_states[root.id] = State.ELIMINATED
            if step.reason is DiscardPathReason.DEAD_END:
                expanding = None

        elif isinstance(step, EndSearch):
            finish_expansion()
            for prev, nxt in zip(step.path, step.path[1:]):
                e_states[prev.edge_between(nxt).id] = State.SUCCESS
            for vertex in step.path:
                v_states[vertex.id] = State.SUCCESS

    return v_states, e_states
