"""
stepper.py — Step-by-Step Search Driver
========================================
The Stepper is the ONLY object a host interacts with during a run.
It validates the inputs, owns the search generator, and hands out one
Step per `step()` call.

State machine:
    NOT_STARTED  →  first step()          →  RUNNING
    RUNNING      →  EndSearch(path)       →  SUCCEEDED
    RUNNING      →  EndSearch()           →  EXHAUSTED
    RUNNING      →  exception in search   →  FAILED (exception re-raised)
    SUCCEEDED / EXHAUSTED / FAILED are terminal: step() returns None from then on.

Thread safety:
  This class is NOT thread-safe and not reentrant.  Drive it from one
  thread, one step() at a time.  Abandoning a run is just not calling
  step() again; there is nothing to close.

The graph must not be edited between the first step() and EndSearch.
"""

import logging
from enum import Enum
from typing import Callable, Generator, Iterable, Iterator, Optional, Tuple, Union

from graph import Edge, Vertex
from astar import AStarSearch, EndSearch, HeuristicFunc, Step, get_heuristic, heuristic_name


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    NOT_STARTED = "not_started"
    RUNNING     = "running"
    SUCCEEDED   = "succeeded"
    EXHAUSTED   = "exhausted"
    FAILED      = "failed"


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state       : Current StepperState.
        steps_taken : Number of Steps handed out so far.
        on_step     : Optional callback(Step) fired for every new Step.
                      A host can hook its re-render here.
    """

    def __init__(
        self,
        vertices: Iterable[Vertex],
        edges: Optional[Iterable[Edge]],
        heuristic: Union[str, HeuristicFunc],
        start: Vertex,
        goal: Vertex,
        on_step: Optional[Callable[[Step], None]] = None,
    ):
        vertices = tuple(vertices)
        if start not in vertices:
            raise ValueError(f"Start vertex {start!r} is not part of the graph")
        if goal not in vertices:
            raise ValueError(f"Goal vertex {goal!r} is not part of the graph")

        h = get_heuristic(heuristic)
        if edges is None:
            edges = {e.id: e for v in vertices for e in v.edges}.values()

        self._search = AStarSearch(vertices, edges, h, start, goal)
        self._generator: Optional[Generator[Step, None, None]] = None
        self._current:   Optional[Step] = None

        self.state:       StepperState = StepperState.NOT_STARTED
        self.steps_taken: int          = 0
        self.on_step:     Optional[Callable[[Step], None]] = on_step

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step(self) -> Optional[Step]:
        """Advance exactly one Step.  None once the run has ended."""
        if self.is_finished:
            return None

        if self._generator is None:
            self._generator = self._search.search()
            self.state = StepperState.RUNNING
            logger.info(
                "search %s → %s started (h=%s, %d vertices)",
                self.start.label, self.goal.label, heuristic_name(self.heuristic), len(self.vertices),
            )

        try:
            step = next(self._generator)
        except Exception:
            # a raising heuristic kills the generator; the run cannot resume
            self.state = StepperState.FAILED
            logger.exception(
                "search %s → %s failed at step %d",
                self.start.label, self.goal.label, self.steps_taken + 1,
            )
            raise
        self._current = step
        self.steps_taken += 1
        logger.debug("step %d: %s", self.steps_taken, step.kind)

        if isinstance(step, EndSearch):
            self.state = StepperState.SUCCEEDED if step.success else StepperState.EXHAUSTED
            self._generator.close()
            logger.info(
                "search %s → %s %s after %d steps",
                self.start.label, self.goal.label, self.state.value, self.steps_taken,
            )

        if self.on_step is not None:
            self.on_step(step)
        return step

    def run(self) -> Iterator[Step]:
        """Yield every remaining Step until the run ends."""
        while True:
            step = self.step()
            if step is None:
                return
            yield step

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        """The most recent Step handed out (None before the first)."""
        return self._current

    @property
    def is_finished(self) -> bool:
        return self.state in (StepperState.SUCCEEDED, StepperState.EXHAUSTED, StepperState.FAILED)

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return self._search.vertices

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._search.edges

    @property
    def heuristic(self) -> HeuristicFunc:
        return self._search.heuristic

    @property
    def start(self) -> Vertex:
        return self._search.start

    @property
    def goal(self) -> Vertex:
        return self._search.goal

    @property
    def search(self) -> AStarSearch:
        """The underlying search, for inspecting its working set."""
        return self._search
