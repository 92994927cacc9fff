from types import SimpleNamespace

import pytest

from graph import Graph, State
from astar import EndSearch
from engine import Recorder, RunMetrics, Stepper, compare, replay

from helpers import build, run_all


def _recorder(g, start, goal, h="zero"):
    return Recorder(Stepper(g.vertices.values(), g.edges, h, g.get_vertex(start), g.get_vertex(goal)))


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------
def test_metrics_for_triangle(triangle):
    rec = _recorder(triangle, "B", "C")
    m = rec.run_to_completion()

    assert rec.get_metrics() is m
    assert m.start == "B" and m.goal == "C"
    assert m.heuristic == "zero"
    assert m.vertices_visited == 3
    assert m.edges_considered == 3
    assert m.vertices_opened == 2
    assert m.vertices_updated == 1
    assert m.paths_discarded == {"shorter_route_found": 1}
    assert m.path_found
    assert m.path_length == 2
    assert m.path_cost == pytest.approx(3.0)
    assert m.total_steps == 12 == len(rec.steps)
    assert m.wall_time_ms >= 0
    assert m.memory_bytes > 0


def test_metrics_when_unreachable(disconnected):
    m = _recorder(disconnected, "A", "B").run_to_completion()
    assert not m.path_found
    assert m.path_length == 0
    assert m.path_cost == 0.0
    assert m.total_steps == 3


def test_record_step_keeps_every_step(pair):
    rec = _recorder(pair, "A", "B")
    while rec.record_step() is not None:
        pass
    assert isinstance(rec.steps[-1], EndSearch)
    assert len(rec.steps) == rec.stepper.steps_taken
    assert rec.get_metrics() is None


def test_export(triangle):
    rec = _recorder(triangle, "B", "C", "euclidean")
    rec.run_to_completion()
    data = rec.export()

    assert data["start"] == "B"
    assert data["goal"] == "C"
    assert data["heuristic"] == "euclidean"
    assert data["state"] == "succeeded"
    assert data["metrics"]["vertices_visited"] == 3
    assert data["steps"][0]["kind"] == "begin_search"
    assert data["steps"][-1]["path"] == ["B", "A", "C"]


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------
def _done(metrics):
    return SimpleNamespace(metrics=metrics)


def test_compare_picks_winners():
    left = RunMetrics(heuristic="zero", vertices_visited=9, total_steps=40, path_cost=7.0)
    right = RunMetrics(heuristic="euclidean", vertices_visited=4, total_steps=40, path_cost=7.0)

    result = compare(_done(left), _done(right))

    assert result.left is left and result.right is right
    assert result.winner_visited == "euclidean"
    assert result.winner_steps == "tie"
    assert result.winner_path == "tie"


def test_compare_runs_on_copies():
    data = Graph.generate_random(num_vertices=14, seed=11).to_dict()
    recs = []
    for h in ("zero", "euclidean"):
        g = Graph.from_dict(data)
        ids = g.vertex_ids()
        rec = _recorder(g, ids[0], ids[-1], h)
        rec.run_to_completion()
        recs.append(rec)

    result = compare(*recs)
    assert result.left.heuristic == "zero"
    assert result.right.heuristic == "euclidean"
    assert result.left.path_cost == pytest.approx(result.right.path_cost)
    # an informed heuristic never expands more than uniform-cost search here
    assert result.right.vertices_visited <= result.left.vertices_visited


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------
def _live(stepper):
    v_states = {v.id: v.state for v in stepper.vertices}
    e_states = {e.id: e.state for e in stepper.edges}
    return v_states, e_states


@pytest.mark.parametrize("fixture,start,goal", [
    ("pair", "A", "B"),
    ("disconnected", "A", "B"),
    ("triangle", "B", "C"),
    ("spur", "S", "G"),
    ("diamond", "S", "G"),
])
def test_replay_matches_live_tags_on_fixtures(request, fixture, start, goal):
    g = request.getfixturevalue(fixture)
    stepper = Stepper(g.vertices.values(), g.edges, "zero", g.get_vertex(start), g.get_vertex(goal))
    steps = run_all(stepper)

    assert replay(g.vertices.values(), steps) == _live(stepper)


@pytest.mark.parametrize("seed", range(10))
def test_replay_matches_live_tags_on_random_graphs(seed):
    g = Graph.generate_random(num_vertices=18, connect_radius=170, seed=seed)
    ids = g.vertex_ids()
    stepper = Stepper(g.vertices.values(), g.edges, "euclidean", g.get_vertex(ids[0]), g.get_vertex(ids[-1]))
    steps = run_all(stepper)

    assert replay(g.vertices.values(), steps) == _live(stepper)


def test_replay_of_a_prefix(triangle):
    stepper = Stepper(
        triangle.vertices.values(), triangle.edges, "zero",
        triangle.get_vertex("B"), triangle.get_vertex("C"),
    )
    steps = [stepper.step() for _ in range(4)]   # Begin, Visit B, Consider B-A, Open A

    v_states, e_states = replay(triangle.vertices.values(), steps)
    assert v_states["B"] is State.INSPECTING
    assert v_states["A"] is State.POTENTIAL
    assert v_states["C"] is State.UNVISITED
    assert e_states[triangle.edge_between("B", "A").id] is State.POTENTIAL


def test_replay_ignores_live_tags(triangle):
    stepper = Stepper(
        triangle.vertices.values(), triangle.edges, "zero",
        triangle.get_vertex("B"), triangle.get_vertex("C"),
    )
    steps = run_all(stepper)
    expected = _live(stepper)

    triangle.reset_state()
    assert replay(triangle.vertices.values(), steps) == expected


def test_replay_without_steps_is_untouched():
    g = build({"A": (0, 0), "B": (1, 0)}, [("A", "B")])
    v_states, e_states = replay(g.vertices.values(), [])
    assert set(v_states.values()) == {State.NONE}
    assert set(e_states.values()) == {State.NONE}
