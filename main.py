"""
main.py — A* Stepper Flask API
===============================
JSON host around the search engine: build a graph, pick start / goal,
then pull the search one Step at a time.

Routes:
  GET  /api/graph                – current graph with state tags
  POST /api/graph/generate       – replace with a random / grid graph
  POST /api/graph/vertex         – add a vertex
  POST /api/graph/vertex/remove  – remove a vertex (and its edges)
  POST /api/graph/connect        – connect two vertices
  POST /api/graph/disconnect     – disconnect two vertices
  POST /api/search/start         – create a Stepper for start / goal
  POST /api/search/step          – advance one step
  POST /api/search/run           – run to completion, return metrics
  POST /api/search/reset         – drop the current search
  POST /api/search/compare       – zero vs euclidean on copies of the graph
  GET  /api/algorithm            – pseudocode + available heuristics
  GET  /api/state                – current session state

State management:
  The graph itself lives in the Flask session (serialised).  A live
  Stepper can't be serialised, so each session gets a token and its
  running search sits in the in-process `RUNS` registry under it.
  The registry keeps at most `max_runs` searches and evicts the least
  recently used one.
  Each run works on its own Graph rebuilt from the session, so the tags
  it writes never leak back into the editable copy.

  While a search is RUNNING the graph is frozen: edits return 409.
"""

import logging
import math
import secrets
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from flask import Flask, jsonify, request, session

from config import SearchConfig
from graph import Graph
from astar import HEURISTICS, PSEUDOCODE, Step
from engine import OpenList, Recorder, Stepper, StepperState, compare


config = SearchConfig.from_env()
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = secrets.token_hex(32)


# ---------------------------------------------------------------------------
# Live runs (per session token)
# ---------------------------------------------------------------------------
@dataclass
class Run:
    graph:     Graph
    stepper:   Stepper
    open_list: OpenList   = field(default_factory=OpenList)
    steps:     List[Step] = field(default_factory=list)


# least recently used first; capped at config.max_runs
RUNS: "OrderedDict[str, Run]" = OrderedDict()


def _token() -> str:
    if "token" not in session:
        session["token"] = secrets.token_hex(8)
    return session["token"]


def get_run() -> Optional[Run]:
    token = _token()
    run = RUNS.get(token)
    if run is not None:
        RUNS.move_to_end(token)
    return run


def put_run(run: Run) -> None:
    RUNS[_token()] = run
    RUNS.move_to_end(_token())
    while len(RUNS) > config.max_runs:
        evicted, _ = RUNS.popitem(last=False)
        logger.info("evicted search of session %s", evicted)


def drop_run() -> None:
    RUNS.pop(_token(), None)


def is_running() -> bool:
    run = get_run()
    return run is not None and run.stepper.state is StepperState.RUNNING


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_graph() -> Graph:
    """Deserialise graph from session, or create default."""
    if "graph" not in session:
        session["graph"] = Graph.generate_random(
            num_vertices=config.random_vertices,
            connect_radius=config.random_radius,
            seed=42,
            width=config.canvas_width,
            height=config.canvas_height,
        ).to_dict()
    return Graph.from_dict(session["graph"])


def save_graph(graph: Graph) -> None:
    graph.reset_state()
    session["graph"] = graph.to_dict()
    # any finished run now describes a different graph
    drop_run()


def get_state() -> dict:
    run = get_run()
    return {
        "start":       session.get("start"),
        "goal":        session.get("goal"),
        "heuristic":   session.get("heuristic", config.default_heuristic),
        "search":      run.stepper.state.value if run else None,
        "steps_taken": run.stepper.steps_taken if run else 0,
    }


def error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _number(data: dict, key: str, default, kind=float):
    """Read a finite JSON number from the payload, or `default` when absent."""
    raw = data.get(key)
    if raw is None:
        return default
    # bool is an int subclass; JSON true / false are not numbers here
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
        raise ValueError(f"{key} must be a finite number")
    if kind is int:
        if raw != int(raw):
            raise ValueError(f"{key} must be a whole number")
        return int(raw)
    if raw < 0:
        raise ValueError(f"{key} must not be negative")
    return float(raw)


def _frozen():
    return error("Graph is locked while a search is running", 409)


def _run_snapshot(run: Run, step: Optional[Step]) -> dict:
    return {
        "step":      step.to_dict() if step else None,
        "state":     run.stepper.state.value,
        "step_no":   run.stepper.steps_taken,
        "open_list": run.open_list.to_list(),
        "graph":     run.graph.to_dict(),
    }


# ---------------------------------------------------------------------------
# API: Graph
# ---------------------------------------------------------------------------
@app.route("/api/graph", methods=["GET"])
def api_graph():
    run = get_run()
    graph = run.graph if run else get_graph()
    return jsonify(graph.to_dict())


@app.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    if is_running():
        return _frozen()
    data = _payload()
    mode = data.get("mode", "random")

    try:
        if mode == "random":
            g = Graph.generate_random(
                num_vertices=_number(data, "vertices", config.random_vertices, int),
                connect_radius=_number(data, "radius", config.random_radius),
                seed=_number(data, "seed", None, int),
                width=config.canvas_width,
                height=config.canvas_height,
            )
        elif mode == "grid":
            g = Graph.generate_grid(
                rows=_number(data, "rows", config.grid_rows, int),
                cols=_number(data, "cols", config.grid_cols, int),
                spacing=_number(data, "spacing", config.grid_spacing),
                wall_prob=_number(data, "wall_prob", 0.0),
                seed=_number(data, "seed", None, int),
            )
        else:
            return error(f"Unknown mode: {mode}")
    except ValueError as e:
        return error(str(e))

    save_graph(g)
    ids = g.vertex_ids()
    if len(ids) >= 2:
        session["start"], session["goal"] = ids[0], ids[-1]
    return jsonify(g.to_dict())


@app.route("/api/graph/vertex", methods=["POST"])
def api_graph_vertex():
    if is_running():
        return _frozen()
    data = _payload()
    try:
        x, y = float(data["x"]), float(data["y"])
    except (KeyError, TypeError, ValueError):
        return error("x and y are required numbers")

    g = get_graph()
    try:
        vertex = g.create_vertex(x, y, label=data.get("label"), vertex_id=data.get("id"))
    except ValueError as e:
        return error(str(e))
    save_graph(g)
    return jsonify(vertex.to_dict()), 201


@app.route("/api/graph/vertex/remove", methods=["POST"])
def api_graph_vertex_remove():
    if is_running():
        return _frozen()
    g = get_graph()
    vertex = g.remove_vertex(_payload().get("id", ""))
    if vertex is None:
        return error("Unknown vertex", 404)
    save_graph(g)
    for key in ("start", "goal"):
        if session.get(key) == vertex.id:
            session.pop(key)
    return jsonify({"removed": vertex.id})


@app.route("/api/graph/connect", methods=["POST"])
def api_graph_connect():
    if is_running():
        return _frozen()
    data = _payload()
    g = get_graph()
    a, b = g.get_vertex(str(data.get("a", ""))), g.get_vertex(str(data.get("b", "")))
    if a is None or b is None:
        return error("Unknown vertex", 404)

    try:
        weight = _number(data, "weight", None)
    except ValueError as e:
        return error(str(e))
    # a weight below the straight-line length would make the euclidean heuristic overestimate
    if weight is not None and weight < a.distance_to(b):
        return error(f"weight must be at least the distance between the vertices ({a.distance_to(b):.2f})")

    edge = a.connect(b, weight=weight)
    if edge is None:
        return jsonify({"changed": False})
    save_graph(g)
    return jsonify({"changed": True, "edge": edge.to_dict()})


@app.route("/api/graph/disconnect", methods=["POST"])
def api_graph_disconnect():
    if is_running():
        return _frozen()
    data = _payload()
    g = get_graph()
    try:
        edge = g.disconnect(data.get("a", ""), data.get("b", ""))
    except KeyError as e:
        return error(e.args[0], 404)
    if edge is None:
        return jsonify({"changed": False})
    save_graph(g)
    return jsonify({"changed": True, "edge": edge.id})


# ---------------------------------------------------------------------------
# API: Search
# ---------------------------------------------------------------------------
@app.route("/api/search/start", methods=["POST"])
def api_search_start():
    data = _payload()
    state = get_state()
    start_id  = data.get("start", state["start"])
    goal_id   = data.get("goal", state["goal"])
    heuristic = data.get("heuristic", state["heuristic"])

    graph = get_graph()
    start = graph.get_vertex(start_id) if start_id else None
    goal  = graph.get_vertex(goal_id) if goal_id else None
    if start is None or goal is None:
        return error("Set start and goal to existing vertices first")

    try:
        stepper = Stepper(graph.vertices.values(), graph.edges, heuristic, start, goal)
    except (TypeError, ValueError) as e:
        return error(str(e))

    session["start"], session["goal"], session["heuristic"] = start.id, goal.id, heuristic
    put_run(Run(graph=graph, stepper=stepper))
    logger.info("session %s: search %s → %s", _token(), start.label, goal.label)
    return jsonify(get_state())


@app.route("/api/search/step", methods=["POST"])
def api_search_step():
    run = get_run()
    if run is None:
        return error("No search started", 409)

    step = run.stepper.step()
    if step is not None:
        run.steps.append(step)
        run.open_list.apply(step)
    return jsonify(_run_snapshot(run, step))


@app.route("/api/search/run", methods=["POST"])
def api_search_run():
    run = get_run()
    if run is None:
        return error("No search started", 409)

    rec = Recorder(run.stepper)
    metrics = rec.run_to_completion()
    for step in rec.steps:
        run.steps.append(step)
        run.open_list.apply(step)

    snapshot = _run_snapshot(run, run.stepper.current_step)
    snapshot["steps"] = [s.to_dict() for s in rec.steps]
    snapshot["metrics"] = asdict(metrics)
    return jsonify(snapshot)


@app.route("/api/search/reset", methods=["POST"])
def api_search_reset():
    drop_run()
    return jsonify(get_state())


@app.route("/api/search/compare", methods=["POST"])
def api_search_compare():
    data = _payload()
    state = get_state()
    start_id = data.get("start", state["start"])
    goal_id  = data.get("goal", state["goal"])
    left_h   = data.get("left", "zero")
    right_h  = data.get("right", "euclidean")

    recorders = []
    for h in (left_h, right_h):
        graph = get_graph()   # fresh copy per side
        start = graph.get_vertex(start_id) if start_id else None
        goal  = graph.get_vertex(goal_id) if goal_id else None
        if start is None or goal is None:
            return error("Set start and goal to existing vertices first")
        try:
            rec = Recorder(Stepper(graph.vertices.values(), graph.edges, h, start, goal))
        except (TypeError, ValueError) as e:
            return error(str(e))
        rec.run_to_completion()
        recorders.append(rec)

    return jsonify(asdict(compare(*recorders)))


# ---------------------------------------------------------------------------
# API: Info
# ---------------------------------------------------------------------------
@app.route("/api/algorithm", methods=["GET"])
def api_algorithm():
    return jsonify({
        "pseudocode": PSEUDOCODE,
        "heuristics": list(HEURISTICS),
        "default_heuristic": config.default_heuristic,
    })


@app.route("/api/state", methods=["GET"])
def api_state():
    return jsonify(get_state())


if __name__ == "__main__":
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("A* Stepper API on http://%s:%d", config.host, config.port)
    app.run(debug=config.debug, host=config.host, port=config.port)
