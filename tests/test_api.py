import pytest

import main
from main import RUNS, app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    RUNS.clear()
    with app.test_client() as c:
        yield c
    RUNS.clear()


@pytest.fixture
def grid(client):
    """2 x 3 lattice; start / goal are the opposite corners."""
    resp = client.post("/api/graph/generate", json={"mode": "grid", "rows": 2, "cols": 3, "spacing": 10})
    assert resp.status_code == 200
    return resp.get_json()


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
def test_default_graph(client):
    data = client.get("/api/graph").get_json()
    assert len(data["vertices"]) == 12
    assert data["edges"]


def test_generate_grid_sets_start_and_goal(client, grid):
    ids = [v["id"] for v in grid["vertices"]]
    assert len(ids) == 6
    assert len(grid["edges"]) == 7

    state = client.get("/api/state").get_json()
    assert state["start"] == ids[0]
    assert state["goal"] == ids[-1]
    assert state["search"] is None


def test_generate_random_with_seed_is_stable(client):
    a = client.post("/api/graph/generate", json={"mode": "random", "vertices": 8, "seed": 5}).get_json()
    b = client.post("/api/graph/generate", json={"mode": "random", "vertices": 8, "seed": 5}).get_json()
    assert [(v["x"], v["y"]) for v in a["vertices"]] == [(v["x"], v["y"]) for v in b["vertices"]]


def test_generate_unknown_mode(client):
    assert client.post("/api/graph/generate", json={"mode": "hex"}).status_code == 400


def test_add_vertex(client, grid):
    resp = client.post("/api/graph/vertex", json={"x": 5, "y": 7, "label": "Q"})
    assert resp.status_code == 201
    vertex = resp.get_json()
    assert vertex["label"] == "Q"

    ids = [v["id"] for v in client.get("/api/graph").get_json()["vertices"]]
    assert vertex["id"] in ids


@pytest.mark.parametrize("payload", [{}, {"x": 1}, {"x": "left", "y": 2}])
def test_add_vertex_needs_coordinates(client, payload):
    assert client.post("/api/graph/vertex", json=payload).status_code == 400


def test_remove_vertex(client, grid):
    start = grid["vertices"][0]["id"]
    resp = client.post("/api/graph/vertex/remove", json={"id": start})
    assert resp.get_json() == {"removed": start}
    assert client.get("/api/state").get_json()["start"] is None
    assert client.post("/api/graph/vertex/remove", json={"id": start}).status_code == 404


def test_connect_and_disconnect(client, grid):
    a, _, c = (v["id"] for v in grid["vertices"][:3])

    resp = client.post("/api/graph/connect", json={"a": a, "b": c, "weight": 25})
    body = resp.get_json()
    assert body["changed"] is True
    assert body["edge"]["weight"] == 25

    again = client.post("/api/graph/connect", json={"a": c, "b": a}).get_json()
    assert again == {"changed": False}

    assert client.post("/api/graph/disconnect", json={"a": a, "b": c}).get_json()["changed"] is True
    assert client.post("/api/graph/disconnect", json={"a": a, "b": c}).get_json() == {"changed": False}


def test_connect_self_is_a_noop(client, grid):
    a = grid["vertices"][0]["id"]
    assert client.post("/api/graph/connect", json={"a": a, "b": a}).get_json() == {"changed": False}


def test_connect_errors(client, grid):
    a, b = grid["vertices"][0]["id"], grid["vertices"][1]["id"]
    assert client.post("/api/graph/connect", json={"a": a, "b": "nope"}).status_code == 404
    assert client.post("/api/graph/connect", json={"a": a, "b": b, "weight": -1}).status_code == 400
    assert client.post("/api/graph/connect", json={"a": a, "b": b, "weight": "heavy"}).status_code == 400


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def test_step_without_search(client):
    assert client.post("/api/search/step").status_code == 409
    assert client.post("/api/search/run").status_code == 409


def test_step_through(client, grid):
    state = client.post("/api/search/start", json={"heuristic": "zero"}).get_json()
    assert state["search"] == "not_started"
    assert state["heuristic"] == "zero"

    first = client.post("/api/search/step").get_json()
    assert first["step"]["kind"] == "begin_search"
    assert first["state"] == "running"
    assert first["step_no"] == 1

    second = client.post("/api/search/step").get_json()
    assert second["step"]["kind"] == "visit_vertex"
    assert second["step"]["vertex"] == state["start"]

    kinds = []
    while True:
        snap = client.post("/api/search/step").get_json()
        if snap["step"] is None:
            break
        kinds.append(snap["step"]["kind"])
    assert kinds[-1] == "end_search"
    assert snap["state"] == "succeeded"

    tags = {v["id"]: v["state"] for v in snap["graph"]["vertices"]}
    assert tags[state["start"]] == "success"
    assert tags[state["goal"]] == "success"


def test_open_list_in_snapshot(client, grid):
    client.post("/api/search/start", json={"heuristic": "zero"})
    for _ in range(3):
        snap = client.post("/api/search/step").get_json()
    # Begin, Visit start, Consider, ... the first neighbour is not open yet
    assert snap["step"]["kind"] == "consider_vertex"
    snap = client.post("/api/search/step").get_json()
    assert snap["step"]["kind"] == "open_vertex"
    assert [e["vertex"] for e in snap["open_list"]] == [snap["step"]["vertex"]]


def test_graph_is_frozen_while_running(client, grid):
    client.post("/api/search/start", json={})
    client.post("/api/search/step")
    a, b = grid["vertices"][0]["id"], grid["vertices"][4]["id"]

    assert client.post("/api/graph/connect", json={"a": a, "b": b}).status_code == 409
    assert client.post("/api/graph/vertex", json={"x": 1, "y": 1}).status_code == 409
    assert client.post("/api/graph/generate", json={"mode": "grid"}).status_code == 409

    client.post("/api/search/reset")
    assert client.post("/api/graph/connect", json={"a": a, "b": b}).status_code == 200


def test_run_returns_metrics(client, grid):
    client.post("/api/search/start", json={"heuristic": "euclidean"})
    body = client.post("/api/search/run").get_json()

    assert body["state"] == "succeeded"
    assert body["steps"][0]["kind"] == "begin_search"
    assert body["steps"][-1]["kind"] == "end_search"
    m = body["metrics"]
    assert m["path_found"] is True
    assert m["path_length"] == 3
    assert m["path_cost"] == pytest.approx(30.0)
    assert m["heuristic"] == "euclidean"

    # finished runs no longer lock the graph
    a, b = grid["vertices"][0]["id"], grid["vertices"][4]["id"]
    assert client.post("/api/graph/connect", json={"a": a, "b": b}).status_code == 200


def test_start_errors(client, grid):
    assert client.post("/api/search/start", json={"start": "nope"}).status_code == 400
    assert client.post("/api/search/start", json={"heuristic": "manhattan"}).status_code == 400
    assert client.post("/api/search/start", json={"heuristic": 3}).status_code == 400


def test_reset(client, grid):
    client.post("/api/search/start", json={})
    client.post("/api/search/step")
    state = client.post("/api/search/reset").get_json()
    assert state["search"] is None
    assert state["steps_taken"] == 0
    assert client.post("/api/search/step").status_code == 409


def test_compare(client, grid):
    body = client.post("/api/search/compare", json={}).get_json()
    assert body["left"]["heuristic"] == "zero"
    assert body["right"]["heuristic"] == "euclidean"
    assert body["left"]["path_cost"] == pytest.approx(body["right"]["path_cost"])
    assert body["winner_path"] == "tie"
    assert body["winner_visited"] in {"zero", "euclidean", "tie"}


def test_compare_needs_endpoints(client, grid):
    assert client.post("/api/search/compare", json={"start": "nope"}).status_code == 400


# ---------------------------------------------------------------------------
# Info
# ---------------------------------------------------------------------------
def test_algorithm(client):
    body = client.get("/api/algorithm").get_json()
    assert body["pseudocode"][0].startswith("def AStar")
    assert set(body["heuristics"]) == {"zero", "euclidean"}
    assert body["default_heuristic"] == "euclidean"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("weight", [float("nan"), float("inf"), True, "heavy", -1])
def test_connect_rejects_non_finite_or_non_numeric_weights(client, grid, weight):
    a, c = grid["vertices"][0]["id"], grid["vertices"][2]["id"]
    resp = client.post("/api/graph/connect", json={"a": a, "b": c, "weight": weight})
    assert resp.status_code == 400

    graph = client.get("/api/graph").get_data(as_text=True)
    assert "NaN" not in graph and "Infinity" not in graph


def _place(client, x, y, label):
    return client.post("/api/graph/vertex", json={"x": x, "y": y, "label": label}).get_json()["id"]


def test_connect_rejects_weights_shorter_than_the_edge(client):
    client.post("/api/graph/generate", json={"mode": "grid", "rows": 0, "cols": 0})
    s, g, m = _place(client, 50, 50, "S"), _place(client, 150, 50, "G"), _place(client, 50, 400, "M")
    client.post("/api/graph/connect", json={"a": s, "b": g})

    assert client.post("/api/graph/connect", json={"a": s, "b": m, "weight": 1}).status_code == 400
    assert client.post("/api/graph/connect", json={"a": s, "b": m, "weight": 350}).status_code == 200
    long_way = (350 ** 2 + 100 ** 2) ** 0.5
    assert client.post("/api/graph/connect", json={"a": m, "b": g, "weight": long_way + 1}).status_code == 200

    client.post("/api/search/start", json={"start": s, "goal": g})
    metrics = client.post("/api/search/run").get_json()["metrics"]
    assert metrics["path_cost"] == pytest.approx(100.0)
    assert metrics["path_length"] == 1


@pytest.mark.parametrize("payload", [
    {"mode": "random", "vertices": "5"},
    {"mode": "random", "radius": [1]},
    {"mode": "grid", "rows": 2.5},
    {"mode": "grid", "seed": True},
    {"mode": "grid", "spacing": float("nan")},
])
def test_generate_rejects_bad_numbers(client, payload):
    assert client.post("/api/graph/generate", json=payload).status_code == 400


# ---------------------------------------------------------------------------
# Run registry
# ---------------------------------------------------------------------------
def test_run_registry_is_capped(monkeypatch):
    monkeypatch.setattr(main.config, "max_runs", 3)
    RUNS.clear()

    clients = [app.test_client() for _ in range(5)]
    for c in clients:
        c.post("/api/graph/generate", json={"mode": "grid", "rows": 2, "cols": 2})
        c.post("/api/search/start", json={})
        assert c.post("/api/search/run").status_code == 200

    assert len(RUNS) == 3
    # the oldest sessions lost their search
    assert clients[0].post("/api/search/step").status_code == 409
    assert clients[-1].post("/api/search/step").status_code == 200
    RUNS.clear()


def test_touching_a_run_keeps_it_alive(monkeypatch):
    monkeypatch.setattr(main.config, "max_runs", 2)
    RUNS.clear()

    first, second, third = (app.test_client() for _ in range(3))
    for c in (first, second):
        c.post("/api/graph/generate", json={"mode": "grid", "rows": 2, "cols": 2})
        c.post("/api/search/start", json={})
    first.post("/api/search/step")

    third.post("/api/graph/generate", json={"mode": "grid", "rows": 2, "cols": 2})
    third.post("/api/search/start", json={})

    assert first.post("/api/search/step").status_code == 200
    assert second.post("/api/search/step").status_code == 409
    RUNS.clear()
