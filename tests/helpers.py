from graph import Graph


def build(positions, edges):
    """
    positions : {label: (x, y)}
    edges     : [(a, b)] or [(a, b, weight)]; labels double as ids
    """
    g = Graph()
    for label, (x, y) in positions.items():
        g.create_vertex(x, y, label=label, vertex_id=label)
    for e in edges:
        g.connect(e[0], e[1], weight=e[2] if len(e) > 2 else None)
    return g


def run_all(stepper):
    return list(stepper.run())
