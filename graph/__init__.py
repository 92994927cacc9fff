"""
graph/
-----
Graph model the editor builds and the search walks.  Public API:

    from graph import Graph, Vertex, Edge, State
"""

from graph.vertex import Vertex, State
from graph.edge   import Edge
from graph.graph  import Graph
from graph.labels import base26

__all__ = [
    "Vertex",    "State",
    "Edge",
    "Graph",
    "base26",
]
