"""Route inspection (Chinese Postman) for street networks."""
from postman.cpp import ChinesePostmanProblem, PostmanSolution
from postman.errors import GraphInconsistency, ParseError, PostmanError, StallError
from postman.graph import Edge, Graph, Intersection, Node, build_graph
from postman.matrix import MAX, LabelledMatrix
from postman.munkres import Matching, MatchedPair, Munkres, linear_assignment, match_labels
from postman.odd_nodes import OddNodes, extract_odd_nodes, odd_degree_nodes
from postman.shortest_paths import ShortestPaths, all_pairs_shortest_paths, floyd_warshall

__version__ = "0.1.0"

__all__ = [
    "MAX",
    "ChinesePostmanProblem",
    "Edge",
    "Graph",
    "GraphInconsistency",
    "Intersection",
    "LabelledMatrix",
    "MatchedPair",
    "Matching",
    "Munkres",
    "Node",
    "OddNodes",
    "ParseError",
    "PostmanError",
    "PostmanSolution",
    "ShortestPaths",
    "StallError",
    "all_pairs_shortest_paths",
    "build_graph",
    "extract_odd_nodes",
    "floyd_warshall",
    "linear_assignment",
    "match_labels",
    "odd_degree_nodes",
]
