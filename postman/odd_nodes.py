import numpy as np
from dataclasses import dataclass, field
from typing import List, Tuple

from postman.errors import GraphInconsistency
from postman.graph import Graph, Node
from postman.matrix import MAX, LabelledMatrix
from postman.shortest_paths import ShortestPaths


@dataclass
class OddNodes:
    """Cost matrix restricted to the odd-degree nodes, and who they are."""
    matrix: LabelledMatrix
    nodes: List[Tuple[str, int]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.nodes]


def odd_degree_nodes(graph: Graph) -> List[Node]:
    """Nodes with an odd number of edges, ordered by original id (then name)."""
    ordered = sorted(graph, key=lambda node: (node.id, node.name))
    return [node for node in ordered if node.is_odd]


def extract_odd_nodes(graph: Graph, shortest_paths: ShortestPaths) -> OddNodes:
    """
    Build the matching problem: shortest distances between odd-degree nodes.

    WHY ONLY THE ODD NODES?
    An Eulerian circuit exists once every node has even degree. Duplicating
    the shortest route between two odd nodes flips the parity of exactly
    those two endpoints, so the cheapest fix is a minimum-cost pairing of
    the odd nodes by shortest-route distance.

    The diagonal is set to MAX so the solver can never pair a node with
    itself. With no odd nodes the matrix is empty and there is nothing to
    match.

    Raises:
    -------
    GraphInconsistency if the number of odd nodes is odd. The handshake
    lemma forbids that for an undirected street network, so it only
    happens when some street is listed in one direction only.
    """
    odd = odd_degree_nodes(graph)
    if len(odd) % 2 == 1:
        raise GraphInconsistency(
            f"found {len(odd)} odd-degree nodes; an undirected network always has an even "
            f"number. {len(graph.missing_reverse_edges())} edge(s) lack their reverse direction",
            stage="odd-nodes",
        )

    names = [node.name for node in odd]
    matrix = shortest_paths.distances.submatrix(names)
    values = np.array(matrix.values, copy=True)
    np.fill_diagonal(values, MAX)
    return OddNodes(
        matrix=LabelledMatrix(values, names),
        nodes=[(node.name, node.id) for node in odd],
    )
