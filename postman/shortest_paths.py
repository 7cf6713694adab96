import numpy as np
from dataclasses import dataclass
from typing import List

from scipy.sparse.csgraph import csgraph_from_dense, shortest_path

from postman.errors import GraphInconsistency
from postman.graph import Graph
from postman.matrix import MAX, LabelledMatrix, square

# scipy marks "no predecessor" with -9999; we use -1 for both engines.
NO_PREDECESSOR = -1

METHODS = ("floyd-warshall", "scipy")


@dataclass
class ShortestPaths:
    """
    All-pairs shortest distances plus enough information to rebuild the routes.

    distances[a, b] is the shortest directed distance from a to b, or MAX
    when b cannot be reached from a. predecessors[i, j] is the node
    position preceding j on a shortest route from i (NO_PREDECESSOR when
    there is none).
    """
    distances: LabelledMatrix
    predecessors: np.ndarray

    def distance(self, source: str, target: str) -> int:
        return self.distances[source, target]

    def reachable(self, source: str, target: str) -> bool:
        return self.distance(source, target) < MAX

    def path(self, source: str, target: str) -> List[str]:
        """
        Reconstruct the node names on a shortest route from source to target.

        Walks the predecessor matrix backwards from the target. Returns an
        empty list if no route exists.
        """
        labels = self.distances.labels
        start = self.distances.index_of(source)
        current = self.distances.index_of(target)
        if not self.reachable(source, target):
            return []

        path = []
        while current != start:
            path.append(current)
            current = int(self.predecessors[start, current])
            if current == NO_PREDECESSOR:
                return []
        path.append(start)
        path.reverse()
        return [labels[i] for i in path]


def edge_matrix(graph: Graph) -> np.ndarray:
    """
    Dense cost matrix of the direct edges: 0 on the diagonal, the edge
    length where an edge exists, MAX everywhere else.

    Rows and columns follow ``graph.node_index()``.
    """
    ids = graph.node_index()
    array = square(len(ids), MAX)
    np.fill_diagonal(array, 0)

    for edge in graph.edges:
        if edge.destination not in ids:
            raise GraphInconsistency(
                f"edge {edge.source!r} -> {edge.destination!r} references unknown node "
                f"{edge.destination!r}"
            )
        i, j = ids[edge.source], ids[edge.destination]
        if i != j:
            array[i, j] = edge.length
    return array


# Internal "no route" marker while relaxing. Two of them still fit in int64.
UNREACHABLE = np.iinfo(np.int64).max // 4


def _unreachable_to_max(dist: np.ndarray, unreachable: np.ndarray) -> np.ndarray:
    """Map "no route" cells to MAX, refusing real routes MAX could be mistaken for."""
    too_long = (dist >= MAX) & ~unreachable
    if too_long.any():
        i, j = (int(x) for x in np.argwhere(too_long)[0])
        raise GraphInconsistency(
            f"shortest route between positions {i} and {j} is {int(dist[i, j])}, "
            f"which reaches the unreachable marker {MAX}"
        )
    return np.where(unreachable, MAX, dist).astype(np.int64)


def floyd_warshall(array: np.ndarray):
    """
    Floyd-Warshall over a dense int64 cost matrix.

    Every relaxation for a given k must be visible before k+1 starts, so
    the k loop stays in Python while the (i, j) plane for each k is
    relaxed in one numpy operation. Cells at MAX are missing edges; they
    are relaxed as a far larger marker so that real routes longer than
    MAX are never confused with "unreachable".

    Returns:
    --------
    (distances, predecessors) as new arrays, MAX where there is no route

    Raises:
    -------
    GraphInconsistency if a real shortest route reaches MAX.
    """
    dist = np.array(array, dtype=np.int64, copy=True)
    size = dist.shape[0]
    dist[dist >= MAX] = UNREACHABLE

    pred = np.full((size, size), NO_PREDECESSOR, dtype=np.int64)
    rows = np.broadcast_to(np.arange(size)[:, None], (size, size))
    has_edge = (dist < UNREACHABLE) & ~np.eye(size, dtype=bool)
    pred[has_edge] = rows[has_edge]

    for k in range(size):
        through_k = dist[:, k, None] + dist[None, k, :]
        better = through_k < dist
        if not better.any():
            continue
        dist[better] = through_k[better]
        pred[better] = np.broadcast_to(pred[None, k, :], (size, size))[better]
    return _unreachable_to_max(dist, dist >= UNREACHABLE), pred


def _scipy_shortest_paths(array: np.ndarray):
    # csgraph treats explicit zeros in a dense matrix as missing edges, so
    # build the sparse graph with inf as the null value to keep
    # zero-length streets.
    dense = array.astype(float)
    dense[array >= MAX] = np.inf
    np.fill_diagonal(dense, np.inf)
    graph = csgraph_from_dense(dense, null_value=np.inf)

    dist, pred = shortest_path(graph, method="FW", directed=True, return_predecessors=True)
    unreachable = np.isinf(dist)
    dist = _unreachable_to_max(np.where(unreachable, 0, dist).astype(np.int64), unreachable)
    pred = np.where(pred < 0, NO_PREDECESSOR, pred).astype(np.int64)
    return dist, pred


def all_pairs_shortest_paths(graph: Graph, method: str = "floyd-warshall") -> ShortestPaths:
    """
    Shortest distance between every ordered pair of nodes.

    Parameters:
    -----------
    graph: Graph Model produced by ``build_graph``
    method: 'floyd-warshall' (numpy implementation) or 'scipy'
        (scipy.sparse.csgraph). Both give the same distances.

    Raises:
    -------
    GraphInconsistency if an edge points at a name that is not a node, or
    if a real shortest route is MAX or longer.
    """
    if method not in METHODS:
        raise ValueError(f"unknown shortest path method {method!r}, expected one of {METHODS}")

    array = edge_matrix(graph)
    if method == "scipy" and len(array):
        dist, pred = _scipy_shortest_paths(array)
    else:
        dist, pred = floyd_warshall(array)

    labels = sorted(graph.nodes)
    return ShortestPaths(distances=LabelledMatrix(dist, labels), predecessors=pred)
