import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from postman.graph import Graph, Intersection, build_graph
from postman.matrix import MAX
from postman.munkres import Matching, match_labels
from postman.odd_nodes import OddNodes, extract_odd_nodes
from postman.shortest_paths import ShortestPaths, all_pairs_shortest_paths


@dataclass
class PostmanSolution:
    """Everything the pipeline computed, stage by stage."""
    graph: Graph
    shortest_paths: ShortestPaths
    odd_nodes: OddNodes
    matching: Matching
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def is_eulerian(self) -> bool:
        return len(self.odd_nodes) == 0

    def duplicated_paths(self) -> List[Tuple[str, str, List[str]]]:
        """
        For every matched pair, the shortest route between the two nodes.

        These are the streets that get walked twice. Unreachable pairs get
        an empty route.
        """
        return [
            (pair.source, pair.target, self.shortest_paths.path(pair.source, pair.target))
            for pair in self.matching.pairs
        ]


class ChinesePostmanProblem:
    """
    Route inspection (Chinese Postman) over a street network.

    CHINESE POSTMAN PROBLEM EXPLAINED:
    A postman has to walk every street at least once and come back to the
    post office. If every intersection has an even number of streets the
    walk exists without repeating anything (an Eulerian circuit). Otherwise
    some streets must be walked twice, and we want the cheapest set.

    THE ALGORITHM STEPS:
    1. Build the graph from the intersection records
    2. Compute shortest distances between all intersections (Floyd-Warshall)
    3. Collect the intersections with an odd number of streets
    4. Pair them up at minimum total distance (Munkres / Hungarian algorithm)

    Each stage runs to completion before the next one starts and none of
    them keeps state between calls, so two solvers can run side by side.
    """

    def __init__(self, records: Iterable[Intersection], method: str = "floyd-warshall",
                 symmetrize: bool = False, verbose: bool = True):
        """
        Parameters:
        -----------
        records: Intersection records describing the street network
        method: Shortest path engine, 'floyd-warshall' or 'scipy'
        symmetrize: Treat every street as two-way, adding missing reverse edges
        verbose: Print progress for every stage
        """
        self.records = list(records)
        self.method = method
        self.symmetrize = symmetrize
        self.verbose = verbose
        self.timings: Dict[str, float] = {}

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def _timed(self, stage: str, func, *args, **kwargs):
        before = time.perf_counter()
        result = func(*args, **kwargs)
        self.timings[stage] = time.perf_counter() - before
        self._log(f"  {stage} -> {self.timings[stage]:.4f}s")
        return result

    def build_graph(self) -> Graph:
        graph = self._timed("build", build_graph, self.records, symmetrize=self.symmetrize)
        self._log(f"Graph built: {len(graph)} nodes, {graph.edge_count} edges")
        if not self.symmetrize and not graph.is_symmetric():
            self._log(f"  Note: {len(graph.missing_reverse_edges())} edges are one-way")
        return graph

    def compute_shortest_paths(self, graph: Graph) -> ShortestPaths:
        self._log(f"\nComputing all-pairs shortest paths ({self.method})...")
        shortest = self._timed("shortest-paths", all_pairs_shortest_paths, graph, method=self.method)
        unreachable = int((shortest.distances.values >= MAX).sum())
        if unreachable:
            self._log(f"  Note: {unreachable} ordered pairs are unreachable")
        return shortest

    def find_odd_nodes(self, graph: Graph, shortest: ShortestPaths) -> OddNodes:
        odd = self._timed("odd-nodes", extract_odd_nodes, graph, shortest)
        self._log(f"\nFound {len(odd)} odd-degree nodes")
        names = odd.names
        if names:
            self._log(f"Odd nodes: {names[:10]}{'...' if len(names) > 10 else ''}")
        return odd

    def find_minimum_weight_matching(self, odd: OddNodes) -> Matching:
        if not len(odd):
            self._log("\nEvery node has even degree; the network is already Eulerian.")
            self.timings["munkres"] = 0.0
            return Matching()

        self._log(f"\nSolving for matching over {len(odd)} odd nodes...")
        matching = self._timed("munkres", match_labels, odd.matrix)
        for pair in matching.pairs:
            self._log(f"  Matched {pair.source} ↔ {pair.target} (distance: {pair.cost})")
        if not matching.feasible:
            self._log("  Warning: some matched nodes cannot reach each other")
        return matching

    def run(self) -> PostmanSolution:
        """Execute the pipeline and return every intermediate result."""
        self._log("\n" + "=" * 60)
        self._log("STARTING CHINESE POSTMAN PROBLEM ALGORITHM")
        self._log("=" * 60)

        self.timings = {}
        graph = self.build_graph()
        shortest = self.compute_shortest_paths(graph)
        odd = self.find_odd_nodes(graph, shortest)
        matching = self.find_minimum_weight_matching(odd)

        self._log(f"\nTotal matching cost: {matching.total_cost}")
        return PostmanSolution(
            graph=graph,
            shortest_paths=shortest,
            odd_nodes=odd,
            matching=matching,
            timings=dict(self.timings),
        )
