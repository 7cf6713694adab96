import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from postman.errors import ParseError
from postman.matrix import MAX


@dataclass
class Intersection:
    """One raw location record: a street intersection and the streets leaving it."""
    name: str
    id: int
    neighbours: Dict[str, str] = field(default_factory=dict)
    address: Optional[str] = None
    altitude: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class Edge:
    source: str
    destination: str
    length: int


@dataclass
class Node:
    id: int
    name: str
    edges: Dict[str, Edge] = field(default_factory=dict)

    @property
    def degree(self) -> int:
        # One entry per street leaving the node; a self-loop counts once.
        return len(self.edges)

    @property
    def is_odd(self) -> bool:
        return self.degree % 2 == 1


class Graph:
    """
    Street network: node name -> Node.

    Edges are directed and owned by their source node. A two-way street is
    two edges, one listed by each end. The graph is never changed once
    ``build_graph`` returns it.
    """

    def __init__(self, nodes: Dict[str, Node]):
        self.nodes = nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, name: str) -> bool:
        return name in self.nodes

    def __getitem__(self, name: str) -> Node:
        return self.nodes[name]

    def __iter__(self):
        return iter(self.nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return [edge for node in self.nodes.values() for edge in node.edges.values()]

    @property
    def edge_count(self) -> int:
        return sum(node.degree for node in self.nodes.values())

    def node_index(self) -> Dict[str, int]:
        """Matrix position of every node, assigned by sorting the names."""
        return {name: i for i, name in enumerate(sorted(self.nodes))}

    def missing_reverse_edges(self) -> List[Edge]:
        """Edges A->B whose reverse B->A is not listed (dangling targets excluded)."""
        missing = []
        for edge in self.edges:
            target = self.nodes.get(edge.destination)
            if target is not None and edge.source not in target.edges:
                missing.append(edge)
        return missing

    def is_symmetric(self) -> bool:
        return not self.missing_reverse_edges()


def parse_length(value, record: str, neighbour: str) -> int:
    """Round a decimal edge length up to a whole number."""
    try:
        length = math.ceil(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ParseError(
            f"length {value!r} of edge {record!r} -> {neighbour!r} is not a number"
        ) from None
    if length < 0:
        raise ParseError(f"length {value!r} of edge {record!r} -> {neighbour!r} is negative")
    if length >= MAX:
        raise ParseError(
            f"length {value!r} of edge {record!r} -> {neighbour!r} reaches the unreachable marker {MAX}"
        )
    return length


def build_graph(records: Iterable[Intersection], symmetrize: bool = False) -> Graph:
    """
    Build the Graph Model from raw intersection records.

    Two passes: the first creates one Node per distinct name (the first
    record seen for a name supplies its id), the second parses every
    neighbour length and stores a directed Edge on the record's node.
    Records sharing a name contribute their edges to the same node.

    Parameters:
    -----------
    records: Intersection records, in input order
    symmetrize: Add B->A (same length) for every A->B listed without its
        reverse. Off by default: the input's directions are kept as given.
    """
    records = list(records)
    nodes: Dict[str, Node] = {}

    for record in records:
        if record.name not in nodes:
            nodes[record.name] = Node(id=int(record.id), name=record.name)

    for record in records:
        node = nodes[record.name]
        for neighbour, length in record.neighbours.items():
            node.edges[neighbour] = Edge(
                source=record.name,
                destination=neighbour,
                length=parse_length(length, record.name, neighbour),
            )

    graph = Graph(nodes)
    if symmetrize:
        for edge in graph.missing_reverse_edges():
            reverse = nodes[edge.destination]
            reverse.edges[edge.source] = Edge(
                source=edge.destination, destination=edge.source, length=edge.length
            )
    return graph

