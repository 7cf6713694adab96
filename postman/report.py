import pandas as pd
from typing import List

from postman.cpp import PostmanSolution
from postman.matrix import MAX, LabelledMatrix
from postman.munkres import Matching
from postman.odd_nodes import OddNodes


def matrix_frame(matrix: LabelledMatrix, limit: int = 8) -> pd.DataFrame:
    """Top-left ``limit`` x ``limit`` corner of a matrix, MAX shown as ∞."""
    frame = matrix.to_frame().iloc[:limit, :limit]
    return frame.astype(object).where(frame < MAX, "∞")


def mask_frame(odd: OddNodes, matching: Matching) -> pd.DataFrame:
    """
    Solver mask over the odd nodes: 1 where a pair was chosen.

    Rows are labelled by node name and original id, columns by position
    (1-based, as in the odd-node table).
    """
    names = odd.names
    frame = pd.DataFrame(0, index=names, columns=range(1, len(names) + 1))
    position = {name: i + 1 for i, name in enumerate(names)}
    for pair in matching.pairs:
        frame.loc[pair.source, position[pair.target]] = 1
    frame.insert(0, "id", [node_id for _, node_id in odd.nodes])
    return frame


def matching_frame(matching: Matching) -> pd.DataFrame:
    frame = pd.DataFrame(
        [(pair.source, pair.target, pair.cost) for pair in matching.pairs],
        columns=["from", "to", "distance"],
    )
    frame["distance"] = frame["distance"].astype(object).where(frame["distance"] < MAX, "∞")
    return frame


def timings_frame(solution: PostmanSolution) -> pd.DataFrame:
    return pd.DataFrame(
        {"seconds": list(solution.timings.values())}, index=list(solution.timings.keys())
    )


def _section(title: str, body: str) -> List[str]:
    return ["", title, "-" * len(title), body]


def format_solution(solution: PostmanSolution, print_matrices: bool = False, limit: int = 8) -> str:
    """Render a solved problem as plain text tables."""
    lines = ["=" * 60, "SOLUTION SUMMARY", "=" * 60]
    lines.append(f"Nodes: {len(solution.graph)}  Edges: {solution.graph.edge_count}")
    lines.append(f"Odd-degree nodes: {len(solution.odd_nodes)}")

    if print_matrices:
        size = solution.shortest_paths.distances.size
        suffix = f" (first {limit} of {size})" if size > limit else ""
        lines += _section(
            f"Distance Matrix{suffix}",
            matrix_frame(solution.shortest_paths.distances, limit).to_string(),
        )
        if len(solution.odd_nodes):
            lines += _section(
                "Odd Node Matrix", matrix_frame(solution.odd_nodes.matrix, limit).to_string()
            )
            lines += _section(
                "Assignment Mask", mask_frame(solution.odd_nodes, solution.matching).to_string()
            )

    if solution.is_eulerian:
        lines.append("\nThe network is already Eulerian: nothing needs to be walked twice.")
    else:
        lines += _section("Matching", matching_frame(solution.matching).to_string(index=False))
        paths = []
        for source, target, path in solution.duplicated_paths():
            route = " → ".join(path) if path else "unreachable"
            paths.append(f"{source} ↔ {target}: {route}")
        lines += _section("Duplicated Routes", "\n".join(paths))

    lines.append(f"\nTotal matching cost: {solution.matching.total_cost}")
    if not solution.matching.feasible:
        lines.append("Warning: the matching uses unreachable pairs; the network is disconnected.")
    if solution.timings:
        lines += _section("Timings", timings_frame(solution).to_string(float_format="{:.4f}".format))
    return "\n".join(lines)
