from postman.cpp import ChinesePostmanProblem, PostmanSolution
from postman.loader import load_intersections
from postman.report import format_solution


def run_cpp(path: str, method: str = "floyd-warshall", symmetrize: bool = False,
            print_matrices: bool = False, verbose: bool = True) -> PostmanSolution:
    """
    Load a street network from ``path``, solve it and print the report.

    Args:
        path: JSON file with the intersection records
        method: Shortest path engine, 'floyd-warshall' or 'scipy'
        symmetrize: Treat every street as two-way
        print_matrices: Include the distance, odd-node and mask tables
        verbose: Print progress while solving
    """
    if verbose:
        print(f"parsing: {path}...")
    records = load_intersections(path)

    cpp_solver = ChinesePostmanProblem(
        records,
        method=method,
        symmetrize=symmetrize,
        verbose=verbose,
    )
    solution = cpp_solver.run()

    print(format_solution(solution, print_matrices=print_matrices))
    return solution
