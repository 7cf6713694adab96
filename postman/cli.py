"""Command line entry point: ``route-inspection network.json``."""
import argparse
import sys
from typing import List, Optional

from postman.errors import PostmanError
from postman.experiment import run_cpp
from postman.shortest_paths import METHODS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-inspection",
        description="Find the cheapest set of streets to walk twice so every street is covered.",
    )
    parser.add_argument("input", help="JSON file with an array of intersections")
    parser.add_argument(
        "--method", choices=METHODS, default="floyd-warshall",
        help="all-pairs shortest path engine (default: floyd-warshall)",
    )
    parser.add_argument(
        "--symmetrize", action="store_true",
        help="treat every street as two-way, adding missing reverse edges",
    )
    parser.add_argument(
        "--print-matrices", action="store_true",
        help="print the distance, odd-node and assignment tables",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="only print the final report")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run_cpp(
            args.input,
            method=args.method,
            symmetrize=args.symmetrize,
            print_matrices=args.print_matrices,
            verbose=not args.quiet,
        )
    except PostmanError as exc:
        print(f"error: {exc.stage} failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: load failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
