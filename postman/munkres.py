"""
Minimum-cost assignment with the Munkres (Hungarian) algorithm.

The solver follows the classic six-step formulation: reduce rows, star
independent zeros, cover starred columns, prime uncovered zeros, augment
along alternating prime/star paths, and shift weights when no uncovered
zero is left. Zeros are always scanned row by row, lowest index first, so
ties between equally cheap assignments resolve the same way every run.
"""
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from postman.errors import StallError
from postman.matrix import MAX, LabelledMatrix

NONE = 0
STAR = 1
PRIME = 2


class Munkres:
    """
    Working state for a single solve.

    array         -- remaining reduced costs
    mask          -- NONE / STAR / PRIME per cell
    row_cover     -- covered rows
    column_cover  -- covered columns
    path          -- last augmenting path as (row, column, kind) entries

    Every step method reports whether it changed any of the above. A full
    prime/weight cycle in which nothing changed means the algorithm is
    stuck, which is raised as a StallError instead of looping forever.
    """

    def __init__(self, costs):
        array = np.asarray(costs)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise ValueError(f"cost matrix must be square, got shape {array.shape}")
        if array.size and not np.isfinite(array).all():
            raise ValueError("cost matrix contains non-finite values")
        if array.size and array.min() < 0:
            raise ValueError("cost matrix contains negative values")

        dtype = np.int64 if array.dtype.kind in "iub" else np.float64
        self.array = np.array(array, dtype=dtype, copy=True)
        self.size = self.array.shape[0]
        self.mask = np.zeros((self.size, self.size), dtype=np.int8)
        self.row_cover = np.zeros(self.size, dtype=bool)
        self.column_cover = np.zeros(self.size, dtype=bool)
        self.path: List[Tuple[int, int, int]] = []
        self.iterations = 0

    # Step 1
    def reduce_rows(self) -> bool:
        minimums = self.array.min(axis=1)
        self.array -= minimums[:, None]
        return bool(minimums.any())

    # Step 2
    def star_zeros(self) -> bool:
        changed = False
        for i in range(self.size):
            for j in range(self.size):
                if self.array[i, j] == 0 and not self.row_cover[i] and not self.column_cover[j]:
                    self.mask[i, j] = STAR
                    self.row_cover[i] = True
                    self.column_cover[j] = True
                    changed = True
        self.clear_covers()
        return changed

    # Step 3
    def cover_starred_columns(self) -> bool:
        starred = (self.mask == STAR).any(axis=0)
        changed = bool((starred & ~self.column_cover).any())
        self.column_cover |= starred
        return changed

    @property
    def solved(self) -> bool:
        return bool(self.column_cover.all())

    def find_uncovered_zero(self) -> Optional[Tuple[int, int]]:
        zeros = (self.array == 0) & ~self.row_cover[:, None] & ~self.column_cover[None, :]
        flat = np.flatnonzero(zeros)
        if not flat.size:
            return None
        return divmod(int(flat[0]), self.size)

    def _in_row(self, row: int, kind: int) -> Optional[int]:
        found = np.flatnonzero(self.mask[row] == kind)
        return int(found[0]) if found.size else None

    def _in_column(self, column: int, kind: int) -> Optional[int]:
        found = np.flatnonzero(self.mask[:, column] == kind)
        return int(found[0]) if found.size else None

    # Step 4
    def prime_zeros(self) -> Tuple[Optional[Tuple[int, int]], bool]:
        """
        Prime uncovered zeros until one has no star in its row.

        Returns that zero (the head of an augmenting path), or None when
        no uncovered zero is left, together with whether anything was
        primed.
        """
        primed = False
        while True:
            zero = self.find_uncovered_zero()
            if zero is None:
                return None, primed
            row, column = zero
            self.mask[row, column] = PRIME
            primed = True

            star_column = self._in_row(row, STAR)
            if star_column is None:
                return zero, primed
            self.row_cover[row] = True
            self.column_cover[star_column] = False

    # Step 5
    def augment_path(self, row: int, column: int) -> bool:
        """Flip stars and primes along the alternating path; True if a star was gained."""
        stars = int((self.mask == STAR).sum())
        self.path = [(row, column, PRIME)]
        while True:
            star_row = self._in_column(self.path[-1][1], STAR)
            if star_row is None:
                break
            self.path.append((star_row, self.path[-1][1], STAR))
            prime_column = self._in_row(star_row, PRIME)
            self.path.append((star_row, prime_column, PRIME))

        for i, j, kind in self.path:
            self.mask[i, j] = NONE if kind == STAR else STAR
        self.clear_covers()
        self.mask[self.mask == PRIME] = NONE
        return int((self.mask == STAR).sum()) == stars + 1

    # Step 6
    def augment_weights(self) -> bool:
        uncovered = self.array[np.ix_(~self.row_cover, ~self.column_cover)]
        if not uncovered.size:
            return False
        minimum = uncovered.min()
        if minimum == 0:
            return False
        self.array[self.row_cover, :] += minimum
        self.array[:, ~self.column_cover] -= minimum
        return True

    def clear_covers(self):
        self.row_cover[:] = False
        self.column_cover[:] = False

    def starred(self) -> List[Tuple[int, int]]:
        rows, columns = np.nonzero(self.mask == STAR)
        return [(int(i), int(j)) for i, j in zip(rows, columns)]

    def _stall(self, step: str):
        raise StallError(
            f"assignment solver made no progress in {step}",
            row_covered=int(self.row_cover.sum()),
            column_covered=int(self.column_cover.sum()),
        )

    def solve(self) -> List[Tuple[int, int]]:
        """
        Run the state machine to completion and return the starred cells, by row.

        Row reduction may legitimately change nothing (every row already
        holds a zero). Every other step must: the reduced matrix always has
        a zero to star, covers are always cleared before the starred
        columns are covered, each augmenting path adds one star, and a
        prime/weight cycle either primes a zero or moves the weights.
        """
        if self.size == 0:
            return []

        self.reduce_rows()
        if not self.star_zeros():
            self._stall("initial starring")

        while True:
            if not self.cover_starred_columns():
                self._stall("column covering")
            if self.solved:
                return self.starred()

            while True:
                self.iterations += 1
                head, primed = self.prime_zeros()
                if head is not None:
                    if not self.augment_path(*head):
                        self._stall("path augmentation")
                    break
                if not self.augment_weights() and not primed:
                    self._stall("weight augmentation")


def linear_assignment(costs) -> List[Tuple[int, int]]:
    """Minimum-cost assignment of rows to columns, as (row, column) pairs."""
    return Munkres(costs).solve()


def assignment_cost(costs, pairs: Sequence[Tuple[int, int]]):
    costs = np.asarray(costs)
    return sum(costs[i, j] for i, j in pairs)


@dataclass(frozen=True)
class MatchedPair:
    source: str
    target: str
    cost: int


@dataclass
class Matching:
    pairs: List[MatchedPair] = field(default_factory=list)
    total_cost: int = 0

    def __len__(self) -> int:
        return len(self.pairs)

    @property
    def feasible(self) -> bool:
        """False if some pair had to use an unreachable (MAX) distance."""
        return all(pair.cost < MAX for pair in self.pairs)


def match_labels(matrix: LabelledMatrix) -> Matching:
    """
    Solve the assignment problem over a labelled cost matrix.

    An empty matrix (no odd nodes) is already solved: the result is an
    empty matching that costs nothing.
    """
    if matrix.size == 0:
        return Matching()

    labels = matrix.labels
    pairs = [
        MatchedPair(source=labels[i], target=labels[j], cost=matrix.at(i, j))
        for i, j in linear_assignment(matrix.values)
    ]
    return Matching(pairs=pairs, total_cost=sum(pair.cost for pair in pairs))
