import itertools

import numpy as np
import pytest
from scipy.optimize import linear_sum_assignment

from postman.errors import StallError
from postman.matrix import MAX, LabelledMatrix
from postman.munkres import (
    PRIME,
    STAR,
    Munkres,
    assignment_cost,
    linear_assignment,
    match_labels,
)


def brute_force(costs):
    size = len(costs)
    return min(
        sum(costs[i][p[i]] for i in range(size)) for p in itertools.permutations(range(size))
    )


def assert_bijection(pairs, size):
    assert sorted(i for i, _ in pairs) == list(range(size))
    assert sorted(j for _, j in pairs) == list(range(size))


def test_worked_example():
    costs = [[1, 2], [2, 4]]
    pairs = linear_assignment(costs)
    assert pairs == [(0, 1), (1, 0)]
    assert assignment_cost(costs, pairs) == 4


@pytest.mark.parametrize(
    "costs,expected",
    [
        ([[1, 2, 3], [2, 4, 6], [3, 6, 9]], 10),
        ([[10, 2, 10], [10, 10, 6], [3, 10, 10]], 11),
        ([[0, 0], [0, 0]], 0),
        ([[7]], 7),
    ],
)
def test_small_cases(costs, expected):
    pairs = linear_assignment(costs)
    assert_bijection(pairs, len(costs))
    assert assignment_cost(costs, pairs) == expected


@pytest.mark.parametrize("seed", range(30))
def test_optimal_against_brute_force(seed):
    rng = np.random.RandomState(seed)
    size = rng.randint(1, 7)
    costs = rng.randint(0, 20, size=(size, size))
    pairs = linear_assignment(costs)
    assert_bijection(pairs, size)
    assert assignment_cost(costs, pairs) == brute_force(costs.tolist())


@pytest.mark.parametrize("seed", range(10))
def test_symmetric_with_forbidden_diagonal(seed):
    rng = np.random.RandomState(100 + seed)
    size = 2 * rng.randint(1, 4)
    upper = np.triu(rng.randint(1, 50, size=(size, size)), 1)
    costs = upper + upper.T
    np.fill_diagonal(costs, MAX)
    pairs = linear_assignment(costs)
    assert all(i != j for i, j in pairs)
    assert assignment_cost(costs, pairs) == brute_force(costs.tolist())


@pytest.mark.parametrize("size", [15, 40])
def test_larger_against_scipy(size):
    rng = np.random.RandomState(size)
    costs = rng.randint(0, 1000, size=(size, size))
    rows, cols = linear_sum_assignment(costs)
    pairs = linear_assignment(costs)
    assert_bijection(pairs, size)
    assert assignment_cost(costs, pairs) == costs[rows, cols].sum()


def test_float_costs():
    costs = np.array([[1.5, 2.5], [2.5, 4.5]])
    assert assignment_cost(costs, linear_assignment(costs)) == pytest.approx(5.0)


def test_disconnected_pair_avoided():
    costs = np.array(
        [
            [MAX, MAX, 1, 5],
            [MAX, MAX, 5, 1],
            [1, 5, MAX, MAX],
            [5, 1, MAX, MAX],
        ]
    )
    pairs = linear_assignment(costs)
    assert all(costs[i, j] < MAX for i, j in pairs)
    assert assignment_cost(costs, pairs) == 4


def test_same_cost_on_rerun():
    rng = np.random.RandomState(5)
    costs = rng.randint(0, 10, size=(6, 6))
    first = linear_assignment(costs)
    second = linear_assignment(costs)
    assert assignment_cost(costs, first) == assignment_cost(costs, second)
    assert first == second


def test_input_not_modified():
    costs = np.array([[4, 1], [2, 8]])
    linear_assignment(costs)
    assert costs.tolist() == [[4, 1], [2, 8]]


def test_empty_matrix_skips_state_machine():
    solver = Munkres(np.zeros((0, 0), dtype=np.int64))
    assert solver.solve() == []
    assert solver.iterations == 0


@pytest.mark.parametrize(
    "costs",
    [np.zeros((2, 3)), np.array([[1, -1], [0, 2]]), np.array([[1.0, np.inf], [0.0, 2.0]])],
)
def test_invalid_costs(costs):
    with pytest.raises(ValueError):
        Munkres(costs)


def test_steps_report_changes():
    solver = Munkres([[1, 2], [2, 4]])
    assert solver.reduce_rows()
    assert not solver.reduce_rows()
    assert solver.star_zeros()
    assert solver.mask[0, 0] == STAR
    assert not solver.row_cover.any() and not solver.column_cover.any()
    assert solver.cover_starred_columns()
    assert not solver.cover_starred_columns()
    assert not solver.solved

    head, primed = solver.prime_zeros()
    assert head is None and not primed
    assert solver.augment_weights()
    assert solver.array.tolist() == [[0, 0], [0, 1]]

    head, primed = solver.prime_zeros()
    assert head == (1, 0) and primed
    assert solver.mask[0, 1] == PRIME
    assert solver.augment_path(*head)
    assert solver.path == [(1, 0, PRIME), (0, 0, STAR), (0, 1, PRIME)]
    assert solver.starred() == [(0, 1), (1, 0)]
    assert not (solver.mask == PRIME).any()


def test_stall_is_fatal(monkeypatch):
    solver = Munkres([[1, 2], [2, 4]])
    monkeypatch.setattr(solver, "augment_weights", lambda: False)
    with pytest.raises(StallError) as exc:
        solver.solve()
    assert exc.value.row_covered == 0
    assert exc.value.column_covered == 1
    assert exc.value.stage == "munkres"


def test_match_labels():
    matrix = LabelledMatrix([[MAX, 3], [3, MAX]], ["X", "Y"])
    matching = match_labels(matrix)
    assert [(p.source, p.target, p.cost) for p in matching.pairs] == [("X", "Y", 3), ("Y", "X", 3)]
    assert matching.total_cost == 6
    assert matching.feasible


def test_match_labels_empty():
    matching = match_labels(LabelledMatrix(np.zeros((0, 0)), []))
    assert len(matching) == 0
    assert matching.total_cost == 0
    assert matching.feasible


def test_infeasible_matching_flagged():
    matrix = LabelledMatrix([[MAX, MAX], [MAX, MAX]], ["X", "Y"])
    assert not match_labels(matrix).feasible


def test_lost_star_is_fatal(monkeypatch):
    solver = Munkres([[1, 2], [2, 4]])
    monkeypatch.setattr(solver, "augment_path", lambda row, column: False)
    with pytest.raises(StallError, match="path augmentation"):
        solver.solve()


def test_nothing_starred_is_fatal(monkeypatch):
    solver = Munkres([[1, 2], [2, 4]])
    monkeypatch.setattr(solver, "star_zeros", lambda: False)
    with pytest.raises(StallError, match="initial starring"):
        solver.solve()


def test_augment_path_gains_one_star():
    solver = Munkres([[1, 2], [2, 4]])
    solver.reduce_rows()
    solver.star_zeros()
    solver.cover_starred_columns()
    solver.prime_zeros()
    solver.augment_weights()
    head, _ = solver.prime_zeros()
    assert solver.augment_path(*head)
    assert len(solver.starred()) == 2
