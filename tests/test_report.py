from postman.cpp import ChinesePostmanProblem
from postman.matrix import MAX, LabelledMatrix
from postman.report import format_solution, mask_frame, matching_frame, matrix_frame

from tests.conftest import street_records


def test_matrix_frame_marks_unreachable():
    frame = matrix_frame(LabelledMatrix([[0, MAX], [3, 0]], ["a", "b"]))
    assert frame.loc["a", "b"] == "∞"
    assert frame.loc["b", "a"] == 3


def test_matrix_frame_limit():
    labels = [f"n{i}" for i in range(12)]
    frame = matrix_frame(LabelledMatrix([[0] * 12] * 12, labels), limit=8)
    assert frame.shape == (8, 8)


def test_mask_and_matching_tables(square_with_diagonal):
    solution = ChinesePostmanProblem(square_with_diagonal, verbose=False).run()
    mask = mask_frame(solution.odd_nodes, solution.matching)
    assert mask.loc["A", 2] == 1 and mask.loc["A", 1] == 0
    assert list(mask["id"]) == [1, 3]
    table = matching_frame(solution.matching)
    assert table.to_dict("records") == [
        {"from": "A", "to": "C", "distance": 2},
        {"from": "C", "to": "A", "distance": 2},
    ]


def test_format_solution(square_with_diagonal):
    solution = ChinesePostmanProblem(square_with_diagonal, verbose=False).run()
    text = format_solution(solution, print_matrices=True)
    assert "Distance Matrix" in text
    assert "Assignment Mask" in text
    assert "A ↔ C: A → C" in text
    assert "Total matching cost: 4" in text
    assert "Timings" in text


def test_format_eulerian(eulerian_square):
    solution = ChinesePostmanProblem(eulerian_square, verbose=False).run()
    text = format_solution(solution)
    assert "already Eulerian" in text
    assert "Total matching cost: 0" in text


def test_format_disconnected():
    records = street_records([("A", "B", 1), ("C", "D", 1), ("C", "E", 1), ("C", "F", 1)])
    solution = ChinesePostmanProblem(records, verbose=False).run()
    text = format_solution(solution, print_matrices=True)
    assert "∞" in text
