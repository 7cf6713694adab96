import numpy as np
import pytest

from postman.graph import Intersection


def street_records(streets, ids=None):
    """Intersections for a list of two-way streets (a, b, length)."""
    neighbours = {}
    for a, b, length in streets:
        neighbours.setdefault(a, {})[b] = str(length)
        neighbours.setdefault(b, {})[a] = str(length)
    names = sorted(neighbours)
    ids = ids or {name: i + 1 for i, name in enumerate(names)}
    return [Intersection(name=name, id=ids[name], neighbours=neighbours[name]) for name in names]


def random_records(seed, size=12, density=0.3):
    rng = np.random.RandomState(seed)
    streets = []
    for i in range(size):
        for j in range(i + 1, size):
            if rng.rand() < density:
                streets.append((f"N{i:02d}", f"N{j:02d}", round(rng.uniform(0.5, 40.0), 1)))
    records = street_records(streets)
    known = {record.name for record in records}
    # isolated nodes still belong to the network
    for i in range(size):
        if f"N{i:02d}" not in known:
            records.append(Intersection(name=f"N{i:02d}", id=100 + i))
    return records


@pytest.fixture
def square_with_diagonal():
    """
    A --1-- B
    |     / |        A and C have three streets each, B and D two.
    1  1.5  1
    |  /    |
    D --1-- C        (the diagonal runs A-C)
    """
    return street_records(
        [("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "A", 1), ("A", "C", 1.5)]
    )


@pytest.fixture
def eulerian_square():
    return street_records([("A", "B", 2), ("B", "C", 2), ("C", "D", 2), ("D", "A", 2)])
