import numpy as np
import pandas as pd
from typing import Dict, Hashable, List, Sequence


# Stands in for "unreachable" and "forbidden". Larger than any real route length.
MAX = 1_000_000


def square(size: int, fill: int = MAX) -> np.ndarray:
    """Return a size x size int64 matrix filled with ``fill``."""
    return np.full((size, size), fill, dtype=np.int64)


class LabelledMatrix:
    """
    Square integer matrix whose rows and columns are addressed by label.

    Storage is a plain 0-based numpy array of the true size; the labels
    (node names) are the only way callers outside the package need to
    address a cell:

        distances["Main St & 1st Ave", "Main St & 2nd Ave"]

    Positional access is still available through ``at`` for the solver,
    which works purely on integer indices.
    """

    def __init__(self, values: np.ndarray, labels: Sequence[Hashable]):
        values = np.asarray(values, dtype=np.int64)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"matrix must be square, got shape {values.shape}")
        if values.shape[0] != len(labels):
            raise ValueError(
                f"{len(labels)} labels given for a matrix of size {values.shape[0]}"
            )
        self._values = values
        self._labels = list(labels)
        self._index: Dict[Hashable, int] = {label: i for i, label in enumerate(self._labels)}
        if len(self._index) != len(self._labels):
            raise ValueError("matrix labels must be unique")

    @property
    def labels(self) -> List[Hashable]:
        return list(self._labels)

    @property
    def size(self) -> int:
        return len(self._labels)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        view = self._values.view()
        view.flags.writeable = False
        return view

    def index_of(self, label: Hashable) -> int:
        try:
            return self._index[label]
        except KeyError:
            raise KeyError(f"unknown label: {label!r}") from None

    def __contains__(self, label: Hashable) -> bool:
        return label in self._index

    def __getitem__(self, key) -> int:
        row, col = key
        return int(self._values[self.index_of(row), self.index_of(col)])

    def at(self, i: int, j: int) -> int:
        return int(self._values[i, j])

    def submatrix(self, labels: Sequence[Hashable]) -> "LabelledMatrix":
        """Restrict the matrix to ``labels``, in the order given."""
        idx = [self.index_of(label) for label in labels]
        return LabelledMatrix(self._values[np.ix_(idx, idx)].copy(), labels)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._values, index=self._labels, columns=self._labels)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LabelledMatrix):
            return NotImplemented
        return self._labels == other._labels and np.array_equal(self._values, other._values)

    def __repr__(self) -> str:
        return f"LabelledMatrix(size={self.size})"
