"""
Triangular-packed symmetric distance store.

Holds one value per unordered pair of node indices, i.e. n*(n-1)/2 cells
for n nodes, without the diagonal and without the mirrored half. The pair
(x, y) with x < y lives at cell ``y*(y-1)/2 + x`` so that cells are laid out
by the larger index first:

    (0,1) (0,2) (1,2) (0,3) (1,3) (2,3) ...

This is also the order in which ``enumerate_all()`` walks the store, and it
makes every "row" y (all pairs whose larger index is y) one contiguous
slice, which is the unit of work used by the parallel fill.
"""

import numpy as np
from typing import Iterator, Optional, Sequence, Tuple, Union

from ..exceptions import (
    InvalidDistanceError,
    InvalidIndexError,
    InvalidSizeError,
    SelfPairError,
    StoreReleasedError,
)


Pair = Tuple[int, int]
Value = Union[int, float]


def cell_count(n: int) -> int:
    """Number of cells needed for n nodes"""
    return n * (n - 1) // 2


def _coerce_distance(value, dtype: np.dtype) -> np.ndarray:
    """
    Convert value (scalar or array) to the store dtype and reject anything
    that is not a finite number. None and strings such as "nan" would
    otherwise be turned into NaN on assignment.
    """
    try:
        converted = np.asarray(value, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise InvalidDistanceError(f"Distance {value!r} is not a number") from e
    if not np.all(np.isfinite(converted)):
        raise InvalidDistanceError(f"Distances must be finite, got {value!r}")
    return converted


class DistanceStore:
    """
    Compact read/write symmetric relation over n node indices.

    Values must be finite numbers; NaN, infinities and anything that does
    not convert to the store dtype raise InvalidDistanceError.
    Negative values are accepted.

    Example:
        >>> store = DistanceStore(4, fill=-1)
        >>> store.set(2, 0, 0.5)
        >>> store.get(0, 2)
        0.5
        >>> [pair for pair, _ in store.enumerate_all()][:3]
        [(0, 1), (0, 2), (1, 2)]
    """

    def __init__(self, n: int, fill: Value = 0.0, dtype=np.float64):
        """
        Allocate the store.

        Args:
            n: Number of nodes (must be >= 1)
            fill: Initial value of every cell
            dtype: numpy dtype of the backing array

        Raises:
            InvalidSizeError: If n < 1
            InvalidDistanceError: If fill is not a finite number
        """
        if n < 1:
            raise InvalidSizeError(f"Distance store needs at least 1 node, got {n}")
        self._size = int(n)
        self._dtype = np.dtype(dtype)
        self._fill = _coerce_distance(fill, self._dtype).item()
        self._data: Optional[np.ndarray] = np.full(cell_count(self._size), fill, dtype=self._dtype)

    @classmethod
    def from_matrix(cls, matrix: Union[np.ndarray, Sequence[Sequence[Value]]],
                    dtype=np.float64) -> 'DistanceStore':
        """
        Build a store from a dense symmetric n x n matrix.

        Only the strictly lower triangle is read; the matrix must be
        symmetric (within floating point tolerance).

        Raises:
            ValueError: If the matrix is not square or not symmetric
        """
        matrix = np.asarray(matrix, dtype=dtype)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {matrix.shape}")
        if not np.allclose(matrix, matrix.T, equal_nan=True):
            raise ValueError("Distance matrix must be symmetric")

        store = cls(matrix.shape[0], dtype=dtype)
        # tril_indices walks rows first: (1,0) (2,0) (2,1) (3,0) ... which
        # is exactly the canonical cell order with row = larger index
        rows, cols = np.tril_indices(store.size, k=-1)
        store._data[:] = _coerce_distance(matrix[rows, cols], store.dtype)
        return store

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def size(self) -> int:
        """Number of nodes"""
        return self._size

    @property
    def fill(self) -> Value:
        return self._fill

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def nbytes(self) -> int:
        """Memory held by the backing array (0 once released)"""
        return 0 if self._data is None else int(self._data.nbytes)

    @property
    def released(self) -> bool:
        return self._data is None

    def __len__(self) -> int:
        return cell_count(self._size)

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self.nbytes} bytes"
        return f"DistanceStore(n={self._size}, cells={len(self)}, {state})"

    # =========================================================================
    # Indexing
    # =========================================================================

    def _require_data(self) -> np.ndarray:
        if self._data is None:
            raise StoreReleasedError("Distance store has been released")
        return self._data

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._size:
            raise InvalidIndexError(f"Index {index} out of range [0, {self._size})")

    def _cell(self, x: int, y: int) -> int:
        self._check_index(x)
        self._check_index(y)
        if x == y:
            raise SelfPairError(f"No distance stored for self pair ({x}, {x})")
        if y < x:
            x, y = y, x
        return y * (y - 1) // 2 + x

    def get(self, x: int, y: int) -> Value:
        """
        Read the value of the unordered pair {x, y}.

        Raises:
            InvalidIndexError: If x or y is outside [0, n)
            SelfPairError: If x == y
        """
        cell = self._cell(x, y)
        return self._require_data()[cell].item()

    def set(self, x: int, y: int, value: Value) -> None:
        """
        Overwrite the value of the unordered pair {x, y} (last writer wins).

        Raises:
            InvalidIndexError: If x or y is outside [0, n)
            SelfPairError: If x == y
            InvalidDistanceError: If value is not a finite number
        """
        cell = self._cell(x, y)
        self._require_data()[cell] = _coerce_distance(value, self._dtype)

    def __getitem__(self, pair: Pair) -> Value:
        return self.get(*pair)

    def __setitem__(self, pair: Pair, value: Value) -> None:
        self.set(pair[0], pair[1], value)

    # =========================================================================
    # Iteration
    # =========================================================================

    def enumerate_all(self) -> Iterator[Tuple[Pair, Value]]:
        """
        Yield ((x, y), value) for every cell, x < y, by y then x ascending.

        Every call returns a fresh generator.
        """
        data = self._require_data()
        cell = 0
        for y in range(1, self._size):
            for x in range(y):
                yield (x, y), data[cell].item()
                cell += 1

    def __iter__(self) -> Iterator[Tuple[Pair, Value]]:
        return self.enumerate_all()

    def row(self, node: int) -> Iterator[Tuple[Pair, Value]]:
        """
        Yield ((other, node), value) for every other node in ascending order.

        Raises:
            InvalidIndexError: If node is outside [0, n)
        """
        self._check_index(node)
        data = self._require_data()
        return (
            ((other, node), data[self._cell(other, node)].item())
            for other in range(self._size)
            if other != node
        )

    def row_values(self, node: int) -> np.ndarray:
        """
        Vectorised row: array of length n with store(node, other) at
        position ``other``. The slot ``node`` itself holds the fill value.
        """
        self._check_index(node)
        data = self._require_data()

        others = np.arange(self._size)
        lo = np.minimum(others, node)
        hi = np.maximum(others, node)
        mask = others != node

        values = np.full(self._size, self._fill, dtype=self._dtype)
        values[mask] = data[(hi * (hi - 1) // 2 + lo)[mask]]
        return values

    # =========================================================================
    # Bulk access
    # =========================================================================

    def set_row(self, y: int, values: Union[np.ndarray, Sequence[Value]]) -> None:
        """
        Write the pairs (0, y), (1, y), ..., (y-1, y) in one slice.

        Rows own disjoint cells, so different rows can be written from
        different workers without locking.
        """
        self._check_index(y)
        values = _coerce_distance(values, self._dtype)
        if values.shape != (y,):
            raise ValueError(f"Row {y} needs {y} values, got shape {values.shape}")

        start = cell_count(y)
        self._require_data()[start:start + y] = values

    def to_matrix(self, diagonal: Value = 0) -> np.ndarray:
        """Expand into a dense symmetric n x n matrix"""
        data = self._require_data()
        matrix = np.full((self._size, self._size), diagonal, dtype=self._dtype)
        rows, cols = np.tril_indices(self._size, k=-1)
        matrix[rows, cols] = data
        matrix[cols, rows] = data
        return matrix

    def release(self) -> None:
        """Drop the backing array; any later access raises StoreReleasedError"""
        self._data = None
