import numpy as np
import pytest

from ImageOrdering.core.exceptions import (
    InvalidDistanceError,
    InvalidIndexError,
    InvalidSizeError,
    SelfPairError,
    StoreReleasedError,
)
from ImageOrdering.core.structures import DistanceStore, cell_count


def test_size_0():
    with pytest.raises(InvalidSizeError):
        DistanceStore(0)


def test_size_1():
    store = DistanceStore(1, fill=-1, dtype=int)
    assert len(store) == 0
    assert list(store.enumerate_all()) == []
    assert list(store.row(0)) == []


@pytest.mark.parametrize("n", [1, 2, 3, 4, 10, 57])
def test_cell_count(n):
    store = DistanceStore(n)
    assert len(store) == n * (n - 1) // 2 == cell_count(n)
    assert len(list(store.enumerate_all())) == len(store)


class TestSize2:

    def test_unmodified(self):
        store = DistanceStore(2, fill=-1, dtype=int)
        assert store.get(0, 1) == -1
        assert store.get(1, 0) == -1
        assert list(store.enumerate_all()) == [((0, 1), -1)]
        assert list(store.row(0)) == [((1, 0), -1)]
        assert list(store.row(1)) == [((0, 1), -1)]

    def test_modified(self):
        store = DistanceStore(2, fill=-1, dtype=int)
        store.set(1, 0, 42)
        assert store.get(0, 1) == 42
        assert store.get(1, 0) == 42
        assert list(store.enumerate_all()) == [((0, 1), 42)]
        assert list(store.row(0)) == [((1, 0), 42)]
        assert list(store.row(1)) == [((0, 1), 42)]


class TestSize4:

    @pytest.fixture
    def store(self):
        store = DistanceStore(4, fill=-1, dtype=int)
        for (x, y), _ in store.enumerate_all():
            store.set(x, y, y * 10 + x)
        return store

    def test_canonical_order(self):
        store = DistanceStore(4, fill=-1, dtype=int)
        assert [pair for pair, _ in store.enumerate_all()] == [
            (0, 1), (0, 2), (1, 2), (0, 3), (1, 3), (2, 3)
        ]

    def test_enumeration_is_restartable(self, store):
        assert list(store.enumerate_all()) == list(store.enumerate_all())
        assert list(iter(store)) == list(store.enumerate_all())

    def test_values(self, store):
        assert store.get(0, 1) == 10
        assert store.get(1, 2) == 21
        for (x, y), value in store.enumerate_all():
            assert value == y * 10 + x

    def test_symmetry(self, store):
        for i in range(4):
            for j in range(4):
                if i != j:
                    assert store.get(i, j) == store.get(j, i)

    def test_rows(self, store):
        for node in range(4):
            row = list(store.row(node))
            assert len(row) == 3
            assert [pair for pair, _ in row] == [(other, node) for other in range(4) if other != node]
            for (other, _), value in row:
                assert value == store.get(other, node)

    def test_row_values(self, store):
        values = store.row_values(1)
        assert values.tolist() == [10, -1, 21, 31]
        assert store.row_values(0).tolist() == [-1, 10, 20, 30]

    def test_set_row(self, store):
        store.set_row(3, [7, 8, 9])
        assert store.get(0, 3) == 7
        assert store.get(3, 1) == 8
        assert store.get(2, 3) == 9
        assert store.get(1, 2) == 21

    def test_set_row_wrong_length(self, store):
        with pytest.raises(ValueError):
            store.set_row(2, [1, 2, 3])

    def test_item_access(self, store):
        store[3, 0] = 99
        assert store[0, 3] == 99


def test_invalid_index():
    store = DistanceStore(3)
    with pytest.raises(InvalidIndexError):
        store.get(0, 3)
    with pytest.raises(InvalidIndexError):
        store.set(-1, 1, 0.5)
    with pytest.raises(InvalidIndexError):
        store.row(3)
    # Also an IndexError for callers that only know the builtin
    with pytest.raises(IndexError):
        store.get(5, 0)


def test_self_pair():
    store = DistanceStore(3)
    with pytest.raises(SelfPairError):
        store.get(1, 1)
    with pytest.raises(SelfPairError):
        store.set(2, 2, 0.0)


def test_nan_rejected():
    store = DistanceStore(3)
    with pytest.raises(InvalidDistanceError):
        store.set(0, 1, float('nan'))
    with pytest.raises(InvalidDistanceError):
        store.set_row(2, [0.5, np.nan])
    with pytest.raises(InvalidDistanceError):
        DistanceStore(3, fill=np.nan)
    assert store.get(0, 1) == 0.0


@pytest.mark.parametrize("value", [None, "nan", "far", np.inf, -np.inf])
def test_non_numbers_rejected(value):
    store = DistanceStore(3)
    with pytest.raises(InvalidDistanceError):
        store.set(0, 1, value)
    with pytest.raises(InvalidDistanceError):
        store.set_row(2, [0.5, value])
    with pytest.raises(InvalidDistanceError):
        DistanceStore(3, fill=value)
    assert list(store.enumerate_all()) == [((0, 1), 0.0), ((0, 2), 0.0), ((1, 2), 0.0)]


def test_none_rejected_by_integer_store():
    store = DistanceStore(3, fill=-1, dtype=int)
    with pytest.raises(InvalidDistanceError):
        store.set(0, 2, None)
    assert store.get(0, 2) == -1


def test_from_matrix_rejects_infinity():
    with pytest.raises(InvalidDistanceError):
        DistanceStore.from_matrix([[0, np.inf], [np.inf, 0]])


def test_negative_values_allowed():
    store = DistanceStore(3)
    store.set(0, 2, -2.5)
    assert store.get(2, 0) == -2.5


def test_release():
    store = DistanceStore(5)
    assert store.nbytes == 10 * 8
    store.release()
    assert store.released
    assert store.nbytes == 0
    assert len(store) == 10
    with pytest.raises(StoreReleasedError):
        store.get(0, 1)
    with pytest.raises(StoreReleasedError):
        list(store.enumerate_all())


def test_from_matrix(worked_example_distances):
    store = DistanceStore.from_matrix(worked_example_distances)
    assert store.size == 4
    assert store.get(0, 2) == 1
    assert store.get(3, 1) == 1
    assert store.get(2, 3) == 8
    np.testing.assert_array_equal(store.to_matrix(), worked_example_distances)


def test_from_matrix_rejects_asymmetric():
    with pytest.raises(ValueError):
        DistanceStore.from_matrix([[0, 1], [2, 0]])
    with pytest.raises(ValueError):
        DistanceStore.from_matrix([[0, 1, 2]])
