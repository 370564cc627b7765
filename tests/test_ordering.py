import numpy as np
import pytest

from ImageOrdering import build_order
from ImageOrdering.core.exceptions import InvalidDistanceError, InvalidSizeError
from ImageOrdering.core.interfaces import IDistanceProvider, IProgressReporter
from ImageOrdering.core.structures import DistanceStore


class RecordingReporter(IProgressReporter):

    def __init__(self):
        self.stages = []
        self.progress_calls = []

    def stage(self, name, **info):
        self.stages.append(name)

    def progress(self, name, done, total):
        self.progress_calls.append((name, done, total))


class MatrixProvider(IDistanceProvider):

    def __init__(self, matrix):
        self.matrix = np.asarray(matrix)
        self.released = False

    def __len__(self):
        return self.matrix.shape[0]

    def distance(self, x, y):
        return float(self.matrix[x, y])

    def release(self):
        self.released = True


def test_single_item():
    assert build_order(1, lambda x, y: 0.0) == [0]


def test_no_items():
    with pytest.raises(InvalidSizeError):
        build_order(0, lambda x, y: 0.0)


def test_from_callable(worked_example_distances):
    order = build_order(4, lambda x, y: worked_example_distances[x, y], workers=1)
    assert order == [0, 2, 1, 3]


def test_from_provider(worked_example_distances):
    provider = MatrixProvider(worked_example_distances)
    assert build_order(4, provider) == [0, 2, 1, 3]
    assert provider.released


def test_from_store(worked_example_distances):
    store = DistanceStore.from_matrix(worked_example_distances)
    assert build_order(4, store) == [0, 2, 1, 3]
    assert store.released


def test_keep_store(worked_example_distances):
    store = DistanceStore.from_matrix(worked_example_distances)
    build_order(4, store, release_store=False)
    assert not store.released
    assert store.get(1, 3) == 1


def test_size_mismatch(worked_example_distances):
    with pytest.raises(InvalidSizeError):
        build_order(3, DistanceStore.from_matrix(worked_example_distances))
    with pytest.raises(InvalidSizeError):
        build_order(5, MatrixProvider(worked_example_distances))


def test_rejects_unknown_distance_source():
    with pytest.raises(TypeError):
        build_order(3, "not distances")


def test_nan_distance():
    with pytest.raises(InvalidDistanceError):
        build_order(4, lambda x, y: float('nan'), workers=2)


@pytest.mark.parametrize("workers", [1, 2])
def test_missing_distance(workers):
    with pytest.raises(InvalidDistanceError):
        build_order(4, lambda x, y: None if (x, y) == (1, 3) else 1.0, workers=workers)


@pytest.mark.parametrize("workers", [1, 2, 8])
def test_worker_count_does_not_change_order(workers):
    rng = np.random.default_rng(7)
    points = rng.random((40, 3))

    def distance(x, y):
        return float(np.linalg.norm(points[x] - points[y]))

    reference = build_order(40, distance, workers=1)
    order = build_order(40, distance, workers=workers)
    assert order == reference
    assert sorted(order) == list(range(40))
    assert order[0] == 0


def test_reporter_sees_stages(worked_example_distances):
    reporter = RecordingReporter()
    build_order(4, lambda x, y: worked_example_distances[x, y], workers=1, reporter=reporter)
    assert reporter.stages == ["distances", "spanning tree", "sort order"]
    assert ("spanning tree", 3, 3) in reporter.progress_calls
    assert ("distances", 6, 6) in reporter.progress_calls
