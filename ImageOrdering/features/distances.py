"""
Filling a DistanceStore from a pairwise distance function.

The work is split by store row: task y computes the pairs (0, y) ... (y-1, y)
and writes them into the contiguous slice it owns, so workers never touch
the same cells and no locking is needed. OpenCV's histogram comparison
releases the GIL, which makes a thread pool worthwhile here.
"""

import os
import numpy as np
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional, Sequence

from ..core.interfaces import IDistanceProvider, IProgressReporter, resolve_reporter
from ..core.structures import DistanceStore
from ..logger import get_logger


logger = get_logger("distances")

PairDistance = Callable[[int, int], float]


def resolve_workers(workers: Optional[int]) -> int:
    """None means one worker per CPU"""
    if workers is None:
        return os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    return workers


def _fill_row(store: DistanceStore, pair_distance: PairDistance, y: int) -> int:
    # set_row converts and checks the values, None included
    store.set_row(y, [pair_distance(x, y) for x in range(y)])
    return y


def fill_store(store: DistanceStore,
               pair_distance: PairDistance,
               workers: Optional[int] = None,
               reporter: Optional[IProgressReporter] = None) -> DistanceStore:
    """
    Compute every cell of store with pair_distance(x, y), x < y.

    Args:
        store: Store to fill (its size defines the pairs)
        pair_distance: Distance between two node indices
        workers: Thread count, None for one per CPU, 1 to run inline
        reporter: Optional progress reporter (counts cells)

    Returns:
        The same store, filled

    Raises:
        InvalidDistanceError: If pair_distance returns a non-finite value or no number
    """
    workers = resolve_workers(workers)
    reporter = resolve_reporter(reporter)

    total = len(store)
    reporter.stage("distances", pairs=total, workers=workers)
    done = 0

    if workers == 1 or store.size < 3:
        for y in range(1, store.size):
            done += _fill_row(store, pair_distance, y)
            reporter.progress("distances", done, total)
        return store

    with ThreadPoolExecutor(max_workers=workers) as pool:
        # Largest rows first so the tail of the batch is made of short tasks
        futures = [
            pool.submit(_fill_row, store, pair_distance, y)
            for y in range(store.size - 1, 0, -1)
        ]
        try:
            for future in as_completed(futures):
                done += future.result()
                reporter.progress("distances", done, total)
        except Exception:
            for future in futures:
                future.cancel()
            raise

    return store


class DescriptorDistanceProvider(IDistanceProvider):
    """
    Distance provider over a list of descriptors.

    Example:
        >>> provider = DescriptorDistanceProvider(descriptors, extractor.distance)
        >>> order = build_order(len(provider), provider)
    """

    def __init__(self, descriptors: Sequence[Any], distance_fn: Callable[[Any, Any], float]):
        self.descriptors: List[Any] = list(descriptors)
        self.distance_fn = distance_fn

    def __len__(self) -> int:
        return len(self.descriptors)

    def distance(self, x: int, y: int) -> float:
        return self.distance_fn(self.descriptors[x], self.descriptors[y])

    def release(self) -> None:
        """Clear descriptor payloads that support it (see HistogramDescriptor.clear)"""
        cleared = 0
        for descriptor in self.descriptors:
            clear = getattr(descriptor, "clear", None)
            if callable(clear):
                clear()
                cleared += 1
        if cleared:
            logger.debug(f"Released {cleared} descriptors")


def compute_distance_store(descriptors: Sequence[Any],
                           distance_fn: Callable[[Any, Any], float],
                           workers: Optional[int] = None,
                           reporter: Optional[IProgressReporter] = None,
                           dtype=np.float64) -> DistanceStore:
    """
    Allocate and fill a store with the distances between all descriptors.

    Raises:
        InvalidSizeError: If descriptors is empty
    """
    provider = DescriptorDistanceProvider(descriptors, distance_fn)
    store = DistanceStore(len(provider), fill=0.0, dtype=dtype)
    return fill_store(store, provider.distance, workers=workers, reporter=reporter)
