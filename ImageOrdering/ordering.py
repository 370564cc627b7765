"""
Public surface of the ordering engine.

    distances -> DistanceStore -> build_mst -> release store -> preorder

``build_order`` accepts either a ready DistanceStore or something that can
produce pairwise distances (an IDistanceProvider or a plain callable taking
two node indices) and returns the permutation of [0, n) in which similar
items are adjacent.
"""

from typing import Callable, List, Optional, Union

from .algorithms import build_mst, preorder
from .core.exceptions import InvalidSizeError
from .core.interfaces import IDistanceProvider, IProgressReporter, resolve_reporter
from .core.structures import DistanceStore
from .features.distances import fill_store


DistanceSource = Union[DistanceStore, IDistanceProvider, Callable[[int, int], float]]


def _materialize_store(n: int,
                       distances: DistanceSource,
                       workers: Optional[int],
                       reporter: IProgressReporter) -> DistanceStore:
    if isinstance(distances, DistanceStore):
        if distances.size != n:
            raise InvalidSizeError(f"Distance store holds {distances.size} nodes, expected {n}")
        return distances

    if isinstance(distances, IDistanceProvider):
        if len(distances) != n:
            raise InvalidSizeError(f"Distance provider holds {len(distances)} nodes, expected {n}")
        store = fill_store(DistanceStore(n), distances.distance, workers=workers, reporter=reporter)
        distances.release()
        return store

    if callable(distances):
        return fill_store(DistanceStore(n), distances, workers=workers, reporter=reporter)

    raise TypeError(
        f"distances must be a DistanceStore, IDistanceProvider or callable, "
        f"got {type(distances).__name__}"
    )


def build_order(n: int,
                distances: DistanceSource,
                *,
                workers: Optional[int] = None,
                reporter: Optional[IProgressReporter] = None,
                check_invariants: bool = True,
                release_store: bool = True) -> List[int]:
    """
    Order n items so that similar items end up next to each other.

    Args:
        n: Number of items
        distances: DistanceStore, IDistanceProvider or callable(x, y)
        workers: Threads used to compute distances (None: one per CPU)
        reporter: Optional progress reporter
        check_invariants: Verify the spanning tree before traversing it
        release_store: Free the distance store once the tree is built

    Returns:
        Permutation of [0, n). A single item yields [0].

    Raises:
        InvalidSizeError: If n < 1 or the distances cover a different count
        InvalidIndexError, SelfPairError, InvalidDistanceError: Bad input
        AttachmentConflictError, IncompleteTraversalError: Broken invariants
    """
    if n < 1:
        raise InvalidSizeError(f"Nothing to order: n = {n}")

    reporter = resolve_reporter(reporter)

    if n == 1:
        return [0]

    store = _materialize_store(n, distances, workers, reporter)
    tree = build_mst(n, store, check_invariants=check_invariants, reporter=reporter)

    if release_store:
        store.release()

    reporter.stage("sort order", nodes=n)
    return preorder(tree)
