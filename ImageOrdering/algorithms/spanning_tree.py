"""
Minimum spanning tree over a complete graph held in a DistanceStore.

Prim's algorithm specialised for dense graphs: instead of a heap, every
not-yet-attached node keeps a candidate record (best source, best cost)
and each step does one flat scan to pick the cheapest candidate followed by
one flat pass to relax the remaining candidates against the node that was
just attached. O(n^2) time, O(n) extra memory.

Tie-breaking is part of the contract because it decides which tree, and
therefore which output order, is produced when distances tie:

* selection: among candidates with equal minimal cost, the one scanned
  last wins;
* relaxation: a candidate switches to the new node when the new cost is
  less than *or equal to* its current best.

Selected candidates are removed by swapping in the last active record, so
the scan order of later steps depends on earlier removals. Changing the
scan order changes the output for tied inputs.
"""

import numpy as np
from typing import Optional

from ..core.exceptions import AttachmentConflictError, InvalidSizeError
from ..core.interfaces import IProgressReporter, resolve_reporter
from ..core.structures import DistanceStore, SpanningTree, ROOT


class _Candidates:
    """Candidate records of the unattached nodes, active ones in [0, active)"""

    def __init__(self, n: int):
        self.destination = np.arange(1, n, dtype=np.intp)
        self.source = np.full(n - 1, -1, dtype=np.intp)
        self.cost = np.full(n - 1, np.inf, dtype=np.float64)
        self.active = n - 1

    def select(self) -> int:
        """Position of the cheapest active candidate, ties go to the last one"""
        costs = self.cost[:self.active]
        # argmin reports the first minimum; on the reversed view that is the
        # last minimum in scan order
        return self.active - 1 - int(np.argmin(costs[::-1]))

    def remove(self, position: int) -> None:
        last = self.active - 1
        self.destination[position] = self.destination[last]
        self.source[position] = self.source[last]
        self.cost[position] = self.cost[last]
        self.active = last

    def relax(self, store: DistanceStore, node: int) -> None:
        """Point every active candidate at node if node is at least as close"""
        if self.active == 0:
            return
        offered = store.row_values(node)[self.destination[:self.active]]
        better = offered <= self.cost[:self.active]
        self.cost[:self.active][better] = offered[better]
        self.source[:self.active][better] = node


def build_mst(n: int,
              store: DistanceStore,
              check_invariants: bool = True,
              reporter: Optional[IProgressReporter] = None) -> SpanningTree:
    """
    Build the minimum spanning tree rooted at node 0.

    Args:
        n: Number of nodes (>= 2)
        store: Pairwise distances of the n nodes
        check_invariants: Run SpanningTree.verify() on the result
        reporter: Optional progress reporter

    Returns:
        SpanningTree with n-1 edges

    Raises:
        InvalidSizeError: If n < 2 or the store holds a different node count
        AttachmentConflictError: If a node would be attached twice (a bug,
            never an input problem)
    """
    if n < 2:
        raise InvalidSizeError(f"Spanning tree needs at least 2 nodes, got {n}")
    if store.size != n:
        raise InvalidSizeError(f"Distance store holds {store.size} nodes, expected {n}")

    reporter = resolve_reporter(reporter)
    reporter.stage("spanning tree", nodes=n)

    tree = SpanningTree(n)
    candidates = _Candidates(n)

    # Seed the frontier with the root
    candidates.relax(store, ROOT)

    while tree.edge_count() + 1 < n:
        position = candidates.select()
        source = int(candidates.source[position])
        destination = int(candidates.destination[position])
        candidates.remove(position)

        if not tree.insert(source, destination):
            raise AttachmentConflictError(
                f"Node {destination} selected for attachment under {source} "
                f"but is already in the tree"
            )

        candidates.relax(store, destination)
        reporter.progress("spanning tree", tree.edge_count(), n - 1)

    if check_invariants:
        tree.verify()

    return tree


def tree_weight(tree: SpanningTree, store: DistanceStore) -> float:
    """Sum of the distances along all tree edges"""
    return float(sum(store.get(parent, child) for parent, child in tree.edges()))
