"""
Rooted tree over node indices, built edge by edge by the spanning-tree
builder and read by the linearizer.

Node 0 is the root. Every other node gets at most one parent; children are
kept in the order they were attached because that order decides the final
output sequence.
"""

from typing import List, Optional, Tuple

from ..exceptions import (
    AttachmentConflictError,
    IncompleteTraversalError,
    InvalidIndexError,
    InvalidSizeError,
)


ROOT = 0


class SpanningTree:
    """
    Minimal rooted tree with per-node child lists.

    Example:
        >>> tree = SpanningTree(3)
        >>> tree.insert(0, 2)
        True
        >>> tree.insert(2, 1)
        True
        >>> tree.insert(0, 1)  # already attached
        False
        >>> tree.children_of(2)
        (1,)
    """

    def __init__(self, n: int):
        if n < 1:
            raise InvalidSizeError(f"Tree needs at least 1 node, got {n}")

        self._size = int(n)
        self._parent: List[Optional[int]] = [None] * self._size
        self._children: List[List[int]] = [[] for _ in range(self._size)]
        self._edges: List[Tuple[int, int]] = []

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"SpanningTree(n={self._size}, edges={len(self._edges)})"

    def _check_index(self, node: int, name: str = "node") -> None:
        if not 0 <= node < self._size:
            raise InvalidIndexError(f"{name} {node} out of range [0, {self._size})")

    # =========================================================================
    # Mutation
    # =========================================================================

    def insert(self, parent: int, child: int) -> bool:
        """
        Attach child under parent.

        Args:
            parent: Node receiving the new child
            child: Node being attached

        Returns:
            False (and nothing changes) if child is the root or already has a
            parent, True otherwise

        Raises:
            InvalidIndexError: If parent or child is outside [0, n)
        """
        self._check_index(parent, "parent")
        self._check_index(child, "child")

        if self.contains(child):
            return False

        self._parent[child] = parent
        self._children[parent].append(child)
        self._edges.append((parent, child))
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def contains(self, node: int) -> bool:
        """True for the root and for every attached node"""
        self._check_index(node)
        return node == ROOT or self._parent[node] is not None

    def children_of(self, node: int) -> Tuple[int, ...]:
        """Direct children of node in insertion order"""
        self._check_index(node)
        return tuple(self._children[node])

    def parent_of(self, node: int) -> Optional[int]:
        """Parent of node, None for the root or an unattached node"""
        self._check_index(node)
        return self._parent[node]

    def edge_count(self) -> int:
        return len(self._edges)

    def edges(self) -> List[Tuple[int, int]]:
        """(parent, child) pairs in insertion order"""
        return list(self._edges)

    def is_complete(self) -> bool:
        return len(self._edges) == self._size - 1

    # =========================================================================
    # Verification
    # =========================================================================

    def verify(self) -> None:
        """
        Check the structural invariants of the tree.

        * each child list entry matches the recorded parent, and no node is
          attached twice
        * no node is its own ancestor
        * a complete tree (n-1 edges) reaches every node from the root

        Raises:
            AttachmentConflictError: On a duplicate attachment or a cycle
            IncompleteTraversalError: If a complete tree leaves nodes unreachable
        """
        seen = [False] * self._size
        for parent, children in enumerate(self._children):
            for child in children:
                if child == ROOT or seen[child] or self._parent[child] != parent:
                    raise AttachmentConflictError(
                        f"Node {child} attached more than once (under {parent})"
                    )
                seen[child] = True

        # Walk up from every node, each node is walked through at most once
        checked = [False] * self._size
        for node in range(self._size):
            path = []
            on_path = set()
            current = node
            while current is not None and not checked[current]:
                if current in on_path:
                    raise AttachmentConflictError(f"Node {current} is its own ancestor")
                path.append(current)
                on_path.add(current)
                current = self._parent[current]
            for visited in path:
                checked[visited] = True

        if self.is_complete():
            reachable = 0
            stack = [ROOT]
            while stack:
                node = stack.pop()
                reachable += 1
                stack.extend(self._children[node])
            if reachable != self._size:
                raise IncompleteTraversalError(
                    f"Only {reachable} of {self._size} nodes reachable from the root"
                )
