"""
Linearisation of a spanning tree into an item order.
"""

from typing import List

from ..core.exceptions import IncompleteTraversalError
from ..core.structures import SpanningTree, ROOT


def preorder(tree: SpanningTree) -> List[int]:
    """
    Depth-first preorder from the root.

    Children are pushed in reverse insertion order so that popping visits
    them in insertion order, giving the same sequence as a recursive
    preorder without recursion depth limits.

    Args:
        tree: Tree to traverse (not modified)

    Returns:
        Node indices, parents before their children

    Raises:
        IncompleteTraversalError: If the walk does not reach edge_count()+1
            nodes, i.e. some attached nodes are not connected to the root
    """
    order = []
    stack = [ROOT]

    while stack:
        node = stack.pop()
        order.append(node)
        stack.extend(reversed(tree.children_of(node)))

    expected = tree.edge_count() + 1
    if len(order) != expected:
        raise IncompleteTraversalError(
            f"Preorder visited {len(order)} nodes, tree has {expected} connected nodes"
        )

    return order
