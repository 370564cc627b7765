"""Graph algorithms of the ordering engine"""

from .spanning_tree import build_mst, tree_weight
from .traversal import preorder

__all__ = [
    'build_mst',
    'tree_weight',
    'preorder',
]
