"""Data structures of the ordering engine"""

from .distance_store import DistanceStore, cell_count
from .tree import SpanningTree, ROOT

__all__ = [
    'DistanceStore',
    'cell_count',
    'SpanningTree',
    'ROOT',
]
