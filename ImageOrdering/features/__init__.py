"""Descriptor extraction and pairwise distance computation"""

from .distances import (
    fill_store,
    compute_distance_store,
    DescriptorDistanceProvider,
    resolve_workers,
)
from .histogram import (
    ColorHistogramExtractor,
    HistogramDescriptor,
    COMPARISON_METHODS,
    extract_descriptors,
)

__all__ = [
    'fill_store',
    'compute_distance_store',
    'DescriptorDistanceProvider',
    'resolve_workers',
    'ColorHistogramExtractor',
    'HistogramDescriptor',
    'COMPARISON_METHODS',
    'extract_descriptors',
]
