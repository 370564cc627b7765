"""
Image Similarity Ordering

Orders a collection of images so that visually similar images end up next
to each other, by building a minimum spanning tree over their pairwise
colour histogram distances and walking it in preorder.

Main Components:
- DistanceStore: triangular-packed symmetric distance table
- build_mst: dense-graph Prim with deterministic tie-breaking
- SpanningTree / preorder: tree and its linearisation
- build_order: the engine in one call
- ColorHistogramExtractor: OpenCV colour histograms and distances
- ImageSortPipeline: folder in, numbered links out

Quick Start:
    >>> import ImageOrdering
    >>> order = ImageOrdering.build_order(4, lambda x, y: abs(x - y))
    >>> result = ImageOrdering.ImageSortPipeline().run('./holiday', './holiday_sorted')
"""

__version__ = "1.0.0"

from .logger import setup_logger, get_logger, configure_root_logger

# Engine
from .core import (
    OrderingError,
    InvalidSizeError,
    InvalidIndexError,
    SelfPairError,
    InvalidDistanceError,
    StoreReleasedError,
    AttachmentConflictError,
    IncompleteTraversalError,
    DistanceStore,
    SpanningTree,
    IFeatureExtractor,
    IDistanceProvider,
    IProgressReporter,
    NullReporter,
    LoggingReporter,
)
from .algorithms import build_mst, preorder, tree_weight
from .ordering import build_order

# Collaborators
from .features import (
    ColorHistogramExtractor,
    HistogramDescriptor,
    DescriptorDistanceProvider,
    compute_distance_store,
    extract_descriptors,
    fill_store,
)
from .data import FolderImageSource, OrderedOutputWriter, get_images_from_folder, write_manifest

# Configuration and pipeline
from .config import (
    SortConfig,
    get_default_config,
    create_config_from_preset,
    validate_config,
    load_config,
    save_config,
    print_available_presets,
)
from .pipeline import ImageSortPipeline, SortResult


__all__ = [
    # Logging
    'setup_logger', 'get_logger', 'configure_root_logger',

    # Errors
    'OrderingError', 'InvalidSizeError', 'InvalidIndexError', 'SelfPairError',
    'InvalidDistanceError', 'StoreReleasedError', 'AttachmentConflictError',
    'IncompleteTraversalError',

    # Engine
    'DistanceStore', 'SpanningTree', 'build_mst', 'preorder', 'tree_weight', 'build_order',

    # Interfaces
    'IFeatureExtractor', 'IDistanceProvider', 'IProgressReporter', 'NullReporter', 'LoggingReporter',

    # Collaborators
    'ColorHistogramExtractor', 'HistogramDescriptor', 'DescriptorDistanceProvider',
    'compute_distance_store', 'extract_descriptors', 'fill_store',
    'FolderImageSource', 'OrderedOutputWriter', 'get_images_from_folder', 'write_manifest',

    # Configuration and pipeline
    'SortConfig', 'get_default_config', 'create_config_from_preset', 'validate_config',
    'load_config', 'save_config', 'print_available_presets',
    'ImageSortPipeline', 'SortResult',
]
