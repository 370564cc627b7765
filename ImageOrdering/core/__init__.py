"""
Core of the ordering engine: structures, interfaces and errors.
"""

from .exceptions import (
    OrderingError,
    InvalidSizeError,
    InvalidIndexError,
    SelfPairError,
    InvalidDistanceError,
    StoreReleasedError,
    AttachmentConflictError,
    IncompleteTraversalError,
)
from .structures import DistanceStore, SpanningTree, cell_count, ROOT
from .interfaces import (
    IFeatureExtractor,
    IDistanceProvider,
    IProgressReporter,
    NullReporter,
    LoggingReporter,
)
