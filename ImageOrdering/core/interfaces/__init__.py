"""Interfaces between the ordering engine and its collaborators"""

from .base_extractor import IFeatureExtractor, IDistanceProvider
from .reporter import IProgressReporter, NullReporter, LoggingReporter, resolve_reporter

__all__ = [
    'IFeatureExtractor',
    'IDistanceProvider',
    'IProgressReporter',
    'NullReporter',
    'LoggingReporter',
    'resolve_reporter',
]
