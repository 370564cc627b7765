"""
Base interfaces for the pluggable collaborators of the ordering engine.

The engine itself only ever sees node indices and distances. Turning an
image into a descriptor and two descriptors into a distance is delegated to
implementations of these interfaces, so other feature representations can
be swapped in without touching the engine.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union


class IFeatureExtractor(ABC):
    """
    Abstract interface for per-item descriptor extraction and comparison.

    Implementations must be safe to call from several worker threads at
    once (extraction and comparison are fanned out over a thread pool).
    """

    name: str = "extractor"

    @abstractmethod
    def extract(self, path: Union[str, Path]) -> Optional[Any]:
        """
        Compute the descriptor of one item.

        Args:
            path: Location of the item

        Returns:
            Descriptor, or None if the item cannot be read. Failed items are
            dropped before ordering, they are not errors of the engine.
        """
        pass

    @abstractmethod
    def distance(self, lhs: Any, rhs: Any) -> float:
        """
        Dissimilarity of two descriptors.

        Must be symmetric and non-negative; it does not have to be a metric.
        """
        pass


class IDistanceProvider(ABC):
    """
    Abstract source of pairwise distances over node indices.

    Used by ``build_order`` to fill a distance store without knowing where
    the values come from.
    """

    @abstractmethod
    def __len__(self) -> int:
        """Number of nodes"""
        pass

    @abstractmethod
    def distance(self, x: int, y: int) -> float:
        """Distance between nodes x and y (x != y)"""
        pass

    def release(self) -> None:
        """Free any per-item data once all distances are computed"""
        pass
