"""
Colour histogram descriptors.

Each image is summarised by a 3-D BGR histogram (32 bins per channel by
default) and two images are compared with ``cv2.compareHist``. Bhattacharyya
distance is the default: it is symmetric, bounded to [0, 1] and 0 for
identical distributions.
"""

import cv2
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..core.exceptions import InvalidDistanceError
from ..core.interfaces import IFeatureExtractor, IProgressReporter, resolve_reporter
from ..logger import get_logger
from .distances import resolve_workers


logger = get_logger("histogram")


# name -> (OpenCV flag, symmetric)
COMPARISON_METHODS: Dict[str, Tuple[int, bool]] = {
    'bhattacharyya': (cv2.HISTCMP_BHATTACHARYYA, True),
    'hellinger': (cv2.HISTCMP_HELLINGER, True),
    'chi_square': (cv2.HISTCMP_CHISQR, False),
    'chi_square_alt': (cv2.HISTCMP_CHISQR_ALT, True),
    'kl_div': (cv2.HISTCMP_KL_DIV, False),
}


@dataclass
class HistogramDescriptor:
    """Histogram of one image together with the file it came from"""
    histogram: Optional[np.ndarray]
    path: Path

    def clear(self):
        """Drop the histogram once all distances are known"""
        self.histogram = None

    @property
    def is_empty(self) -> bool:
        return self.histogram is None or self.histogram.size == 0


class ColorHistogramExtractor(IFeatureExtractor):
    """
    3-D colour histogram extractor.

    Example:
        >>> extractor = ColorHistogramExtractor(bins=(16, 16, 16))
        >>> a = extractor.extract('a.jpg')
        >>> b = extractor.extract('b.jpg')
        >>> extractor.distance(a, b)
        0.4213...
    """

    name = "color_histogram"

    def __init__(self,
                 bins: Union[int, Sequence[int]] = (32, 32, 32),
                 comparison: str = 'bhattacharyya'):
        """
        Args:
            bins: Bins per channel (one int for all three, or three ints)
            comparison: Key of COMPARISON_METHODS
        """
        if isinstance(bins, int):
            bins = (bins, bins, bins)
        bins = tuple(int(b) for b in bins)
        if len(bins) != 3 or any(b < 1 for b in bins):
            raise ValueError(f"bins must be three positive integers, got {bins}")
        if comparison not in COMPARISON_METHODS:
            raise ValueError(
                f"Unknown comparison: {comparison}. Available: {list(COMPARISON_METHODS)}"
            )

        self.bins = bins
        self.comparison = comparison
        self._method, self._symmetric = COMPARISON_METHODS[comparison]

    def __repr__(self) -> str:
        return f"ColorHistogramExtractor(bins={self.bins}, comparison='{self.comparison}')"

    def compute(self, image: np.ndarray) -> np.ndarray:
        """Histogram of an already loaded BGR image"""
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        return cv2.calcHist(
            [image], [0, 1, 2], None, list(self.bins),
            [0, 256, 0, 256, 0, 256],
            accumulate=False
        )

    def extract(self, path: Union[str, Path]) -> Optional[HistogramDescriptor]:
        path = Path(path)
        try:
            image = cv2.imread(str(path))
            if image is None:
                logger.warning(f"Failed to load {path}")
                return None
            return HistogramDescriptor(self.compute(image), path)
        except cv2.error as e:
            logger.error(f"Failed to calculate histogram for {path}: {e}")
            return None

    def distance(self, lhs: HistogramDescriptor, rhs: HistogramDescriptor) -> float:
        """
        Histogram distance, made symmetric for the asymmetric OpenCV methods
        by averaging both directions.

        Raises:
            ValueError: If a descriptor was already cleared
            InvalidDistanceError: If OpenCV returns NaN
        """
        if lhs.is_empty or rhs.is_empty:
            raise ValueError("Cannot compare a cleared histogram descriptor")

        value = cv2.compareHist(lhs.histogram, rhs.histogram, self._method)
        if not self._symmetric:
            value = 0.5 * (value + cv2.compareHist(rhs.histogram, lhs.histogram, self._method))

        if np.isnan(value):
            raise InvalidDistanceError(f"NaN distance between {lhs.path} and {rhs.path}")
        # Rounding can push identical histograms slightly below zero
        return max(0.0, float(value))


def extract_descriptors(paths: Sequence[Union[str, Path]],
                        extractor: IFeatureExtractor,
                        workers: Optional[int] = None,
                        reporter: Optional[IProgressReporter] = None
                        ) -> Tuple[list, List[Path], List[Path]]:
    """
    Extract descriptors of all paths in parallel.

    Failed items are dropped; the survivors keep their input order.

    Returns:
        (descriptors, kept paths, dropped paths)
    """
    workers = resolve_workers(workers)
    reporter = resolve_reporter(reporter)
    paths = [Path(p) for p in paths]
    reporter.stage("histograms", images=len(paths), workers=workers)

    if workers == 1:
        results = []
        for done, path in enumerate(paths, 1):
            results.append(extractor.extract(path))
            reporter.progress("histograms", done, len(paths))
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(extractor.extract, paths))
        reporter.progress("histograms", len(paths), len(paths))

    descriptors, kept, dropped = [], [], []
    for path, descriptor in zip(paths, results):
        if descriptor is None or getattr(descriptor, "is_empty", False):
            dropped.append(path)
        else:
            descriptors.append(descriptor)
            kept.append(path)

    if dropped:
        logger.warning(f"Dropped {len(dropped)} unreadable images")

    return descriptors, kept, dropped
