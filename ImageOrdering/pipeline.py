"""
End-to-end image sorting pipeline.

    folder -> histograms -> pairwise distances -> spanning tree -> preorder
           -> numbered links in the output folder

Unreadable images are dropped before ordering. Histogram data is released
once the distances are known, and the distance store once the order is
known, so peak memory is bounded by the store.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import psutil

from .ordering import build_order
from .config import SortConfig, get_default_config
from .core.interfaces import IFeatureExtractor, IProgressReporter, LoggingReporter
from .core.structures import DistanceStore
from .data.image_source import FolderImageSource
from .data.output_writer import OrderedOutputWriter, write_manifest
from .features.distances import compute_distance_store
from .features.histogram import ColorHistogramExtractor, extract_descriptors
from .logger import get_logger
from .visualization import adjacent_distances, plot_adjacent_distances, plot_order_contact_sheet


logger = get_logger("pipeline")


@dataclass
class SortResult:
    """Outcome of one pipeline run"""
    paths: List[Path] = field(default_factory=list)
    ordered_paths: List[Path] = field(default_factory=list)
    order: List[int] = field(default_factory=list)
    dropped_paths: List[Path] = field(default_factory=list)
    targets: List[Path] = field(default_factory=list)
    adjacent_distances: Optional[List[float]] = None
    manifest_path: Optional[Path] = None
    contact_sheet_path: Optional[Path] = None
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def num_images(self) -> int:
        return len(self.ordered_paths)

    def summary(self) -> Dict[str, Any]:
        return {
            'num_images': self.num_images,
            'num_dropped': len(self.dropped_paths),
            'num_written': len(self.targets),
            'total_time': sum(self.timings.values()),
        }


def _memory_mb() -> float:
    return psutil.Process().memory_info().rss / 1024 / 1024


class ImageSortPipeline:
    """
    Orders the images of a folder by colour similarity.

    Example:
        >>> pipeline = ImageSortPipeline(SortConfig(bins=(16, 16, 16)))
        >>> result = pipeline.run('./holiday', './holiday_sorted')
        >>> result.ordered_paths[:3]
    """

    def __init__(self,
                 config: Optional[Union[SortConfig, Dict[str, Any]]] = None,
                 extractor: Optional[IFeatureExtractor] = None,
                 reporter: Optional[IProgressReporter] = None):
        """
        Args:
            config: SortConfig or configuration dictionary (defaults if None)
            extractor: Descriptor extractor (colour histograms by default)
            reporter: Progress reporter (logs through the package logger by default)
        """
        if config is None:
            config = get_default_config()
        if isinstance(config, dict):
            config = SortConfig.from_dict(config)

        self.config = config
        self.extractor = extractor or ColorHistogramExtractor(
            bins=config.bins, comparison=config.comparison
        )
        self.reporter = reporter or LoggingReporter(get_logger("progress"))

    # =========================================================================
    # Stages
    # =========================================================================

    def find_images(self, source_dir: Union[str, Path]) -> List[Path]:
        logger.info(f"Searching for images in {source_dir}...")
        source = FolderImageSource(
            source_dir,
            extensions=self.config.extensions,
            recursive=self.config.recursive,
            max_images=self.config.max_images
        )
        return source.get_paths()

    def compute_order(self, paths: Sequence[Union[str, Path]], result: SortResult,
                      keep_store: bool = False) -> Optional[DistanceStore]:
        """
        Fill result with the order of paths (no files are written).

        Returns:
            The distance store if keep_store is set, None otherwise
        """
        start = time.time()
        logger.info(f"Found {len(paths)} images. Computing histograms...")
        descriptors, kept, dropped = extract_descriptors(
            paths, self.extractor, workers=self.config.workers, reporter=self.reporter
        )
        result.dropped_paths = dropped
        result.paths = list(kept)
        result.timings['histograms'] = time.time() - start

        if not descriptors:
            logger.warning("No histograms were computed")
            return None
        if len(descriptors) == 1:
            logger.info("Only one image loaded. Nothing to do")
            result.order = [0]
            result.ordered_paths = list(kept)
            return None

        start = time.time()
        logger.info(f"Computed {len(descriptors)} histograms. Calculating differences...")
        store = compute_distance_store(
            descriptors, self.extractor.distance,
            workers=self.config.workers, reporter=self.reporter
        )
        for descriptor in descriptors:
            descriptor.clear()
        result.timings['distances'] = time.time() - start
        logger.info(
            f"Distance store: {store.nbytes / 1024 / 1024:.1f} MB, "
            f"process memory: {_memory_mb():.1f} MB"
        )

        start = time.time()
        logger.info("Computing MST and generating sort order...")
        result.order = build_order(
            len(descriptors), store,
            reporter=self.reporter,
            check_invariants=self.config.check_invariants,
            release_store=not keep_store
        )
        result.ordered_paths = [kept[index] for index in result.order]
        result.timings['sort_order'] = time.time() - start

        if keep_store:
            result.adjacent_distances = adjacent_distances(result.order, store)
            return store
        return None

    # =========================================================================
    # Entry points
    # =========================================================================

    def order_paths(self, paths: Sequence[Union[str, Path]]) -> SortResult:
        """Order the given images without writing anything"""
        result = SortResult()
        self.compute_order(paths, result)
        return result

    def run(self, source_dir: Union[str, Path], output_dir: Union[str, Path]) -> SortResult:
        """
        Sort the images of source_dir into output_dir.

        Raises:
            FileNotFoundError, NotADirectoryError: Bad source folder
            FileExistsError: Output entries exist and overwrite is off
            OrderingError: Ordering engine failure
        """
        result = SortResult()
        paths = self.find_images(source_dir)
        if not paths:
            logger.info(f"{source_dir} is empty. Nothing to do")
            return result

        wants_distances = self.config.write_manifest or self.config.contact_sheet
        store = self.compute_order(paths, result, keep_store=wants_distances)
        if store is not None:
            store.release()

        if not result.order:
            return result

        start = time.time()
        writer = OrderedOutputWriter(output_dir, mode=self.config.output_mode,
                                     overwrite=self.config.overwrite)
        result.targets = writer.write(result.paths, result.order)

        if self.config.write_manifest:
            result.manifest_path = write_manifest(
                result.paths, result.order, output_dir,
                targets=result.targets, adjacent_distances=result.adjacent_distances
            )

        if self.config.contact_sheet:
            result.contact_sheet_path = plot_order_contact_sheet(
                result.ordered_paths, Path(output_dir) / "contact_sheet.png",
                title=f"{result.num_images} images in similarity order"
            )
            if result.adjacent_distances:
                plot_adjacent_distances(result.adjacent_distances,
                                        Path(output_dir) / "adjacent_distances.png")

        result.timings['output'] = time.time() - start
        logger.info(f"Done: {len(result.targets)} images written to {output_dir}")
        return result
