"""
Materialisation of an ordering as files on disk.

Every item of the order is linked (or copied) into the output folder as
``{position:05d}.{original name}`` so that any file browser sorting by name
shows the images in similarity order.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..logger import get_logger


logger = get_logger("output")

OUTPUT_MODES = ('hardlink', 'symlink', 'copy')
MANIFEST_NAME = 'order_manifest.csv'


def target_name(position: int, source: Path) -> str:
    return f"{position:05d}.{source.name}"


class OrderedOutputWriter:
    """
    Writes ordered images into an output folder.

    Example:
        >>> writer = OrderedOutputWriter('./sorted', mode='symlink')
        >>> targets = writer.write(paths, order)
    """

    def __init__(self, output_dir: Union[str, Path], mode: str = 'hardlink', overwrite: bool = False):
        """
        Args:
            output_dir: Folder receiving the ordered entries (created if needed)
            mode: 'hardlink', 'symlink' or 'copy'
            overwrite: Replace entries that already exist
        """
        if mode not in OUTPUT_MODES:
            raise ValueError(f"Unknown output mode: {mode}. Available: {list(OUTPUT_MODES)}")

        self.output_dir = Path(output_dir)
        self.mode = mode
        self.overwrite = overwrite

    def _materialize(self, source: Path, target: Path):
        if target.exists() or target.is_symlink():
            target.unlink()

        if self.mode == 'hardlink':
            os.link(source, target)
        elif self.mode == 'symlink':
            target.symlink_to(source.resolve())
        else:
            shutil.copy2(source, target)

    def write(self, paths: Sequence[Union[str, Path]], order: Sequence[int]) -> List[Path]:
        """
        Materialise paths in the given order.

        Args:
            paths: Item paths, indexed by node index
            order: Permutation of node indices

        Returns:
            Created targets, in output order

        Raises:
            ValueError: If order is not a permutation of range(len(paths))
            FileExistsError: If any entry exists and overwrite is off (nothing
                is written in that case)
        """
        if sorted(order) != list(range(len(paths))):
            raise ValueError(f"Order is not a permutation of {len(paths)} items")

        sources = [Path(paths[index]) for index in order]
        targets = [
            self.output_dir / target_name(position, source)
            for position, source in enumerate(sources)
        ]

        # Nothing is written unless every entry can be written
        if not self.overwrite:
            existing = [t for t in targets if t.exists() or t.is_symlink()]
            if existing:
                raise FileExistsError(
                    f"{len(existing)} output entries already exist, first: {existing[0]}"
                )

        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Populating output directory {self.output_dir} ({self.mode})...")

        for source, target in zip(sources, targets):
            self._materialize(source, target)

        return targets


def write_manifest(paths: Sequence[Union[str, Path]],
                   order: Sequence[int],
                   output_dir: Union[str, Path],
                   targets: Optional[Sequence[Path]] = None,
                   adjacent_distances: Optional[Sequence[float]] = None,
                   filename: str = MANIFEST_NAME) -> Path:
    """
    Export the ordering as CSV (position, index, source, target, distance
    to the previous item).

    Returns:
        Path of the written CSV
    """
    rows = []
    for position, index in enumerate(order):
        source = Path(paths[index])
        rows.append({
            'position': position,
            'index': index,
            'source': str(source),
            'target': str(targets[position]) if targets else target_name(position, source),
            'distance_to_previous': (
                adjacent_distances[position - 1]
                if adjacent_distances is not None and position > 0 else None
            ),
        })

    output_path = Path(output_dir) / filename
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(output_path, index=False)
    logger.info(f"Manifest written to {output_path}")
    return output_path
