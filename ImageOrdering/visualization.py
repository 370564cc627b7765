"""
Visualization of an ordering.

- contact sheet: thumbnails in output order, row by row
- adjacent distance profile: distance between consecutive items, which
  shows where the ordering jumps between unrelated groups
"""

import math
from pathlib import Path
from typing import List, Optional, Sequence, Union

import cv2
import matplotlib.pyplot as plt
import numpy as np

from .core.structures import DistanceStore
from .logger import get_logger


logger = get_logger("visualization")


def adjacent_distances(order: Sequence[int], store: DistanceStore) -> List[float]:
    """Distance between each item of the order and the one before it"""
    return [store.get(a, b) for a, b in zip(order[:-1], order[1:])]


def _thumbnail(path: Path, size: int) -> Optional[np.ndarray]:
    image = cv2.imread(str(path))
    if image is None:
        return None
    height, width = image.shape[:2]
    scale = size / max(height, width)
    image = cv2.resize(image, (max(1, int(width * scale)), max(1, int(height * scale))),
                       interpolation=cv2.INTER_AREA)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def plot_order_contact_sheet(paths: Sequence[Union[str, Path]],
                             output_path: Union[str, Path],
                             columns: int = 8,
                             thumbnail_size: int = 128,
                             title: Optional[str] = None) -> Path:
    """
    Save a grid of thumbnails, one per path, in the given order.

    Args:
        paths: Image paths already in output order
        output_path: Image file to write (format from the suffix)
        columns: Thumbnails per row
        thumbnail_size: Longest thumbnail side in pixels
        title: Optional figure title

    Returns:
        Path of the written figure
    """
    if not paths:
        raise ValueError("No images to plot")

    columns = max(1, min(columns, len(paths)))
    rows = math.ceil(len(paths) / columns)

    fig, axes = plt.subplots(rows, columns, figsize=(columns * 1.6, rows * 1.6), squeeze=False)
    for position, ax in enumerate(axes.flat):
        ax.axis('off')
        if position >= len(paths):
            continue
        thumbnail = _thumbnail(Path(paths[position]), thumbnail_size)
        if thumbnail is None:
            logger.warning(f"Skipping unreadable image in contact sheet: {paths[position]}")
            continue
        ax.imshow(thumbnail)
        ax.set_title(f"{position:05d}", fontsize=7)

    if title:
        fig.suptitle(title, fontsize=12, fontweight='bold')
    fig.tight_layout()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=100)
    plt.close(fig)

    logger.info(f"Contact sheet saved to {output_path}")
    return output_path


def plot_adjacent_distances(distances: Sequence[float],
                            output_path: Union[str, Path],
                            title: str = "Distance to previous image") -> Path:
    """Save a line plot of the distances between consecutive items"""
    fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    positions = np.arange(1, len(distances) + 1)
    ax.plot(positions, distances, marker='.', linewidth=1)
    if len(distances):
        ax.axhline(float(np.mean(distances)), color='gray', linestyle='--', linewidth=0.8, label='mean')
        ax.legend(loc='upper right')
    ax.set_xlabel("Position in order")
    ax.set_ylabel("Distance")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=100)
    plt.close(fig)
    return output_path
