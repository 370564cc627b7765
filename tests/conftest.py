import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import cv2
import numpy as np
import pytest

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))


RED = (0, 0, 255)
BLUE = (255, 0, 0)


def write_two_tone_image(path: Path, red_columns: int, width: int = 10, height: int = 10) -> Path:
    """PNG whose first red_columns columns are red and the rest blue"""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :red_columns] = RED
    image[:, red_columns:] = BLUE
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def two_tone_folder(tmp_path):
    """
    Five images on a red/blue "line". Sorted by name the red share is
    a=0.5, b=0.1, c=0.9, d=0.3, e=0.7, so name order and colour order differ.
    """
    folder = tmp_path / "images"
    folder.mkdir()
    for name, red_columns in [('a', 5), ('b', 1), ('c', 9), ('d', 3), ('e', 7)]:
        write_two_tone_image(folder / f"{name}.png", red_columns)
    return folder


@pytest.fixture
def worked_example_distances():
    """d(0,2)=1, d(0,1)=5, d(0,3)=9, d(1,2)=2, d(1,3)=1, d(2,3)=8"""
    return np.array([
        [0, 5, 1, 9],
        [5, 0, 2, 1],
        [1, 2, 0, 8],
        [9, 1, 8, 0],
    ], dtype=float)
