#!/usr/bin/env python3
"""
Image Sorting - Main Script

Orders the images of a folder by colour similarity and links them into an
output folder as 00000.<name>, 00001.<name>, ...

Usage:
    python run_image_sort.py ./images ./images_sorted
    python run_image_sort.py ./images ./images_sorted --preset fast --manifest --contact-sheet
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from ImageOrdering.cli import main


if __name__ == "__main__":
    sys.exit(main())
