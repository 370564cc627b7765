"""
Folder-based image enumeration.

Collects image files by extension without loading any pixel data. The
order of the returned list fixes the node indices used by the ordering
engine, so it is sorted to keep runs reproducible.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional

from ..logger import get_logger


logger = get_logger("image_source")

DEFAULT_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.jfif')


class FolderImageSource:
    """
    Image files of a folder, selected by extension.

    Regular files and symlinks are accepted; directory symlinks are followed
    when scanning recursively. Extension matching is case-insensitive.

    Example:
        >>> source = FolderImageSource('./holiday')
        >>> paths = source.get_paths()
        >>> len(source)
        118
    """

    def __init__(
        self,
        folder_path: str,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        recursive: bool = False,
        max_images: Optional[int] = None
    ):
        """
        Args:
            folder_path: Folder to scan
            extensions: Accepted file extensions (with leading dot)
            recursive: Descend into sub folders
            max_images: Keep only the first N files (after sorting)

        Raises:
            FileNotFoundError: If the folder does not exist
            NotADirectoryError: If the path is not a folder
        """
        self.folder_path = Path(folder_path)
        self.extensions = tuple(self._normalize_extension(ext) for ext in extensions)
        self.recursive = recursive
        self.max_images = max_images

        if not self.folder_path.exists():
            raise FileNotFoundError(f"Folder does not exist: {self.folder_path}")
        if not self.folder_path.is_dir():
            raise NotADirectoryError(f"{self.folder_path} is not a directory")

        self._paths: Optional[List[Path]] = None

    @staticmethod
    def _normalize_extension(ext: str) -> str:
        ext = ext.lower()
        return ext if ext.startswith('.') else f'.{ext}'

    def _is_image(self, entry: os.DirEntry) -> bool:
        if os.path.splitext(entry.name)[1].lower() not in self.extensions:
            return False
        return entry.is_file() or entry.is_symlink()

    def _scan(self, folder: Path, visited: set) -> List[Path]:
        # Symlinked directories can point back up the tree
        real = os.path.realpath(folder)
        if real in visited:
            return []
        visited.add(real)

        found = []
        with os.scandir(folder) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=True):
                    if self.recursive:
                        found.extend(self._scan(Path(entry.path), visited))
                elif self._is_image(entry):
                    found.append(Path(entry.path))
        return found

    def get_paths(self) -> List[Path]:
        """Sorted image paths (scanned once, then cached)"""
        if self._paths is None:
            paths = sorted(self._scan(self.folder_path, set()))
            if self.max_images:
                paths = paths[:self.max_images]
            self._paths = paths
            logger.debug(f"Found {len(paths)} images in {self.folder_path}")
        return list(self._paths)

    def __len__(self) -> int:
        return len(self.get_paths())

    def __iter__(self):
        return iter(self.get_paths())

    def __repr__(self) -> str:
        return f"FolderImageSource({self.folder_path}, recursive={self.recursive})"


def get_images_from_folder(folder_path: str,
                           extensions: Iterable[str] = DEFAULT_EXTENSIONS,
                           recursive: bool = False) -> List[Path]:
    """
    Extract all image files from a given folder

    Args:
        folder_path: Path to the folder containing images
        extensions: Accepted file extensions
        recursive: Descend into sub folders

    Returns:
        Sorted list of image paths
    """
    return FolderImageSource(folder_path, extensions=extensions, recursive=recursive).get_paths()
