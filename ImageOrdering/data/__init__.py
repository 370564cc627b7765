"""Input enumeration and output materialisation"""

from .image_source import (
    FolderImageSource,
    get_images_from_folder,
    DEFAULT_EXTENSIONS,
)
from .output_writer import (
    OrderedOutputWriter,
    write_manifest,
    target_name,
    OUTPUT_MODES,
    MANIFEST_NAME,
)

__all__ = [
    'FolderImageSource',
    'get_images_from_folder',
    'DEFAULT_EXTENSIONS',
    'OrderedOutputWriter',
    'write_manifest',
    'target_name',
    'OUTPUT_MODES',
    'MANIFEST_NAME',
]
