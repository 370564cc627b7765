"""
Command line interface.

Usage:
    img-sort ./holiday ./holiday_sorted
    img-sort ./holiday ./holiday_sorted --preset fast --mode symlink --manifest
"""

import argparse
import sys
from typing import List, Optional

from .config import (
    PRESET_CONFIGS,
    SortConfig,
    create_config_from_preset,
    load_config,
    merge_configs,
    validate_config,
)
from .core.exceptions import OrderingError
from .data.output_writer import OUTPUT_MODES
from .features.histogram import COMPARISON_METHODS
from .logger import configure_root_logger, get_logger
from .pipeline import ImageSortPipeline


logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img-sort",
        description="Order images by colour similarity into a numbered output folder"
    )

    # Input/Output
    parser.add_argument('source', type=str, help='Folder containing the images')
    parser.add_argument('output', type=str, help='Folder receiving the ordered entries')

    # Configuration
    parser.add_argument('--preset', type=str, default='accurate',
                        choices=list(PRESET_CONFIGS),
                        help='Configuration preset (default: accurate)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON configuration file (applied on top of the preset)')

    # Descriptors
    parser.add_argument('--bins', type=int, default=None,
                        help='Histogram bins per colour channel')
    parser.add_argument('--comparison', type=str, default=None,
                        choices=list(COMPARISON_METHODS),
                        help='Histogram distance')

    # Input options
    parser.add_argument('--recursive', action='store_true',
                        help='Include images from sub folders')
    parser.add_argument('--max-images', type=int, default=None,
                        help='Only use the first N images (sorted by name)')

    # Processing
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker threads (default: one per CPU)')

    # Output options
    parser.add_argument('--mode', type=str, default=None,
                        choices=list(OUTPUT_MODES),
                        help='How entries are created (default: hardlink)')
    parser.add_argument('--overwrite', action='store_true',
                        help='Replace existing output entries')
    parser.add_argument('--manifest', action='store_true',
                        help='Write order_manifest.csv')
    parser.add_argument('--contact-sheet', action='store_true',
                        help='Save a thumbnail grid of the order')

    # Logging
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Log to file')

    return parser


def config_from_args(args: argparse.Namespace) -> SortConfig:
    config = create_config_from_preset(args.preset)
    if args.config:
        config = merge_configs(config, load_config(args.config, apply_defaults=False))

    overrides = {
        'bins': args.bins,
        'comparison': args.comparison,
        'max_images': args.max_images,
        'workers': args.workers,
        'output_mode': args.mode,
        'log_file': args.log_file,
        'log_level': 'DEBUG' if args.verbose else None,
        'recursive': True if args.recursive else None,
        'overwrite': True if args.overwrite else None,
        'write_manifest': True if args.manifest else None,
        'contact_sheet': True if args.contact_sheet else None,
    }
    config = merge_configs(config, {k: v for k, v in overrides.items() if v is not None})

    issues = validate_config(config)
    for warning in issues['warnings']:
        logger.warning(warning)

    return SortConfig.from_dict(config)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except (ValueError, FileNotFoundError) as e:
        configure_root_logger()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_root_logger(level=config.log_level, log_file=config.log_file)

    try:
        result = ImageSortPipeline(config).run(args.source, args.output)
    except (FileNotFoundError, NotADirectoryError, FileExistsError) as e:
        logger.error(str(e))
        return 1
    except OrderingError as e:
        logger.critical(f"Ordering failed: {e}")
        return 1

    if not result.order and result.dropped_paths:
        # Images were found but none could be read
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
