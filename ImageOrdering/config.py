"""
Configuration management for the image ordering pipeline.

This module provides predefined configurations, validation, and
configuration management utilities.
"""

import copy
import json
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional, Tuple

from .data.image_source import DEFAULT_EXTENSIONS
from .data.output_writer import OUTPUT_MODES
from .features.histogram import COMPARISON_METHODS


# =============================================================================
# Default Configurations
# =============================================================================

DEFAULT_CONFIG = {
    'bins': [32, 32, 32],
    'comparison': 'bhattacharyya',
    'extensions': list(DEFAULT_EXTENSIONS),
    'recursive': False,
    'max_images': None,
    'workers': None,            # None: one thread per CPU
    'output_mode': 'hardlink',
    'overwrite': False,
    'write_manifest': False,
    'contact_sheet': False,
    'check_invariants': True,
    'log_level': 'INFO',
    'log_file': None
}


PRESET_CONFIGS = {
    'fast': {
        'bins': [8, 8, 8],
        'comparison': 'bhattacharyya',
        'check_invariants': False
    },

    'balanced': {
        'bins': [16, 16, 16],
        'comparison': 'bhattacharyya'
    },

    'accurate': {
        'bins': [32, 32, 32],
        'comparison': 'bhattacharyya'
    },

    'debug': {
        'bins': [8, 8, 8],
        'workers': 1,
        'write_manifest': True,
        'log_level': 'DEBUG'
    }
}


PRESET_DESCRIPTIONS = {
    'fast': "Coarse 8-bin histograms, no tree verification",
    'balanced': "16 bins per channel",
    'accurate': "32 bins per channel (default)",
    'debug': "Single-threaded with manifest and debug logging"
}


# =============================================================================
# Configuration Functions
# =============================================================================

def get_default_config() -> Dict[str, Any]:
    """Get a copy of the default configuration"""
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries

    Args:
        base_config: Base configuration
        override_config: Configuration to override base with

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def create_config_from_preset(preset: str, **overrides) -> Dict[str, Any]:
    """
    Create configuration from a preset

    Args:
        preset: Preset name ('fast', 'balanced', 'accurate', 'debug')
        **overrides: Values replacing the preset's (None values are ignored)

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If preset is not available
    """
    if preset not in PRESET_CONFIGS:
        available = ', '.join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset: {preset}. Available: {available}")

    config = merge_configs(DEFAULT_CONFIG, PRESET_CONFIGS[preset])
    return merge_configs(config, {k: v for k, v in overrides.items() if v is not None})


def validate_config(config: Dict[str, Any]) -> Dict[str, List[str]]:
    """
    Validate configuration and return any issues

    Args:
        config: Configuration to validate

    Returns:
        Dictionary with validation results:
        {
            'errors': [list of error messages],
            'warnings': [list of warning messages]
        }
    """
    errors = []
    warnings = []

    bins = config.get('bins')
    if isinstance(bins, int):
        bins = [bins] * 3
    if (not isinstance(bins, (list, tuple)) or len(bins) != 3
            or not all(isinstance(b, int) and b > 0 for b in bins)):
        errors.append("'bins' must be a positive integer or a list of three positive integers")
    elif max(bins) > 64:
        warnings.append(f"{max(bins)} bins per channel make histograms very large")

    if config.get('comparison') not in COMPARISON_METHODS:
        errors.append(f"'comparison' must be one of: {list(COMPARISON_METHODS)}")

    if config.get('output_mode') not in OUTPUT_MODES:
        errors.append(f"'output_mode' must be one of: {list(OUTPUT_MODES)}")

    workers = config.get('workers')
    if workers is not None and (not isinstance(workers, int) or workers < 1):
        errors.append("'workers' must be a positive integer or None")

    max_images = config.get('max_images')
    if max_images is not None and (not isinstance(max_images, int) or max_images < 1):
        errors.append("'max_images' must be a positive integer or None")

    extensions = config.get('extensions')
    if not isinstance(extensions, (list, tuple)) or not extensions:
        errors.append("'extensions' must be a non-empty list")

    if str(config.get('log_level', 'INFO')).upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        errors.append(f"Unknown log level: {config.get('log_level')}")

    if not config.get('check_invariants', True):
        warnings.append("Spanning tree verification is disabled")

    unknown = set(config) - set(DEFAULT_CONFIG)
    for key in sorted(unknown):
        warnings.append(f"Unknown configuration key: {key}")

    return {'errors': errors, 'warnings': warnings}


def save_config(config: Dict[str, Any], filepath: str):
    """
    Save configuration to JSON file

    Args:
        config: Configuration to save
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(config, f, indent=2)


def load_config(filepath: str, apply_defaults: bool = True) -> Dict[str, Any]:
    """
    Load configuration from JSON file

    Args:
        filepath: Path to configuration file
        apply_defaults: Fill keys missing from the file with DEFAULT_CONFIG

    Returns:
        Loaded configuration

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        config = json.load(f)

    if apply_defaults:
        return merge_configs(DEFAULT_CONFIG, config)
    return config


def get_available_presets() -> List[str]:
    """Get list of available preset configurations"""
    return list(PRESET_CONFIGS.keys())


def print_available_presets():
    """Print all available presets with descriptions"""
    print("\nAvailable Configuration Presets:")
    print("=" * 40)

    for preset in get_available_presets():
        print(f"\n{preset}:")
        print(f"  Description: {PRESET_DESCRIPTIONS.get(preset, 'No description available')}")
        print(f"  Bins: {create_config_from_preset(preset)['bins']}")


# =============================================================================
# Typed configuration
# =============================================================================

@dataclass
class SortConfig:
    """Validated configuration of an ImageSortPipeline run"""

    # Descriptors
    bins: Tuple[int, int, int] = (32, 32, 32)
    comparison: str = 'bhattacharyya'

    # Input
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    recursive: bool = False
    max_images: Optional[int] = None

    # Processing
    workers: Optional[int] = None
    check_invariants: bool = True

    # Output
    output_mode: str = 'hardlink'
    overwrite: bool = False
    write_manifest: bool = False
    contact_sheet: bool = False

    # Logging
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'SortConfig':
        """
        Build from a configuration dictionary (missing keys use defaults).

        Raises:
            ValueError: If validate_config reports errors
        """
        merged = merge_configs(DEFAULT_CONFIG, config)
        issues = validate_config(merged)
        if issues['errors']:
            raise ValueError("Invalid configuration: " + "; ".join(issues['errors']))

        bins = merged['bins']
        if isinstance(bins, int):
            bins = [bins] * 3

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in merged.items() if k in known}
        values['bins'] = tuple(bins)
        values['extensions'] = tuple(merged['extensions'])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        config = asdict(self)
        config['bins'] = list(self.bins)
        config['extensions'] = list(self.extensions)
        return config
