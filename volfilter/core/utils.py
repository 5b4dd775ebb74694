"""
Utility functions for the volfilter package.
Helpers for radius handling, file validation, logging setup and CPU detection.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def normalize_radius(radius: Sequence[int]) -> Tuple[int, int, int]:
    """Expand a 1-3 element radius list to per-axis half-window sizes.

    A single value applies to X, Y and Z. Two values describe a 2D window
    (X, Y), each Z section being filtered independently.

    Args:
        radius: Neighborhood radius per axis, in (X, Y, Z) order.

    Returns:
        Tuple[int, int, int]: (rx, ry, rz).

    Raises:
        ValueError: If the list is empty, longer than 3 or holds negative values.
    """
    values = [int(r) for r in radius]

    if len(values) == 0:
        raise ValueError("Provide at least one filter radius")
    if len(values) > 3:
        raise ValueError(f"At most 3 radius values (X, Y, Z) are supported, got {len(values)}")
    if any(r < 0 for r in values):
        raise ValueError(f"Radius values must be non-negative, got {values}")

    rx = values[0]
    ry = values[1] if len(values) > 1 else rx
    if len(values) == 1:
        rz = rx
    elif len(values) == 2:
        rz = 0
    else:
        rz = values[2]

    return rx, ry, rz


def validate_file_path(filepath: Path, valid_extensions: List[str]) -> None:
    """Validate that a file exists and has the correct extension.
    
    Args:
        filepath: Path to validate.
        valid_extensions: List of valid file extensions (e.g., ['.tif', '.tiff']).
        
    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file extension is not valid.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    
    if not filepath.is_file():
        raise ValueError(f"Path is not a file: {filepath}")
    
    extension = filepath.suffix.lower()
    valid_extensions = [ext.lower() for ext in valid_extensions]
    
    if extension not in valid_extensions:
        raise ValueError(
            f"Invalid file extension: {extension}. "
            f"Valid extensions: {valid_extensions}"
        )


def configure_logging(level: str = 'INFO', verbose: bool = True) -> None:
    """Setup logging configuration for command line use.

    Args:
        level: Name of the logging level ('DEBUG', 'INFO', ...).
        verbose: If False, only warnings and errors are reported.
    """
    if not verbose:
        level = 'WARNING'
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)


def get_cpu_count(default: int = 4) -> int:
    """Number of hardware threads available to this process."""
    count: Optional[int] = os.cpu_count()
    return count if count else default
