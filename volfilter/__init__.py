"""
volfilter: threaded neighborhood filtering of 5D microscopy volumes.

Selection filters (local maximum, min, max, mean, median, variance, std)
applied over clamped X/Y/Z windows of every pixel of a TZYXC volume.
"""

__version__ = "0.1.0"

# Core utilities
from .core import Config, FilterConfig, DataType, Volume, VolumeShape
from .core import normalize_radius, configure_logging

# Data processing
from .data_processing import load_volume, save_volume

# Filtering engine
from .filtering import (
    CancellationToken,
    FilterResult,
    FilterStrategy,
    SelectionFilterEngine,
    available_strategies,
    get_strategy,
    register_strategy,
    run,
)

# Export all public components
__all__ = [
    "__version__",
    
    # Core utilities
    "Config",
    "FilterConfig",
    "DataType",
    "Volume",
    "VolumeShape",
    "normalize_radius",
    "configure_logging",
    
    # Data processing
    "load_volume",
    "save_volume",
    
    # Filtering
    "run",
    "SelectionFilterEngine",
    "FilterResult",
    "FilterStrategy",
    "CancellationToken",
    "available_strategies",
    "get_strategy",
    "register_strategy",
]
