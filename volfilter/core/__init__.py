"""Core infrastructure modules."""

from .config import (
    Config,
    FilterConfig,
    IOConfig,
    LoggingConfig,
    create_default_config,
)
from .data_type import DataType
from .utils import (
    configure_logging,
    get_cpu_count,
    normalize_radius,
    validate_file_path,
)
from .volume import Volume, VolumeShape, ensure_tzyxc, STANDARD_AXES, EXPECTED_NDIM

__all__ = [
    # Configuration
    "Config",
    "FilterConfig",
    "IOConfig",
    "LoggingConfig",
    "create_default_config",
    
    # Volumes
    "Volume",
    "VolumeShape",
    "DataType",
    "ensure_tzyxc",
    "STANDARD_AXES",
    "EXPECTED_NDIM",
    
    # Utility functions
    "configure_logging",
    "get_cpu_count",
    "normalize_radius",
    "validate_file_path",
]
