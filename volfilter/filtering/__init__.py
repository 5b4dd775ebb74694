"""Neighborhood (selection) filtering engine."""

from .engine import FilterResult, SelectionFilterEngine, run
from .neighborhood import NeighborhoodExtractor, SliceCache, clamp_bounds
from .pixel_access import double_array_to_safe_array, get_value, set_value, to_double_array
from .scheduler import (
    CancellationToken,
    PlaneOutcome,
    PlaneScheduler,
    create_pool,
    get_default_pool,
)
from .strategies import (
    FilterStrategy,
    LocalMaximumFilter,
    MaximumFilter,
    MeanFilter,
    MedianFilter,
    MinimumFilter,
    StandardDeviationFilter,
    VarianceFilter,
    available_strategies,
    get_strategy,
    register_strategy,
)

__all__ = [
    # Engine
    "run",
    "SelectionFilterEngine",
    "FilterResult",
    # Scheduling
    "CancellationToken",
    "PlaneScheduler",
    "PlaneOutcome",
    "get_default_pool",
    "create_pool",
    # Neighborhoods
    "NeighborhoodExtractor",
    "SliceCache",
    "clamp_bounds",
    # Pixel access
    "get_value",
    "set_value",
    "to_double_array",
    "double_array_to_safe_array",
    # Strategies
    "FilterStrategy",
    "LocalMaximumFilter",
    "MinimumFilter",
    "MaximumFilter",
    "MeanFilter",
    "MedianFilter",
    "VarianceFilter",
    "StandardDeviationFilter",
    "available_strategies",
    "get_strategy",
    "register_strategy",
]
