"""Selection filter strategies.

A strategy maps the neighborhood of a pixel to one output value. Only the
first ``count`` slots of the neighborhood buffer are meaningful. The
neighborhood always contains the center pixel itself.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Protocol, Type, runtime_checkable

import numpy as np


@runtime_checkable
class FilterStrategy(Protocol):
    """Uniform interface for neighborhood scoring functions."""

    name: str

    def score(self, center: float, neighborhood: np.ndarray, count: int) -> float:
        ...


_REGISTRY: Dict[str, Type] = {}


def register_strategy(cls: Type) -> Type:
    """Class decorator adding a strategy to the name registry."""
    _REGISTRY[cls.name] = cls
    return cls


def get_strategy(name: str) -> FilterStrategy:
    """Instantiate the registered strategy called ``name``."""
    try:
        return _REGISTRY[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown filter strategy: {name}. Available: {available_strategies()}"
        ) from None


def available_strategies() -> List[str]:
    return sorted(_REGISTRY)


@register_strategy
class LocalMaximumFilter:
    """Marks strict local maxima with 1, everything else with 0.

    A pixel scores 0 as soon as one neighbor is greater. Otherwise it scores 1
    only if at least one neighbor is smaller, so plateaus are not maxima.
    """

    name = 'local_max'

    def score(self, center: float, neighborhood: np.ndarray, count: int) -> float:
        values = neighborhood[:count]
        if (values > center).any():
            return 0.0
        return 1.0 if (values < center).any() else 0.0


class _ReducingFilter:
    """Applies a numpy reduction to the populated part of the neighborhood."""

    name = ''
    reduce: Callable[[np.ndarray], float]

    def score(self, center: float, neighborhood: np.ndarray, count: int) -> float:
        return float(self.reduce(neighborhood[:count]))


@register_strategy
class MinimumFilter(_ReducingFilter):
    name = 'min'
    reduce = staticmethod(np.min)


@register_strategy
class MaximumFilter(_ReducingFilter):
    name = 'max'
    reduce = staticmethod(np.max)


@register_strategy
class MeanFilter(_ReducingFilter):
    name = 'mean'
    reduce = staticmethod(np.mean)


@register_strategy
class MedianFilter(_ReducingFilter):
    name = 'median'
    reduce = staticmethod(np.median)


@register_strategy
class VarianceFilter(_ReducingFilter):
    """Population variance of the neighborhood."""

    name = 'variance'
    reduce = staticmethod(np.var)


@register_strategy
class StandardDeviationFilter(_ReducingFilter):
    name = 'std'
    reduce = staticmethod(np.std)
