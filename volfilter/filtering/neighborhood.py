"""Neighborhood extraction over the Z-slices of one (t, c) channel.

A :class:`SliceCache` holds the raw plane buffers of every Z-slice of one
channel at one time point, plus their double precision copy used for
gathering. A :class:`NeighborhoodExtractor` walks the axis-aligned box
around a center pixel, clamped to the volume, and copies the visited values
(Z, then Y, then X) into a caller-provided scratch buffer.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from ..core.data_type import DataType
from ..core.volume import Volume
from .pixel_access import get_value, to_double_array

logger = logging.getLogger(__name__)

Bounds = Tuple[int, int]


def clamp_bounds(center: int, radius: int, size: int) -> Bounds:
    """Inclusive-exclusive window ``[center - radius, center + radius]`` clamped to ``[0, size)``."""
    return max(center - radius, 0), min(center + radius + 1, size)


class SliceCache:
    """Read-only Z-stack of one channel at one time point."""

    def __init__(self, volume: Volume, t: int, c: int):
        shape = volume.shape
        self.width = shape.size_x
        self.height = shape.size_y
        self.depth = shape.size_z
        self.data_type: DataType = volume.data_type

        self.planes: List[np.ndarray] = [volume.get_plane(t, z, c) for z in range(self.depth)]
        stack = np.empty((self.depth, self.height, self.width), dtype=np.float64)
        for z, plane in enumerate(self.planes):
            stack[z] = to_double_array(plane, self.data_type).reshape(self.height, self.width)
        stack.flags.writeable = False
        self.stack = stack

    def center_value(self, x: int, y: int, z: int) -> float:
        return get_value(self.planes[z], y * self.width + x, self.data_type)


class NeighborhoodExtractor:
    """Gathers clamped neighborhoods from a :class:`SliceCache`.

    Args:
        cache: Z-stack to read from.
        radius: Normalized (rx, ry, rz) half-window sizes.
    """

    def __init__(self, cache: SliceCache, radius: Tuple[int, int, int]):
        self.cache = cache
        self.rx, self.ry, self.rz = radius

    def z_bounds(self, z: int) -> Bounds:
        return clamp_bounds(z, self.rz, self.cache.depth)

    def y_bounds(self, y: int) -> Bounds:
        return clamp_bounds(y, self.ry, self.cache.height)

    def x_bounds(self, x: int) -> Bounds:
        return clamp_bounds(x, self.rx, self.cache.width)

    def line_capacity(self, y_bounds: Bounds, z_bounds: Bounds) -> int:
        """Largest neighborhood any pixel of a scan-line can have.

        Uses the clamped Z/Y ranges of the line and the unclamped X radius.
        """
        return (z_bounds[1] - z_bounds[0]) * (y_bounds[1] - y_bounds[0]) * (2 * self.rx + 1)

    def gather(self, x: int, y_bounds: Bounds, z_bounds: Bounds, out: np.ndarray) -> int:
        """Copy the neighborhood of column ``x`` into ``out``.

        Returns:
            Number of populated slots, i.e. the count of in-bounds lattice
            points. Slots past it hold stale values.
        """
        x0, x1 = self.x_bounds(x)
        box = self.cache.stack[z_bounds[0]:z_bounds[1], y_bounds[0]:y_bounds[1], x0:x1]
        count = box.size
        out[:count] = box.reshape(-1)
        return count

    def neighborhood(self, x: int, y: int, z: int) -> np.ndarray:
        """Neighborhood of a single pixel as a new array."""
        y_bounds, z_bounds = self.y_bounds(y), self.z_bounds(z)
        out = np.empty(self.line_capacity(y_bounds, z_bounds), dtype=np.float64)
        count = self.gather(x, y_bounds, z_bounds, out)
        return out[:count]
