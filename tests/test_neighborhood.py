"""Unit tests for neighborhood extraction."""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from volfilter.core.utils import normalize_radius
from volfilter.core.volume import Volume
from volfilter.filtering.neighborhood import NeighborhoodExtractor, SliceCache, clamp_bounds


def _random_volume(z: int = 4, y: int = 6, x: int = 7, c: int = 2) -> Volume:
    rng = np.random.default_rng(42)
    data = rng.integers(0, 1000, size=(1, z, y, x, c)).astype(np.uint16)
    return Volume(data, axes="TZYXC")


def test_clamp_bounds() -> None:
    assert clamp_bounds(0, 2, 10) == (0, 3)
    assert clamp_bounds(5, 2, 10) == (3, 8)
    assert clamp_bounds(9, 2, 10) == (7, 10)
    assert clamp_bounds(1, 5, 3) == (0, 3)
    assert clamp_bounds(4, 0, 10) == (4, 5)


def test_normalize_radius_defaults() -> None:
    assert normalize_radius([2]) == (2, 2, 2)
    assert normalize_radius([2, 3]) == (2, 3, 0)
    assert normalize_radius([2, 3, 1]) == (2, 3, 1)


@pytest.mark.parametrize("radius", [[], [1, 1, 1, 1], [1, -1]])
def test_normalize_radius_rejects_invalid(radius) -> None:
    with pytest.raises(ValueError):
        normalize_radius(radius)


def test_slice_cache_holds_channel_stack() -> None:
    volume = _random_volume()
    cache = SliceCache(volume, 0, 1)

    assert cache.stack.shape == (4, 6, 7)
    assert cache.stack.dtype == np.float64
    assert np.array_equal(cache.stack, volume.data[0, :, :, :, 1])
    assert cache.center_value(3, 2, 1) == float(volume.data[0, 1, 2, 3, 1])


def test_interior_neighborhood_has_full_size() -> None:
    volume = _random_volume(z=5, y=7, x=9)
    extractor = NeighborhoodExtractor(SliceCache(volume, 0, 0), (2, 1, 1))

    values = extractor.neighborhood(4, 3, 2)

    assert values.size == (2 * 2 + 1) * (2 * 1 + 1) * (2 * 1 + 1)


def test_neighborhood_size_matches_in_bounds_points_everywhere() -> None:
    volume = _random_volume()
    radius = (2, 1, 1)
    cache = SliceCache(volume, 0, 0)
    extractor = NeighborhoodExtractor(cache, radius)
    rx, ry, rz = radius

    for z, y, x in itertools.product(range(cache.depth), range(cache.height), range(cache.width)):
        expected = sum(
            1
            for dz, dy, dx in itertools.product(
                range(-rz, rz + 1), range(-ry, ry + 1), range(-rx, rx + 1)
            )
            if 0 <= z + dz < cache.depth and 0 <= y + dy < cache.height and 0 <= x + dx < cache.width
        )
        y_bounds, z_bounds = extractor.y_bounds(y), extractor.z_bounds(z)
        buffer = np.full(extractor.line_capacity(y_bounds, z_bounds), np.nan)

        count = extractor.gather(x, y_bounds, z_bounds, buffer)

        assert count == expected
        assert count <= buffer.size
        assert not np.isnan(buffer[:count]).any()


def test_neighborhood_contains_center_and_its_values() -> None:
    volume = _random_volume()
    cache = SliceCache(volume, 0, 0)
    extractor = NeighborhoodExtractor(cache, (1, 1, 1))

    values = extractor.neighborhood(0, 5, 3)
    expected = cache.stack[2:4, 4:6, 0:2].reshape(-1)

    assert np.array_equal(values, expected)
    assert cache.center_value(0, 5, 3) in values


def test_zero_radius_is_the_center_only() -> None:
    volume = _random_volume()
    cache = SliceCache(volume, 0, 0)
    extractor = NeighborhoodExtractor(cache, (0, 0, 0))

    values = extractor.neighborhood(2, 2, 2)

    assert values.tolist() == [cache.center_value(2, 2, 2)]


def test_line_capacity_uses_clamped_y_z_and_full_x() -> None:
    volume = _random_volume(z=4, y=6, x=7)
    extractor = NeighborhoodExtractor(SliceCache(volume, 0, 0), (2, 2, 1))

    # y=0 -> rows [0, 3), z=0 -> slices [0, 2)
    assert extractor.line_capacity(extractor.y_bounds(0), extractor.z_bounds(0)) == 2 * 3 * 5
