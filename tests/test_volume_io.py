"""Unit tests for TIFF volume input/output."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import tifffile

from volfilter.core.volume import Volume
from volfilter.data_processing.volume_io import _standardize_series_axes, load_volume, save_volume


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    rng = np.random.default_rng(3)
    data = rng.integers(0, 4000, size=(2, 3, 8, 9, 2)).astype(np.uint16)
    volume = Volume(data, name="stack")

    path = save_volume(volume, tmp_path / "stack.ome.tif")
    loaded = load_volume(path)

    assert loaded.shape == volume.shape
    assert loaded.data_type is volume.data_type
    assert np.array_equal(loaded.data, data)
    assert loaded.name == "stack"


def test_load_with_explicit_axes(tmp_path: Path) -> None:
    data = np.arange(2 * 3 * 4 * 5, dtype=np.float32).reshape(2, 3, 4, 5)
    path = tmp_path / "czyx.tif"
    tifffile.imwrite(str(path), data, metadata={"axes": "CZYX"})

    volume = load_volume(path, axes="CZYX")

    assert volume.data.shape == (1, 3, 4, 5, 2)
    assert np.array_equal(volume.data[0, :, :, :, 1], data[1])


def test_standardize_series_axes() -> None:
    assert _standardize_series_axes("QYX", (5, 8, 8)) == "ZYX"
    assert _standardize_series_axes("YXS", (8, 8, 3)) == "YXC"
    assert _standardize_series_axes("ZQYX", (5, 1, 8, 8)) == "ZQYX"

    with pytest.raises(ValueError):
        _standardize_series_axes("IQYX", (2, 3, 8, 8))


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_volume(tmp_path / "missing.tif")


def test_wrong_extension_raises(tmp_path: Path) -> None:
    path = tmp_path / "volume.npy"
    np.save(path, np.zeros((2, 2)))

    with pytest.raises(ValueError):
        load_volume(path)


def test_three_channel_volume_is_not_stored_as_rgb(tmp_path: Path) -> None:
    data = np.arange(1 * 2 * 4 * 5 * 3, dtype=np.uint8).reshape(1, 2, 4, 5, 3)
    path = save_volume(Volume(data, name="rgbish"), tmp_path / "rgbish.ome.tif")

    with tifffile.TiffFile(str(path)) as tif:
        assert tif.pages[0].photometric == tifffile.PHOTOMETRIC.MINISBLACK

    loaded = load_volume(path)
    assert loaded.shape == Volume(data).shape
    assert np.array_equal(loaded.data, data)
