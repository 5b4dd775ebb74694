"""Tests for the volfilter-run command line entry point."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from volfilter.cli import EXIT_INVALID, EXIT_OK, main
from volfilter.core.volume import Volume
from volfilter.data_processing.volume_io import load_volume, save_volume


def _write_input(tmp_path: Path) -> Path:
    data = np.zeros((1, 3, 6, 6, 1), dtype=np.uint8)
    data[0, 1, 2, 3, 0] = 9
    return save_volume(Volume(data, name="spots"), tmp_path / "spots.ome.tif")


def test_cli_writes_filtered_volume(tmp_path: Path) -> None:
    source = _write_input(tmp_path)
    target = tmp_path / "out" / "maxima.ome.tif"

    code = main([str(source), str(target), "--radius", "1", "--filter", "local_max", "--workers", "2"])

    assert code == EXIT_OK
    out = load_volume(target).data
    assert out.shape == (1, 3, 6, 6, 1)
    assert out.sum() == 1
    assert out[0, 1, 2, 3, 0] == 1


def test_cli_uses_config_file(tmp_path: Path) -> None:
    source = _write_input(tmp_path)
    target = tmp_path / "max.ome.tif"
    config = tmp_path / "config.yaml"
    config.write_text("filter:\n  radius: [1, 1]\n  strategy: max\n")

    code = main([str(source), str(target), "--config", str(config)])

    assert code == EXIT_OK
    out = load_volume(target).data
    # 2D window: the spot spreads within its own slice only
    assert out[0, 1].sum() == 9 * 9
    assert not out[0, 0].any()


def test_cli_rejects_negative_radius(tmp_path: Path) -> None:
    source = _write_input(tmp_path)

    assert main([str(source), str(tmp_path / "x.tif"), "--radius", "-1"]) == EXIT_INVALID


def test_cli_missing_input(tmp_path: Path) -> None:
    assert main([str(tmp_path / "nope.tif"), str(tmp_path / "x.tif")]) == EXIT_INVALID
