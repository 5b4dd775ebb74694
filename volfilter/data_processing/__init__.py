"""Volume input/output."""

from .volume_io import load_volume, save_volume

__all__ = ["load_volume", "save_volume"]
