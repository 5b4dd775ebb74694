"""
5D image volume used as input and output of the filtering engine.

All volumes are standardized to the TZYXC axis order:
- T: Time points
- Z: Z-slices (depth)
- Y: Height
- X: Width
- C: Channels

Pixel data is stored per (t, z) image of shape (Y, X, C). A plane is the
(X, Y) section of one channel of one image, exchanged as a flat row-major
buffer of length X * Y.
"""

import copy
import logging
from typing import Any, Dict, NamedTuple, Optional, Tuple

import numpy as np

from .data_type import DataType

logger = logging.getLogger(__name__)

# Standard axis order for all volumes
STANDARD_AXES = 'TZYXC'
EXPECTED_NDIM = 5


class VolumeShape(NamedTuple):
    """Uniform shape of a Volume, in (X, Y, Z, T, C) order."""

    size_x: int
    size_y: int
    size_z: int
    size_t: int
    size_c: int

    @property
    def plane_size(self) -> int:
        return self.size_x * self.size_y

    @property
    def image_shape(self) -> Tuple[int, int, int]:
        return self.size_y, self.size_x, self.size_c

    @property
    def array_shape(self) -> Tuple[int, int, int, int, int]:
        return self.size_t, self.size_z, self.size_y, self.size_x, self.size_c


def ensure_tzyxc(data: np.ndarray, source_axes: str = STANDARD_AXES) -> np.ndarray:
    """Reorder an array to TZYXC, adding singleton axes where missing.

    Args:
        data: Input array.
        source_axes: Axis order of ``data``; any permutation of a subset of
            ``'TZYXC'`` that contains both ``Y`` and ``X``.

    Returns:
        5D view of ``data`` with shape (T, Z, Y, X, C).

    Raises:
        ValueError: If the axes string is invalid or does not match ``data``.
    """
    axes = source_axes.upper()

    if len(set(axes)) != len(axes) or any(a not in STANDARD_AXES for a in axes):
        raise ValueError(f"Invalid axes '{source_axes}'. Use a subset of '{STANDARD_AXES}'.")
    if 'Y' not in axes or 'X' not in axes:
        raise ValueError(f"Axes '{source_axes}' must contain both Y and X")
    if data.ndim != len(axes):
        raise ValueError(
            f"Axes '{source_axes}' do not match {data.ndim}D array with shape {data.shape}"
        )

    for axis in STANDARD_AXES:
        if axis not in axes:
            data = data[..., np.newaxis]
            axes += axis

    order = [axes.index(axis) for axis in STANDARD_AXES]
    if order != list(range(EXPECTED_NDIM)):
        logger.debug(f"Reordering axes {axes} -> {STANDARD_AXES}")
        data = np.transpose(data, order)
    return data


class Volume:
    """Multi-dimensional (X, Y, Z, T, C) image with a uniform element kind.

    Volumes built from an array own one (Y, X, C) image per (t, z). Volumes
    built with :meth:`empty` start without images: storage must be created
    with :meth:`set_image` before planes can be written to it.
    """

    def __init__(
        self,
        data: Optional[np.ndarray] = None,
        axes: str = STANDARD_AXES,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Initialize a volume from array data.

        Args:
            data: Pixel array whose axis order is given by ``axes``.
            axes: Axis order of ``data``.
            name: Display name of the volume.
            metadata: Free-form metadata carried along with the pixels.
        """
        self.name = name or 'volume'
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self._images: Dict[Tuple[int, int], np.ndarray] = {}

        if data is None:
            self._shape = VolumeShape(0, 0, 0, 0, 0)
            self._data_type = DataType.FLOAT64
            return

        data = ensure_tzyxc(np.asarray(data), axes)
        self._data_type = DataType.from_dtype(data.dtype)
        t, z, y, x, c = data.shape
        self._shape = VolumeShape(x, y, z, t, c)

        for ti in range(t):
            for zi in range(z):
                self._images[(ti, zi)] = np.array(data[ti, zi], copy=True, order='C')

    @classmethod
    def empty(cls, shape: VolumeShape, data_type: DataType, name: Optional[str] = None) -> 'Volume':
        """Create a volume of the given shape and kind without any image storage."""
        volume = cls(name=name)
        volume._shape = VolumeShape(*shape)
        volume._data_type = data_type
        return volume

    def allocate_output(self, shape: VolumeShape, data_type: DataType, name: Optional[str] = None) -> 'Volume':
        """Create a new, empty volume of the same class."""
        return type(self).empty(shape, data_type, name=name)

    def create_output(self, suffix: str) -> 'Volume':
        """Empty volume with the same shape and kind, named ``<name>_<suffix>``."""
        out = self.allocate_output(self.shape, self.data_type, name=f"{self.name}_{suffix}")
        out.metadata = copy.deepcopy(self.metadata)
        return out

    @property
    def shape(self) -> VolumeShape:
        return self._shape

    @property
    def data_type(self) -> DataType:
        return self._data_type

    @property
    def is_signed(self) -> bool:
        return self._data_type.signed

    def has_image(self, t: int, z: int) -> bool:
        return (t, z) in self._images

    def get_image(self, t: int, z: int) -> np.ndarray:
        """Return the (Y, X, C) image at (t, z); zeros if not allocated."""
        self._check_position(t, z)
        image = self._images.get((t, z))
        if image is None:
            return np.zeros(self._shape.image_shape, dtype=self._data_type.dtype)
        return image

    def set_image(self, t: int, z: int, image: np.ndarray) -> None:
        """Store the (Y, X, C) image at (t, z)."""
        self._check_position(t, z)
        image = np.asarray(image)
        if image.shape != self._shape.image_shape:
            raise ValueError(
                f"Image shape {image.shape} does not match volume image shape {self._shape.image_shape}"
            )
        self._images[(t, z)] = np.array(image, dtype=self._data_type.dtype, copy=True, order='C')

    def get_plane(self, t: int, z: int, c: int) -> np.ndarray:
        """Flat read-only (X * Y) buffer of channel ``c`` of image (t, z)."""
        self._check_channel(c)
        plane = np.ascontiguousarray(self.get_image(t, z)[:, :, c]).reshape(-1)
        plane.flags.writeable = False
        return plane

    def set_plane(self, t: int, z: int, c: int, buffer: np.ndarray) -> None:
        """Commit a flat (X * Y) buffer into channel ``c`` of image (t, z).

        Raises:
            KeyError: If no image storage exists at (t, z).
        """
        self._check_position(t, z)
        self._check_channel(c)
        if (t, z) not in self._images:
            raise KeyError(f"No image allocated at t={t}, z={z}")
        buffer = np.asarray(buffer)
        if buffer.size != self._shape.plane_size:
            raise ValueError(
                f"Plane buffer has {buffer.size} values, expected {self._shape.plane_size}"
            )
        self._images[(t, z)][:, :, c] = buffer.reshape(self._shape.size_y, self._shape.size_x)

    @property
    def data(self) -> np.ndarray:
        """Full pixel array with shape (T, Z, Y, X, C)."""
        out = np.zeros(self._shape.array_shape, dtype=self._data_type.dtype)
        for (t, z), image in self._images.items():
            out[t, z] = image
        return out

    def _check_position(self, t: int, z: int) -> None:
        if not (0 <= t < self._shape.size_t and 0 <= z < self._shape.size_z):
            raise IndexError(
                f"Position t={t}, z={z} outside volume (T={self._shape.size_t}, Z={self._shape.size_z})"
            )

    def _check_channel(self, c: int) -> None:
        if not 0 <= c < self._shape.size_c:
            raise IndexError(f"Channel {c} outside volume (C={self._shape.size_c})")

    def __repr__(self) -> str:
        s = self._shape
        return (
            f"Volume('{self.name}', X={s.size_x}, Y={s.size_y}, Z={s.size_z}, "
            f"T={s.size_t}, C={s.size_c}, {self._data_type.value})"
        )
