"""Type-aware read/write of scalar values in flat pixel buffers.

Values travel through the engine as double precision. Reads widen the native
element to ``float``; writes narrow it back with a *safe* conversion:
integer kinds truncate toward zero and saturate at the range of the kind,
floating kinds are cast directly.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..core.data_type import DataType


def _resolve(buffer: np.ndarray, data_type: Optional[DataType]) -> DataType:
    # Raises TypeError on unsupported kinds
    resolved = data_type or DataType.from_dtype(buffer.dtype)
    if buffer.dtype != resolved.dtype:
        raise TypeError(f"Buffer dtype {buffer.dtype} does not match element kind {resolved.value}")
    return resolved


def get_value(buffer: np.ndarray, index: int, data_type: Optional[DataType] = None) -> float:
    """Read the value at ``index`` as a double."""
    _resolve(buffer, data_type)
    return float(buffer[index])


def set_value(
    buffer: np.ndarray,
    index: int,
    value: float,
    data_type: Optional[DataType] = None,
    signed: Optional[bool] = None,
) -> None:
    """Write ``value`` at ``index`` with safe narrowing to the buffer's kind."""
    kind = _resolve(buffer, data_type)
    buffer[index] = _to_safe(np.asarray([value], dtype=np.float64), kind, signed)[0]


def to_double_array(buffer: np.ndarray, data_type: Optional[DataType] = None) -> np.ndarray:
    """Widen a whole buffer to float64."""
    _resolve(buffer, data_type)
    return np.asarray(buffer, dtype=np.float64)


def double_array_to_safe_array(
    src: np.ndarray,
    src_offset: int,
    dst: np.ndarray,
    dst_offset: int,
    length: int,
    data_type: Optional[DataType] = None,
    signed: Optional[bool] = None,
) -> np.ndarray:
    """Copy ``length`` doubles from ``src`` into ``dst`` with safe narrowing.

    Args:
        src: Source float64 buffer.
        src_offset: First index read in ``src``.
        dst: Destination buffer of the native element kind.
        dst_offset: First index written in ``dst``.
        length: Number of values to copy.
        data_type: Element kind of ``dst``; inferred from its dtype if None.
        signed: Clamp to the signed (True) or unsigned (False) integer range
            of the kind's bit width. Defaults to the kind's own signedness.

    Returns:
        The destination buffer.
    """
    kind = _resolve(dst, data_type)
    values = np.asarray(src[src_offset:src_offset + length], dtype=np.float64)
    dst[dst_offset:dst_offset + length] = _to_safe(values, kind, signed)
    return dst


def _to_safe(values: np.ndarray, kind: DataType, signed: Optional[bool]) -> np.ndarray:
    if kind.is_float:
        return values.astype(kind.dtype)

    low, high = kind.bounds(signed)
    # NaN has no integer representation, map it to zero
    clipped = np.clip(np.nan_to_num(values, nan=0.0), low, high)
    # Through int64 so that an unsigned range stored in a signed buffer wraps
    return np.trunc(clipped).astype(np.int64).astype(kind.dtype)
