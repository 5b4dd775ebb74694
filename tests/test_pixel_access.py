"""Unit tests for typed pixel buffer access."""

from __future__ import annotations

import numpy as np
import pytest

from volfilter.core.data_type import DataType
from volfilter.filtering.pixel_access import (
    double_array_to_safe_array,
    get_value,
    set_value,
    to_double_array,
)


def test_get_value_widens_to_float() -> None:
    buffer = np.array([0, 200, 255], dtype=np.uint8)
    value = get_value(buffer, 1, DataType.UINT8)

    assert isinstance(value, float)
    assert value == 200.0


def test_set_value_saturates_integer_kinds() -> None:
    buffer = np.zeros(3, dtype=np.uint8)
    set_value(buffer, 0, 300.0, DataType.UINT8)
    set_value(buffer, 1, -5.0, DataType.UINT8)
    set_value(buffer, 2, 17.9, DataType.UINT8)

    assert buffer.tolist() == [255, 0, 17]


def test_set_value_truncates_toward_zero() -> None:
    buffer = np.zeros(2, dtype=np.int16)
    set_value(buffer, 0, 2.7)
    set_value(buffer, 1, -2.7)

    assert buffer.tolist() == [2, -2]


def test_set_value_unsigned_range_on_signed_kind() -> None:
    buffer = np.zeros(2, dtype=np.int8)
    set_value(buffer, 0, 200.0, DataType.INT8)
    set_value(buffer, 1, -10.0, DataType.INT8, signed=False)

    assert buffer[0] == 127
    assert buffer[1] == 0


def test_set_value_float_kind_is_cast_directly() -> None:
    buffer = np.zeros(1, dtype=np.float32)
    set_value(buffer, 0, 1e10)

    assert buffer[0] == np.float32(1e10)


def test_double_array_to_safe_array_respects_offsets() -> None:
    src = np.array([1.5, 70000.0, -3.0, 9.0])
    dst = np.zeros(6, dtype=np.uint16)

    double_array_to_safe_array(src, 1, dst, 3, 2, DataType.UINT16)

    assert dst.tolist() == [0, 0, 0, 65535, 0, 0]


def test_nan_maps_to_zero_for_integer_kinds() -> None:
    dst = np.full(2, 9, dtype=np.int32)
    double_array_to_safe_array(np.array([np.nan, 4.0]), 0, dst, 0, 2)

    assert dst.tolist() == [0, 4]


def test_to_double_array() -> None:
    buffer = np.array([-1, 0, 1], dtype=np.int32)
    out = to_double_array(buffer)

    assert out.dtype == np.float64
    assert out.tolist() == [-1.0, 0.0, 1.0]


@pytest.mark.parametrize("dtype", [np.int64, np.uint64, np.float16, np.bool_, np.complex64])
def test_unsupported_kinds_raise(dtype) -> None:
    buffer = np.zeros(2, dtype=dtype)

    with pytest.raises(TypeError):
        get_value(buffer, 0)
    with pytest.raises(TypeError):
        DataType.from_dtype(dtype)


def test_mismatched_kind_raises() -> None:
    with pytest.raises(TypeError):
        get_value(np.zeros(2, dtype=np.uint8), 0, DataType.UINT16)


def test_data_type_bounds() -> None:
    assert DataType.UINT8.bounds() == (0.0, 255.0)
    assert DataType.INT8.bounds(signed=False) == (0.0, 255.0)
    assert DataType.UINT16.bounds(signed=True) == (-32768.0, 32767.0)
    assert DataType.INT32.signed
    assert not DataType.UINT32.signed
    assert DataType.FLOAT32.is_float
