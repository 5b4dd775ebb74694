"""
Element kinds supported by the filtering engine.
Maps numpy dtypes to the integer/floating kinds a Volume may hold.
"""

from enum import Enum
from typing import Tuple, Union

import numpy as np


class DataType(Enum):
    """Numeric element kind of a Volume."""

    INT8 = 'int8'
    UINT8 = 'uint8'
    INT16 = 'int16'
    UINT16 = 'uint16'
    INT32 = 'int32'
    UINT32 = 'uint32'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == 'f'

    @property
    def signed(self) -> bool:
        return self.dtype.kind in ('i', 'f')

    @property
    def bits(self) -> int:
        return self.dtype.itemsize * 8

    @property
    def min_value(self) -> float:
        if self.is_float:
            return float(np.finfo(self.dtype).min)
        return float(np.iinfo(self.dtype).min)

    @property
    def max_value(self) -> float:
        if self.is_float:
            return float(np.finfo(self.dtype).max)
        return float(np.iinfo(self.dtype).max)

    def bounds(self, signed: bool = None) -> Tuple[float, float]:
        """Value range of this kind, optionally forcing the signed/unsigned variant.

        Args:
            signed: If given, select the signed (True) or unsigned (False)
                integer range of the same bit width. Ignored for floats.

        Returns:
            Tuple of (min_value, max_value).
        """
        if self.is_float or signed is None or signed == self.signed:
            return self.min_value, self.max_value
        prefix = '' if signed else 'u'
        info = np.iinfo(np.dtype(f'{prefix}int{self.bits}'))
        return float(info.min), float(info.max)

    @classmethod
    def from_dtype(cls, dtype: Union[np.dtype, type, str]) -> 'DataType':
        """Resolve the element kind of a numpy dtype.

        Raises:
            TypeError: If the dtype is not a supported element kind.
        """
        try:
            name = np.dtype(dtype).name
        except TypeError as e:
            raise TypeError(f"Unsupported element kind: {dtype!r}") from e
        for member in cls:
            if member.value == name:
                return member
        raise TypeError(
            f"Unsupported element kind: {name}. "
            f"Supported kinds: {[m.value for m in cls]}"
        )
