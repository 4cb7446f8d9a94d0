"""Bounded integer arithmetic for plan quantities, costs and potentials.

All solver arithmetic runs in a numpy signed integer type chosen through
``SolverOptions.dtype``. Additions and subtractions clamp at the type's
minimum and maximum instead of wrapping, so an oversized instance degrades to
saturated values rather than silently corrupted ones.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class IntegerBounds:
    """Numeric limits and saturating operations for one integer type.

    Attributes:
        dtype: The numpy integer dtype used for plan and potential arrays.
        minimum: Smallest representable value.
        maximum: Largest representable value.

    Examples:
        >>> bounds = IntegerBounds.for_dtype("int8")
        >>> bounds.add(100, 100)
        127
        >>> bounds.sub(-100, 100)
        -128
    """

    dtype: np.dtype
    minimum: int
    maximum: int

    @classmethod
    def for_dtype(cls, dtype: str | np.dtype | type) -> IntegerBounds:
        resolved = np.dtype(dtype)
        info = np.iinfo(resolved)
        return cls(dtype=resolved, minimum=int(info.min), maximum=int(info.max))

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, int(value)))

    def add(self, left: int, right: int) -> int:
        # Python ints never overflow, so clamping the exact result is enough.
        return self.clamp(int(left) + int(right))

    def sub(self, left: int, right: int) -> int:
        return self.clamp(int(left) - int(right))

    def add_arrays(self, left: ArrayLike, right: ArrayLike) -> NDArray[np.integer]:
        """Element-wise saturating ``left + right`` with numpy broadcasting."""
        a = np.asarray(left, dtype=self.dtype)
        b = np.asarray(right, dtype=self.dtype)
        result = a + b
        # Wrapped sums flip sign relative to operands sharing a sign.
        overflow = (a > 0) & (b > 0) & (result < 0)
        underflow = (a < 0) & (b < 0) & (result >= 0)
        result = np.where(overflow, self.maximum, result)
        result = np.where(underflow, self.minimum, result)
        return result.astype(self.dtype)

    def sub_arrays(self, left: ArrayLike, right: ArrayLike) -> NDArray[np.integer]:
        """Element-wise saturating ``left - right`` with numpy broadcasting."""
        a = np.asarray(left, dtype=self.dtype)
        b = np.asarray(right, dtype=self.dtype)
        result = a - b
        overflow = (a >= 0) & (b < 0) & (result < 0)
        underflow = (a < 0) & (b > 0) & (result >= 0)
        result = np.where(overflow, self.maximum, result)
        result = np.where(underflow, self.minimum, result)
        return result.astype(self.dtype)
