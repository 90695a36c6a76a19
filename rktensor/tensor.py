from __future__ import annotations

import math
import operator
from typing import TYPE_CHECKING, Any, Generic, Iterable, TypeVar

import numpy as np
from numpy.typing import NDArray

from rktensor.errors import OutOfBoundsError, ShapeMismatchError

if TYPE_CHECKING:  # pragma: no cover
    from rktensor.layouts import Layout


T = TypeVar("T")


def _coerce_shape(shape: Iterable[Any]) -> tuple[int, ...]:
    dims: list[int] = []
    for axis, dim in enumerate(shape):
        if isinstance(dim, bool):
            raise ShapeMismatchError(f"Shape mismatch: dimension {axis} must be an int, got {dim!r}")
        try:
            value = operator.index(dim)
        except TypeError as exc:
            raise ShapeMismatchError(
                f"Shape mismatch: dimension {axis} must be an int, got {dim!r}"
            ) from exc
        if value < 0:
            raise ShapeMismatchError(
                f"Shape mismatch: dimension {axis} must be non-negative, got {value}"
            )
        dims.append(int(value))
    return tuple(dims)


class Tensor(Generic[T]):
    """Flat element buffer plus the shape describing its logical extent.

    The constructor enforces ``len(data) == prod(shape)``; a tensor that
    exists is always valid. Both buffers are stored as tuples and the class
    exposes no mutating operations.

    Parameters
    ----------
    data:
        Elements in flat (row-major over `shape`) order. Any iterable,
        including a 1-D numpy array, is accepted.
    shape:
        One non-negative int per dimension. ``()`` describes a scalar and
        therefore requires exactly one element.
    """

    __slots__ = ("_data", "_shape")

    def __init__(self, data: Iterable[T], shape: Iterable[int]) -> None:
        dims = _coerce_shape(shape)
        items = tuple(data)
        expected = math.prod(dims)
        if len(items) != expected:
            raise ShapeMismatchError(
                f"Shape mismatch: shape {dims} holds {expected} elements, got {len(items)}"
            )
        self._data: tuple[T, ...] = items
        self._shape: tuple[int, ...] = dims

    @classmethod
    def from_buffer(
        cls,
        buffer: Iterable[T],
        layout: "Layout",
        width: int,
        height: int,
    ) -> "Tensor[T]":
        """Wrap a conversion buffer with the shape implied by `layout`."""

        return cls(buffer, layout.shape(width, height))

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def data(self) -> tuple[T, ...]:
        return self._data

    def get(self, index: int) -> T:
        """Return the element at flat `index`.

        Negative indices are not wrapped around; they are out of bounds like
        any index ``>= len(data)``.
        """

        idx = operator.index(index)
        if idx < 0 or idx >= len(self._data):
            raise OutOfBoundsError(
                f"Index out of bounds: index {idx} for tensor of {len(self._data)} elements"
            )
        return self._data[idx]

    def to_numpy(self, dtype: Any = None) -> NDArray[Any]:
        """Return a read-only numpy copy of the data reshaped to `shape`."""

        arr = np.asarray(self._data, dtype=dtype).reshape(self._shape)
        arr.flags.writeable = False
        return arr

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other._shape and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        preview = ", ".join(repr(v) for v in self._data[:8])
        if len(self._data) > 8:
            preview += ", ..."
        return f"Tensor(shape={self._shape}, data=[{preview}])"


__all__ = ["Tensor"]
