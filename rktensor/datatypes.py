"""Output element representations.

A data type maps normalized float32 channel values onto stored elements via
``from_f32(value, quant_params)``. `value` may be a scalar or a numpy array;
the mapping is applied elementwise and returns numpy values of `dtype`.

Unparameterized types take ``quant_params=None``. Quantized types take a
`QuantParams` and compute::

    q = round_half_away_from_zero(value / scale) + zero_point

saturated to the integer range of `dtype`. The quantizer never raises:

- ``scale == 0`` sends non-zero values to +/-inf, which saturate to the range
  bounds, and ``0 / 0`` to NaN;
- NaN quantizes to `zero_point` (itself saturated into range);
- a negative `scale` is applied as-is, flipping the sign before saturation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
from numpy.typing import DTypeLike, NDArray


@dataclass(frozen=True)
class QuantParams:
    """Affine quantization parameters, passed through to the representation unchanged."""

    scale: float
    zero_point: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", float(self.scale))
        object.__setattr__(self, "zero_point", int(self.zero_point))


def _unwrap(out: NDArray[Any]) -> Any:
    # 0-d arrays come back as numpy scalars.
    return out[()] if out.ndim == 0 else out


def round_half_away_from_zero(values: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


class DataType:
    name: ClassVar[str] = "dtype"
    dtype: ClassVar[DTypeLike] = np.float32
    quantized: ClassVar[bool] = False

    def from_f32(self, value: Any, quant_params: QuantParams | None = None) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@dataclass(frozen=True, repr=False)
class U8(DataType):
    """Plain 8-bit cast: truncate toward zero, saturate to ``[0, 255]``, NaN -> 0."""

    name: ClassVar[str] = "u8"
    dtype: ClassVar[DTypeLike] = np.uint8

    def from_f32(self, value: Any, quant_params: QuantParams | None = None) -> Any:
        arr = np.asarray(value, dtype=np.float32)
        arr = np.nan_to_num(arr, nan=0.0, posinf=255.0, neginf=0.0)
        return _unwrap(np.clip(np.trunc(arr), 0.0, 255.0).astype(np.uint8))


@dataclass(frozen=True, repr=False)
class F32(DataType):
    name: ClassVar[str] = "f32"
    dtype: ClassVar[DTypeLike] = np.float32

    def from_f32(self, value: Any, quant_params: QuantParams | None = None) -> Any:
        return _unwrap(np.asarray(value, dtype=np.float32))


class QuantizedDataType(DataType):
    quantized: ClassVar[bool] = True

    def from_f32(self, value: Any, quant_params: QuantParams | None = None) -> Any:
        if quant_params is None:
            raise TypeError(f"{type(self).__name__}.from_f32 requires QuantParams")

        info = np.iinfo(self.dtype)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            scaled = np.asarray(value, dtype=np.float32) / np.float32(quant_params.scale)
        q = round_half_away_from_zero(scaled.astype(np.float64)) + float(quant_params.zero_point)
        q = np.where(np.isnan(q), float(quant_params.zero_point), q)
        q = np.clip(q, float(info.min), float(info.max))
        return _unwrap(q.astype(self.dtype))


@dataclass(frozen=True, repr=False)
class QuantizedU8(QuantizedDataType):
    name: ClassVar[str] = "qu8"
    dtype: ClassVar[DTypeLike] = np.uint8


@dataclass(frozen=True, repr=False)
class QuantizedI8(QuantizedDataType):
    name: ClassVar[str] = "qi8"
    dtype: ClassVar[DTypeLike] = np.int8


@dataclass(frozen=True, repr=False)
class QuantizedI32(QuantizedDataType):
    name: ClassVar[str] = "qi32"
    dtype: ClassVar[DTypeLike] = np.int32


_DATA_TYPES: dict[str, type[DataType]] = {
    "u8": U8,
    "uint8": U8,
    "f32": F32,
    "float32": F32,
    "qu8": QuantizedU8,
    "quint8": QuantizedU8,
    "qi8": QuantizedI8,
    "qint8": QuantizedI8,
    "qi32": QuantizedI32,
    "qint32": QuantizedI32,
}


def parse_data_type(raw: str | DataType) -> DataType:
    if isinstance(raw, DataType):
        return raw
    key = str(raw).strip().lower()
    try:
        return _DATA_TYPES[key]()
    except KeyError as exc:
        choices = ", ".join(sorted(_DATA_TYPES))
        raise ValueError(f"Unknown data type: {raw!r}. Choose from: {choices}.") from exc


__all__ = [
    "DataType",
    "F32",
    "QuantParams",
    "QuantizedDataType",
    "QuantizedI32",
    "QuantizedI8",
    "QuantizedU8",
    "U8",
    "parse_data_type",
    "round_half_away_from_zero",
]
