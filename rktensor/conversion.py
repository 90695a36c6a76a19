"""Image -> flat tensor buffer conversion.

Pipeline per pixel: read the RGB triple, widen it to float32, normalize in
place, encode every channel with the data type and write it at the offset the
layout assigns. The output buffer is zero-initialized and fully overwritten,
since every layout is a bijection onto ``[0, width * height * CHANNELS)``.

Sources exposing ``as_array()`` go through a vectorized implementation of the
same stages; both paths produce identical buffers.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray

from rktensor.compat import COMPAT_REGISTRY, CompatibilityRegistry
from rktensor.datatypes import U8, DataType, QuantizedU8, QuantParams, parse_data_type
from rktensor.errors import ConfigurationError
from rktensor.layouts import ChannelMajor, Layout, parse_layout
from rktensor.normalization import Identity, Normalization, parse_normalization
from rktensor.sources import ImageFormat, PixelSource, as_pixel_source
from rktensor.tensor import Tensor

logger = logging.getLogger(__name__)

_RGB_CHANNELS = 3


class ImageToTensor:
    """Converter bound to one (data type, normalization, layout) combination.

    Parameters
    ----------
    data_type, normalization, layout:
        Strategy instances, or names accepted by the matching ``parse_*``
        helpers (e.g. ``"f32"``, ``"imagenet"``, ``"hwc"``).
    quant_params:
        Required for quantized data types and rejected otherwise. Passed to
        every ``from_f32`` call without validation.
    registry:
        Compatibility registry to check the pair against. Defaults to the
        global one.
    vectorized:
        Use the whole-raster numpy path when the source supports it.

    Raises
    ------
    IncompatibleStrategiesError
        If the (normalization, data type) pair is not registered.
    ConfigurationError
        If `quant_params` does not match the data type, or the layout does
        not declare 3 channels.
    """

    def __init__(
        self,
        data_type: DataType | str = "u8",
        normalization: Normalization | str | Mapping[str, Any] = "identity",
        layout: Layout | str = "chw",
        *,
        quant_params: QuantParams | None = None,
        registry: CompatibilityRegistry | None = None,
        vectorized: bool = True,
    ) -> None:
        self.data_type = parse_data_type(data_type)
        self.normalization = parse_normalization(normalization)
        self.layout = parse_layout(layout)
        self.quant_params = quant_params
        self.vectorized = bool(vectorized)

        (registry if registry is not None else COMPAT_REGISTRY).check(
            self.normalization, self.data_type
        )

        if self.data_type.quantized and quant_params is None:
            raise ConfigurationError(
                f"Data type {self.data_type.name!r} is quantized and requires QuantParams."
            )
        if not self.data_type.quantized and quant_params is not None:
            raise ConfigurationError(
                f"Data type {self.data_type.name!r} is not quantized; quant_params must be None."
            )
        if int(self.layout.CHANNELS) != _RGB_CHANNELS:
            raise ConfigurationError(
                f"Layout {type(self.layout).__name__} declares {self.layout.CHANNELS} channels; "
                f"RGB conversion needs {_RGB_CHANNELS}."
            )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(data_type={self.data_type!r}, "
            f"normalization={self.normalization!r}, layout={self.layout!r}, "
            f"quant_params={self.quant_params!r})"
        )

    # ------------------------------------------------------------------
    def convert(
        self,
        image: Any,
        *,
        input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC,
    ) -> NDArray[Any]:
        """Convert `image` to a flat buffer of ``width * height * 3`` elements."""

        source = as_pixel_source(image, input_format=input_format)
        width, height = (int(v) for v in source.dimensions())
        out = np.zeros(self.layout.size(width, height), dtype=self.data_type.dtype)

        if self.vectorized and callable(getattr(source, "as_array", None)):
            self._convert_array(np.asarray(source.as_array()), width, height, out)
            path = "vectorized"
        else:
            self._scan(source, width, height, out)
            path = "scan"

        logger.debug(
            "Converted %dx%d image to %d %s values (%s, %s, %s path)",
            width,
            height,
            out.size,
            self.data_type.name,
            self.normalization.name,
            self.layout.name,
            path,
        )
        return out

    def as_tensor(
        self,
        image: Any,
        *,
        input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC,
    ) -> Tensor[Any]:
        """Convert `image` and wrap the buffer with the layout's shape."""

        source = as_pixel_source(image, input_format=input_format)
        width, height = (int(v) for v in source.dimensions())
        return Tensor.from_buffer(self.convert(source), self.layout, width, height)

    # ------------------------------------------------------------------
    def _scan(self, source: PixelSource, width: int, height: int, out: NDArray[Any]) -> None:
        channels = np.empty(_RGB_CHANNELS, dtype=np.float32)
        for y in range(height):
            for x in range(width):
                channels[:] = source.pixel_at(x, y)
                self.normalization.apply(channels)
                for c in range(_RGB_CHANNELS):
                    offset = self.layout.index(width, height, x, y, c)
                    out[offset] = self.data_type.from_f32(channels[c], self.quant_params)

    def _convert_array(
        self,
        pixels: NDArray[np.uint8],
        width: int,
        height: int,
        out: NDArray[Any],
    ) -> None:
        expected = (height, width, _RGB_CHANNELS)
        if pixels.shape != expected:
            raise ValueError(f"as_array() returned shape {pixels.shape}, expected {expected}")

        # One row at a time: intermediates stay O(width), only `out` scales with the image.
        xs = np.arange(width)[:, None]
        cs = np.arange(_RGB_CHANNELS)[None, :]
        for y in range(height):
            values = pixels[y].astype(np.float32)
            self.normalization.apply(values)
            encoded = self.data_type.from_f32(values, self.quant_params)
            out[self.layout.index(width, height, xs, y, cs)] = encoded


def to_tensor(
    image: Any,
    *,
    data_type: DataType | str = U8(),
    normalization: Normalization | str | Mapping[str, Any] = Identity(),
    layout: Layout | str = ChannelMajor(),
    input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC,
) -> NDArray[Any]:
    """Convert with an unparameterized data type."""

    converter = ImageToTensor(data_type, normalization, layout)
    return converter.convert(image, input_format=input_format)


def to_tensor_quantized(
    image: Any,
    quant_params: QuantParams,
    *,
    data_type: DataType | str = QuantizedU8(),
    normalization: Normalization | str | Mapping[str, Any] = Identity(),
    layout: Layout | str = ChannelMajor(),
    input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC,
) -> NDArray[Any]:
    """Convert with a quantized data type, threading `quant_params` into every element."""

    converter = ImageToTensor(data_type, normalization, layout, quant_params=quant_params)
    return converter.convert(image, input_format=input_format)


__all__ = ["ImageToTensor", "to_tensor", "to_tensor_quantized"]
