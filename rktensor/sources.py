"""Pixel sources consumed by the converter.

The converter only needs two things from an image: its ``(width, height)``
and the 8-bit RGB triple at ``(x, y)``. Decoding compressed files is left to
Pillow. Adapters here also expose ``as_array()`` (RGB/u8/HWC) so the
converter can take its vectorized path.

Array inputs must declare their format explicitly; nothing is guessed from
the shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from PIL import Image


@runtime_checkable
class PixelSource(Protocol):
    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        ...

    def pixel_at(self, x: int, y: int) -> tuple[int, int, int]:
        """Return ``(r, g, b)`` for ``0 <= x < width`` and ``0 <= y < height``."""
        ...


class ImageFormat(str, Enum):
    """Declared layouts for in-memory numpy images."""

    RGB_U8_HWC = "rgb_u8_hwc"
    BGR_U8_HWC = "bgr_u8_hwc"
    RGB_F32_CHW = "rgb_f32_chw"


def parse_image_format(raw: str | ImageFormat) -> ImageFormat:
    if isinstance(raw, ImageFormat):
        return raw
    try:
        return ImageFormat(str(raw).strip().lower())
    except ValueError as exc:
        choices = ", ".join(f.value for f in ImageFormat)
        raise ValueError(f"Unknown image format: {raw!r}. Choose from: {choices}.") from exc


@dataclass(frozen=True)
class _FormatRule:
    channel_axis: int
    dtypes: tuple[type, ...]
    shape_hint: str


_FORMAT_RULES = {
    ImageFormat.RGB_U8_HWC: _FormatRule(channel_axis=2, dtypes=(np.uint8,), shape_hint="(H,W,3)"),
    ImageFormat.BGR_U8_HWC: _FormatRule(channel_axis=2, dtypes=(np.uint8,), shape_hint="(H,W,3)"),
    ImageFormat.RGB_F32_CHW: _FormatRule(
        channel_axis=0, dtypes=(np.float32, np.float64), shape_hint="(3,H,W)"
    ),
}


def _check_against_rule(image: Any, fmt: ImageFormat) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Expected np.ndarray, got {type(image).__name__}")
    rule = _FORMAT_RULES[fmt]
    if image.ndim != 3 or image.shape[rule.channel_axis] != 3:
        raise ValueError(f"{fmt.value} needs shape {rule.shape_hint}, got {image.shape}")
    if image.dtype.type not in rule.dtypes:
        allowed = "/".join(np.dtype(d).name for d in rule.dtypes)
        raise ValueError(f"{fmt.value} needs dtype {allowed}, got {image.dtype}")
    return image


def _unit_floats_to_u8(chw: np.ndarray) -> NDArray[np.uint8]:
    if chw.size:
        lo, hi = float(chw.min()), float(chw.max())
        if lo < -1e-6 or hi > 1.0 + 1e-6:
            raise ValueError(f"rgb_f32_chw values must lie in [0,1], got min={lo:.6f}, max={hi:.6f}")
    scaled = np.clip(np.rint(chw * 255.0), 0.0, 255.0).astype(np.uint8)
    return np.moveaxis(scaled, 0, -1)


def to_rgb_u8_hwc(image: Any, *, input_format: str | ImageFormat) -> NDArray[np.uint8]:
    """Bring a numpy image in the declared format to contiguous ``RGB/u8/HWC``.

    ``rgb_f32_chw`` inputs must hold values in ``[0, 1]``; they are scaled by
    255 and rounded to the nearest integer.
    """

    fmt = parse_image_format(input_format)
    arr = _check_against_rule(image, fmt)
    if fmt is ImageFormat.RGB_F32_CHW:
        arr = _unit_floats_to_u8(arr)
    elif fmt is ImageFormat.BGR_U8_HWC:
        arr = arr[..., ::-1]
    return np.ascontiguousarray(arr)


class ArrayPixelSource:
    """Pixel source backed by a numpy image."""

    def __init__(self, image: Any, *, input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC) -> None:
        self._pixels = to_rgb_u8_hwc(image, input_format=input_format)

    def dimensions(self) -> tuple[int, int]:
        height, width = self._pixels.shape[:2]
        return int(width), int(height)

    def pixel_at(self, x: int, y: int) -> tuple[int, int, int]:
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def as_array(self) -> NDArray[np.uint8]:
        view = self._pixels.view()
        view.flags.writeable = False
        return view


class PILPixelSource(ArrayPixelSource):
    """Pixel source backed by a Pillow image; any mode is converted to RGB."""

    def __init__(self, image: Image.Image) -> None:
        if not isinstance(image, Image.Image):
            raise TypeError(f"Expected PIL.Image.Image, got {type(image).__name__}")
        rgb = image if image.mode == "RGB" else image.convert("RGB")
        arr = np.asarray(rgb, dtype=np.uint8)
        if arr.ndim != 3:
            # Pillow returns (H, W) for zero-sized images in some versions.
            arr = arr.reshape(rgb.height, rgb.width, 3)
        super().__init__(arr, input_format=ImageFormat.RGB_U8_HWC)


def load_pixel_source(path: str | Path) -> PILPixelSource:
    """Decode an image file with Pillow."""

    path_str = str(path)
    try:
        with Image.open(path_str) as img:
            img.load()
            return PILPixelSource(img)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Unable to read image: {path_str}") from exc


def as_pixel_source(
    image: Any,
    *,
    input_format: str | ImageFormat = ImageFormat.RGB_U8_HWC,
) -> PixelSource:
    """Accept a pixel source, numpy array, Pillow image or file path."""

    if isinstance(image, (str, Path)):
        return load_pixel_source(image)
    if isinstance(image, Image.Image):
        return PILPixelSource(image)
    if isinstance(image, np.ndarray):
        return ArrayPixelSource(image, input_format=input_format)
    if isinstance(image, PixelSource):
        return image
    raise TypeError(
        "Expected a PixelSource, np.ndarray, PIL.Image.Image or path, "
        f"got {type(image).__name__}"
    )


__all__ = [
    "ArrayPixelSource",
    "ImageFormat",
    "PILPixelSource",
    "PixelSource",
    "as_pixel_source",
    "load_pixel_source",
    "parse_image_format",
    "to_rgb_u8_hwc",
]
