"""Pixel-value normalizations applied to raw 0-255 float channels.

Every normalization transforms, in place, a float32 array whose last axis is
the channel axis. A single ``(3,)`` triple and a whole ``(H, W, 3)`` raster
go through the same code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray


RGB_CHANNELS = 3
IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


class Normalization:
    name: ClassVar[str] = "normalization"

    def apply(self, channels: NDArray[np.float32]) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class Identity(Normalization):
    """Leave raw 0-255 values untouched."""

    name: ClassVar[str] = "identity"

    def apply(self, channels: NDArray[np.float32]) -> None:
        return None


@dataclass(frozen=True)
class UnitScale(Normalization):
    """Scale to ``[0, 1]``."""

    name: ClassVar[str] = "unit"

    def apply(self, channels: NDArray[np.float32]) -> None:
        channels /= np.float32(255.0)


@dataclass(frozen=True)
class SymmetricScale(Normalization):
    """Scale to ``[-1, 1]``."""

    name: ClassVar[str] = "symmetric"

    def apply(self, channels: NDArray[np.float32]) -> None:
        channels /= np.float32(127.5)
        channels -= np.float32(1.0)


@dataclass(frozen=True)
class MeanStd(Normalization):
    """Per-channel standardization ``(v / 255 - mean) / std``.

    `mean` and `std` are expressed in the 0-1 range, like torchvision's
    ``Normalize`` constants.
    """

    mean: tuple[float, ...] = IMAGENET_MEAN
    std: tuple[float, ...] = IMAGENET_STD

    name: ClassVar[str] = "mean_std"

    def __post_init__(self) -> None:
        mean = tuple(float(v) for v in self.mean)
        std = tuple(float(v) for v in self.std)
        if len(mean) != RGB_CHANNELS or len(std) != RGB_CHANNELS:
            raise ValueError(
                f"mean and std must have {RGB_CHANNELS} values (one per RGB channel), "
                f"got {len(mean)} and {len(std)}"
            )
        if any(s == 0.0 for s in std):
            raise ValueError(f"std values must be non-zero, got {std}")
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std", std)

    @classmethod
    def imagenet(cls) -> "MeanStd":
        return cls(mean=IMAGENET_MEAN, std=IMAGENET_STD)

    def apply(self, channels: NDArray[np.float32]) -> None:
        if channels.shape[-1] != len(self.mean):
            raise ValueError(
                f"Expected {len(self.mean)} channels on the last axis, got {channels.shape[-1]}"
            )
        mean = np.asarray(self.mean, dtype=np.float32)
        std = np.asarray(self.std, dtype=np.float32)
        channels /= np.float32(255.0)
        channels -= mean
        channels /= std


def _float_triple(payload: Mapping[str, Any], key: str) -> tuple[float, ...]:
    raw = payload.get(key, None)
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise ValueError(f"normalization.{key} must be a list of floats, got {raw!r}")
    try:
        return tuple(float(v) for v in raw)
    except Exception as exc:  # noqa: BLE001 - config boundary
        raise ValueError(f"normalization.{key} must contain floats, got {raw!r}") from exc


def parse_normalization(raw: str | Mapping[str, Any] | Normalization) -> Normalization:
    """Build a normalization from a name (``"unit"``) or a mapping (``{"name": "mean_std", ...}``)."""

    if isinstance(raw, Normalization):
        return raw

    payload: Mapping[str, Any]
    if isinstance(raw, Mapping):
        payload = raw
        name = str(payload.get("name", "")).strip().lower()
    else:
        payload = {}
        name = str(raw).strip().lower()
    name = name.replace("-", "_")

    if name in ("", "identity", "none"):
        return Identity()
    if name in ("unit", "unit_scale", "zero_one"):
        return UnitScale()
    if name in ("symmetric", "symmetric_scale", "minus_one_one"):
        return SymmetricScale()
    if name == "imagenet":
        return MeanStd.imagenet()
    if name in ("mean_std", "meanstd", "standardize"):
        return MeanStd(mean=_float_triple(payload, "mean"), std=_float_triple(payload, "std"))

    raise ValueError(
        f"Unknown normalization: {name!r}. "
        "Choose from: identity, unit, symmetric, imagenet, mean_std."
    )


__all__ = [
    "IMAGENET_MEAN",
    "IMAGENET_STD",
    "RGB_CHANNELS",
    "Identity",
    "MeanStd",
    "Normalization",
    "SymmetricScale",
    "UnitScale",
    "parse_normalization",
]
