"""Memory layouts mapping ``(x, y, channel)`` to a flat buffer offset.

`index` accepts plain ints or broadcastable numpy integer arrays, so the same
function drives the per-pixel scan and the vectorized converter.
"""

from __future__ import annotations

from typing import Any, ClassVar


class Layout:
    """Base layout. Subclasses declare `CHANNELS` and implement `index`/`shape`."""

    name: ClassVar[str] = "layout"
    CHANNELS: ClassVar[int] = 3

    def index(self, width: Any, height: Any, x: Any, y: Any, channel: Any) -> Any:
        raise NotImplementedError

    def shape(self, width: int, height: int) -> tuple[int, int, int]:
        raise NotImplementedError

    def size(self, width: int, height: int) -> int:
        return int(width) * int(height) * int(self.CHANNELS)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ChannelMajor(Layout):
    """Planar ``CHW``: every pixel of channel 0, then channel 1, ..."""

    name = "chw"

    def index(self, width, height, x, y, channel):  # noqa: ANN001 - scalar or ndarray
        return channel * width * height + y * width + x

    def shape(self, width: int, height: int) -> tuple[int, int, int]:
        return (int(self.CHANNELS), int(height), int(width))


class PixelMajor(Layout):
    """Interleaved ``HWC``: the channels of one pixel are contiguous."""

    name = "hwc"

    def index(self, width, height, x, y, channel):  # noqa: ANN001 - scalar or ndarray
        return (y * width + x) * self.CHANNELS + channel

    def shape(self, width: int, height: int) -> tuple[int, int, int]:
        return (int(height), int(width), int(self.CHANNELS))


_LAYOUT_ALIASES = {
    "chw": ChannelMajor,
    "channel_major": ChannelMajor,
    "planar": ChannelMajor,
    "hwc": PixelMajor,
    "pixel_major": PixelMajor,
    "interleaved": PixelMajor,
}


def parse_layout(raw: str | Layout) -> Layout:
    if isinstance(raw, Layout):
        return raw
    key = str(raw).strip().lower().replace("-", "_")
    try:
        return _LAYOUT_ALIASES[key]()
    except KeyError as exc:
        choices = ", ".join(sorted(_LAYOUT_ALIASES))
        raise ValueError(f"Unknown layout: {raw!r}. Choose from: {choices}.") from exc


__all__ = ["ChannelMajor", "Layout", "PixelMajor", "parse_layout"]
