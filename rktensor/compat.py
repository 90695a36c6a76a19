"""Registry of (normalization, data type) pairs that may be combined.

A normalization that rescales values into a small float range must not feed
an encoder that only casts to integers, e.g. ``UnitScale`` into ``U8`` would
collapse every pixel to 0 or 1. Only pairs registered here are accepted by
`rktensor.conversion.ImageToTensor`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from rktensor.datatypes import F32, U8, DataType, QuantizedI8, QuantizedI32, QuantizedU8
from rktensor.errors import IncompatibleStrategiesError
from rktensor.normalization import Identity, MeanStd, Normalization, SymmetricScale, UnitScale


_Pair = Tuple[type, type]


@dataclass(frozen=True)
class CompatEntry:
    normalization: type
    data_type: type
    note: str = ""


class CompatibilityRegistry:
    """Explicit allow-list keyed by (normalization class, data type class)."""

    def __init__(self) -> None:
        self._registry: Dict[_Pair, CompatEntry] = {}

    # ------------------------------------------------------------------
    def register(
        self,
        normalization: type,
        data_type: type,
        *,
        note: str = "",
        overwrite: bool = False,
    ) -> None:
        if not (isinstance(normalization, type) and issubclass(normalization, Normalization)):
            raise TypeError(f"Expected a Normalization subclass, got {normalization!r}")
        if not (isinstance(data_type, type) and issubclass(data_type, DataType)):
            raise TypeError(f"Expected a DataType subclass, got {data_type!r}")

        key = (normalization, data_type)
        if not overwrite and key in self._registry:
            raise KeyError(
                f"Pair ({normalization.__name__}, {data_type.__name__}) already registered. "
                "Set overwrite=True to replace it."
            )
        self._registry[key] = CompatEntry(normalization=normalization, data_type=data_type, note=note)

    def unregister(self, normalization: type, data_type: type) -> None:
        self._registry.pop((normalization, data_type), None)

    def is_compatible(self, normalization: Normalization, data_type: DataType) -> bool:
        return (type(normalization), type(data_type)) in self._registry

    def check(self, normalization: Normalization, data_type: DataType) -> None:
        if self.is_compatible(normalization, data_type):
            return
        allowed = self.data_types_for(type(normalization))
        hint = ", ".join(allowed) or "<none>"
        raise IncompatibleStrategiesError(
            f"Normalization {type(normalization).__name__} cannot be encoded as "
            f"{type(data_type).__name__}. Compatible data types: {hint}."
        )

    def data_types_for(self, normalization: type) -> List[str]:
        return sorted(dt.__name__ for (norm, dt) in self._registry if norm is normalization)

    def pairs(self) -> List[CompatEntry]:
        return sorted(
            self._registry.values(),
            key=lambda e: (e.normalization.__name__, e.data_type.__name__),
        )


COMPAT_REGISTRY = CompatibilityRegistry()


def register_compatible(
    data_types: Iterable[type],
    *,
    note: str = "",
    overwrite: bool = False,
    registry: Optional[CompatibilityRegistry] = None,
) -> Callable[[type], type]:
    """Class decorator declaring a normalization compatible with `data_types`.

    Examples
    --------
    >>> @register_compatible([F32])
    ... @dataclass(frozen=True)
    ... class Negate(Normalization):
    ...     def apply(self, channels):
    ...         channels *= -1.0
    """

    target = registry if registry is not None else COMPAT_REGISTRY

    def decorator(normalization: type) -> type:
        for data_type in data_types:
            target.register(normalization, data_type, note=note, overwrite=overwrite)
        return normalization

    return decorator


_QUANTIZED = (QuantizedU8, QuantizedI8, QuantizedI32)

for _dt in (U8, F32) + _QUANTIZED:
    COMPAT_REGISTRY.register(Identity, _dt, note="raw 0-255 values")

for _norm in (UnitScale, SymmetricScale, MeanStd):
    for _dt in (F32,) + _QUANTIZED:
        COMPAT_REGISTRY.register(_norm, _dt, note="scaled float values")


__all__ = [
    "COMPAT_REGISTRY",
    "CompatEntry",
    "CompatibilityRegistry",
    "register_compatible",
]
