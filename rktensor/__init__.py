"""rktensor - RGB image to flat model-input tensor conversion.

Exports are loaded lazily so that `import rktensor` stays cheap and the CLI
does not pull in Pillow before it parses its arguments.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Modules
    "compat",
    "config",
    "conversion",
    "datatypes",
    "errors",
    "layouts",
    "normalization",
    "sources",
    "tensor",
    # Tensor container
    "Tensor",
    "TensorError",
    "ShapeMismatchError",
    "OutOfBoundsError",
    # Conversion
    "ImageToTensor",
    "to_tensor",
    "to_tensor_quantized",
    "QuantParams",
]


_LAZY_SUBMODULES = {
    "compat",
    "config",
    "conversion",
    "datatypes",
    "errors",
    "layouts",
    "normalization",
    "sources",
    "tensor",
}

_LAZY_EXPORTS = {
    "Tensor": ("tensor", "Tensor"),
    "TensorError": ("errors", "TensorError"),
    "ShapeMismatchError": ("errors", "ShapeMismatchError"),
    "OutOfBoundsError": ("errors", "OutOfBoundsError"),
    "ImageToTensor": ("conversion", "ImageToTensor"),
    "to_tensor": ("conversion", "to_tensor"),
    "to_tensor_quantized": ("conversion", "to_tensor_quantized"),
    "QuantParams": ("datatypes", "QuantParams"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    if name in _LAZY_SUBMODULES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover - tooling convenience
    return sorted(set(globals()) | set(__all__))
