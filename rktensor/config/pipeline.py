from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from rktensor.compat import COMPAT_REGISTRY
from rktensor.conversion import ImageToTensor
from rktensor.datatypes import DataType, QuantParams, parse_data_type
from rktensor.errors import ConfigurationError
from rktensor.layouts import Layout, parse_layout
from rktensor.normalization import MeanStd, Normalization, parse_normalization


def _decode_json(text: str, source: Path) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config: {source}. Original error: {exc}") from exc


def _decode_yaml(text: str, source: Path) -> Any:
    try:
        import yaml  # type: ignore[import-not-found]
    except Exception as exc:  # noqa: BLE001 - dependency boundary
        raise ImportError(
            f"Reading {source.name} requires PyYAML.\n"
            "Install it via:\n"
            "  pip install 'rktensor[yaml]'"
        ) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config: {source}. Original error: {exc}") from exc


_DECODERS: dict[str, Callable[[str, Path], Any]] = {
    ".json": _decode_json,
    ".yml": _decode_yaml,
    ".yaml": _decode_yaml,
}


def load_config(path: str | Path) -> dict[str, Any]:
    """Read a pipeline config file (``.json``, or ``.yml``/``.yaml`` with PyYAML) into a dict.

    An empty document yields ``{}``, i.e. the default pipeline.
    """

    source = Path(path)
    decode = _DECODERS.get(source.suffix.lower())
    if decode is None:
        supported = ", ".join(sorted(_DECODERS))
        raise ValueError(
            f"Unsupported config extension: {source.suffix!r} for {str(source)!r}. Supported: {supported}."
        )

    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Config not found: {source}") from exc

    data = decode(text, source)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(
            f"Config must be an object/dict at the top level, got {type(data).__name__} from {str(source)!r}."
        )
    return dict(data)


@dataclass(frozen=True)
class PipelineConfig:
    data_type: DataType
    normalization: Normalization
    layout: Layout
    quant_params: QuantParams | None = None
    vectorized: bool = True

    def build(self) -> ImageToTensor:
        return ImageToTensor(
            self.data_type,
            self.normalization,
            self.layout,
            quant_params=self.quant_params,
            vectorized=self.vectorized,
        )

    def to_dict(self) -> dict[str, Any]:
        norm: dict[str, Any] = {"name": self.normalization.name}
        if isinstance(self.normalization, MeanStd):
            norm["mean"] = list(self.normalization.mean)
            norm["std"] = list(self.normalization.std)
        payload: dict[str, Any] = {
            "data_type": self.data_type.name,
            "normalization": norm,
            "layout": self.layout.name,
            "vectorized": self.vectorized,
        }
        if self.quant_params is not None:
            payload["quantization"] = {
                "scale": self.quant_params.scale,
                "zero_point": self.quant_params.zero_point,
            }
        return payload


def _parse_quantization(raw: Any) -> QuantParams | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError(f"pipeline.quantization must be an object/dict or null, got {raw!r}")

    if "scale" not in raw:
        raise ValueError("pipeline.quantization.scale is required.")
    try:
        scale = float(raw["scale"])
    except Exception as exc:  # noqa: BLE001 - config boundary
        raise ValueError(f"pipeline.quantization.scale must be a float, got {raw['scale']!r}") from exc
    if not scale > 0.0:
        raise ValueError(f"pipeline.quantization.scale must be > 0, got {scale}")

    zp_raw = raw.get("zero_point", 0)
    if isinstance(zp_raw, bool) or (isinstance(zp_raw, float) and not zp_raw.is_integer()):
        raise ValueError(f"pipeline.quantization.zero_point must be an int, got {zp_raw!r}")
    try:
        zero_point = int(zp_raw)
    except Exception as exc:  # noqa: BLE001 - config boundary
        raise ValueError(f"pipeline.quantization.zero_point must be an int, got {zp_raw!r}") from exc

    return QuantParams(scale=scale, zero_point=zero_point)


def parse_pipeline_config(payload: Mapping[str, Any]) -> PipelineConfig:
    """Validate a config payload and resolve it into strategy objects.

    Field-level problems raise `ValueError`; a well-formed payload describing
    an unusable combination (incompatible pair, missing or extra quantization)
    raises `ConfigurationError`.
    """

    section = payload.get("pipeline", payload)
    if not isinstance(section, Mapping):
        raise ValueError(f"pipeline must be an object/dict, got {type(section).__name__}")

    data_type = parse_data_type(section.get("data_type", "u8"))
    normalization = parse_normalization(section.get("normalization", "identity"))
    layout = parse_layout(section.get("layout", "chw"))
    quant_params = _parse_quantization(section.get("quantization", None))

    vectorized_raw = section.get("vectorized", True)
    if not isinstance(vectorized_raw, bool):
        raise ValueError(f"pipeline.vectorized must be a boolean, got {vectorized_raw!r}")

    if data_type.quantized and quant_params is None:
        raise ConfigurationError(
            f"pipeline.data_type={data_type.name!r} is quantized; pipeline.quantization is required."
        )
    if not data_type.quantized and quant_params is not None:
        raise ConfigurationError(
            f"pipeline.quantization is set but pipeline.data_type={data_type.name!r} is not quantized."
        )
    COMPAT_REGISTRY.check(normalization, data_type)

    return PipelineConfig(
        data_type=data_type,
        normalization=normalization,
        layout=layout,
        quant_params=quant_params,
        vectorized=vectorized_raw,
    )


def load_pipeline_config(path: str | Path) -> PipelineConfig:
    return parse_pipeline_config(load_config(path))
