"""Pipeline configuration files.

A config is a JSON (or YAML) object, optionally nested under a
``"pipeline"`` key::

    {
      "data_type": "qu8",
      "normalization": {"name": "mean_std", "mean": [0.5, 0.5, 0.5], "std": [0.5, 0.5, 0.5]},
      "layout": "hwc",
      "quantization": {"scale": 0.0078125, "zero_point": 128}
    }
"""

from __future__ import annotations

from .pipeline import PipelineConfig, load_config, load_pipeline_config, parse_pipeline_config

__all__ = [
    "PipelineConfig",
    "load_config",
    "load_pipeline_config",
    "parse_pipeline_config",
]
