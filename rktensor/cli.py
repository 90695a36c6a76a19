from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import numpy as np


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rktensor-inspect",
        description="Convert an image to a flat tensor buffer and print a summary of it.",
    )
    parser.add_argument("image", help="Path to an image file readable by Pillow")
    parser.add_argument(
        "--config",
        default=None,
        help="Optional pipeline config (.json/.yml). Flags below override its fields.",
    )
    parser.add_argument("--dtype", default=None, help="Data type: u8|f32|qu8|qi8|qi32")
    parser.add_argument(
        "--normalization",
        default=None,
        help="Normalization: identity|unit|symmetric|imagenet (mean_std needs mean/std lists, set it via --config)",
    )
    parser.add_argument("--layout", default=None, help="Layout: chw|hwc")
    parser.add_argument("--scale", type=float, default=None, help="Quantization scale")
    parser.add_argument("--zero-point", type=int, default=None, help="Quantization zero point")
    parser.add_argument(
        "--head",
        type=int,
        default=8,
        help="Number of leading buffer values to print (default: 8)",
    )
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _merge_overrides(payload: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    out = dict(payload.get("pipeline", payload))
    if args.dtype is not None:
        out["data_type"] = str(args.dtype)
    if args.normalization is not None:
        out["normalization"] = str(args.normalization)
    if args.layout is not None:
        out["layout"] = str(args.layout)
    if args.scale is not None or args.zero_point is not None:
        quant = dict(out.get("quantization", None) or {})
        if args.scale is not None:
            quant["scale"] = float(args.scale)
        if args.zero_point is not None:
            quant["zero_point"] = int(args.zero_point)
        out["quantization"] = quant
    return out


def summarize_buffer(buffer: np.ndarray, *, shape: tuple[int, ...], head: int) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "shape": list(shape),
        "dtype": str(buffer.dtype),
        "size": int(buffer.size),
        "head": buffer[: max(int(head), 0)].tolist(),
    }
    if buffer.size:
        summary["min"] = buffer.min().item()
        summary["max"] = buffer.max().item()
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if bool(args.verbose):
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        from rktensor.config import load_config, parse_pipeline_config
        from rktensor.sources import load_pixel_source

        payload = load_config(Path(str(args.config))) if args.config is not None else {}
        config = parse_pipeline_config(_merge_overrides(payload, args))
        converter = config.build()

        source = load_pixel_source(Path(str(args.image)))
        width, height = source.dimensions()
        buffer = converter.convert(source)
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        print(str(exc), file=sys.stderr)
        return 1

    summary = summarize_buffer(buffer, shape=config.layout.shape(width, height), head=args.head)

    if bool(args.json):
        print(json.dumps({"pipeline": config.to_dict(), "tensor": summary}, indent=2, sort_keys=True))
        return 0

    msg = (
        f"ok: {width}x{height} -> shape={tuple(summary['shape'])} dtype={summary['dtype']} "
        f"layout={config.layout.name} normalization={config.normalization.name}"
    )
    if "min" in summary:
        msg += f" min={summary['min']} max={summary['max']}"
    print(msg)
    print(f"head: {summary['head']}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
