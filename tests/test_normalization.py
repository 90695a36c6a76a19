from __future__ import annotations

import numpy as np
import pytest

from rktensor.normalization import (
    IMAGENET_MEAN,
    IMAGENET_STD,
    Identity,
    MeanStd,
    SymmetricScale,
    UnitScale,
    parse_normalization,
)


def _triple(*values: float) -> np.ndarray:
    return np.array(values, dtype=np.float32)


def test_identity_leaves_values_unchanged() -> None:
    channels = _triple(0.0, 127.0, 255.0)
    Identity().apply(channels)
    assert channels.tolist() == [0.0, 127.0, 255.0]


def test_unit_scale() -> None:
    channels = _triple(0.0, 51.0, 255.0)
    UnitScale().apply(channels)
    np.testing.assert_allclose(channels, [0.0, 0.2, 1.0], rtol=1e-6)


def test_symmetric_scale() -> None:
    channels = _triple(0.0, 127.5, 255.0)
    SymmetricScale().apply(channels)
    np.testing.assert_allclose(channels, [-1.0, 0.0, 1.0], atol=1e-6)


def test_imagenet_mean_std() -> None:
    channels = _triple(255.0, 255.0, 255.0)
    MeanStd.imagenet().apply(channels)
    expected = [(1.0 - m) / s for m, s in zip(IMAGENET_MEAN, IMAGENET_STD)]
    np.testing.assert_allclose(channels, expected, rtol=1e-5)


def test_mean_std_applies_over_last_axis_of_raster() -> None:
    raster = np.full((2, 3, 3), 127.5, dtype=np.float32)
    MeanStd(mean=(0.5, 0.5, 0.5), std=(0.5, 0.5, 0.5)).apply(raster)
    np.testing.assert_allclose(raster, 0.0, atol=1e-6)


def test_mean_std_validates_parameters() -> None:
    with pytest.raises(ValueError):
        MeanStd(mean=(0.5, 0.5), std=(0.5, 0.5, 0.5))
    with pytest.raises(ValueError):
        MeanStd(mean=(0.5, 0.5, 0.5), std=(0.5, 0.0, 0.5))


@pytest.mark.parametrize(
    "mean, std",
    [((0.5,), (0.5,)), ((0.5, 0.5), (0.5, 0.5)), ((0.1, 0.2, 0.3, 0.4), (1.0, 1.0, 1.0, 1.0))],
)
def test_mean_std_requires_one_value_per_rgb_channel(mean, std) -> None:
    with pytest.raises(ValueError, match="one per RGB channel"):
        MeanStd(mean=mean, std=std)


def test_mean_std_apply_rejects_wrong_channel_axis() -> None:
    with pytest.raises(ValueError, match="channels on the last axis"):
        MeanStd.imagenet().apply(np.zeros((2, 4), dtype=np.float32))


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("identity", Identity()),
        ("none", Identity()),
        ("unit", UnitScale()),
        ("symmetric", SymmetricScale()),
        ("imagenet", MeanStd.imagenet()),
        ({"name": "mean_std", "mean": [0.5, 0.5, 0.5], "std": [0.25, 0.25, 0.25]},
         MeanStd(mean=(0.5, 0.5, 0.5), std=(0.25, 0.25, 0.25))),
    ],
)
def test_parse_normalization(raw, expected) -> None:
    assert parse_normalization(raw) == expected


def test_parse_normalization_errors() -> None:
    with pytest.raises(ValueError, match="Unknown normalization"):
        parse_normalization("histogram")
    with pytest.raises(ValueError, match="normalization.mean"):
        parse_normalization({"name": "mean_std", "std": [1, 1, 1]})
