from __future__ import annotations

import numpy as np
import pytest

from rktensor.datatypes import (
    F32,
    U8,
    QuantizedI8,
    QuantizedI32,
    QuantizedU8,
    QuantParams,
    parse_data_type,
)


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0), (3.7, 3), (254.99, 254), (255.0, 255), (-1.0, 0), (300.0, 255), (float("nan"), 0)],
)
def test_u8_truncates_and_saturates(value, expected) -> None:
    out = U8().from_f32(value)
    assert out == expected
    assert out.dtype == np.uint8


def test_u8_vectorized_matches_scalar() -> None:
    values = np.array([[0.5, 12.9, 400.0], [-3.0, 128.0, np.inf]], dtype=np.float32)
    out = U8().from_f32(values)
    assert out.dtype == np.uint8
    assert out.tolist() == [[0, 12, 255], [0, 128, 255]]


def test_f32_is_a_float32_cast() -> None:
    out = F32().from_f32(0.25)
    assert out == np.float32(0.25)
    assert out.dtype == np.float32


def test_quantized_formula_and_saturation() -> None:
    params = QuantParams(scale=0.5, zero_point=128)
    qu8 = QuantizedU8()
    assert qu8.from_f32(0.0, params) == 128
    assert qu8.from_f32(10.0, params) == 148
    assert qu8.from_f32(63.5, params) == 255
    assert qu8.from_f32(100.0, params) == 255
    assert qu8.from_f32(-64.0, params) == 0
    assert qu8.from_f32(-100.0, params) == 0

    qi32 = QuantizedI32()
    assert qi32.from_f32(100.0, params) == 328


@pytest.mark.parametrize(
    "value, expected",
    [(2.5, 3), (-2.5, -3), (0.5, 1), (-0.5, -1), (1.49, 1), (-1.49, -1), (0.0, 0)],
)
def test_quantized_rounds_half_away_from_zero(value, expected) -> None:
    out = QuantizedI8().from_f32(value, QuantParams(scale=1.0, zero_point=0))
    assert out == expected
    assert out.dtype == np.int8


def test_quantized_i8_saturates_both_ends() -> None:
    params = QuantParams(scale=1.0, zero_point=0)
    assert QuantizedI8().from_f32(1000.0, params) == 127
    assert QuantizedI8().from_f32(-1000.0, params) == -128


def test_zero_scale_saturates_and_maps_zero_to_zero_point() -> None:
    params = QuantParams(scale=0.0, zero_point=10)
    assert QuantizedU8().from_f32(5.0, params) == 255
    assert QuantizedI8().from_f32(-5.0, params) == -128
    assert QuantizedU8().from_f32(0.0, params) == 10


def test_nan_quantizes_to_saturated_zero_point() -> None:
    assert QuantizedU8().from_f32(float("nan"), QuantParams(scale=1.0, zero_point=7)) == 7
    assert QuantizedU8().from_f32(float("nan"), QuantParams(scale=1.0, zero_point=300)) == 255


def test_negative_scale_flips_sign() -> None:
    params = QuantParams(scale=-1.0, zero_point=0)
    assert QuantizedI8().from_f32(10.0, params) == -10
    assert QuantizedU8().from_f32(10.0, params) == 0


def test_quantized_requires_params() -> None:
    with pytest.raises(TypeError):
        QuantizedU8().from_f32(1.0, None)


def test_quant_params_coerce_types() -> None:
    params = QuantParams(scale=1, zero_point=np.int64(3))
    assert isinstance(params.scale, float)
    assert type(params.zero_point) is int


def test_parse_data_type() -> None:
    assert isinstance(parse_data_type("u8"), U8)
    assert isinstance(parse_data_type("Float32"), F32)
    assert isinstance(parse_data_type("qi8"), QuantizedI8)
    assert parse_data_type("qu8").quantized
    assert not parse_data_type("f32").quantized
    with pytest.raises(ValueError, match="Unknown data type"):
        parse_data_type("f16")
