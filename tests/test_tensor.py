from __future__ import annotations

import numpy as np
import pytest

from rktensor.errors import OutOfBoundsError, ShapeMismatchError, TensorError
from rktensor.layouts import ChannelMajor, PixelMajor
from rktensor.tensor import Tensor


@pytest.mark.parametrize(
    "data, shape",
    [
        ([1, 2, 3, 4, 5, 6], [2, 3]),
        ([1, 2, 3, 4, 5, 6], [3, 2, 1]),
        ([7], []),
        ([], [0]),
        ([], [3, 0, 2]),
        (["a", "b"], [2]),
    ],
)
def test_tensor_round_trips_data_and_shape(data, shape) -> None:
    t = Tensor(data, shape)
    assert t.data == tuple(data)
    assert t.shape == tuple(shape)
    assert len(t) == len(data)


@pytest.mark.parametrize(
    "data, shape",
    [
        ([1, 2, 3], [2, 2]),
        ([], []),
        ([1], [0]),
        ([1, 2, 3, 4], [2, 3]),
    ],
)
def test_tensor_rejects_length_mismatch(data, shape) -> None:
    with pytest.raises(ShapeMismatchError) as exc:
        Tensor(data, shape)
    assert "Shape mismatch" in str(exc.value)


def test_shape_mismatch_is_a_value_error_and_tensor_error() -> None:
    with pytest.raises(ValueError):
        Tensor([1, 2], [3])
    with pytest.raises(TensorError):
        Tensor([1, 2], [3])


@pytest.mark.parametrize("shape", [[-1], [2, -2], [1.5], [True]])
def test_tensor_rejects_invalid_dimensions(shape) -> None:
    with pytest.raises(ShapeMismatchError):
        Tensor([], shape)


def test_tensor_accepts_numpy_inputs() -> None:
    data = np.arange(6, dtype=np.uint8)
    t = Tensor(data, np.array([2, 3]))
    assert t.shape == (2, 3)
    assert t.get(5) == 5


def test_get_returns_element_at_flat_index() -> None:
    t = Tensor([10, 20, 30, 40], [2, 2])
    assert [t.get(i) for i in range(4)] == [10, 20, 30, 40]


@pytest.mark.parametrize("index", [4, 5, 100, -1])
def test_get_out_of_range_raises(index) -> None:
    t = Tensor([10, 20, 30, 40], [2, 2])
    with pytest.raises(OutOfBoundsError) as exc:
        t.get(index)
    assert "Index out of bounds" in str(exc.value)


def test_get_on_empty_tensor_raises_index_error() -> None:
    t = Tensor([], [0, 4])
    with pytest.raises(IndexError):
        t.get(0)


def test_tensor_is_immutable() -> None:
    t = Tensor([1, 2], [2])
    with pytest.raises(AttributeError):
        t.shape = (1, 2)  # type: ignore[misc]
    with pytest.raises(AttributeError):
        t.data = (3, 4)  # type: ignore[misc]


def test_tensor_equality_and_repr() -> None:
    a = Tensor([1, 2, 3, 4], [2, 2])
    assert a == Tensor([1, 2, 3, 4], (2, 2))
    assert a != Tensor([1, 2, 3, 4], (4,))
    assert "shape=(2, 2)" in repr(a)


def test_to_numpy_reshapes_and_is_read_only() -> None:
    t = Tensor(range(6), [2, 3])
    arr = t.to_numpy(dtype=np.int64)
    assert arr.shape == (2, 3)
    assert arr[1, 2] == 5
    with pytest.raises(ValueError):
        arr[0, 0] = 1


def test_from_buffer_uses_layout_shape() -> None:
    buf = np.arange(24, dtype=np.float32)
    chw = Tensor.from_buffer(buf, ChannelMajor(), width=4, height=2)
    hwc = Tensor.from_buffer(buf, PixelMajor(), width=4, height=2)
    assert chw.shape == (3, 2, 4)
    assert hwc.shape == (2, 4, 3)

    with pytest.raises(ShapeMismatchError):
        Tensor.from_buffer(buf, ChannelMajor(), width=3, height=3)
