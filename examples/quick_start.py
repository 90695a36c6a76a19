"""
Quick start for rktensor.

Builds a synthetic RGB image, converts it with a few pipeline combinations
and prints the resulting buffers.
"""

import numpy as np

from rktensor import ImageToTensor, QuantParams, Tensor, to_tensor, to_tensor_quantized
from rktensor.layouts import ChannelMajor


def main():
    rng = np.random.default_rng(0)
    image = rng.integers(0, 256, size=(4, 6, 3), dtype=np.uint8)
    height, width = image.shape[:2]

    planar = to_tensor(image)
    print(f"u8 / identity / chw: {planar.shape} {planar.dtype} head={planar[:6].tolist()}")

    converter = ImageToTensor("f32", "imagenet", "hwc")
    t = converter.as_tensor(image)
    print(f"f32 / imagenet / hwc: shape={t.shape} first={t.get(0):.4f}")

    params = QuantParams(scale=1 / 127.5, zero_point=128)
    quantized = to_tensor_quantized(image, params, normalization="symmetric")
    wrapped = Tensor.from_buffer(quantized, ChannelMajor(), width, height)
    print(f"qu8 / symmetric: shape={wrapped.shape} head={quantized[:6].tolist()}")


if __name__ == "__main__":
    main()
