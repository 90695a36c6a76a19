from __future__ import annotations

import numpy as np
import pytest


def make_gradient_image(width: int, height: int) -> np.ndarray:
    """RGB/u8/HWC image with R=10x+y, G=100+10x+y, B=200+10x+y."""

    img = np.zeros((height, width, 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            base = 10 * x + y
            img[y, x] = (base, 100 + base, 200 + base)
    return img


@pytest.fixture
def gradient_2x2() -> np.ndarray:
    return make_gradient_image(2, 2)


@pytest.fixture
def random_image() -> np.ndarray:
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(4, 5, 3), dtype=np.uint8)
