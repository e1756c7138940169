"""Pytest configuration and fixtures."""
import numpy as np
import pytest


@pytest.fixture
def two_by_two_image():
    """2x2 image: two blacks, one white, one near-black."""
    return np.array(
        [
            [[0, 0, 0], [0, 0, 0]],
            [[255, 255, 255], [10, 10, 10]],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def random_image():
    """Reproducible 20x20 noise image."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, (20, 20, 3), dtype=np.uint8)


@pytest.fixture
def few_color_image():
    """32x32 image drawn from a small fixed palette."""
    rng = np.random.default_rng(7)
    palette = np.array(
        [
            [255, 0, 0],
            [250, 10, 5],
            [0, 0, 255],
            [10, 20, 240],
            [128, 128, 128],
            [255, 255, 0],
        ],
        dtype=np.uint8,
    )
    labels = rng.integers(0, len(palette), (32, 32))
    return palette[labels]
