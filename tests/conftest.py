"""Shared pytest fixtures for color matcher tests."""

from pathlib import Path

import numpy as np
import pytest

from color_matcher.color_names import ColorDistribution, ColorNameTable
from color_matcher.io_utils import write_learning

# BGR
RED = (0, 0, 255)
BLUE = (255, 0, 0)


@pytest.fixture(scope="session")
def table() -> ColorNameTable:
    """Prototype table, built once per test session."""
    return ColorNameTable.from_prototypes()


@pytest.fixture
def repo_root() -> Path:
    return Path(__file__).parent.parent


def solid_image(color, h=40, w=40):
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:, :] = color
    return img


def square_mask(h=40, w=40, y0=10, x0=10, size=20):
    mask = np.zeros((h, w), dtype=np.uint8)
    mask[y0:y0 + size, x0:x0 + size] = 255
    return mask


@pytest.fixture
def write_model(tmp_path):
    """Write a learning file and return its path."""
    def _write(name, dists, filename=None):
        path = tmp_path / "models" / (filename or f"{name}.yml")
        write_learning(path, name, [ColorDistribution.from_mapping(d) for d in dists])
        return path
    return _write
