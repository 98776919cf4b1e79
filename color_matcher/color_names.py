import logging
from collections.abc import Mapping
from pathlib import Path

import numpy as np
import cv2

from .errors import ColorTableError

logger = logging.getLogger(__name__)

# The eleven basic color terms, in table column order.
COLOR_NAMES = (
    "black", "blue", "brown", "grey", "green", "orange",
    "pink", "purple", "red", "white", "yellow",
)
NAME_INDEX = {name: i for i, name in enumerate(COLOR_NAMES)}

QUANT_STEP = 8
BINS = 256 // QUANT_STEP
TABLE_SIZE = BINS ** 3

# RGB anchors per color name, used to synthesize a table when no resource is given.
PROTOTYPES = {
    "black":  [(0, 0, 0), (35, 35, 35)],
    "blue":   [(0, 0, 255), (30, 60, 160), (100, 150, 230), (0, 0, 120)],
    "brown":  [(140, 80, 30), (100, 60, 30), (165, 110, 65)],
    "grey":   [(128, 128, 128), (90, 90, 90), (180, 180, 180)],
    "green":  [(0, 160, 0), (50, 205, 50), (0, 100, 0), (120, 190, 80)],
    "orange": [(255, 140, 0), (240, 110, 20)],
    "pink":   [(255, 170, 200), (230, 100, 160)],
    "purple": [(128, 0, 128), (150, 90, 200)],
    "red":    [(220, 20, 20), (150, 0, 0)],
    "white":  [(255, 255, 255), (235, 235, 235)],
    "yellow": [(255, 230, 0), (240, 220, 90)],
}


class ColorDistribution(Mapping):
    """Read-only weighting over COLOR_NAMES.

    A complete distribution always holds every color name and sums to 1.
    The empty distribution (``ColorDistribution.empty()``) stands for "no
    observation": it has no keys and ``is_empty`` is True.
    """

    __slots__ = ("_weights",)

    def __init__(self, weights=None):
        if weights is None:
            self._weights = None
            return
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != (len(COLOR_NAMES),):
            raise ValueError(f"expected {len(COLOR_NAMES)} weights, got shape {w.shape}")
        if not np.all(np.isfinite(w)) or np.any(w < 0):
            raise ValueError("weights must be finite and non-negative")
        peak = w.max()
        if peak <= 0:
            raise ValueError("weights sum to zero")
        # scale by the peak first so the sum cannot overflow
        w = w / peak
        w = w / w.sum()
        w.setflags(write=False)
        self._weights = w

    @classmethod
    def empty(cls):
        return cls(None)

    @classmethod
    def from_mapping(cls, mapping):
        """Build from a {name: weight} mapping; absent names weigh 0."""
        w = np.zeros(len(COLOR_NAMES), dtype=np.float64)
        for name, value in mapping.items():
            if name not in NAME_INDEX:
                raise ValueError(f"unknown color name {name!r}")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"weight for {name!r} is not a number: {value!r}")
            w[NAME_INDEX[name]] = float(value)
        return cls(w)

    @property
    def is_empty(self):
        return self._weights is None

    def as_array(self):
        if self._weights is None:
            return np.zeros(len(COLOR_NAMES), dtype=np.float64)
        return self._weights.copy()

    def dominant(self):
        """Name of the heaviest color; ties go to the lexically smaller name."""
        if self._weights is None:
            return None
        best = self._weights.max()
        return min(n for n, v in zip(COLOR_NAMES, self._weights) if v == best)

    def to_dict(self):
        """Non-zero weights only, as plain floats."""
        if self._weights is None:
            return {}
        return {n: float(v) for n, v in zip(COLOR_NAMES, self._weights) if v > 0}

    def __getitem__(self, name):
        if self._weights is None:
            raise KeyError(name)
        return float(self._weights[NAME_INDEX[name]])

    def __iter__(self):
        if self._weights is None:
            return iter(())
        return iter(COLOR_NAMES)

    def __len__(self):
        return 0 if self._weights is None else len(COLOR_NAMES)

    def __repr__(self):
        if self._weights is None:
            return "ColorDistribution.empty()"
        items = ", ".join(f"{k}: {v:.3f}" for k, v in self.to_dict().items())
        return f"ColorDistribution({{{items}}})"


def _cell_centers():
    idx = np.arange(TABLE_SIZE)
    r = idx % BINS
    g = (idx // BINS) % BINS
    b = idx // (BINS * BINS)
    return np.stack([r, g, b], axis=1) * QUANT_STEP + QUANT_STEP // 2


def _rgb_to_lab(rgb):
    px = (np.asarray(rgb, dtype=np.float32) / 255.0).reshape(-1, 1, 3)
    return cv2.cvtColor(px, cv2.COLOR_RGB2Lab).reshape(-1, 3).astype(np.float64)


class ColorNameTable:
    """Quantized lookup from an RGB sample to a distribution over COLOR_NAMES.

    Cells cover ``QUANT_STEP`` intensity levels per channel; the cell of
    ``(r, g, b)`` is ``r//8 + 32*(g//8) + 1024*(b//8)``, the layout of the
    classic w2c color-naming table. Instances are immutable and safe to share
    between threads.
    """

    def __init__(self, probabilities: np.ndarray):
        p = np.array(probabilities, dtype=np.float64)
        if p.shape != (TABLE_SIZE, len(COLOR_NAMES)):
            raise ColorTableError(
                f"table must have shape {(TABLE_SIZE, len(COLOR_NAMES))}, got {p.shape}")
        if not np.all(np.isfinite(p)) or np.any(p < 0):
            raise ColorTableError("table holds negative or non-finite probabilities")
        peaks = p.max(axis=1, keepdims=True)
        if np.any(peaks <= 0):
            bad = int(np.argmin(peaks[:, 0]))
            raise ColorTableError(f"table row {bad} has no probability mass")
        p /= peaks
        p /= p.sum(axis=1, keepdims=True)
        p.setflags(write=False)
        self._probs = p

    @classmethod
    def from_file(cls, path):
        """Parse a w2c-style text resource: one row per cell, ``R G B p1 .. p11``."""
        path = Path(path)
        try:
            raw = np.loadtxt(path, dtype=np.float64, ndmin=2)
        except (OSError, ValueError) as e:
            raise ColorTableError(f"cannot read color table {path}: {e}") from e
        if raw.shape != (TABLE_SIZE, 3 + len(COLOR_NAMES)):
            raise ColorTableError(
                f"color table {path} must have {TABLE_SIZE} rows of "
                f"{3 + len(COLOR_NAMES)} columns, got {raw.shape}")
        cells = (raw[:, :3] // QUANT_STEP).astype(np.int64)
        expected = (_cell_centers() // QUANT_STEP).astype(np.int64)
        if not np.array_equal(cells, expected):
            raise ColorTableError(f"color table {path} rows are not in cell order")
        table = cls(raw[:, 3:])
        logger.info("Loaded color name table from %s", path)
        return table

    @classmethod
    def from_prototypes(cls, sigma=18.0, prototypes=None):
        """Soft-assign every cell center to the nearest prototype of each name in CIE Lab."""
        prototypes = prototypes or PROTOTYPES
        centers = _rgb_to_lab(_cell_centers())
        d2 = np.empty((TABLE_SIZE, len(COLOR_NAMES)), dtype=np.float64)
        for j, name in enumerate(COLOR_NAMES):
            anchors = _rgb_to_lab(prototypes[name])
            diff = centers[:, None, :] - anchors[None, :, :]
            d2[:, j] = (diff ** 2).sum(axis=2).min(axis=1)
        d2 -= d2.min(axis=1, keepdims=True)
        return cls(np.exp(-d2 / (2.0 * sigma ** 2)))

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rows = np.hstack([_cell_centers() - QUANT_STEP // 2, self._probs])
        fmt = ["%d"] * 3 + ["%.6f"] * len(COLOR_NAMES)
        np.savetxt(path, rows, fmt=fmt)

    @property
    def probabilities(self):
        return self._probs

    def _cells(self, rgb):
        q = np.asarray(rgb).astype(np.int64) // QUANT_STEP
        if np.any(q < 0) or np.any(q >= BINS):
            raise ValueError("color samples must lie in 0..255")
        return q[..., 0] + BINS * q[..., 1] + BINS * BINS * q[..., 2]

    def lookup(self, sample):
        """Distribution over color names for one RGB sample."""
        sample = np.asarray(sample)
        if sample.shape != (3,):
            raise ValueError(f"a color sample has 3 channels, got shape {sample.shape}")
        return ColorDistribution(self._probs[self._cells(sample)])

    def lookup_pixels(self, rgb):
        """(N, 3) RGB samples -> (N, 11) probability rows."""
        return self._probs[self._cells(rgb)]
