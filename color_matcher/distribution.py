import numpy as np

from .color_names import ColorDistribution
from .mask import check_same_grid, normalize_mask


def to_bgr(image):
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"expected an HxWx3 or HxWx4 image, got shape {image.shape}")
    # 0..1 float images would all fall into the black cell
    if not np.issubdtype(image.dtype, np.integer):
        raise ValueError(f"expected an integer 0..255 image, got dtype {image.dtype}")
    return image[:, :, :3] if image.shape[2] == 4 else image


def build_distribution(table, image_bgr, mask, stride=1):
    """Color name distribution of the masked region of a BGR image.

    Every ``stride``-th row and column is sampled; each sampled pixel adds its
    table row scaled by its mask weight. A mask without any included sampled
    pixel yields ``ColorDistribution.empty()``.
    """
    if stride < 1:
        raise ValueError("stride must be >= 1")
    bgr = to_bgr(image_bgr)
    check_same_grid(bgr, mask)
    weights = normalize_mask(mask)[::stride, ::stride]
    sel = weights > 0
    if not sel.any():
        return ColorDistribution.empty()

    # table is indexed by RGB
    rgb = bgr[::stride, ::stride][sel][:, ::-1]
    probs = table.lookup_pixels(rgb)
    acc = (probs * weights[sel].astype(np.float64)[:, None]).sum(axis=0)
    return ColorDistribution(acc)
