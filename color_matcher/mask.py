import numpy as np
import cv2

from .errors import MaskShapeError


def normalize_mask(mask):
    """Return mask weights as float32 in 0..1.

    bool masks and 0/1 integer masks map to 0/1, other integer masks are
    read as 0..255 (OpenCV convention), float masks are clipped.
    """
    m = np.asarray(mask)
    if m.ndim != 2:
        raise MaskShapeError(f"mask must be 2-D, got shape {m.shape}")
    if m.dtype == bool:
        return m.astype(np.float32)
    if np.issubdtype(m.dtype, np.integer):
        if m.size and m.max() > 1:
            return (np.clip(m, 0, 255) / 255.0).astype(np.float32)
        return np.clip(m, 0, 1).astype(np.float32)
    w = np.nan_to_num(m.astype(np.float32), nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(w, 0.0, 1.0)


def check_same_grid(image, mask):
    if image.shape[:2] != np.shape(mask)[:2]:
        raise MaskShapeError(
            f"image is {image.shape[1]}x{image.shape[0]} but mask is "
            f"{np.shape(mask)[1]}x{np.shape(mask)[0]}")


def refine_mask(mask, contour_width=3, shape=None):
    """Drop a band of ``contour_width`` pixels along every contour of the mask.

    Edge pixels of a segment are usually a blend of object and background, so
    they are excluded before sampling colors. Hole boundaries get the band
    too, since background shows through them. The result never includes a
    pixel the input excluded and never raises a weight. When the region is
    thinner than the band the input weights are returned as they are.
    """
    weights = normalize_mask(mask)
    if shape is not None and weights.shape != tuple(shape[:2]):
        raise MaskShapeError(f"mask shape {weights.shape} does not match {tuple(shape[:2])}")
    if contour_width <= 0 or not weights.any():
        return weights

    binary = (weights > 0).astype(np.uint8) * 255
    contours = cv2.findContours(binary, cv2.RETR_LIST, cv2.CHAIN_APPROX_NONE)[-2]
    band = np.zeros_like(binary)
    cv2.drawContours(band, contours, -1, 255, thickness=2 * contour_width - 1)

    refined = np.where(band > 0, np.float32(0.0), weights).astype(np.float32)
    if not refined.any():
        return weights
    return refined


def mask_bounding_box(mask):
    """(x0, y0, x1, y1) of the included pixels, exclusive upper bounds; None if empty."""
    ys, xs = np.nonzero(np.asarray(mask))
    if len(xs) == 0:
        return None
    return int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1


def crop_to_mask(image, mask, pad=5):
    """Crop the image to the mask's bounding box grown by ``pad`` pixels."""
    box = mask_bounding_box(mask)
    if box is None:
        return image[0:0, 0:0]
    H, W = image.shape[:2]
    x0, y0, x1, y1 = box
    return image[max(0, y0 - pad):min(H, y1 + pad), max(0, x0 - pad):min(W, x1 + pad)]
