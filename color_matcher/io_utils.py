import logging
import shutil
from pathlib import Path

import yaml

from .color_names import ColorDistribution
from .errors import LearningDataError

logger = logging.getLogger(__name__)

LEARNING_FORMAT = "color_matcher.learning"
LEARNING_VERSION = 1
LEARNING_SUFFIXES = (".yml", ".yaml")
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


def _parse_learning(doc, source: Path, model_name: str):
    if not isinstance(doc, dict):
        raise LearningDataError(f"{source}: expected a mapping at top level")
    if doc.get("format") != LEARNING_FORMAT:
        raise LearningDataError(f"{source}: format must be {LEARNING_FORMAT!r}, got {doc.get('format')!r}")
    if doc.get("version") != LEARNING_VERSION:
        raise LearningDataError(f"{source}: unsupported version {doc.get('version')!r}")
    if doc.get("model", model_name) != model_name:
        raise LearningDataError(f"{source}: holds model {doc.get('model')!r}, not {model_name!r}")
    items = doc.get("distributions")
    if not isinstance(items, list) or not items:
        raise LearningDataError(f"{source}: 'distributions' must be a non-empty list")

    dists = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise LearningDataError(f"{source}: distribution #{i} is not a mapping")
        try:
            dists.append(ColorDistribution.from_mapping(item))
        except ValueError as e:
            raise LearningDataError(f"{source}: distribution #{i}: {e}") from e
    return dists


def learning_files(path: Path):
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.suffix in LEARNING_SUFFIXES)
    return [path]


def read_learning(path, model_name: str):
    """Training distributions of ``model_name`` from a learning file or a folder of them.

    Everything is parsed before anything is returned, so a bad file anywhere
    fails the whole read.
    """
    path = Path(path)
    if not path.exists():
        raise LearningDataError(f"learning data for {model_name!r} not found at {path}")
    files = learning_files(path)
    if not files:
        raise LearningDataError(f"no learning files for {model_name!r} in {path}")

    dists = []
    for f in files:
        try:
            with open(f, "r") as fh:
                doc = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            raise LearningDataError(f"cannot read {f}: {e}") from e
        dists.extend(_parse_learning(doc, f, model_name))
    return dists


def write_learning(path, model_name: str, distributions):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = {
        "format": LEARNING_FORMAT,
        "version": LEARNING_VERSION,
        "model": model_name,
        "distributions": [d.to_dict() for d in distributions if not d.is_empty],
    }
    with open(path, "w") as f:
        yaml.safe_dump(doc, f, default_flow_style=None, sort_keys=False)


def list_images_and_masks(images_dir: Path, masks_dir: Path):
    """(image, mask) pairs matched by file stem; masks are PNG."""
    imgs = sorted(p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    pairs = []
    for p in imgs:
        m = masks_dir / (p.stem + ".png")
        if m.exists():
            pairs.append((p, m))
    return pairs


def write_result_txt(path: Path, record: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    label = record["label"] or "-"
    color = record["color"] or "-"
    with open(path, "w") as f:
        f.write(f"{record['id']} {label} {record['score']:.3f} {color} {record['reason']}\n")


def save_image(path: Path, image):
    import cv2
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), image)


def clean_debug_folder(folder: Path):
    """Empty the debug folder, creating it if needed."""
    folder = Path(folder)
    if folder.exists():
        for p in folder.iterdir():
            if p.is_dir():
                shutil.rmtree(p)
            else:
                p.unlink()
    folder.mkdir(parents=True, exist_ok=True)
    logger.debug("Cleaned debug folder %s", folder)
