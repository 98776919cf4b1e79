import csv
import logging
from pathlib import Path

import cv2
from tqdm import tqdm

from .config import load_config
from .io_utils import list_images_and_masks, write_result_txt
from .matcher import ColorMatcher

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ["id", "label", "score", "color", "reason"]


def read_pair(img_path: Path, mask_path: Path):
    image = cv2.imread(str(img_path), cv2.IMREAD_UNCHANGED)
    mask = cv2.imread(str(mask_path), cv2.IMREAD_GRAYSCALE)
    if image is None or mask is None:
        return None, None
    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image, mask


def process_image(matcher: ColorMatcher, img_path: Path, mask_path: Path, out_dir: Path):
    image, mask = read_pair(img_path, mask_path)
    img_id = img_path.stem
    if image is None:
        logger.warning("Could not read %s or %s", img_path, mask_path)
        return None

    c = matcher.classify(image, mask, entity_id=img_id)
    record = {
        "id": img_id,
        "label": c.label,
        "score": c.score,
        "color": c.color,
        "reason": c.reason.value,
    }
    write_result_txt(out_dir / "labels" / f"{img_id}.txt", record)
    return record


def process_dataset(images_dir: Path, masks_dir: Path, out_dir: Path, cfg_path: Path):
    matcher = ColorMatcher.from_config(load_config(cfg_path))
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "labels").mkdir(exist_ok=True)

    rows = []
    for img_path, mask_path in tqdm(list_images_and_masks(images_dir, masks_dir)):
        record = process_image(matcher, img_path, mask_path, out_dir)
        if record is not None:
            rows.append(record)

    summary = out_dir / "summary.csv"
    with open(summary, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        w.writeheader(); w.writerows(rows)
    accepted = sum(1 for r in rows if r["label"])
    logger.info("Classified %d of %d images. Summary: %s", accepted, len(rows), summary)
    return rows
