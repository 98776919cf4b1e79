#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
validate_check.py

Sample up to 50 classified images, tile them into one grid image and stamp
each tile with the predicted model label and dominant color, for a quick
visual check.

Usage:
  python tools/validate_check.py --images data/images [--out out]
"""

import argparse
import random
from pathlib import Path
import cv2
import numpy as np

GRID_COLS = 10
MAX_SAMPLES = 50
THUMB_SIZE = 128


def load_result_info(txt_path):
    """Return (label, color) from a result file."""
    with open(txt_path, "r") as f:
        parts = f.readline().split()
        if len(parts) < 5:
            return "?", "?"
        return parts[1], parts[3]


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--images", type=Path, required=True)
    ap.add_argument("--out", type=Path, default=Path("out"))
    args = ap.parse_args()

    label_map = {p.stem: p for p in (args.out / "labels").glob("*.txt")}
    images = sorted(p for p in args.images.iterdir() if p.stem in label_map)
    if not images:
        print("No matching images and results found.")
        return

    random.seed(0)
    sample_files = random.sample(images, min(MAX_SAMPLES, len(images)))

    annotated_imgs = []
    for img_path in sample_files:
        label, color = load_result_info(label_map[img_path.stem])
        img = cv2.imread(str(img_path))
        if img is None:
            continue
        img = cv2.resize(img, (THUMB_SIZE, THUMB_SIZE))

        text = f"{label}, {color}"
        font_scale = 0.4
        thickness = 1
        (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness)
        cv2.rectangle(img, (0, 0), (THUMB_SIZE, th + 4), (0, 0, 0), -1)
        cv2.putText(img, text, (2, th + 1), cv2.FONT_HERSHEY_SIMPLEX,
                    font_scale, (255, 255, 255), thickness, cv2.LINE_AA)
        annotated_imgs.append(img)

    rows = (len(annotated_imgs) + GRID_COLS - 1) // GRID_COLS
    grid_img = np.zeros((rows * THUMB_SIZE, GRID_COLS * THUMB_SIZE, 3), dtype=np.uint8)
    for idx, img in enumerate(annotated_imgs):
        r = idx // GRID_COLS
        c = idx % GRID_COLS
        grid_img[r*THUMB_SIZE:(r+1)*THUMB_SIZE, c*THUMB_SIZE:(c+1)*THUMB_SIZE] = img

    output_img = args.out / "visual_assess.png"
    cv2.imwrite(str(output_img), grid_img)
    print(f"Saved visual assessment image to {output_img}")

if __name__ == "__main__":
    main()
