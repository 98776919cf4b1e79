#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Learn a color model from a folder of training images and masks.

- Pairs images/<stem>.<ext> with masks/<stem>.png
- Builds one color distribution per pair with the configured table, mask
  refinement and stride
- Writes the distributions as a learning file for the model

Usage:
  PYTHONPATH=. python tools/learn_model.py --name red_ball --images data/red_ball/images \
      --masks data/red_ball/masks --out models/red_ball.yml [--config configs/default.yaml]
"""

import argparse
import logging
from pathlib import Path
from tqdm import tqdm

from color_matcher.config import MatcherConfig, load_config
from color_matcher.io_utils import list_images_and_masks, write_learning
from color_matcher.matcher import ColorMatcher
from color_matcher.pipeline import read_pair

logger = logging.getLogger("learn_model")


def learn(matcher, pairs):
    dists = []
    for img_path, mask_path in tqdm(pairs):
        image, mask = read_pair(img_path, mask_path)
        if image is None:
            logger.warning("Skipping unreadable pair %s", img_path.stem)
            continue
        d = matcher.observe(image, mask)
        if d.is_empty:
            logger.warning("Skipping %s: mask selects no pixels", img_path.stem)
            continue
        dists.append(d)
    return dists


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True, help="model name")
    ap.add_argument("--images", type=Path, required=True)
    ap.add_argument("--masks", type=Path, required=True)
    ap.add_argument("--out", type=Path, required=True, help="learning file to write")
    ap.add_argument("--config", type=Path, default=None)
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    cfg = load_config(args.config) if args.config else MatcherConfig()
    # the model being learned must not depend on the models listed in the config
    matcher = ColorMatcher.from_config(MatcherConfig(
        table_path=cfg.table_path, contour_width=cfg.contour_width, sample_stride=cfg.sample_stride))

    pairs = list_images_and_masks(args.images, args.masks)
    dists = learn(matcher, pairs)
    if not dists:
        logger.error("No usable training pairs for %s; nothing written.", args.name)
        return 1
    write_learning(args.out, args.name, dists)
    logger.info("Wrote %d distributions for %s to %s", len(dists), args.name, args.out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
