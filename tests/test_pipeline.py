"""End-to-end test of folder classification."""

import csv

import cv2
import yaml

from color_matcher.pipeline import process_dataset

from conftest import BLUE, RED, solid_image, square_mask


def test_process_dataset(tmp_path):
    images, masks, out = tmp_path / "images", tmp_path / "masks", tmp_path / "out"
    images.mkdir(); masks.mkdir()
    cv2.imwrite(str(images / "a.png"), solid_image(RED))
    cv2.imwrite(str(masks / "a.png"), square_mask())
    cv2.imwrite(str(images / "b.png"), solid_image(BLUE))
    cv2.imwrite(str(masks / "b.png"), square_mask())
    cv2.imwrite(str(images / "c.png"), solid_image(RED))  # no mask, skipped

    (tmp_path / "red_ball.yml").write_text(yaml.safe_dump({
        "format": "color_matcher.learning", "version": 1, "model": "red_ball",
        "distributions": [{"red": 0.9, "black": 0.1}],
    }))
    cfg = tmp_path / "config.yaml"
    cfg.write_text(yaml.safe_dump({"threshold": 0.5, "models": {"red_ball": "red_ball.yml"}}))

    rows = process_dataset(images, masks, out, cfg)

    assert [r["id"] for r in rows] == ["a", "b"]
    assert (out / "labels" / "a.txt").read_text().split()[1] == "red_ball"
    b = (out / "labels" / "b.txt").read_text().split()
    assert b[1] == "-" and b[3] == "blue" and b[4] == "below_threshold"
    with open(out / "summary.csv", newline="") as f:
        summary = list(csv.DictReader(f))
    assert [r["label"] for r in summary] == ["red_ball", ""]
