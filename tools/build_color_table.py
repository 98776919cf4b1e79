#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Write the color name table resource (w2c layout: 32768 rows of R G B p1..p11)
built from the Lab prototypes.

Usage:
  PYTHONPATH=. python tools/build_color_table.py --out resources/color_names.txt [--sigma 18]
"""

import argparse
from pathlib import Path

from color_matcher.color_names import ColorNameTable


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", type=Path, required=True)
    ap.add_argument("--sigma", type=float, default=18.0, help="Lab distance scale of the soft assignment")
    args = ap.parse_args()
    table = ColorNameTable.from_prototypes(sigma=args.sigma)
    table.save(args.out)
    print(f"[build_color_table] Saved table to {args.out}")


if __name__ == "__main__":
    main()
