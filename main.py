import argparse
import logging
from pathlib import Path
from color_matcher.pipeline import process_dataset

def main():
    ap = argparse.ArgumentParser(description="Color Matcher - classify masked regions against learned color models")
    ap.add_argument("--images", type=Path, required=True, help="Directory with images")
    ap.add_argument("--masks", type=Path, required=True, help="Directory with PNG masks named like the images")
    ap.add_argument("--out", type=Path, required=True, help="Output directory for result txts and summary")
    ap.add_argument("--config", type=Path, default=Path("configs/default.yaml"), help="YAML config path")
    ap.add_argument("--verbose", action="store_true", help="Log debug messages")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    process_dataset(args.images, args.masks, args.out, args.config)

if __name__ == "__main__":
    main()
