import sys
from pathlib import Path

import yaml

from color_matcher.errors import LearningDataError
from color_matcher.io_utils import LEARNING_SUFFIXES, read_learning


def validate(models_dir: Path):
    files = sorted(p for p in models_dir.rglob("*") if p.suffix in LEARNING_SUFFIXES)
    if not files:
        print("ERROR: no learning files in", models_dir); return 1
    ok = 0
    for f in files:
        try:
            with open(f, "r") as fh:
                name = (yaml.safe_load(fh) or {}).get("model")
        except (OSError, yaml.YAMLError, AttributeError) as e:
            print("ERROR: unreadable", f, e); return 1
        if not isinstance(name, str) or not name:
            print("ERROR: missing model name in", f); return 1
        try:
            dists = read_learning(f, name)
        except LearningDataError as e:
            print("ERROR:", e); return 1
        print(f"{f}: {name} ({len(dists)} distributions)")
        ok += 1
    print(f"OK: {ok} learning files validated.")
    return 0

if __name__ == "__main__":
    sys.exit(validate(Path(sys.argv[1]) if len(sys.argv)>1 else Path('models')))
