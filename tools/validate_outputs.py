import sys
from pathlib import Path

from color_matcher.color_names import COLOR_NAMES
from color_matcher.hypothesis import Reason

REASONS = {r.value for r in Reason}


def validate(out_dir: Path):
    labels = sorted((out_dir/"labels").glob("*.txt"))
    if not labels:
        print("ERROR: no result files in", out_dir); return 1
    ok = 0
    for lab in labels:
        parts = lab.read_text().split()
        if len(parts) != 5:
            print("ERROR: wrong field count:", lab); return 1
        rid, label, score, color, reason = parts
        if rid != lab.stem:
            print("ERROR: id does not match file name in", lab); return 1
        try:
            v = float(score)
        except ValueError:
            print("ERROR: non-float score in", lab); return 1
        if not 0.0 <= v <= 1.0:
            print("ERROR: score out of [0,1] in", lab); return 1
        if reason not in REASONS:
            print("ERROR: bad reason", reason, "in", lab); return 1
        if color != "-" and color not in COLOR_NAMES:
            print("ERROR: bad color", color, "in", lab); return 1
        if (label != "-") != (reason == Reason.ACCEPTED.value):
            print("ERROR: label and reason disagree in", lab); return 1
        ok += 1
    print(f"OK: {ok} result files validated.")
    return 0

if __name__ == "__main__":
    sys.exit(validate(Path(sys.argv[1]) if len(sys.argv)>1 else Path('out')))
