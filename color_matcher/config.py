from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from .errors import ConfigError

DEFAULT_DEBUG_FOLDER = Path("/tmp/color_matcher_debug")


@dataclass(frozen=True)
class MatcherConfig:
    threshold: float = 0.5
    debug: bool = False
    debug_folder: Path = DEFAULT_DEBUG_FOLDER
    table_path: Optional[Path] = None
    contour_width: int = 3
    sample_stride: int = 1
    models: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigError(f"threshold must lie in [0, 1], got {self.threshold}")
        if self.contour_width < 0:
            raise ConfigError(f"contour_width must be >= 0, got {self.contour_width}")
        if self.sample_stride < 1:
            raise ConfigError(f"sample_stride must be >= 1, got {self.sample_stride}")


def _typed(cfg, key, kinds, default):
    value = cfg.get(key, default)
    if value is None:
        return value
    # bool is an int subclass
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        raise ConfigError(f"'{key}' has the wrong type: {value!r}")
    return value


def _resolve(base: Path, value) -> Path:
    p = Path(value)
    return p if p.is_absolute() else base / p


def parse_config(cfg: dict, base_dir: Path = Path(".")) -> MatcherConfig:
    """Build a MatcherConfig from a flat option mapping; relative paths resolve against base_dir."""
    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError("configuration must be a mapping")
    unknown = set(cfg) - set(MatcherConfig.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(sorted(map(str, unknown)))}")

    threshold = _typed(cfg, "threshold", (int, float), 0.5)
    debug = _typed(cfg, "debug", (bool,), False)
    debug_folder = _typed(cfg, "debug_folder", (str,), None)
    table_path = _typed(cfg, "table_path", (str,), None)
    contour_width = _typed(cfg, "contour_width", (int,), 3)
    sample_stride = _typed(cfg, "sample_stride", (int,), 1)
    models = _typed(cfg, "models", (dict,), None) or {}
    for name, path in models.items():
        if not isinstance(name, str) or not isinstance(path, str):
            raise ConfigError(f"models entries map a name to a path, got {name!r}: {path!r}")

    return MatcherConfig(
        threshold=float(0.5 if threshold is None else threshold),
        debug=bool(debug),
        debug_folder=_resolve(base_dir, debug_folder) if debug_folder else DEFAULT_DEBUG_FOLDER,
        table_path=_resolve(base_dir, table_path) if table_path else None,
        contour_width=3 if contour_width is None else contour_width,
        sample_stride=1 if sample_stride is None else sample_stride,
        models={name: _resolve(base_dir, path) for name, path in models.items()},
    )


def load_config(path) -> MatcherConfig:
    path = Path(path)
    try:
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    return parse_config(cfg, path.parent)
