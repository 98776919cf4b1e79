import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, NamedTuple, Optional, Protocol

import numpy as np

from .color_names import ColorDistribution, ColorNameTable
from .config import MatcherConfig
from .distribution import build_distribution, to_bgr
from .errors import ColorTableError, LearningDataError, MaskShapeError
from .hypothesis import Hypothesis, Reason, rank_models
from .io_utils import clean_debug_folder, read_learning, save_image
from .mask import crop_to_mask, normalize_mask, refine_mask
from .models import ModelStore

logger = logging.getLogger(__name__)

LOAD_MODES = ("append", "replace")


def debug_stem(name):
    """Entity id made safe for use as a file name."""
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", name or "").strip("._")
    return stem or "unnamed"


@dataclass(frozen=True)
class Classification:
    entity_id: Optional[str]
    label: Optional[str]
    score: float
    reason: Reason
    message: str = ""
    distribution: ColorDistribution = field(default_factory=ColorDistribution.empty)
    color: Optional[str] = None
    hypothesis: Optional[Hypothesis] = None

    @property
    def accepted(self) -> bool:
        return self.reason is Reason.ACCEPTED


@dataclass(frozen=True)
class LoadResult:
    success: bool
    model_name: str
    message: str = ""
    count: int = 0


class Measurement(NamedTuple):
    image: np.ndarray
    mask: np.ndarray


@dataclass
class BatchResult:
    classifications: List[Classification] = field(default_factory=list)
    expected_values: List[str] = field(default_factory=list)
    expected_value_probabilities: List[float] = field(default_factory=list)
    error_msg: str = ""


class Classifier(Protocol):
    def classify(self, image, mask) -> Classification:
        ...


class ColorMatcher:
    """Matches the color appearance of a masked region against learned models."""

    def __init__(self, table: ColorNameTable, store: Optional[ModelStore] = None,
                 config: Optional[MatcherConfig] = None):
        if not isinstance(table, ColorNameTable):
            raise ColorTableError("a ColorNameTable is required")
        self.table = table
        self.store = store if store is not None else ModelStore()
        self.config = config or MatcherConfig()
        if self.config.debug:
            clean_debug_folder(self.config.debug_folder)

    @classmethod
    def from_config(cls, config: MatcherConfig):
        """Build the table, then append every model the config lists.

        A broken table is fatal; a broken model is logged and skipped.
        """
        if config.table_path is not None:
            table = ColorNameTable.from_file(config.table_path)
        else:
            table = ColorNameTable.from_prototypes()
        matcher = cls(table, config=config)
        for name, path in config.models.items():
            matcher.load_model(name, path)
        return matcher

    def load_model(self, name: str, path, mode: str = "append") -> LoadResult:
        """Read learning data for ``name`` and add it to the store.

        ``mode`` is "append" (add to any existing training set) or "replace".
        On failure the store is left as it was.
        """
        if mode not in LOAD_MODES:
            raise ValueError(f"mode must be one of {LOAD_MODES}, got {mode!r}")
        try:
            dists = read_learning(Path(path), name)
        except LearningDataError as e:
            logger.error("Failed to load model '%s': %s", name, e)
            return LoadResult(False, name, str(e))

        entry = getattr(self.store, mode)(name, dists)
        msg = f"{len(dists)} distributions loaded ({len(entry)} total)"
        logger.info("Model '%s': %s", name, msg)
        return LoadResult(True, name, msg, len(dists))

    def _observe(self, image, mask):
        bgr = to_bgr(image)
        refined = refine_mask(mask, self.config.contour_width, shape=bgr.shape)
        return bgr, refined, build_distribution(self.table, bgr, refined, self.config.sample_stride)

    def observe(self, image, mask) -> ColorDistribution:
        """Refine the mask and build the color distribution of the region."""
        return self._observe(image, mask)[2]

    def classify(self, image, mask, entity_id: Optional[str] = None) -> Classification:
        name = entity_id or "<unnamed>"
        try:
            bgr, refined, observed = self._observe(image, mask)
        except (MaskShapeError, ValueError) as e:
            logger.warning("Entity %s: invalid input: %s", name, e)
            return Classification(entity_id, None, 0.0, Reason.NO_OBSERVATION,
                                  f"Entity '{name}': {e}")

        if self.config.debug:
            self._save_debug(entity_id, bgr, mask, refined)

        if observed.is_empty:
            logger.warning("Entity %s: mask selects no pixels", name)
            return Classification(entity_id, None, 0.0, Reason.NO_OBSERVATION,
                                  f"Entity '{name}': mask selects no pixels", observed)

        color = observed.dominant()
        hyp = rank_models(observed, self.store)
        if not hyp.found:
            logger.warning("No classification for entity %s: no models loaded", name)
            return Classification(entity_id, None, 0.0, hyp.reason,
                                  f"Entity '{name}': no models loaded", observed, color, hyp)

        if hyp.score > self.config.threshold:
            logger.info("Entity %s: %s (%.3f)", name, hyp.label, hyp.score)
            return Classification(entity_id, hyp.label, hyp.score, Reason.ACCEPTED,
                                  "", observed, color, hyp)

        logger.debug("Entity %s not updated, probability too low (%.3f)", name, hyp.score)
        return Classification(entity_id, None, hyp.score, Reason.BELOW_THRESHOLD,
                              f"Entity '{name}': best match '{hyp.label}' scored {hyp.score:.3f}, "
                              f"threshold {self.config.threshold}",
                              observed, color, hyp)

    def classify_entities(self, ids, entities: Mapping[str, Optional[Measurement]]) -> BatchResult:
        """Classify each requested id; missing entities or measurements are reported, not raised."""
        res = BatchResult()
        for eid in ids:
            if eid not in entities:
                msg = f"Entity '{eid}' does not exist.\n"
                res.error_msg += msg
                logger.error(msg.strip())
                continue
            meas = entities[eid]
            if meas is None:
                msg = f"Entity '{eid}' does not have a measurement.\n"
                res.error_msg += msg
                logger.error(msg.strip())
                continue

            c = self.classify(meas.image, meas.mask, entity_id=eid)
            res.classifications.append(c)
            if c.accepted:
                res.expected_values.append(c.label)
                res.expected_value_probabilities.append(c.score)
        return res

    def _save_debug(self, name, image, mask, refined):
        folder = Path(self.config.debug_folder)
        name = debug_stem(name)
        raw = normalize_mask(mask)
        crop = crop_to_mask(image, raw > 0)
        if crop.size:
            save_image(folder / f"{name}_crop.png", crop)
        save_image(folder / f"{name}_mask.png", (raw * 255).astype(np.uint8))
        save_image(folder / f"{name}_mask_refined.png", (refined * 255).astype(np.uint8))
