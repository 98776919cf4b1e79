import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .color_names import ColorDistribution


@dataclass(frozen=True)
class ModelEntry:
    """One learned object model: its name and training distributions, in load order."""
    name: str
    distributions: Tuple[ColorDistribution, ...]

    def __len__(self):
        return len(self.distributions)


def _checked(name: str, distributions: Iterable[ColorDistribution]) -> Tuple[ColorDistribution, ...]:
    if not name:
        raise ValueError("model name must be a non-empty string")
    dists = tuple(distributions)
    if not dists:
        raise ValueError(f"model {name!r}: no training distributions given")
    for d in dists:
        if not isinstance(d, ColorDistribution):
            raise TypeError(f"expected ColorDistribution, got {type(d).__name__}")
        if d.is_empty:
            raise ValueError(f"model {name!r}: an empty distribution cannot be a training sample")
    return dists


class ModelStore:
    """Model name -> ModelEntry.

    Entries are immutable; a write swaps in a new entry while holding the
    lock of that model name only, so readers never wait and writers of other
    models are not blocked.
    """

    def __init__(self):
        self._entries: Dict[str, ModelEntry] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    def append(self, name: str, distributions: Iterable[ColorDistribution]) -> ModelEntry:
        """Add training distributions after the ones already stored for ``name``."""
        dists = _checked(name, distributions)
        with self._lock_for(name):
            current = self._entries.get(name)
            old = current.distributions if current else ()
            entry = ModelEntry(name, old + dists)
            self._entries[name] = entry
        return entry

    def replace(self, name: str, distributions: Iterable[ColorDistribution]) -> ModelEntry:
        """Swap the whole training set of ``name``."""
        dists = _checked(name, distributions)
        with self._lock_for(name):
            entry = ModelEntry(name, dists)
            self._entries[name] = entry
        return entry

    def get(self, name: str) -> Optional[ModelEntry]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def entries(self) -> List[ModelEntry]:
        """Snapshot of every entry, sorted by model name."""
        snapshot = dict(self._entries)
        return [snapshot[n] for n in sorted(snapshot)]

    def __contains__(self, name):
        return name in self._entries

    def __len__(self):
        return len(self._entries)
