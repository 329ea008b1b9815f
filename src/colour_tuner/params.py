"""
Parameter state shared by every layer of the tuner.

One ParameterState per session. The constraint engine mutates it on every
edit and the synchronizer seeds it from the remote snapshot. Single-threaded
asyncio means no locks needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import DEFAULT_VALUES, SLIDER_PAIRS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterPair:
    """Lower/upper bound keys sharing one domain ``[0, limit]``."""

    lower_key: str
    upper_key: str
    limit: int

    def keys(self) -> tuple[str, str]:
        return (self.lower_key, self.upper_key)


PAIRS: tuple[ParameterPair, ...] = tuple(ParameterPair(*p) for p in SLIDER_PAIRS)


@dataclass(frozen=True)
class NamedConfiguration:
    """A colour range about to be committed under ``name``."""

    name: str
    lower: tuple[int, ...]  # (h, s, v)
    upper: tuple[int, ...]


class ParameterState:
    """Current value of every slider, keyed by slider name."""

    def __init__(self, pairs: tuple[ParameterPair, ...] = PAIRS, defaults: dict | None = None):
        self.pairs = pairs
        defaults = DEFAULT_VALUES if defaults is None else defaults
        self._values: dict[str, int] = {}
        for pair in pairs:
            self._values[pair.lower_key] = int(defaults.get(pair.lower_key, 0))
            self._values[pair.upper_key] = int(defaults.get(pair.upper_key, pair.limit))

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> int:
        return self._values[key]

    def get(self, key: str, default: int | None = None) -> int | None:
        return self._values.get(key, default)

    def set(self, key: str, value: int):
        if key not in self._values:
            raise KeyError(key)
        self._values[key] = int(value)

    def update(self, **kwargs) -> list[str]:
        """Update values from a dict (e.g., a remote snapshot).

        Only known keys are applied; unknown keys and values that are not
        numbers are skipped. Returns the keys that were applied.
        """
        applied = []
        for key, value in kwargs.items():
            if key not in self._values:
                logger.debug(f"Ignoring unknown parameter {key}")
                continue
            try:
                self._values[key] = int(value)
            except (TypeError, ValueError):
                logger.warning(f"Invalid value for {key}: {value}")
                continue
            applied.append(key)
        return applied

    def pair_for(self, key: str) -> ParameterPair:
        """Get the pair that ``key`` belongs to."""
        for pair in self.pairs:
            if key in pair.keys():
                return pair
        raise KeyError(key)

    def bounds(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        """Get (lower, upper) tuples in pair order (H, S, V)."""
        lower = tuple(self._values[p.lower_key] for p in self.pairs)
        upper = tuple(self._values[p.upper_key] for p in self.pairs)
        return lower, upper

    def to_dict(self) -> dict[str, int]:
        return dict(self._values)

    def named(self, name: str) -> NamedConfiguration:
        """Build the configuration to commit from the current values."""
        lower, upper = self.bounds()
        return NamedConfiguration(name=name, lower=lower, upper=upper)
