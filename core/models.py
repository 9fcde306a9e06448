"""
models.py — Immutable records passed between the scorer, narrative engine and composer.

RawActivityStats  → input (already-collected GitHub counts)
TraitScores       → four bounded integer scores
HoroscopeResult   → date + traits + message (+ alignment, not on the wire)
Preset            → one named parameterization of the engine ("strict" / "generous")
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date

from config import (
    COSMIC_BANDS,
    GENEROUS_ADJECTIVE_COUNT,
    GENEROUS_LADDERS,
    GENEROUS_TRAIT_BANDS,
    STAT_CEILINGS,
    STRICT_LADDERS,
    STRICT_TRAIT_BANDS,
    TRAITS,
)

STAT_FIELDS = ("commits", "stars", "repos", "followers")


def coerce_count(value) -> int:
    """
    Turn anything into a non-negative int.
    Missing, boolean, non-numeric and non-finite values become 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


# ─── Input ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RawActivityStats:
    commits:   int = 0
    stars:     int = 0
    repos:     int = 0
    followers: int = 0

    def __post_init__(self):
        for name in STAT_FIELDS:
            object.__setattr__(self, name, coerce_count(getattr(self, name)))

    @classmethod
    def from_mapping(cls, data) -> "RawActivityStats":
        """Build from a dict (or pass through an existing instance). Non-mappings count as empty."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            data = {}
        return cls(**{name: data.get(name, 0) for name in STAT_FIELDS})

    def clamped(self) -> "RawActivityStats":
        """Return a copy with every field capped at its ceiling."""
        return RawActivityStats(**{
            name: min(getattr(self, name), STAT_CEILINGS[name])
            for name in STAT_FIELDS
        })

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in STAT_FIELDS}


# ─── Output ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TraitScores:
    energy:        int
    charisma:      int
    creativity:    int
    collaboration: int

    @property
    def total(self) -> int:
        return self.energy + self.charisma + self.creativity + self.collaboration

    @property
    def average(self) -> float:
        return self.total / len(TRAITS)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in TRAITS}


@dataclass(frozen=True)
class HoroscopeResult:
    date:      date
    traits:    TraitScores
    message:   str
    alignment: float = 0.0

    def to_dict(self) -> dict:
        """Wire format: exactly date, traits and message."""
        return {
            "date":    self.date.isoformat(),
            "traits":  self.traits.to_dict(),
            "message": self.message,
        }


# ─── Presets ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Preset:
    """
    Everything that differs between the two scoring variants.

    alignment = alignment_base + total / 40 * alignment_span
    """
    name:            str
    ladders:         dict
    min_score:       int
    alignment_base:  float
    alignment_span:  float
    trait_bands:     tuple
    adjective_count: int = 0
    cosmic_bands:    tuple = COSMIC_BANDS
    ceilings:        dict = field(default_factory=lambda: dict(STAT_CEILINGS))


STRICT = Preset(
    name="strict",
    ladders=STRICT_LADDERS,
    min_score=1,
    alignment_base=0.0,
    alignment_span=100.0,
    trait_bands=STRICT_TRAIT_BANDS,
)

GENEROUS = Preset(
    name="generous",
    ladders=GENEROUS_LADDERS,
    min_score=4,
    alignment_base=50.0,
    alignment_span=50.0,
    trait_bands=GENEROUS_TRAIT_BANDS,
    adjective_count=GENEROUS_ADJECTIVE_COUNT,
)

PRESETS = {
    STRICT.name:   STRICT,
    GENEROUS.name: GENEROUS,
}


def get_preset(name: str) -> Preset:
    """Look up a preset by name (case-insensitive). Raises KeyError if unknown."""
    key = (name or "").strip().lower()
    if key not in PRESETS:
        raise KeyError(
            f"Unknown preset '{name}'. Choose one of: {', '.join(sorted(PRESETS))}"
        )
    return PRESETS[key]
