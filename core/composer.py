"""
composer.py — Assemble a full horoscope from raw activity counts.

Pipeline:
  1. Normalize (missing/negative → 0) and clamp to per-stat ceilings
  2. Score the four traits
  3. Compute cosmic alignment
  4. Narrate energy, charisma, creativity, collaboration, cosmic (in that order)
  5. Stamp today's UTC date

Never raises on numeric input: bad values are sanitized, not rejected.
"""

import logging
from datetime import date, datetime, timezone

from core.models import GENEROUS, HoroscopeResult, Preset, RawActivityStats
from core.narrative_engine import NarrativeEngine
from core.scorer import score

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def compose(stats, preset: Preset = GENEROUS, picker=None,
            today: date | None = None) -> HoroscopeResult:
    """
    Build a HoroscopeResult.

    Args:
        stats:  RawActivityStats or a dict with commits/stars/repos/followers
        preset: scoring parameterization (GENEROUS or STRICT)
        picker: optional (population, k) -> list, used for adjective draws
        today:  override the date stamp (defaults to the current UTC date)
    """
    stats = RawActivityStats.from_mapping(stats).clamped()

    traits, alignment = score(stats, preset)
    message = NarrativeEngine(preset, picker).generate(stats, traits, alignment)

    return HoroscopeResult(
        date=today or utc_today(),
        traits=traits,
        message=message,
        alignment=alignment,
    )


def compose_dict(stats, preset: Preset = GENEROUS, picker=None,
                 today: date | None = None) -> dict:
    """compose() serialized to the JSON wire format."""
    return compose(stats, preset, picker, today).to_dict()


class HoroscopeComposer:
    """
    compose() with the preset and picker bound once.

    Usage:
        composer = HoroscopeComposer(STRICT)
        result = composer.compose({"commits": 42})
    """

    def __init__(self, preset: Preset = GENEROUS, picker=None):
        self.preset = preset
        self.picker = picker

    def compose(self, stats, today: date | None = None) -> HoroscopeResult:
        result = compose(stats, self.preset, self.picker, today)
        logger.info(
            f"Horoscope composed [{self.preset.name}] — traits: {result.traits.to_dict()}, "
            f"alignment: {result.alignment:.1f}%"
        )
        return result
