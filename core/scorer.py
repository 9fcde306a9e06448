"""
scorer.py — Deterministic mapping of raw GitHub counts to bounded trait scores.

Input:  RawActivityStats + Preset
Output: TraitScores (each in [preset.min_score, 10]) and a cosmic alignment percentage

Each trait has its own threshold ladder, so the response curve can be tuned
independently: the first commit moves the needle more than the 401st.
"""

import logging

from config import MAX_SCORE, TRAIT_SOURCES, TRAITS
from core.models import GENEROUS, Preset, RawActivityStats, TraitScores, coerce_count

logger = logging.getLogger(__name__)


def score_trait(value, thresholds, min_score: int = 1, ceiling: int | None = None) -> int:
    """
    Score one raw value against a ladder of ascending thresholds.

    The score is 1 + the index of the first threshold >= value, saturating
    at 10 and floored at `min_score`. Negative, missing and non-numeric
    values count as 0; values above `ceiling` count as `ceiling`.
    """
    value = coerce_count(value)
    if ceiling is not None:
        value = min(value, ceiling)

    for index, threshold in enumerate(thresholds):
        if value <= threshold:
            return min(max(index + 1, min_score), MAX_SCORE)
    return MAX_SCORE


def score_traits(stats: RawActivityStats, preset: Preset = GENEROUS) -> TraitScores:
    """Score all four traits from their source statistics."""
    scores = {}
    for trait in TRAITS:
        source = TRAIT_SOURCES[trait]
        scores[trait] = score_trait(
            getattr(stats, source),
            preset.ladders[trait],
            min_score=preset.min_score,
            ceiling=preset.ceilings.get(source),
        )
    return TraitScores(**scores)


def cosmic_alignment(traits: TraitScores, preset: Preset = GENEROUS) -> float:
    """
    Aggregate percentage: base + total / 40 * span.

    strict   → [0, 100]
    generous → [50, 100]
    """
    max_total = MAX_SCORE * len(TRAITS)
    return preset.alignment_base + traits.total / max_total * preset.alignment_span


def score(stats: RawActivityStats, preset: Preset = GENEROUS) -> tuple[TraitScores, float]:
    """Score traits and alignment in one call."""
    traits = score_traits(stats, preset)
    alignment = cosmic_alignment(traits, preset)

    logger.debug(
        f"Scored [{preset.name}] {stats.to_dict()} → {traits.to_dict()}, "
        f"alignment: {alignment:.1f}"
    )
    return traits, alignment
