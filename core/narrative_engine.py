"""
narrative_engine.py — Turn trait scores into horoscope prose.

Input:  trait scores + the raw values they came from (+ optional adjectives)
Output: one pre-authored paragraph per trait, one for cosmic alignment

Strategy:
  - Each trait has four templates, chosen by score band (high → low, last is catch-all)
  - Cosmic alignment uses percentage bands (80 / 60 / 40)
  - The generous preset injects randomly picked adjectives into three paragraphs;
    the picker is injectable so tests can make it deterministic
"""

import logging
import math
import random

from config import (
    DEFAULT_ADJECTIVE,
    GROWTH_BANDS,
    POSITIVE_ADJECTIVES,
    TRAIT_SOURCES,
    TRAITS,
)
from core.models import GENEROUS, Preset, RawActivityStats, TraitScores

logger = logging.getLogger(__name__)

COSMIC = "cosmic"

# Traits whose paragraph carries an adjective, in draw order.
ADJECTIVE_TRAITS = ("energy", "charisma", "creativity")


# ─── Templates: strict ────────────────────────────────────────────────────────
# Placeholders: {value} raw count, {percent} rounded alignment.

_STRICT_TEMPLATES = {
    "energy": (
        "Your coding energy is running extremely high with {value} commits. "
        "Great time to tackle challenging projects!",
        "Your coding energy is steady at {value} commits. "
        "Focus on manageable tasks and keep the rhythm going.",
        "Your coding energy is warming up with {value} commits. "
        "Pick one small project and ship it.",
        "Your coding energy is a bit low at {value} commits. "
        "Consider taking a short break to recharge.",
    ),
    "charisma": (
        "Your code's charisma is dazzling others with {value} stars. "
        "Your work is inspiring the community!",
        "Your code's charisma is getting attention with {value} stars. "
        "Keep sharing your insights.",
        "Your code's charisma is starting to glow with {value} stars. "
        "A good README goes a long way.",
        "Your code's charisma is waiting to be discovered with {value} stars. "
        "Consider contributing to open-source projects.",
    ),
    "creativity": (
        "Your creative coding spirit is flourishing across {value} repositories. "
        "Explore experimental features!",
        "Your creative coding spirit is showing potential across {value} repositories. "
        "Try a new programming paradigm.",
        "Your creative coding spirit is stirring with {value} repositories. "
        "Start a side project just for fun.",
        "Your creative coding spirit is seeking new directions with {value} repositories. "
        "Look for inspiration in other projects.",
    ),
    "collaboration": (
        "Your collaborative alignment is stellar with {value} followers. "
        "Lead a community initiative!",
        "Your collaborative alignment is harmonious with {value} followers. "
        "Join more group discussions.",
        "Your collaborative alignment is forming with {value} followers. "
        "Review someone else's pull request this week.",
        "Your collaborative alignment is developing with {value} followers. "
        "Reach out to fellow developers for feedback.",
    ),
    COSMIC: (
        "The stars are aligned at {percent}% cosmic alignment. "
        "An excellent period for ambitious work.",
        "The cosmos favors you at {percent}% alignment. "
        "Steady progress is written in your stars.",
        "The planets are balancing at {percent}% alignment. "
        "Small, consistent steps will pay off.",
        "The stars read {percent}% alignment today. "
        "Every journey starts with a single commit.",
    ),
}

# ─── Templates: generous ─────────────────────────────────────────────────────
# Placeholders: {value} raw count, {adjective} picked trait word, {percent}.

_GENEROUS_TEMPLATES = {
    "energy": (
        "Your coding energy radiates with extraordinary power! Your {value} commits "
        "demonstrate remarkable {adjective} that inspires those around you. This is an "
        "excellent time to tackle challenging projects that showcase your talents.",
        "Your coding energy flows with impressive consistency. Your {value} commits "
        "reveal your natural {adjective} and determined spirit. Focus on projects that "
        "leverage your unique strengths for maximum impact.",
        "Your coding energy shows exciting potential! Even with {value} commits, your "
        "{adjective} shines through clearly. This is a perfect time to build momentum "
        "on projects you're passionate about.",
        "Your coding energy is building up with tremendous potential! While you're just "
        "beginning with {value} commits, your {adjective} is already evident. This is an "
        "ideal moment to explore new coding adventures that spark your interest.",
    ),
    "charisma": (
        "Your code's charisma magnetizes attention with {value} stars! Your work "
        "demonstrates exceptional {adjective} that resonates with the developer community. "
        "Share your insights boldly as they're likely to gain significant recognition.",
        "Your code's charisma is developing beautifully with {value} stars. Your "
        "{adjective} adds a special quality to your work that others appreciate. Continue "
        "refining your documentation to amplify your growing influence.",
        "Your code's charisma holds promising appeal with {value} stars. Your {adjective} "
        "gives your work a unique character that's beginning to attract attention. Each "
        "project you share strengthens your distinctive coding voice.",
        "Your code's charisma journey is just beginning with {value} stars, but the "
        "potential is extraordinary! Your {adjective} will increasingly shine through as "
        "you share more of your work. Focus on projects that showcase your unique perspective.",
    ),
    "creativity": (
        "Your creative coding spirit flourishes exceptionally across {value} repositories! "
        "Your {adjective} enables you to approach problems with innovative solutions. "
        "Experiment boldly with new approaches to unlock even more of your vast potential.",
        "Your creative coding vision expands wonderfully across {value} repositories. Your "
        "{adjective} allows you to see possibilities others might miss. Explore different "
        "programming paradigms to further enhance your growing repertoire.",
        "Your creative coding insight develops beautifully through your {value} "
        "repositories. Your {adjective} gives you a special advantage when approaching new "
        "challenges. Consider exploring diverse project types to showcase your versatility.",
        "Your creative coding foundation is forming brilliantly with {value} repositories. "
        "Even at this early stage, your {adjective} is already becoming apparent. This is "
        "the perfect time to experiment with different project types that interest you.",
    ),
    "collaboration": (
        "Your collaborative alignment is exceptional with {value} followers! Your ability "
        "to connect with others creates powerful coding synergies. Lead discussions and "
        "contribute to community projects where your influence can have maximum impact.",
        "Your collaborative network is flourishing beautifully with {value} followers. Your "
        "perspective adds valuable insights to team projects. Engage actively in code "
        "reviews to share your unique viewpoint and strengthen community bonds.",
        "Your collaborative connections show promising growth with {value} followers. Your "
        "contributions create positive ripples throughout your network. Engage with open "
        "source communities to expand your influence and learning opportunities.",
        "Your collaborative journey is at an exciting beginning stage with {value} "
        "followers. Every connection you make opens new possibilities for growth. Join "
        "developer communities where your fresh perspective will be especially valuable.",
    ),
    COSMIC: (
        "The stars of technology are perfectly aligned for you at an impressive {percent}% "
        "cosmic alignment! Your coding horoscope reveals this is an extraordinary period "
        "for breakthroughs and recognition. Trust your instincts completely!",
        "The technological cosmos strongly favors your development journey at {percent}% "
        "alignment! Your coding path is illuminated with promising opportunities. Trust "
        "your unique approach when architecting solutions.",
        "The programming planets are aligning favorably at {percent}% harmony! This "
        "balanced cosmic state provides an excellent foundation for both creating and "
        "learning. Your next coding achievement is within reach.",
        "The development stars reveal an exciting period of potential at {percent}% "
        "alignment! This is a powerful time to build foundations that will support your "
        "future coding accomplishments. Your unique path is just beginning to unfold.",
    ),
}

TEMPLATES = {
    "strict":   _STRICT_TEMPLATES,
    "generous": _GENEROUS_TEMPLATES,
}

_GROWTH_MESSAGES = (
    "The cosmic code patterns reveal that you're at the beginning of an exciting coding "
    "journey. Every line of code you write is building your programming constellation "
    "and creating a strong foundation for your future impact in the tech universe.",
    "The GitHub stars indicate you're in a growth phase with tremendous potential ahead. "
    "Your coding patterns show a promising trajectory, and continuing your momentum will "
    "lead to breakthrough contributions in the coming months.",
    "Your coding constellation is already impressive, and the tech stars indicate even "
    "greater achievements on your horizon. Your established patterns of excellence "
    "position you perfectly for your next major milestone.",
)


# ─── Helpers ──────────────────────────────────────────────────────────────────

def band_index(score: float, cutoffs) -> int:
    """Index of the first cut-off the score reaches; len(cutoffs) if none."""
    for index, cutoff in enumerate(cutoffs):
        if score >= cutoff:
            return index
    return len(cutoffs)


def round_percent(value: float) -> int:
    """Round half up (72.5 → 73)."""
    return int(math.floor(value + 0.5))


def pick_adjectives(count: int, picker=None, pool=POSITIVE_ADJECTIVES) -> list[str]:
    """
    Draw `count` distinct words from `pool`.

    `picker(population, k)` defaults to random.sample; pass a seeded
    random.Random(...).sample or any stub for reproducible output.
    """
    if count <= 0:
        return []
    picker = picker or random.sample
    chosen = list(picker(list(pool), count))[:count]
    if len(chosen) < count:
        logger.warning(f"Picker returned {len(chosen)} of {count} adjectives; padding.")
        chosen += [DEFAULT_ADJECTIVE] * (count - len(chosen))
    return chosen


# ─── Public API ───────────────────────────────────────────────────────────────

def narrate(trait: str, score: float, raw_value=0, extra: str | None = None,
            preset: Preset = GENEROUS) -> str:
    """
    Pick the paragraph for one trait (or "cosmic") by score band.

    For "cosmic", `score` is the alignment percentage.
    Raises ValueError for an unknown trait name.
    """
    templates = TEMPLATES.get(preset.name) or (
        _GENEROUS_TEMPLATES if preset.adjective_count else _STRICT_TEMPLATES
    )
    if trait not in templates:
        raise ValueError(f"Unknown trait '{trait}'. Expected one of {TRAITS + (COSMIC,)}")

    cutoffs = preset.cosmic_bands if trait == COSMIC else preset.trait_bands
    template = templates[trait][band_index(score, cutoffs)]

    return template.format(
        value=raw_value,
        adjective=extra or DEFAULT_ADJECTIVE,
        percent=round_percent(score),
    )


def growth_message(traits: TraitScores) -> str:
    """Encouraging closer keyed by the average trait score."""
    average = traits.average
    if average <= GROWTH_BANDS[0]:
        return _GROWTH_MESSAGES[0]
    elif average <= GROWTH_BANDS[1]:
        return _GROWTH_MESSAGES[1]
    return _GROWTH_MESSAGES[2]


class NarrativeEngine:
    """Builds the five horoscope paragraphs for one preset."""

    def __init__(self, preset: Preset = GENEROUS, picker=None):
        self.preset = preset
        self.picker = picker

    def segments(self, stats: RawActivityStats, traits: TraitScores,
                 alignment: float) -> list[str]:
        """
        Return [energy, charisma, creativity, collaboration, cosmic] paragraphs.
        The picker is only consulted when the preset uses adjectives.
        """
        adjectives = dict(zip(
            ADJECTIVE_TRAITS,
            pick_adjectives(self.preset.adjective_count, self.picker),
        ))

        paragraphs = [
            narrate(
                trait,
                getattr(traits, trait),
                getattr(stats, TRAIT_SOURCES[trait]),
                extra=adjectives.get(trait),
                preset=self.preset,
            )
            for trait in TRAITS
        ]
        paragraphs.append(narrate(COSMIC, alignment, alignment, preset=self.preset))
        return paragraphs

    def generate(self, stats: RawActivityStats, traits: TraitScores,
                 alignment: float) -> str:
        """All five paragraphs joined with single spaces."""
        return " ".join(self.segments(stats, traits, alignment))
