"""
config.py — Central configuration: GitHub API settings, trait ladders, presets, vocabulary.
"""

# ─── GitHub API ───────────────────────────────────────────────────────────────
GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_EVENTS_PER_PAGE = 100
GITHUB_REPOS_PER_PAGE = 100
GITHUB_REQUEST_TIMEOUT = 10    # seconds
GITHUB_USER_AGENT = "AstroGit-App"

# ─── Commit Estimation ───────────────────────────────────────────────────────
COMMIT_SAMPLE_REPOS = 5        # repos sampled for author commit counts
MIN_TRUSTED_COMMITS = 10       # below this, fall back to estimates
LANGUAGE_SAMPLE_REPOS = 10

# ─── Traits ──────────────────────────────────────────────────────────────────
# Order matters: it is the order of the narrative segments.
TRAITS = ("energy", "charisma", "creativity", "collaboration")

TRAIT_SOURCES = {
    "energy":        "commits",
    "charisma":      "stars",
    "creativity":    "repos",
    "collaboration": "followers",
}

# Raw values are clamped to these before scoring so outliers saturate.
STAT_CEILINGS = {
    "commits":   1000,
    "stars":     1000,
    "repos":     100,
    "followers": 1000,
}

MAX_SCORE = 10

# ─── Threshold Ladders ───────────────────────────────────────────────────────
STRICT_LADDERS = {
    "energy":        (0, 10, 50, 100, 200, 300, 400, 500, 700, 1000),
    "charisma":      (0, 5, 20, 50, 100, 200, 300, 500, 700, 1000),
    "creativity":    (0, 2, 5, 10, 15, 20, 30, 40, 60, 100),
    "collaboration": (0, 5, 20, 50, 100, 200, 300, 500, 700, 1000),
}

GENEROUS_LADDERS = {
    "energy":        (0, 5, 10, 20, 40, 80, 150, 300, 500, 1000),
    "charisma":      (0, 1, 3, 8, 15, 30, 60, 120, 240, 500),
    "creativity":    (0, 1, 2, 4, 6, 10, 15, 25, 40, 80),
    "collaboration": (0, 1, 3, 5, 10, 20, 40, 80, 160, 320),
}

# ─── Narrative Bands ─────────────────────────────────────────────────────────
# (high, mid, low) score cut-offs; anything below `low` is the fourth band.
STRICT_TRAIT_BANDS   = (8, 5, 3)
GENEROUS_TRAIT_BANDS = (8, 6, 4)
COSMIC_BANDS         = (80, 60, 40)   # alignment percentage

# Growth message: average trait score <= first → "beginning", <= second → "growing"
GROWTH_BANDS = (5, 7)

# ─── Flavor Vocabulary ───────────────────────────────────────────────────────
POSITIVE_ADJECTIVES = (
    "creativity", "innovation", "persistence", "problem-solving",
    "adaptability", "curiosity", "dedication", "focus",
    "analytical thinking", "attention to detail", "consistency",
    "resourcefulness", "efficiency", "strategic planning",
)
GENEROUS_ADJECTIVE_COUNT = 3
DEFAULT_ADJECTIVE = "determination"

# ─── Presets ─────────────────────────────────────────────────────────────────
DEFAULT_PRESET = "generous"

# ─── Cache ───────────────────────────────────────────────────────────────────
DISK_CACHE_DIR = ".cache/astrogit"
DISK_CACHE_TTL = 86400   # 24 hours in seconds

# ─── Username Validation ──────────────────────────────────────────────────────
GITHUB_USERNAME_REGEX = r"^[a-zA-Z0-9\-]{1,39}$"

# ─── Server ──────────────────────────────────────────────────────────────────
APP_TITLE = "AstroGit API"
APP_WELCOME = "Welcome to AstroGit API"
DEFAULT_PORT = 3001
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
