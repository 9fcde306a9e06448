"""
cache.py — Disk cache for collected GitHub statistics.

Collecting stats costs up to ~18 GitHub requests per user, so each
collection is pickled with joblib as a CollectedStats record and reused
for DISK_CACHE_TTL seconds. Files are named by the md5 of the lower-cased
username, so "OctoCat" and "octocat" share an entry.

Usage:
    from core.cache import load_collection, store_collection
"""

import hashlib
import logging
import os
import time
from dataclasses import dataclass, field

import joblib

from config import DISK_CACHE_DIR, DISK_CACHE_TTL
from core.models import RawActivityStats

logger = logging.getLogger(__name__)

_cache_dir = os.getenv("ASTROGIT_CACHE_DIR", DISK_CACHE_DIR)


@dataclass(frozen=True)
class CollectedStats:
    login:        str
    stats:        RawActivityStats
    additional:   dict
    collected_at: float = field(default_factory=time.time)

    @property
    def age(self) -> float:
        return time.time() - self.collected_at

    def to_dict(self) -> dict:
        """Response shape of GET /api/github/user/{username}."""
        return {
            "login":          self.login,
            "githubStats":    self.stats.to_dict(),
            "additionalData": self.additional,
        }


def _entry_path(username: str) -> str:
    digest = hashlib.md5(username.lower().encode()).hexdigest()
    return os.path.join(_cache_dir, f"{digest}.joblib")


def load_collection(username: str) -> CollectedStats | None:
    """Return the stored collection for `username` while it is fresh, else None."""
    path = _entry_path(username)
    if not os.path.exists(path):
        return None
    try:
        entry = joblib.load(path)
    except Exception as exc:
        logger.warning(f"Disk cache read error for {username}: {exc}")
        return None

    if not isinstance(entry, CollectedStats):
        logger.warning(f"Disk cache entry for {username} has an unknown shape, ignoring it")
        return None
    if entry.age >= DISK_CACHE_TTL:
        logger.info(f"Disk cache expired for {username}")
        forget_collection(username)
        return None

    logger.info(f"Disk cache hit for {username} (age: {entry.age:.0f}s)")
    return entry


def store_collection(username: str, entry: CollectedStats) -> None:
    try:
        os.makedirs(_cache_dir, exist_ok=True)
        joblib.dump(entry, _entry_path(username))
        logger.info(f"Disk cache written for {username}")
    except Exception as exc:
        logger.warning(f"Disk cache write error for {username}: {exc}")


def forget_collection(username: str) -> bool:
    """Drop the entry for a username. Returns True if one was removed."""
    path = _entry_path(username)
    if not os.path.exists(path):
        return False
    os.remove(path)
    logger.info(f"Disk cache cleared for {username}")
    return True
