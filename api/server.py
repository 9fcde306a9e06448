"""FastAPI server exposing the horoscope engine and the GitHub stats collector."""
import logging
import os
from typing import Any

import requests
from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import APP_TITLE, APP_WELCOME, DEFAULT_CORS_ORIGINS, DEFAULT_PORT, DEFAULT_PRESET
from core.collector import collect
from core.composer import HoroscopeComposer
from core.github_client import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubClient,
    GitHubRateLimitError,
    GitHubUserNotFoundError,
)
from core.models import get_preset
from utils.utils import validate_github_username

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title=APP_TITLE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("ASTROGIT_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(","),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


class HoroscopeRequest(BaseModel):
    userId: str | None = None
    githubData: Any = None


# ── Dependencies ─────────────────────────────────────────────────────────────

_composer: HoroscopeComposer | None = None


def get_composer() -> HoroscopeComposer:
    global _composer
    if _composer is None:
        preset = get_preset(os.getenv("ASTROGIT_PRESET", DEFAULT_PRESET))
        logger.info(f"Using '{preset.name}' preset")
        _composer = HoroscopeComposer(preset)
    return _composer


def get_github_client() -> GitHubClient:
    return GitHubClient(token=os.getenv("GITHUB_TOKEN") or None)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


# ── Routes ───────────────────────────────────────────────────────────────────

@app.get("/")
def root() -> dict:
    return {"message": APP_WELCOME}


@app.post("/api/horoscope")
def generate_horoscope(
    req: HoroscopeRequest,
    composer: HoroscopeComposer = Depends(get_composer),
):
    if not req.githubData and not isinstance(req.githubData, dict):
        return _error(400, "GitHub data is required")

    try:
        horoscope = composer.compose(req.githubData)
    except Exception:
        logger.exception("Error generating horoscope")
        return _error(500, "Failed to generate horoscope")

    logger.info(f"Generated horoscope for user: {req.userId or 'anonymous'}")
    return horoscope.to_dict()


@app.get("/api/github/user/{username}")
def github_user(username: str, client: GitHubClient = Depends(get_github_client)):
    is_valid, err_msg = validate_github_username(username)
    if not is_valid:
        return _error(400, err_msg)

    try:
        return collect(username, client=client)
    except GitHubUserNotFoundError:
        return _error(404, f"GitHub user '{username}' not found")
    except GitHubRateLimitError as exc:
        return _error(429, f"{exc} Resets at {exc.reset_timestamp or 'unknown'}.")
    except GitHubAuthError as exc:
        return _error(401, str(exc))
    except GitHubAPIError as exc:
        return _error(502, f"GitHub API error: {exc}")
    except requests.RequestException as exc:
        logger.error(f"GitHub request failed for {username}: {exc}")
        return _error(502, "GitHub is unreachable")


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", DEFAULT_PORT)))


if __name__ == "__main__":
    main()
