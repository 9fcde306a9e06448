"""
cli.py — AstroGit command line: compose coding horoscopes from numbers, files, or GitHub users.
"""

import json
import logging
import os
import random
from pathlib import Path
from typing import Optional

import requests
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from config import DEFAULT_PRESET, TRAITS
from core.collector import collect
from core.composer import HoroscopeComposer
from core.github_client import GitHubClient, GitHubError
from core.models import HoroscopeResult, get_preset
from core.narrative_engine import growth_message
from utils.utils import validate_github_username

load_dotenv()
logging.basicConfig(level=logging.WARNING)

app = typer.Typer(help="Read your coding horoscope in the GitHub stars.")
console = Console()

PresetOption = typer.Option(
    os.getenv("ASTROGIT_PRESET", DEFAULT_PRESET), "--preset", "-p",
    help="Scoring preset: 'strict' or 'generous'",
)
SeedOption = typer.Option(None, "--seed", "-s", help="Seed the adjective picker for repeatable text")
JsonOption = typer.Option(False, "--json", help="Print the JSON wire format instead of a report")


def _composer(preset: str, seed: Optional[int]) -> HoroscopeComposer:
    try:
        resolved = get_preset(preset)
    except KeyError as exc:
        console.print(f"[bold red]Error:[/] {exc.args[0]}")
        raise typer.Exit(1)
    picker = random.Random(seed).sample if seed is not None else None
    return HoroscopeComposer(resolved, picker=picker)


def _render(result: HoroscopeResult, title: str = "Your Coding Horoscope") -> None:
    table = Table(title=f"{title} — {result.date.isoformat()}")
    table.add_column("Trait", style="cyan")
    table.add_column("Score", justify="right")
    for trait in TRAITS:
        value = getattr(result.traits, trait)
        table.add_row(trait.capitalize(), f"{value}/10 " + "★" * value)
    console.print(table)
    console.print(f"[bold magenta]Cosmic alignment:[/] {result.alignment:.0f}%")
    console.print(result.message)
    console.print(f"[dim]{growth_message(result.traits)}[/]")


def _emit(results: list[HoroscopeResult], as_json: bool, titles: list[str] | None = None) -> None:
    if as_json:
        payload = [r.to_dict() for r in results]
        typer.echo(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
        return
    for index, result in enumerate(results):
        if index:
            console.rule()
        _render(result, titles[index] if titles else "Your Coding Horoscope")


@app.command()
def compose(
    commits: int = typer.Option(0, "--commits", "-c", help="Commit count"),
    stars: int = typer.Option(0, "--stars", help="Total stars across repositories"),
    repos: int = typer.Option(0, "--repos", "-r", help="Public repository count"),
    followers: int = typer.Option(0, "--followers", "-f", help="Follower count"),
    preset: str = PresetOption,
    seed: Optional[int] = SeedOption,
    as_json: bool = JsonOption,
):
    """Compose a horoscope from explicit counts."""
    composer = _composer(preset, seed)
    result = composer.compose({
        "commits": commits, "stars": stars, "repos": repos, "followers": followers,
    })
    _emit([result], as_json)


@app.command("from-file")
def from_file(
    path: Path = typer.Argument(help="JSON file: one stats object or a list of them"),
    preset: str = PresetOption,
    seed: Optional[int] = SeedOption,
    as_json: bool = JsonOption,
):
    """Compose horoscopes for every stats record in a JSON file."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[bold red]Error:[/] could not read {path}: {exc}")
        raise typer.Exit(1)

    records = data if isinstance(data, list) else [data]
    if not all(isinstance(r, dict) for r in records):
        console.print("[bold red]Error:[/] expected a JSON object or a list of objects")
        raise typer.Exit(1)

    composer = _composer(preset, seed)
    results = [composer.compose(r.get("githubData", r)) for r in records]
    titles = [r.get("userId") or f"Record {i + 1}" for i, r in enumerate(records)]
    _emit(results, as_json, titles)


@app.command()
def user(
    username: str = typer.Argument(help="GitHub username"),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", envvar="GITHUB_TOKEN", help="GitHub token (raises rate limits)"
    ),
    preset: str = PresetOption,
    seed: Optional[int] = SeedOption,
    as_json: bool = JsonOption,
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore cached GitHub stats"),
):
    """Collect a GitHub user's stats, then compose their horoscope."""
    is_valid, err_msg = validate_github_username(username)
    if not is_valid:
        console.print(f"[bold red]Error:[/] {err_msg}")
        raise typer.Exit(1)

    composer = _composer(preset, seed)
    try:
        with console.status(f"[bold green]Reading the stars for {username}..."):
            collected = collect(username, client=GitHubClient(token=token), use_cache=not no_cache)
    except (GitHubError, requests.RequestException) as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(1)

    stats = collected["githubStats"]
    if not as_json:
        console.print(
            f"[dim]{collected['login']}: {stats['commits']} commits (estimated) · "
            f"{stats['stars']} stars · {stats['repos']} repos · {stats['followers']} followers[/]"
        )
    _emit([composer.compose(stats)], as_json, [f"{collected['login']}'s Coding Horoscope"])


if __name__ == "__main__":
    app()
