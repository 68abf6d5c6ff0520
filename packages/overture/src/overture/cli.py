#!/usr/bin/env python3
"""Command-line interface for overture.

This CLI is primarily for debugging matching and feature fallbacks.
For production use, run the API service (python -m overture_api).
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from overture.client import SpotifyClient
from overture.config import MatchConfig, SpotifyConfig, parse_min_confidence
from overture.exceptions import NoConfidentMatchError, OvertureError
from overture.lib.features import deterministic_features
from overture.lib.matching import score_candidate
from overture.lib.normalize import normalize
from overture.models.domain import AudioFeatures
from overture.services.resolver import TrackResolver, build_search_query

logger = logging.getLogger("overture")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def print_features(console: Console, title: str, features: AudioFeatures) -> None:
    """Print audio features as a two-column table."""
    table = Table(
        show_header=False,
        padding=(0, 1),
        title=f"[bold yellow]{title}[/bold yellow]",
        title_justify="left",
    )
    table.add_column("Feature", style="bold cyan", width=16)
    table.add_column("Value", justify="right")
    for name, value in features.model_dump().items():
        table.add_row(name, f"{value:.3f}")
    console.print(table)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Match free-text tracks against Spotify and inspect audio features."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


@main.command(name="normalize")
@click.argument("text")
def normalize_cmd(text: str) -> None:
    """Print the normalized form of a title or artist.

    \b
    Examples:
      overture normalize "Happy (Remastered 2014)"
      overture normalize "Song - Radio Edit"
    """
    click.echo(normalize(text))


@main.command(name="fallback-features")
@click.argument("track_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def fallback_features_cmd(track_id: str, as_json: bool) -> None:
    """Print the deterministic fallback features for a track id."""
    features = deterministic_features(track_id)
    if as_json:
        json.dump(features.model_dump(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return
    print_features(Console(), f"Fallback features for {track_id}", features)


@main.command(name="match")
@click.argument("title")
@click.argument("artist")
@click.option(
    "--client-id",
    envvar="OVERTURE_SPOTIFY_CLIENT_ID",
    required=True,
    help="Spotify client id (env: OVERTURE_SPOTIFY_CLIENT_ID).",
)
@click.option(
    "--client-secret",
    envvar="OVERTURE_SPOTIFY_CLIENT_SECRET",
    required=True,
    help="Spotify client secret (env: OVERTURE_SPOTIFY_CLIENT_SECRET).",
)
@click.option(
    "--min-confidence",
    envvar="OVERTURE_MIN_CONFIDENCE",
    default="",
    help="Confidence threshold in [0, 1] (env: OVERTURE_MIN_CONFIDENCE).",
)
def match_cmd(
    title: str,
    artist: str,
    client_id: str,
    client_secret: str,
    min_confidence: str,
) -> None:
    """Resolve TITLE by ARTIST against the live Spotify catalog.

    Prints every scored candidate, then the accepted match and its features.

    \b
    Examples:
      overture match "Happy" "Pharrell Williams"
    """
    console = Console()
    config = MatchConfig(min_confidence=parse_min_confidence(min_confidence))
    client = SpotifyClient(
        SpotifyConfig(client_id=client_id, client_secret=client_secret)
    )

    try:
        query = build_search_query(title, artist)
        candidates = client.search_tracks(query, config.search_limit)

        table = Table(
            title=f"[bold]Candidates for {query}[/bold]", title_justify="left"
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Title")
        table.add_column("Artist")
        table.add_column("Base", justify="right")
        table.add_column("Score", justify="right", style="bold")
        for i, track in enumerate(candidates[: config.max_candidates], 1):
            scored = score_candidate(title, artist, track, config)
            table.add_row(
                str(i),
                track.title,
                track.artist,
                f"{scored.base_score:.2f}",
                f"{scored.score:.2f}",
            )
        console.print(table)

        resolver = TrackResolver(client, config)
        track = resolver.resolve_from_candidates(title, artist, candidates)
    except NoConfidentMatchError as e:
        raise click.ClickException(str(e)) from e
    except OvertureError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    console.print(
        f"[green]Matched[/green] {track.artist} - {track.title} "
        f"[dim]({track.id})[/dim]"
    )
    print_features(console, "Features", track.features)


if __name__ == "__main__":
    main()
