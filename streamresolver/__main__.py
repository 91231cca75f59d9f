"""
Resolve a playable stream from the command line.

Usage:
    python -m streamresolver --title "Inception" --year 2010
    python -m streamresolver --title "Dark" --type series --season 2 --episode 3
    python -m streamresolver --title "Dark" --type series --season 2 --episode 3 --provider netfilm
    python -m streamresolver --list-providers
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from streamresolver.app import configure_logging
from streamresolver.core.config import Config
from streamresolver.core.errors import AggregateNoStreamFoundError, ScrapeError
from streamresolver.models.media import EpisodeMeta, MediaMeta, MediaType, SeasonData
from streamresolver.providers import (
    ProviderRegistry,
    ProxiedFetchClient,
    ScrapeOrchestrator,
    build_default_registry,
)

logger = logging.getLogger("streamresolver")


def build_media(args: argparse.Namespace) -> MediaMeta:
    """Media metadata from CLI flags; series get a synthetic season whose episode ids are their numbers"""
    media_type = MediaType(args.type)
    season_data = None
    if media_type == MediaType.SERIES:
        episodes = [EpisodeMeta(id=str(n), number=n) for n in range(1, args.episode + 1)]
        season_data = SeasonData(id=f"season-{args.season}", number=args.season, episodes=episodes)
    return MediaMeta(title=args.title, year=args.year, type=media_type, season_data=season_data)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve a playable stream for a movie or episode")
    parser.add_argument("--title", help="Exact title as listed upstream")
    parser.add_argument("--year", type=int, default=None, help="Release year (movies)")
    parser.add_argument("--type", choices=[t.value for t in MediaType], default=MediaType.MOVIE.value)
    parser.add_argument("--season", type=int, default=1, help="Season number (series)")
    parser.add_argument("--episode", type=int, default=1, help="Episode number within the season (series)")
    parser.add_argument("--provider", help="Only try this provider id")
    parser.add_argument("--timeout", type=float, default=None,
                        help=f"Per-request timeout in seconds (default {Config.REQUEST_TIMEOUT})")
    parser.add_argument("--list-providers", action="store_true", help="List registered providers and exit")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if not args.list_providers and not args.title:
        parser.error("--title is required")
    if args.episode < 1:
        parser.error("--episode must be at least 1")
    return args


async def run(args: argparse.Namespace, registry: ProviderRegistry) -> int:
    if args.list_providers:
        for provider in sorted(registry, key=lambda p: -p.rank):
            print(json.dumps(provider.describe()))
        return 0

    if args.provider:
        registry = ProviderRegistry([registry.get_by_id(args.provider)])

    media = build_media(args)
    episode_id = str(args.episode) if media.is_series else None

    def on_progress(event):
        logger.info("[%s] %5.1f%% (provider %.0f%%)", event.provider_id, event.overall, event.provider_progress)

    try:
        result = await ScrapeOrchestrator(registry).resolve(media, episode_id, on_progress)
    except AggregateNoStreamFoundError as e:
        for provider_id, error in e.failures:
            logger.error("  %s failed with %s: %s", provider_id, type(error).__name__, error)
        logger.error("No stream found for %s", media.display_name)
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None, registry: Optional[ProviderRegistry] = None) -> int:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    if registry is None:
        registry = build_default_registry(ProxiedFetchClient(timeout=args.timeout))
    try:
        return asyncio.run(run(args, registry))
    except ScrapeError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
