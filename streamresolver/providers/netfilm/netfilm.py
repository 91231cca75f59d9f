"""
NetFilm provider - unified interface
Delegates to the search, episodes and sources services for the NetFilm API
"""
import logging
from typing import Optional

from ...core.config import Config
from ...core.errors import ValidationError
from ...models.media import MediaType
from ...models.streams import ScrapeResult
from ..base import ProxiedFetchClient
from ..registry import Provider, ScrapeContext
from .base import NetfilmBaseClient
from .episodes import NetfilmEpisodesService
from .search import NetfilmSearchService
from .sources import NetfilmSourcesService

logger = logging.getLogger(__name__)


class NetfilmProvider(Provider):
    """
    Resolves HLS streams from the NetFilm API
    API base: https://net-film.vercel.app/
    """

    id = "netfilm"
    display_name = "NetFilm"
    rank = 15
    media_types = frozenset({MediaType.MOVIE, MediaType.SERIES})

    def __init__(self, fetch: Optional[ProxiedFetchClient] = None, base_url: Optional[str] = None):
        self.client = NetfilmBaseClient(base_url or Config.NETFILM_API_URL, fetch or ProxiedFetchClient())

        self.search_service = NetfilmSearchService(self.client)
        self.episodes_service = NetfilmEpisodesService(self.client)
        self.sources_service = NetfilmSourcesService(self.client)

    async def scrape(self, ctx: ScrapeContext) -> ScrapeResult:
        media = ctx.media
        self.ensure_supported(media)

        results = await self.search_service.search(media.title)
        ctx.progress(25)

        if media.type == MediaType.MOVIE:
            item = self.search_service.match_movie(results, media)
            ctx.progress(75)
            stream = await self.sources_service.get_stream(item["id"])
            logger.info(f"[NetFilm] {media.display_name} -> item {item['id']}")
            return ScrapeResult(embeds=[], stream=stream)

        if media.season_data is None or ctx.episode_id is None:
            raise ValidationError("series resolution needs season data and an episode id")

        item = self.search_service.match_series(results, media)
        ctx.progress(50)
        detail = await self.episodes_service.season_detail(item)
        episode = self.episodes_service.find_episode(detail, media.season_data, ctx.episode_id)

        ctx.progress(75)
        stream = await self.sources_service.get_stream(item["id"], episode["id"])
        logger.info(
            f"[NetFilm] {media.display_name} episode {ctx.episode_id} -> "
            f"item {item['id']} episode {episode['id']}"
        )
        return ScrapeResult(embeds=[], stream=stream)
