"""
Stream fetching and normalization for the NetFilm API
"""
import logging
from typing import Dict, Any, Optional

from ...core.errors import NotFoundError, UpstreamShapeError
from ...models.streams import CaptionType, Stream, StreamType
from ..video_utils import map_quality, normalize_captions, pick_best_quality, rewrite_cdn_host
from .base import NetfilmBaseClient, require_list

logger = logging.getLogger(__name__)

# The episode endpoint always takes this category for series
SERIES_CATEGORY = 1


class NetfilmSourcesService:
    """Fetches the stream descriptor for an item and normalizes it"""

    def __init__(self, client: NetfilmBaseClient):
        self.client = client

    async def get_stream(self, item_id: Any, episode_id: Optional[Any] = None) -> Stream:
        params: Dict[str, Any] = {"id": item_id}
        if episode_id is not None:
            params["category"] = SERIES_CATEGORY
            params["episode"] = episode_id
        data = await self.client._get("/api/episode", params=params)
        return self.normalize(data)

    def normalize(self, data: Dict[str, Any]) -> Stream:
        qualities = [q for q in require_list(data, "qualities", "episode") if isinstance(q, dict)]
        source = pick_best_quality(qualities)
        if source is None:
            raise NotFoundError("NetFilm returned no quality variants")

        url = source.get("url")
        if not isinstance(url, str) or not url:
            raise UpstreamShapeError("NetFilm quality variant has no url")

        subtitles = data.get("subtitles")
        if subtitles is not None and not isinstance(subtitles, list):
            raise UpstreamShapeError("NetFilm 'subtitles' is not a list")

        stream = Stream(
            stream_url=rewrite_cdn_host(url),
            type=StreamType.HLS,
            quality=map_quality(source.get("quality")),
            # Upstream only ever serves srt; the vtt variants are the converter proxy
            captions=normalize_captions(subtitles, CaptionType.SRT),
        )
        logger.info(
            f"[NetFilm] selected quality={source.get('quality')} -> {stream.quality.value}, "
            f"variants={len(qualities)}, captions={len(stream.captions)}"
        )
        return stream
