"""
Season detail and episode lookup for the NetFilm API
"""
import logging
from typing import Dict, Any

from ...core.errors import NotFoundError, UpstreamShapeError
from ...models.media import SeasonData
from .base import NetfilmBaseClient, require_field, require_list

logger = logging.getLogger(__name__)


class NetfilmEpisodesService:
    """Locates the upstream episode for a caller-side episode id"""

    def __init__(self, client: NetfilmBaseClient):
        self.client = client

    async def season_detail(self, item: Dict[str, Any]) -> Dict[str, Any]:
        tags = item.get("categoryTag")
        if not isinstance(tags, list) or not tags or not isinstance(tags[0], dict):
            raise UpstreamShapeError("NetFilm search result has no categoryTag")
        category = require_field(tags[0], "id", "categoryTag")
        return await self.client._get("/api/detail", params={"id": item["id"], "category": category})

    def find_episode(self, detail: Dict[str, Any], season: SeasonData, episode_id: str) -> Dict[str, Any]:
        """
        The upstream episode whose seriesNo equals the ordinal of episode_id in the
        caller's season data
        """
        number = season.episode_number(episode_id)
        if number is None:
            raise NotFoundError(f"Episode {episode_id} is not part of season {season.number}")

        for ep in require_list(detail, "episodeVo", "detail"):
            if isinstance(ep, dict) and str(ep.get("seriesNo")) == str(number):
                require_field(ep, "id", "episodeVo")
                return ep
        raise NotFoundError(f"NetFilm has no episode {number} for season {season.number}")
