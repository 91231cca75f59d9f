"""
Search and candidate matching for the NetFilm API
"""
import logging
from typing import Dict, Any, List, Optional

from ...core.errors import NotFoundError
from ...models.media import MediaMeta
from ..video_utils import parse_season_number
from .base import NetfilmBaseClient, require_field, require_list

logger = logging.getLogger(__name__)


class NetfilmSearchService:
    """Finds the NetFilm item that corresponds to the requested media"""

    def __init__(self, client: NetfilmBaseClient):
        self.client = client

    async def search(self, keyword: str) -> List[Dict[str, Any]]:
        data = await self.client._get("/api/search", params={"keyword": keyword})
        results = require_list(data, "results", "search")
        logger.debug(f"[NetFilm] search '{keyword}': {len(results)} results")
        return results

    def match_movie(self, results: List[Dict[str, Any]], media: MediaMeta) -> Dict[str, Any]:
        """Exact title and release year match"""
        for item in results:
            if not isinstance(item, dict):
                continue
            if item.get("name") == media.title and _same_year(item.get("releaseTime"), media.year):
                require_field(item, "id", "search result")
                return item
        raise NotFoundError(f"No NetFilm movie matches {media.display_name}")

    def match_series(self, results: List[Dict[str, Any]], media: MediaMeta) -> Dict[str, Any]:
        """
        First candidate containing the title whose trailing season token equals
        the requested season (no trailing number means season 1)
        """
        desired = media.season_data.number
        for item in results:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            if not isinstance(name, str) or media.title not in name:
                continue
            if parse_season_number(name) == desired:
                require_field(item, "id", "search result")
                return item
        raise NotFoundError(f"No NetFilm series matches {media.title} season {desired}")


def _same_year(release_time: Optional[Any], year: Optional[int]) -> bool:
    if release_time is None or year is None:
        return False
    return str(release_time).strip() == str(year)
