"""
NetFilm API client
Thin wrapper over the proxied fetch client bound to the NetFilm origin
"""
import logging
from typing import Optional, Dict, Any, Union

from ...core.errors import UpstreamShapeError
from ..base import ProxiedFetchClient

logger = logging.getLogger(__name__)


class NetfilmBaseClient:
    """Issues NetFilm API calls and unwraps the ``data`` envelope"""

    def __init__(self, base_url: str, fetch: ProxiedFetchClient):
        self.base_url = base_url.rstrip("/")
        self.fetch = fetch

    async def _get(self, endpoint: str, params: Optional[Dict[str, Union[str, int]]] = None) -> Dict[str, Any]:
        """
        GET an endpoint and return its ``data`` object

        Raises:
            FetchError: propagated unchanged from the fetch client
            UpstreamShapeError: the body has no ``data`` object
        """
        resp = await self.fetch.request(endpoint, base_url=self.base_url, query=params)
        data = resp.get("data") if isinstance(resp, dict) else None
        if not isinstance(data, dict):
            raise UpstreamShapeError(f"NetFilm {endpoint} response has no data object")
        return data


def require_list(data: Dict[str, Any], key: str, where: str) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        raise UpstreamShapeError(f"NetFilm {where}: '{key}' is missing or not a list")
    return value


def require_field(item: Dict[str, Any], key: str, where: str) -> Any:
    value = item.get(key) if isinstance(item, dict) else None
    if value is None or value == "":
        raise UpstreamShapeError(f"NetFilm {where}: '{key}' is missing")
    return value
