"""
Base HTTP client for upstream provider APIs
Routes requests through the configured proxy and returns parsed JSON
"""
import aiohttp
import asyncio
import json
import logging
from typing import Optional, Dict, Any, Union
from urllib.parse import urlencode

from ..core.config import Config
from ..core.errors import FetchError, FetchTimeoutError, UpstreamShapeError
from .video_utils import encode_proxy

logger = logging.getLogger(__name__)


class ProxiedFetchClient:
    """
    Single-attempt JSON client used by every provider.

    Never retries; retry and fallback are up to the calling provider.
    """

    def __init__(
        self,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        self.proxy_url = Config.PROXY_URL if proxy_url is None else proxy_url
        self.timeout = timeout or Config.REQUEST_TIMEOUT
        self.default_headers = {"User-Agent": Config.USER_AGENT, **(default_headers or {})}

    def build_url(
        self,
        path: str,
        base_url: str,
        query: Optional[Dict[str, Union[str, int]]] = None,
    ) -> str:
        """Full upstream URL, before proxying"""
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        if query:
            params = {k: v for k, v in query.items() if v is not None}
            if params:
                url = f"{url}?{urlencode(params)}"
        return url

    async def request(
        self,
        path: str,
        *,
        base_url: str,
        query: Optional[Dict[str, Union[str, int]]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        GET base_url + path and return the decoded JSON body

        Args:
            path: Endpoint path on the upstream
            base_url: Upstream origin, e.g. "https://net-film.vercel.app"
            query: Query parameters (None values are dropped)
            headers: Extra headers merged over the defaults
            timeout: Total timeout in seconds, overriding the client default

        Raises:
            FetchTimeoutError: the upstream did not answer in time
            FetchError: transport failure or non-2xx status
            UpstreamShapeError: a 2xx body that is not JSON
        """
        upstream_url = self.build_url(path, base_url, query)
        url = encode_proxy(upstream_url, self.proxy_url)
        headers = {**self.default_headers, **(headers or {})}
        client_timeout = aiohttp.ClientTimeout(total=timeout or self.timeout)

        logger.debug(f"[Fetch] GET {upstream_url}" + (" (proxied)" if url != upstream_url else ""))
        try:
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                async with session.get(url, headers=headers) as resp:
                    raw = await resp.read()
                    if resp.status >= 300:
                        logger.warning(f"[Fetch] {upstream_url} returned {resp.status}")
                        raise FetchError(
                            f"{upstream_url} returned HTTP {resp.status}",
                            url=upstream_url,
                            status=resp.status,
                        )
        except asyncio.TimeoutError as exc:
            logger.warning(f"[Fetch] Timeout for {upstream_url}")
            raise FetchTimeoutError(
                f"Timed out after {timeout or self.timeout}s fetching {upstream_url}",
                url=upstream_url,
                cause=exc,
            )
        except aiohttp.ClientError as exc:
            logger.warning(f"[Fetch] Error for {upstream_url}: {exc}")
            raise FetchError(f"Request to {upstream_url} failed: {exc}", url=upstream_url, cause=exc)

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.error(f"[Fetch] Failed to parse JSON from {upstream_url}: {raw[:200]!r}")
            raise UpstreamShapeError(f"{upstream_url} did not return JSON")
