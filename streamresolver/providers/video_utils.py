"""
Stream scraper utility functions
Handles proxy URL encoding, quality mapping, caption unwrapping, CDN host rewriting
and season parsing shared by the provider integrations.
"""
import base64
import logging
import math
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlsplit, urlunsplit

from ..models.streams import Caption, CaptionType, StreamQuality

logger = logging.getLogger(__name__)

QUALITY_MAP = {
    "360": StreamQuality.Q360P,
    "480": StreamQuality.Q480P,
    "720": StreamQuality.Q720P,
    "1080": StreamQuality.Q1080P,
}

# Subtitle URLs sometimes come wrapped in this SRT -> VTT converter
SRT_TO_VTT_PROXY = "https://convert-srt-to-vtt.vercel.app/?url="

# Mirror host prefixes and the canonical alias they are served from.
# No target may appear as a source, otherwise rewrites stop being idempotent.
CDN_HOST_ALIASES = {
    "akm-cdn": "aws-cdn",
    "gg-cdn": "aws-cdn",
}


def encode_proxy(url: Optional[str], proxy_url: Optional[str]) -> Optional[str]:
    """
    Return url routed through the proxy (base64-encoded and appended to the prefix).
    If url or proxy_url is falsy, returns url unchanged.
    Always ensures the proxied URL uses HTTPS to avoid mixed content blocking.
    """
    if not url or not proxy_url:
        return url
    encoded = base64.b64encode(url.encode()).decode()
    result = f"{proxy_url}{encoded}"
    if result.startswith("http://"):
        result = result.replace("http://", "https://", 1)
    return result


def quality_value(token: Any) -> Optional[int]:
    """Numeric value of an upstream quality token ("720", 720, "720p"), or None"""
    if isinstance(token, bool):
        return None
    if isinstance(token, (int, float)):
        if not math.isfinite(token):
            return None
        return int(token)
    if isinstance(token, str):
        digits = token.strip().lower().rstrip("p")
        if digits.isdigit():
            return int(digits)
    return None


def map_quality(token: Any) -> StreamQuality:
    """Map an upstream quality token onto a rung; anything unmapped is UNKNOWN"""
    value = quality_value(token)
    if value is None:
        return StreamQuality.UNKNOWN
    return QUALITY_MAP.get(str(value), StreamQuality.UNKNOWN)


def pick_best_quality(variants: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the variant with the highest numeric quality.

    Ties keep the variant seen first. Variants whose quality is not numeric only
    win when nothing numeric is present. Returns None for an empty input.
    """
    best = None
    best_value = None
    for variant in variants:
        value = quality_value(variant.get("quality"))
        if best is None:
            best, best_value = variant, value
            continue
        if value is not None and (best_value is None or value > best_value):
            best, best_value = variant, value
    return best


def unwrap_caption_url(url: str) -> str:
    """Strip the SRT -> VTT conversion proxy to recover the original subtitle URL"""
    if SRT_TO_VTT_PROXY in url:
        return url.replace(SRT_TO_VTT_PROXY, "", 1)
    return url


def normalize_captions(
    subtitles: Optional[List[Dict[str, Any]]],
    caption_type: CaptionType = CaptionType.SRT,
) -> List[Caption]:
    """Convert upstream subtitle entries into captions; a missing list is just empty"""
    captions = []
    for sub in subtitles or []:
        if not isinstance(sub, dict):
            continue
        url = sub.get("url")
        if not url:
            logger.debug(f"[Captions] Skipping subtitle without url: {sub}")
            continue
        captions.append(
            Caption(
                url=unwrap_caption_url(url),
                type=caption_type,
                lang_iso=sub.get("language") or "",
                needs_proxy=False,
            )
        )
    return captions


def rewrite_cdn_host(url: str) -> str:
    """Point known mirror hosts at their canonical CDN alias; only the host is touched"""
    parts = urlsplit(url)
    netloc = parts.netloc
    for alias, canonical in CDN_HOST_ALIASES.items():
        netloc = netloc.replace(alias, canonical)
    if netloc == parts.netloc:
        return url
    return urlunsplit(parts._replace(netloc=netloc))


def parse_season_number(name: str, default: int = 1) -> int:
    """
    Season number from the trailing whitespace-delimited token of a title.

    "Show Name 2" -> 2. Anything without a trailing integer ("Show Name",
    "Show Name II") falls back to ``default``. Partial numerics such as
    "Show Name 2.5" are not integers and fall back too.
    """
    tokens = (name or "").split()
    if not tokens:
        return default
    try:
        season = int(tokens[-1])
    except ValueError:
        return default
    return season or default
