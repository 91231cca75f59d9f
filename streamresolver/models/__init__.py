from .media import EpisodeMeta, MediaMeta, MediaType, SeasonData
from .streams import (
    Caption,
    CaptionType,
    EmbedRef,
    ScrapeResult,
    Stream,
    StreamQuality,
    StreamType,
)

__all__ = [
    "Caption",
    "CaptionType",
    "EmbedRef",
    "EpisodeMeta",
    "MediaMeta",
    "MediaType",
    "ScrapeResult",
    "SeasonData",
    "Stream",
    "StreamQuality",
    "StreamType",
]
