"""
Canonical stream and caption types.

Every provider normalizes its upstream payload into these before returning,
so playback code only ever sees this shape regardless of the source.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StreamType(str, Enum):
    MP4 = "mp4"
    HLS = "hls"


class CaptionType(str, Enum):
    VTT = "vtt"
    SRT = "srt"


class StreamQuality(str, Enum):
    Q360P = "360p"
    Q480P = "480p"
    Q720P = "720p"
    Q1080P = "1080p"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Caption:
    url: str
    type: CaptionType
    lang_iso: str
    needs_proxy: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "type": self.type.value,
            "langIso": self.lang_iso,
            "needsProxy": self.needs_proxy,
        }


@dataclass(frozen=True)
class Stream:
    stream_url: str
    type: StreamType
    quality: StreamQuality = StreamQuality.UNKNOWN
    captions: List[Caption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "streamUrl": self.stream_url,
            "type": self.type.value,
            "quality": self.quality.value,
            "captions": [c.to_dict() for c in self.captions],
        }


@dataclass(frozen=True)
class EmbedRef:
    """An alternative embeddable source a provider points at instead of a direct stream"""
    embed_id: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"embedId": self.embed_id, "url": self.url}


@dataclass(frozen=True)
class ScrapeResult:
    embeds: List[EmbedRef] = field(default_factory=list)
    stream: Optional[Stream] = None
    # Filled in by the orchestrator with the id of the provider that produced it
    provider_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider_id,
            "embeds": [e.to_dict() for e in self.embeds],
            "stream": self.stream.to_dict() if self.stream else None,
        }
