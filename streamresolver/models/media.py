"""
Caller-supplied media metadata that seeds a resolution
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.errors import ValidationError


class MediaType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"


@dataclass(frozen=True)
class EpisodeMeta:
    id: str
    number: int
    title: str = ""


@dataclass(frozen=True)
class SeasonData:
    id: str
    number: int
    episodes: List[EpisodeMeta] = field(default_factory=list)

    def episode_number(self, episode_id: str) -> Optional[int]:
        """Ordinal of the episode with this id, or None if it is not in the season"""
        for ep in self.episodes:
            if ep.id == str(episode_id):
                return ep.number
        return None


@dataclass(frozen=True)
class MediaMeta:
    title: str
    year: Optional[int]
    type: MediaType
    season_data: Optional[SeasonData] = None

    @property
    def is_series(self) -> bool:
        return self.type == MediaType.SERIES

    @property
    def display_name(self) -> str:
        if self.is_series and self.season_data:
            return f"{self.title} S{self.season_data.number:02d}"
        return f"{self.title} ({self.year})" if self.year else self.title

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MediaMeta":
        """
        Build metadata from caller JSON.

        Raises:
            ValidationError: on a missing title, a non-numeric year, an unknown
                type or malformed season data
        """
        if not isinstance(data, dict):
            raise ValidationError("media must be an object")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("media.title must be a non-empty string")

        try:
            media_type = MediaType(data.get("type"))
        except ValueError:
            raise ValidationError(f"media.type must be one of {[t.value for t in MediaType]}")

        year = _optional_int(data.get("year"), "media.year")

        season_data = None
        season = data.get("season") or data.get("seasonData")
        if season is not None:
            season_data = _parse_season(season)
        elif media_type == MediaType.SERIES:
            raise ValidationError("series media requires season data")

        return cls(title=title.strip(), year=year, type=media_type, season_data=season_data)


def _optional_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def _parse_season(season: Any) -> SeasonData:
    if not isinstance(season, dict):
        raise ValidationError("media.season must be an object")

    number = _optional_int(season.get("number"), "media.season.number")
    if number is None:
        raise ValidationError("media.season.number is required")

    raw_episodes = season.get("episodes") or []
    if not isinstance(raw_episodes, list):
        raise ValidationError("media.season.episodes must be a list")

    episodes = []
    for idx, ep in enumerate(raw_episodes):
        if not isinstance(ep, dict) or ep.get("id") in (None, ""):
            raise ValidationError(f"media.season.episodes[{idx}] needs an id")
        ep_number = _optional_int(ep.get("number"), f"media.season.episodes[{idx}].number")
        if ep_number is None:
            raise ValidationError(f"media.season.episodes[{idx}].number is required")
        episodes.append(EpisodeMeta(id=str(ep["id"]), number=ep_number, title=ep.get("title") or ""))

    return SeasonData(id=str(season.get("id") or number), number=number, episodes=episodes)
