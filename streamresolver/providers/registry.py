"""
Provider interface and the registry the orchestrator draws candidates from
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional

from ..core.errors import DuplicateProviderError, NotFoundError, UnsupportedMediaTypeError
from ..models.media import MediaMeta, MediaType
from ..models.streams import ScrapeResult

logger = logging.getLogger(__name__)

ProgressFn = Callable[[float], None]


def _ignore_progress(percent: float) -> None:
    pass


@dataclass
class ScrapeContext:
    """Everything a provider gets for one resolution attempt"""
    media: MediaMeta
    episode_id: Optional[str] = None
    progress: ProgressFn = field(default=_ignore_progress)


class Provider(ABC):
    """
    One upstream integration.

    Subclasses set the class-level descriptor fields and implement ``scrape``.
    Descriptors are read-only once the provider is registered.
    """

    id: str = "unknown"
    display_name: str = "Unknown"
    rank: int = 0
    media_types: FrozenSet[MediaType] = frozenset()

    def supports(self, media_type: MediaType) -> bool:
        return media_type in self.media_types

    def ensure_supported(self, media: MediaMeta) -> None:
        if not self.supports(media.type):
            raise UnsupportedMediaTypeError(
                f"{self.display_name} does not support {media.type.value} media"
            )

    @abstractmethod
    async def scrape(self, ctx: ScrapeContext) -> ScrapeResult:
        """
        Resolve a stream for ctx.media.

        Returns a result with a stream (or embeds) on success; any failure is
        raised as a ScrapeError subclass, never returned as an empty result.
        """
        ...

    def describe(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "rank": self.rank,
            "type": sorted(t.value for t in self.media_types),
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} rank={self.rank}>"


class ProviderRegistry:
    """Append-only catalog of providers, built once at startup"""

    def __init__(self, providers: Optional[List[Provider]] = None):
        self._providers: List[Provider] = []
        self._by_id: Dict[str, Provider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: Provider) -> Provider:
        if provider.id in self._by_id:
            raise DuplicateProviderError(
                f"Provider id '{provider.id}' already registered by {self._by_id[provider.id]!r}"
            )
        self._providers.append(provider)
        self._by_id[provider.id] = provider
        logger.debug(f"[Registry] Registered {provider!r}")
        return provider

    def list(self, media_type: MediaType) -> List[Provider]:
        """Providers supporting media_type, highest rank first (ties in registration order)"""
        eligible = [p for p in self._providers if p.supports(media_type)]
        # sorted() is stable, so equal ranks keep registration order
        return sorted(eligible, key=lambda p: -p.rank)

    def get_by_id(self, provider_id: str) -> Provider:
        try:
            return self._by_id[provider_id]
        except KeyError:
            raise NotFoundError(f"No provider registered with id '{provider_id}'")

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[Provider]:
        return iter(list(self._providers))
