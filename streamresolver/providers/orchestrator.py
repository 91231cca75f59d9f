"""
Scrape orchestrator that tries registered providers in rank order.
The first provider to produce a stream wins; failures are collected along the way.
"""
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from ..core.errors import (
    AggregateNoStreamFoundError,
    NotFoundError,
    ProviderCrashError,
    ScrapeError,
    StaleResolutionError,
    UpstreamShapeError,
    ValidationError,
)
from ..models.media import MediaMeta
from ..models.streams import ScrapeResult
from .registry import Provider, ProviderRegistry, ScrapeContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    provider_id: str
    provider_progress: float
    overall: float


ProgressListener = Callable[[ProgressEvent], None]


class ResolutionToken:
    """Handle for one resolution; stale once cancelled or once a newer one began"""

    def __init__(self, tracker: "ResolutionTracker", generation: int):
        self.tracker = tracker
        self.generation = generation
        self._cancelled = False

    @property
    def stale(self) -> bool:
        return self._cancelled or self.tracker.current != self.generation

    def cancel(self) -> None:
        self._cancelled = True


class ResolutionTracker:
    """
    Generation counter for last-request-wins resolution.

    Each ``begin()`` supersedes every token handed out before it.
    """

    def __init__(self):
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        with self._lock:
            return self._generation

    def begin(self) -> ResolutionToken:
        with self._lock:
            self._generation += 1
            return ResolutionToken(self, self._generation)

    def invalidate(self) -> None:
        """Make every outstanding token stale without starting a new resolution"""
        with self._lock:
            self._generation += 1


class _ProgressSlice:
    """
    Progress adapter handed to one provider.

    Clamps to [0, 100], ignores regressions and rescales into this provider's
    slice of the overall range.
    """

    def __init__(
        self,
        provider_id: str,
        index: int,
        total: int,
        listener: Optional[ProgressListener],
        token: Optional[ResolutionToken],
    ):
        self.provider_id = provider_id
        self.start = index * 100.0 / total
        self.width = 100.0 / total
        self.listener = listener
        self.token = token
        self.last = 0.0

    def __call__(self, percent: float) -> None:
        try:
            value = min(100.0, max(0.0, float(percent)))
        except (TypeError, ValueError):
            logger.debug(f"[Orchestrator] {self.provider_id} reported bad progress {percent!r}")
            return
        if value < self.last:
            return
        self.last = value
        _emit(self.listener, self.token, ProgressEvent(
            provider_id=self.provider_id,
            provider_progress=value,
            overall=self.start + value * self.width / 100.0,
        ))


def _emit(listener: Optional[ProgressListener], token: Optional[ResolutionToken], event: ProgressEvent) -> None:
    if listener is None or (token is not None and token.stale):
        return
    try:
        listener(event)
    except Exception as e:
        logger.warning(f"[Orchestrator] Progress listener error: {e}")


class ScrapeOrchestrator:
    """Resolves media to a stream by trying providers one at a time, best rank first"""

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    def validate(self, media: MediaMeta, episode_id: Optional[str]) -> None:
        if not media.is_series:
            return
        if media.season_data is None:
            raise ValidationError(f"{media.title}: series media needs season data")
        if episode_id is None:
            raise ValidationError(f"{media.title}: series media needs an episode id")
        if media.season_data.episode_number(episode_id) is None:
            raise ValidationError(
                f"{media.title}: episode {episode_id} is not in season {media.season_data.number}"
            )

    async def resolve(
        self,
        media: MediaMeta,
        episode_id: Optional[str] = None,
        on_progress: Optional[ProgressListener] = None,
        token: Optional[ResolutionToken] = None,
    ) -> ScrapeResult:
        """
        Resolve media to the first stream any eligible provider produces.

        Args:
            media: What to resolve
            episode_id: Caller-side episode id, required for series
            on_progress: Receives a ProgressEvent per accepted checkpoint
            token: Generation token; once stale, no further provider is tried and
                the result is withheld

        Raises:
            ValidationError: media/episode_id are inconsistent
            StaleResolutionError: the token went stale before delivery
            AggregateNoStreamFoundError: every eligible provider failed
        """
        self.validate(media, episode_id)
        candidates = self.registry.list(media.type)
        failures: List[Tuple[str, ScrapeError]] = []

        logger.info(
            f"[Orchestrator] Resolving {media.display_name} with "
            f"{[p.id for p in candidates]}"
        )

        for index, provider in enumerate(candidates):
            self._check_stale(token, media)

            progress = _ProgressSlice(provider.id, index, len(candidates), on_progress, token)
            ctx = ScrapeContext(media=media, episode_id=episode_id, progress=progress)
            try:
                result = await provider.scrape(ctx)
                self._check_result(provider, result)
            except ScrapeError as e:
                logger.warning(f"[Orchestrator] {provider.id} failed: {type(e).__name__}: {e}")
                failures.append((provider.id, e))
                continue
            except Exception as e:
                logger.exception(f"[Orchestrator] {provider.id} crashed")
                failures.append((provider.id, ProviderCrashError(f"{provider.id} crashed: {e}", cause=e)))
                continue

            self._check_stale(token, media)
            progress(100)
            _emit(on_progress, token, ProgressEvent(provider.id, 100.0, 100.0))
            logger.info(f"[Orchestrator] {media.display_name}: stream from {provider.id}")
            return replace(result, provider_id=provider.id)

        self._check_stale(token, media)
        logger.warning(f"[Orchestrator] All providers exhausted for {media.display_name}")
        raise AggregateNoStreamFoundError(failures)

    def _check_result(self, provider: Provider, result: ScrapeResult) -> None:
        if not isinstance(result, ScrapeResult):
            raise UpstreamShapeError(f"{provider.id} returned {type(result).__name__}, not a ScrapeResult")
        if result.stream is not None:
            if not result.stream.stream_url:
                raise UpstreamShapeError(f"{provider.id} returned a stream without a url")
        elif not result.embeds:
            raise NotFoundError(f"{provider.id} returned neither a stream nor embeds")

    def _check_stale(self, token: Optional[ResolutionToken], media: MediaMeta) -> None:
        if token is not None and token.stale:
            logger.info(f"[Orchestrator] Resolution of {media.display_name} superseded, stopping")
            raise StaleResolutionError(f"Resolution of {media.display_name} was superseded")
