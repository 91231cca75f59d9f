"""Tests for ScrapeOrchestrator."""

import asyncio

import pytest

from streamresolver.core.errors import (
    AggregateNoStreamFoundError,
    FetchTimeoutError,
    NotFoundError,
    ProviderCrashError,
    StaleResolutionError,
    UnsupportedMediaTypeError,
    UpstreamShapeError,
    ValidationError,
)
from streamresolver.models.media import MediaType
from streamresolver.models.streams import EmbedRef, ScrapeResult, Stream, StreamType
from streamresolver.providers.orchestrator import ResolutionTracker, ScrapeOrchestrator
from streamresolver.providers.registry import ProviderRegistry

from tests.fixtures.providers import FakeProvider, make_result


def _resolve(registry, media, episode_id=None, token=None):
    events = []
    result = asyncio.run(ScrapeOrchestrator(registry).resolve(media, episode_id, events.append, token))
    return result, events


def test_failing_higher_rank_falls_through_to_lower(fake_registry, movie_media):
    result, _ = _resolve(fake_registry, movie_media)

    assert result.provider_id == "low"
    assert result.stream.stream_url == "https://aws-cdn.example/low.m3u8"
    assert fake_registry.calls == ["high", "low"]


def test_stops_at_first_success(movie_media):
    calls = []
    registry = ProviderRegistry([
        FakeProvider("c", 10, result=make_result("https://c"), calls=calls),
        FakeProvider("a", 30, error=NotFoundError("no"), calls=calls),
        FakeProvider("b", 20, result=make_result("https://b"), calls=calls),
    ])
    result, _ = _resolve(registry, movie_media)

    assert result.provider_id == "b"
    assert calls == ["a", "b"]


def test_only_providers_for_media_type_are_tried(series_media):
    calls = []
    registry = ProviderRegistry([
        FakeProvider("movies", 50, result=make_result(), media_types=[MediaType.MOVIE], calls=calls),
        FakeProvider("series", 10, result=make_result(), media_types=[MediaType.SERIES], calls=calls),
    ])
    result, _ = _resolve(registry, series_media, episode_id="ep-a")

    assert result.provider_id == "series"
    assert calls == ["series"]


def test_exhaustion_raises_aggregate_with_ordered_failures(movie_media):
    timeout = FetchTimeoutError("slow")
    missing = NotFoundError("no match")
    registry = ProviderRegistry([
        FakeProvider("second", 5, error=missing),
        FakeProvider("first", 9, error=timeout),
    ])

    with pytest.raises(AggregateNoStreamFoundError) as exc_info:
        _resolve(registry, movie_media)

    assert exc_info.value.failures == [("first", timeout), ("second", missing)]
    assert exc_info.value.to_dict() == [
        {"provider": "first", "error": "FetchTimeoutError", "message": "slow"},
        {"provider": "second", "error": "NotFoundError", "message": "no match"},
    ]


def test_no_eligible_provider_is_aggregate_failure(movie_media):
    registry = ProviderRegistry([FakeProvider("series", 5, media_types=[MediaType.SERIES])])
    with pytest.raises(AggregateNoStreamFoundError) as exc_info:
        _resolve(registry, movie_media)
    assert exc_info.value.failures == []


def test_unexpected_exception_is_recorded_not_raised(movie_media):
    registry = ProviderRegistry([
        FakeProvider("broken", 20, error=KeyError("qualities")),
        FakeProvider("ok", 10, result=make_result()),
    ])
    result, _ = _resolve(registry, movie_media)
    assert result.provider_id == "ok"

    registry = ProviderRegistry([FakeProvider("broken", 20, error=KeyError("qualities"))])
    with pytest.raises(AggregateNoStreamFoundError) as exc_info:
        _resolve(registry, movie_media)
    (provider_id, error), = exc_info.value.failures
    assert provider_id == "broken"
    assert isinstance(error, ProviderCrashError)
    assert isinstance(error.cause, KeyError)


@pytest.mark.parametrize("bad_result,expected", [
    (ScrapeResult(embeds=[], stream=None), NotFoundError),
    (ScrapeResult(embeds=[], stream=Stream(stream_url="", type=StreamType.HLS)), UpstreamShapeError),
    (None, UpstreamShapeError),
])
def test_empty_results_count_as_failures(movie_media, bad_result, expected):
    registry = ProviderRegistry([FakeProvider("empty", 20, result=bad_result)])
    with pytest.raises(AggregateNoStreamFoundError) as exc_info:
        _resolve(registry, movie_media)
    assert isinstance(exc_info.value.failures[0][1], expected)


def test_embed_only_result_is_success(movie_media):
    result = ScrapeResult(embeds=[EmbedRef(embed_id="player", url="https://embed.example/1")])
    registry = ProviderRegistry([FakeProvider("embeds", 20, result=result)])
    resolved, _ = _resolve(registry, movie_media)
    assert resolved.stream is None
    assert resolved.to_dict()["embeds"] == [{"embedId": "player", "url": "https://embed.example/1"}]


def test_unsupported_media_type_error_is_recorded(movie_media):
    registry = ProviderRegistry([
        FakeProvider("picky", 20, error=UnsupportedMediaTypeError("movies only")),
        FakeProvider("ok", 10, result=make_result()),
    ])
    result, _ = _resolve(registry, movie_media)
    assert result.provider_id == "ok"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_series_without_episode_id_is_validation_error(fake_registry, series_media):
    with pytest.raises(ValidationError):
        _resolve(fake_registry, series_media)
    assert fake_registry.calls == []


def test_series_with_unknown_episode_is_validation_error(fake_registry, series_media):
    with pytest.raises(ValidationError):
        _resolve(fake_registry, series_media, episode_id="nope")
    assert fake_registry.calls == []


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


def test_progress_is_rescaled_into_provider_slices(fake_registry, movie_media):
    _, events = _resolve(fake_registry, movie_media)

    assert [(e.provider_id, e.provider_progress, e.overall) for e in events] == [
        ("high", 25.0, 12.5),
        ("high", 75.0, 37.5),
        ("low", 25.0, 62.5),
        ("low", 75.0, 87.5),
        ("low", 100.0, 100.0),
        ("low", 100.0, 100.0),
    ]


def test_progress_within_provider_is_clamped_and_non_decreasing(movie_media):
    registry = ProviderRegistry([
        FakeProvider("noisy", 10, result=make_result(), checkpoints=(-5, 40, 30, 250, 90)),
    ])
    _, events = _resolve(registry, movie_media)

    values = [e.provider_progress for e in events]
    assert values == sorted(values)
    assert all(0 <= v <= 100 for v in values)
    assert all(0 <= e.overall <= 100 for e in events)
    assert values[:3] == [0.0, 40.0, 100.0]


def test_overall_progress_is_non_decreasing(movie_media):
    registry = ProviderRegistry([
        FakeProvider("a", 30, error=NotFoundError("x"), checkpoints=(10, 90)),
        FakeProvider("b", 20, error=NotFoundError("y"), checkpoints=(50,)),
        FakeProvider("c", 10, result=make_result(), checkpoints=(25, 50, 75)),
    ])
    _, events = _resolve(registry, movie_media)
    overall = [e.overall for e in events]
    assert overall == sorted(overall)
    assert overall[-1] == 100.0


def test_listener_errors_do_not_abort_resolution(fake_registry, movie_media):
    def explode(event):
        raise RuntimeError("ui gone")

    result = asyncio.run(ScrapeOrchestrator(fake_registry).resolve(movie_media, on_progress=explode))
    assert result.provider_id == "low"


# ---------------------------------------------------------------------------
# Staleness
# ---------------------------------------------------------------------------


def test_stale_token_stops_before_next_provider(movie_media):
    tracker = ResolutionTracker()
    token = tracker.begin()
    calls = []

    class Superseding(FakeProvider):
        async def scrape(self, ctx):
            tracker.begin()
            return await super().scrape(ctx)

    registry = ProviderRegistry([
        Superseding("first", 20, error=NotFoundError("x"), calls=calls),
        FakeProvider("second", 10, result=make_result(), calls=calls),
    ])
    with pytest.raises(StaleResolutionError):
        _resolve(registry, movie_media, token=token)
    assert calls == ["first"]


def test_cancelled_token_withholds_result(movie_media):
    tracker = ResolutionTracker()
    token = tracker.begin()

    class Cancelling(FakeProvider):
        async def scrape(self, ctx):
            token.cancel()
            return await super().scrape(ctx)

    registry = ProviderRegistry([Cancelling("only", 10, result=make_result())])
    with pytest.raises(StaleResolutionError):
        _resolve(registry, movie_media, token=token)


def test_last_request_wins(movie_media):
    """An older resolution finishing after a newer one completed is discarded."""
    tracker = ResolutionTracker()

    async def scenario():
        release_old = asyncio.Event()

        class Slow(FakeProvider):
            async def scrape(self, ctx):
                await release_old.wait()
                return await super().scrape(ctx)

        slow = ScrapeOrchestrator(ProviderRegistry([Slow("slow", 10, result=make_result("https://old"))]))
        fast = ScrapeOrchestrator(ProviderRegistry([FakeProvider("fast", 10, result=make_result("https://new"))]))

        old_token = tracker.begin()
        old_task = asyncio.ensure_future(slow.resolve(movie_media, token=old_token))
        await asyncio.sleep(0)

        new_token = tracker.begin()
        new_result = await fast.resolve(movie_media, token=new_token)

        release_old.set()
        with pytest.raises(StaleResolutionError):
            await old_task
        return new_result, old_token, new_token

    new_result, old_token, new_token = asyncio.run(scenario())
    assert new_result.stream.stream_url == "https://new"
    assert old_token.stale
    assert not new_token.stale


def test_stale_resolution_emits_no_more_progress(movie_media):
    tracker = ResolutionTracker()
    token = tracker.begin()

    class Invalidating(FakeProvider):
        async def scrape(self, ctx):
            ctx.progress(10)
            tracker.invalidate()
            ctx.progress(60)
            return self.result

    registry = ProviderRegistry([Invalidating("p", 10, result=make_result())])
    events = []
    with pytest.raises(StaleResolutionError):
        asyncio.run(ScrapeOrchestrator(registry).resolve(movie_media, None, events.append, token))
    assert [e.provider_progress for e in events] == [10.0]
