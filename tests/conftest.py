"""Shared pytest fixtures for all tests."""

import pytest

from streamresolver.app import create_app
from streamresolver.core.errors import NotFoundError
from streamresolver.models.media import EpisodeMeta, MediaMeta, MediaType, SeasonData
from streamresolver.providers.registry import ProviderRegistry
from streamresolver.utils import progress as progress_store

from tests.fixtures.providers import FakeProvider, make_result


@pytest.fixture
def movie_media():
    return MediaMeta(title="Inception", year=2010, type=MediaType.MOVIE)


@pytest.fixture
def series_media():
    season = SeasonData(
        id="season-2",
        number=2,
        episodes=[
            EpisodeMeta(id="ep-a", number=1),
            EpisodeMeta(id="ep-b", number=2),
            EpisodeMeta(id="ep-c", number=3),
        ],
    )
    return MediaMeta(title="Dark", year=2019, type=MediaType.SERIES, season_data=season)


@pytest.fixture
def fake_registry():
    """rank 20 fails with NotFoundError, rank 10 succeeds"""
    calls = []
    registry = ProviderRegistry([
        FakeProvider("low", 10, result=make_result("https://aws-cdn.example/low.m3u8"), calls=calls),
        FakeProvider("high", 20, error=NotFoundError("nothing here"), calls=calls),
    ])
    registry.calls = calls
    return registry


@pytest.fixture(autouse=True)
def clean_progress_store():
    """Progress snapshots and client trackers are module-level; reset them per test."""
    yield
    progress_store.resolve_progress_storage.clear()
    progress_store.client_trackers.clear()
    progress_store.client_trackers_last_used.clear()


@pytest.fixture
def app(fake_registry):
    """Create a Flask app wired to the fake registry."""
    return create_app("testing", registry=fake_registry)


@pytest.fixture
def client(app):
    """Create a test client for the Flask app."""
    with app.test_client() as client:
        yield client
