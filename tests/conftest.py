"""Pytest configuration and fixtures."""

import asyncio
import os
from collections.abc import Callable, Generator

import pytest

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["UPSTREAM_PROVIDER"] = "stub"
os.environ["GEOCODER_PROVIDER"] = "stub"

HOUR_MILLIS = 60 * 60 * 1000
NOW_MILLIS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-millis clock."""

    def __init__(self, now: int = NOW_MILLIS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class Rendezvous:
    """Blocks each arriving task until ``parties`` tasks have arrived.

    Raises TimeoutError when the others never show up, which is what
    happens when the units are run one after another.
    """

    def __init__(self, parties: int, timeout: float = 1.0) -> None:
        self.parties = parties
        self.timeout = timeout
        self.arrived = 0
        self._all_arrived = asyncio.Event()

    async def arrive(self) -> None:
        self.arrived += 1
        if self.arrived >= self.parties:
            self._all_arrived.set()
        await asyncio.wait_for(self._all_arrived.wait(), self.timeout)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_factory() -> Generator:
    """Session factory over a fresh in-memory SQLite database."""
    from video_atlas.db.session import create_db_engine, create_session_factory, init_db

    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory, clock):
    """Empty video store with a fixed clock."""
    from video_atlas.services.video_store import VideoStore

    return VideoStore(session_factory, clock=clock)


@pytest.fixture
def make_video() -> Callable:
    """Factory for videos with sensible defaults."""
    from video_atlas.domain.models import Video

    def _make(video_id: str = "vid1", **overrides):
        fields = {
            "title": f"Title {video_id}",
            "channel_name": "Channel A",
            "channel_id": "UC_A",
            "published_at": "2024-01-01T00:00:00Z",
            "thumbnail_url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
            "description": "A description",
        }
        fields.update(overrides)
        return Video(id=video_id, **fields)

    return _make


@pytest.fixture
def geocoding_backend():
    """Stub geocoding backend that knows New York City and Paris."""
    from video_atlas.adapters.geocoding.base import Address
    from video_atlas.adapters.geocoding.stub import NEW_YORK_CITY, StubGeocodingBackend

    return StubGeocodingBackend(
        {
            (40.7128, -74.0060): NEW_YORK_CITY,
            (48.8566, 2.3522): Address(locality="Paris", country_name="France", country_code="FR"),
        }
    )


@pytest.fixture
def geocoder(geocoding_backend):
    from video_atlas.services.geocoder import Geocoder

    return Geocoder(geocoding_backend)
