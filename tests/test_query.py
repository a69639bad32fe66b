"""Tests for the query facade and its live subscriptions."""

import asyncio

import pytest

from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import FilterOptions
from video_atlas.services.query import QueryFacade


@pytest.fixture
def facade(store) -> QueryFacade:
    return QueryFacade(store)


class TestSnapshot:
    """Tests for one-shot reads."""

    def test_snapshot_filters_and_sorts(self, facade, store, make_video) -> None:
        store.upsert_videos(
            [
                make_video("a", channel_name="Alpha", published_at="2024-01-01T00:00:00Z"),
                make_video("b", channel_name="Alpha", published_at="2024-02-01T00:00:00Z"),
                make_video("c", channel_name="Beta"),
            ]
        )

        videos = facade.snapshot(FilterOptions(channel_name="Alpha"), SortOption.PUBLICATION_DATE_OLDEST)

        assert [video.id for video in videos] == ["a", "b"]

    def test_facets_and_count(self, facade, store, make_video) -> None:
        store.upsert_videos(
            [
                make_video("a", channel_name="Alpha", location_country="Peru"),
                make_video("b", channel_name="Beta"),
            ]
        )

        assert facade.distinct_channels() == {"Alpha", "Beta"}
        assert facade.distinct_countries() == {"Peru"}
        assert facade.total_count() == 2


class TestSubscription:
    """Tests for change-driven listings."""

    @pytest.mark.asyncio
    async def test_yields_initial_then_on_change(self, facade, store, make_video) -> None:
        store.upsert_videos([make_video("a")])
        stream = facade.list_videos()

        first = await asyncio.wait_for(anext(stream), 1)
        store.upsert_videos([make_video("b", published_at="2024-06-01T00:00:00Z")])
        second = await asyncio.wait_for(anext(stream), 1)
        await stream.aclose()

        assert [video.id for video in first] == ["a"]
        assert [video.id for video in second] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_initial_empty_list(self, facade) -> None:
        stream = facade.list_videos()

        assert await asyncio.wait_for(anext(stream), 1) == []
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_unrelated_change_yields_nothing(self, facade, store, make_video) -> None:
        store.upsert_videos([make_video("a", channel_name="Alpha")])
        stream = facade.list_videos(FilterOptions(channel_name="Alpha"))
        await asyncio.wait_for(anext(stream), 1)

        store.upsert_videos([make_video("z", channel_name="Zeta")])
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(anext(stream), 0.1)

        await stream.aclose()

    @pytest.mark.asyncio
    async def test_aclose_unsubscribes(self, facade, store) -> None:
        stream = facade.list_videos()
        await asyncio.wait_for(anext(stream), 1)
        assert store.listener_count == 1

        await stream.aclose()

        assert store.listener_count == 0

    @pytest.mark.asyncio
    async def test_each_subscription_is_independent(self, facade, store, make_video) -> None:
        store.upsert_videos([make_video("a", location_country="Peru"), make_video("b")])
        everything = facade.list_videos()
        peru = facade.list_videos(FilterOptions(country="Peru"))

        all_first = await asyncio.wait_for(anext(everything), 1)
        peru_first = await asyncio.wait_for(anext(peru), 1)

        assert {video.id for video in all_first} == {"a", "b"}
        assert [video.id for video in peru_first] == ["a"]
        assert store.listener_count == 2

        await everything.aclose()
        await peru.aclose()
