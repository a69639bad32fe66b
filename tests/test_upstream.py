"""Tests for upstream content adapters."""

import json

import httpx
import pytest

from video_atlas.adapters.upstream.base import chunked
from video_atlas.adapters.upstream.stub import StubUpstreamClient
from video_atlas.adapters.upstream.youtube import (
    CERT_HEADER,
    PACKAGE_HEADER,
    YouTubeDataClient,
    signing_cert_fingerprint,
)
from video_atlas.domain.models import VideoDetails
from video_atlas.errors import UpstreamError

SEARCH_PAYLOAD = {
    "nextPageToken": "CAUQAA",
    "items": [
        {
            "id": {"kind": "youtube#video", "videoId": "abc123"},
            "snippet": {
                "title": "Walking Tokyo",
                "description": "A walk",
                "channelTitle": "Walker",
                "channelId": "UC_W",
                "publishedAt": "2024-03-01T08:00:00Z",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/default.jpg"},
                    "medium": {"url": "https://i.ytimg.com/medium.jpg"},
                },
                "liveBroadcastContent": "none",
            },
        },
        {
            "id": {"kind": "youtube#channel", "channelId": "UC_W"},
            "snippet": {"title": "Channel result", "channelTitle": "Walker", "channelId": "UC_W"},
        },
    ],
}

VIDEOS_PAYLOAD = {
    "items": [
        {
            "id": "abc123",
            "snippet": {"tags": ["travel", "tokyo"]},
            "recordingDetails": {
                "recordingDate": "2024-02-20T00:00:00Z",
                "location": {"latitude": 35.6762, "longitude": 139.6503, "altitude": 0},
            },
        },
        {"id": "def456", "snippet": {"title": "No tags"}},
        {"id": "ghi789", "recordingDetails": {"location": {"latitude": 1.0}}},
    ]
}


def make_client(handler, **kwargs) -> YouTubeDataClient:
    return YouTubeDataClient(
        "test-key",
        client_package="dev.example.app",
        cert_fingerprint="fingerprint==",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestChunked:
    """Tests for id batching."""

    def test_batches_of_fifty(self) -> None:
        ids = [f"id{i}" for i in range(120)]

        batches = chunked(ids, 50)

        assert [len(batch) for batch in batches] == [50, 50, 20]
        assert [item for batch in batches for item in batch] == ids

    def test_empty(self) -> None:
        assert chunked([], 50) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            chunked(["a"], 0)


class TestGetDetails:
    """Tests for batched, failure-isolated detail fetching."""

    @pytest.mark.asyncio
    async def test_issues_three_batches_for_120_ids(self) -> None:
        client = StubUpstreamClient()
        ids = [f"id{i}" for i in range(120)]

        await client.get_details(ids, batch_size=50)

        assert sorted(len(batch) for batch in client.detail_batches) == [20, 50, 50]

    @pytest.mark.asyncio
    async def test_duplicate_ids_requested_once(self) -> None:
        client = StubUpstreamClient()

        await client.get_details(["a", "b", "a"], batch_size=50)

        assert client.detail_batches == [["a", "b"]]

    @pytest.mark.asyncio
    async def test_failed_batch_isolated(self) -> None:
        details = [VideoDetails(id=f"id{i}", tags=[f"t{i}"]) for i in range(6)]
        client = StubUpstreamClient(details=details, failing_detail_ids=["id1"])

        result = await client.get_details([f"id{i}" for i in range(6)], batch_size=2)

        assert set(result) == {"id2", "id3", "id4", "id5"}
        assert len(client.detail_batches) == 3

    @pytest.mark.asyncio
    async def test_missing_ids_absent(self) -> None:
        client = StubUpstreamClient(details=[VideoDetails(id="a")])

        result = await client.get_details(["a", "b"])

        assert list(result) == ["a"]


class TestYouTubeDataClient:
    """Tests for the YouTube Data API adapter."""

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            YouTubeDataClient("")
        with pytest.raises(ValueError, match="non-empty"):
            YouTubeDataClient("   ")

    @pytest.mark.asyncio
    async def test_list_items_request_and_parsing(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=SEARCH_PAYLOAD)

        async with make_client(handler) as client:
            page = await client.list_items("UC_W")

        request = captured[0]
        assert request.url.path.endswith("/youtube/v3/search")
        params = request.url.params
        assert params["part"] == "snippet"
        assert params["channelId"] == "UC_W"
        assert params["maxResults"] == "50"
        assert params["order"] == "date"
        assert params["type"] == "video"
        assert params["key"] == "test-key"
        assert "pageToken" not in params
        assert request.headers[PACKAGE_HEADER] == "dev.example.app"
        assert request.headers[CERT_HEADER] == "fingerprint=="

        assert page.next_page_token == "CAUQAA"
        assert len(page.items) == 1
        video = page.items[0]
        assert video.id == "abc123"
        assert video.channel_name == "Walker"
        assert video.published_at == "2024-03-01T08:00:00Z"
        assert video.thumbnail_url == "https://i.ytimg.com/medium.jpg"
        assert video.tags == []

    @pytest.mark.asyncio
    async def test_list_items_passes_page_token(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"items": []})

        async with make_client(handler) as client:
            page = await client.list_items("UC_W", "TOKEN2")

        assert captured[0].url.params["pageToken"] == "TOKEN2"
        assert page.items == []
        assert page.next_page_token is None

    @pytest.mark.asyncio
    async def test_list_items_rejects_empty_source(self) -> None:
        async with make_client(lambda request: httpx.Response(200, json={})) as client:
            with pytest.raises(ValueError):
                await client.list_items("")

    @pytest.mark.asyncio
    async def test_non_200_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": {"message": "quotaExceeded"}})

        async with make_client(handler) as client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.list_items("UC_W")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_invalid_json_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>oops</html>")

        async with make_client(handler) as client:
            with pytest.raises(UpstreamError):
                await client.list_items("UC_W")

    @pytest.mark.asyncio
    async def test_malformed_payload_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=json.dumps({"items": "nope"}).encode())

        async with make_client(handler) as client:
            with pytest.raises(UpstreamError):
                await client.list_items("UC_W")

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        async with make_client(handler) as client:
            with pytest.raises(UpstreamError):
                await client.list_items("UC_W")

    @pytest.mark.asyncio
    async def test_fetch_details_batch(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=VIDEOS_PAYLOAD)

        async with make_client(handler) as client:
            details = await client.fetch_details_batch(["abc123", "def456", "ghi789"])

        params = captured[0].url.params
        assert captured[0].url.path.endswith("/videos")
        assert params["part"] == "snippet,recordingDetails"
        assert params["id"] == "abc123,def456,ghi789"

        by_id = {item.id: item for item in details}
        assert by_id["abc123"].tags == ["travel", "tokyo"]
        assert by_id["abc123"].recording.recording_date == "2024-02-20T00:00:00Z"
        assert by_id["abc123"].recording.latitude == 35.6762
        assert by_id["def456"].tags is None
        assert by_id["def456"].recording is None
        # Half a location is no location
        assert by_id["ghi789"].recording.latitude is None
        assert by_id["ghi789"].recording.longitude is None

    @pytest.mark.asyncio
    async def test_fetch_details_batch_rejects_oversized_batch(self) -> None:
        async with make_client(lambda request: httpx.Response(200, json={})) as client:
            with pytest.raises(ValueError):
                await client.fetch_details_batch([f"id{i}" for i in range(51)])

    @pytest.mark.asyncio
    async def test_fetch_details_empty_batch_skips_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with make_client(handler) as client:
            assert await client.fetch_details_batch([]) == []


class TestCertFingerprint:
    """Tests for signing certificate fingerprints."""

    def test_base64_sha1(self) -> None:
        assert signing_cert_fingerprint(b"") == "2jmj7l5rSw0yVb/vlWAYkK/YBwk="
