"""YouTube Data API v3 adapter for channel listings and video details."""

import base64
import hashlib
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from video_atlas.adapters.upstream.base import DEFAULT_BATCH_SIZE, ListPage, UpstreamClient
from video_atlas.adapters.upstream.schemas import SearchResponse, VideosResponse
from video_atlas.domain.models import VideoDetails
from video_atlas.errors import UpstreamError
from video_atlas.logging import get_logger

logger = get_logger(__name__)

YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3/"
MAX_RESULTS_PER_PAGE = 50

# App-restricted keys are checked against these two headers
PACKAGE_HEADER = "X-Android-Package"
CERT_HEADER = "X-Android-Cert"


def signing_cert_fingerprint(der_bytes: bytes) -> str:
    """Base64 SHA-1 digest of a DER-encoded signing certificate."""
    digest = hashlib.sha1(der_bytes).digest()
    return base64.b64encode(digest).decode("ascii")


class YouTubeDataClient(UpstreamClient):
    """Fetches channel listings and video details from the YouTube Data API.

    Uses:
    - search.list (part=snippet, order=date) for paginated channel listings
    - videos.list (part=snippet,recordingDetails) for tags and recording location
    """

    def __init__(
        self,
        api_key: str,
        *,
        client_package: str = "",
        cert_fingerprint: str = "",
        base_url: str = YOUTUBE_API_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: YouTube Data API key. Must be non-empty.
            client_package: Package identity sent with every request.
            cert_fingerprint: Signing certificate fingerprint sent with every request.
            base_url: API root, overridable for tests and proxies.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        if not api_key or not api_key.strip():
            raise ValueError("YouTube API key must be a non-empty string")

        self._api_key = api_key
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._headers = {
            PACKAGE_HEADER: client_package,
            CERT_HEADER: cert_fingerprint,
        }
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        client = await self._get_client()
        query = {key: value for key, value in params.items() if value is not None}
        query["key"] = self._api_key

        try:
            response = await client.get(endpoint, params=query)
        except httpx.HTTPError as e:
            raise UpstreamError(f"YouTube request to {endpoint} failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "youtube_api_error",
                endpoint=endpoint,
                status=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamError(
                f"YouTube API error on {endpoint}: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"YouTube API returned invalid JSON on {endpoint}") from e

    async def list_items(self, source_id: str, page_token: str | None = None) -> ListPage:
        if not source_id:
            raise ValueError("source_id must be non-empty")

        payload = await self._get(
            "search",
            {
                "part": "snippet",
                "channelId": source_id,
                "maxResults": MAX_RESULTS_PER_PAGE,
                "order": "date",
                "type": "video",
                "pageToken": page_token,
            },
        )
        try:
            parsed = SearchResponse.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(f"Malformed search response for channel {source_id}") from e

        videos = [video for item in parsed.items if (video := item.to_video()) is not None]
        logger.debug(
            "youtube_page_fetched",
            channel_id=source_id,
            videos=len(videos),
            has_next=parsed.next_page_token is not None,
        )
        return ListPage(items=videos, next_page_token=parsed.next_page_token or None)

    async def fetch_details_batch(self, ids: Sequence[str]) -> list[VideoDetails]:
        if not ids:
            return []
        if len(ids) > DEFAULT_BATCH_SIZE:
            raise ValueError(f"At most {DEFAULT_BATCH_SIZE} ids per detail request, got {len(ids)}")

        payload = await self._get(
            "videos",
            {
                "part": "snippet,recordingDetails",
                "id": ",".join(ids),
            },
        )
        try:
            parsed = VideosResponse.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError("Malformed videos response") from e

        return [item.to_domain() for item in parsed.items]

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "YouTubeDataClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
