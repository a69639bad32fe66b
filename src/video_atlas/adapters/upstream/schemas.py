"""Wire models for YouTube Data API v3 responses."""

from pydantic import BaseModel, ConfigDict, Field

from video_atlas.domain.models import RecordingDetails, Video, VideoDetails


class WireModel(BaseModel):
    """Lenient base: unknown keys are ignored, aliases match the API's camelCase."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Thumbnail(WireModel):
    url: str
    width: int | None = None
    height: int | None = None


class Thumbnails(WireModel):
    default: Thumbnail | None = None
    medium: Thumbnail | None = None
    high: Thumbnail | None = None

    def best_url(self) -> str:
        for thumbnail in (self.high, self.medium, self.default):
            if thumbnail is not None:
                return thumbnail.url
        return ""


class SearchItemId(WireModel):
    video_id: str | None = Field(default=None, alias="videoId")


class Snippet(WireModel):
    title: str = ""
    description: str = ""
    channel_title: str = Field(default="", alias="channelTitle")
    channel_id: str = Field(default="", alias="channelId")
    published_at: str = Field(default="", alias="publishedAt")
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)


class SearchItem(WireModel):
    id: SearchItemId
    snippet: Snippet

    def to_video(self) -> Video | None:
        if not self.id.video_id:
            return None
        return Video(
            id=self.id.video_id,
            title=self.snippet.title,
            channel_name=self.snippet.channel_title,
            channel_id=self.snippet.channel_id,
            published_at=self.snippet.published_at,
            thumbnail_url=self.snippet.thumbnails.best_url(),
            description=self.snippet.description,
        )


class SearchResponse(WireModel):
    items: list[SearchItem] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class GeoPoint(WireModel):
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None


class WireRecordingDetails(WireModel):
    recording_date: str | None = Field(default=None, alias="recordingDate")
    location: GeoPoint | None = None

    def to_domain(self) -> RecordingDetails:
        latitude = longitude = None
        # A half-specified location is treated as no location
        if self.location and self.location.latitude is not None and self.location.longitude is not None:
            latitude, longitude = self.location.latitude, self.location.longitude
        return RecordingDetails(
            recording_date=self.recording_date,
            latitude=latitude,
            longitude=longitude,
        )


class DetailSnippet(WireModel):
    tags: list[str] | None = None


class VideoDetailsItem(WireModel):
    id: str
    snippet: DetailSnippet | None = None
    recording_details: WireRecordingDetails | None = Field(default=None, alias="recordingDetails")

    def to_domain(self) -> VideoDetails:
        return VideoDetails(
            id=self.id,
            tags=self.snippet.tags if self.snippet else None,
            recording=self.recording_details.to_domain() if self.recording_details else None,
        )


class VideosResponse(WireModel):
    items: list[VideoDetailsItem] = Field(default_factory=list)
