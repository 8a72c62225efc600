from pydantic import BaseModel, ConfigDict, Field


class ToolInput(BaseModel):
    """Base input schema; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class NoInput(ToolInput):
    """Input schema for tools without parameters."""


class SearchInput(ToolInput):
    """Input schema for track and artist search."""

    query: str = Field(min_length=1, description="Search query text")
    limit: int | None = Field(default=None, ge=1, le=50)
    offset: int | None = Field(default=None, ge=0)


class CreatePlaylistInput(ToolInput):
    name: str = Field(min_length=1)
    description: str | None = None
    public: bool = False


class PlaylistTracksInput(ToolInput):
    """Input schema for adding tracks to a playlist."""

    playlist_id: str = Field(min_length=1)
    track_ids: list[str] = Field(min_length=1, max_length=100)
    position: int | None = Field(default=None, ge=0)


class RemovePlaylistTracksInput(ToolInput):
    playlist_id: str = Field(min_length=1)
    track_ids: list[str] = Field(min_length=1, max_length=100)


class PlaylistItemsInput(ToolInput):
    playlist_id: str = Field(min_length=1)
    limit: int | None = Field(default=None, ge=1, le=100)
    offset: int | None = Field(default=None, ge=0)


class RecommendationsInput(ToolInput):
    """Input schema for genre-seeded recommendations."""

    seed_genres: list[str] = Field(
        min_length=1, max_length=5, description="Seed genres (e.g., 'pop', 'rock')"
    )
    limit: int | None = Field(default=None, ge=1, le=100)
    market: str | None = None


class LimitInput(ToolInput):
    limit: int | None = Field(default=None, ge=1, le=50)


class PageInput(ToolInput):
    limit: int | None = Field(default=None, ge=1, le=50)
    offset: int | None = Field(default=None, ge=0)


class CoverImageInput(ToolInput):
    """Input schema for playlist cover uploads."""

    playlist_id: str = Field(min_length=1)
    image_base64: str = Field(
        min_length=1, description="Base64-encoded JPEG without data URI prefix"
    )


class TrackIdsInput(ToolInput):
    track_ids: list[str] = Field(min_length=1, max_length=50)


class SavedTracksInput(ToolInput):
    limit: int | None = Field(default=None, ge=1, le=50)
    offset: int | None = Field(default=None, ge=0)
    market: str | None = None


class NewReleasesInput(ToolInput):
    limit: int | None = Field(default=None, ge=1, le=50)
    offset: int | None = Field(default=None, ge=0)
    country: str | None = None


class AlbumIdsInput(ToolInput):
    album_ids: list[str] = Field(min_length=1, max_length=50)


class ArtistAlbumsInput(ToolInput):
    artist_id: str = Field(min_length=1)
    include_groups: str | None = None
    market: str | None = None
    limit: int | None = Field(default=None, ge=1, le=50)
    offset: int | None = Field(default=None, ge=0)


class ArtistTopTracksInput(ToolInput):
    artist_id: str = Field(min_length=1, description="Spotify artist ID")
    market: str = Field(min_length=1, description="Market code (e.g., 'US')")
