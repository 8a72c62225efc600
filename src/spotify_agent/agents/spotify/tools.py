"""Tool catalog of the Spotify agent."""

from enum import Enum
from typing import Any

from spotify_agent.agents.base import ToolDescriptor


class SpotifyTool(str, Enum):
    """Every tool the Spotify agent implements."""

    SEARCH_TRACKS = "search_tracks"
    SEARCH_ARTISTS = "search_artists"
    CREATE_PLAYLIST = "create_playlist"
    ADD_TRACKS_TO_PLAYLIST = "add_tracks_to_playlist"
    REMOVE_TRACKS_FROM_PLAYLIST = "remove_tracks_from_playlist"
    GET_PLAYLIST_ITEMS = "get_playlist_items"
    GET_CURRENT_PLAYBACK = "get_current_playback"
    GET_RECOMMENDATIONS = "get_recommendations"
    GET_RECENTLY_PLAYED = "get_recently_played"
    GET_USER_PROFILE = "get_user_profile"
    GET_CURRENT_USER_PLAYLISTS = "get_current_user_playlists"
    ADD_CUSTOM_PLAYLIST_COVER_IMAGE = "add_custom_playlist_cover_image"
    GET_AVAILABLE_GENRE_SEEDS = "get_available_genre_seeds"
    SAVE_TRACK_FOR_USER = "save_track_for_user"
    CHECK_USER_SAVED_TRACKS = "check_user_saved_tracks"
    GET_USER_SAVED_TRACKS = "get_user_saved_tracks"
    GET_NEW_RELEASES = "get_new_releases"
    SAVE_ALBUM_FOR_USER = "save_album_for_user"
    GET_ARTIST_ALBUMS = "get_artist_albums"
    GET_ARTIST_TOP_TRACKS = "get_artist_top_tracks"


def _object(
    properties: dict[str, Any] | None = None, required: list[str] | None = None
) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


def _number(description: str) -> dict[str, str]:
    return {"type": "number", "description": description}


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "description": description, "items": {"type": "string"}}


_SEARCH_PARAMETERS = _object(
    {
        "query": _string("Search query text"),
        "limit": _number("Number of items to return (1–50)"),
        "offset": _number("Index of the first result to return"),
    },
    ["query"],
)

SPOTIFY_TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name=SpotifyTool.SEARCH_TRACKS.value,
        description="Search for tracks matching a query",
        parameters=_SEARCH_PARAMETERS,
    ),
    ToolDescriptor(
        name=SpotifyTool.SEARCH_ARTISTS.value,
        description="Search for artists matching a query",
        parameters=_SEARCH_PARAMETERS,
    ),
    ToolDescriptor(
        name=SpotifyTool.CREATE_PLAYLIST.value,
        description="Create a playlist for the current user",
        parameters=_object(
            {
                "name": _string("Playlist name"),
                "description": _string("Playlist description"),
                "public": {
                    "type": "boolean",
                    "description": "Whether playlist is public",
                },
            },
            ["name"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.ADD_TRACKS_TO_PLAYLIST.value,
        description="Add tracks to a playlist",
        parameters=_object(
            {
                "playlist_id": _string("Playlist ID"),
                "track_ids": _string_list("Array of track IDs (max 100) to add"),
                "position": _number("Insert position (optional)"),
            },
            ["playlist_id", "track_ids"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.REMOVE_TRACKS_FROM_PLAYLIST.value,
        description="Remove tracks from a playlist",
        parameters=_object(
            {
                "playlist_id": _string("Playlist ID"),
                "track_ids": _string_list("Array of track IDs to remove"),
            },
            ["playlist_id", "track_ids"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_PLAYLIST_ITEMS.value,
        description="Get items in a playlist",
        parameters=_object(
            {
                "playlist_id": _string("Playlist ID"),
                "limit": _number("Number of items to return (1–100)"),
                "offset": _number("Offset for paging"),
            },
            ["playlist_id"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_CURRENT_PLAYBACK.value,
        description="Get current playback state",
        parameters=_object(),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_RECOMMENDATIONS.value,
        description="Get track recommendations based on genres",
        parameters=_object(
            {
                "seed_genres": _string_list("Seed genres (1–5)"),
                "limit": _number("Number of recommendations (1–100)"),
                "market": _string("Market code (optional)"),
            },
            ["seed_genres"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_RECENTLY_PLAYED.value,
        description="Get user's recently played tracks",
        parameters=_object({"limit": _number("Number of items to return (1–50)")}),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_USER_PROFILE.value,
        description="Get current user's profile information",
        parameters=_object(),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_CURRENT_USER_PLAYLISTS.value,
        description=(
            "Get playlists owned or followed by the current user (GET /me/playlists)"
        ),
        parameters=_object(
            {
                "limit": _number("Number of playlists to return (1–50)"),
                "offset": _number("Offset for paging, multiple of limit"),
            }
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.ADD_CUSTOM_PLAYLIST_COVER_IMAGE.value,
        description="Upload a custom JPEG image (Base64 encoded) as a playlist cover",
        parameters=_object(
            {
                "playlist_id": _string("Target playlist ID"),
                "image_base64": _string(
                    "Base64-encoded JPEG image data (no data URI prefix)"
                ),
            },
            ["playlist_id", "image_base64"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_AVAILABLE_GENRE_SEEDS.value,
        description="Retrieve the list of available genre seeds for recommendations",
        parameters=_object(),
    ),
    ToolDescriptor(
        name=SpotifyTool.SAVE_TRACK_FOR_USER.value,
        description="Save one or more tracks to the current user's library",
        parameters=_object(
            {"track_ids": _string_list("Array of track IDs to save (max 50)")},
            ["track_ids"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.CHECK_USER_SAVED_TRACKS.value,
        description="Check if the current user has saved particular tracks",
        parameters=_object(
            {"track_ids": _string_list("Array of track IDs to check (max 50)")},
            ["track_ids"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_USER_SAVED_TRACKS.value,
        description="Retrieve tracks saved in the user's library",
        parameters=_object(
            {
                "limit": _number("Number of items to return (1–50)"),
                "offset": _number("Offset for paging"),
                "market": _string("Market code (optional)"),
            }
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_NEW_RELEASES.value,
        description="Get a list of new album releases featured on Spotify",
        parameters=_object(
            {
                "limit": _number("Number of items to return (1–50)"),
                "offset": _number("Offset for paging"),
                "country": _string("Country code (optional)"),
            }
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.SAVE_ALBUM_FOR_USER.value,
        description="Save one or more albums to the user's library",
        parameters=_object(
            {"album_ids": _string_list("Array of album IDs to save (max 50)")},
            ["album_ids"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_ARTIST_ALBUMS.value,
        description="Get an artist's albums",
        parameters=_object(
            {
                "artist_id": _string("Spotify artist ID"),
                "include_groups": _string("Filter by album groups, comma separated"),
                "market": _string("Market code"),
                "limit": _number("Number of items (1–50)"),
                "offset": _number("Offset for paging"),
            },
            ["artist_id"],
        ),
    ),
    ToolDescriptor(
        name=SpotifyTool.GET_ARTIST_TOP_TRACKS.value,
        description="Get an artist's top tracks by market",
        parameters=_object(
            {
                "artist_id": _string("Spotify artist ID"),
                "market": _string("Market code (required by Spotify)"),
            },
            ["artist_id", "market"],
        ),
    ),
]
