"""Spotify Web API agent.

Every tool is a declarative ``ToolEndpoint``: an input model plus builders
for the path, query string and body. ``SpotifyAgent.execute_tool`` validates
the parameters and sends the request through
``ResilientCaller.call_with_refresh``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from spotify_agent.agents.base import BaseAgentHandler
from spotify_agent.agents.spotify.models import (
    AlbumIdsInput,
    ArtistAlbumsInput,
    ArtistTopTracksInput,
    CoverImageInput,
    CreatePlaylistInput,
    LimitInput,
    NewReleasesInput,
    NoInput,
    PageInput,
    PlaylistItemsInput,
    PlaylistTracksInput,
    RecommendationsInput,
    RemovePlaylistTracksInput,
    SavedTracksInput,
    SearchInput,
    ToolInput,
    TrackIdsInput,
)
from spotify_agent.agents.spotify.tools import SPOTIFY_TOOLS, SpotifyTool
from spotify_agent.core.outcome import (
    ApiCallOutcome,
    ApiSuccess,
    FailureKind,
    create_error_response,
)
from spotify_agent.core.resilient_caller import ResilientCaller, TokenRefresher
from spotify_agent.credentials.gate import CredentialBundle
from spotify_agent.utils.constants import SPOTIFY_API_BASE

logger = logging.getLogger(__name__)

ACCESS_TOKEN_VARIABLE = "spotify-access"
REFRESH_TOKEN_VARIABLE = "spotify-refresh"
DEFAULT_PLAYLIST_DESCRIPTION = "Created by the Spotify agent"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _query(**values: Any) -> dict[str, str]:
    """Drop unset values and render the rest as strings."""
    return {key: str(value) for key, value in values.items() if value is not None}


def _track_uri(track_id: str) -> str:
    return f"spotify:track:{track_id}"


@dataclass(frozen=True)
class ToolEndpoint:
    """How one tool maps onto a single Web API request."""

    method: str
    input_model: type[ToolInput]
    path: Callable[[Any], str]
    query: Callable[[Any], dict[str, str]] | None = None
    json: Callable[[Any], Any] | None = None
    content: Callable[[Any], str] | None = None
    content_type: str | None = None
    success_message: str | None = None


def _search(item_type: str) -> ToolEndpoint:
    return ToolEndpoint(
        "GET",
        SearchInput,
        path=lambda p: "/search",
        query=lambda p: _query(
            q=p.query, type=item_type, limit=p.limit, offset=p.offset
        ),
    )


ENDPOINTS: dict[SpotifyTool, ToolEndpoint] = {
    SpotifyTool.SEARCH_TRACKS: _search("track"),
    SpotifyTool.SEARCH_ARTISTS: _search("artist"),
    SpotifyTool.CREATE_PLAYLIST: ToolEndpoint(
        "POST",
        CreatePlaylistInput,
        path=lambda p: "/me/playlists",
        json=lambda p: {
            "name": p.name,
            "description": p.description or DEFAULT_PLAYLIST_DESCRIPTION,
            "public": p.public,
        },
    ),
    SpotifyTool.ADD_TRACKS_TO_PLAYLIST: ToolEndpoint(
        "POST",
        PlaylistTracksInput,
        path=lambda p: f"/playlists/{_segment(p.playlist_id)}/tracks",
        json=lambda p: {
            "uris": [_track_uri(t) for t in p.track_ids],
            "position": p.position or 0,
        },
    ),
    SpotifyTool.REMOVE_TRACKS_FROM_PLAYLIST: ToolEndpoint(
        "DELETE",
        RemovePlaylistTracksInput,
        path=lambda p: f"/playlists/{_segment(p.playlist_id)}/tracks",
        json=lambda p: {"tracks": [{"uri": _track_uri(t)} for t in p.track_ids]},
    ),
    SpotifyTool.GET_PLAYLIST_ITEMS: ToolEndpoint(
        "GET",
        PlaylistItemsInput,
        path=lambda p: f"/playlists/{_segment(p.playlist_id)}/tracks",
        query=lambda p: _query(limit=p.limit, offset=p.offset),
    ),
    SpotifyTool.GET_CURRENT_PLAYBACK: ToolEndpoint(
        "GET", NoInput, path=lambda p: "/me/player"
    ),
    SpotifyTool.GET_RECOMMENDATIONS: ToolEndpoint(
        "GET",
        RecommendationsInput,
        path=lambda p: "/recommendations",
        query=lambda p: _query(
            seed_genres=",".join(p.seed_genres), limit=p.limit, market=p.market
        ),
    ),
    SpotifyTool.GET_RECENTLY_PLAYED: ToolEndpoint(
        "GET",
        LimitInput,
        path=lambda p: "/me/player/recently-played",
        query=lambda p: _query(limit=p.limit),
    ),
    SpotifyTool.GET_USER_PROFILE: ToolEndpoint("GET", NoInput, path=lambda p: "/me"),
    SpotifyTool.GET_CURRENT_USER_PLAYLISTS: ToolEndpoint(
        "GET",
        PageInput,
        path=lambda p: "/me/playlists",
        query=lambda p: _query(limit=p.limit, offset=p.offset),
    ),
    SpotifyTool.ADD_CUSTOM_PLAYLIST_COVER_IMAGE: ToolEndpoint(
        "PUT",
        CoverImageInput,
        path=lambda p: f"/playlists/{_segment(p.playlist_id)}/images",
        content=lambda p: p.image_base64,
        content_type="image/jpeg",
        success_message="Image uploaded",
    ),
    SpotifyTool.GET_AVAILABLE_GENRE_SEEDS: ToolEndpoint(
        "GET", NoInput, path=lambda p: "/recommendations/available-genre-seeds"
    ),
    SpotifyTool.SAVE_TRACK_FOR_USER: ToolEndpoint(
        "PUT",
        TrackIdsInput,
        path=lambda p: "/me/tracks",
        query=lambda p: _query(ids=",".join(p.track_ids)),
        success_message="Tracks saved",
    ),
    SpotifyTool.CHECK_USER_SAVED_TRACKS: ToolEndpoint(
        "GET",
        TrackIdsInput,
        path=lambda p: "/me/tracks/contains",
        query=lambda p: _query(ids=",".join(p.track_ids)),
    ),
    SpotifyTool.GET_USER_SAVED_TRACKS: ToolEndpoint(
        "GET",
        SavedTracksInput,
        path=lambda p: "/me/tracks",
        query=lambda p: _query(limit=p.limit, offset=p.offset, market=p.market),
    ),
    SpotifyTool.GET_NEW_RELEASES: ToolEndpoint(
        "GET",
        NewReleasesInput,
        path=lambda p: "/browse/new-releases",
        query=lambda p: _query(country=p.country, limit=p.limit, offset=p.offset),
    ),
    SpotifyTool.SAVE_ALBUM_FOR_USER: ToolEndpoint(
        "PUT",
        AlbumIdsInput,
        path=lambda p: "/me/albums",
        query=lambda p: _query(ids=",".join(p.album_ids)),
        success_message="Albums saved",
    ),
    SpotifyTool.GET_ARTIST_ALBUMS: ToolEndpoint(
        "GET",
        ArtistAlbumsInput,
        path=lambda p: f"/artists/{_segment(p.artist_id)}/albums",
        query=lambda p: _query(
            include_groups=p.include_groups,
            market=p.market,
            limit=p.limit,
            offset=p.offset,
        ),
    ),
    SpotifyTool.GET_ARTIST_TOP_TRACKS: ToolEndpoint(
        "GET",
        ArtistTopTracksInput,
        path=lambda p: f"/artists/{_segment(p.artist_id)}/top-tracks",
        query=lambda p: _query(market=p.market),
    ),
}


class SpotifyAgent(BaseAgentHandler):
    """Agent exposing the current user's Spotify account."""

    def __init__(
        self,
        refresher: TokenRefresher | None = None,
        caller: ResilientCaller | None = None,
    ):
        super().__init__(
            SPOTIFY_TOOLS, [], [ACCESS_TOKEN_VARIABLE, REFRESH_TOKEN_VARIABLE]
        )

        declared = {tool.name for tool in SPOTIFY_TOOLS}
        implemented = {tool.value for tool in ENDPOINTS}
        if declared != implemented:
            raise ValueError(
                f"Tool catalog and endpoints differ: {sorted(declared ^ implemented)}"
            )

        self.caller = caller or ResilientCaller(SPOTIFY_API_BASE, refresher=refresher)

    async def execute_tool(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        credentials: CredentialBundle,
    ) -> ApiCallOutcome:
        try:
            tool = SpotifyTool(tool_name)
        except ValueError:
            return create_error_response(
                f"Tool {tool_name} not implemented", 404, FailureKind.UNKNOWN_TOOL
            )

        access_token = credentials.variables.get(ACCESS_TOKEN_VARIABLE)
        refresh_token = credentials.variables.get(REFRESH_TOKEN_VARIABLE)
        if not access_token or not refresh_token:
            return create_error_response(
                "Need spotify token to be able to connect to spotify",
                400,
                FailureKind.MISSING_CREDENTIAL,
            )

        endpoint = ENDPOINTS[tool]
        try:
            params = endpoint.input_model.model_validate(parameters or {})
        except ValidationError as e:
            return create_error_response(
                f"Invalid parameters for {tool.value}: {e.errors(include_url=False)}",
                400,
                FailureKind.INVALID_PARAMETERS,
            )

        logger.info(f"Executing {tool.value}")
        try:
            return await self._send(endpoint, params, access_token, refresh_token)
        except Exception as e:
            logger.exception(f"Error executing {tool.value}")
            return create_error_response(f"Error executing {tool.value}: {e}", 500)

    async def _send(
        self,
        endpoint: ToolEndpoint,
        params: ToolInput,
        access_token: str,
        refresh_token: str,
    ) -> ApiCallOutcome:
        request: dict[str, Any] = {}
        if endpoint.query is not None:
            request["params"] = endpoint.query(params)
        if endpoint.json is not None:
            request["json"] = endpoint.json(params)
        if endpoint.content is not None:
            request["content"] = endpoint.content(params)

        headers = {"Content-Type": endpoint.content_type or "application/json"}

        outcome = await self.caller.call_with_refresh(
            endpoint.method,
            endpoint.path(params),
            access_token,
            refresh_token,
            headers=headers,
            **request,
        )

        if isinstance(outcome, ApiSuccess) and endpoint.success_message:
            return ApiSuccess(
                data={
                    "message": endpoint.success_message,
                    "status": outcome.status_code,
                },
                status_code=outcome.status_code,
            )
        return outcome
