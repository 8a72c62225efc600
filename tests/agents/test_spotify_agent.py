"""Tests for the Spotify agent's tool execution."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from spotify_agent.agents.spotify import (
    ENDPOINTS,
    SPOTIFY_TOOLS,
    SpotifyAgent,
    SpotifyTool,
)
from spotify_agent.core.outcome import ApiFailure, ApiSuccess, FailureKind
from spotify_agent.credentials.gate import CredentialBundle

API = "https://api.spotify.com/v1"


@pytest.fixture
def agent(mock_refresher) -> SpotifyAgent:
    return SpotifyAgent(refresher=mock_refresher)


@pytest.fixture
def credentials() -> CredentialBundle:
    return CredentialBundle(
        variables={"spotify-access": "A", "spotify-refresh": "R"}
    )


def _body(route) -> object:
    return json.loads(route.calls.last.request.content)


class TestCatalog:
    """Test suite for the declared tools."""

    @pytest.mark.unit
    def test_twenty_tools_all_routed(self, agent) -> None:
        names = [tool.name for tool in agent.get_tools()]

        assert len(names) == 20
        assert set(names) == {tool.value for tool in SpotifyTool}
        assert set(ENDPOINTS) == set(SpotifyTool)

    @pytest.mark.unit
    def test_agent_info(self, agent) -> None:
        info = agent.get_agent_info()

        assert info.oauth == ()
        assert info.variables == ("spotify-access", "spotify-refresh")

    @pytest.mark.unit
    def test_schemas_are_objects(self) -> None:
        for tool in SPOTIFY_TOOLS:
            assert tool.parameters["type"] == "object", tool.name
            assert set(tool.parameters["required"]) <= set(
                tool.parameters["properties"]
            ), tool.name


class TestLocalFailures:
    """Failures decided before any request is sent."""

    @pytest.mark.unit
    async def test_unknown_tool(self, agent, credentials, respx_mock) -> None:
        outcome = await agent.execute_tool("play_song", {}, credentials)

        assert isinstance(outcome, ApiFailure)
        assert outcome.code == 404
        assert outcome.message == "Tool play_song not implemented"
        assert outcome.kind == FailureKind.UNKNOWN_TOOL
        assert len(respx_mock.calls) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "variables",
        [{}, {"spotify-access": "A"}, {"spotify-refresh": "R"}],
    )
    async def test_missing_tokens(self, agent, respx_mock, variables) -> None:
        outcome = await agent.execute_tool(
            "get_user_profile", {}, CredentialBundle(variables=variables)
        )

        assert outcome.code == 400
        assert outcome.message == "Need spotify token to be able to connect to spotify"
        assert len(respx_mock.calls) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tool_name,parameters",
        [
            ("search_tracks", {}),
            ("search_tracks", {"query": "x", "limit": 0}),
            ("get_recommendations", {"seed_genres": []}),
            ("get_recommendations", {"seed_genres": ["a", "b", "c", "d", "e", "f"]}),
            ("save_track_for_user", {"track_ids": [f"t{i}" for i in range(51)]}),
            ("get_artist_top_tracks", {"artist_id": "a1"}),
            ("create_playlist", {"name": ""}),
        ],
    )
    async def test_invalid_parameters(
        self, agent, credentials, respx_mock, tool_name, parameters
    ) -> None:
        outcome = await agent.execute_tool(tool_name, parameters, credentials)

        assert isinstance(outcome, ApiFailure)
        assert outcome.code == 400
        assert outcome.message.startswith(f"Invalid parameters for {tool_name}")
        assert outcome.kind == FailureKind.INVALID_PARAMETERS
        assert len(respx_mock.calls) == 0

    @pytest.mark.unit
    async def test_unexpected_error_is_500(self, credentials) -> None:
        caller = AsyncMock()
        caller.call_with_refresh.side_effect = RuntimeError("boom")
        agent = SpotifyAgent(caller=caller)

        outcome = await agent.execute_tool("get_user_profile", {}, credentials)

        assert outcome.code == 500
        assert outcome.message == "Error executing get_user_profile: boom"


class TestRequests:
    """Test suite for the Web API requests each tool sends."""

    @pytest.mark.unit
    async def test_search_tracks(self, agent, credentials, respx_mock) -> None:
        route = respx_mock.get(f"{API}/search").mock(
            return_value=httpx.Response(200, json={"tracks": {"items": []}})
        )

        outcome = await agent.execute_tool(
            "search_tracks", {"query": "daft punk", "limit": 5}, credentials
        )

        assert isinstance(outcome, ApiSuccess)
        assert outcome.data == {"tracks": {"items": []}}
        request = route.calls.last.request
        assert dict(request.url.params) == {
            "q": "daft punk",
            "type": "track",
            "limit": "5",
        }
        assert request.headers["Authorization"] == "Bearer A"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.unit
    async def test_search_artists_type(self, agent, credentials, respx_mock) -> None:
        route = respx_mock.get(f"{API}/search").mock(
            return_value=httpx.Response(200, json={})
        )

        await agent.execute_tool(
            "search_artists", {"query": "air", "offset": 10}, credentials
        )

        params = route.calls.last.request.url.params
        assert params["type"] == "artist"
        assert params["offset"] == "10"

    @pytest.mark.unit
    async def test_create_playlist_defaults(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.post(f"{API}/me/playlists").mock(
            return_value=httpx.Response(201, json={"id": "pl1"})
        )

        outcome = await agent.execute_tool(
            "create_playlist", {"name": "Road Trip"}, credentials
        )

        assert outcome.status_code == 201
        body = _body(route)
        assert body["name"] == "Road Trip"
        assert body["public"] is False
        assert body["description"]

    @pytest.mark.unit
    async def test_add_tracks_to_playlist(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.post(f"{API}/playlists/pl1/tracks").mock(
            return_value=httpx.Response(201, json={"snapshot_id": "s"})
        )

        await agent.execute_tool(
            "add_tracks_to_playlist",
            {"playlist_id": "pl1", "track_ids": ["t1", "t2"]},
            credentials,
        )

        assert _body(route) == {
            "uris": ["spotify:track:t1", "spotify:track:t2"],
            "position": 0,
        }

    @pytest.mark.unit
    async def test_remove_tracks_from_playlist(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.delete(f"{API}/playlists/pl1/tracks").mock(
            return_value=httpx.Response(200, json={"snapshot_id": "s"})
        )

        await agent.execute_tool(
            "remove_tracks_from_playlist",
            {"playlist_id": "pl1", "track_ids": ["t1"]},
            credentials,
        )

        assert _body(route) == {"tracks": [{"uri": "spotify:track:t1"}]}

    @pytest.mark.unit
    async def test_path_segments_are_escaped(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.get(url__startswith=f"{API}/playlists/").mock(
            return_value=httpx.Response(200, json={"items": []})
        )

        await agent.execute_tool(
            "get_playlist_items", {"playlist_id": "a/b?c"}, credentials
        )

        raw_path = route.calls.last.request.url.raw_path
        assert raw_path == b"/v1/playlists/a%2Fb%3Fc/tracks"

    @pytest.mark.unit
    async def test_recommendations_join_genres(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.get(f"{API}/recommendations").mock(
            return_value=httpx.Response(200, json={"tracks": []})
        )

        await agent.execute_tool(
            "get_recommendations",
            {"seed_genres": ["pop", "rock"], "limit": 10, "market": "US"},
            credentials,
        )

        assert dict(route.calls.last.request.url.params) == {
            "seed_genres": "pop,rock",
            "limit": "10",
            "market": "US",
        }

    @pytest.mark.unit
    async def test_cover_image_upload(self, agent, credentials, respx_mock) -> None:
        route = respx_mock.put(f"{API}/playlists/pl1/images").mock(
            return_value=httpx.Response(202)
        )

        outcome = await agent.execute_tool(
            "add_custom_playlist_cover_image",
            {"playlist_id": "pl1", "image_base64": "/9j/4AAQSkZJRg=="},
            credentials,
        )

        request = route.calls.last.request
        assert request.headers["Content-Type"] == "image/jpeg"
        assert request.content == b"/9j/4AAQSkZJRg=="
        assert outcome.data == {"message": "Image uploaded", "status": 202}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tool_name,parameters,path,message",
        [
            (
                "save_track_for_user",
                {"track_ids": ["t1", "t2"]},
                "/me/tracks",
                "Tracks saved",
            ),
            (
                "save_album_for_user",
                {"album_ids": ["a1"]},
                "/me/albums",
                "Albums saved",
            ),
        ],
    )
    async def test_library_saves(
        self, agent, credentials, respx_mock, tool_name, parameters, path, message
    ) -> None:
        route = respx_mock.put(f"{API}{path}").mock(return_value=httpx.Response(200))

        outcome = await agent.execute_tool(tool_name, parameters, credentials)

        ids = next(iter(parameters.values()))
        assert route.calls.last.request.url.params["ids"] == ",".join(ids)
        assert outcome.data == {"message": message, "status": 200}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tool_name,parameters,path",
        [
            ("get_current_playback", {}, "/me/player"),
            ("get_recently_played", {"limit": 3}, "/me/player/recently-played"),
            ("get_user_profile", {}, "/me"),
            ("get_current_user_playlists", {}, "/me/playlists"),
            ("get_available_genre_seeds", {}, "/recommendations/available-genre-seeds"),
            ("check_user_saved_tracks", {"track_ids": ["t1"]}, "/me/tracks/contains"),
            ("get_user_saved_tracks", {"market": "GB"}, "/me/tracks"),
            ("get_new_releases", {"country": "SE"}, "/browse/new-releases"),
            ("get_artist_albums", {"artist_id": "ar1"}, "/artists/ar1/albums"),
            (
                "get_artist_top_tracks",
                {"artist_id": "ar1", "market": "US"},
                "/artists/ar1/top-tracks",
            ),
        ],
    )
    async def test_read_only_tools(
        self, agent, credentials, respx_mock, tool_name, parameters, path
    ) -> None:
        route = respx_mock.get(f"{API}{path}").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        outcome = await agent.execute_tool(tool_name, parameters, credentials)

        assert isinstance(outcome, ApiSuccess)
        assert outcome.data == {"ok": True}
        assert route.call_count == 1

    @pytest.mark.unit
    async def test_extra_parameters_ignored(
        self, agent, credentials, respx_mock
    ) -> None:
        route = respx_mock.get(f"{API}/me").mock(
            return_value=httpx.Response(200, json={"id": "u"})
        )

        outcome = await agent.execute_tool(
            "get_user_profile", {"unexpected": 1}, credentials
        )

        assert outcome.success
        assert route.call_count == 1


class TestTokenRecovery:
    """Test suite for refresh-then-retry through a tool."""

    @pytest.mark.unit
    async def test_expired_token_refreshed_once(
        self, agent, credentials, respx_mock, mock_refresher, http_mock_helpers
    ) -> None:
        route = respx_mock.get(f"{API}/me").mock(
            side_effect=[
                http_mock_helpers.expired_token(),
                httpx.Response(200, json={"id": "u"}),
            ]
        )

        outcome = await agent.execute_tool("get_user_profile", {}, credentials)

        assert outcome.success
        assert route.call_count == 2
        assert (
            route.calls.last.request.headers["Authorization"]
            == "Bearer new-access-token"
        )
        mock_refresher.assert_awaited_once_with("R")

    @pytest.mark.unit
    async def test_refresh_failure(
        self, credentials, respx_mock, http_mock_helpers
    ) -> None:
        agent = SpotifyAgent(refresher=AsyncMock(return_value=None))
        route = respx_mock.get(f"{API}/me").mock(
            return_value=http_mock_helpers.expired_token()
        )

        outcome = await agent.execute_tool("get_user_profile", {}, credentials)

        assert outcome.code == 401
        assert outcome.message == "Failed to refresh token"
        assert route.call_count == 1

    @pytest.mark.unit
    async def test_upstream_error_passed_through(
        self, agent, credentials, respx_mock, http_mock_helpers, mock_refresher
    ) -> None:
        respx_mock.get(f"{API}/artists/nope/top-tracks").mock(
            return_value=http_mock_helpers.api_error(404, "Resource not found")
        )

        outcome = await agent.execute_tool(
            "get_artist_top_tracks",
            {"artist_id": "nope", "market": "US"},
            credentials,
        )

        assert outcome.code == 404
        assert outcome.message == "Resource not found"
        mock_refresher.assert_not_awaited()
