"""End-to-end tests: login, callback, then tool calls with the issued tokens."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from starlette.testclient import TestClient

from spotify_agent.agents.registry import create_default_registry
from spotify_agent.api_server import AgentServer
from spotify_agent.core.oauth import OAuthFlowController

TOKEN_URL = "https://accounts.spotify.com/api/token"
API = "https://api.spotify.com/v1"


@pytest.mark.integration
class TestLoginCallbackFlow:
    """Integration tests for the complete OAuth and tool workflow."""

    @pytest.fixture
    def client(self, settings, state_manager) -> TestClient:
        oauth = OAuthFlowController(settings, state_manager=state_manager)
        registry = create_default_registry(settings, oauth)
        return TestClient(AgentServer(settings, registry, oauth).create_app())

    def _login_state(self, client: TestClient) -> str:
        response = client.get("/api/spotify-login", follow_redirects=False)
        query = parse_qs(urlparse(response.headers["location"]).query)
        return query["state"][0]

    def test_login_then_callback(self, client, respx_mock, http_mock_helpers) -> None:
        token_route = respx_mock.post(TOKEN_URL).mock(
            return_value=http_mock_helpers.token_response("A", "R", 3600)
        )
        state = self._login_state(client)

        response = client.get(
            "/api/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == (
            "http://localhost:3000/?access_token=A&refresh_token=R&expires_in=3600"
        )
        assert token_route.call_count == 1

        replay = client.get(
            "/api/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        assert replay.headers["location"] == (
            "http://localhost:3000/login?error=invalid_state"
        )
        assert token_route.call_count == 1

    def test_state_expires(self, client, clock, respx_mock) -> None:
        token_route = respx_mock.post(TOKEN_URL)
        state = self._login_state(client)
        clock.advance(600)

        response = client.get(
            "/api/callback",
            params={"code": "abc", "state": state},
            follow_redirects=False,
        )

        assert response.headers["location"] == (
            "http://localhost:3000/login?error=invalid_state"
        )
        assert token_route.call_count == 0

    def test_tool_call_refreshes_expired_token(
        self, client, respx_mock, http_mock_helpers, service_api_key
    ) -> None:
        """An expired access token is refreshed once through the accounts service."""
        token_route = respx_mock.post(TOKEN_URL).mock(
            return_value=http_mock_helpers.token_response("A2", None, 3600)
        )
        api_route = respx_mock.get(f"{API}/me/player/recently-played").mock(
            side_effect=[
                http_mock_helpers.expired_token(),
                httpx.Response(200, json={"items": [{"track": {"id": "t1"}}]}),
            ]
        )

        response = client.post(
            "/spotify/tools/get_recently_played",
            json={"limit": 1},
            headers={
                "x-api-key": service_api_key,
                "x-variable-spotify-access": "A1",
                "x-variable-spotify-refresh": "R1",
            },
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"items": [{"track": {"id": "t1"}}]}
        assert token_route.call_count == 1
        assert parse_qs(token_route.calls.last.request.content.decode()) == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["R1"],
        }
        assert api_route.call_count == 2
        assert api_route.calls[1].request.headers["Authorization"] == "Bearer A2"

    def test_tool_call_without_spotify_tokens(self, client, service_api_key) -> None:
        response = client.post(
            "/spotify/tools/get_user_profile",
            json={},
            headers={"x-api-key": service_api_key},
        )

        assert response.status_code == 401
        assert response.json()["error"] == {
            "code": 401,
            "message": "Missing variables: spotify-access, spotify-refresh",
        }

    def test_spotify_catalog(self, client) -> None:
        response = client.get("/spotify/tools")

        assert response.status_code == 200
        assert len(response.json()) == 20
