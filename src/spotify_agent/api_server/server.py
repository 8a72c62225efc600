"""HTTP server exposing the OAuth flow and the agent tool endpoints."""

import argparse
import logging
from typing import Any

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.routing import Route

from spotify_agent import __version__
from spotify_agent.agents.registry import AgentRegistry, create_default_registry
from spotify_agent.api_server.models import (
    AgentStatusResponse,
    HealthResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
)
from spotify_agent.config import Settings
from spotify_agent.core.oauth import OAuthFlowController
from spotify_agent.core.outcome import (
    ApiFailure,
    FailureKind,
    create_error_response,
)
from spotify_agent.core.resilient_caller import ResilientCaller, bearer_header
from spotify_agent.credentials.gate import CredentialGate
from spotify_agent.errors import ConfigurationError
from spotify_agent.utils.constants import SPOTIFY_API_BASE
from spotify_agent.utils.env import load_env

logger = logging.getLogger(__name__)


def _error(message: str, code: int, kind: FailureKind) -> JSONResponse:
    return JSONResponse(
        create_error_response(message, code, kind).to_response(), status_code=code
    )


class AgentServer:
    """Starlette server wiring the OAuth flow, the gate and the registry."""

    def __init__(
        self,
        settings: Settings,
        registry: AgentRegistry | None = None,
        oauth: OAuthFlowController | None = None,
        api_caller: ResilientCaller | None = None,
    ):
        self.settings = settings
        self.oauth = oauth or OAuthFlowController(settings)
        self.registry = registry or create_default_registry(settings, self.oauth)
        self.gate = CredentialGate(settings.server_api_key)
        self.api_caller = api_caller or ResilientCaller(SPOTIFY_API_BASE)

        if not settings.server_api_key:
            logger.warning("SERVER_API_KEY is not set; tool execution will be refused")

    # OAuth endpoints
    async def login_endpoint(
        self, request: Request
    ) -> RedirectResponse | PlainTextResponse:
        """Redirect the user to the Spotify authorization page."""
        try:
            scope = request.query_params.get("scope")
            auth_url = self.oauth.build_login_redirect(scope)
        except Exception as e:
            logger.error(f"Login redirect failed: {e}")
            return PlainTextResponse("Authentication failed", status_code=500)

        logger.info("Redirecting to Spotify login")
        return RedirectResponse(auth_url, status_code=302)

    async def callback_endpoint(self, request: Request) -> RedirectResponse:
        """Handle the provider callback and redirect to the client."""
        params = request.query_params
        target = await self.oauth.handle_callback(
            params.get("code"), params.get("state"), params.get("error")
        )
        return RedirectResponse(target, status_code=302)

    async def refresh_token_endpoint(self, request: Request) -> JSONResponse:
        """Exchange a refresh token for a new access token."""
        try:
            body = await request.json()
            refresh_request = RefreshTokenRequest(**body)
        except (ValueError, TypeError, ValidationError):
            return JSONResponse({"error": "Missing refresh token"}, status_code=400)

        grant = await self.oauth.refresh_access_token(refresh_request.refresh_token)
        if grant is None:
            return JSONResponse({"error": "Token refresh failed"}, status_code=401)

        response = RefreshTokenResponse(
            access_token=grant.access_token, expires_in=grant.expires_in
        )
        return JSONResponse(response.model_dump())

    async def user_info_endpoint(self, request: Request) -> JSONResponse:
        """Return the profile of the user owning the bearer token."""
        scheme, _, access_token = request.headers.get("authorization", "").partition(
            " "
        )
        if scheme.lower() != "bearer" or not access_token:
            return JSONResponse({"error": "Missing access token"}, status_code=401)

        outcome = await self.api_caller.call(
            "GET", "/me", headers=bearer_header(access_token)
        )
        if isinstance(outcome, ApiFailure):
            logger.error(f"Fetching user info error: {outcome.code} {outcome.message}")
            return JSONResponse({"error": "Failed to fetch user info"}, status_code=500)

        return JSONResponse(outcome.data)

    # Agent endpoints
    async def root_endpoint(self, request: Request) -> JSONResponse:
        return JSONResponse(AgentStatusResponse().model_dump())

    async def agent_endpoint(self, request: Request) -> JSONResponse:
        """Report whether an agent is registered."""
        agent = request.path_params["agent"]
        if self.registry.get_agent(agent) is None:
            return _error(f"Agent {agent} not found", 404, FailureKind.UNKNOWN_AGENT)
        return JSONResponse(AgentStatusResponse().model_dump())

    async def tools_endpoint(self, request: Request) -> JSONResponse:
        """List the tool descriptors of an agent."""
        agent = request.path_params["agent"]
        handler = self.registry.get_agent(agent)
        if handler is None:
            return _error(f"Agent {agent} not found", 404, FailureKind.UNKNOWN_AGENT)

        return JSONResponse([tool.model_dump() for tool in handler.get_tools()])

    async def execute_tool_endpoint(self, request: Request) -> JSONResponse:
        """Run the credential gate, then the tool."""
        agent = request.path_params["agent"]
        tool_name = request.path_params["tool_name"]

        handler = self.registry.get_agent(agent)
        if handler is None:
            return _error(f"Agent {agent} not found", 404, FailureKind.UNKNOWN_AGENT)

        info = handler.get_agent_info()
        gate_result = self.gate.validate(request.headers, info.oauth, info.variables)
        if not gate_result.success:
            failure = gate_result.failure
            logger.info(f"Credential check failed for {agent}: {failure.message}")
            return JSONResponse(failure.to_response(), status_code=failure.code)

        parameters: Any = {}
        raw_body = await request.body()
        if raw_body:
            try:
                parameters = await request.json()
            except ValueError:
                return _error("Invalid JSON body", 400, FailureKind.INVALID_PARAMETERS)
        if not isinstance(parameters, dict):
            return _error(
                "Tool parameters must be a JSON object",
                400,
                FailureKind.INVALID_PARAMETERS,
            )

        logger.info(f"Executing {agent}/{tool_name}")
        outcome = await handler.execute_tool(tool_name, parameters, gate_result.bundle)

        if isinstance(outcome, ApiFailure):
            return JSONResponse(outcome.to_response(), status_code=outcome.code)
        return JSONResponse(outcome.to_response())

    async def health_check(self, request: Request) -> JSONResponse:
        response = HealthResponse(
            status="healthy",
            service="spotify-tool-agent",
            version=__version__,
            mode=self.settings.mode,
            agents=self.registry.names(),
        )
        return JSONResponse(response.model_dump())

    def create_app(self) -> Starlette:
        """Create the Starlette application with routes and middleware."""
        routes = [
            Route("/health", self.health_check, methods=["GET"]),
            # OAuth
            Route("/api/spotify-login", self.login_endpoint, methods=["GET"]),
            Route("/api/callback", self.callback_endpoint, methods=["GET"]),
            Route(
                "/api/refresh-token", self.refresh_token_endpoint, methods=["POST"]
            ),
            Route("/api/user-info", self.user_info_endpoint, methods=["GET"]),
            # Agents
            Route("/", self.root_endpoint, methods=["GET"]),
            Route("/{agent}/tools", self.tools_endpoint, methods=["GET"]),
            Route(
                "/{agent}/tools/{tool_name}",
                self.execute_tool_endpoint,
                methods=["POST"],
            ),
            Route("/{agent}", self.agent_endpoint, methods=["GET"]),
        ]

        app = Starlette(routes=routes)

        app.add_middleware(
            CORSMiddleware,
            allow_origins=[self.settings.client_url],
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

        return app


def main() -> None:
    """Main entry point for the API server."""
    load_env()

    parser = argparse.ArgumentParser(
        description="Spotify tool agent - OAuth login and agent tool execution"
    )
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        raise SystemExit(1) from e

    host = args.host or settings.host
    port = args.port or settings.port

    server = AgentServer(settings, AgentRegistry.get_instance(settings))
    app = server.create_app()

    print(f"Spotify tool agent starting on http://{host}:{port} ({settings.mode})")
    print("Endpoints:")
    print("   OAuth:")
    print("     GET /api/spotify-login - Redirect to Spotify login")
    print("     GET /api/callback - OAuth callback")
    print("     POST /api/refresh-token - Refresh an access token")
    print("     GET /api/user-info - Current user profile")
    print("   Agents:")
    print("     GET /{agent} - Agent status")
    print("     GET /{agent}/tools - Tool catalog")
    print("     POST /{agent}/tools/{tool} - Execute a tool")
    print("   Health:")
    print("     GET /health - Health check")

    uvicorn.run(app, host=host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
