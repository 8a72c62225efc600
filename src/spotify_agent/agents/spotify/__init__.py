from spotify_agent.agents.spotify.agent import ENDPOINTS, SpotifyAgent, ToolEndpoint
from spotify_agent.agents.spotify.tools import SPOTIFY_TOOLS, SpotifyTool

__all__ = ["ENDPOINTS", "SPOTIFY_TOOLS", "SpotifyAgent", "SpotifyTool", "ToolEndpoint"]
