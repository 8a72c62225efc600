"""Read-only table of agents, resolved by name."""

import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from spotify_agent.agents.base import BaseAgentHandler
from spotify_agent.config import Settings

if TYPE_CHECKING:
    from spotify_agent.core.oauth import OAuthFlowController


class AgentRegistry:
    """Immutable mapping from agent name to handler.

    Built once at startup and passed to the server. ``get_instance`` keeps a
    process-wide default built from the environment for entry points that
    have no explicit wiring.
    """

    _instance: "AgentRegistry | None" = None
    _instance_lock = threading.Lock()

    def __init__(self, agents: Mapping[str, BaseAgentHandler]):
        self._agents = MappingProxyType(dict(agents))

    def get_agent(self, name: str) -> BaseAgentHandler | None:
        return self._agents.get(name)

    def names(self) -> list[str]:
        return list(self._agents)

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    @classmethod
    def get_instance(cls, settings: Settings | None = None) -> "AgentRegistry":
        """Return the process-wide registry, creating it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = create_default_registry(
                    settings or Settings.from_env()
                )
            return cls._instance


def create_default_registry(
    settings: Settings, oauth: "OAuthFlowController | None" = None
) -> AgentRegistry:
    """Registry holding every agent this service ships."""
    from spotify_agent.agents.spotify import SpotifyAgent
    from spotify_agent.core.oauth import OAuthFlowController

    oauth = oauth or OAuthFlowController(settings)
    return AgentRegistry(
        {"spotify": SpotifyAgent(refresher=oauth.exchange_refresh_token)}
    )
