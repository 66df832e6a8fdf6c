"""
Agent registry for looking up agents by name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Agent

_AGENT_REGISTRY: dict[str, type[Agent]] = {}


class AgentRegistry:
    """Registry of agent classes keyed by their ``NAME``."""

    @classmethod
    def register(cls, agent_class: type[Agent]) -> type[Agent]:
        """Register an agent class.

        Can be used as a decorator:
            @AgentRegistry.register
            class MyAgent(Agent):
                NAME = "my_agent"

        Returns:
            The registered agent class.
        """
        name = getattr(agent_class, "NAME", "") or agent_class.__name__
        _AGENT_REGISTRY[name] = agent_class
        return agent_class

    @classmethod
    def get(cls, name: str) -> type[Agent] | None:
        return _AGENT_REGISTRY.get(name)


def get_agent(name: str) -> type[Agent] | None:
    """Get an agent class by name."""
    return AgentRegistry.get(name)
