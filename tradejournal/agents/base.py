"""Base utilities for AI agents.

This module provides common utilities for creating and running AI agents
using the OpenAI Agents SDK.
"""

import logging
import os
from typing import Any, Optional, Union

# Disable tracing to avoid noisy 503 errors from telemetry
os.environ.setdefault("OPENAI_AGENTS_DISABLE_TRACING", "1")

from agents import Agent, Runner, set_default_openai_key

logger = logging.getLogger(__name__)

# Default model to use for agents
DEFAULT_MODEL = "gpt-4o"

AgentInput = Union[str, list[dict[str, Any]]]


class ConfigurationError(Exception):
    """Raised when a setting required to reach the AI service is missing."""


def get_model(config: Optional[dict] = None) -> str:
    """Get the model to use for agents.

    Checks the config file, then the OPENAI_MODEL environment variable,
    and falls back to the default.

    Args:
        config: Optional loaded configuration.

    Returns:
        Model name string.
    """
    configured = (config or {}).get("openai", {}).get("model")
    return configured or os.environ.get("OPENAI_MODEL", DEFAULT_MODEL)


def get_api_key(config: Optional[dict] = None) -> Optional[str]:
    """Get the OpenAI API key.

    Args:
        config: Optional loaded configuration. Its ``openai.api_key`` wins
            over the OPENAI_API_KEY environment variable.

    Returns:
        API key string or None if not configured.
    """
    configured = (config or {}).get("openai", {}).get("api_key")
    if configured:
        return configured
    return os.environ.get("OPENAI_API_KEY") or None


def require_api_key(config: Optional[dict] = None) -> str:
    """Return the API key and register it with the SDK.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    api_key = get_api_key(config)
    if not api_key:
        raise ConfigurationError(
            "OpenAI API key not configured. Set openai.api_key in the config "
            "file or the OPENAI_API_KEY environment variable."
        )
    set_default_openai_key(api_key)
    return api_key


def create_agent(
    name: str,
    instructions: str,
    model: Optional[str] = None,
) -> Agent:
    """Create an AI agent with the specified configuration.

    Args:
        name: Name of the agent.
        instructions: System instructions for the agent.
        model: Optional model override. Uses default if not specified.

    Returns:
        Configured Agent instance.
    """
    return Agent(
        name=name,
        instructions=instructions,
        model=model or get_model(),
    )


def run_agent_sync(agent: Agent, message: AgentInput) -> str:
    """Run an agent synchronously and return the response.

    Args:
        agent: The agent to run.
        message: A plain user message, or a list of input items for
            multimodal requests.

    Returns:
        Agent's response as a string.
    """
    logger.info("Agent: %s | Model: %s", agent.name, agent.model)
    result = Runner.run_sync(agent, message)
    return result.final_output
