"""AI agents for TradeJournal.

- JournalAnalystAgent: answers questions about the journal history and
  reviews stop-sweep notes
- shaping: builds the payloads sent to the analyst
"""

from tradejournal.agents.base import (
    ConfigurationError,
    create_agent,
    get_api_key,
    get_model,
    require_api_key,
    run_agent_sync,
)
from tradejournal.agents.analyst import JournalAnalystAgent
from tradejournal.agents.shaping import (
    MIN_SWEEP_NOTES,
    NOT_ENOUGH_SWEEP_NOTES,
    HistoryPayload,
    ImagePart,
    SweepNotesPayload,
    collect_sweep_notes,
    project_history,
    project_sweep_notes,
)

__all__ = [
    # Base utilities
    "ConfigurationError",
    "create_agent",
    "get_api_key",
    "get_model",
    "require_api_key",
    "run_agent_sync",
    # Agents
    "JournalAnalystAgent",
    # Payload shaping
    "MIN_SWEEP_NOTES",
    "NOT_ENOUGH_SWEEP_NOTES",
    "HistoryPayload",
    "ImagePart",
    "SweepNotesPayload",
    "collect_sweep_notes",
    "project_history",
    "project_sweep_notes",
]
