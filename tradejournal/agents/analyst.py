"""Journal Analyst Agent for performance review.

This agent reads the trader's journal history (and trade screenshots)
to answer questions, and looks for recurring patterns in the notes on
candles that swept the stop loss.
"""

import logging
import threading
from typing import Iterable, Optional

from tradejournal.agents.base import create_agent, get_model, require_api_key, run_agent_sync
from tradejournal.agents.shaping import (
    NOT_ENOUGH_SWEEP_NOTES,
    project_history,
    project_sweep_notes,
)
from tradejournal.models import TradeRecord

logger = logging.getLogger(__name__)


HISTORY_ANALYST_INSTRUCTIONS = """You are a world-class trading performance analyst.
Your role is to analyze a trader's performance based on their trade history
and provide actionable, insightful, and clear feedback.

The user will provide their trade history in JSON format, a question, and
potentially images for some trades. Your analysis should be professional,
data-driven, and encouraging.

Fields in the trade data:
- 'id': A unique identifier for the trade.
- 'date': The date of the trade.
- 'direction': 'LONG' or 'SHORT'.
- 'outcome': 'TP' (Take Profit), 'SL' (Stop Loss), 'BE' (Break Even), or
  'NO_TRADE' (a day where no trade was taken).
- 'stop_loss_distance' / 'take_profit_distance': stop and target sizes in pips or points.
- 'realized_risk_multiple': the R/R the trader recorded for the trade.
- 'consolidation_range_size': size of the range before the breakout.
- 'activation_time': the time the trade was activated (e.g. "10:30").
- 'stop_sweep_notes': notes about the candle that hit the stop loss.
- 'general_notes': general notes on the entry candle or market conditions.
- 'image_references': says whether images follow for this trade. Images are
  labeled 'Before', 'After' or 'Broker Screen'.

Break your analysis into clear sections. Look for patterns in:
- Win/loss streaks.
- Performance on different days or at different times (using 'activation_time').
- Common reasons for losses based on the notes and stop sweep notes.
- The relationship between stop/target sizes and outcomes.
- Visual patterns in the images: entries, market structure, candlestick formations.

Answer the trader's specific question, and point out any clear pattern they
might be missing. When discussing a trade with images, refer to it by its ID
and date.
"""

SWEEP_ANALYST_INSTRUCTIONS = """You are an expert trading analyst specializing in price
action and liquidity analysis. You will receive notes written by a trader
describing the candles that triggered their stop losses.

Identify and synthesize recurring patterns, themes or keywords, related to:
- Candle types: doji, engulfing candles, pin bars, wicks.
- Timing: news events, session opens (New York, London), times of day.
- Market structure: break of structure, sweeps of previous highs/lows,
  tests of order blocks or fair value gaps.
- Keywords: "sweep", "grab", "spike", "news", "manipulation", "high volume".

Write a clear, concise report with bullet points for the key patterns.
Conclude with the most significant pattern and what the trader should
watch for to avoid similar stop-outs. Your tone is that of a helpful mentor.
"""

HISTORY_FAILURE_MESSAGE = (
    "Sorry, I encountered an error while analyzing your trades. "
    "Run with --verbose for details."
)

SWEEP_FAILURE_MESSAGE = (
    "Sorry, I encountered an error while analyzing your SL sweep notes. "
    "Run with --verbose for details."
)

BUSY_MESSAGE = "An analysis is already running. Please wait for it to finish."


class JournalAnalystAgent:
    """AI analyst for the trade journal.

    Only one request runs at a time; the service is called once per
    request and failures are reported as a fixed message.
    """

    def __init__(self, config: Optional[dict] = None):
        """Initialize the analyst.

        Args:
            config: Optional loaded configuration (API key and model).
        """
        self.config = config
        self.model = get_model(config)
        self._in_flight = threading.Lock()

    def _run(self, name: str, instructions: str, message, failure_message: str) -> str:
        if not self._in_flight.acquire(blocking=False):
            return BUSY_MESSAGE
        try:
            agent = create_agent(name=name, instructions=instructions, model=self.model)
            return run_agent_sync(agent, message)
        except Exception:
            logger.exception("%s request failed", name)
            return failure_message
        finally:
            self._in_flight.release()

    def ask(self, question: str, records: Iterable[TradeRecord]) -> str:
        """Answer a question about the trader's full history.

        Args:
            question: The trader's question.
            records: The journal records to analyze.

        Returns:
            The analyst's answer, or a fixed message if the service failed.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        require_api_key(self.config)
        payload = project_history(records, question)
        logger.debug(
            "History request: %d chars, %d images", len(payload.prompt), len(payload.images)
        )
        return self._run(
            "Journal Analyst",
            HISTORY_ANALYST_INSTRUCTIONS,
            payload.to_input_items(),
            HISTORY_FAILURE_MESSAGE,
        )

    def analyze_sweeps(self, records: Iterable[TradeRecord]) -> str:
        """Look for recurring patterns in stop-sweep notes.

        Returns:
            The analyst's report, a fixed message when there are too few
            notes, or a fixed message if the service failed.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        require_api_key(self.config)
        payload = project_sweep_notes(records)
        if payload is None:
            return NOT_ENOUGH_SWEEP_NOTES
        return self._run(
            "Stop Sweep Analyst",
            SWEEP_ANALYST_INSTRUCTIONS,
            payload.prompt,
            SWEEP_FAILURE_MESSAGE,
        )
