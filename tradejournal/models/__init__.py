"""Data models for TradeJournal."""

from tradejournal.models.trade import (
    AttachmentLabel,
    Direction,
    NoTradeDay,
    Outcome,
    TakenTrade,
    TradeRecord,
    parse_data_uri,
    parse_record,
    parse_records,
)

__all__ = [
    "AttachmentLabel",
    "Direction",
    "NoTradeDay",
    "Outcome",
    "TakenTrade",
    "TradeRecord",
    "parse_data_uri",
    "parse_record",
    "parse_records",
]
