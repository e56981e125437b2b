"""Tests for the trade record models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from tradejournal.models import (
    AttachmentLabel,
    Direction,
    NoTradeDay,
    Outcome,
    TakenTrade,
    parse_record,
    parse_records,
)


class TestRecordVariants:
    """Outcome decides which record variant is built."""

    @pytest.mark.parametrize("outcome", ["TP", "SL", "BE"])
    def test_taken_outcomes_build_taken_trade(self, outcome: str):
        record = parse_record({
            "id": "t1",
            "date": "2024-06-03",
            "outcome": outcome,
            "direction": "LONG",
            "stop_loss_distance": 10,
        })

        assert isinstance(record, TakenTrade)
        assert record.outcome is Outcome(outcome)
        assert record.direction is Direction.LONG

    def test_no_trade_builds_no_trade_day(self):
        record = parse_record({"id": "n1", "date": "2024-06-05", "outcome": "NO_TRADE"})

        assert isinstance(record, NoTradeDay)
        assert record.outcome is Outcome.NO_TRADE

    def test_no_trade_day_drops_directional_fields(self):
        """Directional fields on a no-trade day are treated as absent."""
        record = parse_record({
            "id": "n1",
            "date": "2024-06-05",
            "outcome": "NO_TRADE",
            "direction": "SHORT",
            "stop_loss_distance": 10,
            "realized_risk_multiple": 3,
            "stop_sweep_notes": "wick",
        })

        assert isinstance(record, NoTradeDay)
        assert getattr(record, "direction", None) is None
        assert getattr(record, "realized_risk_multiple", None) is None
        assert getattr(record, "stop_sweep_notes", None) is None

    def test_bare_date_parses_to_midnight(self):
        record = parse_record({"id": "t1", "date": "2024-06-03", "outcome": "TP"})

        assert record.date == datetime(2024, 6, 3)

    def test_unknown_outcome_rejected(self):
        with pytest.raises(ValidationError):
            parse_record({"id": "t1", "date": "2024-06-03", "outcome": "WIN"})

    def test_taken_trade_rejects_no_trade_outcome(self):
        with pytest.raises(ValidationError):
            TakenTrade(id="t1", date=datetime(2024, 6, 3), outcome=Outcome.NO_TRADE)

    def test_no_trade_day_rejects_other_outcomes(self):
        with pytest.raises(ValidationError):
            NoTradeDay(id="n1", date=datetime(2024, 6, 3), outcome=Outcome.TAKE_PROFIT)

    def test_non_positive_distances_rejected(self):
        with pytest.raises(ValidationError):
            parse_record({
                "id": "t1",
                "date": "2024-06-03",
                "outcome": "TP",
                "stop_loss_distance": 0,
            })

    def test_activation_time_format(self):
        record = parse_record({
            "id": "t1", "date": "2024-06-03", "outcome": "TP", "activation_time": "10:30",
        })
        assert record.activation_time == "10:30"

        with pytest.raises(ValidationError):
            parse_record({
                "id": "t1", "date": "2024-06-03", "outcome": "TP", "activation_time": "half ten",
            })

    def test_records_are_frozen(self):
        record = parse_record({"id": "t1", "date": "2024-06-03", "outcome": "TP"})

        with pytest.raises(ValidationError):
            record.general_notes = "edited"

    def test_parse_records(self):
        records = parse_records([
            {"id": "a", "date": "2024-06-03", "outcome": "TP"},
            {"id": "b", "date": "2024-06-04", "outcome": "NO_TRADE"},
        ])

        assert [type(r) for r in records] == [TakenTrade, NoTradeDay]


class TestAttachments:
    """Attachment mapping normalization."""

    def test_empty_and_missing_attachments(self):
        record = parse_record({"id": "t1", "date": "2024-06-03", "outcome": "TP"})
        assert record.attachments == {}
        assert not record.has_attachments

        record = parse_record({
            "id": "t1", "date": "2024-06-03", "outcome": "TP", "attachments": None,
        })
        assert record.attachments == {}

    def test_empty_payloads_are_dropped(self):
        record = parse_record({
            "id": "t1",
            "date": "2024-06-03",
            "outcome": "TP",
            "attachments": {"before": "data:image/png;base64,AAAA", "after": None},
        })

        assert list(record.attachments) == [AttachmentLabel.BEFORE]

    def test_legacy_broker_label(self):
        record = parse_record({
            "id": "t1",
            "date": "2024-06-03",
            "outcome": "TP",
            "attachments": {"metatrader": "data:image/png;base64,AAAA"},
        })

        assert AttachmentLabel.BROKER_SCREEN in record.attachments

    def test_unknown_label_rejected(self):
        with pytest.raises(ValidationError):
            parse_record({
                "id": "t1",
                "date": "2024-06-03",
                "outcome": "TP",
                "attachments": {"sideways": "data:image/png;base64,AAAA"},
            })

    def test_display_names(self):
        assert AttachmentLabel.BEFORE.display_name == "Before"
        assert AttachmentLabel.BROKER_SCREEN.display_name == "Broker Screen"
