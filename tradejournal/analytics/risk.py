"""Risk/reward resolution for a single record.

The realized risk multiple of a record is decided by an ordered rule
table. Rules are evaluated top-down and the first matching predicate
supplies the result.
"""

from typing import Callable, Optional

from tradejournal.models import Outcome, TradeRecord

STOP_LOSS_MULTIPLE = -1.0

Rule = tuple[str, Callable[[TradeRecord], bool], Callable[[TradeRecord], float]]


def _override(record: TradeRecord) -> Optional[float]:
    # NoTradeDay records have no override field at all.
    return getattr(record, "realized_risk_multiple", None)


def _has_override(record: TradeRecord) -> bool:
    return _override(record) is not None


def _override_result(record: TradeRecord) -> float:
    # A loss is always exactly -1R, whatever was typed in.
    if record.outcome is Outcome.STOP_LOSS:
        return STOP_LOSS_MULTIPLE
    return float(_override(record))


def _has_target_sizing(record: TradeRecord) -> bool:
    if record.outcome is not Outcome.TAKE_PROFIT:
        return False
    stop = getattr(record, "stop_loss_distance", None)
    target = getattr(record, "take_profit_distance", None)
    return stop is not None and target is not None and stop > 0


def _sizing_ratio(record: TradeRecord) -> float:
    return record.take_profit_distance / record.stop_loss_distance


def _is_stop_loss(record: TradeRecord) -> bool:
    return record.outcome is Outcome.STOP_LOSS


RISK_RULES: list[Rule] = [
    ("override", _has_override, _override_result),
    ("target_sizing", _has_target_sizing, _sizing_ratio),
    ("stop_loss", _is_stop_loss, lambda record: STOP_LOSS_MULTIPLE),
]


def matching_rule(record: TradeRecord) -> Optional[str]:
    """Name of the first rule that applies to ``record``, if any."""
    for name, predicate, _ in RISK_RULES:
        if predicate(record):
            return name
    return None


def resolve_risk_multiple(record: TradeRecord) -> float:
    """Return the realized risk multiple of a record.

    Break-even trades, no-trade days and trades without enough sizing
    data resolve to ``0``. This function never raises.
    """
    if record.outcome is Outcome.NO_TRADE:
        return 0.0
    for _, predicate, result in RISK_RULES:
        if predicate(record):
            return result(record)
    return 0.0
