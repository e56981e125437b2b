"""Aggregate statistics and time series over the full record collection.

Every function here takes the complete, unfiltered collection. Ratios
fall back to ``0`` when their denominator is zero.
"""

import math
from collections import defaultdict
from typing import Iterable

from pydantic import BaseModel, Field

from tradejournal.analytics.calendar import (
    DAY_NAMES,
    WEEKDAY_INDICES,
    calendar_day,
    day_key,
    week_key,
    weekday_index,
)
from tradejournal.analytics.risk import resolve_risk_multiple
from tradejournal.models import Outcome, TradeRecord

START_POINT = "Start"

OUTCOME_LABELS = {
    Outcome.TAKE_PROFIT: "Take Profit",
    Outcome.STOP_LOSS: "Stop Loss",
    Outcome.BREAK_EVEN: "Break Even",
    Outcome.NO_TRADE: "No Trade Days",
}


class SummaryStats(BaseModel):
    """Headline statistics for the whole journal."""

    total_trades: int = Field(..., ge=0, description="Entries where a position was opened")
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    break_evens: int = Field(..., ge=0)
    no_trade_days: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0, le=100, description="Wins over wins+losses, percent")
    total_risk_earned: float = Field(..., description="Sum of realized risk multiples")
    average_risk: float = Field(..., description="Mean realized risk multiple per trade")

    model_config = {"frozen": True}


class OutcomeSlice(BaseModel):
    """One segment of the outcome distribution."""

    outcome: Outcome
    name: str
    value: int = Field(..., gt=0)

    model_config = {"frozen": True}


class WeeklyWinRate(BaseModel):
    """Win rate for one calendar week (keyed by its Sunday)."""

    name: str = Field(..., description="ISO date of the Sunday starting the week")
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0, le=100)

    model_config = {"frozen": True}


class DailyOutcomeCount(BaseModel):
    """Take profit and stop loss counts for one calendar day."""

    name: str = Field(..., description="ISO date of the day")
    take_profits: int = Field(..., ge=0)
    stop_losses: int = Field(..., ge=0)

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    """One point on the cumulative risk equity curve."""

    name: str = Field(..., description="'Start' or the ISO date of the day")
    value: float = Field(..., description="Cumulative risk multiple at end of day")

    model_config = {"frozen": True}


class WeekdayPerformance(BaseModel):
    """Performance for one weekday, Monday to Friday."""

    name: str = Field(..., description="Short day name, e.g. 'Mon'")
    day_index: int = Field(..., ge=1, le=5, description="1=Monday .. 5=Friday")
    trades: int = Field(..., ge=0, description="Trades taken (no-trade days excluded)")
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0, le=100)

    model_config = {"frozen": True}


def win_rate(wins: int, losses: int) -> float:
    """Percentage of wins among decided trades, ``0`` when there are none."""
    decided = wins + losses
    return (wins / decided) * 100 if decided > 0 else 0.0


def _taken(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    return [r for r in records if r.outcome is not Outcome.NO_TRADE]


def _decided(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    return [
        r for r in records
        if r.outcome in (Outcome.TAKE_PROFIT, Outcome.STOP_LOSS)
    ]


def summarize(records: Iterable[TradeRecord]) -> SummaryStats:
    """Compute headline statistics.

    Args:
        records: The full record collection.

    Returns:
        Summary statistics. For an empty collection every value is zero.
    """
    records = list(records)
    counts = {outcome: 0 for outcome in Outcome}
    for record in records:
        counts[record.outcome] += 1

    taken = _taken(records)
    total_trades = len(taken)
    wins = counts[Outcome.TAKE_PROFIT]
    losses = counts[Outcome.STOP_LOSS]
    total_risk = math.fsum(resolve_risk_multiple(r) for r in taken)

    return SummaryStats(
        total_trades=total_trades,
        wins=wins,
        losses=losses,
        break_evens=counts[Outcome.BREAK_EVEN],
        no_trade_days=counts[Outcome.NO_TRADE],
        win_rate=win_rate(wins, losses),
        total_risk_earned=float(total_risk),
        average_risk=(total_risk / total_trades) if total_trades > 0 else 0.0,
    )


def outcome_distribution(records: Iterable[TradeRecord]) -> list[OutcomeSlice]:
    """Count records per outcome, omitting outcomes that never occur."""
    counts = {outcome: 0 for outcome in OUTCOME_LABELS}
    for record in records:
        counts[record.outcome] += 1
    return [
        OutcomeSlice(outcome=outcome, name=label, value=counts[outcome])
        for outcome, label in OUTCOME_LABELS.items()
        if counts[outcome] > 0
    ]


def weekly_win_rate(records: Iterable[TradeRecord]) -> list[WeeklyWinRate]:
    """Win rate per calendar week, oldest week first.

    Only take profit and stop loss records contribute.
    """
    weeks: dict[str, dict[str, int]] = defaultdict(lambda: {"wins": 0, "losses": 0})
    for record in _decided(records):
        bucket = weeks[week_key(record)]
        if record.outcome is Outcome.TAKE_PROFIT:
            bucket["wins"] += 1
        else:
            bucket["losses"] += 1

    return [
        WeeklyWinRate(
            name=week,
            wins=data["wins"],
            losses=data["losses"],
            win_rate=win_rate(data["wins"], data["losses"]),
        )
        for week, data in sorted(weeks.items())
    ]


def daily_outcome_counts(records: Iterable[TradeRecord]) -> list[DailyOutcomeCount]:
    """Take profit / stop loss frequency per calendar day, oldest first."""
    days: dict[str, dict[str, int]] = defaultdict(lambda: {"tp": 0, "sl": 0})
    for record in _decided(records):
        bucket = days[day_key(record)]
        if record.outcome is Outcome.TAKE_PROFIT:
            bucket["tp"] += 1
        else:
            bucket["sl"] += 1

    return [
        DailyOutcomeCount(name=day, take_profits=data["tp"], stop_losses=data["sl"])
        for day, data in sorted(days.items())
    ]


def equity_curve(records: Iterable[TradeRecord]) -> list[EquityPoint]:
    """Cumulative risk multiple by calendar day.

    The first point is always ``Start`` at ``0``; each following point
    is the running total at the end of a day that had trades. Totals are
    exact sums (``math.fsum``), so the last point equals the summary's
    ``total_risk_earned`` bit for bit.
    """
    daily: dict[str, list[float]] = defaultdict(list)
    for record in _taken(records):
        daily[day_key(record)].append(resolve_risk_multiple(record))

    points = [EquityPoint(name=START_POINT, value=0.0)]
    so_far: list[float] = []
    for day in sorted(daily):
        so_far.extend(daily[day])
        points.append(EquityPoint(name=day, value=math.fsum(so_far)))
    return points


def weekday_performance(records: Iterable[TradeRecord]) -> list[WeekdayPerformance]:
    """Trades taken and win rate per weekday, Monday to Friday."""
    stats = {index: {"trades": 0, "wins": 0, "losses": 0} for index in range(7)}
    for record in _taken(records):
        bucket = stats[weekday_index(calendar_day(record))]
        bucket["trades"] += 1
        if record.outcome is Outcome.TAKE_PROFIT:
            bucket["wins"] += 1
        elif record.outcome is Outcome.STOP_LOSS:
            bucket["losses"] += 1

    return [
        WeekdayPerformance(
            name=DAY_NAMES[index][:3],
            day_index=index,
            trades=stats[index]["trades"],
            wins=stats[index]["wins"],
            losses=stats[index]["losses"],
            win_rate=win_rate(stats[index]["wins"], stats[index]["losses"]),
        )
        for index in WEEKDAY_INDICES
    ]
