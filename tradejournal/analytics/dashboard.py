"""Memoized bundle of every aggregate view for one record collection."""

from functools import cached_property
from typing import Optional, Sequence

from tradejournal.analytics.aggregation import (
    DailyOutcomeCount,
    EquityPoint,
    OutcomeSlice,
    SummaryStats,
    WeekdayPerformance,
    WeeklyWinRate,
    daily_outcome_counts,
    equity_curve,
    outcome_distribution,
    summarize,
    weekday_performance,
    weekly_win_rate,
)
from tradejournal.models import TradeRecord


class Dashboard:
    """Aggregate views over a snapshot of the journal.

    Each view is computed on first access and reused afterwards.
    """

    def __init__(self, records: Sequence[TradeRecord]):
        self.records = tuple(records)

    @property
    def key(self) -> tuple[str, ...]:
        return tuple(record.id for record in self.records)

    @cached_property
    def summary(self) -> SummaryStats:
        return summarize(self.records)

    @cached_property
    def outcomes(self) -> list[OutcomeSlice]:
        return outcome_distribution(self.records)

    @cached_property
    def weekly(self) -> list[WeeklyWinRate]:
        return weekly_win_rate(self.records)

    @cached_property
    def daily(self) -> list[DailyOutcomeCount]:
        return daily_outcome_counts(self.records)

    @cached_property
    def equity(self) -> list[EquityPoint]:
        return equity_curve(self.records)

    @cached_property
    def weekdays(self) -> list[WeekdayPerformance]:
        return weekday_performance(self.records)


_last_dashboard: Optional[Dashboard] = None


def dashboard_for(records: Sequence[TradeRecord]) -> Dashboard:
    """Return a dashboard for ``records``, reusing the previous one if unchanged.

    Records are immutable and ids unique, so an identical id sequence
    means an identical collection.
    """
    global _last_dashboard

    key = tuple(record.id for record in records)
    if _last_dashboard is not None and _last_dashboard.key == key:
        return _last_dashboard
    _last_dashboard = Dashboard(records)
    return _last_dashboard
