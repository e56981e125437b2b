"""Analytics over the trade journal.

- risk: per-record realized risk multiple
- aggregation: summary statistics and time series
- view: filtering and sorting for the journal table
- dashboard: memoized bundle of the aggregate views
"""

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
from tradejournal.analytics.calendar import calendar_day, weekday_index
from tradejournal.analytics.dashboard import Dashboard, dashboard_for
from tradejournal.analytics.risk import resolve_risk_multiple
from tradejournal.analytics.view import (
    RANGE_BUCKETS,
    SORTABLE_FIELDS,
    RangeBucket,
    SortDirection,
    SortState,
    ViewFilters,
    apply_view,
)

__all__ = [
    # Risk
    "resolve_risk_multiple",
    # Calendar
    "calendar_day",
    "weekday_index",
    # Aggregation
    "DailyOutcomeCount",
    "EquityPoint",
    "OutcomeSlice",
    "SummaryStats",
    "WeekdayPerformance",
    "WeeklyWinRate",
    "daily_outcome_counts",
    "equity_curve",
    "outcome_distribution",
    "summarize",
    "weekday_performance",
    "weekly_win_rate",
    "Dashboard",
    "dashboard_for",
    # View
    "RANGE_BUCKETS",
    "SORTABLE_FIELDS",
    "RangeBucket",
    "SortDirection",
    "SortState",
    "ViewFilters",
    "apply_view",
]
