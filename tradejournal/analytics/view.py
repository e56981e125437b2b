"""Filter and sort pipeline for the tabular journal view.

The view only decides which records are listed and in which order. It
never feeds the aggregate statistics, which always use the full journal.
"""

import unicodedata
from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from tradejournal.analytics.calendar import calendar_day, weekday_index
from tradejournal.models import Direction, Outcome, TradeRecord


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


SORTABLE_FIELDS = [
    "date",
    "outcome",
    "direction",
    "stop_loss_distance",
    "take_profit_distance",
    "realized_risk_multiple",
    "consolidation_range_size",
    "activation_time",
    "stop_sweep_notes",
    "general_notes",
    "id",
]


class RangeBucket(BaseModel):
    """Half-open consolidation range bucket ``[lower, upper)``."""

    lower: float = Field(..., ge=0)
    upper: Optional[float] = Field(default=None, description="None means unbounded")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "RangeBucket":
        if self.upper is not None and self.upper <= self.lower:
            raise ValueError("upper bound must be greater than lower bound")
        return self

    @property
    def label(self) -> str:
        if self.upper is None:
            return f"{self.lower:g}+"
        return f"{self.lower:g}-{self.upper:g}"

    def contains(self, value: Optional[float]) -> bool:
        if value is None:
            return False
        if value < self.lower:
            return False
        return self.upper is None or value < self.upper

    @classmethod
    def parse(cls, text: str) -> Optional["RangeBucket"]:
        """Parse ``"5-10"``, ``"20-"`` or ``"20+"``; ``"all"`` means no bucket.

        Raises:
            ValueError: If the text is not a recognizable bucket.
        """
        text = text.strip()
        if text.lower() == "all" or not text:
            return None
        if text.endswith("+"):
            return cls(lower=float(text[:-1]))
        lower, sep, upper = text.partition("-")
        if not sep:
            raise ValueError(f"Invalid range bucket: {text!r}")
        return cls(lower=float(lower), upper=float(upper) if upper else None)


RANGE_BUCKETS = [
    RangeBucket(lower=0, upper=5),
    RangeBucket(lower=5, upper=10),
    RangeBucket(lower=10, upper=20),
    RangeBucket(lower=20),
]


class ViewFilters(BaseModel):
    """User-selected predicates. Unset fields do not restrict anything."""

    start_date: Optional[date_type] = Field(default=None, description="Inclusive")
    end_date: Optional[date_type] = Field(default=None, description="Inclusive")
    outcome: Optional[Outcome] = None
    direction: Optional[Direction] = None
    range_bucket: Optional[RangeBucket] = None
    weekday: Optional[int] = Field(default=None, ge=1, le=5, description="1=Monday .. 5=Friday")

    model_config = {"frozen": True}

    def matches(self, record: TradeRecord) -> bool:
        day = calendar_day(record)
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        if self.outcome is not None and record.outcome is not self.outcome:
            return False
        if self.direction is not None and getattr(record, "direction", None) is not self.direction:
            return False
        if self.range_bucket is not None and not self.range_bucket.contains(
            record.consolidation_range_size
        ):
            return False
        if self.weekday is not None and weekday_index(day) != self.weekday:
            return False
        return True


def filter_records(records: Iterable[TradeRecord], filters: ViewFilters) -> list[TradeRecord]:
    return [record for record in records if filters.matches(record)]


def _sort_value(record: TradeRecord, key: str) -> Any:
    return getattr(record, key, None)


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (int, float)):
        return value
    return unicodedata.normalize("NFC", str(value))


def sort_records(
    records: Iterable[TradeRecord],
    key: str,
    direction: SortDirection = SortDirection.ASCENDING,
) -> list[TradeRecord]:
    """Stable single-key sort with absent values last in either direction.

    Raises:
        ValueError: If ``key`` is not a sortable field.
    """
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {key!r}. Choose from: {', '.join(SORTABLE_FIELDS)}")

    present = []
    missing = []
    for record in records:
        if _sort_value(record, key) is None:
            missing.append(record)
        else:
            present.append(record)

    present.sort(
        key=lambda r: _comparable(_sort_value(r, key)),
        reverse=SortDirection(direction) is SortDirection.DESCENDING,
    )
    return present + missing


def apply_view(
    records: Iterable[TradeRecord],
    filters: Optional[ViewFilters] = None,
    sort_key: str = "date",
    sort_direction: SortDirection = SortDirection.DESCENDING,
) -> list[TradeRecord]:
    """Filter then sort records for display.

    Args:
        records: The full record collection.
        filters: Predicates to apply. ``None`` keeps every record.
        sort_key: Field to order by.
        sort_direction: Ascending or descending.

    Returns:
        A new list; the input is left untouched.
    """
    selected = filter_records(records, filters or ViewFilters())
    return sort_records(selected, sort_key, sort_direction)


class SortState(BaseModel):
    """Current ordering of the table.

    Requesting the current key again flips the direction; requesting a
    new key starts ascending.
    """

    key: str = "date"
    direction: SortDirection = SortDirection.DESCENDING

    model_config = {"frozen": True}

    def request(self, key: str) -> "SortState":
        if key == self.key:
            flipped = (
                SortDirection.ASCENDING
                if self.direction is SortDirection.DESCENDING
                else SortDirection.DESCENDING
            )
            return SortState(key=key, direction=flipped)
        return SortState(key=key, direction=SortDirection.ASCENDING)
