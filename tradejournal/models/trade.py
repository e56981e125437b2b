"""Trade record data models.

A record is a tagged variant over its outcome: days where a position was
opened (``TakenTrade``) carry direction and sizing fields, while
``NoTradeDay`` records carry only the fields common to every entry.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Iterable, Optional, Union

from pydantic import (
    BaseModel,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)


class Outcome(str, Enum):
    """How a journal entry ended."""

    TAKE_PROFIT = "TP"
    STOP_LOSS = "SL"
    BREAK_EVEN = "BE"
    NO_TRADE = "NO_TRADE"


class Direction(str, Enum):
    """Position direction."""

    LONG = "LONG"
    SHORT = "SHORT"


class AttachmentLabel(str, Enum):
    """Fixed set of image slots on a record."""

    BEFORE = "before"
    AFTER = "after"
    BROKER_SCREEN = "broker-screen"

    @property
    def display_name(self) -> str:
        """Human readable label used in prompts and tables."""
        return {
            AttachmentLabel.BEFORE: "Before",
            AttachmentLabel.AFTER: "After",
            AttachmentLabel.BROKER_SCREEN: "Broker Screen",
        }[self]


# Older exports used the broker's name for the screenshot slot.
_LEGACY_LABELS = {"metatrader": AttachmentLabel.BROKER_SCREEN.value}

_DATA_URI = re.compile(r"data:(?P<mime>[^;,]+);base64,(?P<data>.+)", re.DOTALL)


def parse_data_uri(uri: str) -> Optional[tuple[str, str]]:
    """Split a base64 data URI into ``(mime_type, data)``.

    Returns:
        None if the string is not a base64 data URI.
    """
    match = _DATA_URI.fullmatch(uri.strip())
    if not match:
        return None
    return match.group("mime"), match.group("data")


class _RecordBase(BaseModel):
    """Fields shared by every journal entry."""

    id: str = Field(..., min_length=1, description="Unique record identifier")
    date: datetime = Field(..., description="When the entry was logged")
    consolidation_range_size: Optional[float] = Field(
        default=None, ge=0, description="Size of the consolidation range before the breakout"
    )
    general_notes: str = Field(default="", description="Free-form trader notes")
    attachments: dict[AttachmentLabel, str] = Field(
        default_factory=dict, description="Image payloads (data URIs) keyed by label"
    )

    model_config = {"frozen": True}

    @field_validator("attachments", mode="before")
    @classmethod
    def _normalize_attachments(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                _LEGACY_LABELS.get(key, key): data
                for key, data in value.items()
                if data
            }
        return value

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)


class TakenTrade(_RecordBase):
    """A day where a position was opened and closed."""

    outcome: Outcome = Field(..., description="TP, SL or BE")
    direction: Optional[Direction] = Field(default=None, description="Position direction")
    stop_loss_distance: Optional[float] = Field(
        default=None, gt=0, description="Stop loss distance in price units"
    )
    take_profit_distance: Optional[float] = Field(
        default=None, gt=0, description="Take profit distance in price units"
    )
    realized_risk_multiple: Optional[float] = Field(
        default=None, description="User supplied R/R override"
    )
    activation_time: Optional[str] = Field(
        default=None,
        pattern=r"^\d{1,2}:\d{2}$",
        description="Local clock time the entry triggered (e.g. '10:30')",
    )
    stop_sweep_notes: Optional[str] = Field(
        default=None, description="Notes on the candle that swept the stop"
    )

    @field_validator("outcome")
    @classmethod
    def _reject_no_trade(cls, value: Outcome) -> Outcome:
        if value is Outcome.NO_TRADE:
            raise ValueError("a taken trade cannot have outcome NO_TRADE")
        return value


class NoTradeDay(_RecordBase):
    """A day where no position was opened.

    Directional and sizing fields found in the input are ignored.
    """

    outcome: Outcome = Field(default=Outcome.NO_TRADE, description="Always NO_TRADE")

    @field_validator("outcome")
    @classmethod
    def _require_no_trade(cls, value: Outcome) -> Outcome:
        if value is not Outcome.NO_TRADE:
            raise ValueError("a no-trade day must have outcome NO_TRADE")
        return value


def _outcome_tag(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        raw = value.get("outcome")
    else:
        raw = getattr(value, "outcome", None)
    try:
        outcome = Outcome(raw)
    except ValueError:
        return None
    return "no_trade" if outcome is Outcome.NO_TRADE else "taken"


TradeRecord = Annotated[
    Union[
        Annotated[TakenTrade, Tag("taken")],
        Annotated[NoTradeDay, Tag("no_trade")],
    ],
    Discriminator(_outcome_tag),
]

_record_adapter = TypeAdapter(TradeRecord)


def parse_record(data: Any) -> TradeRecord:
    """Validate a raw mapping into the matching record variant.

    Raises:
        pydantic.ValidationError: If the data is not a valid record.
    """
    return _record_adapter.validate_python(data)


def parse_records(items: Iterable[Any]) -> list[TradeRecord]:
    """Validate a sequence of raw mappings."""
    return [parse_record(item) for item in items]
