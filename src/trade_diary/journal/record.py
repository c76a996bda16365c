"""Trade record: the core data model.

A Trade captures one discrete trading operation as the user journaled
it: what was traded, where the entry, stop and target sat, how many
lots, the realised result and why the trade was taken.

Records are immutable.  Editing a trade means building a new record
with the same ``id`` and swapping it into the store wholesale.

The JSON shape (camelCase keys, ``YYYY-MM-DD`` dates, ``HH:MM`` times)
is the persistence contract of the journal file.
"""

from __future__ import annotations

import datetime as dt
import enum
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class OperationType(str, enum.Enum):
    """Direction of the operation."""

    BUY = "buy"
    SELL = "sell"


class EntryReason(str, enum.Enum):
    """Known entry-rationale tags.

    Trades may carry tags outside this vocabulary; analytics treat
    every tag as an opaque label.
    """

    REJECTION = "rejection"
    ZONE_TOUCH = "zone_touch"
    BREAKOUT = "breakout"
    REVERSAL = "reversal"
    TREND_FOLLOW = "trend_follow"
    NEWS_EVENT = "news_event"

    @property
    def label(self) -> str:
        return _REASON_LABELS[self]


_REASON_LABELS = {
    EntryReason.REJECTION: "Price rejection",
    EntryReason.ZONE_TOUCH: "Zone touch",
    EntryReason.BREAKOUT: "Breakout",
    EntryReason.REVERSAL: "Reversal",
    EntryReason.TREND_FOLLOW: "Trend following",
    EntryReason.NEWS_EVENT: "News/Event",
}


def reason_label(tag: str) -> str:
    """Human label for a reason tag; unknown tags are shown as-is."""
    try:
        return EntryReason(tag).label
    except ValueError:
        return tag


class TradeOutcome(str, enum.Enum):
    """Win / loss / break-even classification."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Trade(BaseModel):
    """One journaled trading operation.

    Parameters
    ----------
    id : str
        Opaque identifier, stable across edits (UUID by default).
    asset : str
        Traded symbol, normalised to upper case (e.g. ``"EURUSD"``).
    result : Decimal
        Realised profit (positive) or loss (negative) in account currency.
    reasons : tuple[str, ...]
        Entry-rationale tags, usually ``EntryReason`` values.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    operation_type: OperationType
    asset: str
    lots: Decimal
    entry_price: Decimal
    stop_loss: Decimal
    take_profit: Decimal
    result: Decimal
    reasons: tuple[str, ...] = ()
    description: str = ""
    date: dt.date
    time: dt.time
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    @field_validator("asset")
    @classmethod
    def normalise_asset(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("reasons", mode="before")
    @classmethod
    def coerce_reasons(cls, v: object) -> object:
        # Enum members collapse to their tag string.
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(r.value if isinstance(r, EntryReason) else r for r in v)
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()

    @field_serializer("lots", "entry_price", "stop_loss", "take_profit", "result", when_used="json")
    def _decimal_to_number(self, v: Decimal) -> float:
        return float(v)

    @field_serializer("time", when_used="json")
    def _time_to_hhmm(self, v: dt.time) -> str:
        return v.strftime("%H:%M")

    # ------------------------------------------------------------------ #
    # Computed properties                                                  #
    # ------------------------------------------------------------------ #

    @property
    def outcome(self) -> TradeOutcome:
        if self.result > 0:
            return TradeOutcome.WIN
        if self.result < 0:
            return TradeOutcome.LOSS
        return TradeOutcome.BREAKEVEN

    @property
    def hour(self) -> int:
        """Hour of day (0-23) the trade was executed."""
        return self.time.hour

    @property
    def stop_distance(self) -> Decimal:
        """Absolute distance between entry and stop loss."""
        return abs(self.entry_price - self.stop_loss)

    @property
    def executed_at(self) -> dt.datetime:
        """Naive local datetime of execution."""
        return dt.datetime.combine(self.date, self.time)

    # ------------------------------------------------------------------ #
    # Serialisation                                                        #
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict:
        """Export in the journal file's JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
