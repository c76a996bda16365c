"""Trade history queries: filtering and ordering for display."""

from __future__ import annotations

import enum
from typing import Sequence

from .record import Trade


class ResultFilter(str, enum.Enum):
    ALL = "all"
    POSITIVE = "positive"
    NEGATIVE = "negative"


def filter_trades(
    trades: Sequence[Trade],
    *,
    asset: str | None = None,
    result: ResultFilter = ResultFilter.ALL,
) -> list[Trade]:
    """Keep trades matching ``asset`` (exact, case-insensitive) and the
    sign of ``result``.  Breakeven trades only pass ``ResultFilter.ALL``."""
    selected = list(trades)
    if asset:
        wanted = asset.strip().upper()
        selected = [t for t in selected if t.asset == wanted]
    if result == ResultFilter.POSITIVE:
        selected = [t for t in selected if t.result > 0]
    elif result == ResultFilter.NEGATIVE:
        selected = [t for t in selected if t.result < 0]
    return selected


def most_recent_first(trades: Sequence[Trade]) -> list[Trade]:
    """Order by execution date and time, latest first."""
    return sorted(trades, key=lambda t: t.executed_at, reverse=True)


def distinct_assets(trades: Sequence[Trade]) -> list[str]:
    """Assets in first-encounter order, without duplicates."""
    return list(dict.fromkeys(t.asset for t in trades))
