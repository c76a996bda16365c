"""Grouped performance breakdowns: by asset, entry reason and time of day.

Answers questions like "Which pair makes me money?", "Do breakout
entries work for me?" or "Am I better in the morning?".

Usage::

    breakdowns = compute_breakdowns(store.list())
    for row in breakdowns.by_reason:
        print(row.label, row.win_rate)
    print(breakdowns.best_period)

All groupings keep encounter order for equal sort keys.  Reason
grouping is multi-membership: a trade tagged with two reasons counts
in both groups.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Hashable, Iterable, Sequence, TypeVar

from .formatting import round_half_up
from .record import Trade, reason_label

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class TimePeriod(str, enum.Enum):
    """Fixed time-of-day buckets, in display order."""

    DAWN = "dawn"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Local-time hours, inclusive start, exclusive end
PERIODS = {
    TimePeriod.DAWN: (0, 6),
    TimePeriod.MORNING: (6, 12),
    TimePeriod.AFTERNOON: (12, 18),
    TimePeriod.EVENING: (18, 24),
}


def period_for_hour(hour: int) -> TimePeriod:
    """Return the bucket containing ``hour`` (0-23)."""
    for period, (start_h, end_h) in PERIODS.items():
        if start_h <= hour < end_h:
            return period
    raise ValueError(f"hour must be in 0-23, got {hour}")


# ---------------------------------------------------------------------- #
# Grouping                                                                #
# ---------------------------------------------------------------------- #

@dataclass
class _GroupStats:
    """Accumulator for one group."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    total: float = 0.0

    def record(self, trade: Trade) -> None:
        self.trades += 1
        self.total += float(trade.result)
        if trade.result > 0:
            self.wins += 1
        elif trade.result < 0:
            self.losses += 1


def group_trades(
    pairs: Iterable[tuple[K, Trade]],
    seed: Iterable[K] = (),
) -> dict[K, _GroupStats]:
    """Accumulate ``(key, trade)`` pairs into per-key stats.

    Keys appear in first-encounter order, after any ``seed`` keys.
    """
    groups: dict[K, _GroupStats] = {key: _GroupStats() for key in seed}
    for key, trade in pairs:
        groups.setdefault(key, _GroupStats()).record(trade)
    return groups


def _reason_pairs(trades: Iterable[Trade]) -> Iterable[tuple[str, Trade]]:
    """Fan out each trade into one pair per reason tag."""
    for trade in trades:
        for reason in trade.reasons:
            yield reason, trade


def _pct(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


# ---------------------------------------------------------------------- #
# Results                                                                 #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class AssetPerformance:
    asset: str
    total: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReasonPerformance:
    """Per-reason results.

    ``count`` is wins + losses (breakeven trades excluded) and drives
    ``win_rate``; ``trades`` counts every member trade.
    """

    reason: str
    wins: int
    losses: int
    total: float
    count: int
    trades: int
    win_rate: float

    @property
    def label(self) -> str:
        return reason_label(self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "label": self.label}


@dataclass(frozen=True)
class PeriodPerformance:
    """Per-bucket results.  ``count`` includes breakeven trades."""

    period: TimePeriod
    wins: int
    losses: int
    total: float
    count: int
    win_rate: float
    is_best: bool = False

    @property
    def label(self) -> str:
        return self.period.label

    @property
    def display_win_rate(self) -> int:
        return int(round_half_up(self.win_rate, 0))

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["period"] = self.period.value
        d["label"] = self.label
        d["display_win_rate"] = self.display_win_rate
        return d


@dataclass(frozen=True)
class Breakdowns:
    by_asset: list[AssetPerformance]
    by_reason: list[ReasonPerformance]
    by_time_of_day: list[PeriodPerformance]
    best_period: TimePeriod | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "by_asset": [a.to_dict() for a in self.by_asset],
            "by_reason": [r.to_dict() for r in self.by_reason],
            "by_time_of_day": [p.to_dict() for p in self.by_time_of_day],
            "best_period": self.best_period.value if self.best_period else None,
        }


# ---------------------------------------------------------------------- #
# Breakdowns                                                              #
# ---------------------------------------------------------------------- #

def asset_groups(trades: Sequence[Trade]) -> list[AssetPerformance]:
    """Per-asset totals in first-encounter order."""
    groups = group_trades((t.asset, t) for t in tuple(trades))
    return [
        AssetPerformance(asset=asset, total=g.total, count=g.trades)
        for asset, g in groups.items()
    ]


def by_asset(trades: Sequence[Trade]) -> list[AssetPerformance]:
    """Per-asset totals, most profitable first."""
    return sorted(asset_groups(trades), key=lambda a: a.total, reverse=True)


def reason_groups(trades: Sequence[Trade]) -> list[ReasonPerformance]:
    """Per-reason results in first-encounter order."""
    groups = group_trades(_reason_pairs(tuple(trades)))
    rows = []
    for reason, g in groups.items():
        count = g.wins + g.losses
        rows.append(ReasonPerformance(
            reason=reason,
            wins=g.wins,
            losses=g.losses,
            total=g.total,
            count=count,
            trades=g.trades,
            win_rate=_pct(g.wins, count),
        ))
    return rows


def by_reason(trades: Sequence[Trade]) -> list[ReasonPerformance]:
    """Per-reason results, highest win rate first."""
    return sorted(reason_groups(trades), key=lambda r: r.win_rate, reverse=True)


def period_groups(trades: Sequence[Trade]) -> list[PeriodPerformance]:
    """All four time buckets in fixed order, without a best marker."""
    groups = group_trades(
        ((period_for_hour(t.hour), t) for t in tuple(trades)),
        seed=PERIODS,
    )
    return [
        PeriodPerformance(
            period=period,
            wins=g.wins,
            losses=g.losses,
            total=g.total,
            count=g.trades,
            win_rate=_pct(g.wins, g.trades),
        )
        for period, g in groups.items()
    ]


def best_of(rows: Iterable[Any], *, metric: str, min_count: int) -> Any | None:
    """First row with the strictly highest ``metric`` among rows with
    ``count >= min_count``; ``None`` when no row qualifies."""
    best = None
    for row in rows:
        if row.count < min_count:
            continue
        if best is None or getattr(row, metric) > getattr(best, metric):
            best = row
    return best


def by_time_of_day(trades: Sequence[Trade]) -> list[PeriodPerformance]:
    """Time buckets in Dawn→Evening order with the best one flagged.

    The best bucket has the highest win rate among non-empty buckets;
    on ties the earlier bucket wins.
    """
    rows = period_groups(trades)
    best = best_of(rows, metric="win_rate", min_count=1)
    return [
        replace(row, is_best=row is best)
        for row in rows
    ]


def compute_breakdowns(trades: Sequence[Trade]) -> Breakdowns:
    """Run all three breakdowns over one snapshot."""
    trades = tuple(trades)
    periods = by_time_of_day(trades)
    best = next((p.period for p in periods if p.is_best), None)
    breakdowns = Breakdowns(
        by_asset=by_asset(trades),
        by_reason=by_reason(trades),
        by_time_of_day=periods,
        best_period=best,
    )
    logger.debug(
        "Breakdowns over %d trades: %d assets, %d reasons, best_period=%s",
        len(trades), len(breakdowns.by_asset), len(breakdowns.by_reason), best,
    )
    return breakdowns
