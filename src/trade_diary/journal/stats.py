"""Aggregate performance statistics over a set of trades.

Usage::

    stats = compute_stats(store.list())
    print(stats.win_rate, stats.profit_factor)

``profit_factor`` is ``math.inf`` (``PROFIT_FACTOR_UNBOUNDED``) when
there are winning trades but no losses.  That value is kept as-is all
the way to the presentation layer; ``to_dict`` renders it as the
string ``"unbounded"`` since JSON has no infinity.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from .record import Trade

logger = logging.getLogger(__name__)

PROFIT_FACTOR_UNBOUNDED = math.inf


@dataclass(frozen=True)
class Stats:
    """Overall performance of a trade set.  Rates are percentages."""

    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    breakeven: int = 0
    win_rate: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    total_win_amount: float = 0.0
    total_loss_amount: float = 0.0
    profit_factor: float = 0.0
    total_profit: float = 0.0

    @property
    def profit_factor_unbounded(self) -> bool:
        return math.isinf(self.profit_factor)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.profit_factor_unbounded:
            d["profit_factor"] = "unbounded"
        return d


def profit_factor(total_win_amount: float, total_loss_amount: float) -> float:
    """Gross wins over gross losses, unbounded when nothing was lost."""
    if total_loss_amount > 0:
        return total_win_amount / total_loss_amount
    return PROFIT_FACTOR_UNBOUNDED if total_win_amount > 0 else 0.0


def compute_stats(trades: Sequence[Trade]) -> Stats:
    """Compute win/loss counts, averages, profit factor and total profit."""
    trades = tuple(trades)
    if not trades:
        return Stats()

    wins = [float(t.result) for t in trades if t.result > 0]
    losses = [abs(float(t.result)) for t in trades if t.result < 0]

    total_win_amount = sum(wins, 0.0)
    total_loss_amount = sum(losses, 0.0)

    stats = Stats(
        total_trades=len(trades),
        wins=len(wins),
        losses=len(losses),
        breakeven=len(trades) - len(wins) - len(losses),
        win_rate=len(wins) / len(trades) * 100,
        avg_win=total_win_amount / len(wins) if wins else 0.0,
        avg_loss=total_loss_amount / len(losses) if losses else 0.0,
        total_win_amount=total_win_amount,
        total_loss_amount=total_loss_amount,
        profit_factor=profit_factor(total_win_amount, total_loss_amount),
        total_profit=sum((float(t.result) for t in trades), 0.0),
    )
    logger.debug(
        "Stats over %d trades: win_rate=%.2f profit_factor=%s",
        stats.total_trades, stats.win_rate, stats.profit_factor,
    )
    return stats
