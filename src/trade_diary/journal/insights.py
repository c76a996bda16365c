"""Rule-based insights over the journal.

A fixed battery of heuristics looks at the whole trade history and
emits short, human-readable observations:

1. Best entry reason (win rate >= 50% over 2+ trades)
2. Best time of day (win rate >= 50% over 2+ trades)
3. Tight stops (trades with a below-average stop distance win >= 55%,
   or warning when they win < 40%)
4. Best asset (highest total profit over 2+ trades, if positive)
5. Overall consistency (win rate >= 55%, or warning below 40%)
6. Profit factor quality (>= 1.5 over 5+ trades)

Each rule is an independent function of an ``InsightContext`` that
returns an ``Insight`` or ``None``.  Rules never see each other's
output; results keep rule order.  When nothing fires a single neutral
"collecting data" insight is returned instead of an empty list.

Usage::

    insights = generate_insights(trades, stats)
    for insight in insights:
        print(insight.severity, insight.title)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from trade_diary.core.config import InsightConfig

from .breakdown import (
    AssetPerformance,
    PeriodPerformance,
    ReasonPerformance,
    asset_groups,
    best_of,
    period_groups,
    reason_groups,
)
from .formatting import (
    CurrencyFormatter,
    format_currency,
    format_profit_factor,
    format_rate,
    round_half_up,
)
from .record import Trade
from .stats import Stats, compute_stats

logger = logging.getLogger(__name__)


class Severity(str, enum.Enum):
    POSITIVE = "positive"
    WARNING = "warning"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Insight:
    """A single observation about the journal."""

    code: str           # stable rule identifier, e.g. "best_reason"
    icon: str           # icon name for the presentation layer
    severity: Severity
    title: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["severity"] = self.severity.value
        return d


COLLECTING_DATA = Insight(
    code="collecting_data",
    icon="info",
    severity=Severity.NEUTRAL,
    title="Collecting data...",
    text=(
        "Keep journaling your trades to receive personalised insights "
        "about your trading."
    ),
)


@dataclass(frozen=True)
class InsightContext:
    """Everything a rule may look at.

    Group lists are in first-encounter (or fixed bucket) order so that
    "first wins on ties" is well defined.
    """

    trades: tuple[Trade, ...]
    stats: Stats
    reasons: list[ReasonPerformance]
    periods: list[PeriodPerformance]
    assets: list[AssetPerformance]
    config: InsightConfig
    currency: CurrencyFormatter


def _whole_pct(rate: float) -> int:
    return int(round_half_up(rate, 0))


# ---------------------------------------------------------------------- #
# Rules                                                                   #
# ---------------------------------------------------------------------- #

def best_reason_rule(ctx: InsightContext) -> Insight | None:
    cfg = ctx.config
    best = best_of(ctx.reasons, metric="win_rate", min_count=cfg.min_group_trades)
    if best is None or best.win_rate < cfg.best_reason_min_win_rate:
        return None
    return Insight(
        code="best_reason",
        icon="zap",
        severity=Severity.POSITIVE,
        title="Winning Pattern Identified",
        text=(
            f'When you enter on "{best.label}", your win rate is '
            f"{_whole_pct(best.win_rate)}%. Keep using this criterion!"
        ),
    )


def best_period_rule(ctx: InsightContext) -> Insight | None:
    # Stricter than the breakdown's best-period marker (count > 0).
    cfg = ctx.config
    best = best_of(ctx.periods, metric="win_rate", min_count=cfg.min_group_trades)
    if best is None or best.win_rate < cfg.best_period_min_win_rate:
        return None
    return Insight(
        code="best_period",
        icon="clock",
        severity=Severity.POSITIVE,
        title="Best Trading Period",
        text=(
            f"Your trades in the {best.period.value} have a "
            f"{_whole_pct(best.win_rate)}% win rate. "
            "Consider focusing on this period."
        ),
    )


def stop_distance_rule(ctx: InsightContext) -> Insight | None:
    cfg = ctx.config
    trades = ctx.trades
    if len(trades) < cfg.stop_min_trades:
        return None

    avg_distance = sum((t.stop_distance for t in trades), Decimal("0")) / len(trades)
    tight = [t for t in trades if t.stop_distance < avg_distance]
    if len(tight) < cfg.stop_min_subset:
        return None

    wins = sum(1 for t in tight if t.result > 0)
    win_rate = wins / len(tight) * 100

    if win_rate >= cfg.tight_stop_good_win_rate:
        return Insight(
            code="tight_stops",
            icon="shield",
            severity=Severity.POSITIVE,
            title="Tight Stops Work",
            text=(
                f"Trades with a stop loss tighter than average win "
                f"{_whole_pct(win_rate)}% of the time. "
                "Tighter stops seem to work better for you."
            ),
        )
    if win_rate < cfg.tight_stop_poor_win_rate:
        return Insight(
            code="tight_stops_warning",
            icon="alert-triangle",
            severity=Severity.WARNING,
            title="Watch Your Stops",
            text=(
                f"Trades with very tight stops win only "
                f"{_whole_pct(win_rate)}% of the time. "
                "Consider giving your trades more room."
            ),
        )
    return None


def best_asset_rule(ctx: InsightContext) -> Insight | None:
    best = best_of(ctx.assets, metric="total", min_count=ctx.config.min_group_trades)
    if best is None or best.total <= 0:
        return None
    return Insight(
        code="best_asset",
        icon="trophy",
        severity=Severity.POSITIVE,
        title="Your Best Asset",
        text=(
            f"{best.asset} is your most profitable asset with "
            f"{ctx.currency(best.total)} profit over {best.count} trades."
        ),
    )


def consistency_rule(ctx: InsightContext) -> Insight | None:
    cfg = ctx.config
    stats = ctx.stats
    if stats.win_rate >= cfg.consistency_good_win_rate:
        return Insight(
            code="consistency",
            icon="trending-up",
            severity=Severity.POSITIVE,
            title="Great Consistency!",
            text=(
                f"With a {format_rate(stats.win_rate, 1)} win rate you are "
                "above average. Keep following your plan!"
            ),
        )
    if (
        stats.win_rate < cfg.consistency_poor_win_rate
        and stats.total_trades >= cfg.consistency_min_trades
    ):
        return Insight(
            code="review_strategy",
            icon="alert-circle",
            severity=Severity.WARNING,
            title="Review Your Strategy",
            text=(
                f"A {format_rate(stats.win_rate, 1)} win rate is below "
                "ideal. Consider reviewing your entry criteria."
            ),
        )
    return None


def profit_factor_rule(ctx: InsightContext) -> Insight | None:
    cfg = ctx.config
    stats = ctx.stats
    if (
        stats.profit_factor < cfg.profit_factor_good
        or stats.total_trades < cfg.profit_factor_min_trades
    ):
        return None
    return Insight(
        code="profit_factor",
        icon="star",
        severity=Severity.POSITIVE,
        title="Excellent Risk Management",
        text=(
            f"A profit factor of {format_profit_factor(stats.profit_factor)} "
            "means your gains comfortably outweigh your losses. Great work!"
        ),
    )


Rule = Callable[[InsightContext], Optional[Insight]]

RULES: tuple[Rule, ...] = (
    best_reason_rule,
    best_period_rule,
    stop_distance_rule,
    best_asset_rule,
    consistency_rule,
    profit_factor_rule,
)


# ---------------------------------------------------------------------- #
# Generator                                                               #
# ---------------------------------------------------------------------- #

class InsightGenerator:
    """Evaluates the insight rules against a trade snapshot.

    Parameters
    ----------
    config : InsightConfig | None
        Rule thresholds.  Defaults to ``InsightConfig()``.
    currency : CurrencyFormatter
        Formats money amounts inside insight texts.
        Default ``format_currency``.
    """

    def __init__(
        self,
        config: InsightConfig | None = None,
        *,
        currency: CurrencyFormatter = format_currency,
    ) -> None:
        self._config = config or InsightConfig()
        self._currency = currency

    def context(self, trades: Sequence[Trade], stats: Stats | None = None) -> InsightContext:
        trades = tuple(trades)
        return InsightContext(
            trades=trades,
            stats=stats if stats is not None else compute_stats(trades),
            reasons=reason_groups(trades),
            periods=period_groups(trades),
            assets=asset_groups(trades),
            config=self._config,
            currency=self._currency,
        )

    def generate(self, trades: Sequence[Trade], stats: Stats | None = None) -> list[Insight]:
        """Return fired insights in rule order, or the placeholder."""
        ctx = self.context(trades, stats)
        insights = [i for i in (rule(ctx) for rule in RULES) if i is not None]
        if not insights:
            return [COLLECTING_DATA]
        logger.debug("Generated %d insights: %s", len(insights), [i.code for i in insights])
        return insights


def generate_insights(trades: Sequence[Trade], stats: Stats | None = None) -> list[Insight]:
    """Evaluate the rules with default thresholds."""
    return InsightGenerator().generate(trades, stats)
