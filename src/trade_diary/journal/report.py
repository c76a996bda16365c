"""Combined analysis report: stats, breakdowns and insights in one pass.

Usage::

    report = build_report(store.list())
    print(report.stats.win_rate)
    print("\\n".join(report.summary_lines()))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from trade_diary.core.config import Settings

from .breakdown import Breakdowns, compute_breakdowns
from .formatting import (
    CurrencyFormatter,
    currency_formatter,
    format_currency,
    format_profit_factor,
    format_rate,
)
from .insights import Insight, InsightGenerator
from .record import Trade
from .stats import Stats, compute_stats


@dataclass(frozen=True)
class JournalReport:
    stats: Stats
    breakdowns: Breakdowns
    insights: list[Insight]

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            **self.breakdowns.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
        }

    def summary_lines(self, currency: CurrencyFormatter = format_currency) -> list[str]:
        """Plain-text rendering for terminals."""
        s = self.stats
        lines = [
            f"Trades: {s.total_trades}  Total: {currency(s.total_profit)}",
            f"Win rate: {format_rate(s.win_rate, 1)}  "
            f"({s.wins} wins / {s.losses} losses)",
            f"Avg win: {currency(s.avg_win)}  Avg loss: {currency(s.avg_loss)}",
            f"Profit factor: {format_profit_factor(s.profit_factor)}",
        ]

        if self.breakdowns.by_asset:
            lines.append("")
            lines.append("By asset:")
            for a in self.breakdowns.by_asset:
                lines.append(f"  {a.asset:<10} {currency(a.total):>16}  {a.count} trades")

        if self.breakdowns.by_reason:
            lines.append("")
            lines.append("By entry reason:")
            for r in self.breakdowns.by_reason:
                lines.append(
                    f"  {r.label:<18} {format_rate(r.win_rate, 1):>7}  "
                    f"{currency(r.total):>16}  {r.count} trades"
                )

        lines.append("")
        lines.append("By time of day:")
        for p in self.breakdowns.by_time_of_day:
            marker = " *" if p.is_best else ""
            lines.append(f"  {p.label:<10} {p.display_win_rate:>3}%  {p.count} trades{marker}")

        lines.append("")
        lines.append("Insights:")
        for i in self.insights:
            lines.append(f"  [{i.severity.value}] {i.title}")
            lines.append(f"    {i.text}")
        return lines


def build_report(
    trades: Sequence[Trade],
    settings: Settings | None = None,
) -> JournalReport:
    """Compute every analysis over a single snapshot."""
    trades = tuple(trades)
    generator = (
        InsightGenerator(settings.insights, currency=currency_formatter(settings.display))
        if settings is not None
        else InsightGenerator()
    )
    stats = compute_stats(trades)
    return JournalReport(
        stats=stats,
        breakdowns=compute_breakdowns(trades),
        insights=generator.generate(trades, stats),
    )
