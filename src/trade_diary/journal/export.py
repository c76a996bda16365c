"""Trade export: CSV/JSON output and periodic report generation.

Exports journaled trades in flat formats for spreadsheets and external
analysis, and summarises performance per day, ISO week or month.

Usage::

    exporter = TradeExporter()
    csv_str = exporter.to_csv(trades)
    json_str = exporter.to_json(trades)
    report = exporter.periodic_report(trades, period="monthly")
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections import defaultdict
from typing import Any, Sequence

from .formatting import round_half_up
from .record import Trade
from .stats import compute_stats

logger = logging.getLogger(__name__)

# Default CSV columns
_CSV_COLUMNS = [
    "id",
    "date",
    "time",
    "operation_type",
    "asset",
    "lots",
    "entry_price",
    "stop_loss",
    "take_profit",
    "result",
    "outcome",
    "reasons",
    "description",
]

PERIODS = ("daily", "weekly", "monthly")


class TradeExporter:
    """Export trades to CSV/JSON and generate periodic reports.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for aggregate figures.  Default 2.
    """

    def __init__(self, *, decimal_places: int = 2) -> None:
        self._dp = decimal_places

    # ------------------------------------------------------------------ #
    # CSV Export                                                           #
    # ------------------------------------------------------------------ #

    def to_csv(
        self,
        trades: Sequence[Trade],
        *,
        columns: list[str] | None = None,
    ) -> str:
        """Export trades as a CSV string with a header row."""
        cols = columns or _CSV_COLUMNS
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()

        for trade in trades:
            row = self._trade_to_row(trade)
            writer.writerow({c: row.get(c, "") for c in cols})

        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # JSON Export                                                          #
    # ------------------------------------------------------------------ #

    def to_json(
        self,
        trades: Sequence[Trade],
        *,
        indent: int = 2,
    ) -> str:
        """Export trades as a JSON list in the journal file's shape."""
        rows = [t.to_dict() for t in trades]
        return json.dumps(rows, indent=indent, ensure_ascii=False)

    # ------------------------------------------------------------------ #
    # Periodic Report                                                      #
    # ------------------------------------------------------------------ #

    def periodic_report(
        self,
        trades: Sequence[Trade],
        *,
        period: str = "daily",
    ) -> dict[str, Any]:
        """Generate a periodic performance summary.

        Parameters
        ----------
        trades : Sequence[Trade]
            Trades to analyse.
        period : str
            Grouping period: ``"daily"``, ``"weekly"``, or ``"monthly"``.

        Returns
        -------
        dict
            ``period`` : str
            ``buckets`` : list of dicts with per-period stats, oldest first
            ``totals`` : overall summary across all periods
        """
        if period not in PERIODS:
            raise ValueError(f"period must be one of {PERIODS}, got {period!r}")
        trades = tuple(trades)
        buckets: dict[str, list[Trade]] = defaultdict(list)
        for trade in trades:
            buckets[self._period_key(trade, period)].append(trade)

        bucket_summaries = [
            self._group_stats(key, buckets[key]) for key in sorted(buckets)
        ]

        totals = self._group_stats("all", trades)
        totals.pop("period_key", None)

        logger.debug("Periodic %s report: %d buckets", period, len(bucket_summaries))
        return {
            "period": period,
            "buckets": bucket_summaries,
            "totals": totals,
        }

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _trade_to_row(self, trade: Trade) -> dict[str, Any]:
        """Convert a Trade to a flat dict for export."""
        return {
            "id": trade.id,
            "date": trade.date.isoformat(),
            "time": trade.time.strftime("%H:%M"),
            "operation_type": trade.operation_type.value,
            "asset": trade.asset,
            "lots": str(trade.lots),
            "entry_price": str(trade.entry_price),
            "stop_loss": str(trade.stop_loss),
            "take_profit": str(trade.take_profit),
            "result": str(trade.result),
            "outcome": trade.outcome.value,
            "reasons": ",".join(trade.reasons),
            "description": trade.description,
        }

    def _period_key(self, trade: Trade, period: str) -> str:
        """Get the period bucket key for a trade."""
        d = trade.date
        if period == "weekly":
            iso = d.isocalendar()
            return f"{iso[0]}-W{iso[1]:02d}"
        if period == "monthly":
            return d.strftime("%Y-%m")
        return d.isoformat()

    def _group_stats(self, key: str, group: Sequence[Trade]) -> dict[str, Any]:
        """Aggregate statistics for a group of trades."""
        dp = self._dp
        stats = compute_stats(group)
        results = [float(t.result) for t in group]
        pf = "unbounded" if stats.profit_factor_unbounded else round_half_up(stats.profit_factor, dp)

        return {
            "period_key": key,
            "trades": stats.total_trades,
            "wins": stats.wins,
            "losses": stats.losses,
            "win_rate": round_half_up(stats.win_rate, dp),
            "total_pnl": round_half_up(stats.total_profit, dp),
            "avg_pnl": round_half_up(stats.total_profit / len(group), dp) if group else 0.0,
            "profit_factor": pf,
            "best_trade": round_half_up(max(results), dp) if results else 0.0,
            "worst_trade": round_half_up(min(results), dp) if results else 0.0,
        }
