"""Trade Journal & Analytics.

Turns the journaled trade history into performance statistics,
grouped breakdowns and rule-based insights.  Every analysis is a pure
function of an immutable snapshot of trades.

Key components
--------------
Trade             Immutable record of one journaled operation
ITradeStore       Store protocol (memory and JSON-file implementations)
compute_stats     Win rate, averages, profit factor, total profit
compute_breakdowns  By asset, by entry reason, by time of day
InsightGenerator  Heuristic rules producing prioritised observations
build_report      All of the above over one snapshot
TradeExporter     CSV/JSON export and periodic reports
"""

from .record import EntryReason, OperationType, Trade, TradeOutcome
from .store import ITradeStore, JsonFileTradeStore, MemoryTradeStore
from .stats import PROFIT_FACTOR_UNBOUNDED, Stats, compute_stats
from .breakdown import Breakdowns, TimePeriod, compute_breakdowns
from .insights import Insight, InsightGenerator, Severity, generate_insights
from .report import JournalReport, build_report
from .export import TradeExporter

__all__ = [
    "Trade",
    "TradeOutcome",
    "OperationType",
    "EntryReason",
    "ITradeStore",
    "MemoryTradeStore",
    "JsonFileTradeStore",
    "Stats",
    "PROFIT_FACTOR_UNBOUNDED",
    "compute_stats",
    "Breakdowns",
    "TimePeriod",
    "compute_breakdowns",
    "Insight",
    "InsightGenerator",
    "Severity",
    "generate_insights",
    "JournalReport",
    "build_report",
    "TradeExporter",
]
