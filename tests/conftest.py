"""Shared fixtures for the trade diary test suite."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from trade_diary.journal.record import Trade


def build(
    result: float | str = 0,
    *,
    asset: str = "EURUSD",
    reasons: tuple[str, ...] = ("breakout",),
    time: str = "10:00",
    entry: str = "1.1000",
    stop: str = "1.0950",
    target: str = "1.1100",
    on: date = date(2024, 3, 1),
    lots: str = "0.10",
    operation_type: str = "buy",
    **extra,
) -> Trade:
    """Create a Trade with sensible defaults."""
    return Trade(
        operation_type=operation_type,
        asset=asset,
        lots=Decimal(lots),
        entry_price=Decimal(entry),
        stop_loss=Decimal(stop),
        take_profit=Decimal(target),
        result=Decimal(str(result)),
        reasons=reasons,
        date=on,
        time=time,
        **extra,
    )


@pytest.fixture
def make_trade():
    """Factory fixture: ``make_trade(result, asset=..., reasons=..., time=...)``."""
    return build


@pytest.fixture
def mixed_trades(make_trade):
    """A small realistic journal: 3 wins, 2 losses, 1 breakeven."""
    return [
        make_trade(120, asset="EURUSD", reasons=("breakout",), time="09:15"),
        make_trade(-40, asset="EURUSD", reasons=("breakout", "trend_follow"), time="10:30"),
        make_trade(80, asset="GBPUSD", reasons=("trend_follow",), time="14:00"),
        make_trade(-60, asset="BTCUSD", reasons=("reversal",), time="21:45"),
        make_trade(50, asset="GBPUSD", reasons=("trend_follow", "rejection"), time="15:20"),
        make_trade(0, asset="USDJPY", reasons=("news_event",), time="03:05"),
    ]
