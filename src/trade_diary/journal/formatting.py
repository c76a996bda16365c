"""Display formatting for journal values.

Currency follows the journal's default Brazilian style
(``+R$ 1.234,56``); separators and symbol are configurable through
``DisplayConfig``.  Percentages and ratios use standard half-up
rounding rather than Python's banker's rounding.
"""

from __future__ import annotations

import datetime as dt
import functools
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from trade_diary.core.config import DisplayConfig

CurrencyFormatter = Callable[[float], str]

UNBOUNDED_DISPLAY = "∞"


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float, places: int = 2, *, thousands_sep: str = ",", decimal_sep: str = ".") -> str:
    """Fixed-point number with custom separators, half-up rounded."""
    rounded = Decimal(repr(round_half_up(value, places)))
    text = f"{rounded:,.{places}f}"
    return text.translate(str.maketrans({",": thousands_sep, ".": decimal_sep}))


def format_currency(
    value: float,
    *,
    symbol: str = "R$",
    thousands_sep: str = ".",
    decimal_sep: str = ",",
) -> str:
    """Signed currency amount: ``+R$ 1.234,56`` / ``-R$ 20,00``.

    Zero is shown with a plus sign.
    """
    sign = "+" if value >= 0 else "-"
    amount = format_number(
        abs(value), 2, thousands_sep=thousands_sep, decimal_sep=decimal_sep,
    )
    return f"{sign}{symbol} {amount}"


def currency_formatter(display: DisplayConfig) -> CurrencyFormatter:
    """Bind ``format_currency`` to configured display settings."""
    return functools.partial(
        format_currency,
        symbol=display.currency_symbol,
        thousands_sep=display.thousands_sep,
        decimal_sep=display.decimal_sep,
    )


def format_rate(value: float, places: int = 1) -> str:
    """Percentage such as ``"55.0%"`` (value already in 0-100)."""
    return f"{round_half_up(value, places):.{places}f}%"


def format_profit_factor(value: float) -> str:
    """Two-decimal ratio, or ``"∞"`` for an unbounded profit factor."""
    if math.isinf(value):
        return UNBOUNDED_DISPLAY
    return f"{round_half_up(value, 2):.2f}"


def format_date(value: dt.date) -> str:
    """Day-first date: ``dd/mm/yyyy``."""
    return value.strftime("%d/%m/%Y")


def asset_icon(asset: str) -> str:
    """Short glyph for an asset symbol (currency sign or first letters)."""
    if "BTC" in asset or "ETH" in asset:
        return "₿"
    if "EUR" in asset:
        return "€"
    if "GBP" in asset:
        return "£"
    if "JPY" in asset:
        return "¥"
    if "USD" in asset:
        return "$"
    return asset[:2]
