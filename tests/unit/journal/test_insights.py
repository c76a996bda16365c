"""Tests for the insight rules and generator."""

import pytest

from trade_diary.core.config import InsightConfig
from trade_diary.journal.insights import (
    COLLECTING_DATA,
    RULES,
    InsightGenerator,
    Severity,
    best_period_rule,
    generate_insights,
)
from trade_diary.journal.stats import Stats, compute_stats


def codes(insights):
    return [i.code for i in insights]


class TestPlaceholder:
    def test_empty_journal(self):
        assert generate_insights([], compute_stats([])) == [COLLECTING_DATA]

    def test_placeholder_is_neutral(self):
        assert COLLECTING_DATA.severity == Severity.NEUTRAL

    def test_nothing_fires(self, make_trade):
        # 50% win rate, two different hours/assets/reasons, < 3 trades
        trades = [
            make_trade(10, asset="AAA", reasons=("breakout",), time="09:00"),
            make_trade(-10, asset="BBB", reasons=("reversal",), time="20:00"),
        ]
        assert generate_insights(trades) == [COLLECTING_DATA]


class TestRuleOrder:
    def test_mixed_journal(self, mixed_trades):
        insights = generate_insights(mixed_trades, compute_stats(mixed_trades))
        assert codes(insights) == ["best_reason", "best_period", "best_asset", "profit_factor"]
        assert all(i.severity == Severity.POSITIVE for i in insights)

    def test_deterministic(self, mixed_trades):
        assert generate_insights(mixed_trades) == generate_insights(mixed_trades)

    def test_rule_battery(self):
        assert len(RULES) == 6


class TestBestReason:
    def test_fires_at_exactly_fifty_percent(self, make_trade):
        trades = [
            make_trade(50, reasons=("breakout",), time="10:00"),
            make_trade(-20, reasons=("breakout",), time="10:00"),
        ]
        insights = generate_insights(trades)
        assert "best_reason" in codes(insights)
        text = insights[0].text
        assert '"Breakout"' in text
        assert "50%" in text

    def test_below_fifty_does_not_fire(self, make_trade):
        trades = [
            make_trade(50, reasons=("breakout",)),
            make_trade(-20, reasons=("breakout",)),
            make_trade(-20, reasons=("breakout",)),
        ]
        assert "best_reason" not in codes(generate_insights(trades))

    def test_needs_two_decided_trades(self, make_trade):
        trades = [make_trade(50, reasons=("breakout",), time="10:00")]
        assert "best_reason" not in codes(generate_insights(trades))

    def test_picks_highest_rate(self, mixed_trades):
        insight = generate_insights(mixed_trades)[0]
        assert '"Trend following"' in insight.text
        assert "67%" in insight.text

    def test_tie_keeps_first_encountered(self, make_trade):
        trades = [
            make_trade(10, reasons=("reversal",), time="02:00"),
            make_trade(10, reasons=("reversal",), time="08:00"),
            make_trade(10, reasons=("breakout",), time="14:00"),
            make_trade(10, reasons=("breakout",), time="20:00"),
        ]
        insight = generate_insights(trades)[0]
        assert insight.code == "best_reason"
        assert '"Reversal"' in insight.text


class TestBestPeriod:
    def test_requires_two_trades_in_bucket(self, make_trade):
        trades = [make_trade(10, time="20:00")]
        assert codes(generate_insights(trades)) == ["consistency"]

    def test_fires_for_best_bucket(self, make_trade):
        trades = [
            make_trade(10, time="07:00", reasons=("a",)),
            make_trade(10, time="08:00", reasons=("b",)),
            make_trade(-10, time="19:00", reasons=("c",)),
            make_trade(10, time="20:00", reasons=("d",)),
        ]
        insight = next(i for i in generate_insights(trades) if i.code == "best_period")
        assert "morning" in insight.text
        assert "100%" in insight.text

    def test_rule_is_independent_of_breakdown_marker(self, make_trade):
        gen = InsightGenerator()
        ctx = gen.context([make_trade(10, time="13:00"), make_trade(-10, time="13:30")])
        insight = best_period_rule(ctx)
        assert insight is not None
        assert "afternoon" in insight.text


class TestStopDistance:
    def _trades(self, make_trade, tight_results, wide_results):
        tight = [make_trade(r, entry="1.1000", stop="1.0990", time="10:00") for r in tight_results]
        wide = [make_trade(r, entry="1.1000", stop="1.0900", time="10:00") for r in wide_results]
        return tight + wide

    def test_tight_stops_work(self, make_trade):
        trades = self._trades(make_trade, [10, 10], [-10, -10])
        insight = next(i for i in generate_insights(trades) if i.code.startswith("tight"))
        assert insight.code == "tight_stops"
        assert insight.severity == Severity.POSITIVE
        assert "100%" in insight.text

    def test_tight_stops_warning(self, make_trade):
        trades = self._trades(make_trade, [-10, -10], [10, 10])
        insight = next(i for i in generate_insights(trades) if i.code.startswith("tight"))
        assert insight.code == "tight_stops_warning"
        assert insight.severity == Severity.WARNING
        assert "0%" in insight.text

    def test_middle_band_is_silent(self, make_trade):
        trades = self._trades(make_trade, [10, -10], [10, -10])
        assert not any(c.startswith("tight") for c in codes(generate_insights(trades)))

    def test_needs_three_trades(self, make_trade):
        trades = self._trades(make_trade, [10], [-10])
        assert not any(c.startswith("tight") for c in codes(generate_insights(trades)))

    def test_equal_distances_leave_no_tight_subset(self, make_trade):
        trades = [make_trade(10), make_trade(10), make_trade(10)]
        assert not any(c.startswith("tight") for c in codes(generate_insights(trades)))


class TestBestAsset:
    def test_reports_profit_with_currency(self, mixed_trades):
        insight = next(i for i in generate_insights(mixed_trades) if i.code == "best_asset")
        assert insight.text == (
            "GBPUSD is your most profitable asset with +R$ 130,00 profit over 2 trades."
        )

    def test_single_trade_asset_ignored(self, make_trade):
        trades = [
            make_trade(1000, asset="BTCUSD", time="02:00", reasons=("a",)),
            make_trade(5, asset="EURUSD", time="09:00", reasons=("b",)),
            make_trade(5, asset="EURUSD", time="15:00", reasons=("c",)),
        ]
        insight = next(i for i in generate_insights(trades) if i.code == "best_asset")
        assert insight.text.startswith("EURUSD")

    def test_non_positive_best_is_silent(self, make_trade):
        trades = [make_trade(-5, asset="EURUSD"), make_trade(5, asset="EURUSD")]
        assert "best_asset" not in codes(generate_insights(trades))

    def test_custom_currency_formatter(self, make_trade):
        gen = InsightGenerator(currency=lambda v: f"${v:.0f}")
        trades = [make_trade(5, asset="EURUSD"), make_trade(7, asset="EURUSD")]
        insight = next(i for i in gen.generate(trades) if i.code == "best_asset")
        assert "$12 profit" in insight.text


class TestConsistency:
    def test_good_win_rate(self, make_trade):
        trades = [make_trade(10, reasons=(f"r{i}",), time=t)
                  for i, t in enumerate(["01:00", "07:00", "13:00"])]
        trades.append(make_trade(-10, reasons=("x",), time="19:00"))
        trades.append(make_trade(-10, reasons=("y",), time="19:30"))
        insight = next(i for i in generate_insights(trades) if i.code == "consistency")
        assert "60.0%" in insight.text

    def test_one_decimal_half_up(self, make_trade):
        trades = [make_trade(10, reasons=("a",), time="01:00"),
                  make_trade(10, reasons=("b",), time="07:00"),
                  make_trade(-10, reasons=("c",), time="13:00")]
        insight = next(i for i in generate_insights(trades) if i.code == "consistency")
        assert "66.7%" in insight.text

    def test_poor_win_rate_warns_with_five_trades(self, make_trade):
        trades = [make_trade(10)] + [make_trade(-10) for _ in range(4)]
        insight = next(i for i in generate_insights(trades) if i.code == "review_strategy")
        assert insight.severity == Severity.WARNING
        assert "20.0%" in insight.text

    def test_poor_win_rate_silent_below_five_trades(self, make_trade):
        trades = [make_trade(-10) for _ in range(4)]
        assert "review_strategy" not in codes(generate_insights(trades))

    def test_uses_supplied_stats(self):
        stats = Stats(total_trades=10, wins=8, losses=2, win_rate=80.0)
        assert "consistency" in codes(generate_insights([], stats))


class TestProfitFactor:
    def test_five_winners_unbounded(self, make_trade):
        trades = [make_trade(10) for _ in range(5)]
        insight = next(i for i in generate_insights(trades) if i.code == "profit_factor")
        assert insight.severity == Severity.POSITIVE
        assert "∞" in insight.text

    def test_needs_five_trades(self, make_trade):
        trades = [make_trade(10) for _ in range(4)]
        assert "profit_factor" not in codes(generate_insights(trades))

    def test_two_decimals(self, mixed_trades):
        insight = generate_insights(mixed_trades)[-1]
        assert insight.code == "profit_factor"
        assert "2.50" in insight.text

    def test_below_threshold(self, make_trade):
        trades = [make_trade(14), make_trade(-10)] + [make_trade(0) for _ in range(3)]
        assert "profit_factor" not in codes(generate_insights(trades))


class TestConfigurableThresholds:
    def test_lower_trade_minimum(self, make_trade):
        gen = InsightGenerator(InsightConfig(profit_factor_min_trades=1))
        assert "profit_factor" in codes(gen.generate([make_trade(10)]))

    def test_stricter_reason_rate(self, make_trade):
        gen = InsightGenerator(InsightConfig(best_reason_min_win_rate=75.0))
        trades = [make_trade(50, reasons=("breakout",)), make_trade(-20, reasons=("breakout",))]
        assert "best_reason" not in codes(gen.generate(trades))

    def test_insight_to_dict(self, mixed_trades):
        d = generate_insights(mixed_trades)[0].to_dict()
        assert d["severity"] == "positive"
        assert d["icon"] == "zap"
        assert set(d) == {"code", "icon", "severity", "title", "text"}
