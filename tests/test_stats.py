from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from trade_journal.errors import ContractViolationError
from trade_journal.stats import (
    aggregate,
    contribution,
    filter_trades,
    performance_series,
    profit_factor,
    recent_trades,
    streaks,
    timeframe_starts,
    top_instruments,
)
from trade_journal.types import Trade

# Wednesday
NOW = datetime(2024, 5, 15, 14, 30, tzinfo=UTC)


def _trade(
    trade_id: str,
    status: str,
    *,
    result: float | None = None,
    risk_amount: float | None = None,
    symbol: str = "EURUSD",
    direction: str = "LONG",
    confluence: float = 50.0,
    created_at: datetime | None = None,
) -> Trade:
    return Trade(
        id=trade_id,
        symbol=symbol,
        direction=direction,  # type: ignore[arg-type]
        status=status,
        created_at=created_at or NOW - timedelta(days=int(trade_id)),
        confluence_score=confluence,
        result=result,
        risk_amount=risk_amount,
    )


def test_empty_collection_gives_neutral_summary() -> None:
    summary = aggregate([], NOW)
    assert summary.total_trades == 0
    assert summary.win_rate == 0.0
    assert summary.profit_factor == 0.0
    assert summary.instruments == []
    assert summary.roi is None
    assert all(bucket.trades == 0 for bucket in summary.timeframes.values())


def test_win_rate_excludes_pending_trades() -> None:
    trades = [
        _trade("1", "BEFORE"),
        _trade("2", "BEFORE"),
        _trade("3", "BEFORE"),
        _trade("4", "WIN", result=100.0),
        _trade("5", "WIN", result=50.0),
        _trade("6", "LOSS", result=-80.0),
    ]
    summary = aggregate(trades, NOW)
    assert summary.pending_trades == 3
    assert summary.closed_trades == 3
    assert summary.total_trades == 6
    assert summary.win_rate == 66.67


def test_money_metrics() -> None:
    trades = [
        _trade("1", "WIN", result=300.0),
        _trade("2", "WIN", result=100.0),
        _trade("3", "LOSS", result=-50.0),
        _trade("4", "LOSS", result=-150.0),
        _trade("5", "BREAKEVEN", result=0.0),
    ]
    summary = aggregate(trades, NOW)
    assert summary.gross_profit == 400.0
    assert summary.gross_loss == 200.0
    assert summary.net_pnl == 200.0
    assert summary.profit_factor == 2.0
    assert summary.average_win == 200.0
    assert summary.average_loss == 100.0
    assert summary.largest_win == 300.0
    assert summary.largest_loss == 150.0
    assert summary.breakeven_trades == 1


def test_missing_result_falls_back_to_status_and_risk() -> None:
    trades = [
        _trade("1", "WIN", risk_amount=120.0),
        _trade("2", "LOSS", risk_amount=80.0),
        _trade("3", "BREAKEVEN", risk_amount=80.0),
    ]
    summary = aggregate(trades, NOW)
    assert summary.gross_profit == 120.0
    assert summary.gross_loss == 80.0
    assert summary.profit_factor == 1.5
    assert contribution(trades[1]) == -80.0


def test_profit_factor_conventions() -> None:
    assert math.isinf(profit_factor(500.0, 0.0))
    assert profit_factor(0.0, 0.0) == 0.0
    assert profit_factor(0.0, 100.0) == 0.0
    summary = aggregate([_trade("1", "WIN", result=500.0)], NOW)
    assert summary.profit_factor == float("inf")


def test_breakeven_resets_streak() -> None:
    base = datetime(2024, 1, 1, tzinfo=UTC)
    trades = [
        _trade("1", "WIN", result=10.0, created_at=base),
        _trade("2", "WIN", result=10.0, created_at=base + timedelta(days=1)),
        _trade("3", "BREAKEVEN", result=0.0, created_at=base + timedelta(days=2)),
        _trade("4", "WIN", result=10.0, created_at=base + timedelta(days=3)),
    ]
    summary = aggregate(trades, NOW)
    assert summary.best_winning_streak == 2
    assert summary.current_streak == 1


def test_streaks_follow_timestamps_not_input_order() -> None:
    base = datetime(2024, 1, 1, tzinfo=UTC)
    trades = [
        _trade("1", "LOSS", created_at=base + timedelta(days=5)),
        _trade("2", "WIN", created_at=base),
        _trade("3", "WIN", created_at=base + timedelta(days=1)),
        _trade("4", "WIN", created_at=base + timedelta(days=2)),
        _trade("5", "LOSS", created_at=base + timedelta(days=4)),
        _trade("6", "BEFORE", created_at=base + timedelta(days=6)),
    ]
    assert streaks(trades) == (3, -2)


def test_instrument_breakdown_orders_by_count_then_symbol() -> None:
    trades = [
        _trade("1", "WIN", result=10.0, symbol="GBPUSD"),
        _trade("2", "LOSS", result=-5.0, symbol="GBPUSD"),
        _trade("3", "WIN", result=20.0, symbol="AUDUSD"),
        _trade("4", "WIN", result=30.0, symbol="XAUUSD"),
        _trade("5", "BEFORE", symbol="XAUUSD"),
    ]
    summary = aggregate(trades, NOW)
    assert [(row.symbol, row.count, row.profit) for row in summary.instruments] == [
        ("GBPUSD", 2, 5.0),
        ("XAUUSD", 2, 30.0),
        ("AUDUSD", 1, 20.0),
    ]
    assert [row.symbol for row in top_instruments(summary, limit=1)] == ["GBPUSD"]


def test_timeframe_boundaries_start_week_on_sunday() -> None:
    starts = timeframe_starts(NOW)
    assert starts["day"] == datetime(2024, 5, 15, tzinfo=UTC)
    assert starts["week"] == datetime(2024, 5, 12, tzinfo=UTC)
    assert starts["month"] == datetime(2024, 5, 1, tzinfo=UTC)
    assert starts["year"] == datetime(2024, 1, 1, tzinfo=UTC)


def test_timeframe_buckets_include_every_status() -> None:
    trades = [
        _trade("1", "WIN", result=100.0, created_at=datetime(2024, 5, 15, 9, tzinfo=UTC)),
        _trade("2", "BEFORE", created_at=datetime(2024, 5, 15, 10, tzinfo=UTC)),
        _trade("3", "LOSS", risk_amount=40.0, created_at=datetime(2024, 5, 12, 0, tzinfo=UTC)),
        _trade("4", "WIN", result=25.0, created_at=datetime(2024, 5, 2, tzinfo=UTC)),
        _trade("5", "LOSS", result=-10.0, created_at=datetime(2024, 2, 1, tzinfo=UTC)),
        _trade("6", "WIN", result=999.0, created_at=datetime(2023, 12, 31, tzinfo=UTC)),
    ]
    buckets = aggregate(trades, NOW).timeframes
    assert (buckets["day"].trades, buckets["day"].pnl) == (2, 100.0)
    assert (buckets["week"].trades, buckets["week"].pnl) == (3, 60.0)
    assert (buckets["month"].trades, buckets["month"].pnl) == (4, 85.0)
    assert (buckets["year"].trades, buckets["year"].pnl) == (5, 75.0)
    assert buckets["day"].win_rate == 100.0


def test_naive_timestamps_take_the_reference_zone() -> None:
    trade = _trade("1", "WIN", result=5.0, created_at=datetime(2024, 5, 15, 1, 0))
    assert aggregate([trade], NOW).timeframes["day"].trades == 1


def test_roi_requires_a_baseline() -> None:
    trades = [_trade("1", "WIN", result=250.0), _trade("2", "LOSS", result=-50.0)]
    assert aggregate(trades, NOW).roi is None
    assert aggregate(trades, NOW, baseline_balance=10_000).roi == 2.0
    flat = [_trade("1", "BREAKEVEN", result=0.0)]
    assert aggregate(flat, NOW, baseline_balance=10_000).roi == 0.0


def test_confluence_and_direction_breakdown() -> None:
    trades = [
        _trade("1", "WIN", result=1.0, direction="LONG", confluence=80.0),
        _trade("2", "LOSS", result=-1.0, direction="LONG", confluence=40.0),
        _trade("3", "WIN", result=1.0, direction="SHORT", confluence=60.0),
        _trade("4", "BEFORE", direction="SHORT", confluence=0.0),
    ]
    summary = aggregate(trades, NOW)
    assert summary.average_confluence == 60.0
    assert summary.win_rate_by_direction == {"LONG": 50.0, "SHORT": 100.0}


def test_unknown_status_is_a_contract_violation() -> None:
    with pytest.raises(ContractViolationError):
        aggregate([_trade("1", "OPEN")], NOW)


def test_aggregate_is_idempotent_and_leaves_input_alone() -> None:
    trades = [
        _trade("3", "WIN", result=10.0),
        _trade("1", "LOSS", result=-4.0),
        _trade("2", "BEFORE"),
    ]
    snapshot = list(trades)
    first = aggregate(trades, NOW, baseline_balance=1_000)
    second = aggregate(trades, NOW, baseline_balance=1_000)
    assert first == second
    assert repr(first) == repr(second)
    assert trades == snapshot


def test_recent_trades_newest_first() -> None:
    trades = [_trade("3", "WIN"), _trade("1", "LOSS"), _trade("2", "BEFORE")]
    assert [t.id for t in recent_trades(trades, limit=2)] == ["1", "2"]


def test_naive_and_aware_timestamps_order_streaks_in_the_reference_zone() -> None:
    plus_five = timezone(timedelta(hours=5))
    now = datetime(2024, 5, 15, 14, 30, tzinfo=plus_five)
    trades = [
        # 10:00 at +05:00 is 05:00 UTC, before the aware win
        _trade("1", "LOSS", result=-10.0, created_at=datetime(2024, 5, 15, 10, 0)),
        _trade("2", "WIN", result=20.0, created_at=datetime(2024, 5, 15, 7, 0, tzinfo=UTC)),
    ]
    summary = aggregate(trades, now)
    assert (summary.best_winning_streak, summary.current_streak) == (1, 1)
    assert streaks(trades, now) == (1, 1)
    assert summary.timeframes["day"].trades == 2


def _history() -> list[Trade]:
    return [
        _trade("1", "WIN", result=100.0, created_at=datetime(2024, 5, 15, 9, tzinfo=UTC)),
        _trade(
            "2",
            "LOSS",
            result=-40.0,
            symbol="GBPUSD",
            created_at=datetime(2024, 5, 15, 10, tzinfo=UTC),
        ),
        _trade(
            "3",
            "WIN",
            risk_amount=50.0,
            direction="SHORT",
            created_at=datetime(2024, 5, 13, 8, tzinfo=UTC),
        ),
        _trade("4", "LOSS", result=-20.0, created_at=datetime(2024, 5, 1, 12, tzinfo=UTC)),
        _trade("5", "WIN", result=30.0, created_at=datetime(2023, 6, 10, tzinfo=UTC)),
        _trade("6", "WIN", result=999.0, created_at=datetime(2023, 5, 31, tzinfo=UTC)),
        _trade("7", "BEFORE", created_at=datetime(2024, 5, 14, 12, tzinfo=UTC)),
    ]


def test_weekly_series_has_one_point_per_day() -> None:
    points = performance_series(_history(), NOW, "week")
    assert [p.label for p in points] == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]
    assert [p.pnl for p in points] == [0.0, 0.0, 0.0, 0.0, 50.0, 0.0, 60.0]
    assert points[0].start == datetime(2024, 5, 9, tzinfo=UTC)


def test_monthly_series_covers_thirty_days() -> None:
    points = performance_series(_history(), NOW, "month")
    assert len(points) == 30
    assert (points[0].label, points[-1].label) == ("16", "15")
    assert points[15].start == datetime(2024, 5, 1, tzinfo=UTC)
    assert points[15].pnl == -20.0
    assert points[-1].pnl == 60.0


def test_yearly_series_groups_by_calendar_month() -> None:
    points = performance_series(_history(), NOW, "year")
    assert len(points) == 12
    assert (points[0].label, points[0].pnl) == ("Jun", 30.0)
    assert (points[-1].label, points[-1].pnl) == ("May", 90.0)
    assert sum(p.pnl for p in points) == 120.0


def test_series_of_nothing_is_flat() -> None:
    assert [p.pnl for p in performance_series([], NOW, "week")] == [0.0] * 7


def test_series_rejects_unknown_period() -> None:
    with pytest.raises(ContractViolationError):
        performance_series(_history(), NOW, "decade")  # type: ignore[arg-type]


def test_filter_trades_by_window_newest_first() -> None:
    trades = _history()
    assert [t.id for t in filter_trades(trades, NOW, window="today")] == ["2", "1"]
    assert [t.id for t in filter_trades(trades, NOW, window="week")] == ["2", "1", "7", "3"]
    assert [t.id for t in filter_trades(trades, NOW, window="month")] == ["2", "1", "7", "3", "4"]
    assert len(filter_trades(trades, NOW)) == len(trades)


def test_filter_trades_by_direction_and_symbol() -> None:
    trades = _history()
    assert [t.id for t in filter_trades(trades, NOW, direction="short")] == ["3"]
    assert [t.id for t in filter_trades(trades, NOW, symbol="gbp/usd")] == ["2"]
    assert [t.id for t in filter_trades(trades, NOW, window="today", symbol="usd")] == ["2", "1"]
    assert filter_trades(trades, NOW, symbol="XAU") == []


def test_filter_trades_rejects_unknown_window() -> None:
    with pytest.raises(ContractViolationError):
        filter_trades(_history(), NOW, window="fortnight")  # type: ignore[arg-type]
