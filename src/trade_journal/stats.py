"""Portfolio statistics over a trade collection."""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone
from statistics import fmean
from typing import Iterable, Sequence

from trade_journal.errors import ContractViolationError
from trade_journal.instruments import normalize_symbol
from trade_journal.pnl import risk_based_result
from trade_journal.types import (
    CLOSED_STATUSES,
    TRADE_STATUSES,
    TRADE_WINDOWS,
    InstrumentBreakdown,
    PerformancePoint,
    PortfolioSummary,
    SeriesPeriod,
    Timeframe,
    TimeframeBucket,
    Trade,
    TradeWindow,
)
from trade_journal.utils.logging import get_logger, log_aggregation, log_contract_violation
from trade_journal.utils.numbers import round_half_up, round_money

logger = get_logger("trade_journal.stats")


def contribution(trade: Trade) -> float:
    """Monetary contribution of a trade: stored result, else status x risk."""
    if trade.result is not None:
        return float(trade.result)
    return risk_based_result(trade.status, trade.risk_amount)


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of closed trades that won, 0 when none are closed."""
    closed = [t for t in trades if t.status in CLOSED_STATUSES]
    if not closed:
        return 0.0
    wins = sum(1 for t in closed if t.status == "WIN")
    return round_half_up(wins / len(closed) * 100.0, 2)


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit over gross loss; inf with no losses, 0 with neither."""
    if gross_loss > 0:
        return round_half_up(gross_profit / gross_loss, 2)
    if gross_profit > 0:
        return float("inf")
    return 0.0


def streaks(trades: Iterable[Trade], reference: datetime | None = None) -> tuple[int, int]:
    """Return (best winning streak, current signed streak).

    Trades are walked oldest first. BREAKEVEN resets the streak to 0 and
    pending trades are ignored. Naive timestamps take ``reference``'s zone.
    """
    ordered = sorted(
        (t for t in trades if t.status in CLOSED_STATUSES),
        key=lambda t: _as_utc(t.created_at, reference),
    )
    current = 0
    best = 0
    for trade in ordered:
        if trade.status == "WIN":
            current = current + 1 if current > 0 else 1
            best = max(best, current)
        elif trade.status == "LOSS":
            current = current - 1 if current < 0 else -1
        else:
            current = 0
    return best, current


def instrument_breakdown(trades: Iterable[Trade]) -> list[InstrumentBreakdown]:
    """Count and net profit per symbol, busiest first, ties by symbol."""
    counts: dict[str, int] = {}
    profits: dict[str, float] = {}
    for trade in trades:
        symbol = trade.symbol or "Unknown"
        counts[symbol] = counts.get(symbol, 0) + 1
        profits[symbol] = profits.get(symbol, 0.0) + contribution(trade)
    rows = [
        InstrumentBreakdown(symbol=symbol, count=count, profit=round_money(profits[symbol]))
        for symbol, count in counts.items()
    ]
    rows.sort(key=lambda row: (-row.count, row.symbol))
    return rows


def timeframe_starts(now: datetime) -> dict[Timeframe, datetime]:
    """Start of the current day, week (Sunday), month and year."""
    day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    days_since_sunday = (day.weekday() + 1) % 7
    return {
        "day": day,
        "week": day - timedelta(days=days_since_sunday),
        "month": day.replace(day=1),
        "year": day.replace(month=1, day=1),
    }


def timeframe_buckets(trades: Sequence[Trade], now: datetime) -> dict[str, TimeframeBucket]:
    """Trades and P&L since each calendar boundary, all statuses included."""
    buckets: dict[str, TimeframeBucket] = {}
    for name, start in timeframe_starts(now).items():
        start_utc = _as_utc(start)
        included = [t for t in trades if _as_utc(t.created_at, now) >= start_utc]
        buckets[name] = TimeframeBucket(
            name=name,
            start=start,
            trades=len(included),
            pnl=round_money(sum(contribution(t) for t in included)),
            win_rate=win_rate(included),
        )
    return buckets


def roi(net_pnl: float, baseline_balance: float | None) -> float | None:
    """Return on the baseline balance in percent, None without a baseline."""
    if baseline_balance is None or baseline_balance <= 0:
        return None
    return round_half_up(net_pnl / baseline_balance * 100.0, 2)


def aggregate(
    trades: Sequence[Trade],
    now: datetime,
    baseline_balance: float | None = None,
) -> PortfolioSummary:
    """Roll a trade collection up into a portfolio summary.

    ``now`` anchors the timeframe buckets. The collection is only read; it
    must not change while this runs. Raises ContractViolationError when a
    trade carries an unknown status.
    """
    trades = list(trades)
    _check_statuses(trades)

    by_status: dict[str, list[Trade]] = {status: [] for status in TRADE_STATUSES}
    for trade in trades:
        by_status[trade.status].append(trade)
    closed = [t for t in trades if t.status in CLOSED_STATUSES]

    results = [contribution(t) for t in closed]
    wins = [r for r in results if r > 0]
    losses = [abs(r) for r in results if r < 0]
    gross_profit = round_money(sum(wins))
    gross_loss = round_money(sum(losses))
    net_pnl = round_money(gross_profit - gross_loss)
    best_streak, current_streak = streaks(closed, now)

    summary = PortfolioSummary(
        total_trades=len(trades),
        winning_trades=len(by_status["WIN"]),
        losing_trades=len(by_status["LOSS"]),
        breakeven_trades=len(by_status["BREAKEVEN"]),
        pending_trades=len(by_status["BEFORE"]),
        closed_trades=len(closed),
        win_rate=win_rate(closed),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        net_pnl=net_pnl,
        profit_factor=profit_factor(gross_profit, gross_loss),
        average_win=round_money(fmean(wins)) if wins else 0.0,
        average_loss=round_money(fmean(losses)) if losses else 0.0,
        largest_win=round_money(max(wins, default=0.0)),
        largest_loss=round_money(max(losses, default=0.0)),
        best_winning_streak=best_streak,
        current_streak=current_streak,
        average_confluence=(
            round_half_up(fmean(t.confluence_score for t in closed), 2) if closed else 0.0
        ),
        win_rate_by_direction={
            "LONG": win_rate([t for t in closed if t.direction == "LONG"]),
            "SHORT": win_rate([t for t in closed if t.direction == "SHORT"]),
        },
        instruments=instrument_breakdown(trades),
        timeframes=timeframe_buckets(trades, now),
        roi=roi(net_pnl, baseline_balance),
    )
    log_aggregation(
        logger,
        total_trades=summary.total_trades,
        closed_trades=summary.closed_trades,
        net_pnl=summary.net_pnl,
        win_rate=summary.win_rate,
    )
    return summary


def top_instruments(summary: PortfolioSummary, limit: int = 5) -> list[InstrumentBreakdown]:
    """The most traded symbols of a summary."""
    if limit <= 0:
        return []
    return summary.instruments[:limit]


def recent_trades(
    trades: Iterable[Trade],
    limit: int = 10,
    reference: datetime | None = None,
) -> list[Trade]:
    """Newest trades first."""
    if limit <= 0:
        return []
    ordered = sorted(trades, key=lambda t: _as_utc(t.created_at, reference), reverse=True)
    return ordered[:limit]


def filter_trades(
    trades: Iterable[Trade],
    now: datetime,
    *,
    window: TradeWindow = "all",
    direction: str | None = None,
    symbol: str | None = None,
) -> list[Trade]:
    """Select trades for the journal list, newest first.

    ``today`` keeps trades from ``now``'s calendar day, ``week`` the last
    seven days and ``month`` the last calendar month. ``symbol`` matches as a
    substring, ignoring case and separators.
    """
    if window not in TRADE_WINDOWS:
        log_contract_violation(logger, reason="unknown_trade_window", window=window)
        raise ContractViolationError(f"unknown_trade_window: {window}")

    local_now = _local(now, now)
    since: datetime | None = None
    if window == "today":
        since = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif window == "week":
        since = local_now - timedelta(days=7)
    elif window == "month":
        since = _months_back(local_now, 1)

    wanted_direction = direction.strip().upper() if direction else None
    wanted_symbol = normalize_symbol(symbol) if symbol else None

    selected = []
    for trade in trades:
        if since is not None and _local(trade.created_at, now) < since:
            continue
        if wanted_direction and trade.direction != wanted_direction:
            continue
        if wanted_symbol and wanted_symbol not in normalize_symbol(trade.symbol):
            continue
        selected.append(trade)
    return recent_trades(selected, limit=len(selected), reference=now)


def performance_series(
    trades: Sequence[Trade],
    now: datetime,
    period: SeriesPeriod = "month",
) -> list[PerformancePoint]:
    """P&L per calendar slot ending at ``now``, oldest slot first.

    ``week`` and ``month`` give the last 7 and 30 days, ``year`` the last 12
    calendar months. Empty slots are present with a P&L of 0.
    """
    _check_statuses(trades)
    today = _local(now, now).replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "year":
        first_of_month = today.replace(day=1)
        starts = [_months_back(first_of_month, n) for n in range(11, -1, -1)]
    elif period in ("week", "month"):
        days = 7 if period == "week" else 30
        starts = [today - timedelta(days=n) for n in range(days - 1, -1, -1)]
    else:
        log_contract_violation(logger, reason="unknown_series_period", period=period)
        raise ContractViolationError(f"unknown_series_period: {period}")

    def slot(moment: datetime) -> tuple[int, ...]:
        if period == "year":
            return (moment.year, moment.month)
        return (moment.year, moment.month, moment.day)

    totals: dict[tuple[int, ...], float] = {}
    for trade in trades:
        key = slot(_local(trade.created_at, now))
        totals[key] = totals.get(key, 0.0) + contribution(trade)

    return [
        PerformancePoint(
            label=_slot_label(start, period),
            start=start,
            pnl=round_money(totals.get(slot(start), 0.0)),
        )
        for start in starts
    ]


def _slot_label(start: datetime, period: SeriesPeriod) -> str:
    if period == "week":
        return start.strftime("%a")
    if period == "year":
        return start.strftime("%b")
    return str(start.day)


def _months_back(moment: datetime, months: int) -> datetime:
    # Clamp to the last day of a shorter month (Mar 31 minus one month is Feb 29).
    index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(index, 12)
    day = min(moment.day, calendar.monthrange(year, month + 1)[1])
    return moment.replace(year=year, month=month + 1, day=day)


def _check_statuses(trades: Iterable[Trade]) -> None:
    for trade in trades:
        if trade.status not in TRADE_STATUSES:
            log_contract_violation(
                logger,
                reason="unknown_trade_status",
                trade_id=trade.id,
                status=trade.status,
            )
            raise ContractViolationError(f"unknown_trade_status: {trade.status}")


def _local(moment: datetime, reference: datetime) -> datetime:
    return _as_utc(moment, reference).astimezone(reference.tzinfo or timezone.utc)


def _as_utc(moment: datetime, reference: datetime | None = None) -> datetime:
    # Naive timestamps take the reference's zone, or UTC when there is none.
    if moment.tzinfo is None:
        zone = reference.tzinfo if reference is not None and reference.tzinfo else timezone.utc
        moment = moment.replace(tzinfo=zone)
    return moment.astimezone(timezone.utc)
