"""Shared domain types for the journal analytics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Direction = Literal["LONG", "SHORT"]
TradeStatus = Literal["BEFORE", "WIN", "LOSS", "BREAKEVEN"]
InstrumentKind = Literal["metal", "jpy_cross", "standard_forex"]
Timeframe = Literal["day", "week", "month", "year"]
SeriesPeriod = Literal["week", "month", "year"]
TradeWindow = Literal["all", "today", "week", "month"]

DIRECTIONS: tuple[str, ...] = ("LONG", "SHORT")
TRADE_STATUSES: tuple[str, ...] = ("BEFORE", "WIN", "LOSS", "BREAKEVEN")
CLOSED_STATUSES: tuple[str, ...] = ("WIN", "LOSS", "BREAKEVEN")
TRADE_WINDOWS: tuple[str, ...] = ("all", "today", "week", "month")

NumberInput = float | int | str | None


@dataclass(slots=True, frozen=True)
class InstrumentSpec:
    """Pip conventions for one symbol."""

    symbol: str
    kind: InstrumentKind
    pip_scale: int
    pip_value: float


@dataclass(slots=True)
class TradeDraft:
    """A proposed trade as typed into the journal form."""

    symbol: str
    direction: Direction = "LONG"
    account_balance: NumberInput = None
    risk_percentage: NumberInput = None
    entry_price: NumberInput = None
    stop_loss_price: NumberInput = None


@dataclass(slots=True, frozen=True)
class SizingResult:
    """Recommended position for a draft."""

    stop_loss_pips: int = 0
    risk_amount: float = 0.0
    lot_size: float = 0.0


@dataclass(slots=True)
class ClosedTradeFacts:
    """Everything known about a closed trade for P&L evaluation."""

    symbol: str
    direction: Direction
    status: str | None = None
    lot_size: NumberInput = None
    entry_price: NumberInput = None
    exit_price: NumberInput = None
    take_profit: NumberInput = None
    stop_loss: NumberInput = None
    risk_amount: NumberInput = None


@dataclass(slots=True)
class Trade:
    """One journal entry as consumed by the aggregator."""

    id: str
    symbol: str
    direction: Direction
    status: str
    created_at: datetime
    confluence_score: float = 0.0
    result: float | None = None
    risk_amount: float | None = None


@dataclass(slots=True, frozen=True)
class InstrumentBreakdown:
    """Trade count and net profit for one symbol."""

    symbol: str
    count: int
    profit: float


@dataclass(slots=True, frozen=True)
class TimeframeBucket:
    """Trades created on or after a calendar boundary."""

    name: Timeframe
    start: datetime
    trades: int
    pnl: float
    win_rate: float


@dataclass(slots=True, frozen=True)
class PerformancePoint:
    """P&L of one day or month in a performance chart."""

    label: str
    start: datetime
    pnl: float


@dataclass(slots=True)
class PortfolioSummary:
    """Aggregated performance over a trade collection."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    pending_trades: int = 0
    closed_trades: int = 0
    win_rate: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    net_pnl: float = 0.0
    profit_factor: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    best_winning_streak: int = 0
    current_streak: int = 0
    average_confluence: float = 0.0
    win_rate_by_direction: dict[str, float] = field(default_factory=dict)
    instruments: list[InstrumentBreakdown] = field(default_factory=list)
    timeframes: dict[str, TimeframeBucket] = field(default_factory=dict)
    roi: float | None = None


@dataclass(slots=True, frozen=True)
class ChecklistItem:
    """One weighted checklist criterion."""

    id: str
    label: str
    points: int


@dataclass(slots=True, frozen=True)
class ChecklistSection:
    """Ordered group of checklist items, usually one chart timeframe."""

    title: str
    items: tuple[ChecklistItem, ...]


@dataclass(slots=True, frozen=True)
class SectionScore:
    """Achieved versus possible points for one section."""

    title: str
    achieved: int
    possible: int
    percentage: int


@dataclass(slots=True)
class ChecklistScore:
    """Per-section and overall confluence score."""

    sections: list[SectionScore] = field(default_factory=list)
    achieved: int = 0
    possible: int = 0
    overall_percentage: int = 0
