"""Position sizing from account risk and stop distance."""

from __future__ import annotations

from typing import Mapping

from trade_journal.instruments import DEFAULT_PIP_VALUE, classify
from trade_journal.types import SizingResult, TradeDraft
from trade_journal.utils.logging import get_logger, log_sizing
from trade_journal.utils.numbers import parse_number, round_half_up, round_money

# Lots at or below this are not a meaningful position.
MIN_LOT_SIZE = 0.001

_ZERO = SizingResult()

logger = get_logger("trade_journal.sizing")


def stop_loss_pips(entry: float, stop: float, pip_scale: int) -> int:
    """Distance between entry and stop in whole pips."""
    return int(round_half_up(abs(entry - stop) * pip_scale))


def risk_amount(balance: float, risk_percentage: float) -> float:
    """Money at risk for a balance and a risk percentage, in cents."""
    return round_money(balance * (risk_percentage / 100.0))


def lot_size(risk: float, pips: int, pip_value: float) -> float:
    """Lots such that a stop-out loses ``risk``."""
    if pips <= 0 or pip_value <= 0:
        return 0.0
    lots = risk / (pips * pip_value)
    if lots <= MIN_LOT_SIZE:
        return 0.0
    return round_half_up(lots, 2)


def size(
    draft: TradeDraft,
    pip_values: Mapping[str, float] | None = None,
    default_pip_value: float = DEFAULT_PIP_VALUE,
) -> SizingResult:
    """Compute stop distance, money at risk and lot size for a draft.

    Never raises. A draft with no symbol, or with a missing, zero or
    non-numeric balance, risk percentage, entry or stop, sizes to all zeros.
    """
    balance = parse_number(draft.account_balance)
    risk_pct = parse_number(draft.risk_percentage)
    entry = parse_number(draft.entry_price)
    stop = parse_number(draft.stop_loss_price)

    if not draft.symbol or not balance or not risk_pct or not entry or not stop:
        return _ZERO

    spec = classify(draft.symbol, pip_values, default_pip_value)
    pips = stop_loss_pips(entry, stop, spec.pip_scale)
    risk = risk_amount(balance, risk_pct)
    lots = lot_size(risk, pips, spec.pip_value)

    log_sizing(
        logger,
        symbol=spec.symbol,
        stop_loss_pips=pips,
        risk_amount=risk,
        lot_size=lots,
        pip_value=spec.pip_value,
        kind=spec.kind,
    )
    return SizingResult(stop_loss_pips=pips, risk_amount=risk, lot_size=lots)
