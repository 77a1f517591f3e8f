"""Realized profit and loss for closed trades."""

from __future__ import annotations

from typing import Mapping

from trade_journal.errors import ContractViolationError
from trade_journal.instruments import DEFAULT_PIP_VALUE, classify
from trade_journal.types import DIRECTIONS, TRADE_STATUSES, ClosedTradeFacts
from trade_journal.utils.logging import get_logger, log_contract_violation
from trade_journal.utils.numbers import parse_number, round_money

logger = get_logger("trade_journal.pnl")


def check_status(status: str | None) -> str | None:
    """Return a known status unchanged; raise for anything else."""
    if status is None or status in TRADE_STATUSES:
        return status
    log_contract_violation(logger, reason="unknown_trade_status", status=status)
    raise ContractViolationError(f"unknown_trade_status: {status}")


def check_direction(direction: str | None) -> str:
    """Upper-case a direction label; raise for anything but LONG or SHORT."""
    normalized = direction.strip().upper() if isinstance(direction, str) else ""
    if normalized in DIRECTIONS:
        return normalized
    log_contract_violation(logger, reason="unknown_trade_direction", direction=direction)
    raise ContractViolationError(f"unknown_trade_direction: {direction}")


def risk_based_result(status: str | None, risk: object) -> float:
    """Estimate a result from the outcome label and the money at risk.

    WIN earns the risk, LOSS loses it, anything else is flat.
    """
    amount = abs(parse_number(risk) or 0.0)
    if status == "WIN":
        return round_money(amount)
    if status == "LOSS":
        return round_money(-amount)
    return 0.0


def _resolve_exit(facts: ClosedTradeFacts, entry: float) -> float | None:
    exit_price = parse_number(facts.exit_price)
    if exit_price:
        return exit_price
    if facts.status == "WIN":
        return parse_number(facts.take_profit) or None
    if facts.status == "LOSS":
        return parse_number(facts.stop_loss) or None
    if facts.status == "BREAKEVEN":
        return entry
    return None


def price_based_result(
    facts: ClosedTradeFacts,
    pip_values: Mapping[str, float] | None = None,
    default_pip_value: float = DEFAULT_PIP_VALUE,
) -> float | None:
    """Result from prices, or None when entry, lot size or exit is unknown."""
    entry = parse_number(facts.entry_price)
    lots = parse_number(facts.lot_size)
    if not entry or not lots:
        return None
    exit_price = _resolve_exit(facts, entry)
    if exit_price is None:
        return None

    spec = classify(facts.symbol, pip_values, default_pip_value)
    move = exit_price - entry if check_direction(facts.direction) == "LONG" else entry - exit_price
    return round_money(move * spec.pip_scale * spec.pip_value * lots)


def evaluate(
    facts: ClosedTradeFacts,
    pip_values: Mapping[str, float] | None = None,
    default_pip_value: float = DEFAULT_PIP_VALUE,
) -> float:
    """Compute the signed result of a closed trade.

    Prices win whenever they are sufficient; only then does the risk amount
    and outcome label stand in. Direction labels are case-insensitive. Raises
    ContractViolationError for an unknown status or direction.
    """
    check_status(facts.status)
    check_direction(facts.direction)
    result = price_based_result(facts, pip_values, default_pip_value)
    if result is not None:
        return result
    return risk_based_result(facts.status, facts.risk_amount)
