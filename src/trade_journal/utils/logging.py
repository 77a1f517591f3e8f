"""Structured logging for the journal engine.

Engine loggers are structlog wrappers around stdlib loggers under the
``trade_journal`` namespace, so a library caller that never configures
logging sees nothing below WARNING. ``setup_logging`` installs the JSON or
console renderer for the CLI.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from trade_journal.config import LogFormat, Settings, get_settings

ENGINE_LOGGER = "trade_journal"


def _renderer(log_format: LogFormat) -> list[Processor]:
    if log_format == LogFormat.JSON:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def setup_logging(settings: Settings | None = None) -> None:
    """Send engine events to stderr at the configured level."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger(ENGINE_LOGGER).setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderer(settings.log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger backed by the stdlib logger ``name``.

    Level filtering happens in stdlib logging, which also holds when
    ``setup_logging`` has not run.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or ENGINE_LOGGER),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def log_sizing(
    logger: structlog.stdlib.BoundLogger,
    *,
    symbol: str,
    stop_loss_pips: int,
    risk_amount: float,
    lot_size: float,
    **kwargs: Any,
) -> None:
    """Log one position sizing calculation."""
    logger.debug(
        "position_sized",
        symbol=symbol,
        stop_loss_pips=stop_loss_pips,
        risk_amount=risk_amount,
        lot_size=lot_size,
        **kwargs,
    )


def log_aggregation(
    logger: structlog.stdlib.BoundLogger,
    *,
    total_trades: int,
    closed_trades: int,
    net_pnl: float,
    **kwargs: Any,
) -> None:
    """Log one portfolio aggregation."""
    logger.debug(
        "portfolio_aggregated",
        total_trades=total_trades,
        closed_trades=closed_trades,
        net_pnl=net_pnl,
        **kwargs,
    )


def log_contract_violation(
    logger: structlog.stdlib.BoundLogger,
    *,
    reason: str,
    **kwargs: Any,
) -> None:
    """Log caller data that breaks the engine contract."""
    logger.warning(
        "contract_violation",
        reason=reason,
        **kwargs,
    )
