"""CLI entry point for the trade journal analytics engine."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import click

from trade_journal import __version__
from trade_journal.checklist import DEFAULT_CHECKLIST, score, select_all
from trade_journal.config import get_settings
from trade_journal.errors import JournalEngineError
from trade_journal.journal.export import (
    load_trade_records,
    summary_as_dict,
    write_trades_csv,
    write_trades_json,
)
from trade_journal.pnl import evaluate
from trade_journal.schemas import parse_checklist, parse_trades
from trade_journal.sizing import size
from trade_journal.stats import aggregate, top_instruments
from trade_journal.types import ClosedTradeFacts, TradeDraft
from trade_journal.utils.logging import get_logger, setup_logging

_DIRECTION = click.Choice(["LONG", "SHORT"], case_sensitive=False)
_STATUS = click.Choice(["BEFORE", "WIN", "LOSS", "BREAKEVEN"], case_sensitive=False)


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show the version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """Trade Journal - position sizing and performance analytics.

    Reads trades exported by the journal application and prints sizing,
    P&L and portfolio statistics.
    """
    if version:
        click.echo(f"trade-journal version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="size")
@click.argument("symbol")
@click.option("--balance", "-b", required=True, help="Account balance")
@click.option("--risk", "-r", default=None, help="Risk per trade in percent")
@click.option("--entry", "-e", required=True, help="Entry price")
@click.option("--stop", "-s", required=True, help="Stop-loss price")
@click.option("--direction", "-d", type=_DIRECTION, default="LONG", show_default=True)
def size_command(
    symbol: str,
    balance: str,
    risk: str | None,
    entry: str,
    stop: str,
    direction: str,
) -> None:
    """Recommend a lot size for a proposed trade."""
    setup_logging()
    settings = get_settings()

    draft = TradeDraft(
        symbol=symbol,
        direction=direction.upper(),  # type: ignore[arg-type]
        account_balance=balance,
        risk_percentage=risk if risk is not None else settings.default_risk_pct,
        entry_price=entry,
        stop_loss_price=stop,
    )
    result = size(draft, settings.pip_value_table(), settings.default_pip_value)

    click.echo(f"Stop loss:   {result.stop_loss_pips} pips")
    click.echo(f"Risk amount: {result.risk_amount:.2f}")
    click.echo(f"Lot size:    {result.lot_size:.2f}")


@cli.command(name="pnl")
@click.argument("symbol")
@click.option("--direction", "-d", type=_DIRECTION, required=True)
@click.option("--status", type=_STATUS, default=None, help="Trade outcome")
@click.option("--lots", default=None, help="Lot size")
@click.option("--entry", default=None, help="Entry price")
@click.option("--exit", "exit_price", default=None, help="Exit price")
@click.option("--take-profit", default=None, help="Take-profit price")
@click.option("--stop-loss", default=None, help="Stop-loss price")
@click.option("--risk-amount", default=None, help="Money at risk, used without prices")
def pnl_command(
    symbol: str,
    direction: str,
    status: str | None,
    lots: str | None,
    entry: str | None,
    exit_price: str | None,
    take_profit: str | None,
    stop_loss: str | None,
    risk_amount: str | None,
) -> None:
    """Evaluate the result of a closed trade."""
    setup_logging()
    settings = get_settings()

    facts = ClosedTradeFacts(
        symbol=symbol,
        direction=direction.upper(),  # type: ignore[arg-type]
        status=status.upper() if status else None,
        lot_size=lots,
        entry_price=entry,
        exit_price=exit_price,
        take_profit=take_profit,
        stop_loss=stop_loss,
        risk_amount=risk_amount,
    )
    result = evaluate(facts, settings.pip_value_table(), settings.default_pip_value)
    click.echo(f"Result: {result:.2f}")


@cli.command(name="stats")
@click.option(
    "--file",
    "-f",
    "trades_file",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="Trade file (JSON or JSONL); defaults to TRADES_FILE",
)
@click.option("--now", default=None, help="Reference time (ISO 8601); defaults to the current time")
@click.option("--baseline", type=float, default=None, help="Starting balance for ROI")
@click.option("--as-json", is_flag=True, default=False, help="Print the summary as JSON")
@click.option(
    "--export",
    "export_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Also write the trades to a .csv or .json file",
)
def stats_command(
    trades_file: Path | None,
    now: str | None,
    baseline: float | None,
    as_json: bool,
    export_path: Path | None,
) -> None:
    """Show portfolio statistics for a trade file."""
    setup_logging()
    logger = get_logger("trade_journal.main")
    settings = get_settings()

    path = trades_file or settings.trades_file
    baseline_balance = baseline if baseline is not None else settings.baseline_balance

    try:
        reference = datetime.fromisoformat(now) if now else datetime.now(timezone.utc)
        trades = parse_trades(load_trade_records(path))
        summary = aggregate(trades, reference, baseline_balance)
    except (JournalEngineError, OSError, ValueError) as e:
        logger.error("stats_failed", path=str(path), error=str(e))
        sys.exit(1)

    if export_path is not None:
        if export_path.suffix == ".csv":
            write_trades_csv(trades, export_path)
        else:
            write_trades_json(trades, export_path)
        logger.info("trades_exported", path=str(export_path), count=len(trades))

    if as_json:
        click.echo(json.dumps(summary_as_dict(summary), indent=2))
        return

    roi_text = "n/a" if summary.roi is None else f"{summary.roi:.2f}%"
    click.echo("=" * 50)
    click.echo("Portfolio Summary")
    click.echo("=" * 50)
    click.echo(
        f"Trades: {summary.total_trades} "
        f"(win {summary.winning_trades}, loss {summary.losing_trades}, "
        f"breakeven {summary.breakeven_trades}, pending {summary.pending_trades})"
    )
    click.echo(f"Win rate:       {summary.win_rate:.2f}%")
    click.echo(f"Profit factor:  {summary.profit_factor:.2f}")
    click.echo(f"Net P&L:        {summary.net_pnl:.2f}")
    click.echo(f"ROI:            {roi_text}")
    click.echo(f"Average win:    {summary.average_win:.2f}")
    click.echo(f"Average loss:   {summary.average_loss:.2f}")
    click.echo(f"Largest win:    {summary.largest_win:.2f}")
    click.echo(f"Largest loss:   {summary.largest_loss:.2f}")
    click.echo(f"Best streak:    {summary.best_winning_streak}")
    click.echo(f"Current streak: {summary.current_streak}")
    click.echo()

    click.echo("[Timeframes]")
    for name, bucket in summary.timeframes.items():
        click.echo(f"   {name:<6} trades={bucket.trades:<4} pnl={bucket.pnl:.2f}")
    click.echo()

    click.echo("[Top instruments]")
    for row in top_instruments(summary):
        click.echo(f"   {row.symbol:<10} count={row.count:<4} profit={row.profit:.2f}")


@cli.command(name="score")
@click.option(
    "--definition",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="Checklist definition JSON; defaults to the built-in checklist",
)
@click.option("--select", "-s", "selected", multiple=True, help="Selected item id (repeatable)")
@click.option("--all", "select_every", is_flag=True, default=False, help="Select every item")
def score_command(definition: Path | None, selected: tuple[str, ...], select_every: bool) -> None:
    """Score a confluence checklist selection."""
    setup_logging()
    logger = get_logger("trade_journal.main")

    try:
        sections = (
            parse_checklist(json.loads(definition.read_text(encoding="utf-8")))
            if definition
            else DEFAULT_CHECKLIST
        )
        selections = select_all(sections) if select_every else {i: True for i in selected}
        result = score(sections, selections)
    except (JournalEngineError, OSError, json.JSONDecodeError) as e:
        logger.error("score_failed", error=str(e))
        sys.exit(1)

    for section in result.sections:
        click.echo(
            f"{section.title:<16} {section.achieved:>3}/{section.possible:<3} {section.percentage}%"
        )
    click.echo(f"Overall: {result.overall_percentage}%")


@cli.command()
def status() -> None:
    """Show the configuration summary."""
    setup_logging()
    settings = get_settings()

    click.echo("=" * 50)
    click.echo("Trade Journal - Status")
    click.echo("=" * 50)
    click.echo()

    click.echo("[Sizing]")
    click.echo(f"   Default risk per trade: {settings.default_risk_pct}%")
    click.echo(f"   Default pip value: {settings.default_pip_value}")
    click.echo(f"   Pip value overrides: {len(settings.pip_value_overrides)}")
    click.echo()

    click.echo("[Statistics]")
    baseline = settings.baseline_balance if settings.has_baseline else "not set (ROI unavailable)"
    click.echo(f"   Baseline balance: {baseline}")
    click.echo(f"   Trades file: {settings.trades_file}")
    click.echo()

    click.echo("[Logging]")
    click.echo(f"   Log level: {settings.log_level}")
    click.echo(f"   Log format: {settings.log_format.value}")
    click.echo()
    click.echo("=" * 50)


if __name__ == "__main__":
    cli()
