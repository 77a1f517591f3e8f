"""Trade file reading and summary/trade export helpers."""

from __future__ import annotations

import json
import math
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from trade_journal.errors import RecordError
from trade_journal.stats import contribution
from trade_journal.types import PortfolioSummary, Trade

TRADE_COLUMNS = (
    "id",
    "symbol",
    "direction",
    "status",
    "created_at",
    "confluence_score",
    "result",
    "risk_amount",
)


def load_trade_records(path: Path) -> list[dict[str, Any]]:
    """Load raw trade records from a JSON array or a JSONL file.

    A JSON object with a ``trades`` key (the browser storage layout) is also
    accepted.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        rows = []
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise RecordError(f"invalid_jsonl_line: {path}:{number}") from exc
        return rows

    try:
        decoded = json.loads(text) if text.strip() else []
    except json.JSONDecodeError as exc:
        raise RecordError(f"invalid_json: {path}") from exc
    if isinstance(decoded, dict):
        decoded = decoded.get("trades", [])
    if not isinstance(decoded, list):
        raise RecordError(f"trade_file_not_list: {path}")
    return decoded


def trades_as_rows(trades: Iterable[Trade]) -> list[dict[str, object]]:
    """Convert trades to serializable row dicts with the effective result."""
    return [
        {
            "id": trade.id,
            "symbol": trade.symbol,
            "direction": trade.direction,
            "status": trade.status,
            "created_at": trade.created_at.isoformat(),
            "confluence_score": trade.confluence_score,
            "result": contribution(trade),
            "risk_amount": trade.risk_amount,
        }
        for trade in trades
    ]


def summary_as_dict(summary: PortfolioSummary) -> dict[str, Any]:
    """JSON-safe summary; infinite values become the string ``"inf"``."""
    return _json_safe(asdict(summary))


def write_trades_json(trades: Iterable[Trade], path: Path) -> None:
    """Write trades as a pretty-printed JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(trades_as_rows(trades), indent=2) + "\n", encoding="utf-8")


def write_trades_csv(trades: Iterable[Trade], path: Path) -> None:
    """Write trades as CSV with a fixed header, even when empty."""
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(trades_as_rows(trades), columns=list(TRADE_COLUMNS)).to_csv(path, index=False)


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value
