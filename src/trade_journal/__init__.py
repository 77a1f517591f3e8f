"""Trade journal analytics engine: position sizing, P&L and portfolio statistics."""

from trade_journal.checklist import DEFAULT_CHECKLIST, score
from trade_journal.errors import ContractViolationError, JournalEngineError, RecordError
from trade_journal.instruments import classify
from trade_journal.pnl import evaluate
from trade_journal.sizing import size
from trade_journal.stats import aggregate

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CHECKLIST",
    "ContractViolationError",
    "JournalEngineError",
    "RecordError",
    "__version__",
    "aggregate",
    "classify",
    "evaluate",
    "score",
    "size",
]
