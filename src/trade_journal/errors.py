"""Engine error types."""

from __future__ import annotations


class JournalEngineError(Exception):
    """Base trade journal engine error."""


class ContractViolationError(JournalEngineError, ValueError):
    """Raised when a caller supplies data that breaks the engine contract."""


class RecordError(JournalEngineError):
    """Raised when a stored record cannot be converted into an engine type."""
