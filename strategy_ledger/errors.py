"""
errors.py
---------
Exceptions raised by strategy_ledger. Only file-level failures propagate;
per-row problems are recovered inside the parsers.
"""


class StrategyLedgerError(Exception):
    """Base class for strategy_ledger errors."""


class FileFormatError(StrategyLedgerError):
    """A broker export could not be read or parsed as CSV."""

    def __init__(self, source, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read {source!s} as CSV: {reason}")
