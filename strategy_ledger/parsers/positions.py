"""
Open-positions parser: normalizes broker position snapshots into Position
records keyed by canonical symbol.
"""
from collections.abc import Mapping

import structlog

from strategy_ledger.config import (
    DEFAULT_POSITION_TYPE,
    POSITION_MARK_COLUMNS,
    POSITION_PNL_COLUMNS,
    POSITION_QUANTITY_COLUMNS,
    POSITION_SYMBOL_COLUMNS,
    POSITION_TYPE_ALIASES,
    POSITION_TYPE_COLUMNS,
)
from strategy_ledger.models import Position, PositionType
from strategy_ledger.parsers.base import BaseCSVNormalizer, first_value
from strategy_ledger.parsers.currency import sanitize_currency
from strategy_ledger.parsers.symbols import canonicalize_symbol

logger = structlog.get_logger()


def normalize_position_type(raw) -> PositionType:
    """Map a broker's Type column onto STOCK / OPTION / FUTURES_OPTION."""
    if raw is None or not str(raw).strip():
        return PositionType(DEFAULT_POSITION_TYPE)
    key = str(raw).strip().upper()
    canonical = POSITION_TYPE_ALIASES.get(key)
    if canonical is None:
        logger.warning("unknown_position_type", type=key, default=DEFAULT_POSITION_TYPE)
        canonical = DEFAULT_POSITION_TYPE
    return PositionType(canonical)


def parse_pnl(raw) -> float | None:
    """None when the broker left P&L blank; a sanitized number (maybe 0) otherwise."""
    if raw is None or not str(raw).strip():
        return None
    return sanitize_currency(raw)


class PositionCSVNormalizer(BaseCSVNormalizer):
    """Parses position-snapshot rows; only a non-blank symbol is required."""

    skip_event = "position_row_skipped"

    def parse_row(self, row: Mapping):
        symbol = first_value(row, POSITION_SYMBOL_COLUMNS)
        if symbol is None or not str(symbol).strip():
            return None

        position_type = normalize_position_type(first_value(row, POSITION_TYPE_COLUMNS))

        return Position(
            canonical_symbol=canonicalize_symbol(symbol, position_type),
            symbol=symbol,
            type=position_type,
            quantity=sanitize_currency(first_value(row, POSITION_QUANTITY_COLUMNS)),
            mark=sanitize_currency(first_value(row, POSITION_MARK_COLUMNS)),
            pnl=parse_pnl(first_value(row, POSITION_PNL_COLUMNS)),
        )


def parse_positions_csv(source) -> list[Position]:
    """Read a positions CSV and return its Position records."""
    return PositionCSVNormalizer().normalize_file(source)
