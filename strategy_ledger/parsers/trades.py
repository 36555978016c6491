"""
Trade-history parser: normalizes broker trade rows into Trade records.

Expected columns (aliases in strategy_ledger.config):
    Symbol, Date|Time, Action, Quantity, Average Price|Price,
    Value|Amount, Fees|Commission, [Multiplier]
"""
from collections.abc import Mapping

import pandas as pd
import structlog

from strategy_ledger.config import (
    DEFAULT_ACTION,
    OPTION_MULTIPLIER,
    OPTION_SYMBOL_MIN_LENGTH,
    STOCK_MULTIPLIER,
    TRADE_ACTION_COLUMNS,
    TRADE_AMOUNT_COLUMNS,
    TRADE_DATE_COLUMNS,
    TRADE_FEES_COLUMNS,
    TRADE_MULTIPLIER_COLUMNS,
    TRADE_PRICE_COLUMNS,
    TRADE_QUANTITY_COLUMNS,
    TRADE_SYMBOL_COLUMNS,
)
from strategy_ledger.models import AssetType, Trade
from strategy_ledger.parsers.actions import classify_action
from strategy_ledger.parsers.base import BaseCSVNormalizer, first_value
from strategy_ledger.parsers.currency import parse_mixed_date, parse_quantity, sanitize_currency
from strategy_ledger.parsers.hashing import generate_import_hash

logger = structlog.get_logger()


def resolve_multiplier(symbol: str, raw_multiplier=None) -> int:
    """
    Contract multiplier for a fill: an explicit 1 or 100 from the export wins,
    otherwise symbols longer than five characters are taken to be options.
    """
    explicit = parse_quantity(raw_multiplier)
    if explicit in (STOCK_MULTIPLIER, OPTION_MULTIPLIER):
        return int(explicit)
    if explicit != 0:
        logger.warning("unsupported_multiplier", symbol=symbol, multiplier=raw_multiplier)
    return OPTION_MULTIPLIER if len(symbol) > OPTION_SYMBOL_MIN_LENGTH else STOCK_MULTIPLIER


class TradeCSVNormalizer(BaseCSVNormalizer):
    """
    Parses trade-history rows. A row needs a symbol and a parsable date/time;
    every numeric field falls back to 0. Stored price is per-share * multiplier.
    """

    skip_event = "trade_row_skipped"

    def parse_row(self, row: Mapping):
        symbol = first_value(row, TRADE_SYMBOL_COLUMNS)
        raw_date = first_value(row, TRADE_DATE_COLUMNS)
        if not symbol or not raw_date:
            return None

        ts = parse_mixed_date(raw_date)
        if pd.isna(ts):
            raise ValueError(f"unparsable date {raw_date!r}")

        quantity = parse_quantity(first_value(row, TRADE_QUANTITY_COLUMNS))
        per_share_price = sanitize_currency(first_value(row, TRADE_PRICE_COLUMNS))
        amount = sanitize_currency(first_value(row, TRADE_AMOUNT_COLUMNS))
        fees = abs(sanitize_currency(first_value(row, TRADE_FEES_COLUMNS)))

        multiplier = resolve_multiplier(symbol, first_value(row, TRADE_MULTIPLIER_COLUMNS))
        asset_type = AssetType.OPTION if multiplier == OPTION_MULTIPLIER else AssetType.STOCK

        raw_action = first_value(row, TRADE_ACTION_COLUMNS)
        action = raw_action.upper() if raw_action else DEFAULT_ACTION

        return Trade(
            symbol=symbol,
            date=ts.to_pydatetime(),
            action=action,
            quantity=quantity,
            price=per_share_price * multiplier,
            fees=fees,
            amount=amount,
            asset_type=asset_type,
            multiplier=multiplier,
            import_hash=generate_import_hash(row),
            action_type=classify_action(action),
        )


def parse_trade_csv(source) -> list[Trade]:
    """Read a trade-history CSV and return its Trade records."""
    return TradeCSVNormalizer().normalize_file(source)
