"""
hashing.py
----------
Deterministic fingerprint of a raw trade row, used to skip re-imported fills.

The serialization and the 31-multiplier rolling hash are kept bit-for-bit
stable: persisted ``import_hash`` values must keep matching on re-import.
"""
import json

from strategy_ledger.config import (
    HASH_PLACEHOLDER,
    TRADE_ACTION_COLUMNS,
    TRADE_AMOUNT_COLUMNS,
    TRADE_DATE_COLUMNS,
    TRADE_PRICE_COLUMNS,
    TRADE_QUANTITY_COLUMNS,
    TRADE_SYMBOL_COLUMNS,
)
from strategy_ledger.parsers.base import first_value


def _hash_fields(row) -> dict:
    """Pick the fingerprinted fields out of *row* in their fixed order."""
    fields = {
        "symbol": first_value(row, TRADE_SYMBOL_COLUMNS),
        "date": first_value(row, TRADE_DATE_COLUMNS),
        "action": first_value(row, TRADE_ACTION_COLUMNS),
        "qty": first_value(row, TRADE_QUANTITY_COLUMNS),
        "price": first_value(row, TRADE_PRICE_COLUMNS),
        "amount": first_value(row, TRADE_AMOUNT_COLUMNS),
    }
    return {k: (HASH_PLACEHOLDER if v is None else v) for k, v in fields.items()}


def rolling_hash(text: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to signed 32-bit."""
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def generate_import_hash(row) -> str:
    """
    Hex fingerprint of {symbol, date/time, action, quantity, price, amount}.

    Column order and any extra columns in *row* do not affect the result.
    Negative 32-bit values keep their leading '-', e.g. '-1b2c3d'.
    """
    serialized = json.dumps(_hash_fields(row), separators=(",", ":"), ensure_ascii=False)
    return format(rolling_hash(serialized), "x")
