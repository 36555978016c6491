"""
symbols.py
----------
Decode OCC-style option symbols into a canonical join key.

    'NVDA   241220C00140000' -> 'NVDA:2024-12-20:140.00:C'
    'BOXX'                   -> 'BOXX'

The same contract must map to the same key whether it came from a trade
export or a positions export, whatever spacing the broker used.
"""
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog

from strategy_ledger.config import OCC_CODE_MIN_LENGTH, OCC_DATE_LENGTH, OCC_STRIKE_SCALE

logger = structlog.get_logger()

OPTION_TYPES = ("OPTION", "FUTURES_OPTION")
_TWO_PLACES = Decimal("0.01")


class OptionSymbolError(ValueError):
    """Raised internally when an option code does not follow the OCC layout."""


def _decode_option_code(code: str):
    """Split an OCC code 'yyMMdd' + 'C|P' + strike*1000 into its parts."""
    if len(code) < OCC_CODE_MIN_LENGTH:
        raise OptionSymbolError(f"option code too short ({len(code)} chars)")

    raw_date = code[:OCC_DATE_LENGTH]
    right = code[OCC_DATE_LENGTH].upper()
    raw_strike = code[OCC_DATE_LENGTH + 1:]

    try:
        expiry = datetime.strptime(raw_date, "%y%m%d").date()
    except ValueError as exc:
        raise OptionSymbolError(f"bad expiration {raw_date!r}") from exc
    if right not in ("C", "P"):
        raise OptionSymbolError(f"bad option right {right!r}")
    if not raw_strike.isdigit():
        raise OptionSymbolError(f"non-numeric strike {raw_strike!r}")
    try:
        strike = (Decimal(raw_strike) / OCC_STRIKE_SCALE).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise OptionSymbolError(f"non-numeric strike {raw_strike!r}") from exc
    return expiry, right, strike


def canonicalize_symbol(symbol: str, asset_type) -> str:
    """
    Return the canonical key for *symbol*.

    Non-options: the trimmed symbol. Options: the first whitespace token is the
    underlying and the last is the OCC code; the result is
    'UNDERLYING:YYYY-MM-DD:STRIKE:C|P'. If the option symbol cannot be decoded
    the trimmed symbol is returned and a warning is logged.
    """
    trimmed = str(symbol).strip()
    kind = getattr(asset_type, "value", asset_type)
    if str(kind).upper() not in OPTION_TYPES:
        return trimmed

    tokens = trimmed.split()
    try:
        if len(tokens) < 2:
            raise OptionSymbolError("no separate underlying and option code")
        underlying, code = tokens[0], tokens[-1]
        expiry, right, strike = _decode_option_code(code)
    except OptionSymbolError as exc:
        logger.warning("option_symbol_unparsed", symbol=trimmed, reason=str(exc))
        return trimmed

    return f"{underlying}:{expiry.isoformat()}:{strike}:{right}"


def describe_option(canonical: str) -> str | None:
    """
    Render a canonical option key the way broker descriptions read, e.g.
    'NVDA:2024-12-20:140.00:C' -> 'NVDA Dec 20 2024 140.00 Call'.
    Returns None for keys that are not canonical option keys.
    """
    parts = canonical.split(":")
    if len(parts) != 4 or parts[3] not in ("C", "P"):
        return None
    underlying, raw_exp, strike, right = parts
    try:
        expiry = datetime.strptime(raw_exp, "%Y-%m-%d")
    except ValueError:
        return None
    opt_type = "Call" if right == "C" else "Put"
    return f"{underlying} {expiry:%b %d %Y} {strike} {opt_type}"
