"""
currency.py
-----------
Lenient parsing of broker currency, quantity and date strings.
"""
import re

import numpy as np
import pandas as pd

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def _leading_float(text: str) -> float | None:
    """Parse the longest numeric prefix of *text*, e.g. '1.2.3' -> 1.2."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group())


def sanitize_currency(raw) -> float:
    """
    Convert strings like '$1,234.50' or '($45.67)' into a signed float.

    A value wrapped in parentheses is an accounting negative and wins over any
    embedded minus sign. Returns 0.0 for absent, empty or unparsable input;
    never raises and never returns NaN or infinity.
    """
    if raw is None:
        return 0.0
    s = str(raw).strip()
    if not s:
        return 0.0

    is_negative = s.startswith("(") and s.endswith(")")
    number = _leading_float(_NON_NUMERIC.sub("", s))
    if number is None or not np.isfinite(number):
        return 0.0
    return -abs(number) if is_negative else number


def parse_quantity(raw) -> float:
    """Quantity column → float, tolerating thousands separators. Defaults to 0."""
    if raw is None:
        return 0.0
    s = str(raw).strip().replace(",", "")
    number = _leading_float(s) if s else None
    if number is None or not np.isfinite(number):
        return 0.0
    return number


def parse_mixed_date(s: str) -> pd.Timestamp:
    """
    Parse a broker date/time string into a UTC Timestamp.

    Known formats tried in order:
      1) '%m/%d/%Y'            (e.g. '04/23/2023')
      2) '%Y-%m-%d, %H:%M:%S'  (e.g. '2023-04-23, 14:30:00')
      3) '%m/%d/%Y %H:%M'      (e.g. '04/23/2023 14:30')

    Then falls back to automatic pandas parsing. Naive values are taken as
    UTC, aware values are converted. Returns NaT if nothing parses.
    """
    s = str(s).strip()
    formats_to_try = [
        "%m/%d/%Y",
        "%Y-%m-%d, %H:%M:%S",
        "%m/%d/%Y %H:%M",
    ]
    for fmt in formats_to_try:
        try:
            return pd.to_datetime(s, format=fmt, utc=True)
        except ValueError:
            pass
    # fallback
    return pd.to_datetime(s, errors="coerce", utc=True)
