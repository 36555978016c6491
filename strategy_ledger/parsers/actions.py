"""
Resolve free-form broker action text into a TradeAction.

Handles the spellings seen across exports: 'BUY_TO_OPEN', 'Bought To Open',
'SELL TO CLOSE', 'Sold To Close', plain 'BUY' / 'SELL', and 'Expired'.
"""
import re

from strategy_ledger.models import TradeAction

_SEPARATORS = re.compile(r"[\s_\-]+")
_BUY_WORDS = ("BUY", "BOUGHT")
_SELL_WORDS = ("SELL", "SOLD")


def classify_action(text) -> TradeAction:
    if not text:
        return TradeAction.UNKNOWN
    words = _SEPARATORS.sub(" ", str(text).strip().upper())
    tokens = words.split()

    is_buy = any(w in tokens for w in _BUY_WORDS)
    is_sell = any(w in tokens for w in _SELL_WORDS)
    if is_buy == is_sell:
        # an expired long is closed out like a sale
        if "EXPIRED" in tokens:
            return TradeAction.SELL_TO_CLOSE
        return TradeAction.UNKNOWN

    if "OPEN" in tokens:
        return TradeAction.BUY_TO_OPEN if is_buy else TradeAction.SELL_TO_OPEN
    if "CLOSE" in tokens:
        return TradeAction.BUY_TO_CLOSE if is_buy else TradeAction.SELL_TO_CLOSE
    return TradeAction.BUY if is_buy else TradeAction.SELL
