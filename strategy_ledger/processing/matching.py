"""
matching.py
-----------
FIFO-match opening fills to closing fills per contract, one row per matched
lot with its net profit.
"""
from collections import deque
from collections.abc import Iterable

import pandas as pd
import structlog

from strategy_ledger.models import Trade, TradeAction
from strategy_ledger.processing.marks import trade_key

logger = structlog.get_logger()

CLOSED_TRADE_COLUMNS = [
    "SYMBOL", "POSITION", "OPEN DATE", "CLOSE DATE", "QTY",
    "OPEN AMOUNT", "CLOSE AMOUNT", "FEES TOTAL", "NET PROFIT",
]

# side of the open lots a fill consumes: +1 long, -1 short
_CONSUMES_SIDE = {
    TradeAction.SELL_TO_CLOSE: 1,
    TradeAction.SELL: 1,
    TradeAction.BUY_TO_CLOSE: -1,
    TradeAction.BUY: -1,
}


def match_closed_trades(trades: Iterable[Trade]) -> pd.DataFrame:
    """
    FIFO-match fills per contract (canonical symbol) and return one row per
    matched (open lot, closing fill) pair. NET PROFIT is open amount plus
    close amount, both signed cash flows rounded to cents.

    BUY_TO_CLOSE / SELL_TO_CLOSE consume short / long lots. Plain BUY / SELL
    consume opposite lots first and open a new lot with what is left. Closes
    with no open lot, UNKNOWN fills and zero quantities are skipped.
    """
    open_lots: dict[tuple[str, int], deque] = {}
    closed = []

    # opens before closes at the same timestamp
    fills = sorted(trades, key=lambda t: (t.date, t.action_type.is_closing))

    for trade in fills:
        qty = abs(trade.quantity)
        action_type = trade.action_type
        if not qty or action_type is TradeAction.UNKNOWN:
            logger.debug("fill_not_matchable", symbol=trade.symbol, action=trade.action)
            continue

        key = trade_key(trade)
        amount_per_unit = trade.amount / qty
        fees_per_unit = trade.fees / qty

        side = _CONSUMES_SIDE.get(action_type)
        lots = open_lots.get((key, side))
        while qty > 0 and lots:
            lot = lots[0]
            matched = min(qty, lot["qty"])
            open_amt = round(lot["amount_per_unit"] * matched, 2)
            close_amt = round(amount_per_unit * matched, 2)
            closed.append({
                "SYMBOL": key,
                "POSITION": "Long" if side > 0 else "Short",
                "OPEN DATE": lot["date"],
                "CLOSE DATE": trade.date,
                "QTY": matched,
                "OPEN AMOUNT": open_amt,
                "CLOSE AMOUNT": close_amt,
                "FEES TOTAL": round((lot["fees_per_unit"] + fees_per_unit) * matched, 2),
                "NET PROFIT": round(open_amt + close_amt, 2),
            })
            lot["qty"] -= matched
            qty -= matched
            if lot["qty"] == 0:
                lots.popleft()

        if qty <= 0:
            continue
        if action_type.is_closing:
            logger.debug("close_without_open", symbol=key, quantity=qty)
            continue
        open_lots.setdefault((key, action_type.open_sign), deque()).append({
            "qty": qty,
            "date": trade.date,
            "amount_per_unit": amount_per_unit,
            "fees_per_unit": fees_per_unit,
        })

    return pd.DataFrame(closed, columns=CLOSED_TRADE_COLUMNS)
