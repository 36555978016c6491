"""
metrics.py
----------
Trade-level statistics: realized win/loss record per strategy and the
cumulative P&L curve.
"""
from collections.abc import Iterable

import pandas as pd

from strategy_ledger.models import Trade
from strategy_ledger.processing.matching import match_closed_trades


def count_wins_losses(assigned_trades: Iterable[tuple[str | None, Trade]]) -> dict[str, tuple[int, int]]:
    """
    (wins, losses) per strategy id from its FIFO-matched closed lots. A lot
    closed at exactly zero net profit counts as neither. Unassigned trades
    are ignored.
    """
    by_strategy: dict[str, list[Trade]] = {}
    for strategy_id, trade in assigned_trades:
        if strategy_id is None:
            continue
        by_strategy.setdefault(strategy_id, []).append(trade)

    record = {}
    for strategy_id, trades in by_strategy.items():
        net = match_closed_trades(trades)["NET PROFIT"].astype(float)
        record[strategy_id] = (int((net > 0).sum()), int((net < 0).sum()))
    return record


def cumulative_pnl(trades: Iterable[Trade]) -> pd.DataFrame:
    """
    Running total of signed trade amounts in date order (columns date,
    amount, cumulative_pnl). Trades on the same date keep input order.
    """
    df = pd.DataFrame(
        [{"date": t.date, "amount": t.amount} for t in trades],
        columns=["date", "amount"],
    )
    df = df.sort_values(by="date", kind="stable").reset_index(drop=True)
    df["cumulative_pnl"] = df["amount"].astype(float).cumsum()
    return df
