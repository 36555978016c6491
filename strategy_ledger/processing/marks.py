"""
marks.py
--------
Join open trade lots to a positions snapshot on canonical symbol, producing
the marked OpenTrade rows the P&L aggregator consumes.
"""
from collections.abc import Iterable

import structlog

from strategy_ledger.models import OpenTrade, Position, Trade
from strategy_ledger.parsers.symbols import canonicalize_symbol

logger = structlog.get_logger()


def index_positions(positions: Iterable[Position]) -> dict[str, Position]:
    """canonical_symbol → Position; a later row for the same contract wins."""
    return {p.canonical_symbol: p for p in positions}


def trade_key(trade: Trade) -> str:
    return canonicalize_symbol(trade.symbol, trade.asset_type)


def open_trade_from_trade(trade: Trade, strategy_id: str, position: Position | None = None) -> OpenTrade:
    """
    Build the marked row for one open lot. Without a matching position the mark
    is 0 and broker P&L is unknown.

    When the lot is only part of the broker position, it carries the matching
    share of the position's P&L so lots split across strategies do not count
    the same P&L twice.
    """
    quantity = abs(trade.quantity)
    pnl = None
    if position is not None and position.pnl is not None:
        held = abs(position.quantity)
        if not quantity:
            share = 0.0
        elif held:
            share = min(1.0, quantity / held)
        else:
            share = 1.0
        pnl = position.pnl * share

    return OpenTrade(
        strategy_id=strategy_id,
        symbol=trade.symbol,
        action=trade.action,
        quantity=quantity,
        multiplier=trade.multiplier,
        mark=position.mark if position else 0.0,
        unrealized_pnl=pnl,
        action_type=trade.action_type,
    )


def attach_marks(
    assigned_trades: Iterable[tuple[str, Trade]],
    positions: Iterable[Position],
) -> list[OpenTrade]:
    """
    Mark each (strategy_id, open trade) pair with the position holding the same
    contract. Option trades are matched through their canonical OCC key, so
    broker spacing differences between the two exports do not matter.
    """
    by_symbol = index_positions(positions)
    marked = []
    for strategy_id, trade in assigned_trades:
        key = trade_key(trade)
        position = by_symbol.get(key)
        if position is None:
            logger.debug("open_trade_unmarked", strategy_id=strategy_id, symbol=key)
        marked.append(open_trade_from_trade(trade, strategy_id, position))
    return marked
