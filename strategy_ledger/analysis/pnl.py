"""
pnl.py
------
Per-strategy P&L from persisted cash flows plus live marks on open lots.

The cash-flow total of a strategy (the sum of every fill's signed amount) is
realized P&L of closed lots *minus* the cost basis still tied up in open lots.
Adding the market value of the open lots puts that cost basis back:

    cash_flow_total + market_value
        = (realized_closed - cost_basis) + (unrealized + cost_basis)
        = realized_closed + unrealized

so total P&L is simply ``cash_flow_total + market_value``.
"""
from collections.abc import Iterable, Mapping

import structlog

from strategy_ledger.config import DEFAULT_STRATEGY_STATUS
from strategy_ledger.models import OpenTrade, StrategyMeta, StrategyPnLSnapshot, Trade, TradeAction
from strategy_ledger.parsers.actions import classify_action

logger = structlog.get_logger()


def compute_cash_flow_totals(
    assigned_trades: Iterable[tuple[str | None, Trade]],
    net_of_fees: bool = False,
) -> dict[str, float]:
    """
    Sum signed trade amounts per strategy id. Trades assigned to no strategy
    (id None) are ignored. With *net_of_fees*, fees are deducted as well.
    """
    totals: dict[str, float] = {}
    for strategy_id, trade in assigned_trades:
        if strategy_id is None:
            continue
        flow = trade.amount - trade.fees if net_of_fees else trade.amount
        totals[strategy_id] = totals.get(strategy_id, 0.0) + flow
    return totals


def direction_sign(open_trade: OpenTrade) -> int:
    """+1 for an opening long, -1 for an opening short, 0 if it cannot be told."""
    action_type = open_trade.action_type
    if action_type is TradeAction.UNKNOWN:
        action_type = classify_action(open_trade.action)
    return action_type.open_sign


def compute_roi(total_pnl: float, capital_allocation: float) -> float:
    """Return on allocated capital in percent; 0 when nothing is allocated."""
    if capital_allocation > 0:
        return total_pnl / capital_allocation * 100
    return 0.0


class StrategyPnLAggregator:
    """
    Combines per-strategy cash-flow totals with marked open lots into
    StrategyPnLSnapshot rows, best total P&L first.
    """

    def aggregate(
        self,
        cash_flow_totals: Mapping[str, float],
        open_trades: Iterable[OpenTrade],
        metadata: Iterable[StrategyMeta] | Mapping[str, StrategyMeta] | None = None,
        win_loss: Mapping[str, tuple[int, int]] | None = None,
    ) -> list[StrategyPnLSnapshot]:
        """
        *win_loss* maps strategy id to its realized (wins, losses) record, as
        returned by count_wins_losses; strategies missing from it get 0W / 0L.
        """
        meta_by_id = self._index_metadata(metadata)
        win_loss = win_loss or {}

        strategy_ids = list(cash_flow_totals)
        strategy_ids += [sid for sid in meta_by_id if sid not in cash_flow_totals]

        market_value = dict.fromkeys(strategy_ids, 0.0)
        unrealized = dict.fromkeys(strategy_ids, 0.0)
        open_count = dict.fromkeys(strategy_ids, 0)
        unknown_count = dict.fromkeys(strategy_ids, 0)

        for row in open_trades:
            sid = row.strategy_id
            if sid not in market_value:
                logger.debug("open_trade_without_strategy", strategy_id=sid, symbol=row.symbol)
                continue

            sign = direction_sign(row)
            if sign == 0:
                logger.debug("open_trade_direction_unknown", strategy_id=sid, action=row.action)
            market_value[sid] += row.mark * row.quantity * row.multiplier * sign

            if row.unrealized_pnl is None:
                unknown_count[sid] += 1
            else:
                unrealized[sid] += row.unrealized_pnl
            open_count[sid] += 1

        snapshots = []
        for sid in strategy_ids:
            meta = meta_by_id.get(sid)
            allocation = meta.capital_allocation if meta else 0.0
            realized = cash_flow_totals.get(sid, 0.0)
            total = realized + market_value[sid]
            wins, losses = win_loss.get(sid, (0, 0))
            snapshots.append(
                StrategyPnLSnapshot(
                    strategy_id=sid,
                    realized_pnl=realized,
                    market_value=market_value[sid],
                    unrealized_pnl=unrealized[sid],
                    total_pnl=total,
                    capital_allocation=allocation,
                    roi=compute_roi(total, allocation),
                    name=meta.name if meta else "",
                    status=meta.status if meta else DEFAULT_STRATEGY_STATUS,
                    start_date=meta.start_date if meta else None,
                    open_positions=open_count[sid],
                    unrealized_unknown=unknown_count[sid],
                    win_count=wins,
                    loss_count=losses,
                )
            )

        # stable sort: equal totals keep input order
        snapshots.sort(key=lambda s: s.total_pnl, reverse=True)
        return snapshots

    @staticmethod
    def _index_metadata(metadata) -> dict[str, StrategyMeta]:
        if metadata is None:
            return {}
        if isinstance(metadata, Mapping):
            return dict(metadata)
        return {m.strategy_id: m for m in metadata}


def aggregate_strategy_pnl(cash_flow_totals, open_trades, metadata=None, win_loss=None) -> list[StrategyPnLSnapshot]:
    """Module-level shortcut for StrategyPnLAggregator().aggregate(...)."""
    return StrategyPnLAggregator().aggregate(cash_flow_totals, open_trades, metadata, win_loss)
