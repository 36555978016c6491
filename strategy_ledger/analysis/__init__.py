"""
strategy_ledger.analysis: per-strategy P&L aggregation and summary tables.
"""
from .metrics import count_wins_losses, cumulative_pnl
from .pnl import (
    StrategyPnLAggregator,
    aggregate_strategy_pnl,
    compute_cash_flow_totals,
    compute_roi,
)
from .summary import (
    generate_strategy_summary,
    generate_strategy_summary_html,
    snapshots_to_frame,
)
