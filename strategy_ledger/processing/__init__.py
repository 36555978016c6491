# strategy_ledger.processing package
from .imports import (
    dedupe_trades,
    positions_to_frame,
    process_imports,
    trades_to_frame,
)
from .marks import attach_marks, index_positions, open_trade_from_trade
from .matching import match_closed_trades
