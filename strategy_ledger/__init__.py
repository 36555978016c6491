"""
strategy_ledger
---------------
Broker CSV import (trades and open positions) and per-strategy P&L.
"""
from .errors import FileFormatError, StrategyLedgerError
from .models import (
    AssetType,
    ImportBatch,
    OpenTrade,
    Position,
    PositionType,
    StrategyMeta,
    StrategyPnLSnapshot,
    Trade,
    TradeAction,
)
from .parsers import (
    PositionCSVNormalizer,
    TradeCSVNormalizer,
    canonicalize_symbol,
    generate_import_hash,
    sanitize_currency,
)
from .analysis import StrategyPnLAggregator, aggregate_strategy_pnl
from .processing import attach_marks, process_imports

__version__ = "0.1.0"
