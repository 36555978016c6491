"""
models.py
---------
Canonical records produced by the parsers and consumed by the P&L analysis.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from strategy_ledger.config import DEFAULT_STRATEGY_STATUS


class AssetType(str, Enum):
    STOCK = "STOCK"
    OPTION = "OPTION"


class PositionType(str, Enum):
    STOCK = "STOCK"
    OPTION = "OPTION"
    FUTURES_OPTION = "FUTURES_OPTION"

    @property
    def is_option(self) -> bool:
        return self is not PositionType.STOCK


class TradeAction(str, Enum):
    """
    Direction of a fill, resolved once while parsing the broker's action text.

    BUY / SELL are fills where the broker did not say whether the lot was
    opened or closed (plain equity orders).
    """

    BUY_TO_OPEN = "BUY_TO_OPEN"
    SELL_TO_OPEN = "SELL_TO_OPEN"
    BUY_TO_CLOSE = "BUY_TO_CLOSE"
    SELL_TO_CLOSE = "SELL_TO_CLOSE"
    BUY = "BUY"
    SELL = "SELL"
    UNKNOWN = "UNKNOWN"

    @property
    def open_sign(self) -> int:
        """+1 for a long opening fill, -1 for a short opening fill, else 0."""
        if self in (TradeAction.BUY_TO_OPEN, TradeAction.BUY):
            return 1
        if self in (TradeAction.SELL_TO_OPEN, TradeAction.SELL):
            return -1
        return 0

    @property
    def is_closing(self) -> bool:
        return self in (TradeAction.BUY_TO_CLOSE, TradeAction.SELL_TO_CLOSE)


@dataclass(frozen=True)
class Trade:
    """One normalized fill from a trade-history export."""

    symbol: str
    date: datetime
    action: str
    quantity: float
    price: float  # total per lot: per-share price * multiplier
    fees: float
    amount: float
    asset_type: AssetType
    multiplier: int
    import_hash: str
    action_type: TradeAction = TradeAction.UNKNOWN

    @property
    def per_share_price(self) -> float:
        return self.price / self.multiplier

    @property
    def iso_date(self) -> str:
        return self.date.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Position:
    """One row of an open-positions snapshot."""

    canonical_symbol: str
    symbol: str
    type: PositionType
    quantity: float
    mark: float
    pnl: float | None  # None: the broker reported no P&L


@dataclass(frozen=True)
class StrategyMeta:
    strategy_id: str
    name: str = ""
    capital_allocation: float = 0.0
    status: str = DEFAULT_STRATEGY_STATUS
    start_date: date | None = None


@dataclass(frozen=True)
class OpenTrade:
    """An open lot assigned to a strategy, carrying its current mark."""

    strategy_id: str
    symbol: str
    action: str
    quantity: float
    multiplier: int
    mark: float
    unrealized_pnl: float | None = None
    action_type: TradeAction = TradeAction.UNKNOWN


@dataclass(frozen=True)
class StrategyPnLSnapshot:
    strategy_id: str
    realized_pnl: float
    market_value: float
    unrealized_pnl: float
    total_pnl: float
    capital_allocation: float
    roi: float
    name: str = ""
    status: str = DEFAULT_STRATEGY_STATUS
    start_date: date | None = None
    open_positions: int = 0
    unrealized_unknown: int = 0
    win_count: int = 0
    loss_count: int = 0

    @property
    def realized_closed_pnl(self) -> float:
        """P&L locked in by closed lots: total less what is still open."""
        return self.total_pnl - self.unrealized_pnl


@dataclass
class ImportBatch:
    trades: list[Trade]
    positions: list[Position]
    duplicates: int = 0
