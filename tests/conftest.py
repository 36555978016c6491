"""
Shared test fixtures.

Broker exports are written to tmp_path as real CSV files so the parsers are
exercised end to end through the CSV reader.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
import structlog

from strategy_ledger.models import AssetType, Trade, TradeAction

TRADES_CSV = """\
Date,Action,Symbol,Quantity,Average Price,Value,Fees,Description
2024-03-01,BUY_TO_OPEN,AAPL,10,$150.25,"-1,502.50",(1.00),Bought 10 AAPL
06/03/2024 10:15,SELL_TO_OPEN,SPY   240621P00500000,1,2.10,210.00,1.14,Sold 1 SPY Put
,BUY_TO_OPEN,MSFT,5,400.00,-2000.00,0.00,missing date
2024-03-04,SELL_TO_CLOSE,,5,1.00,500.00,0.00,missing symbol
not-a-date,BUY_TO_OPEN,QQQ,1,1.00,-1.00,0.00,garbage date
"""

POSITIONS_CSV = """\
Symbol,Type,Quantity,Mark,P/L Open
NVDA  241220C00140000,EQUITY_OPTION,2,$5.10,($120.00)
BOXX,EQUITY,100,$110.50,0.00
SPY 240621P00500000,OPTION,-1,$1.00,
,EQUITY,3,1.00,1.00
"""


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Each test starts from structlog's default (uncached) configuration."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def trades_csv(tmp_path):
    path = tmp_path / "trades.csv"
    path.write_text(TRADES_CSV)
    return path


@pytest.fixture
def positions_csv(tmp_path):
    path = tmp_path / "positions.csv"
    path.write_text(POSITIONS_CSV)
    return path


@pytest.fixture
def make_trade():
    """Factory for Trade records with sensible defaults."""

    def _make(**overrides) -> Trade:
        fields = {
            "symbol": "AAPL",
            "date": datetime(2024, 3, 1, tzinfo=UTC),
            "action": "BUY_TO_OPEN",
            "quantity": 1.0,
            "price": 100.0,
            "fees": 0.0,
            "amount": -100.0,
            "asset_type": AssetType.STOCK,
            "multiplier": 1,
            "import_hash": "abc",
            "action_type": TradeAction.BUY_TO_OPEN,
        }
        fields.update(overrides)
        return Trade(**fields)

    return _make
