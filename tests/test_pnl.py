"""Unit tests for per-strategy P&L aggregation."""

import math
import random
from datetime import date

import pytest

from strategy_ledger.analysis.pnl import (
    StrategyPnLAggregator,
    aggregate_strategy_pnl,
    compute_cash_flow_totals,
    compute_roi,
    direction_sign,
)
from strategy_ledger.models import OpenTrade, StrategyMeta, TradeAction


def _open(strategy_id="wheel", action="BUY_TO_OPEN", quantity=1, mark=1.0, pnl=0.0, multiplier=100, action_type=None):
    return OpenTrade(
        strategy_id=strategy_id,
        symbol="XYZ 241220C00100000",
        action=action,
        quantity=quantity,
        multiplier=multiplier,
        mark=mark,
        unrealized_pnl=pnl,
        action_type=action_type or TradeAction.UNKNOWN,
    )


class TestCostBasisCancellation:
    """Cash-flow total + market value equals closed P&L + open P&L."""

    def test_long_call_and_short_put(self):
        # closed trades netted +75
        # long call bought for 2.00 (cost 200), now 3.00: +100 open P&L
        # short put sold for 1.50 (credit 150), now 1.00: +50 open P&L
        realized_closed = 75.0
        cash_flow_total = realized_closed - 200.0 + 150.0
        open_trades = [
            _open(action="BUY_TO_OPEN", mark=3.00, pnl=100.0),
            _open(action="SELL_TO_OPEN", mark=1.00, pnl=50.0),
        ]

        (snap,) = aggregate_strategy_pnl({"wheel": cash_flow_total}, open_trades)

        assert snap.realized_pnl == 25.0
        assert snap.market_value == 200.0
        assert snap.unrealized_pnl == 150.0
        assert snap.total_pnl == 225.0
        assert snap.realized_pnl + snap.market_value == realized_closed + snap.unrealized_pnl
        assert snap.realized_closed_pnl == realized_closed

    def test_identity_holds_for_random_books(self):
        rng = random.Random(42)
        for _ in range(200):
            realized_closed = rng.uniform(-5000, 5000)
            cost_basis = 0.0
            unrealized = 0.0
            rows = []
            for _ in range(rng.randint(2, 8)):
                qty = rng.randint(1, 10)
                entry = round(rng.uniform(0.05, 20), 2)
                mark = round(rng.uniform(0.05, 20), 2)
                if rng.random() < 0.5:
                    action, sign = "Bought To Open", 1
                else:
                    action, sign = "Sold To Open", -1
                # cost basis: debit for longs, credit for shorts
                cost_basis += sign * entry * qty * 100
                pnl = sign * (mark - entry) * qty * 100
                unrealized += pnl
                rows.append(_open(strategy_id="s", action=action, quantity=qty, mark=mark, pnl=pnl))

            cash_flow_total = realized_closed - cost_basis
            (snap,) = aggregate_strategy_pnl({"s": cash_flow_total}, rows)

            assert math.isclose(
                snap.realized_pnl + snap.market_value,
                realized_closed + snap.unrealized_pnl,
                rel_tol=1e-9,
                abs_tol=1e-6,
            )
            assert math.isclose(snap.unrealized_pnl, unrealized, rel_tol=1e-9, abs_tol=1e-6)


class TestStrategyPnLAggregator:
    def test_market_value_uses_multiplier_and_sign(self):
        rows = [
            _open(action="BUY", quantity=10, mark=150.0, multiplier=1),
            _open(action="SELL_TO_OPEN", quantity=2, mark=1.25, multiplier=100),
        ]
        (snap,) = aggregate_strategy_pnl({"wheel": 0.0}, rows)
        assert snap.market_value == 1500.0 - 250.0

    def test_action_type_tag_preferred_over_text(self):
        row = _open(action="mystery text", action_type=TradeAction.SELL_TO_OPEN, mark=2.0)
        (snap,) = aggregate_strategy_pnl({"wheel": 0.0}, [row])
        assert snap.market_value == -200.0

    def test_unknown_direction_adds_no_market_value(self):
        row = _open(action="TRANSFER", mark=2.0, pnl=10.0)
        (snap,) = aggregate_strategy_pnl({"wheel": 0.0}, [row])
        assert snap.market_value == 0.0
        assert snap.unrealized_pnl == 10.0

    def test_broker_pnl_trusted_as_reported(self):
        row = _open(mark=5.0, pnl=-42.0)
        (snap,) = aggregate_strategy_pnl({"wheel": 0.0}, [row])
        assert snap.unrealized_pnl == -42.0

    def test_missing_broker_pnl_counted(self):
        rows = [_open(pnl=None), _open(pnl=7.0)]
        (snap,) = aggregate_strategy_pnl({"wheel": 0.0}, rows)
        assert snap.unrealized_pnl == 7.0
        assert snap.unrealized_unknown == 1
        assert snap.open_positions == 2

    def test_open_trade_for_unknown_strategy_is_skipped(self):
        rows = [_open(strategy_id="ghost", mark=100.0)]
        (snap,) = aggregate_strategy_pnl({"wheel": 10.0}, rows)
        assert snap.strategy_id == "wheel"
        assert snap.market_value == 0.0
        assert snap.total_pnl == 10.0

    def test_metadata_merged(self):
        meta = [StrategyMeta("wheel", name="Wheel", capital_allocation=10_000, status="paused",
                             start_date=date(2024, 1, 2))]
        (snap,) = aggregate_strategy_pnl({"wheel": 500.0}, [], meta)
        assert snap.name == "Wheel"
        assert snap.status == "paused"
        assert snap.start_date == date(2024, 1, 2)
        assert snap.capital_allocation == 10_000
        assert snap.roi == pytest.approx(5.0)

    def test_metadata_as_mapping(self):
        meta = {"wheel": StrategyMeta("wheel", capital_allocation=1000)}
        (snap,) = StrategyPnLAggregator().aggregate({"wheel": -100.0}, [], meta)
        assert snap.roi == pytest.approx(-10.0)

    def test_missing_metadata_defaults(self):
        (snap,) = aggregate_strategy_pnl({"wheel": 500.0}, [])
        assert snap.capital_allocation == 0
        assert snap.status == "active"
        assert snap.roi == 0

    def test_metadata_only_strategy_included(self):
        snaps = aggregate_strategy_pnl({}, [_open(strategy_id="new", mark=1.0)], [StrategyMeta("new")])
        assert [s.strategy_id for s in snaps] == ["new"]
        assert snaps[0].realized_pnl == 0.0
        assert snaps[0].market_value == 100.0

    def test_sorted_by_total_pnl_descending(self):
        snaps = aggregate_strategy_pnl(
            {"a": 10.0, "b": 300.0, "c": -50.0},
            [_open(strategy_id="c", mark=10.0)],
        )
        assert [s.strategy_id for s in snaps] == ["c", "b", "a"]
        assert [s.total_pnl for s in snaps] == [950.0, 300.0, 10.0]

    def test_empty_inputs(self):
        assert aggregate_strategy_pnl({}, []) == []


class TestComputeRoi:
    def test_zero_allocation_is_zero(self):
        assert compute_roi(1234.0, 0) == 0
        assert compute_roi(-1234.0, 0.0) == 0

    def test_negative_allocation_is_zero(self):
        assert compute_roi(100.0, -5.0) == 0

    def test_percent(self):
        assert compute_roi(250.0, 1000.0) == pytest.approx(25.0)


class TestComputeCashFlowTotals:
    def test_sums_per_strategy(self, make_trade):
        pairs = [
            ("wheel", make_trade(amount=-200.0, fees=1.0)),
            ("wheel", make_trade(amount=150.0, fees=1.0)),
            ("spy", make_trade(amount=80.0)),
            (None, make_trade(amount=9999.0)),
        ]
        assert compute_cash_flow_totals(pairs) == {"wheel": -50.0, "spy": 80.0}
        assert compute_cash_flow_totals(pairs, net_of_fees=True) == {"wheel": -52.0, "spy": 80.0}


class TestDirectionSign:
    def test_text_fallback_is_case_insensitive(self):
        assert direction_sign(_open(action="bought to open")) == 1
        assert direction_sign(_open(action="SOLD TO OPEN")) == -1
