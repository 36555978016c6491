"""
imports.py
----------
Orchestrates one import batch: read broker exports, normalize, drop rows
already imported, and optionally write cleaned CSVs.
"""
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path

import pandas as pd
import structlog

from strategy_ledger.models import ImportBatch, Position, Trade
from strategy_ledger.parsers.positions import PositionCSVNormalizer
from strategy_ledger.parsers.trades import TradeCSVNormalizer

logger = structlog.get_logger()

TRADE_COLUMNS = [
    "symbol", "date", "action", "action_type", "quantity", "price", "fees",
    "amount", "asset_type", "multiplier", "import_hash",
]
POSITION_COLUMNS = ["canonical_symbol", "symbol", "type", "quantity", "mark", "pnl"]


def dedupe_trades(trades: Iterable[Trade], existing_hashes: Iterable[str] = ()):
    """
    Keep the first trade for each import_hash not already in *existing_hashes*.
    Returns (kept, duplicate_count).
    """
    seen = set(existing_hashes)
    kept = []
    duplicates = 0
    for trade in trades:
        if trade.import_hash in seen:
            duplicates += 1
            continue
        seen.add(trade.import_hash)
        kept.append(trade)
    return kept, duplicates


def trades_to_frame(trades) -> pd.DataFrame:
    rows = []
    for t in trades:
        rec = asdict(t)
        rec["date"] = t.iso_date
        rec["asset_type"] = t.asset_type.value
        rec["action_type"] = t.action_type.value
        rows.append(rec)
    return pd.DataFrame(rows, columns=TRADE_COLUMNS)


def positions_to_frame(positions) -> pd.DataFrame:
    rows = []
    for p in positions:
        rec = asdict(p)
        rec["type"] = p.type.value
        rows.append(rec)
    return pd.DataFrame(rows, columns=POSITION_COLUMNS)


def process_imports(
    trades_file: str | Path | None = None,
    positions_file: str | Path | None = None,
    out_dir: str | Path | None = None,
    existing_hashes: Iterable[str] = (),
) -> ImportBatch:
    """
    Normalize a trade-history export and/or a positions export.

    Trades whose import_hash is in *existing_hashes* (or repeated within the
    file) are dropped. When *out_dir* is given, trades.csv and positions.csv
    are written there. A file that cannot be read raises FileFormatError and
    nothing is written.
    """
    trades: list[Trade] = []
    positions: list[Position] = []
    duplicates = 0

    if trades_file is not None:
        parsed = TradeCSVNormalizer().normalize_file(trades_file)
        trades, duplicates = dedupe_trades(parsed, existing_hashes)
        logger.info("trades_normalized", source=str(trades_file), kept=len(trades), duplicates=duplicates)

    if positions_file is not None:
        positions = PositionCSVNormalizer().normalize_file(positions_file)
        logger.info("positions_normalized", source=str(positions_file), count=len(positions))

    if out_dir is not None:
        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)
        if trades_file is not None:
            trades_to_frame(trades).to_csv(out_path / "trades.csv", index=False)
        if positions_file is not None:
            positions_to_frame(positions).to_csv(out_path / "positions.csv", index=False)
        logger.info("imports_written", out_dir=str(out_path))

    return ImportBatch(trades=trades, positions=positions, duplicates=duplicates)
