#!/usr/bin/env python3
"""
CLI wrapper: normalize broker trade-history and positions exports into
cleaned CSVs.

Usage: python scripts/process_imports.py [trades.csv] [positions.csv] [out_dir]
"""
import sys
from pathlib import Path

from strategy_ledger.errors import FileFormatError
from strategy_ledger.logging import configure_structlog
from strategy_ledger.processing import process_imports


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 3:
        print("Usage: python scripts/process_imports.py [trades.csv] [positions.csv] [out_dir]")
        return 1

    defaults = ["data/trades.csv", "data/positions.csv", "data/cleaned"]
    trades_file, positions_file, out_dir = (args + defaults[len(args):])[:3]

    configure_structlog()
    try:
        batch = process_imports(Path(trades_file), Path(positions_file), Path(out_dir))
    except FileFormatError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"✔ {len(batch.trades)} trades, {len(batch.positions)} positions written to {out_dir}")
    if batch.duplicates:
        print(f"  skipped {batch.duplicates} duplicate trade rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
