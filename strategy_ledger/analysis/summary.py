"""
summary.py
----------
Build and render the per-strategy performance table.
"""
from dataclasses import asdict

import numpy as np
import pandas as pd

SNAPSHOT_COLUMNS = [
    "strategy_id", "name", "status", "start_date",
    "realized_pnl", "unrealized_pnl", "market_value", "total_pnl",
    "capital_allocation", "roi", "open_positions", "unrealized_unknown",
    "win_count", "loss_count",
]


def snapshots_to_frame(snapshots) -> pd.DataFrame:
    """Snapshots → numeric DataFrame, one row per strategy, in input order."""
    rows = [asdict(s) for s in snapshots]
    return pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)


def _fmt_money(x) -> str:
    if x == 0:
        return "$0.00"
    if x < 0:
        return f"-${abs(x):,.2f}"
    return f"${x:,.2f}"


def generate_strategy_summary(snapshots) -> pd.DataFrame:
    """
    Display table: currency-formatted P&L columns, ROI as a percentage
    ('—' when no capital is allocated).
    """
    df = snapshots_to_frame(snapshots)

    # ROI is only meaningful against an allocation
    roi = np.where(df["capital_allocation"] > 0, df["roi"].astype(float), np.nan)
    df["roi"] = [("—" if pd.isna(x) else f"{x:.2f}%") for x in roi]

    for col in ["realized_pnl", "unrealized_pnl", "market_value", "total_pnl", "capital_allocation"]:
        df[col] = df[col].apply(_fmt_money)

    df["name"] = np.where(df["name"] != "", df["name"], df["strategy_id"])
    df["record"] = [f"{w}W / {l}L" for w, l in zip(df["win_count"], df["loss_count"])]
    df = df.rename(columns={
        "name": "Strategy",
        "status": "Status",
        "realized_pnl": "Realized",
        "unrealized_pnl": "Unrealized",
        "market_value": "Market Value",
        "total_pnl": "Total P&L",
        "capital_allocation": "Allocation",
        "roi": "ROI",
        "open_positions": "Open",
        "record": "Record",
    })
    return df[["Strategy", "Status", "Realized", "Unrealized", "Market Value",
               "Total P&L", "Allocation", "ROI", "Open", "Record"]]


def generate_strategy_summary_html(snapshots) -> str:
    """
    Render the strategy summary DataFrame to an HTML table.
    """
    table = generate_strategy_summary(snapshots)
    return table.to_html(index=False, classes="strategy-summary", border=0)
