#!/usr/bin/env python3
"""Sample inventory CSV generator for manual runs and performance checks.

Writes a delimited file whose headers use the spellings people typically put in
home inventory spreadsheets ("Item Name", "Manufacturer", "Cost", ...), so the
column mapper has something realistic to auto-map. A fraction of rows can be
made deliberately broken (bad price, bad date, empty name) to exercise the
row error path.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

_ITEMS = ["Lamp", "Sofa", "Television", "Laptop", "Blender", "Bookshelf", "Camera", "Desk Chair"]
_BRANDS = ["IKEA", "Sony", "Apple", "Samsung", "Bosch", "Canon", "Herman Miller"]
_CONDITIONS = ["New", "Like New", "Good", "Fair", "Poor", "excellent", "worn"]
_CATEGORIES = ["Electronics", "Furniture", "Appliances", "Office"]
_ROOMS = ["Living Room", "Kitchen", "Bedroom", "Office", "Garage"]
_DELIMITERS = {"comma": ",", "semicolon": ";", "tab": "\t", "pipe": "|"}


def generate_inventory(rows: int, seed: int = 42, broken_ratio: float = 0.0) -> pd.DataFrame:
    """Generate a synthetic inventory DataFrame.

    Args:
        rows: Number of data rows
        seed: Random seed for reproducible data
        broken_ratio: Share of rows (0..1) with one deliberately invalid cell
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2018-01-01", "2024-12-31", periods=200)

    purchase = pd.to_datetime(rng.choice(dates, rows))
    frame = pd.DataFrame(
        {
            "Item Name": [f"{rng.choice(_ITEMS)} {i + 1}" for i in range(rows)],
            "Manufacturer": rng.choice(_BRANDS, rows),
            "Model #": [f"M-{n}" for n in rng.integers(100, 9999, rows)],
            "Serial Number": [f"SN{n:08d}" for n in rng.integers(0, 10**8, rows)],
            "Cost": [f"${p:,.2f}" for p in np.round(rng.uniform(5, 2500, rows), 2)],
            "Purchase Date": purchase.strftime("%Y-%m-%d"),
            "Warranty Until": (purchase + pd.DateOffset(years=2)).strftime("%m/%d/%Y"),
            "Condition": rng.choice(_CONDITIONS, rows),
            "Category": rng.choice(_CATEGORIES, rows),
            "Location": rng.choice(_ROOMS, rows),
            "Qty": rng.integers(1, 4, rows),
            "Notes": ["" if n else "gift" for n in rng.integers(0, 5, rows)],
        }
    )

    broken = int(rows * broken_ratio)
    if broken:
        idx = rng.choice(rows, broken, replace=False)
        for k, i in enumerate(idx):
            # 壊し方を順番に切り替え
            if k % 3 == 0:
                frame.at[i, "Cost"] = "n/a"
            elif k % 3 == 1:
                frame.at[i, "Purchase Date"] = "sometime"
            else:
                frame.at[i, "Item Name"] = ""
    return frame


def write_inventory_csv(output_path: Path, frame: pd.DataFrame, delimiter: str = ",") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output_path, sep=delimiter, index=False, encoding="utf-8")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic home inventory CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s inventory.csv --rows 500
  %(prog)s inventory.tsv --rows 10000 --delimiter tab --broken-ratio 0.05
        """,
    )
    parser.add_argument("output", type=Path, help="Output file path")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of data rows (default: 1,000)")
    parser.add_argument("--delimiter", choices=sorted(_DELIMITERS), default="comma")
    parser.add_argument("--broken-ratio", type=float, default=0.0, help="Share of invalid rows (default: 0)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.broken_ratio <= 1.0:
        print("Error: --broken-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    frame = generate_inventory(args.rows, args.seed, args.broken_ratio)
    write_inventory_csv(args.output, frame, _DELIMITERS[args.delimiter])
    print(f"wrote {len(frame):,} rows to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
