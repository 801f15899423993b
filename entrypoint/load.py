#!/usr/bin/env python
"""
Download, preview, load and verify the sale records dataset.

Usage:
    python entrypoint/load.py
    python entrypoint/load.py --csv data/psql_practice_data.csv --db outputs/practice.duckdb
    python entrypoint/load.py --no-download  # Fail if the CSV is missing
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import logging

from booking_analytics.config import AnalyticsConfig
from booking_analytics.data import (
    ensure_dataset,
    preview_csv,
    init_db,
    read_sales_csv,
    load_sales_csv,
    create_enriched_view,
    verify_load,
    preview_table,
)
from booking_analytics.errors import IngestionError

logging.basicConfig(level=logging.INFO, format='%(message)s')


def main():
    parser = argparse.ArgumentParser(description='Load the sale records CSV into DuckDB')
    parser.add_argument('--csv', type=str, help='Path to the CSV file')
    parser.add_argument('--url', type=str, help='Dataset download URL')
    parser.add_argument('--db', type=str, help='DuckDB database file (default: in-memory)')
    parser.add_argument('--no-download', action='store_true', help='Do not download a missing CSV')
    args = parser.parse_args()

    config = AnalyticsConfig.from_env(csv_path=args.csv, dataset_url=args.url, db_path=args.db, verbose=True)

    print("=" * 70)
    print("LOADING SALE RECORDS")
    print("=" * 70)

    try:
        print("\n1. Locating dataset...")
        if args.no_download:
            if not config.csv_path.exists():
                raise IngestionError(f"Input file not found: {config.csv_path}")
            csv_path = config.csv_path
        else:
            csv_path = ensure_dataset(config.dataset_url, config.csv_path)
        print(f"   {csv_path}")

        print("\n2. Previewing dataset...")
        for line in preview_csv(csv_path, config.preview_rows):
            print(f"   {line}")

        print("\n3. Loading data...")
        con = init_db(config.db_path)
        loaded = load_sales_csv(con, csv_path, config)
        create_enriched_view(con)

        print("\n4. Verifying data...")
        verify_load(con, expected_rows=len(read_sales_csv(csv_path)))
        print(preview_table(con, 5).to_string(index=False))
    except IngestionError as e:
        print(f"\n✗ Load failed: {e}")
        sys.exit(1)

    print("\n" + "=" * 70)
    print(f"LOAD COMPLETE: COPY {loaded:,}")
    print("=" * 70)


if __name__ == "__main__":
    main()
