"""
Derived summary tables.

All tables are pure projections of practice_data (through the
sales_enriched view) and are rebuilt from scratch on every call.
materialize_summaries() stores them with CREATE OR REPLACE so a stored
copy is never updated in place.
"""

import logging
from typing import Dict

import duckdb
import pandas as pd

from ..config import SEGMENT_LABELS
from .aggregate import group_and_aggregate

logger = logging.getLogger(__name__)

SUMMARY_TABLES = ('sales', 'sales_ccs', 'sales_level_based', 'segments')


def build_sales(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """City x concept x early-booker category: average price and count."""
    return group_and_aggregate(
        con,
        ['city_name', 'concept_name', 'eb_score_bucket'],
        {'avg_price': ('price', 'avg'), 'count': ('*', 'count')},
    )


def build_sales_ccs(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """City x concept x season: mean price and count, cheapest first."""
    return group_and_aggregate(
        con,
        ['city_name', 'concept_name', 'seasons'],
        {'mean_price': ('price', 'avg'), 'count': ('*', 'count')},
        order_by=['mean_price', 'city_name', 'concept_name', 'seasons'],
    )


def build_sales_level_based(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """sales_ccs with the city_concept_season persona key appended."""
    df = build_sales_ccs(con)
    df['sales_level_based'] = df['city_name'] + '_' + df['concept_name'] + '_' + df['seasons']
    return df


def build_segments(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Every sale record with its price segment label."""
    return con.execute("""
        SELECT sale_id, sale_date, check_in_date, price, concept_name,
               city_name, day_name, eb_score, seasons, segment
        FROM sales_enriched
        ORDER BY sale_id
    """).fetchdf()


def segment_statistics(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Average, total, max, min price and count per price segment, in band order."""
    df = group_and_aggregate(
        con,
        ['segment'],
        {
            'avg_price': ('price', 'avg'),
            'total_price': ('price', 'sum'),
            'max_price': ('price', 'max'),
            'min_price': ('price', 'min'),
            'count': ('*', 'count'),
        },
    )
    return _order_by_segment(df)


def _order_by_segment(df: pd.DataFrame) -> pd.DataFrame:
    order = {label: i for i, label in enumerate(SEGMENT_LABELS)}
    return df.sort_values('segment', key=lambda s: s.map(order)).reset_index(drop=True)


def build_all_summaries(con: duckdb.DuckDBPyConnection) -> Dict[str, pd.DataFrame]:
    return {
        'sales': build_sales(con),
        'sales_ccs': build_sales_ccs(con),
        'sales_level_based': build_sales_level_based(con),
        'segments': build_segments(con),
    }


def materialize_summaries(con: duckdb.DuckDBPyConnection, verbose: bool = False) -> Dict[str, int]:
    """
    Store every summary table in the database, replacing earlier copies.

    Returns:
        Table name -> row count
    """
    counts = {}
    for table, df in build_all_summaries(con).items():
        con.register('summary_frame', df)
        try:
            con.execute(f'CREATE OR REPLACE TABLE "{table}" AS SELECT * FROM summary_frame')
        finally:
            con.unregister('summary_frame')
        counts[table] = len(df)
        if verbose:
            logger.info(f"  ✓ {table}: {len(df):,} rows")
    return counts
