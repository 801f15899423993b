"""
Descriptive reports over the sale records.

Each report is a read-only grouped aggregate with no dependency on any
other report, so they can run in any order.
"""

from typing import Callable, Dict

import duckdb
import pandas as pd

from .aggregate import group_and_aggregate, distinct_values

AVG_COUNT = {'avg_price': ('price', 'avg'), 'count': ('*', 'count')}


def distinct_concepts(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """All hotel concepts sold."""
    return pd.DataFrame({'concept_name': distinct_values(con, 'concept_name')})


def sales_count_by_concept(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Number of sales per concept."""
    return group_and_aggregate(con, ['concept_name'], {'count': ('*', 'count')})


def revenue_by_city(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Total revenue per city."""
    return group_and_aggregate(con, ['city_name'], {'total_revenue': ('price', 'sum')})


def revenue_by_concept(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Total revenue per concept."""
    return group_and_aggregate(con, ['concept_name'], {'total_revenue': ('price', 'sum')})


def avg_price_by_city(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    return group_and_aggregate(con, ['city_name'], {'avg_price': ('price', 'avg')})


def avg_price_by_concept(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    return group_and_aggregate(con, ['concept_name'], {'avg_price': ('price', 'avg')})


def avg_price_by_city_concept(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    return group_and_aggregate(con, ['city_name', 'concept_name'], {'avg_price': ('price', 'avg')})


def price_by_eb_score(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Average price and count per city, concept and early-booker category."""
    return group_and_aggregate(con, ['city_name', 'concept_name', 'eb_score_bucket'], AVG_COUNT)


def price_by_season(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Average price and count per city, concept and season."""
    return group_and_aggregate(con, ['city_name', 'concept_name', 'seasons'], AVG_COUNT)


def price_by_checkin_day(con: duckdb.DuckDBPyConnection) -> pd.DataFrame:
    """Average price and count per city, concept and check-in weekday."""
    return group_and_aggregate(con, ['city_name', 'concept_name', 'day_name'], AVG_COUNT)


REPORTS: Dict[str, Callable[[duckdb.DuckDBPyConnection], pd.DataFrame]] = {
    'distinct_concepts': distinct_concepts,
    'sales_count_by_concept': sales_count_by_concept,
    'revenue_by_city': revenue_by_city,
    'revenue_by_concept': revenue_by_concept,
    'avg_price_by_city': avg_price_by_city,
    'avg_price_by_concept': avg_price_by_concept,
    'avg_price_by_city_concept': avg_price_by_city_concept,
    'price_by_eb_score': price_by_eb_score,
    'price_by_season': price_by_season,
    'price_by_checkin_day': price_by_checkin_day,
}


def run_report(con: duckdb.DuckDBPyConnection, name: str) -> pd.DataFrame:
    if name not in REPORTS:
        raise ValueError(f"Unknown report {name!r}; expected one of {sorted(REPORTS)}")
    return REPORTS[name](con)


def run_all_reports(con: duckdb.DuckDBPyConnection) -> Dict[str, pd.DataFrame]:
    """Run every registered report; returns name -> result."""
    return {name: report(con) for name, report in REPORTS.items()}
