"""
Shared pytest fixtures for the loader, bucketing and analysis tests.
"""

import pytest
import duckdb
import pandas as pd
from pathlib import Path

from booking_analytics.config import REQUIRED_COLUMNS
from booking_analytics.data.loader import load_sales_csv, create_enriched_view


def make_sales_frame(rows: list, with_seasons: bool = True) -> pd.DataFrame:
    """Build a sale records frame in the CSV column order."""
    columns = list(REQUIRED_COLUMNS) + (['seasons'] if with_seasons else [])
    return pd.DataFrame([row[:len(columns)] for row in rows], columns=columns)


# Lead times: 0, 6, 7, 30, 31, 90, 91, 200 days
# Prices sit on and around the 30 / 60 / 90 segment edges
SAMPLE_ROWS = [
    (1, '2022-06-01', '2022-06-01', '10.0', 'All Inclusive', 'Antalya', 'Wednesday', 'Last Minuters', 'High'),
    (2, '2022-06-01', '2022-06-07', '29.99', 'All Inclusive', 'Antalya', 'Tuesday', 'Last Minuters', 'High'),
    (3, '2022-06-01', '2022-06-08', '30.0', 'Half Board', 'Antalya', 'Wednesday', 'Potential Planners', 'High'),
    (4, '2022-05-01', '2022-05-31', '60.0', 'Half Board', 'Girne', 'Tuesday', 'Potential Planners', 'Low'),
    (5, '2022-05-01', '2022-06-01', '60.5', 'All Inclusive', 'Girne', 'Wednesday', 'Planners', 'High'),
    (6, '2021-12-03', '2022-03-03', '90.0', 'All Inclusive', 'Girne', 'Thursday', 'Planners', 'Low'),
    (7, '2021-12-03', '2022-03-04', '90.01', 'Half Board', 'Aydın', 'Friday', 'Early Bookers', 'Low'),
    (8, '2021-11-01', '2022-05-20 00:00:00', '150.0', 'All Inclusive', 'Antalya', 'Friday', 'Early Bookers', 'High'),
]


def _antalya_rows() -> list:
    """100 Antalya / All Inclusive / High sales split 40/30/20/10 across segments, plus noise."""
    bands = [
        (40, ('20.0', '25.0')),    # Low, avg 22.5
        (30, ('40.0', '50.0')),    # Middle-low, avg 45
        (20, ('70.0', '80.0')),    # Middle-high, avg 75
        (10, ('100.0', '120.0')),  # High, avg 110
    ]
    rows = []
    sale_id = 1
    for n, prices in bands:
        for i in range(n):
            rows.append((sale_id, '2022-05-01', '2022-07-01', prices[i % 2],
                         'All Inclusive', 'Antalya', 'Friday', 'Planners', 'High'))
            sale_id += 1

    # Same city and concept in another season, and another city in high season
    for _ in range(5):
        rows.append((sale_id, '2022-01-01', '2022-01-02', '500.0',
                     'All Inclusive', 'Antalya', 'Sunday', 'Last Minuters', 'Low'))
        sale_id += 1
    for _ in range(5):
        rows.append((sale_id, '2022-05-01', '2022-07-01', '10.0',
                     'Half Board', 'Girne', 'Friday', 'Planners', 'High'))
        sale_id += 1
    return rows


@pytest.fixture
def raw_connection():
    """Empty in-memory database."""
    con = duckdb.connect(":memory:")
    yield con
    con.close()


@pytest.fixture
def write_sales_csv(tmp_path):
    """Factory writing rows to a CSV file and returning its path."""
    def _write(rows, name: str = "sales.csv", with_seasons: bool = True) -> Path:
        path = tmp_path / name
        make_sales_frame(rows, with_seasons).to_csv(path, index=False)
        return path
    return _write


@pytest.fixture
def sample_csv(write_sales_csv):
    return write_sales_csv(SAMPLE_ROWS)


@pytest.fixture
def sample_db(raw_connection, sample_csv):
    """Database with the 8 sample records loaded and the enriched view created."""
    load_sales_csv(raw_connection, sample_csv)
    create_enriched_view(raw_connection)
    return raw_connection


@pytest.fixture
def antalya_db(raw_connection, write_sales_csv):
    """Database with the 110-record segment revenue fixture loaded."""
    path = write_sales_csv(_antalya_rows(), name="antalya.csv")
    load_sales_csv(raw_connection, path)
    create_enriched_view(raw_connection)
    return raw_connection


@pytest.fixture
def expected_antalya_segments():
    """Hand-computed segment figures for Antalya / All Inclusive / High."""
    return pd.DataFrame({
        'segment': ['Low', 'Middle-low', 'Middle-high', 'High'],
        'count': [40, 30, 20, 10],
        'avg_price': [22.5, 45.0, 75.0, 110.0],
        'segment_share': [0.40, 0.30, 0.20, 0.10],
        'weighted_expected_revenue': [9.0, 13.5, 15.0, 11.0],
    })
