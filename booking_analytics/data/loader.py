"""
Data loading utilities for the booking analytics pipeline.

Loads the sale records CSV into DuckDB with strict typing. A load either
succeeds completely or leaves the database as it was.
"""

import logging
from pathlib import Path
from typing import Optional

import duckdb
import pandas as pd

from ..config import AnalyticsConfig, REQUIRED_COLUMNS, SEASON_COLUMN, EB_SCORE_BUCKETS, PRICE_SEGMENTS
from ..errors import IngestionError
from ..features.buckets import bucket_sql_case, season_sql_case
from ..sql_loader import load_sql_file

logger = logging.getLogger(__name__)

LEAD_TIME_EXPR = "date_diff('day', pd.sale_date, pd.check_in_date)"
CHECK_IN_EXPR = "CAST(CAST(trim(check_in_date) AS TIMESTAMP) AS DATE)"


def init_db(db_path: str = ":memory:") -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection (in-memory by default)."""
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(database=db_path, read_only=False)


def create_practice_table(con: duckdb.DuckDBPyConnection) -> None:
    """(Re)create the empty practice_data table."""
    con.execute(load_sql_file('sql/CREATE_PRACTICE_DATA.sql', __file__))


def read_sales_csv(csv_path: str | Path) -> pd.DataFrame:
    """
    Read the sale records CSV as text, checking its shape.

    Every value is kept as a string; typing happens in DuckDB so that a bad
    value fails the whole load instead of turning into NaN.

    Args:
        csv_path: Path to the CSV file (header row required)

    Returns:
        DataFrame of string columns named after the header

    Raises:
        IngestionError: missing file, bad encoding, header mismatch or wrong field count
    """
    path = Path(csv_path)
    if not path.exists():
        raise IngestionError(f"Input file not found: {path}")

    # header=None makes the header line fix the expected field count, so a
    # row with extra fields is a parser error rather than an inferred index
    try:
        raw = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise IngestionError(f"Input file is empty: {path}") from e
    except pd.errors.ParserError as e:
        raise IngestionError(f"Malformed CSV {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise IngestionError(f"Input file is not valid UTF-8: {path}") from e

    header = [str(col).strip() for col in raw.iloc[0]]
    _check_header(header)

    df = raw.iloc[1:].reset_index(drop=True)
    df.columns = header

    # Short rows are padded with NaN; real empty cells stay ''
    short_rows = df.index[df.isna().any(axis=1)]
    if len(short_rows) > 0:
        line_numbers = [int(i) + 2 for i in short_rows[:5]]
        raise IngestionError(
            f"Malformed CSV {path}: {len(short_rows)} row(s) with missing fields "
            f"(lines {line_numbers})"
        )

    return df


def _check_header(header: list) -> None:
    expected = set(REQUIRED_COLUMNS)
    found = set(header)

    if len(found) != len(header):
        raise IngestionError(f"Duplicate columns in header: {header}")

    missing = [c for c in REQUIRED_COLUMNS if c not in found]
    unexpected = sorted(found - expected - {SEASON_COLUMN})
    if missing or unexpected:
        raise IngestionError(
            f"Header does not match the sale record schema "
            f"(missing: {missing}, unexpected: {unexpected})"
        )


def load_sales_csv(
    con: duckdb.DuckDBPyConnection,
    csv_path: str | Path,
    config: Optional[AnalyticsConfig] = None,
) -> int:
    """
    Load the CSV into practice_data inside a single transaction.

    Replaces any existing contents. Malformed rows (wrong field count,
    non-numeric or non-finite price, bad id, unparseable date) and negative
    prices fail the entire load; nothing is committed in that case.

    Returns:
        Number of rows loaded
    """
    config = config or AnalyticsConfig()
    df = read_sales_csv(csv_path)

    if SEASON_COLUMN in df.columns:
        season_expr = SEASON_COLUMN
    else:
        season_expr = season_sql_case(CHECK_IN_EXPR, config.high_season_months)

    con.register('staging_sales', df)
    con.begin()
    try:
        create_practice_table(con)
        if not df.empty:
            con.execute(load_sql_file('sql/INSERT_PRACTICE_DATA.sql', __file__, season_expr=season_expr))

        # CAST accepts 'nan' and 'inf'
        non_finite = con.execute(
            "SELECT COUNT(*) FROM practice_data WHERE NOT isfinite(price)"
        ).fetchone()[0]
        if non_finite > 0:
            raise IngestionError(f"{non_finite} row(s) with non-numeric price in {csv_path}")

        negative = con.execute("SELECT COUNT(*) FROM practice_data WHERE price < 0").fetchone()[0]
        if negative > 0:
            raise IngestionError(f"{negative} row(s) with negative price in {csv_path}")

        loaded = con.execute("SELECT COUNT(*) FROM practice_data").fetchone()[0]
        con.commit()
    except (duckdb.ConversionException, duckdb.InvalidInputException) as e:
        con.rollback()
        raise IngestionError(f"Failed to load {csv_path}: {e}") from e
    except Exception:
        con.rollback()
        raise
    finally:
        con.unregister('staging_sales')

    if config.verbose:
        logger.info(f"Loaded {loaded:,} rows from {Path(csv_path).name} into 'practice_data'")
    return loaded


def create_enriched_view(con: duckdb.DuckDBPyConnection) -> None:
    """Create the sales_enriched view with lead time, EB score, segment and persona."""
    con.execute(load_sql_file(
        'sql/CREATE_SALES_ENRICHED.sql', __file__,
        eb_score_case=bucket_sql_case(LEAD_TIME_EXPR, EB_SCORE_BUCKETS),
        segment_case=bucket_sql_case('pd.price', PRICE_SEGMENTS),
    ))


def verify_load(con: duckdb.DuckDBPyConnection, expected_rows: Optional[int] = None) -> int:
    """
    Count practice_data rows, optionally against an expected count.

    Args:
        expected_rows: If given, the table must hold exactly this many rows

    Returns:
        Row count
    """
    count = con.execute("SELECT COUNT(*) FROM practice_data").fetchone()[0]
    if expected_rows is not None and count != expected_rows:
        raise IngestionError(f"Expected {expected_rows:,} rows in practice_data, found {count:,}")
    return count


def preview_table(con: duckdb.DuckDBPyConnection, n: int = 10) -> pd.DataFrame:
    """First n rows of practice_data."""
    return con.execute(f"SELECT * FROM practice_data LIMIT {int(n)}").fetchdf()


def get_connection(config: Optional[AnalyticsConfig] = None) -> duckdb.DuckDBPyConnection:
    """
    Open the database, load the configured CSV and create the enriched view.

    Returns a connection ready for the analysis functions.
    """
    config = config or AnalyticsConfig()
    con = init_db(config.db_path)
    load_sales_csv(con, config.csv_path, config)
    create_enriched_view(con)
    return con
