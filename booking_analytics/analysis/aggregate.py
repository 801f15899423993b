"""
Generic group-and-aggregate query over the sale records.

Every descriptive report is one call to group_and_aggregate() with a
different grouping key and aggregate set.
"""

import re
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import duckdb
import pandas as pd

# Aggregate name -> SQL function
AGGREGATES = {
    'count': 'COUNT',
    'sum': 'SUM',
    'avg': 'AVG',
    'min': 'MIN',
    'max': 'MAX',
}

DEFAULT_SOURCE = 'sales_enriched'

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _quote(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def source_columns(con: duckdb.DuckDBPyConnection, source: str = DEFAULT_SOURCE) -> List[str]:
    """Column names of a table or view."""
    result = con.execute(f"SELECT * FROM {_quote(source)} LIMIT 0")
    return [col[0] for col in result.description]


def _aggregate_sql(column: str, func: str, columns: Sequence[str]) -> str:
    if func not in AGGREGATES:
        raise ValueError(f"Unknown aggregate {func!r}; expected one of {sorted(AGGREGATES)}")
    if column == '*':
        if func != 'count':
            raise ValueError(f"'*' only valid with count, not {func!r}")
        return "COUNT(*)"
    if column not in columns:
        raise ValueError(f"Unknown column {column!r}")
    return f"{AGGREGATES[func]}({_quote(column)})"


def group_and_aggregate(
    con: duckdb.DuckDBPyConnection,
    group_by: Sequence[str],
    aggregates: Mapping[str, Tuple[str, str]],
    source: str = DEFAULT_SOURCE,
    filters: Optional[Mapping[str, Optional[str]]] = None,
    order_by: Optional[Sequence[str]] = None,
    descending: bool = False,
) -> pd.DataFrame:
    """
    Group rows of `source` by `group_by` and compute `aggregates`.

    Parameters
    ----------
    group_by : sequence of str
        Grouping key columns. Empty means one global row.
    aggregates : mapping
        Output column name -> (source column, aggregate name), e.g.
        {'avg_price': ('price', 'avg'), 'count': ('*', 'count')}.
    source : str
        Table or view to read, sales_enriched by default.
    filters : mapping, optional
        Column -> value equality filters (exact, case-sensitive). None
        values are skipped. Values are bound, never interpolated.
    order_by : sequence of str, optional
        Output columns to sort by. Defaults to the grouping key.

    Returns
    -------
    pd.DataFrame
        One row per group: key columns followed by aggregate columns.
    """
    if not aggregates:
        raise ValueError("At least one aggregate is required")

    columns = source_columns(con, source)

    for col in group_by:
        if col not in columns:
            raise ValueError(f"Unknown grouping column {col!r}")

    select_parts = [_quote(col) for col in group_by]
    for alias, (column, func) in aggregates.items():
        select_parts.append(f"{_aggregate_sql(column, func, columns)} AS {_quote(alias)}")

    sql = f"SELECT {', '.join(select_parts)} FROM {_quote(source)}"

    params: List[str] = []
    active_filters = {k: v for k, v in (filters or {}).items() if v is not None}
    if active_filters:
        conditions = []
        for col, value in active_filters.items():
            if col not in columns:
                raise ValueError(f"Unknown filter column {col!r}")
            conditions.append(f"{_quote(col)} = ?")
            params.append(value)
        sql += " WHERE " + " AND ".join(conditions)

    if group_by:
        sql += " GROUP BY " + ", ".join(_quote(col) for col in group_by)

    order = list(order_by) if order_by is not None else list(group_by)
    if order:
        outputs = set(group_by) | set(aggregates)
        for col in order:
            if col not in outputs:
                raise ValueError(f"Cannot order by {col!r}; not an output column")
        direction = " DESC" if descending else ""
        sql += " ORDER BY " + ", ".join(f"{_quote(col)}{direction}" for col in order)

    return con.execute(sql, params).fetchdf()


def distinct_values(
    con: duckdb.DuckDBPyConnection,
    column: str,
    source: str = DEFAULT_SOURCE,
) -> List:
    """Sorted distinct values of one column."""
    if column not in source_columns(con, source):
        raise ValueError(f"Unknown column {column!r}")
    rows = con.execute(
        f"SELECT DISTINCT {_quote(column)} FROM {_quote(source)} ORDER BY 1"
    ).fetchall()
    return [row[0] for row in rows]


def filters_for(city: Optional[str] = None, concept: Optional[str] = None,
                season: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Map cohort attributes to their column names."""
    return {'city_name': city, 'concept_name': concept, 'seasons': season}
