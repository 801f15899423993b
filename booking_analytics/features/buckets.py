"""
Bucketing of sale records into lead-time, price and season categories.

The Python classifiers and the SQL CASE expressions are generated from the
same ordered bucket definitions in config, so in-database and in-memory
classification always agree.
"""

from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from ..config import (
    Bucket,
    EB_SCORE_BUCKETS,
    PRICE_SEGMENTS,
    DEFAULT_HIGH_SEASON_MONTHS,
    HIGH_SEASON,
    LOW_SEASON,
)


def classify(value: float, buckets: Sequence[Bucket]) -> str:
    """
    Return the label of the first bucket containing `value`.

    Args:
        value: Number to classify (lead time in days, price, ...)
        buckets: Ordered bucket definitions; the last one should be a catch-all

    Returns:
        Bucket label
    """
    for bucket in buckets:
        if bucket.contains(value):
            return bucket.label
    raise ValueError(f"No bucket matches {value!r}; add a catch-all bucket")


def get_eb_score_bucket(lead_time_days: float) -> str:
    """Early-booker category for the days between sale and check-in."""
    return classify(lead_time_days, EB_SCORE_BUCKETS)


def get_price_segment(price: float) -> str:
    """Price band (Low / Middle-low / Middle-high / High)."""
    return classify(price, PRICE_SEGMENTS)


def _sql_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _bucket_condition(column: str, bucket: Bucket) -> str:
    lower = _sql_number(bucket.lower) if bucket.lower is not None else None
    upper = _sql_number(bucket.upper) if bucket.upper is not None else None

    if lower is not None and upper is not None and bucket.include_upper:
        return f"{column} BETWEEN {lower} AND {upper}"

    parts = []
    if lower is not None:
        parts.append(f"{column} >= {lower}")
    if upper is not None:
        op = "<=" if bucket.include_upper else "<"
        parts.append(f"{column} {op} {upper}")
    return " AND ".join(parts)


def bucket_sql_case(column: str, buckets: Sequence[Bucket]) -> str:
    """
    Generate a SQL CASE expression for the ordered buckets.

    The final catch-all bucket becomes the ELSE branch. CASE evaluates its
    WHEN branches in order, which gives the same first-match semantics as
    classify().

    Returns:
        SQL CASE expression string
    """
    cases = []
    default = None
    for bucket in buckets:
        if bucket.is_catch_all:
            default = bucket.label
            break
        cases.append(f"WHEN {_bucket_condition(column, bucket)} THEN '{bucket.label}'")

    else_sql = f" ELSE '{default}'" if default is not None else ""
    return "CASE " + " ".join(cases) + else_sql + " END"


def classify_series(values: pd.Series, buckets: Sequence[Bucket]) -> pd.Series:
    """Vectorised classify() for a numeric Series."""
    conditions = []
    choices = []
    default = None
    for bucket in buckets:
        if bucket.is_catch_all:
            default = bucket.label
            break
        mask = pd.Series(True, index=values.index)
        if bucket.lower is not None:
            mask &= values >= bucket.lower
        if bucket.upper is not None:
            mask &= (values <= bucket.upper) if bucket.include_upper else (values < bucket.upper)
        conditions.append(mask.to_numpy())
        choices.append(bucket.label)

    labels = np.select(conditions, choices, default=default)
    return pd.Series(labels, index=values.index, dtype=object)


def season_for_month(month: int, high_season_months: Iterable[int] = DEFAULT_HIGH_SEASON_MONTHS) -> str:
    """High or Low season for a check-in month (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return HIGH_SEASON if month in set(high_season_months) else LOW_SEASON


def season_sql_case(date_column: str, high_season_months: Iterable[int] = DEFAULT_HIGH_SEASON_MONTHS) -> str:
    """SQL CASE deriving the season from a DATE column's month."""
    months = sorted(set(int(m) for m in high_season_months))
    if not months:
        return f"'{LOW_SEASON}'"
    month_list = ", ".join(str(m) for m in months)
    return (
        f"CASE WHEN month({date_column}) IN ({month_list}) "
        f"THEN '{HIGH_SEASON}' ELSE '{LOW_SEASON}' END"
    )
