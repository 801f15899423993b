"""
Price-segment revenue estimation for a (city, concept, season) cohort.

Logic:
1. Filter sale records to the cohort (exact, case-sensitive match)
2. Group by price segment: count, average, min, max, sum
3. segment_share = segment count / cohort count
4. weighted_expected_revenue = segment average price * segment_share

Summing weighted_expected_revenue over the segments gives the expected
price of the next sale in the cohort.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import duckdb
import pandas as pd

from ..config import SEGMENT_LABELS
from ..errors import NoMatchingRecordsError
from .aggregate import filters_for, group_and_aggregate

logger = logging.getLogger(__name__)

SEGMENT_AGGREGATES = {
    'count': ('*', 'count'),
    'avg_price': ('price', 'avg'),
    'min_price': ('price', 'min'),
    'max_price': ('price', 'max'),
    'total_price': ('price', 'sum'),
}


@dataclass
class CohortFilter:
    """Cohort of sale records; None means no filter on that attribute."""
    city: Optional[str] = None
    concept: Optional[str] = None
    season: Optional[str] = None

    def as_filters(self) -> Dict[str, Optional[str]]:
        return filters_for(self.city, self.concept, self.season)

    def applied(self) -> Dict[str, str]:
        return {k: v for k, v in self.as_filters().items() if v is not None}

    @property
    def persona(self) -> Optional[str]:
        """city_concept_season key, when the cohort pins all three."""
        if None in (self.city, self.concept, self.season):
            return None
        return f"{self.city}_{self.concept}_{self.season}"


@dataclass
class CustomerSegment:
    """Most likely segment for a new customer of a cohort."""
    cohort: CohortFilter
    segment: str
    segment_share: float
    avg_price: float
    expected_revenue: float
    breakdown: pd.DataFrame


def segment_revenue(con: duckdb.DuckDBPyConnection, cohort: Optional[CohortFilter] = None) -> pd.DataFrame:
    """
    Per-segment statistics, share and weighted expected revenue for a cohort.

    Returns:
        One row per populated segment, in band order (Low first)

    Raises:
        NoMatchingRecordsError: the cohort has no sale records
    """
    cohort = cohort or CohortFilter()
    df = group_and_aggregate(con, ['segment'], SEGMENT_AGGREGATES, filters=cohort.as_filters())

    total = int(df['count'].sum()) if not df.empty else 0
    if total == 0:
        raise NoMatchingRecordsError(cohort.applied())

    df['segment_share'] = df['count'] / total
    df['weighted_expected_revenue'] = df['avg_price'] * df['segment_share']

    order = {label: i for i, label in enumerate(SEGMENT_LABELS)}
    df = df.sort_values('segment', key=lambda s: s.map(order)).reset_index(drop=True)

    logger.debug(f"Segment revenue for {cohort.applied() or 'all records'}: {total:,} records")
    return df


def expected_revenue(con: duckdb.DuckDBPyConnection, cohort: Optional[CohortFilter] = None) -> float:
    """Share-weighted expected price across all segments of the cohort."""
    return float(segment_revenue(con, cohort)['weighted_expected_revenue'].sum())


def classify_customer(con: duckdb.DuckDBPyConnection, cohort: CohortFilter) -> CustomerSegment:
    """
    Most likely price segment for a customer matching the cohort.

    Picks the segment with the highest share; ties go to the cheaper band.
    """
    breakdown = segment_revenue(con, cohort)
    # Breakdown is in band order and idxmax returns the first maximum
    best = breakdown.loc[breakdown['segment_share'].idxmax()]
    return CustomerSegment(
        cohort=cohort,
        segment=best['segment'],
        segment_share=float(best['segment_share']),
        avg_price=float(best['avg_price']),
        expected_revenue=float(breakdown['weighted_expected_revenue'].sum()),
        breakdown=breakdown,
    )
