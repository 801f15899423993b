"""
Configuration for the booking analytics pipeline.

Bucket boundaries, column names and the runtime config dataclass.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


# =============================================================================
# SCHEMA
# =============================================================================

# Columns every input CSV must carry, in the order the dataset ships them
REQUIRED_COLUMNS = (
    'sale_id',
    'sale_date',
    'check_in_date',
    'price',
    'concept_name',
    'city_name',
    'day_name',
    'eb_score',
)

# Optional column; derived from the check-in month when absent
SEASON_COLUMN = 'seasons'


# =============================================================================
# BUCKET DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class Bucket:
    """One labelled range. Lower bound inclusive, None = unbounded."""
    label: str
    lower: Optional[float] = None
    upper: Optional[float] = None
    include_upper: bool = True

    @property
    def is_catch_all(self) -> bool:
        return self.lower is None and self.upper is None

    def contains(self, value: float) -> bool:
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None:
            return value <= self.upper if self.include_upper else value < self.upper
        return True


# Ranges overlap at their edges and are evaluated in order; the first match
# wins, so a lead time of exactly 30 days is a Potential Planner, not a Planner.
EB_SCORE_BUCKETS = (
    Bucket('Last Minuters', upper=7, include_upper=False),
    Bucket('Potential Planners', 7, 30),
    Bucket('Planners', 30, 90),
    Bucket('Early Bookers'),
)

# Same first-match rule: a price of exactly 60 is Middle-low
PRICE_SEGMENTS = (
    Bucket('Low', upper=30, include_upper=False),
    Bucket('Middle-low', 30, 60),
    Bucket('Middle-high', 60, 90),
    Bucket('High'),
)

EB_SCORE_LABELS = tuple(b.label for b in EB_SCORE_BUCKETS)
SEGMENT_LABELS = tuple(b.label for b in PRICE_SEGMENTS)

HIGH_SEASON = 'High'
LOW_SEASON = 'Low'

# April to October
DEFAULT_HIGH_SEASON_MONTHS = (4, 5, 6, 7, 8, 9, 10)


# =============================================================================
# RUNTIME CONFIG
# =============================================================================

DEFAULT_DATASET_URL = (
    "https://raw.githubusercontent.com/booking-analytics/datasets/main/"
    "psql_practice_data.csv"
)

DEFAULT_CSV_PATH = Path(__file__).parent.parent / "data" / "psql_practice_data.csv"


def _env_flag(name: str) -> bool:
    return os.getenv(name, '').lower() in ('1', 'true', 'yes')


@dataclass
class AnalyticsConfig:
    """Configuration for loading and analysing sale records."""
    db_path: str = ":memory:"  # DuckDB database file, in-memory by default
    csv_path: Path = DEFAULT_CSV_PATH
    dataset_url: str = DEFAULT_DATASET_URL
    high_season_months: Tuple[int, ...] = DEFAULT_HIGH_SEASON_MONTHS
    preview_rows: int = 10
    verbose: bool = False

    def __post_init__(self):
        self.csv_path = Path(self.csv_path)
        bad_months = [m for m in self.high_season_months if not 1 <= m <= 12]
        if bad_months:
            raise ValueError(f"Invalid high season months: {bad_months}")

    @classmethod
    def from_env(cls, **overrides) -> 'AnalyticsConfig':
        """
        Build a config from BOOKING_ANALYTICS_* environment variables.

        Keyword overrides win over the environment, which wins over defaults.
        """
        env: dict = {}
        if os.getenv('BOOKING_ANALYTICS_DB_PATH'):
            env['db_path'] = os.environ['BOOKING_ANALYTICS_DB_PATH']
        if os.getenv('BOOKING_ANALYTICS_CSV_PATH'):
            env['csv_path'] = Path(os.environ['BOOKING_ANALYTICS_CSV_PATH'])
        if os.getenv('BOOKING_ANALYTICS_DATASET_URL'):
            env['dataset_url'] = os.environ['BOOKING_ANALYTICS_DATASET_URL']
        if _env_flag('BOOKING_ANALYTICS_VERBOSE'):
            env['verbose'] = True

        env.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**env)
