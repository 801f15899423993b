"""Lead-time, price and season bucketing."""
from .buckets import (
    classify,
    classify_series,
    get_eb_score_bucket,
    get_price_segment,
    bucket_sql_case,
    season_for_month,
    season_sql_case,
)
