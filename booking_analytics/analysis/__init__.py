"""Grouped reports, derived summary tables and segment revenue."""
from .aggregate import AGGREGATES, group_and_aggregate, distinct_values
from .reports import REPORTS, run_report, run_all_reports
from .summaries import (
    SUMMARY_TABLES,
    build_sales,
    build_sales_ccs,
    build_sales_level_based,
    build_segments,
    build_all_summaries,
    segment_statistics,
    materialize_summaries,
)
from .segmentation import (
    CohortFilter,
    CustomerSegment,
    segment_revenue,
    expected_revenue,
    classify_customer,
)
