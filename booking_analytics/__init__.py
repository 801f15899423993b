"""
Booking Analytics - hotel sale record analysis.

Modules:
- config: Pipeline configuration and bucket definitions
- data: Dataset download, CSV ingestion and load verification
- features: Lead-time, price and season bucketing
- analysis: Grouped reports, derived summary tables, segment revenue
- export: Persist derived tables to an external SQL database
"""
