"""Dataset download, CSV ingestion and load verification."""
from .downloader import ensure_dataset, preview_csv
from .loader import (
    init_db,
    create_practice_table,
    read_sales_csv,
    load_sales_csv,
    create_enriched_view,
    verify_load,
    preview_table,
    get_connection,
)
