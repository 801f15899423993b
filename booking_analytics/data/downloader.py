"""
Auto-download the sale records CSV if it is not present.
"""

import logging
import urllib.request
from pathlib import Path
from typing import List, Optional

from ..config import DEFAULT_CSV_PATH, DEFAULT_DATASET_URL
from ..errors import IngestionError

logger = logging.getLogger(__name__)


def ensure_dataset(url: str = DEFAULT_DATASET_URL, target_path: Optional[Path] = None) -> Path:
    """
    Ensure the dataset exists locally, downloading it if necessary.

    Args:
        url: Where to download the CSV from
        target_path: Where to save/find the file. Defaults to data/psql_practice_data.csv

    Returns:
        Path to the CSV file
    """
    path = Path(target_path or DEFAULT_CSV_PATH)

    if path.exists():
        return path

    logger.info(f"{path.name} not found at {path}")
    logger.info(f"Downloading from {url}...")

    path.parent.mkdir(parents=True, exist_ok=True)

    # Download to a temp name so a failed transfer never leaves a partial CSV
    partial = path.with_name(path.name + ".part")
    try:
        urllib.request.urlretrieve(url, partial)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise IngestionError(f"Failed to download {url}: {e}") from e

    partial.replace(path)
    logger.info(f"Downloaded {path.name} ({path.stat().st_size / 1024 / 1024:.1f} MB)")
    return path


def preview_csv(csv_path: str | Path, n: int = 10) -> List[str]:
    """First n lines of the raw file, header included."""
    lines = []
    with open(csv_path, "r", encoding="utf-8") as f:
        for i, line in enumerate(f):
            if i >= n:
                break
            lines.append(line.rstrip("\n"))
    return lines
