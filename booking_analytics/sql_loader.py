"""
Utility functions for loading SQL statements from .sql files.
"""
from pathlib import Path
from string import Template


def load_sql_file(sql_filename: str, relative_to_file: str | Path | None = None, **params) -> str:
    """
    Load a SQL statement from a .sql file, filling in any $placeholders.

    Parameters
    ----------
    sql_filename : str
        Name of the SQL file (e.g., 'CREATE_PRACTICE_DATA.sql').
        Can include relative path from the calling file's directory.
    relative_to_file : str | Path | None, default=None
        Path to the file calling this function, typically __file__.
    **params
        Values substituted for `$name` placeholders. Only generated SQL
        fragments belong here; user values must go through bound parameters.

    Returns
    -------
    str
        SQL text with placeholders substituted.

    Examples
    --------
    >>> query = load_sql_file('sql/CREATE_SALES_ENRICHED.sql', __file__,
    ...                       eb_score_case=case_sql, segment_case=seg_sql)
    """
    if relative_to_file is None:
        raise ValueError(
            "relative_to_file must be provided. Use: load_sql_file('query.sql', __file__)"
        )

    sql_path = Path(relative_to_file).parent / sql_filename

    if not sql_path.exists():
        raise FileNotFoundError(
            f"SQL file not found: {sql_path}\n"
            f"Expected location: {sql_path.absolute()}"
        )

    sql = sql_path.read_text(encoding='utf-8')
    if params:
        # substitute() raises KeyError on a missing placeholder
        sql = Template(sql).substitute(params)
    return sql
