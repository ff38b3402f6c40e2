"""
Styling helpers for rendered tables.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from logger import get_logger
from sumextras.html_table import HtmlTable
from sumextras.summary_table import SummaryTable, modify_table_styling
from sumextras.themes import compact_table_options

logger = get_logger(__name__)


def theme_table_compact(html_tbl: HtmlTable) -> HtmlTable:
    """
    Apply compact display options to any `HtmlTable`.

    Small font, 1px padding on every row type, bold title and column labels,
    no top or bottom border. Applying it again gives the same table.

    Example:
        theme_table_compact(html_table(df))
    """
    if not isinstance(html_tbl, HtmlTable):
        raise TypeError(f"theme_table_compact() expects an HtmlTable, got {type(html_tbl).__name__}")
    return html_tbl.tab_options(**compact_table_options())


def _variable_group_rows(body: pd.DataFrame) -> pd.Series:
    return body["row_type"] == "variable_group"


def group_styling(tbl: SummaryTable, format: str | Sequence[str] = ("bold", "italic")) -> SummaryTable:
    """
    Format variable group headers (rows added by `add_variable_group_header()`).

    Parameters:
        format: "bold", "italic" or both.

    Raises:
        ValueError: For any other format.
    """
    result = modify_table_styling(tbl, columns="label", rows=_variable_group_rows, text_format=format)
    logger.log_operation("group_styling", "completed", format=format)
    return result
