"""
Missing-value display cleanup for summary tables.
"""

from __future__ import annotations

import re

import pandas as pd

from config import CONFIG
from logger import get_logger
from sumextras.summary_table import (
    SummaryTable,
    all_stat_cols,
    modify_missing_symbol,
    modify_table_body,
)

logger = get_logger(__name__)

# whole words only: "Infinity-adjusted" and "89 (45%)" are left alone
NA_PATTERN = re.compile(r"\bNA\b|\bInf\b|^0 \(0%\)$")


def _blank_na_text(value):
    if isinstance(value, str) and NA_PATTERN.search(value):
        return None
    return value


def _missing_symbol_rows(body: pd.DataFrame) -> pd.Series:
    """Rows whose statistic cell belongs to the variable itself rather than a header row."""
    return (
        body["var_type"].isin(["continuous", "dichotomous"]) & (body["row_type"] == "label")
    ) | (
        body["var_type"].isin(["continuous2", "categorical"]) & (body["row_type"] == "level")
    )


def clean_table(tbl: SummaryTable) -> SummaryTable:
    """
    Standardize how missing statistics are displayed.

    Statistic cells reading "NA", "Inf" (as whole words) or exactly "0 (0%)" are
    emptied, and empty statistic cells on variable rows display
    `table.missing_symbol` ("---"). Applying it twice changes nothing.
    """
    stat_cols = all_stat_cols()(tbl.table_body)

    def _blank(body: pd.DataFrame) -> pd.DataFrame:
        for col in stat_cols:
            body[col] = body[col].map(_blank_na_text).astype(object)
        return body

    cleaned = modify_table_body(tbl, _blank)
    cleaned = modify_missing_symbol(
        cleaned,
        symbol=CONFIG.get("table.missing_symbol", "---"),
        columns=stat_cols,
        rows=_missing_symbol_rows,
    )
    logger.log_operation("clean_table", "completed", columns=len(stat_cols))
    return cleaned
