from __future__ import annotations

from config import CONFIG
from logger import get_logger
from sumextras.clean_table import clean_table
from sumextras.formatting import pvalue_formatter
from sumextras.summary_table import (
    SummaryTable,
    add_overall,
    add_p,
    all_categorical,
    all_continuous,
    bold_labels,
    modify_header,
)

logger = get_logger(__name__)


def extras(tbl: SummaryTable, pval: bool = True, overall: bool = True) -> SummaryTable:
    """
    Apply the usual finishing touches to a summary table.

    In order: bold variable labels, blank the label header, add an "Overall"
    column as the last statistic column, add p-values (Kruskal-Wallis for
    continuous, chi-square for categorical variables, three decimals) and
    finally `clean_table()`.

    Parameters:
        tbl: A tbl_summary / tbl_svysummary table.
        pval: Add the p-value column.
        overall: Add the overall column.

    Errors from the statistical tests (e.g. a `by` with a single level)
    propagate unchanged.
    """
    with logger.track_time("extras"):
        result = bold_labels(tbl)
        result = modify_header(result, label="")
        if overall:
            result = add_overall(result, last=True)
        if pval:
            result = add_p(
                result,
                test={all_continuous(): "kruskal.test", all_categorical(): "chisq.test"},
                pvalue_fun=pvalue_formatter(CONFIG.get("table.pvalue_digits", 3)),
            )
        result = clean_table(result)

    logger.log_operation("extras", "completed", pval=pval, overall=overall)
    return result
