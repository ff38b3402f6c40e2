"""
sumextras: convenience functions for summary ("Table 1") tables.

    from sumextras import tbl_summary, add_auto_labels, extras

    tbl = extras(add_auto_labels(tbl_summary(trial, by="trt"), dictionary))

Importing the package makes the compact theme the default for summary tables
(set `SUMEXTRAS_THEME_COMPACT_ON_IMPORT=false` to opt out, or call
`reset_summary_theme()` afterwards).
"""

from config import CONFIG
from logger import get_logger
from sumextras.clean_table import clean_table
from sumextras.errors import MissingDictionaryError, SumExtrasError, UnsupportedTableKindError
from sumextras.extras import extras
from sumextras.formatting import style_number, style_percent, style_pvalue
from sumextras.html_table import HtmlTable, html_table, px
from sumextras.labels import (
    add_auto_labels,
    clear_dictionary,
    create_labels,
    get_dictionary,
    set_dictionary,
)
from sumextras.styling import group_styling, theme_table_compact
from sumextras.summary_table import (
    SummaryTable,
    TableKind,
    add_overall,
    add_p,
    add_variable_group_header,
    all_categorical,
    all_continuous,
    all_stat_cols,
    as_data_frame,
    as_html_table,
    bold_labels,
    italicize_levels,
    modify_header,
    modify_missing_symbol,
    modify_table_body,
    modify_table_styling,
    rebuild,
    tbl_summary,
    tbl_svysummary,
)
from sumextras.survey import SurveyDesign, svydesign
from sumextras.themes import (
    get_summary_theme,
    reset_summary_theme,
    set_summary_theme,
    theme_summary_compact,
)

__version__ = "0.1.0"

__all__ = [
    "HtmlTable",
    "MissingDictionaryError",
    "SumExtrasError",
    "SummaryTable",
    "SurveyDesign",
    "TableKind",
    "UnsupportedTableKindError",
    "add_auto_labels",
    "add_overall",
    "add_p",
    "add_variable_group_header",
    "all_categorical",
    "all_continuous",
    "all_stat_cols",
    "as_data_frame",
    "as_html_table",
    "bold_labels",
    "clean_table",
    "clear_dictionary",
    "create_labels",
    "extras",
    "get_dictionary",
    "get_summary_theme",
    "group_styling",
    "html_table",
    "italicize_levels",
    "modify_header",
    "modify_missing_symbol",
    "modify_table_body",
    "modify_table_styling",
    "px",
    "rebuild",
    "reset_summary_theme",
    "set_dictionary",
    "set_summary_theme",
    "style_number",
    "style_percent",
    "style_pvalue",
    "svydesign",
    "tbl_summary",
    "tbl_svysummary",
    "theme_summary_compact",
    "theme_table_compact",
]

logger = get_logger(__name__)

if CONFIG.get("theme.compact_on_import", True):
    set_summary_theme(theme_summary_compact())
    logger.info("Compact summary-table theme applied. Use reset_summary_theme() to restore the defaults.")
