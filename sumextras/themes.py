"""
Process-wide summary-table theme.

The active theme is read by `as_html_table()` every time a summary table is
rendered. `sumextras` sets the compact theme on import (see
`theme.compact_on_import`); `reset_summary_theme()` undoes it.
"""

from __future__ import annotations

import copy
from typing import Any

from config import CONFIG
from logger import get_logger
from sumextras.html_table import DEFAULT_OPTIONS, px

logger = get_logger(__name__)

_active_theme: dict[str, Any] | None = None


def compact_table_options(font_size: int | None = None, padding: int | None = None) -> dict[str, str]:
    """
    Display options of the compact theme: small font, 1px row padding, bold
    headings, hidden top/bottom borders.
    """
    font_size = CONFIG.get("theme.font_size", 13) if font_size is None else font_size
    padding = CONFIG.get("theme.padding", 1) if padding is None else padding
    return {
        "table_font_size": px(font_size),
        "data_row_padding": px(padding),
        "summary_row_padding": px(padding),
        "grand_summary_row_padding": px(padding),
        "footnotes_padding": px(padding),
        "source_notes_padding": px(padding),
        "row_group_padding": px(padding),
        "heading_title_font_weight": "bold",
        "column_labels_font_weight": "bold",
        "table_border_top_style": "hidden",
        "table_border_bottom_style": "hidden",
    }


def theme_summary_compact(font_size: int | None = None) -> dict[str, Any]:
    """Compact theme for summary tables."""
    return {"name": "compact", "html_table_options": compact_table_options(font_size)}


def set_summary_theme(theme: dict[str, Any]) -> None:
    """
    Make `theme` the active summary-table theme.

    Raises:
        ValueError: If the theme carries unknown table options.
    """
    global _active_theme
    options = theme.get("html_table_options", {})
    unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
    if unknown:
        raise ValueError(f"Theme sets unknown table option(s): {unknown}")
    _active_theme = copy.deepcopy(theme)
    logger.debug(f"Summary theme set: {theme.get('name', 'custom')}")


def get_summary_theme() -> dict[str, Any] | None:
    """The active theme, or None when the defaults are in effect."""
    return copy.deepcopy(_active_theme)


def reset_summary_theme() -> None:
    global _active_theme
    _active_theme = None
    logger.debug("Summary theme reset")
