"""
Lightweight HTML table object.

`HtmlTable` wraps a data frame of display text together with column labels,
per-cell CSS and a fixed set of table-wide display options. Every method
returns a new table, so calls can be chained:

    html_table(df).tab_header("Vehicle data").tab_options(table_font_size=px(13))
"""

from __future__ import annotations

import html as _html
import itertools
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Sequence

import numpy as np
import pandas as pd

from logger import get_logger

logger = get_logger(__name__)

DEFAULT_OPTIONS: dict[str, str] = {
    "table_font_size": "16px",
    "table_border_top_style": "solid",
    "table_border_bottom_style": "solid",
    "heading_title_font_weight": "initial",
    "column_labels_font_weight": "normal",
    "data_row_padding": "8px",
    "summary_row_padding": "8px",
    "grand_summary_row_padding": "8px",
    "footnotes_padding": "4px",
    "source_notes_padding": "4px",
    "row_group_padding": "8px",
}

_LENGTH_OPTIONS = {k for k in DEFAULT_OPTIONS if k.endswith(("_size", "_padding"))}

# body row classes with their own padding option
ROW_CLASSES = ("summary-row", "grand-summary-row", "row-group")

_table_ids = itertools.count(1)


def px(value: float) -> str:
    """CSS pixel length, e.g. px(13) -> "13px"."""
    return f"{value:g}px"


@dataclass(frozen=True)
class CellStyle:
    columns: tuple[str, ...]
    rows: tuple[int, ...]
    css: tuple[tuple[str, str], ...]


@dataclass(frozen=True, eq=False)
class HtmlTable:
    """
    Display table rendered to HTML by `as_html()`.

    Attributes:
        data: Display values; missing entries render as empty cells.
        column_labels: Header text per column (defaults to the column name).
        options: Table-wide display options, see `DEFAULT_OPTIONS`.
        cell_styles: CSS applied to selected body cells, later entries win.
        row_classes: (row position, class) pairs from `tab_row_class()`.
    """

    data: pd.DataFrame
    column_labels: Mapping[str, str] = field(default_factory=dict)
    options: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    cell_styles: tuple[CellStyle, ...] = ()
    row_classes: tuple[tuple[int, str], ...] = ()
    title: str | None = None
    subtitle: str | None = None
    footnotes: tuple[str, ...] = ()
    source_notes: tuple[str, ...] = ()

    def tab_options(self, **options: Any) -> HtmlTable:
        """
        Set table-wide display options.

        Numeric values for size and padding options are read as pixels.

        Raises:
            ValueError: If an option name is not supported.
        """
        unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
        if unknown:
            raise ValueError(
                f"Unknown table option(s): {unknown}. Supported: {sorted(DEFAULT_OPTIONS)}"
            )

        resolved = {}
        for name, value in options.items():
            if name in _LENGTH_OPTIONS and isinstance(value, (int, float)):
                value = px(value)
            resolved[name] = str(value)

        return replace(self, options={**self.options, **resolved})

    def tab_header(self, title: str, subtitle: str | None = None) -> HtmlTable:
        return replace(self, title=title, subtitle=subtitle)

    def tab_source_note(self, note: str) -> HtmlTable:
        return replace(self, source_notes=(*self.source_notes, note))

    def tab_footnote(self, note: str) -> HtmlTable:
        return replace(self, footnotes=(*self.footnotes, note))

    def tab_row_class(
        self,
        css_class: str,
        rows: Sequence[int] | Sequence[bool] | np.ndarray | Callable | None = None,
    ) -> HtmlTable:
        """
        Mark body rows as summary, grand summary or row group rows.

        Marked rows take the matching `*_padding` option. A later class
        replaces an earlier one on the same row.

        Raises:
            ValueError: If `css_class` is not one of `ROW_CLASSES`.
        """
        if css_class not in ROW_CLASSES:
            raise ValueError(f"Unknown row class '{css_class}'. Supported: {list(ROW_CLASSES)}")
        marked = tuple((i, css_class) for i in self._positions(rows))
        return replace(self, row_classes=(*self.row_classes, *marked))

    def _positions(self, rows: Any) -> tuple[int, ...]:
        if callable(rows):
            rows = rows(self.data)
        if rows is None:
            return tuple(range(len(self.data)))
        arr = np.asarray(rows)
        if arr.dtype == bool:
            return tuple(int(i) for i in np.flatnonzero(arr))
        return tuple(int(i) for i in arr)

    def cols_label(self, labels: Mapping[str, str] | None = None, **kwargs: str) -> HtmlTable:
        """
        Relabel columns in the header.

        Raises:
            KeyError: If a column does not exist.
        """
        new_labels = {**(labels or {}), **kwargs}
        missing = [c for c in new_labels if c not in self.data.columns]
        if missing:
            raise KeyError(f"Columns not found in table: {missing}")
        return replace(self, column_labels={**self.column_labels, **new_labels})

    def tab_style(
        self,
        style: Mapping[str, str],
        columns: str | Sequence[str] | None = None,
        rows: Sequence[int] | Sequence[bool] | np.ndarray | Callable | None = None,
    ) -> HtmlTable:
        """
        Apply CSS declarations to body cells.

        Parameters:
            style: CSS property -> value, e.g. {"font-weight": "bold"}.
            columns: Column name(s); all columns when None.
            rows: Row positions, a boolean mask, a callable returning a mask for
                `data`, or None for every row.
        """
        if columns is None:
            cols = tuple(self.data.columns)
        elif isinstance(columns, str):
            cols = (columns,)
        else:
            cols = tuple(columns)

        cell_style = CellStyle(columns=cols, rows=self._positions(rows), css=tuple(style.items()))
        return replace(self, cell_styles=(*self.cell_styles, cell_style))

    def _cell_css(self) -> dict[tuple[int, str], dict[str, str]]:
        css: dict[tuple[int, str], dict[str, str]] = {}
        for cell_style in self.cell_styles:
            for row in cell_style.rows:
                for col in cell_style.columns:
                    css.setdefault((row, col), {}).update(dict(cell_style.css))
        return css

    def _stylesheet(self, table_id: str) -> str:
        o = self.options
        return f"""
        <style>
            #{table_id} table {{ border-collapse: collapse; font-size: {o['table_font_size']};
                border-top: 2px {o['table_border_top_style']} #A8A8A8;
                border-bottom: 2px {o['table_border_bottom_style']} #A8A8A8; }}
            #{table_id} .heading-title {{ font-weight: {o['heading_title_font_weight']}; }}
            #{table_id} th {{ font-weight: {o['column_labels_font_weight']}; padding: 5px 8px;
                border-bottom: 2px solid #D3D3D3; }}
            #{table_id} td {{ padding: {o['data_row_padding']} 8px; }}
            #{table_id} .summary-row td {{ padding: {o['summary_row_padding']} 8px; }}
            #{table_id} .grand-summary-row td {{ padding: {o['grand_summary_row_padding']} 8px; }}
            #{table_id} .row-group td {{ padding: {o['row_group_padding']} 8px; }}
            #{table_id} .footnotes td {{ padding: {o['footnotes_padding']} 8px; }}
            #{table_id} .source-notes td {{ padding: {o['source_notes_padding']} 8px; }}
        </style>
        """

    def as_html(self) -> str:
        """Render the table as an HTML fragment with an embedded stylesheet."""
        table_id = f"sumextras-table-{next(_table_ids)}"
        columns = list(self.data.columns)
        cell_css = self._cell_css()

        head = ""
        if self.title is not None:
            head += (
                f"<tr><th class='heading-title' colspan='{len(columns)}'>"
                f"{_html.escape(self.title)}</th></tr>"
            )
            if self.subtitle:
                head += (
                    f"<tr><th class='heading-subtitle' colspan='{len(columns)}'>"
                    f"{_html.escape(self.subtitle)}</th></tr>"
                )
        head += "<tr>" + "".join(
            f"<th>{_html.escape(str(self.column_labels.get(c, c)))}</th>" for c in columns
        ) + "</tr>"

        row_classes = dict(self.row_classes)
        rows_html = ""
        for i, row in enumerate(self.data.itertuples(index=False, name=None)):
            cells = ""
            for col, value in zip(columns, row):
                text = "" if not isinstance(value, str) and pd.isna(value) else str(value)
                declarations = cell_css.get((i, col))
                style_attr = ""
                if declarations:
                    style_attr = " style='" + "; ".join(f"{k}: {v}" for k, v in declarations.items()) + "'"
                cells += f"<td{style_attr}>{_html.escape(text)}</td>"
            class_attr = f" class='{row_classes[i]}'" if i in row_classes else ""
            rows_html += f"<tr{class_attr}>{cells}</tr>"

        foot = ""
        for css_class, notes in (("footnotes", self.footnotes), ("source-notes", self.source_notes)):
            if notes:
                foot += f"<tfoot class='{css_class}'>" + "".join(
                    f"<tr><td colspan='{len(columns)}'>{_html.escape(note)}</td></tr>"
                    for note in notes
                ) + "</tfoot>"

        return f"""
        {self._stylesheet(table_id)}
        <div id="{table_id}">
            <table>
                <thead>{head}</thead>
                <tbody>{rows_html}</tbody>
                {foot}
            </table>
        </div>
        """

    def _repr_html_(self) -> str:
        return self.as_html()


def html_table(data: pd.DataFrame, title: str | None = None) -> HtmlTable:
    """Create an `HtmlTable` from a data frame."""
    tbl = HtmlTable(data=data.reset_index(drop=True))
    logger.debug(f"html_table: {data.shape[0]} rows, {data.shape[1]} columns")
    return tbl.tab_header(title) if title is not None else tbl
