"""
🧪 Unit Tests for HtmlTable
File: tests/unit/test_html_table.py

Run with: pytest tests/unit/test_html_table.py -v
"""

import numpy as np
import pandas as pd
import pytest

from sumextras.html_table import DEFAULT_OPTIONS, html_table, px

pytestmark = pytest.mark.unit


@pytest.fixture
def cars():
    return pd.DataFrame({
        "model": ["Mazda RX4", "Datsun 710", "<Hornet>"],
        "mpg": ["21.0", "22.8", None],
    })


class TestHtmlTable:

    def test_px(self):
        assert px(13) == "13px"
        assert px(1.5) == "1.5px"

    def test_defaults(self, cars):
        assert dict(html_table(cars).options) == DEFAULT_OPTIONS

    def test_tab_options_numbers_become_px(self, cars):
        tbl = html_table(cars).tab_options(table_font_size=12, data_row_padding="2px")
        assert tbl.options["table_font_size"] == "12px"
        assert tbl.options["data_row_padding"] == "2px"

    def test_tab_options_unknown(self, cars):
        with pytest.raises(ValueError, match="Unknown table option"):
            html_table(cars).tab_options(table_colour="red")

    def test_methods_return_new_tables(self, cars):
        tbl = html_table(cars)
        styled = tbl.tab_options(table_font_size=10).cols_label(mpg="MPG")
        assert tbl.options["table_font_size"] == "16px"
        assert dict(tbl.column_labels) == {}
        assert styled.column_labels["mpg"] == "MPG"

    def test_cols_label_unknown(self, cars):
        with pytest.raises(KeyError):
            html_table(cars).cols_label(hp="Horsepower")

    def test_as_html_escapes_and_blanks(self, cars):
        html = html_table(cars, title="Cars").cols_label({"mpg": "MPG"}).as_html()

        assert "&lt;Hornet&gt;" in html
        assert "<th>MPG</th>" in html
        assert "heading-title" in html and ">Cars</th>" in html
        assert "<td></td>" in html

    def test_nan_renders_empty(self):
        html = html_table(pd.DataFrame({"x": [np.nan, 1.5]})).as_html()
        assert "<td></td>" in html
        assert "<td>1.5</td>" in html

    def test_tab_style_mask(self, cars):
        tbl = html_table(cars).tab_style({"font-weight": "bold"}, columns="model", rows=[True, False, False])
        html = tbl.as_html()
        assert "<td style='font-weight: bold'>Mazda RX4</td>" in html
        assert "<td>Datsun 710</td>" in html

    def test_tab_style_positions_and_callable(self, cars):
        tbl = (
            html_table(cars)
            .tab_style({"color": "red"}, rows=[1])
            .tab_style({"font-style": "italic"}, columns=["mpg"], rows=lambda d: d["mpg"].isna())
        )
        assert tbl.cell_styles[0].rows == (1,)
        assert tbl.cell_styles[0].columns == ("model", "mpg")
        assert tbl.cell_styles[1].rows == (2,)

    def test_later_styles_win(self, cars):
        tbl = (
            html_table(cars)
            .tab_style({"color": "red"}, columns="model", rows=[0])
            .tab_style({"color": "blue"}, columns="model", rows=[0])
        )
        assert "<td style='color: blue'>Mazda RX4</td>" in tbl.as_html()

    def test_source_note(self, cars):
        html = html_table(cars).tab_source_note("Source: Motor Trend").as_html()
        assert "source-notes" in html
        assert "Source: Motor Trend" in html

    def test_subtitle(self, cars):
        html = html_table(cars).tab_header("Cars", subtitle="1974").as_html()
        assert "heading-subtitle" in html

    def test_repr_html(self, cars):
        assert "<table>" in html_table(cars)._repr_html_()

    def test_footnote(self, cars):
        html = html_table(cars).tab_footnote("Median (Q1, Q3)").tab_source_note("Motor Trend").as_html()
        assert "<tfoot class='footnotes'>" in html
        assert html.index("Median (Q1, Q3)") < html.index("Motor Trend")


class TestRowClasses:

    def test_marked_rows_get_class(self, cars):
        tbl = html_table(cars).tab_row_class("row-group", rows=[True, False, False])
        html = tbl.as_html()
        assert "<tr class='row-group'><td>Mazda RX4</td>" in html
        assert "<tr><td>Datsun 710</td>" in html

    def test_padding_option_reaches_marked_rows(self, cars):
        tbl = (
            html_table(cars)
            .tab_options(row_group_padding=1, summary_row_padding=2)
            .tab_row_class("row-group", rows=[0])
            .tab_row_class("summary-row", rows=lambda d: d["mpg"].isna())
        )
        html = tbl.as_html()
        assert ".row-group td { padding: 1px 8px; }" in html
        assert ".summary-row td { padding: 2px 8px; }" in html
        assert "<tr class='summary-row'><td>&lt;Hornet&gt;</td>" in html

    def test_later_class_wins(self, cars):
        tbl = html_table(cars).tab_row_class("summary-row", rows=[0]).tab_row_class("grand-summary-row", rows=[0])
        assert "<tr class='grand-summary-row'>" in tbl.as_html()
        assert "<tr class='summary-row'>" not in tbl.as_html()

    def test_unknown_class(self, cars):
        with pytest.raises(ValueError, match="Unknown row class"):
            html_table(cars).tab_row_class("highlight", rows=[0])
