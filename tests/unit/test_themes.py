"""
🧪 Unit Tests for Summary Themes
File: tests/unit/test_themes.py

Run with: pytest tests/unit/test_themes.py -v
"""

import pytest

import sumextras
from sumextras.themes import (
    compact_table_options,
    get_summary_theme,
    reset_summary_theme,
    set_summary_theme,
    theme_summary_compact,
)

pytestmark = pytest.mark.unit


class TestThemes:

    def test_compact_theme(self):
        theme = theme_summary_compact()
        assert theme["name"] == "compact"
        assert theme["html_table_options"]["table_font_size"] == "13px"
        assert theme["html_table_options"]["row_group_padding"] == "1px"

    def test_compact_font_size(self):
        assert theme_summary_compact(font_size=11)["html_table_options"]["table_font_size"] == "11px"

    def test_compact_options_padding(self):
        options = compact_table_options(padding=2)
        assert options["footnotes_padding"] == "2px"
        assert options["table_border_bottom_style"] == "hidden"

    def test_set_get_reset(self):
        set_summary_theme(theme_summary_compact())
        assert get_summary_theme()["name"] == "compact"

        reset_summary_theme()
        assert get_summary_theme() is None

    def test_get_returns_copy(self):
        set_summary_theme(theme_summary_compact())
        get_summary_theme()["html_table_options"]["table_font_size"] = "99px"
        assert get_summary_theme()["html_table_options"]["table_font_size"] == "13px"

    def test_set_copies_argument(self):
        theme = theme_summary_compact()
        set_summary_theme(theme)
        theme["name"] = "changed"
        assert get_summary_theme()["name"] == "compact"

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="unknown table option"):
            set_summary_theme({"name": "bad", "html_table_options": {"font_colour": "red"}})

    def test_reset_exported(self):
        assert sumextras.reset_summary_theme is reset_summary_theme
