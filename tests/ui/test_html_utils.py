"""Tests for HTML snippet helpers."""
from src.ui.html_utils import html_block, pill, price_summary_html


class TestHtmlBlock:
    def test_strips_indentation(self):
        html = html_block("""
            <div>
                <span>x</span>
            </div>
        """)
        assert html == "<div>\n<span>x</span>\n</div>"


class TestPriceSummaryHtml:
    """Tests for the price summary box."""

    def test_rows_and_total(self):
        html = price_summary_html([("Registration", 1925), ("Advertisements", 80)], 2005)

        assert "<span>Registration</span><span>$1,925</span>" in html
        assert "<span>Advertisements</span><span>$80</span>" in html
        assert "price-total" in html
        assert "$2,005" in html

    def test_pill_label_and_color(self):
        html = pill("Partial", "#3b82f6")
        assert "Partial" in html
        assert "border: 1px solid #3b82f6" in html
