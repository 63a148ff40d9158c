"""HTML snippets for the registration pages."""
from textwrap import dedent
from typing import List, Tuple


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Lines with 4+ leading spaces would render as code blocks, so every line
    is left-stripped after dedenting.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def pill(label: str, color: str) -> str:
    """Rounded colored label, e.g. a payment status."""
    return html_block(
        f"""
        <span style="background: {color}33; color: {color}; border: 1px solid {color};
        border-radius: 999px; padding: 2px 10px; font-size: 0.8rem; font-weight: 600;">
        {label}
        </span>
        """
    )


def price_summary_html(rows: List[Tuple[str, int]], total: int) -> str:
    """Price summary box; styled by the .price-* rules in app.py."""
    items = "".join(
        f"<div class='price-row'><span>{label}</span><span>${amount:,}</span></div>"
        for label, amount in rows
    )
    return html_block(
        f"""
        <div class="price-summary">
            <h3>💰 Price Summary</h3>
            {items}
            <div class="price-row price-total"><span>Total</span><span>${total:,}</span></div>
        </div>
        """
    )
