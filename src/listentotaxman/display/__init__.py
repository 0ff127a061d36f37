"""Terminal renderers for calculation results."""

from .comparison import build_comparison_table, render_comparison
from .formatting import format_currency, truncate_label
from .single import render_detailed, render_summary

__all__ = [
    "build_comparison_table",
    "format_currency",
    "render_comparison",
    "render_detailed",
    "render_summary",
    "truncate_label",
]
