"""
Utility functions for the compensation package.

Formatting helpers for rendering engine results.
"""

from compensation.utils.formatters import (
    format_commission_breakdown,
    format_currency,
    format_downline_stats,
    format_percentage,
    format_rank_progress,
)

__all__ = [
    "format_currency",
    "format_percentage",
    "format_commission_breakdown",
    "format_rank_progress",
    "format_downline_stats",
]
