"""
Formatting utilities for money, percentages and engine results.

Plain-text rendering for callers that show commissions and rank
progress to members.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Union


if TYPE_CHECKING:
    from compensation.core.models import CommissionBreakdown, DownlineStats, RankProgress


_PREFIX_SYMBOLS = ("₹", "$", "€", "£")


def _quantize(value: Union[int, float, Decimal], decimals: int) -> Decimal:
    exponent = Decimal(1).scaleb(-decimals)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(
    amount: Union[int, float, Decimal],
    currency: str = "₹",
    decimals: int = 2,
    thousands_separator: str = ",",
    decimal_separator: str = ".",
) -> str:
    """
    Format amount as currency.

    Args:
        amount: Amount to format
        currency: Currency symbol or code (default "₹")
        decimals: Number of decimal places
        thousands_separator: Thousands separator
        decimal_separator: Decimal separator

    Returns:
        Formatted string with currency

    Example:
        >>> format_currency(Decimal("1234.5"))
        '₹1,234.50'
        >>> format_currency(1000, currency="INR", decimals=0)
        '1,000 INR'
    """
    formatted = f"{_quantize(amount, decimals):,.{decimals}f}"
    if thousands_separator != "," or decimal_separator != ".":
        formatted = (
            formatted.replace(",", "TEMP")
            .replace(".", decimal_separator)
            .replace("TEMP", thousands_separator)
        )

    if currency.startswith(_PREFIX_SYMBOLS):
        return f"{currency}{formatted}"
    return f"{formatted} {currency}"


def format_percentage(
    value: Union[int, float, Decimal],
    decimals: int = 2,
    show_sign: bool = False,
) -> str:
    """
    Format a value that is already a percentage.

    Example:
        >>> format_percentage(Decimal("65"))
        '65.00%'
        >>> format_percentage(12.5, decimals=1, show_sign=True)
        '+12.5%'
    """
    quantized = _quantize(value, decimals)
    sign = "+" if show_sign and quantized > 0 else ""
    return f"{sign}{quantized:.{decimals}f}%"


def format_commission_breakdown(
    breakdown: "CommissionBreakdown",
    currency: str = "₹",
) -> str:
    """
    Format an order's commissions as a text report.

    Args:
        breakdown: CommissionBreakdown object
        currency: Currency symbol

    Returns:
        Multi-line formatted report
    """
    lines = [f"Order: {format_currency(breakdown.order_amount, currency)}"]
    for line in breakdown.lines:
        label = line.type.value.capitalize()
        if line.level is not None:
            label = f"{label} {line.level}"
        lines.append(f"  {label + ':':<12} {format_currency(line.amount, currency)}")
    lines.append(f"Total: {format_currency(breakdown.total, currency)}")
    return "\n".join(lines)


def format_rank_progress(progress: "RankProgress") -> str:
    """
    Format rank progress as a text report.

    Args:
        progress: RankProgress object

    Returns:
        Multi-line formatted report
    """
    if progress.next_rank is None:
        return f"Rank: {progress.current_rank} (top rank reached)"

    return "\n".join([
        f"Rank: {progress.current_rank}",
        f"Next rank: {progress.next_rank} ({format_percentage(progress.progress)})",
        f"  Personal PV:      {format_percentage(progress.personal_pv_progress)}",
        f"  Group PV:         {format_percentage(progress.group_pv_progress)}"
        f" ({progress.current_group_pv} / {progress.required_group_pv})",
        f"  Direct referrals: {format_percentage(progress.direct_referrals_progress)}",
    ])


def format_downline_stats(stats: "DownlineStats", currency: str = "₹") -> str:
    """
    Format downline statistics as a text report.

    Args:
        stats: DownlineStats object
        currency: Currency symbol

    Returns:
        Multi-line formatted report
    """
    lines = [
        f"Total members:  {stats.total_members}",
        f"Active members: {stats.active_members}",
        f"Total sales:    {format_currency(stats.total_sales, currency)}",
    ]
    for level, count in sorted(stats.level_distribution.items()):
        lines.append(f"  Level {level}: {count}")
    if stats.top_performers:
        lines.append("Top performers:")
        for performer in stats.top_performers:
            name = performer.username or performer.id
            lines.append(f"  {name}: {format_currency(performer.sales, currency)}")
    return "\n".join(lines)
