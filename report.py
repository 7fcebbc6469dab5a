"""
Display formatting — the only place numbers get rounded.

  1. Currency and percent strings for the quote screens
  2. The approval tooltip text
  3. A plain-text scenario report
"""

from decimal import ROUND_HALF_UP, Decimal

import config
from calculations import ZERO, to_decimal

_WHOLE = Decimal("1")
_TENTH = Decimal("0.1")
_HUNDRED = Decimal("100")


def format_currency(value) -> str:
    """Whole dollars with thousands separators: 1234.5 -> "$1,235", -50 -> "-$50"."""
    amount = (to_decimal(value) or ZERO).quantize(_WHOLE, rounding=ROUND_HALF_UP)
    if amount < 0:
        return f"-{config.CURRENCY_SYMBOL}{-amount:,.0f}"
    return f"{config.CURRENCY_SYMBOL}{amount:,.0f}"


def format_percent(value) -> str:
    """Fraction to percent with one decimal: 0.2 -> "20.0%"."""
    pct = ((to_decimal(value) or ZERO) * _HUNDRED).quantize(_TENTH, rounding=ROUND_HALF_UP)
    return f"{pct:,.1f}%"


def format_price(price, unit: str) -> str:
    """Annual catalog price with its unit: "$1,980/user/yr"."""
    suffix = "/user/yr" if unit == "per_user" else "/org/yr"
    return f"{format_currency(price)}{suffix}"


def describe_approval(result: dict) -> str:
    """One-line approval summary shown next to a line item's level badge."""
    if result["level"] == "N/A":
        return "Product not in discount matrix"

    max_l4 = result.get("max_l4_discount")
    max_l4_text = format_percent(max_l4) if max_l4 is not None else "N/A"

    if result["is_instant_approval"]:
        return f"Approval Level {result['level']} • Max L4: {max_l4_text}"
    return f"Requires escalation (>{max_l4_text}) • Max L4: {max_l4_text}"


def build_scenario_report(summary: dict, scenario_name: str = "Scenario") -> str:
    """Human-readable report for a quote.price_scenario() result."""
    lines = []
    sep = "=" * 72
    totals = summary["totals"]

    lines.append(sep)
    lines.append(f"  {scenario_name.upper()}")
    lines.append(sep)
    lines.append("")

    if summary["requires_escalation"]:
        lines.append("  Approval:    >>> ESCALATION REQUIRED <<<")
    elif summary["highest_level"] == "N/A":
        lines.append("  Approval:    N/A (no products in discount matrix)")
    else:
        lines.append(f"  Approval:    instant ({summary['highest_level']})")
    if summary["unmatched_products"]:
        lines.append(f"  Not in matrix: {', '.join(str(p) for p in summary['unmatched_products'])}")
    lines.append("")

    lines.append("-" * 72)
    lines.append("  LINE ITEMS")
    lines.append("-" * 72)
    lines.append(f"  {'Product':<30} {'Qty':>6} {'Net/mo':>10} {'Disc':>7} {'ACV':>10} {'Level':>5}")
    lines.append(f"  {'-'*30} {'-'*6} {'-'*10} {'-'*7} {'-'*10} {'-'*5}")

    for line in summary["lines"]:
        name = (line.get("product_name") or "?")[:30]
        line_totals = line["totals"]
        lines.append(
            f"  {name:<30} "
            f"{str(line.get('quantity', '')):>6} "
            f"{format_currency(line_totals['net_monthly']):>10} "
            f"{format_percent(line['pricing']['discount_percent']):>7} "
            f"{format_currency(line_totals['acv']):>10} "
            f"{line['approval']['level']:>5}"
        )

    lines.append("")
    lines.append("-" * 72)
    lines.append("  TOTALS")
    lines.append("-" * 72)
    lines.append(f"  List (monthly):     {format_currency(totals['list_monthly'])}")
    lines.append(f"  Net (monthly):      {format_currency(totals['net_monthly'])}")
    lines.append(f"  Net (annual):       {format_currency(totals['net_annual'])}")
    lines.append(f"  Net (term):         {format_currency(totals['net_term'])}")
    lines.append(f"  Total savings:      {format_currency(totals['total_savings'])}")
    lines.append(f"  Blended discount:   {format_percent(totals['blended_discount'])}")
    lines.append(f"  ACV:                {format_currency(totals['total_acv'])}")
    lines.append(f"  Commissionable ACV: {format_currency(totals['total_commissionable_acv'])}")
    lines.append("")
    lines.append(sep)
    return "\n".join(lines)
