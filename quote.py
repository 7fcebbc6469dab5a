"""
Scenario quoting pipeline.

Per line: reconcile price -> compute totals -> match discount matrix row ->
approval level. Per scenario: roll the lines up and report the worst
approval level, so the rep knows up front whether the quote will need
escalation.

Inputs are plain dicts straight from the persistence layer; nothing passed
in is modified.
"""

from approval import (
    LEVEL_ESCALATION,
    LEVEL_NA,
    calculate_approval_level,
    level_rank,
    match_threshold,
)
from calculations import (
    line_item_totals,
    net_from_discount,
    resolve_pricing,
    scenario_totals,
)
from product_mapping import find_price_book_match, get_discount_matrix_name, monthly_price


def price_line_item(line_item: dict, thresholds: list[dict]) -> dict:
    """Totals, effective pricing and approval result for one line item."""
    pricing = resolve_pricing(line_item)
    match = match_threshold(
        thresholds,
        line_item.get("product_name") or "",
        line_item.get("quantity") or 0,
    )
    approval = calculate_approval_level(match["threshold"], pricing["discount_percent"])

    return {
        "id": line_item.get("id"),
        "product_name": line_item.get("product_name"),
        "quantity": line_item.get("quantity"),
        "pricing": pricing,
        "totals": line_item_totals(line_item),
        "approval": approval,
        "match_type": match["match_type"],
        "match_confidence": match["confidence"],
    }


def price_scenario(line_items: list[dict], thresholds: list[dict]) -> dict:
    """
    Price every line and aggregate.

    Returns:
        lines: price_line_item() output per line, in input order
        totals: scenario_totals() of the lines
        highest_level: the most escalated level of any matched line
                       ("N/A" when no line is in the matrix)
        requires_escalation: True if any line is L5+
        unmatched_products: product names with no matrix row
    """
    lines = [price_line_item(item, thresholds) for item in line_items]

    highest = LEVEL_NA
    for line in lines:
        level = line["approval"]["level"]
        if level_rank(level) > level_rank(highest):
            highest = level

    return {
        "lines": lines,
        "totals": scenario_totals(line_items),
        "highest_level": highest,
        "requires_escalation": any(
            line["approval"]["level"] == LEVEL_ESCALATION for line in lines
        ),
        "unmatched_products": [
            line["product_name"] for line in lines if line["approval"]["level"] == LEVEL_NA
        ],
    }


def apply_max_instant_discount(line_item: dict, thresholds: list[dict]) -> dict:
    """
    The "apply max instant-approval discount" action.

    Returns a copy of the line with its discount set to the L4 max for its
    product/quantity and the net price to match. With no L4 bound the copy
    is unchanged.
    """
    updated = dict(line_item)
    match = match_threshold(
        thresholds,
        line_item.get("product_name") or "",
        line_item.get("quantity") or 0,
    )
    max_l4 = calculate_approval_level(match["threshold"], None)["max_l4_discount"]
    if max_l4 is None:
        return updated

    updated["discount_percent"] = max_l4
    updated["net_unit_price"] = net_from_discount(line_item.get("list_unit_price"), max_l4)
    return updated


def select_product(products: list[dict], category: str, edition: str | None,
                   quantity: int = 1, term_months: int = 12) -> dict | None:
    """
    New net-new line item for a price book selection, named the way the
    discount matrix names it. None if the selection is not in the catalog.
    """
    product = find_price_book_match(products, category, edition)
    if product is None:
        return None

    return {
        "product_name": get_discount_matrix_name(category, edition),
        "list_unit_price": monthly_price(product),
        "quantity": quantity,
        "term_months": term_months,
        "discount_percent": None,
        "net_unit_price": None,
        "revenue_type": "net_new",
        "existing_volume": None,
        "existing_net_price": None,
        "existing_term_months": None,
    }
