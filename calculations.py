"""
Deal scenario calculation engine.

Turns a line item's raw pricing fields into monthly / annual / term totals,
ACV and commissionable ACV, and rolls line items up into scenario totals.

Rules:
  - Every price on a line item is a MONTHLY unit price.
  - Annual figures and ACV are always 12 months, whatever the contract term.
  - Bad inputs (negative prices, discounts outside 0-1, net above list) clamp
    to 0 instead of raising. The form layer validates; this layer never fails.
  - Nothing is rounded here. Rounding is a display concern (see report.py).
"""

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")
ONE = Decimal("1")
MONTHS_PER_YEAR = Decimal("12")

# Which field is driving the line's price
DRIVEN_BY_NET = "net"
DRIVEN_BY_DISCOUNT = "discount"
DRIVEN_BY_NEITHER = "neither"


def to_decimal(value) -> Decimal | None:
    """
    Coerce a number from the persistence layer to Decimal. None, unparsable
    values, NaN and infinities all come back as None.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


# ── Unit price conversions ──────────────────────────────────────────

def net_from_discount(list_price, discount_percent) -> Decimal:
    """
    Net unit price from list price and a discount fraction (0.20 = 20%).
    Returns 0 for a negative list price or a discount outside 0-1.
    """
    list_price = to_decimal(list_price)
    discount = to_decimal(discount_percent)
    if list_price is None or discount is None:
        return ZERO
    if list_price < 0 or discount < 0 or discount > 1:
        return ZERO
    return list_price * (ONE - discount)


def discount_from_net(list_price, net_price) -> Decimal:
    """
    Discount fraction implied by a list and net unit price.
    Returns 0 when list <= 0, net < 0, or net is above list.
    """
    list_price = to_decimal(list_price)
    net_price = to_decimal(net_price)
    if list_price is None or net_price is None:
        return ZERO
    if list_price <= 0 or net_price < 0 or net_price > list_price:
        return ZERO
    return (list_price - net_price) / list_price


# ── Line totals ─────────────────────────────────────────────────────

def line_monthly(net_unit_price, quantity) -> Decimal:
    net_unit_price = to_decimal(net_unit_price)
    quantity = to_decimal(quantity)
    if net_unit_price is None or quantity is None:
        return ZERO
    if net_unit_price < 0 or quantity < 0:
        return ZERO
    return net_unit_price * quantity


def line_annual(net_monthly) -> Decimal:
    """Yearly run-rate of a line: always 12 months."""
    net_monthly = to_decimal(net_monthly)
    if net_monthly is None:
        return ZERO
    return net_monthly * MONTHS_PER_YEAR


def line_term(net_monthly, term_months) -> Decimal:
    net_monthly = to_decimal(net_monthly)
    term_months = to_decimal(term_months)
    if net_monthly is None or term_months is None or term_months <= 0:
        return ZERO
    return net_monthly * term_months


# ── ACV ─────────────────────────────────────────────────────────────

def acv(net_monthly) -> Decimal:
    """
    Annual Contract Value. Annualized to exactly 12 months; the contract
    term never enters into it. A 36-month deal at 1,000/month has an ACV of
    12,000, not 36,000.
    """
    net_monthly = to_decimal(net_monthly)
    if net_monthly is None:
        return ZERO
    return net_monthly * MONTHS_PER_YEAR


def existing_annual(existing_net_price, existing_volume) -> Decimal:
    """Annual value of the contract an add-on is layered on top of."""
    existing_net_price = to_decimal(existing_net_price)
    existing_volume = to_decimal(existing_volume)
    if existing_net_price is None or existing_volume is None:
        return ZERO
    if existing_net_price < 0 or existing_volume < 0:
        return ZERO
    return existing_net_price * existing_volume * MONTHS_PER_YEAR


def commissionable_acv(revenue_type: str, net_annual, existing_annual_value=ZERO) -> Decimal:
    """
    Commissionable ACV.

    net_new: the full net annual value.
    add_on:  only the increment over the existing baseline, floored at 0.
    Any other revenue type is treated like add_on.
    """
    net_annual = to_decimal(net_annual) or ZERO
    existing = to_decimal(existing_annual_value) or ZERO
    if revenue_type == "net_new":
        return max(net_annual, ZERO)
    return max(net_annual - existing, ZERO)


# ── Line item ───────────────────────────────────────────────────────

def resolve_pricing(line_item: dict) -> dict:
    """
    Reconcile the two views of a line's price into one.

    The UI stores both discount_percent and net_unit_price and whichever was
    edited last drives the other. net_unit_price wins when present, then
    discount_percent; with neither set the line sells at list.

    Returns:
        driven_by: "net", "discount" or "neither"
        net_unit_price: effective monthly net unit price
        discount_percent: effective discount fraction
    """
    list_price = to_decimal(line_item.get("list_unit_price")) or ZERO
    net_price = to_decimal(line_item.get("net_unit_price"))
    discount = to_decimal(line_item.get("discount_percent"))

    if net_price is not None:
        return {
            "driven_by": DRIVEN_BY_NET,
            "net_unit_price": net_price,
            "discount_percent": discount_from_net(list_price, net_price),
        }
    if discount is not None:
        return {
            "driven_by": DRIVEN_BY_DISCOUNT,
            "net_unit_price": net_from_discount(list_price, discount),
            "discount_percent": discount,
        }
    return {
        "driven_by": DRIVEN_BY_NEITHER,
        "net_unit_price": net_from_discount(list_price, ZERO),
        "discount_percent": ZERO,
    }


def line_discount(line_item: dict) -> Decimal:
    """Effective discount fraction of a line, whichever field drives it."""
    return resolve_pricing(line_item)["discount_percent"]


def line_item_totals(line_item: dict) -> dict:
    """All derived values for one line item. Recomputed on every call."""
    pricing = resolve_pricing(line_item)
    quantity = line_item.get("quantity") or 0
    term_months = line_item.get("term_months") or 0

    list_monthly = line_monthly(line_item.get("list_unit_price"), quantity)
    net_monthly = line_monthly(pricing["net_unit_price"], quantity)
    net_annual = line_annual(net_monthly)
    existing = existing_annual(
        line_item.get("existing_net_price"),
        line_item.get("existing_volume"),
    )

    return {
        "list_monthly": list_monthly,
        "net_monthly": net_monthly,
        "list_annual": line_annual(list_monthly),
        "net_annual": net_annual,
        "list_term": line_term(list_monthly, term_months),
        "net_term": line_term(net_monthly, term_months),
        "acv": acv(net_monthly),
        "commissionable_acv": commissionable_acv(
            line_item.get("revenue_type") or "net_new", net_annual, existing
        ),
        "existing_annual": existing,
    }


# ── Scenario aggregates ─────────────────────────────────────────────

def blended_discount(term_list, term_net) -> Decimal:
    """
    Discount implied by the scenario's aggregate term values.

    Not an average of line discounts: a large, heavily discounted line
    dominates the blend the way it dominates the deal.
    """
    term_list = to_decimal(term_list) or ZERO
    term_net = to_decimal(term_net) or ZERO
    if term_list <= 0:
        return ZERO
    return (term_list - term_net) / term_list


def total_savings(term_list, term_net) -> Decimal:
    term_list = to_decimal(term_list) or ZERO
    term_net = to_decimal(term_net) or ZERO
    return max(term_list - term_net, ZERO)


def scenario_totals(line_items: list[dict]) -> dict:
    """
    Sum line totals across a scenario, then derive the blended discount and
    savings from the summed term values (sum first, divide after).
    """
    totals = {
        "list_monthly": ZERO,
        "net_monthly": ZERO,
        "list_annual": ZERO,
        "net_annual": ZERO,
        "list_term": ZERO,
        "net_term": ZERO,
        "total_acv": ZERO,
        "total_commissionable_acv": ZERO,
        "total_existing_annual": ZERO,
    }

    for line_item in line_items:
        item = line_item_totals(line_item)
        totals["list_monthly"] += item["list_monthly"]
        totals["net_monthly"] += item["net_monthly"]
        totals["list_annual"] += item["list_annual"]
        totals["net_annual"] += item["net_annual"]
        totals["list_term"] += item["list_term"]
        totals["net_term"] += item["net_term"]
        totals["total_acv"] += item["acv"]
        totals["total_commissionable_acv"] += item["commissionable_acv"]
        totals["total_existing_annual"] += item["existing_annual"]

    totals["total_savings"] = total_savings(totals["list_term"], totals["net_term"])
    totals["blended_discount"] = blended_discount(totals["list_term"], totals["net_term"])
    return totals
