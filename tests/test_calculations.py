from decimal import Decimal

import pytest

from approval import calculate_approval_level
from calculations import (
    acv,
    blended_discount,
    commissionable_acv,
    discount_from_net,
    existing_annual,
    line_annual,
    line_discount,
    line_item_totals,
    line_monthly,
    line_term,
    net_from_discount,
    resolve_pricing,
    scenario_totals,
    to_decimal,
    total_savings,
)

D = Decimal


# ── Unit price conversions ──────────────────────────────────────────

def test_net_from_discount():
    assert net_from_discount(100, 0.2) == 80
    assert net_from_discount(100, 0) == 100
    assert net_from_discount(100, 1) == 0


@pytest.mark.parametrize("list_price, discount", [(-100, 0.2), (100, -0.2), (100, 1.5)])
def test_net_from_discount_clamps_bad_input(list_price, discount):
    assert net_from_discount(list_price, discount) == 0


def test_discount_from_net():
    assert discount_from_net(100, 80) == D("0.2")
    assert discount_from_net(100, 100) == 0
    assert discount_from_net(100, 0) == 1


@pytest.mark.parametrize("list_price, net_price", [(0, 80), (-100, 80), (100, -80), (100, 150)])
def test_discount_from_net_clamps_bad_input(list_price, net_price):
    assert discount_from_net(list_price, net_price) == 0


@pytest.mark.parametrize("list_price", [1, 99.99, 150, 12500])
@pytest.mark.parametrize("discount", [0, 0.05, 0.2, 0.333, 0.75, 1])
def test_discount_survives_net_conversion(list_price, discount):
    net = net_from_discount(list_price, discount)
    assert discount_from_net(list_price, net) == pytest.approx(D(str(discount)))


def test_to_decimal():
    assert to_decimal(None) is None
    assert to_decimal(0.1) == D("0.1")
    assert to_decimal("42.50") == D("42.50")
    assert to_decimal("not a number") is None


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf"), D("NaN"), "Infinity"])
def test_non_finite_numbers_clamp_instead_of_raising(bad, thresholds):
    assert to_decimal(bad) is None
    assert net_from_discount(bad, 0.1) == 0
    assert net_from_discount(100, bad) == 0
    assert discount_from_net(bad, 50) == 0

    totals = line_item_totals({
        "list_unit_price": bad,
        "net_unit_price": bad,
        "quantity": 10,
        "term_months": 12,
        "revenue_type": "add_on",
        "existing_net_price": bad,
        "existing_volume": 5,
    })
    assert all(value == 0 for value in totals.values())

    assert calculate_approval_level(thresholds[1], bad)["level"] == "L0"


# ── Line totals ─────────────────────────────────────────────────────

def test_line_monthly():
    assert line_monthly(150, 25) == 3750
    assert line_monthly(-1, 25) == 0
    assert line_monthly(150, -1) == 0


def test_line_annual_ignores_term():
    assert line_annual(1000) == 12000


def test_line_term():
    assert line_term(1000, 36) == 36000
    assert line_term(1000, 0) == 0
    assert line_term(1000, -12) == 0


@pytest.mark.parametrize("term_months", [1, 12, 24, 36, 60])
def test_acv_is_always_twelve_months(term_months):
    net_monthly = D("1250.50")
    assert line_term(net_monthly, term_months) == net_monthly * term_months
    assert acv(net_monthly) == net_monthly * 12


def test_existing_annual():
    assert existing_annual(50, 10) == 6000
    assert existing_annual(None, 10) == 0
    assert existing_annual(50, None) == 0
    assert existing_annual(-50, 10) == 0


# ── Commissionable ACV ──────────────────────────────────────────────

def test_commissionable_acv_net_new_is_full_value():
    assert commissionable_acv("net_new", 12000, 5000) == 12000
    assert commissionable_acv("net_new", -10) == 0


def test_commissionable_acv_add_on_is_incremental():
    assert commissionable_acv("add_on", 12000, 5000) == 7000
    assert commissionable_acv("add_on", 5000, 12000) == 0
    assert commissionable_acv("add_on", 12000, 0) == 12000


def test_commissionable_acv_add_on_monotonicity():
    existing = 6000
    previous = None
    for net_annual in range(0, 20001, 2500):
        value = commissionable_acv("add_on", net_annual, existing)
        assert value >= 0
        if previous is not None:
            assert value >= previous
        previous = value

    previous = None
    for existing in range(0, 20001, 2500):
        value = commissionable_acv("add_on", 12000, existing)
        if previous is not None:
            assert value <= previous
        previous = value


# ── Price reconciliation ────────────────────────────────────────────

def test_resolve_pricing_net_wins(line_item):
    line_item.update(net_unit_price=70, discount_percent=0.2)
    pricing = resolve_pricing(line_item)
    assert pricing["driven_by"] == "net"
    assert pricing["net_unit_price"] == 70
    assert pricing["discount_percent"] == D("0.3")


def test_resolve_pricing_from_discount(line_item):
    line_item.update(discount_percent=0.25)
    pricing = resolve_pricing(line_item)
    assert pricing["driven_by"] == "discount"
    assert pricing["net_unit_price"] == 75


def test_resolve_pricing_neither_sells_at_list(line_item):
    pricing = resolve_pricing(line_item)
    assert pricing["driven_by"] == "neither"
    assert pricing["net_unit_price"] == 100
    assert pricing["discount_percent"] == 0
    assert line_discount(line_item) == 0


def test_resolve_pricing_does_not_mutate(line_item):
    line_item.update(discount_percent=0.25)
    before = dict(line_item)
    resolve_pricing(line_item)
    line_item_totals(line_item)
    assert line_item == before


# ── Line item totals ────────────────────────────────────────────────

def test_line_item_totals(line_item):
    line_item.update(discount_percent=0.2)
    totals = line_item_totals(line_item)
    assert totals["list_monthly"] == 1000
    assert totals["net_monthly"] == 800
    assert totals["list_annual"] == 12000
    assert totals["net_annual"] == 9600
    assert totals["list_term"] == 36000
    assert totals["net_term"] == 28800
    assert totals["acv"] == 9600
    assert totals["commissionable_acv"] == 9600
    assert totals["existing_annual"] == 0


def test_line_item_totals_add_on(line_item):
    line_item.update(
        net_unit_price=80,
        revenue_type="add_on",
        existing_volume=5,
        existing_net_price=90,
        existing_term_months=12,
    )
    totals = line_item_totals(line_item)
    assert totals["net_annual"] == 9600
    assert totals["existing_annual"] == 5400
    assert totals["commissionable_acv"] == 4200


# ── Scenario aggregates ─────────────────────────────────────────────

def test_blended_discount_and_savings():
    assert blended_discount(10000, 8000) == D("0.2")
    assert blended_discount(0, 0) == 0
    assert total_savings(10000, 8000) == 2000
    assert total_savings(8000, 10000) == 0


def test_scenario_totals_empty():
    totals = scenario_totals([])
    assert all(value == 0 for value in totals.values())
    assert totals["blended_discount"] == 0


def test_scenario_totals():
    items = [
        {"list_unit_price": 100, "quantity": 10, "term_months": 12,
         "net_unit_price": 80, "revenue_type": "net_new"},
        {"list_unit_price": 200, "quantity": 5, "term_months": 12,
         "net_unit_price": 160, "revenue_type": "net_new"},
    ]
    totals = scenario_totals(items)
    assert totals["list_monthly"] == 2000
    assert totals["net_monthly"] == 1600
    assert totals["blended_discount"] == D("0.2")
    assert totals["total_savings"] == totals["list_term"] - totals["net_term"]
    assert totals["total_savings"] == 4800
    assert totals["total_acv"] == 19200


def test_blended_discount_is_weighted_by_term_value():
    items = [
        # 50% off a large, long line
        {"list_unit_price": 1000, "quantity": 10, "term_months": 36,
         "discount_percent": 0.5, "revenue_type": "net_new"},
        # no discount on a small line
        {"list_unit_price": 10, "quantity": 1, "term_months": 12,
         "revenue_type": "net_new"},
    ]
    totals = scenario_totals(items)
    expected = (D(360000) + D(120) - D(180000) - D(120)) / (D(360000) + D(120))
    assert totals["blended_discount"] == expected
    assert totals["blended_discount"] != D("0.25")
