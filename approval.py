"""
Discount approval levels.

Given a product, a quantity and a discount, find the discount matrix row for
that product's quantity band and work out who has to sign off:

  L0-L4  instant approval (the discount fits under that level's max)
  L5+    escalation (above every level's max)
  N/A    the product is not in the matrix

Row lookup has to cope with naming drift between what the rep typed and the
matrix's canonical "[Edition, ...] Category" names. Matching pipeline (in
order of confidence, first step with any hit wins):
  1. Exact name (case-insensitive, trimmed)
  2. Same base name, preferring rows whose editions overlap the caller's
  3. Base name contained in / containing the caller's, same preference
"""

import logging
from decimal import Decimal

from thefuzz import fuzz

import config
from calculations import to_decimal
from catalog_data import (
    DISCOUNT_CATEGORY_KEYWORDS,
    DISCOUNT_PRIORITY_CATEGORIES,
    OTHER_CATEGORY,
)
from product_mapping import split_editions

logger = logging.getLogger(__name__)

LEVEL_NA = "N/A"
LEVEL_ESCALATION = "L5+"
INSTANT_LEVELS = ("L0", "L1", "L2", "L3", "L4")
LEVEL_ORDER = INSTANT_LEVELS + (LEVEL_ESCALATION,)

# Approval level -> threshold column holding that level's max discount
LEVEL_COLUMNS = (
    ("L0", "level_0_max"),
    ("L1", "level_1_max"),
    ("L2", "level_2_max"),
    ("L3", "level_3_max"),
    ("L4", "level_4_max"),
)


# ── Level calculation ───────────────────────────────────────────────

def _approval(level: str, threshold: dict | None) -> dict:
    if threshold is None:
        return {
            "level": level,
            "max_l4_discount": None,
            "is_instant_approval": False,
            "matched_product_name": None,
        }
    return {
        "level": level,
        "max_l4_discount": to_decimal(threshold.get("level_4_max")),
        "is_instant_approval": level in INSTANT_LEVELS,
        "matched_product_name": threshold.get("product_name"),
    }


def calculate_approval_level(threshold: dict | None, discount_percent) -> dict:
    """
    Approval level for a discount fraction (0.20 = 20%) against one row.

    Returns:
        level: "L0".."L4", "L5+" or "N/A"
        max_l4_discount: the row's L4 max whatever the level (None without a row)
        is_instant_approval: True for L0-L4
        matched_product_name: the row's product name (None without a row)
    """
    if threshold is None:
        return _approval(LEVEL_NA, None)

    discount = to_decimal(discount_percent)
    if discount is None or discount <= 0:
        return _approval("L0", threshold)

    # Bounds are inclusive; the first level that fits wins
    for level, column in LEVEL_COLUMNS:
        level_max = to_decimal(threshold.get(column))
        if level_max is not None and discount <= level_max:
            return _approval(level, threshold)

    return _approval(LEVEL_ESCALATION, threshold)


def level_rank(level: str) -> int:
    """Position of a level in escalation order. N/A ranks below L0."""
    if level in LEVEL_ORDER:
        return LEVEL_ORDER.index(level)
    return -1


# ── Row matching ────────────────────────────────────────────────────

def _in_band(row: dict, quantity) -> bool:
    quantity = to_decimal(quantity)
    if quantity is None:
        return False
    qty_min = to_decimal(row.get("qty_min"))
    qty_max = to_decimal(row.get("qty_max"))
    if qty_min is not None and quantity < qty_min:
        return False
    if qty_max is not None and quantity > qty_max:
        return False
    return True


def _fold(text: str) -> str:
    return (text or "").strip().casefold()


def _prefer_edition_overlap(rows: list[dict], editions: list[str]) -> list[dict]:
    """Rows sharing an edition with the caller first, input order otherwise."""
    if not editions:
        return rows
    wanted = {_fold(e) for e in editions}
    overlapping = []
    rest = []
    for row in rows:
        row_editions, _ = split_editions(row.get("product_name"))
        if wanted & {_fold(e) for e in row_editions}:
            overlapping.append(row)
        else:
            rest.append(row)
    return overlapping + rest


def match_exact(candidates: list[dict], product_name: str) -> list[dict]:
    target = _fold(product_name)
    return [row for row in candidates if _fold(row.get("product_name")) == target]


def match_base_name(candidates: list[dict], product_name: str) -> list[dict]:
    editions, base = split_editions(product_name)
    target = _fold(base)
    if not target:
        return []
    rows = [
        row for row in candidates
        if _fold(split_editions(row.get("product_name"))[1]) == target
    ]
    return _prefer_edition_overlap(rows, editions)


def match_fuzzy_base_name(candidates: list[dict], product_name: str) -> list[dict]:
    editions, base = split_editions(product_name)
    target = _fold(base)
    if len(target) <= config.FUZZY_MIN_BASE_LENGTH:
        return []
    rows = []
    for row in candidates:
        row_base = _fold(split_editions(row.get("product_name"))[1])
        if len(row_base) <= config.FUZZY_MIN_BASE_LENGTH:
            continue
        if row_base in target or target in row_base:
            rows.append(row)
    return _prefer_edition_overlap(rows, editions)


# (match_type, matcher) in precedence order
THRESHOLD_MATCHERS = (
    ("exact", match_exact),
    ("base_name", match_base_name),
    ("fuzzy", match_fuzzy_base_name),
)


def first_non_empty(matchers, candidates: list[dict], product_name: str) -> tuple[str, list[dict]]:
    """
    Run matchers in order and return (match_type, rows) for the first one
    that finds anything. Results from different matchers are never merged.
    """
    for match_type, matcher in matchers:
        rows = matcher(candidates, product_name)
        if rows:
            return match_type, rows
    return "none", []


def match_threshold(thresholds: list[dict], product_name: str, quantity,
                    matchers=THRESHOLD_MATCHERS) -> dict:
    """
    Match a quote line's product name + quantity to a discount matrix row.

    Returns:
        threshold: the matched row (or None)
        match_type: "exact", "base_name", "fuzzy" or "none"
        confidence: 1.0 for exact, name similarity otherwise, 0.0 for none
    """
    if not product_name or not product_name.strip():
        return {"threshold": None, "match_type": "none", "confidence": 0.0}

    candidates = [row for row in thresholds if _in_band(row, quantity)]
    match_type, rows = first_non_empty(matchers, candidates, product_name)

    if not rows:
        logger.info("no discount threshold for %r at quantity %s", product_name, quantity)
        return {"threshold": None, "match_type": "none", "confidence": 0.0}

    # Ties go to the first row in table order
    threshold = rows[0]
    if match_type == "exact":
        confidence = 1.0
    else:
        confidence = fuzz.token_sort_ratio(product_name, threshold.get("product_name") or "") / 100
    logger.debug("threshold %r matched %r via %s", threshold.get("product_name"), product_name, match_type)
    return {"threshold": threshold, "match_type": match_type, "confidence": confidence}


def find_threshold(thresholds: list[dict], product_name: str, quantity) -> dict | None:
    """The discount matrix row for this product and quantity, or None."""
    return match_threshold(thresholds, product_name, quantity)["threshold"]


def get_approval_result(thresholds: list[dict], product_name: str, quantity,
                        discount_percent) -> dict:
    threshold = find_threshold(thresholds, product_name, quantity)
    return calculate_approval_level(threshold, discount_percent)


def max_instant_discount(thresholds: list[dict], product_name: str, quantity) -> Decimal | None:
    """Largest discount this product/quantity clears without escalation."""
    return get_approval_result(thresholds, product_name, quantity, None)["max_l4_discount"]


# ── Discount matrix product picker ──────────────────────────────────

def extract_category(product_name: str) -> str:
    """
    Display category for a matrix name, e.g.
    "[Enterprise, Unlimited] Einstein Bots - Add-on" -> "Einstein".
    """
    _, base = split_editions(product_name)
    base = base.split(" - ")[0].strip().lower()
    for category, keywords in DISCOUNT_CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if keyword.lower() in base:
                return category
    return OTHER_CATEGORY


def discount_matrix_products(thresholds: list[dict]) -> list[dict]:
    """Distinct product names in the matrix, first-seen order, with categories."""
    products = {}
    for row in thresholds:
        name = row.get("product_name")
        if name and name not in products:
            products[name] = {"product_name": name, "category": extract_category(name)}
    return list(products.values())


def group_discount_products_by_category(products: list[dict]) -> list[dict]:
    """Group matrix products for the picker: priority categories first, then A-Z."""
    grouped: dict[str, list[dict]] = {}
    for product in products:
        grouped.setdefault(product["category"], []).append(product)

    def category_order(category):
        if category in DISCOUNT_PRIORITY_CATEGORIES:
            return (0, DISCOUNT_PRIORITY_CATEGORIES.index(category), "")
        return (1, 0, category.casefold())

    return [
        {
            "category": category,
            "products": sorted(grouped[category], key=lambda p: p["product_name"].casefold()),
        }
        for category in sorted(grouped, key=category_order)
    ]
