"""
Product name mapping between the price book and the discount matrix.

Price book format:      category="Sales Cloud", edition="Enterprise"
Discount matrix format: "[Enterprise] Sales Cloud"
                        "[Enterprise, Unlimited] Einstein Bots"
                        "Pardot"                      (no edition variant)

Also hosts the fuzzy product search used by the product picker. Search
pipeline per catalog row:
  1. Normalize and tokenize the query and each searchable text
  2. Score each query token: prefix 1.0, substring 0.9, else edit-distance
     similarity scaled by 0.8 when it clears 0.7
  3. Average token scores, keep the best text, apply category/edition boosts
  4. Keep rows above the minimum score, best first
"""

import logging
import re
from decimal import Decimal

from rapidfuzz.distance import Levenshtein

import config
from calculations import MONTHS_PER_YEAR, ZERO, to_decimal
from catalog_data import (
    NO_EDITION,
    POPULAR_CATEGORIES,
    POPULAR_EDITIONS,
    SPECIAL_MAPPINGS,
)

logger = logging.getLogger(__name__)

_BRACKET_NAME = re.compile(r"^\[([^\]]+)\]\s*(.+)$")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


# ── Name translation ────────────────────────────────────────────────

def build_discount_matrix_name(category: str, edition: str | None) -> str:
    """
    "[Edition] Category", or the bare category when there is no edition.

    build_discount_matrix_name("Sales Cloud", "Enterprise") -> "[Enterprise] Sales Cloud"
    build_discount_matrix_name("Pardot", None)              -> "Pardot"
    """
    if not edition or edition == NO_EDITION:
        return category
    return f"[{edition}] {category}"


def parse_discount_matrix_name(product_name: str) -> dict:
    """
    Split a discount matrix name into category and edition(s).

    "[Enterprise, Unlimited] Einstein Bots" ->
        {"category": "Einstein Bots", "edition": "Enterprise",
         "editions": ["Enterprise", "Unlimited"]}
    "Pardot" -> {"category": "Pardot", "edition": None, "editions": []}

    "edition" is the first listed edition, for callers that only handle one.
    """
    match = _BRACKET_NAME.match(product_name)
    if match:
        editions = [e.strip() for e in match.group(1).split(",")]
        return {
            "category": match.group(2),
            "edition": editions[0],
            "editions": editions,
        }
    return {"category": product_name, "edition": None, "editions": []}


def split_editions(product_name: str) -> tuple[list[str], str]:
    """(editions, base name) of a discount matrix name, whitespace-trimmed."""
    parsed = parse_discount_matrix_name((product_name or "").strip())
    return [e for e in parsed["editions"] if e], parsed["category"].strip()


def base_name(product_name: str) -> str:
    """The name with any leading "[Edition, ...]" list removed."""
    return split_editions(product_name)[1]


# ── Price book lookups ──────────────────────────────────────────────

def monthly_price(product: dict) -> Decimal:
    """Monthly list price, derived from the annual price when not stored."""
    monthly = to_decimal(product.get("monthly_list_price"))
    if monthly is not None:
        return monthly
    annual = to_decimal(product.get("annual_list_price"))
    if annual is None:
        return ZERO
    return annual / MONTHS_PER_YEAR


def find_price_book_match(products: list[dict], category: str, edition: str | None) -> dict | None:
    """First catalog row with exactly this category and edition (None matches None)."""
    for product in products:
        if product.get("category") == category and product.get("edition") == edition:
            return product
    return None


def get_price_for_selection(products: list[dict], category: str, edition: str | None) -> Decimal | None:
    match = find_price_book_match(products, category, edition)
    if match is None:
        return None
    return monthly_price(match)


def _sort_key(text: str) -> tuple[str, str]:
    return (text.casefold(), text)


def group_products_by_category(products: list[dict], priority: list[str] | None = None) -> list[dict]:
    """
    Group catalog rows by category for the hierarchical picker.

    Editions are deduplicated per category and sorted alphabetically with the
    no-edition variant last. Categories are alphabetical, except that any in
    `priority` come first, in that order.
    """
    groups: dict[str, dict] = {}

    for product in products:
        category = product.get("category")
        edition = product.get("edition")
        group = groups.setdefault(category, {"category": category, "editions": []})
        if any(e["edition"] == edition for e in group["editions"]):
            continue
        group["editions"].append({
            "edition": edition,
            "monthly_price": monthly_price(product),
            "product_id": product.get("id"),
        })

    for group in groups.values():
        group["editions"].sort(
            key=lambda e: (e["edition"] is None, _sort_key(e["edition"] or ""))
        )

    priority = priority or []

    def category_order(group):
        name = group["category"]
        if name in priority:
            return (0, priority.index(name), ("", ""))
        return (1, 0, _sort_key(name))

    return sorted(groups.values(), key=category_order)


# ── Fuzzy search ────────────────────────────────────────────────────

def normalize_text(text: str) -> str:
    """Lowercase, punctuation to spaces, whitespace collapsed."""
    text = _NON_ALNUM.sub(" ", (text or "").lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> list[str]:
    return [t for t in normalize_text(text).split(" ") if t]


def similarity(a: str, b: str) -> float:
    """1 - edit distance / longer length. Two empty strings are identical."""
    return Levenshtein.normalized_similarity(a, b)


def fuzzy_token_match(query_tokens: list[str], target_tokens: list[str]) -> float:
    """Mean over query tokens of each token's best score against the target."""
    if not query_tokens:
        return 0.0

    total = 0.0
    for query in query_tokens:
        best = 0.0
        for target in target_tokens:
            if target.startswith(query):
                best = max(best, config.PREFIX_SCORE)
            elif query in target:
                best = max(best, config.SUBSTRING_SCORE)
            else:
                sim = similarity(query, target)
                if sim > config.FUZZY_SIMILARITY_FLOOR:
                    best = max(best, sim * config.FUZZY_SCALE)
        total += best

    return total / len(query_tokens)


def _display_name(category: str, edition: str | None) -> str:
    return f"{category} - {edition}" if edition else category


def _search_result(product: dict, score: float) -> dict:
    return {
        "category": product.get("category"),
        "edition": product.get("edition"),
        "display_name": _display_name(product.get("category"), product.get("edition")),
        "monthly_price": monthly_price(product),
        "score": score,
        "product_id": product.get("id"),
    }


def score_product(product: dict, query: str, query_tokens: list[str]) -> float:
    """Best token-match score across the row's searchable texts, plus boosts."""
    category = product.get("category") or ""
    edition = product.get("edition")
    searchable_texts = [
        category,
        edition or "",
        product.get("product_name") or "",
        build_discount_matrix_name(category, edition),
    ]

    best = 0.0
    for text in searchable_texts:
        best = max(best, fuzzy_token_match(query_tokens, tokenize(text)))

    normalized_query = normalize_text(query)
    if normalized_query in normalize_text(category):
        best = max(best, config.CATEGORY_BOOST)
    if edition and normalized_query in normalize_text(edition):
        best = max(best, config.EDITION_BOOST)
    return best


def search_products(products: list[dict], query: str, limit: int | None = None) -> list[dict]:
    """
    Ranked fuzzy search over the price book.

    A query with no searchable tokens (blank, or punctuation only) skips
    scoring entirely and returns the popular products.
    Each (category, edition) pair appears once, from its first catalog row.
    """
    if limit is None:
        limit = config.SEARCH_LIMIT

    query_tokens = tokenize(query or "")
    if not query_tokens:
        return get_popular_products(products)[:limit]

    results = []
    seen = set()

    for product in products:
        key = (product.get("category"), product.get("edition"))
        if key in seen:
            continue
        seen.add(key)

        score = score_product(product, query, query_tokens)
        if score > config.SEARCH_MIN_SCORE:
            results.append(_search_result(product, score))

    results.sort(key=lambda r: r["score"], reverse=True)
    logger.debug("search %r: %d of %d catalog rows matched", query, len(results), len(products))
    return results[:limit]


def get_popular_products(products: list[dict]) -> list[dict]:
    """
    Curated ordering for an empty search: popular categories crossed with
    popular editions first, then every other (category, edition) pair in
    catalog order.
    """
    results = []
    seen = set()

    for category in POPULAR_CATEGORIES:
        for edition in POPULAR_EDITIONS:
            product = find_price_book_match(products, category, edition)
            if product is None or (category, edition) in seen:
                continue
            seen.add((category, edition))
            results.append(_search_result(product, 1.0))

    for product in products:
        key = (product.get("category"), product.get("edition"))
        if key in seen:
            continue
        seen.add(key)
        results.append(_search_result(product, 0.5))

    return results


# ── Price book <-> discount matrix ──────────────────────────────────

def get_discount_matrix_name(category: str, edition: str | None) -> str:
    """
    Threshold-table name for a price book selection. Hand-curated overrides
    win; otherwise the generic "[Edition] Category" form.
    """
    special = SPECIAL_MAPPINGS.get((category, edition))
    if special:
        return special
    return build_discount_matrix_name(category, edition)


def _price_book_selection(product: dict) -> dict:
    return {
        "category": product.get("category"),
        "edition": product.get("edition"),
        "monthly_price": monthly_price(product),
    }


def find_best_price_book_match(products: list[dict], discount_matrix_name: str) -> dict | None:
    """
    Best-effort price book row for a discount matrix name.

    Tries, in order: the parsed category + primary edition, each listed
    edition, then a fuzzy search on the category accepted only when the top
    hit is confident enough.
    """
    parsed = parse_discount_matrix_name(discount_matrix_name)

    exact = find_price_book_match(products, parsed["category"], parsed["edition"])
    if exact is not None:
        return _price_book_selection(exact)

    for edition in parsed["editions"]:
        match = find_price_book_match(products, parsed["category"], edition)
        if match is not None:
            return _price_book_selection(match)

    hits = search_products(products, parsed["category"], 5)
    if hits and hits[0]["score"] > config.BEST_MATCH_MIN_SCORE:
        top = hits[0]
        return {
            "category": top["category"],
            "edition": top["edition"],
            "monthly_price": top["monthly_price"],
        }

    logger.debug("no price book match for %r", discount_matrix_name)
    return None
