"""
Runtime settings for the pricing core.

Values come from the environment (or a .env file next to the caller) and
fall back to the defaults the sales team signed off on. Everything here is
read once at import time; tests override by patching the module attributes.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


# ── Search ──────────────────────────────────────────────────────────
SEARCH_LIMIT = _env_int("DEAL_SEARCH_LIMIT", 20)
SEARCH_MIN_SCORE = _env_float("DEAL_SEARCH_MIN_SCORE", 0.3)
BEST_MATCH_MIN_SCORE = _env_float("DEAL_BEST_MATCH_MIN_SCORE", 0.7)

# Per-token scores (prefix > substring > scaled edit-distance similarity)
PREFIX_SCORE = 1.0
SUBSTRING_SCORE = 0.9
FUZZY_SIMILARITY_FLOOR = 0.7
FUZZY_SCALE = 0.8

# Whole-row boosts
CATEGORY_BOOST = 0.95
EDITION_BOOST = 0.8

# ── Threshold matching ──────────────────────────────────────────────
# Base names this short or shorter never take part in substring matching
FUZZY_MIN_BASE_LENGTH = _env_int("DEAL_FUZZY_MIN_BASE_LENGTH", 3)

# ── Display ─────────────────────────────────────────────────────────
CURRENCY_SYMBOL = os.environ.get("DEAL_CURRENCY_SYMBOL", "$")
