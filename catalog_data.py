"""
Reference data shared by the mapper, the approval resolver and validation.

The price book and the discount matrix are maintained by different teams,
so a handful of products are named differently on each side. The special
mappings below were taken from the discount_thresholds table as seeded;
keep them in sync when the matrix CSV changes.
"""

# ── Price book ──────────────────────────────────────────────────────

# Shown first (in this order) when the product picker opens with no query
POPULAR_CATEGORIES = [
    "Sales Cloud",
    "Service Cloud",
    "Marketing Cloud",
    "Commerce Cloud",
    "Data Cloud",
    "Experience Cloud",
    "Revenue Cloud",
    "Platform",
    "Analytics",
    "Einstein",
    "Field Service",
    "Industry Cloud",
]

POPULAR_EDITIONS = ["Enterprise", "Unlimited", "Professional", "Growth", "Plus"]

# Edition value the price book uses for "no edition variant"
NO_EDITION = "N/A"

# ── Price book -> discount matrix ───────────────────────────────────
# (category, edition) -> canonical threshold-table name.
# The matrix only carries [Unlimited] rows for the core clouds, so the
# lower editions collapse onto it.
SPECIAL_MAPPINGS = {
    ("Sales Cloud", "Unlimited"): "[Unlimited] Sales Cloud",
    ("Sales Cloud", "Enterprise"): "[Unlimited] Sales Cloud",
    ("Sales Cloud", "Professional"): "[Unlimited] Sales Cloud",
    ("Service Cloud", "Unlimited"): "[Unlimited] Service Cloud",
    ("Service Cloud", "Enterprise"): "[Unlimited] Service Cloud",
    ("Service Cloud", "Professional"): "[Unlimited] Service Cloud",
    ("Einstein", "Sales"): "[Enterprise, Unlimited] Einstein Conversation Insights",
    ("Einstein", "Service"): "[Enterprise, Unlimited] Einstein Bots",
    ("CRM Analytics", "Growth"): "[Enterprise, Unlimited] CRM Analytics Growth",
    ("CRM Analytics", "Plus"): "[Enterprise, Unlimited] CRM Analytics Plus",
}

# ── Discount matrix categories ──────────────────────────────────────
# Display category -> keywords found in the matrix product name.
# Order matters: the first category with a matching keyword wins.
DISCOUNT_CATEGORY_KEYWORDS = {
    "Sales Cloud": ["Sales Cloud"],
    "Service Cloud": ["Service Cloud"],
    "Data Cloud": ["Data Cloud", "Customer Data Cloud", "Data 360", "Data Space", "Data Services"],
    "Analytics": ["CRM Analytics", "Analytics", "Energy & Utilities Analytics"],
    "Commerce": ["B2C Commerce", "B2B Commerce", "D2C Commerce", "Commerce Cloud",
                 "Order Management", "Retail Cloud"],
    "Marketing": ["Marketing Cloud", "Pardot", "Account Engagement"],
    "Platform": ["Platform", "Lightning", "Force.com", "App Cloud", "Shield", "Premier"],
    "Field Service": ["Field Service"],
    "Experience Cloud": ["Experience Cloud", "Community", "Customer Community", "Partner Community"],
    "Einstein": ["Einstein", "Agentforce"],
    "Industries": ["Financial Services", "Health Cloud", "Manufacturing", "Consumer Goods",
                   "Automotive", "Media Cloud", "Nonprofit", "Education", "Net Zero",
                   "Public Sector", "Energy & Utilities"],
    "Integration": ["MuleSoft", "Anypoint", "API", "Connect"],
    "Slack": ["Slack"],
    "Tableau": ["Tableau"],
    "Heroku": ["Heroku"],
}

DISCOUNT_PRIORITY_CATEGORIES = [
    "Sales Cloud", "Service Cloud", "Data Cloud", "Platform", "Einstein", "Analytics",
]

OTHER_CATEGORY = "Other"

# ── Line item limits ────────────────────────────────────────────────
MAX_PRICE = 1_000_000
MAX_QUANTITY = 100_000
MIN_TERM = 1
MAX_TERM = 120
MAX_PRODUCT_NAME_LENGTH = 200

REVENUE_TYPES = ("net_new", "add_on")
