import pytest


def _threshold(name, qty_min, qty_max, l0, l1, l2, l3, l4):
    return {
        "product_name": name,
        "qty_min": qty_min,
        "qty_max": qty_max,
        "level_0_max": l0,
        "level_1_max": l1,
        "level_2_max": l2,
        "level_3_max": l3,
        "level_4_max": l4,
    }


@pytest.fixture
def thresholds():
    return [
        _threshold("[Unlimited] Sales Cloud Einstein", 1, 9999, 0.05, 0.10, 0.15, 0.20, 0.25),
        _threshold("[Unlimited] Sales Cloud", 1, 99, 0.05, 0.10, 0.15, 0.20, 0.25),
        _threshold("[Unlimited] Sales Cloud", 100, 999, 0.10, 0.15, 0.20, 0.25, 0.30),
        _threshold("[Unlimited] Service Cloud", 1, 9999, 0.05, 0.10, 0.15, 0.20, 0.30),
        _threshold("[Enterprise] Service Cloud", 1, 9999, 0.10, 0.15, 0.20, 0.25, 0.35),
        _threshold("[Enterprise, Unlimited] Einstein Bots", 1, 9999, 0.0, None, 0.10, None, 0.20),
        _threshold("API", 1, 9999, 0.05, 0.10, 0.15, 0.20, 0.25),
        _threshold("Pardot", 1, 9999, None, None, None, None, None),
    ]


@pytest.fixture
def catalog():
    return [
        {"id": "p1", "product_name": "Sales Cloud Enterprise", "category": "Sales Cloud",
         "edition": "Enterprise", "annual_list_price": 1980, "monthly_list_price": 165},
        {"id": "p2", "product_name": "Sales Cloud Unlimited", "category": "Sales Cloud",
         "edition": "Unlimited", "annual_list_price": 3960, "monthly_list_price": 330},
        {"id": "p3", "product_name": "Service Cloud Enterprise", "category": "Service Cloud",
         "edition": "Enterprise", "annual_list_price": 1980, "monthly_list_price": 165},
        {"id": "p4", "product_name": "Pardot", "category": "Pardot",
         "edition": None, "annual_list_price": 15000, "monthly_list_price": None},
        {"id": "p5", "product_name": "Einstein for Sales", "category": "Einstein",
         "edition": "Sales", "annual_list_price": 600, "monthly_list_price": 50},
        {"id": "p6", "product_name": "Tableau Creator", "category": "Tableau",
         "edition": "Creator", "annual_list_price": 900, "monthly_list_price": 75},
        {"id": "p7", "product_name": "Sales Cloud Enterprise (legacy SKU)", "category": "Sales Cloud",
         "edition": "Enterprise", "annual_list_price": 1800, "monthly_list_price": 150},
        {"id": "p8", "product_name": "Sales Cloud Add-on", "category": "Sales Cloud",
         "edition": None, "annual_list_price": 120, "monthly_list_price": 10},
    ]


@pytest.fixture
def line_item():
    return {
        "id": "li-1",
        "product_name": "[Unlimited] Sales Cloud",
        "list_unit_price": 100,
        "quantity": 10,
        "term_months": 36,
        "discount_percent": None,
        "net_unit_price": None,
        "revenue_type": "net_new",
        "existing_volume": None,
        "existing_net_price": None,
        "existing_term_months": None,
    }
