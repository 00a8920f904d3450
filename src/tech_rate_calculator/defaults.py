"""Built-in sample configuration for a single-technician HVAC shop."""

from typing import Any, Dict, List

from .models import Category, Configuration, FuelModel, LineItem, RateInput, WageConfig


def _items(rows: List[Dict[str, Any]]) -> List[LineItem]:
    return [LineItem(id=index, **row) for index, row in enumerate(rows, start=1)]


def _category(key: str, name: str, rows: List[Dict[str, Any]]) -> Category:
    return Category(id=key, name=name, items=_items(rows))


def default_configuration() -> Configuration:
    """Sample configuration used by ``rate-calc init`` and the examples."""
    benefits = _category("benefits", "Benefits", [
        {"name": "Health Reimbursement", "value": 1000, "recurrence": "monthly"},
        {"name": "Paid Lunch", "value": 1, "recurrence": "daily", "unit": "hours"},
        {"name": "Investment Plan", "value": 400, "recurrence": "monthly"},
        {"name": "Phone", "value": 70, "recurrence": "monthly"},
        {"name": "Snack Bar", "value": 19.99, "recurrence": "daily"},
        {"name": "Family Perk", "value": 49.96, "recurrence": "monthly"},
        {"name": "Shop Upgrade Fund", "value": 1.00, "recurrence": "hourly"},
    ])

    variable = [
        _category("trucks", "Trucks", [
            {"name": "Lease Payment", "value": 3000},
            {"name": "GPS Tracker", "value": 10, "recurrence": "monthly"},
            {"name": "Maintenance", "value": 2000},
            {"name": "Insurance", "value": 100, "recurrence": "monthly"},
        ]),
        _category("tools", "Tools", [{"name": "New Setup", "value": 2000}]),
        _category("uniforms", "Uniforms", [{"name": "Shirts/Boots", "value": 500}]),
        _category("consumables", "Consumables", [
            {"name": "Zip Ties/Tape", "value": 10, "recurrence": "daily"},
        ]),
        _category("warranty", "Warranty", [
            {"name": "Callback Fund", "value": 0.5, "recurrence": "daily", "unit": "hours"},
        ]),
        _category("training", "Training", [{"name": "Certifications", "value": 500}]),
        _category("advertising", "Advertising", [{"name": "Ad Spend", "value": 4000}]),
        _category("other", "Other", [
            {"name": "Video Editing", "value": 4900},
            {"name": "PTO Cost", "value": 80, "unit": "hours"},
            {"name": "Paid Holidays", "value": 48, "unit": "hours"},
        ]),
    ]

    fixed = [
        _category("software", "Software", [
            {"name": "Field Service Software", "value": 360, "recurrence": "monthly"},
            {"name": "Accounting Software", "value": 169, "recurrence": "monthly"},
            {"name": "Email Hosting", "value": 50, "recurrence": "monthly"},
        ]),
        _category("rent", "Rent", [{"name": "Shop Rent", "value": 30000}]),
        _category("utilities", "Utilities", [
            {"name": "Gas, Electricity, Water, Internet, Garbage", "value": 1000, "recurrence": "monthly"},
        ]),
        _category("professional", "Professional Fees", [
            {"name": "Accountant", "value": 10000},
            {"name": "Bank Fees", "value": 0},
            {"name": "Licensing", "value": 1000},
        ]),
        _category("insurance", "Insurance (GL)", [
            {"name": "General Liability", "value": 250, "recurrence": "monthly"},
        ]),
        _category("office", "Office & Janitorial", [
            {"name": "Postage", "value": 1000},
            {"name": "Supplies", "value": 0},
            {"name": "Janitorial", "value": 0},
        ]),
    ]

    return Configuration(
        technician_count=1,
        utilization_rate=65,
        base_calendar_working_days=245,
        hours_per_working_day=8,
        jurisdiction="WI",
        target_billing_rate=340,
        payment_fee_enabled=False,
        payment_fee_percentage=3.0,
        wage_config=WageConfig(
            wage=RateInput(value=30.0, recurrence="hourly"),
            insurance_contribution=RateInput(value=2.0, recurrence="hourly"),
        ),
        benefits_category=benefits,
        variable_overhead_categories=variable,
        fuel_model=FuelModel(miles_per_working_day=80, miles_per_gallon=20, price_per_gallon=4.0),
        fixed_overhead_categories=fixed,
    )
