"""Technician Rate Calculator - burdened cost, break-even and margin for service technicians."""

__version__ = "0.1.0"

from .models import (
    LineItem,
    Category,
    RateInput,
    WageConfig,
    FuelModel,
    GlobalSettings,
    Configuration,
    RecurrencePeriod,
    ValueUnit,
    MarginBand,
    Schedule,
    CostSummary,
    PricingResult,
    UtilizationScenario,
    HeadcountScenario,
    ScenarioProjection,
    CalculationResult,
)
from .annualization import annualize, resolve_base_currency_value, annual_item_cost
from .categories import (
    annual_total,
    add_item,
    update_item,
    remove_item,
    add_category,
    rename_category,
    remove_category,
    with_settings,
)
from .schedule import resolve_schedule
from .cost_rollup import roll_up
from .pricing import price_and_margin, classify_margin
from .scenarios import project_utilization, project_headcount, minimum_utilization
from .engine import RateCalculator
from .snapshot import SnapshotImportError, export_snapshot, import_snapshot, load_snapshot, save_snapshot

__all__ = [
    "LineItem",
    "Category",
    "RateInput",
    "WageConfig",
    "FuelModel",
    "GlobalSettings",
    "Configuration",
    "RecurrencePeriod",
    "ValueUnit",
    "MarginBand",
    "Schedule",
    "CostSummary",
    "PricingResult",
    "UtilizationScenario",
    "HeadcountScenario",
    "ScenarioProjection",
    "CalculationResult",
    # Engine stages
    "annualize",
    "resolve_base_currency_value",
    "annual_item_cost",
    "annual_total",
    "add_item",
    "update_item",
    "remove_item",
    "add_category",
    "rename_category",
    "remove_category",
    "with_settings",
    "resolve_schedule",
    "roll_up",
    "price_and_margin",
    "classify_margin",
    "project_utilization",
    "project_headcount",
    "minimum_utilization",
    "RateCalculator",
    # Snapshots
    "SnapshotImportError",
    "export_snapshot",
    "import_snapshot",
    "load_snapshot",
    "save_snapshot",
]
