"""Pydantic models for technician cost configurations and calculation results."""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


logger = logging.getLogger(__name__)

ItemId = Union[int, str]


def coerce_number(value: Any) -> float:
    """Convert loosely typed numeric input to a float.

    Non-numeric text, ``None`` and non-finite numbers all become ``0.0`` so
    that a bad entry never surfaces as a parse failure.

    Args:
        value: Raw value from a form field or an imported document

    Returns:
        Finite float value
    """
    if value is None:
        return 0.0

    if isinstance(value, (bool, int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            logger.warning(f"Non-numeric value {value!r} defaulted to 0")
            return 0.0
    else:
        logger.warning(f"Unsupported numeric value {value!r} defaulted to 0")
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


class RecurrencePeriod(str, Enum):
    """How often a cost recurs."""

    HOURLY = "hourly"
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ValueUnit(str, Enum):
    """What a line item's raw value is denominated in."""

    CURRENCY = "currency"
    HOURS = "hours"  # labor-hours, priced at the hourly wage
    DAYS = "days"  # labor-days, priced at wage x hours per day


class MarginBand(str, Enum):
    """Presentation band for a profit margin."""

    HEALTHY = "healthy"
    MARGINAL = "marginal"
    CRITICAL = "critical"


class CamelModel(BaseModel):
    """Base for models that round-trip through the camelCase snapshot format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineItem(CamelModel):
    """A single cost entry inside a category."""

    id: ItemId = Field(default=0, description="Identifier, unique within the owning list")
    name: str = Field(default="New Item", description="Free-text label")
    value: float = Field(default=0.0, description="Raw value in the item's unit")
    unit: str = Field(default=ValueUnit.CURRENCY.value, description="currency, hours or days")
    recurrence: str = Field(
        default=RecurrencePeriod.YEARLY.value,
        validation_alias=AliasChoices("recurrence", "freq"),
        description="hourly, daily, monthly or yearly",
    )

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float:
        """Default malformed numbers to zero."""
        return coerce_number(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Accept any scalar as a label."""
        return "" if v is None else str(v)

    @field_validator("unit", mode="before")
    @classmethod
    def default_unit(cls, v: Any) -> str:
        """Items saved without a unit are currency."""
        if v is None or v == "":
            return ValueUnit.CURRENCY.value
        return v.value if isinstance(v, Enum) else str(v)

    @field_validator("recurrence", mode="before")
    @classmethod
    def normalize_recurrence(cls, v: Any) -> str:
        """Store the recurrence tag as a plain string, known or not."""
        if v is None:
            return ""
        return v.value if isinstance(v, Enum) else str(v)


class Category(CamelModel):
    """A named, ordered group of line items (e.g. Trucks, Software)."""

    id: ItemId = Field(default=0, description="Identifier, unique within the collection")
    name: str = Field(default="New Category", description="Display name")
    items: List[LineItem] = Field(default_factory=list, description="Line items in display order")

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Accept any scalar as a label."""
        return "" if v is None else str(v)


class RateInput(CamelModel):
    """A value/recurrence pair such as the base hourly wage."""

    value: float = Field(default=0.0)
    recurrence: str = Field(
        default=RecurrencePeriod.HOURLY.value,
        validation_alias=AliasChoices("recurrence", "freq"),
    )

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float:
        """Default malformed numbers to zero."""
        return coerce_number(v)

    @field_validator("recurrence", mode="before")
    @classmethod
    def normalize_recurrence(cls, v: Any) -> str:
        """Store the recurrence tag as a plain string."""
        if v is None:
            return ""
        return v.value if isinstance(v, Enum) else str(v)


class WageConfig(CamelModel):
    """Base pay and the per-hour insurance add-on."""

    wage: RateInput = Field(default_factory=lambda: RateInput(value=30.0))
    insurance_contribution: RateInput = Field(default_factory=lambda: RateInput(value=2.0))


class FuelModel(CamelModel):
    """Fuel cost driven by daily mileage, efficiency and pump price.

    The annual cost is derived on demand from the current drivers and the
    current working-day count; it is never stored.
    """

    miles_per_working_day: float = Field(default=80.0)
    miles_per_gallon: float = Field(default=20.0)
    price_per_gallon: float = Field(default=4.0)

    @field_validator("miles_per_working_day", "miles_per_gallon", "price_per_gallon", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> float:
        """Default malformed numbers to zero."""
        return coerce_number(v)

    def daily_cost(self) -> float:
        """Fuel cost for one working day (zero when efficiency is not positive)."""
        if self.miles_per_gallon <= 0:
            return 0.0
        return (self.miles_per_working_day / self.miles_per_gallon) * self.price_per_gallon

    def annual_cost(self, net_working_days: float) -> float:
        """Fuel cost over the given number of working days."""
        return self.daily_cost() * net_working_days


class GlobalSettings(CamelModel):
    """Company-wide knobs that drive every calculation."""

    technician_count: int = Field(default=1, description="Technicians sharing fixed overhead (>= 1)")
    utilization_rate: float = Field(default=65.0, description="Billable share of working hours, 0-100")
    base_calendar_working_days: float = Field(default=245.0, description="Working days before time off")
    hours_per_working_day: float = Field(default=8.0, description="Clock hours per working day")
    jurisdiction: str = Field(default="WI", description="Selects the unemployment insurance constant")
    target_billing_rate: float = Field(default=340.0, description="Customer-facing hourly rate")
    payment_fee_enabled: bool = Field(default=False, description="Deduct card processing fees")
    payment_fee_percentage: float = Field(default=3.0, description="Processing fee as % of the rate")

    @field_validator(
        "base_calendar_working_days",
        "hours_per_working_day",
        "target_billing_rate",
        "payment_fee_percentage",
        mode="before",
    )
    @classmethod
    def coerce_numbers(cls, v: Any) -> float:
        """Default malformed numbers to zero."""
        return coerce_number(v)

    @field_validator("technician_count", mode="before")
    @classmethod
    def clamp_technician_count(cls, v: Any) -> int:
        """Never allow fewer than one technician."""
        return max(1, int(coerce_number(v)))

    @field_validator("utilization_rate", mode="before")
    @classmethod
    def clamp_utilization(cls, v: Any) -> float:
        """Keep utilization within 0-100 percent."""
        return min(100.0, max(0.0, coerce_number(v)))

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def coerce_jurisdiction(cls, v: Any) -> str:
        """Jurisdiction codes are upper-case strings."""
        return "" if v is None else str(v).strip().upper()


class Configuration(GlobalSettings):
    """The complete, flat calculator configuration."""

    wage_config: WageConfig = Field(default_factory=WageConfig)
    benefits_category: Category = Field(
        default_factory=lambda: Category(id="benefits", name="Benefits")
    )
    variable_overhead_categories: List[Category] = Field(default_factory=list)
    fuel_model: FuelModel = Field(default_factory=FuelModel)
    fixed_overhead_categories: List[Category] = Field(default_factory=list)

    @property
    def hourly_wage(self) -> float:
        """Wage used to price labor-hour and labor-day items."""
        return self.wage_config.wage.value


class Schedule(BaseModel):
    """Working time available per technician per year."""

    base_calendar_working_days: float = Field(..., description="Working days before time off")
    days_off: float = Field(..., description="Day-denominated benefit days (PTO, holidays)")
    net_working_days: float = Field(..., description="Working days after time off", ge=0.0)
    hours_per_working_day: float = Field(..., description="Clock hours per working day")
    utilization_rate: float = Field(..., description="Billable share of hours, 0-100")
    total_annual_hours: float = Field(..., description="Net working days x hours per day")
    billable_hours: float = Field(..., description="Total hours x utilization")


class CategoryTotal(BaseModel):
    """Annual total for one category."""

    id: ItemId
    name: str
    annual_total: float


class CostSummary(BaseModel):
    """Annual cost roll-up for one technician."""

    annual_wage: float = Field(..., description="Base wage over the year")
    annual_insurance: float = Field(..., description="Insurance contribution over the year")
    annual_payroll_tax: float = Field(..., description="Statutory payroll tax on wage")
    annual_unemployment_insurance: float = Field(..., description="Jurisdiction constant")
    annual_benefits: float = Field(..., description="Benefits category total")
    total_annual_labor_cost: float = Field(..., description="Wage + insurance + taxes + benefits")

    variable_category_totals: List[CategoryTotal] = Field(default_factory=list)
    annual_fuel_cost: float = Field(default=0.0, description="Fuel model cost over net working days")
    total_annual_variable_cost: float = Field(..., description="Variable categories + fuel")

    fixed_category_totals: List[CategoryTotal] = Field(default_factory=list)
    total_annual_fixed_cost: float = Field(..., description="Company-wide fixed overhead")
    technician_count: int = Field(default=1, ge=1)
    fixed_cost_per_technician: float = Field(..., description="Fixed overhead share per technician")

    total_annual_cost_per_technician: float = Field(..., description="Labor + variable + fixed share")

    hourly_payroll_tax: Optional[float] = Field(None, description="Payroll tax per clock hour")
    hourly_labor_burden: Optional[float] = Field(None, description="Labor cost per clock hour")
    hourly_cost_to_business: Optional[float] = Field(None, description="Total cost per clock hour")

    def cost_breakdown(self) -> Dict[str, float]:
        """Share of labor, variable and fixed cost in percent of the total."""
        total = self.total_annual_cost_per_technician
        parts = {
            "labor": self.total_annual_labor_cost,
            "variable": self.total_annual_variable_cost,
            "fixed": self.fixed_cost_per_technician,
        }
        if total <= 0:
            return {key: 0.0 for key in parts}
        return {key: amount / total * 100 for key, amount in parts.items()}


class PricingResult(BaseModel):
    """Break-even and margin at the target billing rate.

    ``None`` marks a figure that is undefined because there are no billable
    hours to recover cost over.
    """

    target_rate: float
    break_even_rate: Optional[float] = None
    payment_fee_per_hour: float = 0.0
    profit_per_hour: Optional[float] = None
    profit_margin_percent: float = 0.0
    suggested_rate_for_target_margin: Optional[float] = None
    margin_band: MarginBand = MarginBand.CRITICAL


class UtilizationScenario(BaseModel):
    """Pricing at a shifted utilization rate."""

    offset: float
    utilization_rate: float
    billable_hours: float
    break_even_rate: Optional[float] = None
    profit_per_hour: Optional[float] = None
    profit_margin_percent: float = 0.0
    margin_band: MarginBand = MarginBand.CRITICAL
    annual_profit_per_technician: float = 0.0
    total_annual_profit: float = 0.0


class HeadcountScenario(BaseModel):
    """Pricing when fixed overhead is spread over a different headcount."""

    technician_count: int = Field(..., ge=1)
    fixed_cost_per_technician: float
    total_annual_cost_per_technician: float
    break_even_rate: Optional[float] = None
    profit_per_hour: Optional[float] = None
    profit_margin_percent: float = 0.0
    margin_band: MarginBand = MarginBand.CRITICAL
    annual_profit_per_technician: float = 0.0
    total_company_profit: float = 0.0


class ScenarioProjection(BaseModel):
    """What-if tables for utilization and headcount."""

    utilization: List[UtilizationScenario] = Field(default_factory=list)
    headcount: List[HeadcountScenario] = Field(default_factory=list)
    minimum_utilization_percent: Optional[float] = None


class CalculationResult(BaseModel):
    """Everything derived from one configuration."""

    configuration: Configuration
    schedule: Schedule
    costs: CostSummary
    pricing: PricingResult
    scenarios: Optional[ScenarioProjection] = None
    timestamp: Optional[str] = Field(None, description="When the result was computed")
