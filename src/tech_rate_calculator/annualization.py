"""Annualization of recurring values and valuation of line items."""

import logging
from typing import Callable, Dict

from .models import LineItem, RecurrencePeriod, ValueUnit


logger = logging.getLogger(__name__)

# Each rule takes (value, working_days_per_year, hours_per_working_day)
ANNUALIZATION_RULES: Dict[str, Callable[[float, float, float], float]] = {
    RecurrencePeriod.HOURLY.value: lambda value, days, hours: value * days * hours,
    RecurrencePeriod.DAILY.value: lambda value, days, hours: value * days,
    RecurrencePeriod.MONTHLY.value: lambda value, days, hours: value * 12,
    RecurrencePeriod.YEARLY.value: lambda value, days, hours: value,
}


def annualize(
    value: float,
    recurrence: str,
    working_days_per_year: float,
    hours_per_working_day: float,
) -> float:
    """Convert a recurring value into its total for one year.

    An unrecognized recurrence contributes nothing; imported files are not
    trusted to carry valid tags.

    Args:
        value: Amount per period
        recurrence: One of the RecurrencePeriod values
        working_days_per_year: Net working days in the year
        hours_per_working_day: Clock hours per working day

    Returns:
        Annual amount
    """
    rule = ANNUALIZATION_RULES.get(_tag(recurrence))
    if rule is None:
        logger.warning(f"Unrecognized recurrence {recurrence!r}; contributing 0")
        return 0.0
    return rule(value, working_days_per_year, hours_per_working_day)


def resolve_base_currency_value(
    item: LineItem,
    hourly_wage: float,
    hours_per_working_day: float,
) -> float:
    """Convert a line item's raw value into currency per recurrence period.

    Args:
        item: Line item to value
        hourly_wage: Wage used to price labor-hours
        hours_per_working_day: Hours in one labor-day

    Returns:
        Currency amount per period (before annualization)
    """
    unit = _tag(item.unit)
    if unit == ValueUnit.CURRENCY.value:
        return item.value
    if unit == ValueUnit.HOURS.value:
        return item.value * hourly_wage
    if unit == ValueUnit.DAYS.value:
        return item.value * hourly_wage * hours_per_working_day

    logger.warning(f"Unrecognized unit {item.unit!r} on item {item.name!r}; contributing 0")
    return 0.0


def annual_item_cost(
    item: LineItem,
    hourly_wage: float,
    working_days_per_year: float,
    hours_per_working_day: float,
) -> float:
    """Annual currency cost of a line item.

    This is the only valuation path for line items: unit conversion first,
    then annualization by the item's recurrence.
    """
    base_value = resolve_base_currency_value(item, hourly_wage, hours_per_working_day)
    return annualize(base_value, item.recurrence, working_days_per_year, hours_per_working_day)


def _tag(raw: object) -> str:
    if isinstance(raw, (RecurrencePeriod, ValueUnit)):
        return raw.value
    return str(raw) if raw is not None else ""
