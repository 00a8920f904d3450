"""Working-day and billable-hour resolution."""

import logging
from typing import Iterable

from .models import LineItem, Schedule, ValueUnit


logger = logging.getLogger(__name__)


def days_off(benefit_items: Iterable[LineItem]) -> float:
    """Total day-denominated benefit days (PTO, holidays).

    A day-unit item's value is an absolute number of days per year; its
    recurrence is not applied here.
    """
    return sum(item.value for item in benefit_items if item.unit == ValueUnit.DAYS.value)


def resolve_schedule(
    base_calendar_working_days: float,
    benefit_items: Iterable[LineItem],
    hours_per_working_day: float,
    utilization_rate: float,
) -> Schedule:
    """Derive net working days, total hours and billable hours.

    Args:
        base_calendar_working_days: Working days before time off
        benefit_items: Items of the benefits category
        hours_per_working_day: Clock hours per working day
        utilization_rate: Billable share of hours, 0-100

    Returns:
        Schedule for one technician
    """
    off = days_off(benefit_items)
    net_working_days = max(0.0, base_calendar_working_days - off)
    total_annual_hours = net_working_days * hours_per_working_day
    billable_hours = total_annual_hours * (utilization_rate / 100)

    logger.debug(
        f"Schedule: {net_working_days} net days ({off} off), "
        f"{total_annual_hours} hours, {billable_hours} billable"
    )

    return Schedule(
        base_calendar_working_days=base_calendar_working_days,
        days_off=off,
        net_working_days=net_working_days,
        hours_per_working_day=hours_per_working_day,
        utilization_rate=utilization_rate,
        total_annual_hours=total_annual_hours,
        billable_hours=billable_hours,
    )
