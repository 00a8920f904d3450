"""Roll-up of labor, variable overhead and fixed overhead into annual cost."""

import logging
from typing import Optional

from .annualization import annualize
from .categories import annual_total, category_totals
from .config import PolicyConfig
from .models import Configuration, CostSummary, FuelModel, Schedule
from .schedule import resolve_schedule


logger = logging.getLogger(__name__)


def fuel_annual_cost(fuel_model: FuelModel, net_working_days: float) -> float:
    """Annual fuel cost from the model's drivers and the working-day count."""
    return fuel_model.annual_cost(net_working_days)


def roll_up(
    config: Configuration,
    schedule: Optional[Schedule] = None,
    policy: Optional[PolicyConfig] = None,
) -> CostSummary:
    """Combine all cost sources into an annual cost per technician.

    Args:
        config: Calculator configuration
        schedule: Pre-resolved schedule (resolved from ``config`` if omitted)
        policy: Statutory constants (defaults if omitted)

    Returns:
        CostSummary for one technician
    """
    policy = policy or PolicyConfig()
    if schedule is None:
        schedule = resolve_schedule(
            config.base_calendar_working_days,
            config.benefits_category.items,
            config.hours_per_working_day,
            config.utilization_rate,
        )

    days = schedule.net_working_days
    hours = config.hours_per_working_day
    wage = config.hourly_wage

    # Labor
    wage_input = config.wage_config.wage
    insurance_input = config.wage_config.insurance_contribution
    annual_wage = annualize(wage_input.value, wage_input.recurrence, days, hours)
    annual_insurance = annualize(insurance_input.value, insurance_input.recurrence, days, hours)
    annual_payroll_tax = annual_wage * policy.payroll_tax_rate
    annual_unemployment = policy.unemployment_for(config.jurisdiction)
    annual_benefits = annual_total(config.benefits_category.items, wage, days, hours)

    total_labor = (
        annual_wage + annual_insurance + annual_payroll_tax + annual_unemployment + annual_benefits
    )

    # Variable overhead (per technician)
    variable_totals = category_totals(config.variable_overhead_categories, wage, days, hours)
    annual_fuel = fuel_annual_cost(config.fuel_model, days)
    total_variable = sum(total.annual_total for total in variable_totals) + annual_fuel

    # Fixed overhead (company-wide, shared)
    fixed_totals = category_totals(config.fixed_overhead_categories, wage, days, hours)
    total_fixed = sum(total.annual_total for total in fixed_totals)
    technician_count = max(1, config.technician_count)
    fixed_per_technician = total_fixed / technician_count

    total_per_technician = total_labor + total_variable + fixed_per_technician

    total_hours = schedule.total_annual_hours
    if total_hours > 0:
        hourly_payroll_tax = annual_payroll_tax / total_hours
        hourly_labor_burden = total_labor / total_hours
        hourly_cost_to_business = total_per_technician / total_hours
    else:
        hourly_payroll_tax = hourly_labor_burden = hourly_cost_to_business = None

    logger.debug(
        f"Roll-up: labor={total_labor:.2f} variable={total_variable:.2f} "
        f"fixed={total_fixed:.2f} (/{technician_count}) total={total_per_technician:.2f}"
    )

    return CostSummary(
        annual_wage=annual_wage,
        annual_insurance=annual_insurance,
        annual_payroll_tax=annual_payroll_tax,
        annual_unemployment_insurance=annual_unemployment,
        annual_benefits=annual_benefits,
        total_annual_labor_cost=total_labor,
        variable_category_totals=variable_totals,
        annual_fuel_cost=annual_fuel,
        total_annual_variable_cost=total_variable,
        fixed_category_totals=fixed_totals,
        total_annual_fixed_cost=total_fixed,
        technician_count=technician_count,
        fixed_cost_per_technician=fixed_per_technician,
        total_annual_cost_per_technician=total_per_technician,
        hourly_payroll_tax=hourly_payroll_tax,
        hourly_labor_burden=hourly_labor_burden,
        hourly_cost_to_business=hourly_cost_to_business,
    )
