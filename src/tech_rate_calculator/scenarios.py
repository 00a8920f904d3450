"""What-if projections over utilization and headcount.

All projections work from an already computed CostSummary and Schedule and
never touch the configuration they came from.
"""

import logging
from typing import Iterable, List, Optional

from .config import PolicyConfig
from .models import (
    CostSummary,
    GlobalSettings,
    HeadcountScenario,
    Schedule,
    ScenarioProjection,
    UtilizationScenario,
)
from .pricing import payment_fee_per_hour, price_and_margin


logger = logging.getLogger(__name__)


def _annual_profit_per_technician(
    annual_cost: float,
    billable_hours: float,
    settings: GlobalSettings,
) -> float:
    """Revenue net of fees minus annual cost for one technician."""
    fee = payment_fee_per_hour(
        settings.target_billing_rate,
        settings.payment_fee_enabled,
        settings.payment_fee_percentage,
    )
    return (settings.target_billing_rate - fee) * billable_hours - annual_cost


def project_utilization(
    costs: CostSummary,
    schedule: Schedule,
    settings: GlobalSettings,
    offsets: Optional[Iterable[float]] = None,
    policy: Optional[PolicyConfig] = None,
) -> List[UtilizationScenario]:
    """Reprice at utilization rates shifted by each offset.

    Shifted rates are clamped to 0-100 percent.
    """
    policy = policy or PolicyConfig()
    offsets = policy.utilization_offsets if offsets is None else offsets

    rows = []
    for offset in offsets:
        utilization = min(100.0, max(0.0, settings.utilization_rate + offset))
        billable = schedule.total_annual_hours * (utilization / 100)
        pricing = price_and_margin(
            costs.total_annual_cost_per_technician,
            billable,
            settings.target_billing_rate,
            settings.payment_fee_enabled,
            settings.payment_fee_percentage,
            policy,
        )
        per_technician = _annual_profit_per_technician(
            costs.total_annual_cost_per_technician, billable, settings
        )
        rows.append(
            UtilizationScenario(
                offset=offset,
                utilization_rate=utilization,
                billable_hours=billable,
                break_even_rate=pricing.break_even_rate,
                profit_per_hour=pricing.profit_per_hour,
                profit_margin_percent=pricing.profit_margin_percent,
                margin_band=pricing.margin_band,
                annual_profit_per_technician=per_technician,
                total_annual_profit=per_technician * costs.technician_count,
            )
        )

    return rows


def project_headcount(
    costs: CostSummary,
    schedule: Schedule,
    settings: GlobalSettings,
    candidates: Optional[Iterable[int]] = None,
    policy: Optional[PolicyConfig] = None,
) -> List[HeadcountScenario]:
    """Reprice with fixed overhead spread over each candidate headcount.

    Labor and variable cost stay per technician; only fixed overhead is
    diluted.
    """
    policy = policy or PolicyConfig()
    candidates = policy.headcount_candidates if candidates is None else candidates

    per_technician_base = costs.total_annual_labor_cost + costs.total_annual_variable_cost

    rows = []
    for count in candidates:
        count = max(1, int(count))
        fixed_share = costs.total_annual_fixed_cost / count
        annual_cost = per_technician_base + fixed_share
        pricing = price_and_margin(
            annual_cost,
            schedule.billable_hours,
            settings.target_billing_rate,
            settings.payment_fee_enabled,
            settings.payment_fee_percentage,
            policy,
        )
        per_technician = _annual_profit_per_technician(annual_cost, schedule.billable_hours, settings)
        rows.append(
            HeadcountScenario(
                technician_count=count,
                fixed_cost_per_technician=fixed_share,
                total_annual_cost_per_technician=annual_cost,
                break_even_rate=pricing.break_even_rate,
                profit_per_hour=pricing.profit_per_hour,
                profit_margin_percent=pricing.profit_margin_percent,
                margin_band=pricing.margin_band,
                annual_profit_per_technician=per_technician,
                total_company_profit=per_technician * count,
            )
        )

    return rows


def minimum_utilization(
    total_annual_cost_per_technician: float,
    target_rate: float,
    total_potential_annual_hours: float,
) -> Optional[float]:
    """Utilization percent at which revenue at the target rate covers cost.

    Returns 0 when the target rate is not positive and ``None`` when there
    are no working hours to utilize.
    """
    if target_rate <= 0:
        return 0.0
    if total_potential_annual_hours <= 0:
        return None
    required_billable_hours = total_annual_cost_per_technician / target_rate
    return required_billable_hours / total_potential_annual_hours * 100


def project_scenarios(
    costs: CostSummary,
    schedule: Schedule,
    settings: GlobalSettings,
    policy: Optional[PolicyConfig] = None,
) -> ScenarioProjection:
    """Build every what-if table for one calculation."""
    policy = policy or PolicyConfig()
    projection = ScenarioProjection(
        utilization=project_utilization(costs, schedule, settings, policy=policy),
        headcount=project_headcount(costs, schedule, settings, policy=policy),
        minimum_utilization_percent=minimum_utilization(
            costs.total_annual_cost_per_technician,
            settings.target_billing_rate,
            schedule.total_annual_hours,
        ),
    )
    logger.debug(
        f"Projected {len(projection.utilization)} utilization and "
        f"{len(projection.headcount)} headcount scenarios"
    )
    return projection
