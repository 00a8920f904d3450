"""Break-even rate, profit and margin at a target billing rate."""

import logging
from typing import Optional

from .config import PolicyConfig
from .models import MarginBand, PricingResult


logger = logging.getLogger(__name__)


def break_even_rate(total_annual_cost_per_technician: float, billable_hours: float) -> Optional[float]:
    """Hourly rate that exactly recovers annual cost.

    Returns ``None`` when there are no billable hours, since no rate can
    recover cost over zero hours.
    """
    if billable_hours <= 0:
        return None
    return total_annual_cost_per_technician / billable_hours


def payment_fee_per_hour(target_rate: float, fee_enabled: bool, fee_percentage: float) -> float:
    """Processing fee charged on each billed hour."""
    if not fee_enabled:
        return 0.0
    return target_rate * fee_percentage / 100


def profit_margin_percent(profit_per_hour: Optional[float], target_rate: float) -> float:
    """Profit as a percentage of the target rate; 0 when there is no basis."""
    if profit_per_hour is None or target_rate <= 0:
        return 0.0
    return (profit_per_hour / target_rate) * 100


def classify_margin(margin_percent: float, policy: Optional[PolicyConfig] = None) -> MarginBand:
    """Band a margin for presentation.

    ``>= healthy`` is healthy, ``(0, healthy)`` is marginal and ``<= 0`` is
    critical. Every report uses this function.
    """
    healthy = (policy or PolicyConfig()).healthy_margin_percent
    if margin_percent >= healthy:
        return MarginBand.HEALTHY
    if margin_percent > 0:
        return MarginBand.MARGINAL
    return MarginBand.CRITICAL


def price_and_margin(
    total_annual_cost_per_technician: float,
    billable_hours: float,
    target_rate: float,
    fee_enabled: bool = False,
    fee_percentage: float = 0.0,
    policy: Optional[PolicyConfig] = None,
) -> PricingResult:
    """Compute break-even, profit and margin for one technician.

    The suggested rate for the target margin is derived from break-even alone
    and does not account for the payment fee.

    Args:
        total_annual_cost_per_technician: Fully burdened annual cost
        billable_hours: Billable hours per year
        target_rate: Customer-facing hourly rate
        fee_enabled: Whether payment processing fees apply
        fee_percentage: Fee as a percentage of the rate
        policy: Margin constants (defaults if omitted)

    Returns:
        PricingResult
    """
    policy = policy or PolicyConfig()

    break_even = break_even_rate(total_annual_cost_per_technician, billable_hours)
    fee = payment_fee_per_hour(target_rate, fee_enabled, fee_percentage)

    if break_even is None:
        logger.warning("No billable hours; break-even rate is undefined")
        profit = None
        suggested = None
    else:
        profit = target_rate - break_even - fee
        suggested = break_even / (1 - policy.target_margin_percent / 100)

    margin = profit_margin_percent(profit, target_rate)

    return PricingResult(
        target_rate=target_rate,
        break_even_rate=break_even,
        payment_fee_per_hour=fee,
        profit_per_hour=profit,
        profit_margin_percent=margin,
        suggested_rate_for_target_margin=suggested,
        margin_band=classify_margin(margin, policy),
    )
