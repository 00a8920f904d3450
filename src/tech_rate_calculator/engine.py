"""Single entry point that derives every metric from a configuration."""

import logging
from datetime import datetime
from typing import Optional

from .config import PolicyConfig
from .cost_rollup import roll_up
from .models import CalculationResult, Configuration
from .pricing import price_and_margin
from .scenarios import project_scenarios
from .schedule import resolve_schedule


logger = logging.getLogger(__name__)


class RateCalculator:
    """Runs the schedule, roll-up, pricing and scenario stages in order.

    Each call recomputes everything from the given configuration; nothing is
    cached between calls.
    """

    def __init__(self, policy: Optional[PolicyConfig] = None):
        """Initialize the calculator.

        Args:
            policy: Statutory and analysis constants (defaults if omitted)
        """
        self.policy = policy or PolicyConfig()

    def calculate(
        self,
        config: Configuration,
        include_scenarios: bool = True,
    ) -> CalculationResult:
        """Compute all derived metrics.

        Args:
            config: Calculator configuration
            include_scenarios: Whether to build the what-if tables

        Returns:
            CalculationResult shared by the dashboard and every report format
        """
        schedule = resolve_schedule(
            config.base_calendar_working_days,
            config.benefits_category.items,
            config.hours_per_working_day,
            config.utilization_rate,
        )
        costs = roll_up(config, schedule, self.policy)
        pricing = price_and_margin(
            costs.total_annual_cost_per_technician,
            schedule.billable_hours,
            config.target_billing_rate,
            config.payment_fee_enabled,
            config.payment_fee_percentage,
            self.policy,
        )
        scenarios = project_scenarios(costs, schedule, config, self.policy) if include_scenarios else None

        if pricing.break_even_rate is not None:
            logger.info(
                f"Break-even ${pricing.break_even_rate:.2f}/hr, "
                f"margin {pricing.profit_margin_percent:.1f}% ({pricing.margin_band.value})"
            )
        else:
            logger.info("Break-even rate undefined (no billable hours)")

        return CalculationResult(
            configuration=config,
            schedule=schedule,
            costs=costs,
            pricing=pricing,
            scenarios=scenarios,
            timestamp=datetime.now().isoformat(),
        )
