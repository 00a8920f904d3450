"""Tests for the annual cost roll-up."""

import pytest

from tech_rate_calculator.config import PolicyConfig
from tech_rate_calculator.cost_rollup import fuel_annual_cost, roll_up
from tech_rate_calculator.models import (
    Category,
    Configuration,
    FuelModel,
    LineItem,
    RateInput,
    WageConfig,
)


def make_config(**overrides):
    """Blank configuration with fuel switched off unless overridden."""
    fields = {"fuel_model": FuelModel(miles_per_working_day=0)}
    fields.update(overrides)
    return Configuration(**fields)


@pytest.fixture
def worked_example():
    """$50/hr with $2/hr insurance, 261 days of 9 hours and a $1,000/month benefit."""
    return make_config(
        wage_config=WageConfig(wage=RateInput(value=50), insurance_contribution=RateInput(value=2)),
        base_calendar_working_days=261,
        hours_per_working_day=9,
        utilization_rate=65,
        jurisdiction="WI",
        benefits_category=Category(
            id="benefits",
            name="Benefits",
            items=[LineItem(id=1, name="Health", value=1000, recurrence="monthly")],
        ),
    )


class TestLaborCost:
    """Test labor cost components."""

    def test_worked_example(self, worked_example):
        """Labor figures for the worked example."""
        costs = roll_up(worked_example)
        assert costs.annual_wage == pytest.approx(117450)
        assert costs.annual_insurance == pytest.approx(4698)
        assert costs.annual_payroll_tax == pytest.approx(8984.925)
        assert costs.annual_unemployment_insurance == 430.0
        assert costs.annual_benefits == pytest.approx(12000)
        assert costs.total_annual_labor_cost == pytest.approx(143562.925)

    def test_hourly_figures(self, worked_example):
        """Per-hour figures divide by total clock hours."""
        costs = roll_up(worked_example)
        assert costs.hourly_payroll_tax == pytest.approx(8984.925 / 2349)
        assert costs.hourly_labor_burden == pytest.approx(143562.925 / 2349)
        assert costs.hourly_cost_to_business == pytest.approx(
            costs.total_annual_cost_per_technician / 2349
        )

    def test_illinois_constant(self):
        """IL uses its own unemployment constant."""
        assert roll_up(make_config(jurisdiction="IL")).annual_unemployment_insurance == 507.93

    def test_unknown_jurisdiction_falls_back(self):
        """Unknown jurisdictions use the fallback constant."""
        assert roll_up(make_config(jurisdiction="TX")).annual_unemployment_insurance == 507.93

    def test_jurisdiction_case_insensitive(self):
        """Lower-case codes match."""
        assert roll_up(make_config(jurisdiction="wi")).annual_unemployment_insurance == 430.0

    def test_custom_policy(self):
        """Policy constants come from the supplied policy."""
        policy = PolicyConfig(payroll_tax_rate=0.1, unemployment_insurance={"WI": 0})
        config = make_config(base_calendar_working_days=250, hours_per_working_day=8)
        costs = roll_up(config, policy=policy)
        assert costs.annual_payroll_tax == pytest.approx(60000 * 0.1)
        assert costs.annual_unemployment_insurance == 0

    def test_labor_hour_benefit_uses_net_days(self):
        """A paid lunch hour is valued over net working days."""
        config = make_config(
            base_calendar_working_days=245,
            benefits_category=Category(
                id="benefits",
                items=[
                    LineItem(id=1, name="Lunch", value=1, unit="hours", recurrence="daily"),
                    LineItem(id=2, name="PTO", value=5, unit="days", recurrence="yearly"),
                ],
            ),
        )
        costs = roll_up(config)
        # lunch: 1h x $30 x 240 days; PTO: 5 days x $30 x 8h once
        assert costs.annual_benefits == pytest.approx(30 * 240 + 5 * 30 * 8)


class TestOverhead:
    """Test variable and fixed overhead."""

    def test_default_fuel(self):
        """80 miles at 20 mpg and $4/gal over 245 days."""
        costs = roll_up(Configuration())
        assert costs.annual_fuel_cost == pytest.approx(3920)
        assert costs.total_annual_variable_cost == pytest.approx(3920)

    def test_fuel_follows_net_days(self):
        """Days off reduce fuel cost."""
        config = Configuration(
            benefits_category=Category(items=[LineItem(value=5, unit="days")]),
        )
        assert roll_up(config).annual_fuel_cost == pytest.approx(3840)

    def test_zero_mpg(self):
        """Non-positive efficiency yields zero fuel cost."""
        assert fuel_annual_cost(FuelModel(miles_per_gallon=0), 245) == 0.0

    def test_variable_categories(self):
        """Variable categories sum with labor-hour items priced at wage."""
        config = make_config(
            variable_overhead_categories=[
                Category(id="warranty", name="Warranty",
                         items=[LineItem(value=0.5, unit="hours", recurrence="daily")]),
                Category(id="tools", name="Tools", items=[LineItem(value=2000)]),
            ],
        )
        costs = roll_up(config)
        assert costs.variable_category_totals[0].annual_total == pytest.approx(3675)
        assert costs.total_annual_variable_cost == pytest.approx(5675)

    def test_fixed_overhead_shared(self):
        """Fixed overhead is split equally across technicians."""
        config = make_config(
            technician_count=3,
            fixed_overhead_categories=[Category(id="rent", name="Rent",
                                                items=[LineItem(value=1000, recurrence="monthly")])],
        )
        costs = roll_up(config)
        assert costs.total_annual_fixed_cost == pytest.approx(12000)
        assert costs.fixed_cost_per_technician == pytest.approx(4000)
        assert costs.technician_count == 3

    def test_total_is_sum_of_parts(self, worked_example):
        """Total per technician is labor + variable + fixed share."""
        costs = roll_up(worked_example)
        assert costs.total_annual_cost_per_technician == pytest.approx(
            costs.total_annual_labor_cost
            + costs.total_annual_variable_cost
            + costs.fixed_cost_per_technician
        )


class TestDegenerateInputs:
    """Test zero-hour configurations."""

    def test_zero_hours_leaves_hourly_undefined(self):
        """No clock hours means no per-hour figures."""
        costs = roll_up(make_config(base_calendar_working_days=0))
        assert costs.hourly_payroll_tax is None
        assert costs.hourly_labor_burden is None
        assert costs.hourly_cost_to_business is None
        # unemployment insurance is still owed
        assert costs.total_annual_cost_per_technician == pytest.approx(430.0)

    def test_cost_breakdown_sums_to_100(self, worked_example):
        """Labor, variable and fixed shares cover the whole cost."""
        breakdown = roll_up(worked_example).cost_breakdown()
        assert sum(breakdown.values()) == pytest.approx(100)
