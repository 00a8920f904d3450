"""Example script demonstrating rate calculation and what-if analysis."""

from pathlib import Path

from tech_rate_calculator import RateCalculator, with_settings
from tech_rate_calculator.config import load_policy_config
from tech_rate_calculator.defaults import default_configuration
from tech_rate_calculator.reporting import format_money, format_percent, generate_report
from tech_rate_calculator.snapshot import load_snapshot, save_snapshot


def main():
    """Run rate calculation example."""
    # Load a saved snapshot if there is one, otherwise start from the sample shop
    snapshot_path = Path("data/shop.json")
    if snapshot_path.exists():
        print(f"Loading snapshot: {snapshot_path}")
        config = load_snapshot(snapshot_path)
    else:
        print("Using built-in sample configuration")
        config = default_configuration()
        save_snapshot(config, snapshot_path)
        print(f"Sample snapshot saved to {snapshot_path}")
    print()

    calculator = RateCalculator(load_policy_config())

    print("=" * 80)
    print("BREAK-EVEN BY HEADCOUNT")
    print("=" * 80)
    print()

    for count in [1, 2, 5]:
        result = calculator.calculate(with_settings(config, technician_count=count), include_scenarios=False)
        pricing = result.pricing
        print(f"Technicians: {count}")
        print("-" * 80)
        print(f"Annual Cost per Technician: {format_money(result.costs.total_annual_cost_per_technician)}")
        print(f"Break-Even Rate: {format_money(pricing.break_even_rate)}/hr")
        print(f"Profit Margin at {format_money(pricing.target_rate)}/hr: "
              f"{format_percent(pricing.profit_margin_percent)} ({pricing.margin_band.value})")
        print()

    # Full dashboard and a Markdown copy for the current configuration
    result = calculator.calculate(config)
    generate_report(result, format="table")

    output_dir = Path("output")
    generate_report(result, format="markdown", output_path=output_dir / "rate_report.md")
    print(f"Markdown report saved to {output_dir / 'rate_report.md'}")


if __name__ == "__main__":
    main()
