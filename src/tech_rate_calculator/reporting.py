"""
Rate report rendering in multiple output formats.

Renders one CalculationResult as a rich CLI dashboard, a JSON document, a CSV
export or a printable Markdown report. Every format reads the same computed
figures; nothing here recalculates cost or pricing.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .models import CalculationResult, MarginBand

logger = logging.getLogger(__name__)

BAND_STYLES = {
    MarginBand.HEALTHY: "bold green",
    MarginBand.MARGINAL: "bold yellow",
    MarginBand.CRITICAL: "bold red",
}

ASSUMPTIONS = [
    "Payroll tax and unemployment insurance use the configured statutory constants",
    "Day-denominated benefits reduce working days by their value regardless of recurrence",
    "Labor-hour and labor-day items are priced at the base hourly wage",
    "Fixed overhead is shared equally across technicians; labor and variable costs are per technician",
    "The suggested rate targets the margin on break-even alone and ignores payment fees",
]


CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "\u20ac",
    "GBP": "\u00a3",
}


def currency_symbol(currency: str) -> str:
    """Prefix used for amounts; unknown codes are written out (e.g. ``CHF 10.00``)."""
    code = (currency or "USD").strip().upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def format_money(value: Optional[float], decimals: int = 2, symbol: str = "$") -> str:
    """Format a currency amount; undefined values render as ``n/a``."""
    if value is None:
        return "n/a"
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(value: Optional[float]) -> str:
    """Format a percentage; undefined values render as ``n/a``."""
    if value is None:
        return "n/a"
    return f"{value:.1f}%"


class RateReportGenerator:
    """
    Generates technician rate reports with multiple output formats.

    Provides a CLI dashboard, JSON reports, CSV exports and Markdown documents
    with cost breakdowns, pricing and what-if tables.
    """

    def __init__(self, result: CalculationResult, currency: str = "USD", company_name: str = ""):
        """
        Initialize the report generator.

        Args:
            result: Computed metrics for one configuration
            currency: Currency code for headers and amounts
            company_name: Optional company name for the title
        """
        self.result = result
        self.currency = currency
        self.symbol = currency_symbol(currency)
        self.company_name = company_name
        self.console = Console()

    def _money(self, value: Optional[float], decimals: int = 2) -> str:
        return format_money(value, decimals, self.symbol)

    @property
    def _title(self) -> str:
        if self.company_name:
            return f"{self.company_name} - Technician Rate Report"
        return "Technician Rate Report"

    def _summary_rows(self) -> List[Tuple[str, str]]:
        """Headline figures shown on the dashboard and in every report."""
        schedule = self.result.schedule
        costs = self.result.costs
        pricing = self.result.pricing
        rows = [
            ("Break-Even Rate", f"{self._money(pricing.break_even_rate)}/hr"),
            ("Target Rate", f"{self._money(pricing.target_rate)}/hr"),
        ]
        if pricing.payment_fee_per_hour:
            rows.append(("Payment Fee", f"{self._money(pricing.payment_fee_per_hour)}/hr"))
        rows.extend([
            ("Profit per Hour", f"{self._money(pricing.profit_per_hour)}/hr"),
            ("Profit Margin", format_percent(pricing.profit_margin_percent)),
            ("Margin Status", pricing.margin_band.value.title()),
            ("Suggested Rate (Target Margin)", f"{self._money(pricing.suggested_rate_for_target_margin)}/hr"),
            ("Hourly Cost to Business", f"{self._money(costs.hourly_cost_to_business)}/clock hr"),
            ("Annual Cost per Technician", self._money(costs.total_annual_cost_per_technician)),
            ("Billable Hours", f"{schedule.billable_hours:,.0f} at {schedule.utilization_rate:g}% utilization"),
        ])
        return rows

    def _schedule_rows(self) -> List[Tuple[str, str]]:
        schedule = self.result.schedule
        return [
            ("Base Working Days", f"{schedule.base_calendar_working_days:g}"),
            ("Days Off (PTO/Holidays)", f"{schedule.days_off:g}"),
            ("Net Working Days", f"{schedule.net_working_days:g}"),
            ("Hours per Day", f"{schedule.hours_per_working_day:g}"),
            ("Total Annual Hours", f"{schedule.total_annual_hours:,.2f}"),
            ("Billable Hours", f"{schedule.billable_hours:,.2f}"),
        ]

    def _labor_rows(self) -> List[Tuple[str, float]]:
        costs = self.result.costs
        return [
            ("Wage", costs.annual_wage),
            ("Insurance", costs.annual_insurance),
            ("Payroll Tax", costs.annual_payroll_tax),
            ("Unemployment Insurance", costs.annual_unemployment_insurance),
            ("Benefits", costs.annual_benefits),
        ]

    def _variable_rows(self) -> List[Tuple[str, float]]:
        costs = self.result.costs
        rows = [(total.name, total.annual_total) for total in costs.variable_category_totals]
        rows.append(("Fuel", costs.annual_fuel_cost))
        return rows

    def _fixed_rows(self) -> List[Tuple[str, float]]:
        return [(total.name, total.annual_total) for total in self.result.costs.fixed_category_totals]

    def generate_cli_table(self) -> None:
        """Generate and display the dashboard using rich."""
        costs = self.result.costs
        pricing = self.result.pricing
        band_style = BAND_STYLES[pricing.margin_band]

        title = Panel(
            f"[bold cyan]{self._title}[/bold cyan]\n"
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            expand=False
        )
        self.console.print(title)
        self.console.print()

        # Executive Summary
        self.console.print("[bold yellow]Executive Summary[/bold yellow]")
        summary_table = Table(show_header=True, header_style="bold magenta")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Value", justify="right")
        for label, value in self._summary_rows():
            if label in ("Profit Margin", "Margin Status"):
                value = f"[{band_style}]{value}[/{band_style}]"
            summary_table.add_row(label, value)
        self.console.print(summary_table)
        self.console.print()

        # Schedule
        self.console.print("[bold yellow]Schedule[/bold yellow]")
        schedule_table = Table(show_header=True, header_style="bold magenta")
        schedule_table.add_column("Item", style="cyan")
        schedule_table.add_column("Value", justify="right")
        for label, value in self._schedule_rows():
            schedule_table.add_row(label, value)
        self.console.print(schedule_table)
        self.console.print()

        # Cost sections
        sections = [
            ("Labor & Benefits", self._labor_rows(), costs.total_annual_labor_cost, "Total Labor"),
            ("Variable Overhead (per technician)", self._variable_rows(),
             costs.total_annual_variable_cost, "Total Variable"),
            ("Fixed Overhead (company)", self._fixed_rows(),
             costs.total_annual_fixed_cost, "Total Fixed"),
        ]
        for heading, rows, total, total_label in sections:
            self.console.print(f"[bold yellow]{heading}[/bold yellow]")
            table = Table(show_header=True, header_style="bold magenta")
            table.add_column("Category", style="cyan")
            table.add_column("Annual", justify="right")
            for label, amount in rows:
                table.add_row(label, self._money(amount))
            table.add_row(f"[bold]{total_label}[/bold]", f"[bold]{self._money(total)}[/bold]")
            if heading.startswith("Fixed"):
                table.add_row(
                    f"Share per Technician (/{costs.technician_count})",
                    self._money(costs.fixed_cost_per_technician),
                )
            self.console.print(table)
            self.console.print()

        # Cost breakdown
        self.console.print("[bold yellow]Annual Cost Breakdown[/bold yellow]")
        breakdown_table = Table(show_header=True, header_style="bold magenta")
        breakdown_table.add_column("Component", style="cyan")
        breakdown_table.add_column("Annual", justify="right")
        breakdown_table.add_column("% of Total", justify="right")
        shares = costs.cost_breakdown()
        breakdown_table.add_row("Labor", self._money(costs.total_annual_labor_cost), format_percent(shares["labor"]))
        breakdown_table.add_row("Variable", self._money(costs.total_annual_variable_cost),
                                format_percent(shares["variable"]))
        breakdown_table.add_row("Fixed (share)", self._money(costs.fixed_cost_per_technician),
                                format_percent(shares["fixed"]))
        self.console.print(breakdown_table)
        self.console.print()

        self.generate_scenario_tables()

    def generate_scenario_tables(self) -> None:
        """Display the what-if tables using rich (nothing if not projected)."""
        scenarios = self.result.scenarios
        if scenarios is None:
            return

        self.console.print("[bold yellow]Utilization Sensitivity[/bold yellow]")
        util_table = Table(show_header=True, header_style="bold magenta")
        util_table.add_column("Utilization", justify="right", style="cyan")
        util_table.add_column("Billable Hrs", justify="right")
        util_table.add_column("Break-Even", justify="right")
        util_table.add_column("Profit/Hr", justify="right")
        util_table.add_column("Margin", justify="right")
        util_table.add_column("Annual Profit", justify="right", style="bold green")
        for row in scenarios.utilization:
            style = BAND_STYLES[row.margin_band]
            util_table.add_row(
                f"{row.utilization_rate:g}% ({row.offset:+g})",
                f"{row.billable_hours:,.0f}",
                self._money(row.break_even_rate),
                self._money(row.profit_per_hour),
                f"[{style}]{format_percent(row.profit_margin_percent)}[/{style}]",
                self._money(row.total_annual_profit, 0),
            )
        self.console.print(util_table)
        self.console.print()

        self.console.print("[bold yellow]Headcount Scalability[/bold yellow]")
        head_table = Table(show_header=True, header_style="bold magenta")
        head_table.add_column("Technicians", justify="right", style="cyan")
        head_table.add_column("Fixed/Tech", justify="right")
        head_table.add_column("Break-Even", justify="right")
        head_table.add_column("Margin", justify="right")
        head_table.add_column("Company Profit", justify="right", style="bold green")
        for row in scenarios.headcount:
            style = BAND_STYLES[row.margin_band]
            head_table.add_row(
                f"{row.technician_count:,}",
                self._money(row.fixed_cost_per_technician, 0),
                self._money(row.break_even_rate),
                f"[{style}]{format_percent(row.profit_margin_percent)}[/{style}]",
                self._money(row.total_company_profit, 0),
            )
        self.console.print(head_table)
        self.console.print()

        self.console.print(
            f"Minimum utilization to break even: "
            f"[bold]{format_percent(scenarios.minimum_utilization_percent)}[/bold]"
        )
        self.console.print()

    def generate_json_report(self, output_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Generate detailed JSON report with full breakdown.

        Args:
            output_path: Optional path to write JSON file

        Returns:
            Dict containing complete report data
        """
        costs = self.result.costs
        scenarios = self.result.scenarios

        report = {
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'computed_at': self.result.timestamp,
                'currency': self.currency,
                'company_name': self.company_name or None,
                'tool_version': __version__
            },
            'pricing': self.result.pricing.model_dump(mode='json'),
            'schedule': self.result.schedule.model_dump(mode='json'),
            'labor': {
                'annual_wage': costs.annual_wage,
                'annual_insurance': costs.annual_insurance,
                'annual_payroll_tax': costs.annual_payroll_tax,
                'annual_unemployment_insurance': costs.annual_unemployment_insurance,
                'annual_benefits': costs.annual_benefits,
                'total_annual_labor_cost': costs.total_annual_labor_cost,
                'hourly_payroll_tax': costs.hourly_payroll_tax,
                'hourly_labor_burden': costs.hourly_labor_burden
            },
            'variable_overhead': {
                'categories': [total.model_dump(mode='json') for total in costs.variable_category_totals],
                'annual_fuel_cost': costs.annual_fuel_cost,
                'total_annual_variable_cost': costs.total_annual_variable_cost
            },
            'fixed_overhead': {
                'categories': [total.model_dump(mode='json') for total in costs.fixed_category_totals],
                'total_annual_fixed_cost': costs.total_annual_fixed_cost,
                'technician_count': costs.technician_count,
                'fixed_cost_per_technician': costs.fixed_cost_per_technician
            },
            'totals': {
                'total_annual_cost_per_technician': costs.total_annual_cost_per_technician,
                'hourly_cost_to_business': costs.hourly_cost_to_business,
                'cost_breakdown_percent': costs.cost_breakdown()
            },
            'scenarios': scenarios.model_dump(mode='json') if scenarios else None,
            'assumptions': ASSUMPTIONS
        }

        if output_path:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2)
            logger.info(f"JSON report written to {output_path}")

        return report

    def generate_csv_export(self, output_path: Path) -> None:
        """
        Generate CSV export for spreadsheet analysis.

        Args:
            output_path: Path to write CSV file
        """
        costs = self.result.costs
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)

            writer.writerow(['SUMMARY'])
            writer.writerow(['Metric', 'Value'])
            for label, value in self._summary_rows():
                writer.writerow([label, value])

            writer.writerow([])
            writer.writerow(['SCHEDULE'])
            for label, value in self._schedule_rows():
                writer.writerow([label, value])

            writer.writerow([])
            writer.writerow(['ANNUAL COSTS'])
            writer.writerow(['Section', 'Item', 'Annual Cost'])
            for label, amount in self._labor_rows():
                writer.writerow(['Labor', label, f"{amount:.2f}"])
            for label, amount in self._variable_rows():
                writer.writerow(['Variable', label, f"{amount:.2f}"])
            for label, amount in self._fixed_rows():
                writer.writerow(['Fixed', label, f"{amount:.2f}"])
            writer.writerow(['Total', 'Labor', f"{costs.total_annual_labor_cost:.2f}"])
            writer.writerow(['Total', 'Variable', f"{costs.total_annual_variable_cost:.2f}"])
            writer.writerow(['Total', 'Fixed (company)', f"{costs.total_annual_fixed_cost:.2f}"])
            writer.writerow(['Total', 'Fixed (per technician)', f"{costs.fixed_cost_per_technician:.2f}"])
            writer.writerow(['Total', 'Cost per Technician', f"{costs.total_annual_cost_per_technician:.2f}"])

            scenarios = self.result.scenarios
            if scenarios:
                writer.writerow([])
                writer.writerow(['UTILIZATION SENSITIVITY'])
                writer.writerow(['Utilization %', 'Billable Hours', 'Break-Even', 'Profit/Hr',
                                 'Margin %', 'Band', 'Total Annual Profit'])
                for row in scenarios.utilization:
                    writer.writerow([
                        f"{row.utilization_rate:g}",
                        f"{row.billable_hours:.2f}",
                        _csv_number(row.break_even_rate),
                        _csv_number(row.profit_per_hour),
                        f"{row.profit_margin_percent:.2f}",
                        row.margin_band.value,
                        f"{row.total_annual_profit:.2f}"
                    ])

                writer.writerow([])
                writer.writerow(['HEADCOUNT SCALABILITY'])
                writer.writerow(['Technicians', 'Fixed per Tech', 'Cost per Tech', 'Break-Even',
                                 'Margin %', 'Band', 'Company Profit'])
                for row in scenarios.headcount:
                    writer.writerow([
                        row.technician_count,
                        f"{row.fixed_cost_per_technician:.2f}",
                        f"{row.total_annual_cost_per_technician:.2f}",
                        _csv_number(row.break_even_rate),
                        f"{row.profit_margin_percent:.2f}",
                        row.margin_band.value,
                        f"{row.total_company_profit:.2f}"
                    ])

                writer.writerow([])
                writer.writerow(['Minimum Utilization %', _csv_number(scenarios.minimum_utilization_percent)])

        logger.info(f"CSV export written to {output_path}")

    def generate_markdown_report(self, output_path: Path) -> None:
        """
        Generate a printable Markdown report.

        Args:
            output_path: Path to write Markdown file
        """
        costs = self.result.costs
        scenarios = self.result.scenarios

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(f"# {self._title}\n\n")
            f.write(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}  \n")
            f.write(f"**Currency:** {self.currency}\n\n")
            f.write("---\n\n")

            f.write("## Executive Summary\n\n")
            for label, value in self._summary_rows():
                f.write(f"- **{label}:** {value}\n")
            f.write("\n")

            f.write("## Schedule\n\n")
            f.write("| Item | Value |\n")
            f.write("|------|-------|\n")
            for label, value in self._schedule_rows():
                f.write(f"| {label} | {value} |\n")
            f.write("\n")

            sections = [
                ("Labor & Benefits", self._labor_rows(), "Total Labor", costs.total_annual_labor_cost),
                ("Variable Overhead (per technician)", self._variable_rows(),
                 "Total Variable", costs.total_annual_variable_cost),
                ("Fixed Overhead (company)", self._fixed_rows(),
                 "Total Fixed", costs.total_annual_fixed_cost),
            ]
            for heading, rows, total_label, total in sections:
                f.write(f"## {heading}\n\n")
                f.write("| Category | Annual |\n")
                f.write("|----------|--------|\n")
                for label, amount in rows:
                    f.write(f"| {label} | {self._money(amount)} |\n")
                f.write(f"| **{total_label}** | **{self._money(total)}** |\n\n")

            f.write(f"**Fixed share per technician ({costs.technician_count}):** "
                    f"{self._money(costs.fixed_cost_per_technician)}\n\n")

            if scenarios:
                f.write("## Utilization Sensitivity\n\n")
                f.write("| Utilization | Billable Hrs | Break-Even | Profit/Hr | Margin | Annual Profit |\n")
                f.write("|-------------|--------------|------------|-----------|--------|---------------|\n")
                for row in scenarios.utilization:
                    f.write(f"| {row.utilization_rate:g}% | {row.billable_hours:,.0f} | "
                            f"{self._money(row.break_even_rate)} | {self._money(row.profit_per_hour)} | "
                            f"{format_percent(row.profit_margin_percent)} ({row.margin_band.value}) | "
                            f"{self._money(row.total_annual_profit, 0)} |\n")
                f.write("\n")

                f.write("## Headcount Scalability\n\n")
                f.write("| Technicians | Fixed/Tech | Break-Even | Margin | Company Profit |\n")
                f.write("|-------------|------------|------------|--------|----------------|\n")
                for row in scenarios.headcount:
                    f.write(f"| {row.technician_count:,} | {self._money(row.fixed_cost_per_technician, 0)} | "
                            f"{self._money(row.break_even_rate)} | "
                            f"{format_percent(row.profit_margin_percent)} ({row.margin_band.value}) | "
                            f"{self._money(row.total_company_profit, 0)} |\n")
                f.write("\n")
                f.write(f"**Minimum utilization to break even:** "
                        f"{format_percent(scenarios.minimum_utilization_percent)}\n\n")

            f.write("## Assumptions\n\n")
            for assumption in ASSUMPTIONS:
                f.write(f"- {assumption}\n")
            f.write("\n")

            f.write("---\n\n")
            f.write(f"*Generated by Technician Rate Calculator v{__version__}*\n")

        logger.info(f"Markdown report written to {output_path}")


def _csv_number(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def generate_report(
    result: CalculationResult,
    format: str = 'table',
    output_path: Optional[Path] = None,
    currency: str = "USD",
    company_name: str = ""
) -> Optional[Dict[str, Any]]:
    """
    Generate a rate report in the specified format.

    Args:
        result: Computed metrics
        format: Output format ('table', 'json', 'csv', 'markdown')
        output_path: Optional output file path
        currency: Currency label
        company_name: Optional company name for titles

    Returns:
        Dict for JSON format, None for others
    """
    generator = RateReportGenerator(result, currency=currency, company_name=company_name)

    if format == 'table':
        generator.generate_cli_table()
        return None
    elif format == 'json':
        return generator.generate_json_report(output_path)
    elif format == 'csv':
        if not output_path:
            raise ValueError("output_path required for CSV format")
        generator.generate_csv_export(output_path)
        return None
    elif format == 'markdown':
        if not output_path:
            raise ValueError("output_path required for Markdown format")
        generator.generate_markdown_report(output_path)
        return None
    else:
        raise ValueError(f"Unknown format: {format}")
