"""Command-line interface for the Technician Rate Calculator."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from tech_rate_calculator import __version__
from tech_rate_calculator.categories import with_settings
from tech_rate_calculator.config import LoggingConfig, PolicyConfig, load_config, load_policy_config
from tech_rate_calculator.defaults import default_configuration
from tech_rate_calculator.engine import RateCalculator
from tech_rate_calculator.logger import setup_logging_from_config
from tech_rate_calculator.reporting import RateReportGenerator, generate_report
from tech_rate_calculator.snapshot import SnapshotImportError, load_snapshot, save_snapshot


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default="config/config.yaml",
    help="Path to configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def main(ctx: click.Context, config: Path, verbose: bool) -> None:
    """Technician Rate Calculator - burdened cost and break-even billing rates.

    Loads a configuration snapshot, computes the fully burdened cost of a
    technician and reports break-even rate, margin and what-if scenarios.
    """
    ctx.ensure_object(dict)

    logger = logging.getLogger(__name__)

    try:
        ctx.obj["config"] = load_config(config)
    except FileNotFoundError:
        ctx.obj["config"] = {}
    except Exception as e:
        setup_logging_from_config(LoggingConfig(), verbose)
        logger.error(f"Error loading configuration: {e}")
        sys.exit(1)

    logging_config = LoggingConfig(**ctx.obj["config"].get("logging", {}))
    setup_logging_from_config(logging_config, verbose)
    logger.info(f"Technician Rate Calculator v{__version__}")

    if ctx.obj["config"]:
        logger.debug(f"Loaded configuration from {config}")
        ctx.obj["policy"] = PolicyConfig(**ctx.obj["config"].get("policy", {}))
    else:
        logger.warning(f"Configuration file not found: {config}")
        logger.warning("Using default configuration")
        ctx.obj["policy"] = load_policy_config()


def _apply_overrides(config, technicians, utilization, target_rate, fee_percentage):
    overrides = {}
    if technicians is not None:
        overrides["technician_count"] = technicians
    if utilization is not None:
        overrides["utilization_rate"] = utilization
    if target_rate is not None:
        overrides["target_billing_rate"] = target_rate
    if fee_percentage is not None:
        overrides["payment_fee_enabled"] = True
        overrides["payment_fee_percentage"] = fee_percentage
    return with_settings(config, **overrides) if overrides else config


@main.command()
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(output: Path, force: bool) -> None:
    """Write the sample configuration to a snapshot file.

    OUTPUT: Path of the snapshot JSON to create
    """
    if output.exists() and not force:
        click.echo(f"Error: {output} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    save_snapshot(default_configuration(), output)
    click.echo(f"Sample configuration written to: {output}")


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file for the report (format auto-detected from extension or use --format)",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json", "csv", "markdown"]),
    default="table",
    help="Output format (default: table for CLI display)",
)
@click.option("--technicians", "-t", type=int, help="Override the technician count")
@click.option("--utilization", "-u", type=float, help="Override the utilization rate (0-100)")
@click.option("--target-rate", "-r", type=float, help="Override the target billing rate")
@click.option("--fee", "fee_percentage", type=float, help="Enable payment fees at this percentage")
@click.option("--no-scenarios", is_flag=True, help="Skip the what-if tables")
@click.pass_context
def calculate(
    ctx: click.Context,
    snapshot: Path,
    output: Optional[Path],
    format: str,
    technicians: Optional[int],
    utilization: Optional[float],
    target_rate: Optional[float],
    fee_percentage: Optional[float],
    no_scenarios: bool,
) -> None:
    """Calculate break-even rate and margin from a configuration snapshot.

    SNAPSHOT: Path to the exported configuration JSON
    """
    logger = logging.getLogger(__name__)
    report_config = ctx.obj.get("config", {}).get("report", {})

    logger.info(f"Processing snapshot: {snapshot}")

    try:
        config = load_snapshot(snapshot)
        config = _apply_overrides(config, technicians, utilization, target_rate, fee_percentage)

        calculator = RateCalculator(ctx.obj["policy"])
        result = calculator.calculate(config, include_scenarios=not no_scenarios)

        # Auto-detect format from output file extension if output specified
        report_format = format
        if output:
            ext = output.suffix.lower()
            if ext == '.json':
                report_format = 'json'
            elif ext == '.csv':
                report_format = 'csv'
            elif ext in ['.md', '.markdown']:
                report_format = 'markdown'

        report_kwargs = {
            "currency": report_config.get("currency", "USD"),
            "company_name": report_config.get("company_name", ""),
        }

        if report_format == 'table':
            generate_report(result, format='table', **report_kwargs)
        else:
            if not output:
                output = Path(f"rate_report.{'md' if report_format == 'markdown' else report_format}")

            generate_report(result, format=report_format, output_path=output, **report_kwargs)
            click.echo(f"\n{report_format.upper()} report saved to: {output}")
            logger.info(f"Report written to {output}")

    except SnapshotImportError as e:
        logger.error(f"Could not import snapshot: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Error during calculation: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def scenarios(ctx: click.Context, snapshot: Path) -> None:
    """Show utilization and headcount what-if tables.

    SNAPSHOT: Path to the exported configuration JSON
    """
    try:
        config = load_snapshot(snapshot)
    except SnapshotImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    result = RateCalculator(ctx.obj["policy"]).calculate(config)
    RateReportGenerator(result).generate_scenario_tables()


@main.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the configuration file."""
    logger = logging.getLogger(__name__)
    config = ctx.obj.get("config", {})

    if not config:
        click.echo("No configuration loaded or configuration is empty.")
        sys.exit(1)

    policy = ctx.obj["policy"]
    click.echo("Configuration is valid!")
    click.echo()
    click.echo("Policy:")
    click.echo(f"  Payroll Tax Rate: {policy.payroll_tax_rate * 100:.2f}%")
    for code, amount in policy.unemployment_insurance.items():
        click.echo(f"  Unemployment Insurance ({code}): ${amount:,.2f}/yr")
    click.echo(f"  Target Margin: {policy.target_margin_percent:g}%")
    click.echo(f"  Utilization Offsets: {', '.join(f'{o:+g}' for o in policy.utilization_offsets)}")
    click.echo(f"  Headcount Candidates: {', '.join(str(c) for c in policy.headcount_candidates)}")
    click.echo()
    click.echo("Logging:")
    click.echo(f"  Level: {config.get('logging', {}).get('level', 'not set')}")
    logger.info("Configuration validation successful")


if __name__ == "__main__":
    main()
