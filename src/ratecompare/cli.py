"""Command-line interface for comparing electricity rate plans."""

import json
import logging
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .analysis.summary import AnalysisResult, analyze_records, build_summary, format_summary_text
from .analysis.weather import DEFAULT_BASE_TEMP_F, calculate_degree_days
from .collectors import open_meteo, usage_export
from .config import analysis_config_from_env, get_default_zip, load_rate_table
from .demo import DEFAULT_END, DEFAULT_START, generate_demo_records, generate_demo_weather
from .rates import SCHEDULE_NAMES, Schedule
from .tariffs import TariffConfigError, rate_table_as_rows

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.option("--tariffs", type=click.Path(exists=True), help="Path to a tariffs.yaml rate table")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, tariffs, verbose):
    """Compare flat and time-of-use electricity plans against interval usage."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["table"] = load_rate_table(Path(tariffs) if tariffs else None)
        ctx.obj["config"] = analysis_config_from_env()
    except (TariffConfigError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def print_monthly_table(result: AnalysisResult) -> None:
    table = Table(title="Monthly Costs")
    table.add_column("Month", style="cyan")
    table.add_column("Usage (kWh)", justify="right")
    table.add_column("Peak (kWh)", justify="right")
    table.add_column("Flat", justify="right")
    table.add_column("TOU", justify="right")
    table.add_column("TOU + Super", justify="right")

    for m in result.monthly_stats:
        table.add_row(
            m.month,
            f"{m.total_usage:.2f}",
            f"{m.peak_usage:.2f}",
            f"${m.flat_cost:.2f}",
            f"${m.tou_cost:.2f}",
            f"${m.tou_super_cost:.2f}",
        )

    console.print(table)


def print_plan_table(summary: dict) -> None:
    plans = summary["plans"]
    table = Table(title=f"Plan Comparison ({summary['period']['months']} months)")
    table.add_column("Plan", style="cyan")
    table.add_column("Schedule")
    table.add_column("Total", justify="right")
    table.add_column("Per month", justify="right")
    table.add_column("Per year", justify="right")
    table.add_column("vs current", justify="right")

    for plan in plans["costs"]:
        schedule = Schedule(plan["schedule"])
        name, label = SCHEDULE_NAMES[schedule]
        if plan["schedule"] == plans["best"]:
            name = f"[green]{name}[/green]"
        savings = plan["savings_vs_current"]
        color = "green" if savings > 0 else "red" if savings < 0 else "dim"
        table.add_row(
            name,
            label,
            f"${plan['total']:.2f}",
            f"${plan['monthly']:.2f}",
            f"${plan['yearly']:.2f}",
            f"[{color}]{savings:+.2f}[/{color}]",
        )

    console.print(table)


def report(result: AnalysisResult, current_plan: Schedule, as_json: bool) -> None:
    data = build_summary(result, current_plan)
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    print_monthly_table(result)
    print_plan_table(data)
    console.print()
    console.print(format_summary_text(data), highlight=False)


def load_weather(zip_code: str | None, export: usage_export.UsageExport):
    """Fetch weather for the export's date range, or None if it can't be fetched."""
    try:
        weather = open_meteo.fetch_weather_for_zip(zip_code, export.start_date, export.end_date)
    except open_meteo.WeatherError as e:
        console.print(f"[yellow]Weather unavailable, continuing without it: {e}[/yellow]")
        return None
    console.print(f"[cyan]Fetched {len(weather)} days of weather for {zip_code or 'Seattle'}[/cyan]")
    return weather


@cli.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--zip", "zip_code", help="Zip code for weather (default: from the export address)")
@click.option("--no-weather", is_flag=True, help="Skip fetching weather data")
@click.option(
    "--plan",
    type=click.Choice([s.value for s in Schedule]),
    default=Schedule.FLAT.value,
    help="Your current plan (default: flat)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze(ctx, csv_path, zip_code, no_weather, plan, as_json):
    """Analyze a usage export CSV and compare rate plans."""
    try:
        export = usage_export.load_export(Path(csv_path))
    except usage_export.NoUsageDataError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)
    logger.debug("Loaded %d records from %s (zip %s)", len(export.records), csv_path, export.zip_code)

    weather = None
    if not no_weather:
        zip_code = zip_code or export.zip_code or get_default_zip()
        weather = load_weather(zip_code, export)

    result = analyze_records(export.records, weather, ctx.obj["table"], ctx.obj["config"])
    report(result, Schedule(plan), as_json)


@cli.command()
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=DEFAULT_START.isoformat(),
    help="First day of demo data (YYYY-MM-DD)",
)
@click.option(
    "--end",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=DEFAULT_END.isoformat(),
    help="Last day of demo data (YYYY-MM-DD)",
)
@click.option("--seed", type=int, help="Random seed for repeatable output")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def demo(ctx, start: datetime, end: datetime, seed, as_json):
    """Run the analysis on synthetic usage and weather."""
    if end < start:
        raise click.BadParameter("--end must not be before --start")

    records = generate_demo_records(start.date(), end.date(), seed)
    weather = generate_demo_weather(start.date(), end.date(), seed)
    result = analyze_records(records, weather, ctx.obj["table"], ctx.obj["config"])
    report(result, Schedule.FLAT, as_json)


@cli.command()
@click.pass_context
def rates(ctx):
    """Show the active rate table."""
    rate_table = ctx.obj["table"]

    table = Table(title=f"{rate_table.name} (effective {rate_table.effective_date})")
    table.add_column("Period", style="cyan")
    for schedule in Schedule:
        name, label = SCHEDULE_NAMES[schedule]
        table.add_column(f"{name}\n{label}")

    for row in rate_table_as_rows(rate_table):
        table.add_row(*row)

    console.print(table)
    console.print(
        f"[dim]Peak hours: weekdays {rate_table.morning_peak.start}-{rate_table.morning_peak.end} "
        f"and {rate_table.evening_peak.start}-{rate_table.evening_peak.end}. "
        f"Super off-peak: {rate_table.super_off_peak.start}-{rate_table.super_off_peak.end} daily.[/dim]"
    )


@cli.command("degree-days")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--zip", "zip_code", help="Zip code for weather (default: from the export address)")
@click.option("--base", default=DEFAULT_BASE_TEMP_F, help="Base temperature in °F (default: 65)")
@click.pass_context
def degree_days(ctx, csv_path, zip_code, base):
    """Show heating and cooling degree days for an export's date range."""
    try:
        export = usage_export.load_export(Path(csv_path))
    except usage_export.NoUsageDataError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    zip_code = zip_code or export.zip_code or get_default_zip()
    try:
        weather = open_meteo.fetch_weather_for_zip(zip_code, export.start_date, export.end_date)
    except open_meteo.WeatherError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    result = calculate_degree_days(weather, base)
    table = Table(title=f"Degree Days {export.start_date} to {export.end_date} (base {base:g}°F)")
    table.add_column("Measure", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Days with weather", str(len(weather)))
    table.add_row("Heating degree days", f"{result.heating:.1f}")
    table.add_row("Cooling degree days", f"{result.cooling:.1f}")
    console.print(table)


if __name__ == "__main__":
    cli()
