"""Command-line interface for trend overlay."""

import json

import click
from rich.console import Console

from trend_overlay import __version__
from trend_overlay.config import get_settings, load_settings
from trend_overlay.data.chart_file import ChartFileError, load_chart
from trend_overlay.data.extractor import PointExtractor, as_number
from trend_overlay.fitting import FITTERS, ExponentialFitter, LinearFitter, create_fitter
from trend_overlay.rendering.legend import build_legend
from trend_overlay.rendering.overlay import TrendlineOverlay
from trend_overlay.rendering.surface import RecordingSurface
from trend_overlay.utils.logging import setup_logging

console = Console()


def _fmt(value: float | None, digits: int = 4) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Trend Overlay - fit and place trendlines on charts."""
    ctx.ensure_object(dict)

    settings = load_settings(config) if config else get_settings()
    ctx.obj["settings"] = settings

    log_level = "DEBUG" if verbose else settings.logging.level
    setup_logging(log_level, json_logs=settings.logging.json_logs)


@cli.command()
@click.argument("values", nargs=-1, required=True)
@click.option(
    "--kind",
    type=click.Choice(sorted(FITTERS)),
    default="linear",
    help="Curve to fit",
)
@click.option(
    "--offset",
    type=int,
    default=0,
    help="Skip leading (positive) or trailing (negative) values",
)
@click.option("--at", "at_x", type=float, multiple=True, help="Evaluate the fit at this x (repeatable)")
def fit(values: tuple[str, ...], kind: str, offset: int, at_x: tuple[float, ...]) -> None:
    """
    Fit a series of y values indexed 0, 1, 2, ...

    VALUES may be given as separate arguments or comma-separated; use
    'null' for gaps.
    """
    from rich.table import Table

    raw = [v for arg in values for v in arg.split(",") if v.strip()]
    data = [None if v.strip().lower() in {"null", "none"} else as_number(v) for v in raw]

    fitter = create_fitter(kind)
    PointExtractor(offset=offset).feed(fitter, data)

    table = Table(title=f"{kind.capitalize()} fit", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Points", str(fitter.count))
    table.add_row("x range", f"{_fmt(fitter.min_x, 2)} .. {_fmt(fitter.max_x, 2)}" if fitter.count else "-")

    if isinstance(fitter, LinearFitter):
        table.add_row("Slope", _fmt(fitter.slope()))
        table.add_row("Intercept", _fmt(fitter.intercept()))
        table.add_row("x-intercept", _fmt(fitter.x_intercept()))
    elif isinstance(fitter, ExponentialFitter):
        table.add_row("Coefficient (a)", _fmt(fitter.coefficient()))
        table.add_row("Growth rate (b)", _fmt(fitter.growth_rate()))
        table.add_row("R²", _fmt(fitter.correlation()))
        table.add_row("Valid data", "yes" if fitter.valid_data else "[red]no[/red]")

    for x in at_x:
        table.add_row(f"f({x:g})", _fmt(fitter.value_at(x)))

    console.print(table)
    if not fitter.has_fit:
        console.print("[yellow]Fewer than 2 usable points - no trendline would be drawn[/yellow]")


@cli.command()
@click.argument("chart_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--legend", "show_legend", is_flag=True, help="Also list the trendline legend entries")
@click.pass_context
def resolve(ctx: click.Context, chart_file: str, output_format: str, show_legend: bool) -> None:
    """Resolve the trendline segments a chart file would draw."""
    from rich.table import Table

    settings = ctx.obj["settings"]

    try:
        chart = load_chart(chart_file)
    except ChartFileError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    surface = RecordingSurface()
    results = TrendlineOverlay(settings).draw(chart, surface)
    legend = build_legend(chart, settings=settings) if show_legend else []

    if output_format == "json":
        payload = {
            "trendlines": [r.to_dict() for r in results],
            "commands": len(surface.commands),
        }
        if show_legend:
            payload["legend"] = [entry.to_dict() for entry in legend]
        click.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Trendlines ({len(results)})")
    table.add_column("Dataset", justify="right", style="cyan")
    table.add_column("Kind")
    table.add_column("Points", justify="right")
    table.add_column("Scale", justify="right")
    table.add_column("Segment (px)")
    table.add_column("Label")

    for r in results:
        segment = (
            "({:.1f}, {:.1f}) -> ({:.1f}, {:.1f})".format(*r.segment.as_tuple())
            if r.segment
            else "[dim]not drawn[/dim]"
        )
        table.add_row(
            str(r.dataset_index),
            r.kind,
            str(r.count),
            _fmt(r.scale),
            segment,
            r.label_text or "",
        )

    console.print(table)

    if show_legend:
        legend_table = Table(title="Legend entries")
        legend_table.add_column("Text", style="cyan")
        legend_table.add_column("Stroke")
        legend_table.add_column("Width", justify="right")
        for entry in legend:
            legend_table.add_row(entry.text, entry.stroke_style, f"{entry.line_width:g}")
        console.print(legend_table)


if __name__ == "__main__":
    cli()
