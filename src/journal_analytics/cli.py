"""CLI entry point for the journal analytics engine.

Reads a JSON array of trade records and prints the computed analytics
as JSON on stdout.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, TextIO

import click

from .core.config import AnalyticsSettings, load_settings
from .core.enums import Lookback, PeriodKind
from .core.errors import AnalyticsError
from .observability.logger import setup_logging

logger = logging.getLogger(__name__)


def _load_records(source: TextIO) -> list:
    from .journal.record import TradeRecord, validate_records

    try:
        raw = json.load(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Records file is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise click.ClickException("Records file must contain a JSON array")
    try:
        records = validate_records(TradeRecord.from_dict(item) for item in raw)
    except (AnalyticsError, TypeError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    logger.debug("Loaded %d records from %s", len(records), getattr(source, "name", "<stream>"))
    return records


def _emit(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.group()
@click.option("--config", default=None, type=click.Path(dir_okay=False), help="Config file path")
@click.option("--log-level", default=None, help="Override log level")
@click.pass_context
def main(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """Trading journal performance analytics."""
    try:
        settings = load_settings(config)
    except AnalyticsError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(
        level=log_level or settings.observability.log_level,
        format=settings.observability.log_format,
    )
    ctx.obj = settings


@main.command()
@click.argument("records_file", type=click.File("r"))
@click.option(
    "--lookback",
    type=click.Choice([lb.value for lb in Lookback]),
    default=Lookback.ALL.value,
    help="Only include recent records",
)
@click.option("--strategy", default=None, help="Only include one strategy")
@click.option("--by-strategy", is_flag=True, help="Report metrics per strategy")
@click.option("--reference", type=click.DateTime(), default=None, help="Lookback end instant")
@click.pass_obj
def metrics(
    settings: AnalyticsSettings,
    records_file: TextIO,
    lookback: str,
    strategy: str | None,
    by_strategy: bool,
    reference: datetime | None,
) -> None:
    """Compute performance metrics."""
    from .journal.breakdown import metrics_by_strategy
    from .journal.periods import filter_lookback, filter_strategy

    records = _load_records(records_file)
    records = filter_strategy(records, strategy)
    records = filter_lookback(records, lookback, reference or datetime.now())
    calculator = settings.build_calculator()

    if by_strategy:
        per_strategy = metrics_by_strategy(records, calculator)
        _emit({name: m.to_dict() for name, m in per_strategy.items()})
        return
    _emit(calculator.compute(records).to_dict())


@main.command()
@click.argument("records_file", type=click.File("r"))
@click.option(
    "--compare",
    type=click.Choice([k.value for k in PeriodKind]),
    default=None,
    help="Compare the current period against the previous one",
)
@click.option("--reference", type=click.DateTime(), default=None, help="Comparison reference instant")
@click.pass_obj
def heatmap(
    settings: AnalyticsSettings,
    records_file: TextIO,
    compare: str | None,
    reference: datetime | None,
) -> None:
    """Compute the weekday x hour heatmap."""
    from .journal.heatmap import best_slot, summarize_comparison, worst_slot

    records = _load_records(records_file)
    aggregator = settings.build_aggregator()

    cells: list
    payload: dict[str, Any] = {}
    if compare:
        cells = aggregator.compare_bucket(records, compare, reference)
        payload["summary"] = summarize_comparison(cells).to_dict()
    else:
        cells = aggregator.bucket(records)

    best, worst = best_slot(cells), worst_slot(cells)
    payload["cells"] = [c.to_dict() for c in cells]
    payload["best_slot"] = best.to_dict() if best else None
    payload["worst_slot"] = worst.to_dict() if worst else None
    _emit(payload)


@main.command()
@click.argument("records_file", type=click.File("r"))
@click.pass_obj
def breakdown(settings: AnalyticsSettings, records_file: TextIO) -> None:
    """Compute daily/monthly/yearly/hourly series."""
    from .journal.breakdown import compute_breakdown

    _emit(compute_breakdown(_load_records(records_file)).to_dict())
