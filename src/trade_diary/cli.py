"""CLI entry point for the trade diary."""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

import click

from .core.config import Settings, load_settings
from .core.errors import JournalError
from .observability.logger import get_logger, new_run_id, setup_logging

log = get_logger(__name__)


@contextmanager
def _journal_errors() -> Iterator[None]:
    """Report domain errors as a clean CLI failure (exit status 1)."""
    try:
        yield
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc


def _open_store(settings: Settings):
    from .journal.store import JsonFileTradeStore

    return JsonFileTradeStore(settings.journal_path)


@click.group()
@click.option("--config", default="configs/diary.toml", help="Config file path")
@click.option("--journal", default=None, help="Journal file override")
@click.pass_context
def main(ctx: click.Context, config: str, journal: str | None) -> None:
    """Trade Diary: journal trades and analyse your performance."""
    overrides: dict = {}
    if journal:
        overrides["journal_path"] = journal
    with _journal_errors():
        settings = load_settings(config_path=config, overrides=overrides)
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_run_id()
    log.debug("cli_start", command=ctx.invoked_subcommand, journal=settings.journal_path)
    ctx.obj = settings


@main.command()
@click.option("--type", "operation_type", type=click.Choice(["buy", "sell"]), required=True)
@click.option("--asset", required=True, help="Symbol, e.g. EURUSD")
@click.option("--lots", required=True, help="Position size in lots")
@click.option("--entry", "entry_price", required=True, help="Entry price")
@click.option("--stop", "stop_loss", required=True, help="Stop loss price")
@click.option("--target", "take_profit", required=True, help="Take profit price")
@click.option("--result", required=True, help="Realised profit (negative for a loss)")
@click.option("--reason", "reasons", multiple=True, required=True, help="Entry reason tag (repeatable)")
@click.option("--description", default="", help="Free-text notes")
@click.option("--date", "trade_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Execution date (YYYY-MM-DD), default today")
@click.option("--time", "trade_time", default=None, help="Execution time (HH:MM), default now")
@click.pass_obj
def add(
    settings: Settings,
    operation_type: str,
    asset: str,
    lots: str,
    entry_price: str,
    stop_loss: str,
    take_profit: str,
    result: str,
    reasons: tuple[str, ...],
    description: str,
    trade_date: datetime | None,
    trade_time: str | None,
) -> None:
    """Record a trade."""
    from .journal.store import build_trade

    now = datetime.now()
    with _journal_errors():
        trade = build_trade(
            operation_type=operation_type,
            asset=asset,
            lots=lots,
            entry_price=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            result=result,
            reasons=reasons,
            description=description,
            date=(trade_date or now).date(),
            time=trade_time or now.strftime("%H:%M"),
        )
        _open_store(settings).add(trade)
    click.echo(f"Recorded {trade.id}")


@main.command()
@click.argument("trade_id")
@click.option("--type", "operation_type", type=click.Choice(["buy", "sell"]), default=None)
@click.option("--asset", default=None)
@click.option("--lots", default=None)
@click.option("--entry", "entry_price", default=None)
@click.option("--stop", "stop_loss", default=None)
@click.option("--target", "take_profit", default=None)
@click.option("--result", default=None)
@click.option("--reason", "reasons", multiple=True, help="Replaces all reasons when given")
@click.option("--description", default=None)
@click.option("--date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--time", default=None)
@click.pass_obj
def edit(settings: Settings, trade_id: str, **changes: Any) -> None:
    """Edit a trade.  Omitted options keep their recorded value."""
    from .journal.store import build_trade

    if changes["date"] is not None:
        changes["date"] = changes["date"].date()
    with _journal_errors():
        store = _open_store(settings)
        fields = store.get(trade_id).model_dump(exclude={"created_at", "updated_at"})
        fields.update({k: v for k, v in changes.items() if v is not None and v != ()})
        store.update(build_trade(**fields))
    click.echo(f"Updated {trade_id}")


@main.command("list")
@click.option("--asset", default=None, help="Only this asset")
@click.option("--result", "result_filter", type=click.Choice(["all", "positive", "negative"]),
              default="all", help="Filter by result sign")
@click.pass_obj
def list_trades(settings: Settings, asset: str | None, result_filter: str) -> None:
    """Show journaled trades, newest first."""
    from .journal.formatting import asset_icon, currency_formatter, format_date
    from .journal.history import (
        ResultFilter,
        distinct_assets,
        filter_trades,
        most_recent_first,
    )
    from .journal.record import reason_label

    currency = currency_formatter(settings.display)
    journal = _open_store(settings).list()
    trades = filter_trades(journal, asset=asset, result=ResultFilter(result_filter))
    if not trades:
        click.echo("No trades found.")
        if asset and journal:
            click.echo(f"Assets in journal: {', '.join(distinct_assets(journal))}")
        return

    for t in most_recent_first(trades):
        reasons = ", ".join(reason_label(r) for r in t.reasons)
        click.echo(
            f"{format_date(t.date)} {t.time:%H:%M}  {asset_icon(t.asset):>2} {t.asset:<8} "
            f"{t.operation_type.value:<4} {t.lots} lots  {currency(float(t.result)):>14}  "
            f"[{reasons}]  {t.id}"
        )


@main.command()
@click.argument("trade_id")
@click.pass_obj
def delete(settings: Settings, trade_id: str) -> None:
    """Delete a trade by id."""
    with _journal_errors():
        _open_store(settings).delete(trade_id)
    click.echo(f"Deleted {trade_id}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of text")
@click.pass_obj
def report(settings: Settings, as_json: bool) -> None:
    """Show statistics, breakdowns and insights."""
    from .journal.formatting import currency_formatter
    from .journal.report import build_report

    result = build_report(_open_store(settings).list(), settings)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    for line in result.summary_lines(currency_formatter(settings.display)):
        click.echo(line)


@main.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv")
@click.option("--output", default=None, type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.pass_obj
def export(settings: Settings, fmt: str, output: str | None) -> None:
    """Export the journal as CSV or JSON."""
    from .journal.export import TradeExporter

    exporter = TradeExporter()
    trades = _open_store(settings).list()
    text = exporter.to_csv(trades) if fmt == "csv" else exporter.to_json(trades)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Exported {len(trades)} trades to {output}")
    else:
        click.echo(text, nl=False)


@main.command()
@click.option("--period", type=click.Choice(["daily", "weekly", "monthly"]), default="monthly")
@click.pass_obj
def periodic(settings: Settings, period: str) -> None:
    """Summarise performance per day, week or month."""
    from .journal.export import TradeExporter

    summary = TradeExporter().periodic_report(_open_store(settings).list(), period=period)
    click.echo(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
