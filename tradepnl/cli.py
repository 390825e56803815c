"""Typer CLI interface for tradepnl."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tradepnl.config import Settings, get_settings
from tradepnl.engines.aggregation import compute_summary, compute_symbol_summaries, pnl_distribution
from tradepnl.engines.fifo import calculate_realized_pnl
from tradepnl.engines.filters import filter_fills, filter_trades_for_display
from tradepnl.exceptions import ConfigError, PositionValidationError
from tradepnl.ingestion.execution_history import ExecutionHistoryAdapter, parse_japanese_date
from tradepnl.ingestion.loader import LoadResult, load_files
from tradepnl.ingestion.positions import load_opening_positions, positions_template
from tradepnl.logging_setup import configure_logging
from tradepnl.models.enums import OutputFormat
from tradepnl.models.fills import OpeningPosition
from tradepnl.models.reports import FilterState
from tradepnl.models.trades import PnlResult, RealizedTrade
from tradepnl.reports.pnl_report import PnlReportGenerator, format_percent, format_ratio, format_yen

app = typer.Typer(
    name="tradepnl",
    help="Realized P&L (FIFO) from brokerage execution-history CSV exports.",
)

console = Console()

FILES_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, help="Execution-history CSV files")
POSITIONS_OPTION = typer.Option(
    None, "--positions", "-p", exists=True, dir_okay=False,
    help="JSON file with opening positions",
)
DATE_FROM_OPTION = typer.Option(None, "--from", help="First trade date to include (YYYY/MM/DD)")
DATE_TO_OPTION = typer.Option(None, "--to", help="Last trade date to include (YYYY/MM/DD)")
ACCOUNT_OPTION = typer.Option("", "--account", "-a", help="Only this account type (預り)")
SYMBOL_OPTION = typer.Option("", "--symbol", "-s", help="Substring of symbol code or name")
EXCLUDE_OPTION = typer.Option(
    False, "--exclude-uncalculable", help="Hide trades whose P&L could not be computed",
)


@dataclass
class Computation:
    loaded: LoadResult
    pnl: PnlResult
    display_trades: list[RealizedTrade]


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _filter_state(
    date_from: str | None,
    date_to: str | None,
    account: str,
    symbol: str,
    exclude_uncalculable: bool,
) -> FilterState:
    bounds = {}
    for name, raw in (("--from", date_from), ("--to", date_to)):
        if raw:
            parsed = parse_japanese_date(raw)
            if parsed is None:
                raise typer.BadParameter(f"not a date: {raw}", param_hint=name)
            bounds[name] = parsed
    return FilterState(
        date_from=bounds.get("--from"),
        date_to=bounds.get("--to"),
        account_type=account,
        symbol_search=symbol,
        include_uncalculable=not exclude_uncalculable,
    )


def _load_positions(positions: Path | None) -> list[OpeningPosition]:
    if positions is None:
        return []
    try:
        return load_opening_positions(positions)
    except (PositionValidationError, json.JSONDecodeError) as exc:
        typer.echo(f"Error: {positions.name}: {exc}", err=True)
        raise typer.Exit(1)


def _compute(
    settings: Settings,
    files: list[Path],
    positions: Path | None,
    state: FilterState,
) -> Computation:
    loaded = load_files(files, settings)
    for parsed in loaded.parse_results:
        if parsed.failed_rows or not parsed.fills:
            typer.echo(
                f"Warning: {parsed.source}: {parsed.failed_rows} rows failed, "
                f"{len(parsed.errors)} errors (see `tradepnl parse`)",
                err=True,
            )
    pnl = calculate_realized_pnl(filter_fills(loaded.fills, state), _load_positions(positions))
    return Computation(
        loaded=loaded,
        pnl=pnl,
        display_trades=filter_trades_for_display(pnl.trades, state),
    )


def _trades_table(trades: list[RealizedTrade]) -> Table:
    table = Table(title="Realized trades")
    for column in ("Date", "Code", "Name", "Account", "Qty", "Sell", "Avg buy", "Fees", "Tax", "P&L"):
        table.add_column(column, justify="right" if column in {"Qty", "Sell", "Avg buy", "Fees", "Tax", "P&L"} else "left")
    for trade in trades:
        if trade.realized_pnl is None:
            pnl_cell = f"[yellow]{trade.reason_if_null}[/yellow]"
        else:
            color = "green" if trade.realized_pnl > 0 else "red" if trade.realized_pnl < 0 else "white"
            pnl_cell = f"[{color}]{format_yen(trade.realized_pnl)}[/{color}]"
            if trade.fees_estimated:
                pnl_cell += " *"
        table.add_row(
            trade.trade_date,
            trade.symbol_code,
            escape(trade.symbol_name),
            escape(trade.account_type or ""),
            str(trade.quantity),
            format_yen(trade.sell_price),
            format_yen(trade.buy_price_avg),
            format_yen(trade.fees),
            format_yen(trade.tax),
            pnl_cell,
        )
    return table


def _print_missing(result: PnlResult) -> None:
    if not result.missing_cost_symbols:
        return
    console.print("\n[bold yellow]Missing cost basis[/bold yellow] (declare opening positions with --positions):")
    for entry in result.missing_cost_symbols:
        account = f" [{entry.account_type}]" if entry.account_type else ""
        console.print(escape(f"  {entry.symbol_code} {entry.symbol_name}{account}: {entry.short_quantity} shares"))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Shortcut for --log-level INFO"),
) -> None:
    """Realized P&L (FIFO) from brokerage execution-history CSV exports."""
    try:
        settings = get_settings()
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    level = (log_level or ("INFO" if verbose else settings.log_level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise typer.BadParameter(f"unknown log level: {level}", param_hint="--log-level")
    configure_logging(level)
    ctx.obj = settings.model_copy(update={"log_level": level})

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def parse(
    ctx: typer.Context,
    files: list[Path] = FILES_ARGUMENT,
) -> None:
    """Parse export files and show row counters and per-row errors."""
    settings = _settings(ctx)
    adapter = ExecutionHistoryAdapter(settings.legacy_encoding, settings.fallback_encoding)
    loaded = load_files(files, settings)

    table = Table(title="Parse results")
    for column in ("File", "Encoding", "Rows", "OK", "Failed", "Unknown fields"):
        table.add_column(column)
    for parsed in loaded.parse_results:
        table.add_row(
            parsed.source or "",
            parsed.encoding or "",
            str(parsed.total_rows),
            str(parsed.success_rows),
            str(parsed.failed_rows),
            str(parsed.unknown_field_count),
        )
    console.print(table)

    for parsed in loaded.parse_results:
        for message in adapter.validate(parsed):
            typer.echo(f"Warning: {message}", err=True)
        for error in parsed.errors:
            typer.echo(f"{parsed.source}: {error}")

    totals = loaded.summary
    if totals.success_rows == 0:
        raise typer.Exit(1)


@app.command()
def summary(
    ctx: typer.Context,
    files: list[Path] = FILES_ARGUMENT,
    positions: Path | None = POSITIONS_OPTION,
    date_from: str | None = DATE_FROM_OPTION,
    date_to: str | None = DATE_TO_OPTION,
    account: str = ACCOUNT_OPTION,
    symbol: str = SYMBOL_OPTION,
    exclude_uncalculable: bool = EXCLUDE_OPTION,
) -> None:
    """Show win/loss statistics, drawdown and per-symbol totals."""
    state = _filter_state(date_from, date_to, account, symbol, exclude_uncalculable)
    computed = _compute(_settings(ctx), files, positions, state)
    stats = compute_summary(computed.display_trades)

    table = Table(title="Realized P&L summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total P&L", format_yen(stats.total_pnl))
    table.add_row("Calculable / uncalculable", f"{stats.calculable_count} / {stats.uncalculable_count}")
    table.add_row("Win / loss / draw", f"{stats.win_count} / {stats.loss_count} / {stats.draw_count}")
    table.add_row("Win rate", format_percent(stats.win_rate))
    table.add_row("Average win", format_yen(stats.avg_win))
    table.add_row("Average loss", format_yen(stats.avg_loss))
    table.add_row("Profit factor", format_ratio(stats.profit_factor))
    table.add_row("Max drawdown", format_yen(stats.max_drawdown))
    console.print(table)

    symbols = Table(title="By symbol")
    for column in ("Code", "Name", "Total P&L", "Wins", "Losses", "Trades", "Win rate"):
        symbols.add_column(column)
    for row in compute_symbol_summaries(computed.display_trades):
        symbols.add_row(
            row.symbol_code,
            escape(row.symbol_name),
            format_yen(row.total_pnl),
            str(row.win_count),
            str(row.loss_count),
            str(row.trade_count),
            format_percent(row.win_rate),
        )
    console.print(symbols)

    buckets = pnl_distribution(computed.display_trades, _settings(ctx).distribution_buckets)
    if buckets:
        console.print("\nP&L distribution:")
        width = max(bucket.count for bucket in buckets)
        for bucket in buckets:
            bar = "#" * max(1, round(30 * bucket.count / width))
            console.print(f"  {bucket.label:>16} {bar} {bucket.count}")

    _print_missing(computed.pnl)


@app.command()
def trades(
    ctx: typer.Context,
    files: list[Path] = FILES_ARGUMENT,
    positions: Path | None = POSITIONS_OPTION,
    date_from: str | None = DATE_FROM_OPTION,
    date_to: str | None = DATE_TO_OPTION,
    account: str = ACCOUNT_OPTION,
    symbol: str = SYMBOL_OPTION,
    exclude_uncalculable: bool = EXCLUDE_OPTION,
    output_format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="table or json"),
) -> None:
    """List one realized trade per SELL fill."""
    state = _filter_state(date_from, date_to, account, symbol, exclude_uncalculable)
    computed = _compute(_settings(ctx), files, positions, state)

    if output_format == OutputFormat.JSON:
        payload = {
            "trades": [trade.model_dump(mode="json") for trade in computed.display_trades],
            "missing_cost_symbols": [
                entry.model_dump(mode="json") for entry in computed.pnl.missing_cost_symbols
            ],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    console.print(_trades_table(computed.display_trades))
    if any(trade.fees_estimated and trade.is_calculable for trade in computed.display_trades):
        console.print("* fees or tax unknown, counted as zero")
    _print_missing(computed.pnl)


@app.command()
def missing(
    ctx: typer.Context,
    files: list[Path] = FILES_ARGUMENT,
    positions: Path | None = POSITIONS_OPTION,
) -> None:
    """Print a JSON opening-position template for sells without cost basis.

    Fill in avg_cost and pass the file back with --positions.
    """
    computed = _compute(_settings(ctx), files, positions, FilterState())
    typer.echo(
        json.dumps(positions_template(computed.pnl.missing_cost_symbols), ensure_ascii=False, indent=2)
    )


@app.command()
def report(
    ctx: typer.Context,
    files: list[Path] = FILES_ARGUMENT,
    positions: Path | None = POSITIONS_OPTION,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the report to this file"),
    date_from: str | None = DATE_FROM_OPTION,
    date_to: str | None = DATE_TO_OPTION,
    account: str = ACCOUNT_OPTION,
    symbol: str = SYMBOL_OPTION,
    exclude_uncalculable: bool = EXCLUDE_OPTION,
) -> None:
    """Render a plain-text realized P&L report."""
    state = _filter_state(date_from, date_to, account, symbol, exclude_uncalculable)
    computed = _compute(_settings(ctx), files, positions, state)
    text = PnlReportGenerator().render(
        summary=compute_summary(computed.display_trades),
        symbols=compute_symbol_summaries(computed.display_trades),
        trades=computed.display_trades,
        missing=computed.pnl.missing_cost_symbols,
        parse_summary=computed.loaded.summary,
    )
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    typer.echo(f"Report written to {output}")
