"""fioapi CLI application using Typer.

Thin wrapper around FioClient for manual downloads, marker maintenance and
offline inspection of stored reports.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table

from fioapi.config import get_settings
from fioapi.domain.banking.value_objects import (
    AccountStatementFormat,
    ParsedReport,
    RawPayload,
    TransactionReportFormat,
)
from fioapi.domain.shared.exceptions import FioError
from fioapi.infrastructure.fio import FioClient, parse_report
from fioapi.infrastructure.persistence import FileDownloadMarkerStore

T = TypeVar("T")

app = typer.Typer(
    name="fioapi",
    help="Fio banka transaction export client",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

DATE_FORMATS = ["%Y-%m-%d"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs full URLs, which contain the token
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _build_client() -> FioClient:
    settings = get_settings()
    return FioClient.from_settings(
        settings,
        FileDownloadMarkerStore(settings.marker_file),
    )


def _run(operation: Callable[[FioClient], Awaitable[T]]) -> T:
    """Run one client operation, turning domain errors into exit code 1."""

    async def _main() -> T:
        async with _build_client() as client:
            return await operation(client)

    try:
        return asyncio.run(_main())
    except FioError as e:
        err_console.print(f"[red]Error ({e.kind.value}):[/red] {e}")
        raise typer.Exit(code=1) from e


def _emit(payload: RawPayload, output: Path | None) -> None:
    if output is not None:
        output.write_bytes(payload.content)
        console.print(f"Wrote {payload.size} bytes to {output} ({payload.fmt.value})")
        return
    if payload.is_binary:
        err_console.print("[red]--output is required for binary formats (pdf)[/red]")
        raise typer.Exit(code=2)
    typer.echo(payload.text)


def _render_report(report: ParsedReport) -> None:
    account = report.account
    console.print(
        f"[bold]{account.account_id or '?'}/{account.bank_id or '?'}[/bold] "
        f"{account.iban or ''} {account.currency or ''}"
    )
    console.print(
        f"{account.date_start} .. {account.date_end}  "
        f"opening {account.opening_balance}  closing {account.closing_balance}"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Currency")
    table.add_column("Counterparty")
    table.add_column("VS")
    table.add_column("Message")
    for tx in report.transactions:
        style = "green" if tx.is_credit() else "red"
        table.add_row(
            tx.transaction_id,
            tx.booking_date.isoformat(),
            f"[{style}]{tx.amount}[/{style}]",
            tx.currency,
            tx.account_name or tx.account_id or "",
            tx.variable_symbol or "",
            tx.remittance_info or tx.user_identification or "",
        )
    console.print(table)
    console.print(f"[dim]{len(report.transactions)} transaction(s)[/dim]")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.callback()
def main() -> None:
    """Configure logging from FIO_LOG_LEVEL before any command runs."""
    _configure_logging(get_settings().log_level)


@app.command("fetch-period")
def fetch_period(
    start: datetime = typer.Option(..., formats=DATE_FORMATS, help="Start date"),
    end: datetime = typer.Option(..., formats=DATE_FORMATS, help="End date"),
    fmt: TransactionReportFormat = typer.Option(
        TransactionReportFormat.JSON,
        "--format",
        help="Output format",
    ),
    output: Path | None = typer.Option(None, help="Write payload to this file"),
) -> None:
    """Fetch transactions for a date range (inclusive)."""
    payload = _run(
        lambda client: client.fetch_transaction_report_for_period(
            start.date(),
            end.date(),
            fmt,
        )
    )
    _emit(payload, output)


@app.command("fetch-last")
def fetch_last(
    fmt: TransactionReportFormat = typer.Option(
        TransactionReportFormat.JSON,
        "--format",
        help="Output format",
    ),
    output: Path | None = typer.Option(None, help="Write payload to this file"),
    server: bool = typer.Option(
        False,
        "--server",
        help="Use the bank-side bookmark instead of the local marker",
    ),
) -> None:
    """Fetch transactions since the last successful download.

    The local marker is not advanced; run mark-downloaded afterwards.
    """
    if server:
        payload = _run(
            lambda client: client.fetch_transaction_report_since_server_bookmark(fmt)
        )
    else:
        payload = _run(
            lambda client: client.fetch_transaction_report_since_last_download(fmt)
        )
    _emit(payload, output)


@app.command("fetch-statement")
def fetch_statement(
    year: int = typer.Option(..., help="Statement year"),
    statement_id: int = typer.Option(..., help="Statement number within the year"),
    fmt: AccountStatementFormat = typer.Option(
        AccountStatementFormat.JSON,
        "--format",
        help="Output format",
    ),
    output: Path | None = typer.Option(None, help="Write payload to this file"),
) -> None:
    """Fetch an account statement by year and number."""
    payload = _run(
        lambda client: client.fetch_account_statement(year, statement_id, fmt)
    )
    _emit(payload, output)


@app.command("last-info")
def last_info() -> None:
    """Show year and number of the last account statement."""
    info = _run(lambda client: client.fetch_last_account_statement_info())
    console.print(f"year={info.year}, statement_id={info.statement_id}")


@app.command("set-last-id")
def set_last_id(
    transaction_id: int = typer.Option(..., help="Last downloaded transaction ID"),
) -> None:
    """Set the bank-side bookmark to a transaction ID."""
    _run(lambda client: client.set_server_bookmark_transaction_id(transaction_id))
    console.print(f"Set server bookmark to transaction id {transaction_id}")


@app.command("set-last-date")
def set_last_date(
    download_date: datetime = typer.Option(
        ...,
        "--date",
        formats=DATE_FORMATS,
        help="Date of the last unsuccessful download",
    ),
    server: bool = typer.Option(
        False,
        "--server",
        help="Set the bank-side bookmark instead of the local marker",
    ),
) -> None:
    """Reset the download marker to a known-good date."""
    value: date = download_date.date()
    if server:
        _run(lambda client: client.set_server_bookmark_date(value))
        console.print(f"Set server bookmark to {value}")
    else:
        _run(lambda client: client.set_last_unsuccessful_download_date(value))
        console.print(f"Set last unsuccessful download date to {value}")


@app.command("mark-downloaded")
def mark_downloaded(
    until: datetime = typer.Option(
        ...,
        formats=DATE_FORMATS,
        help="Last date covered by the processed report",
    ),
) -> None:
    """Advance the local marker after a report was processed."""
    marker = _run(lambda client: client.mark_downloaded(until.date()))
    console.print(f"Download marker advanced to {marker}")


@app.command("parse")
def parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
) -> None:
    """Parse a stored json report offline and print its transactions."""
    try:
        report = parse_report(path.read_bytes())
    except FioError as e:
        err_console.print(f"[red]Error ({e.kind.value}):[/red] {e}")
        raise typer.Exit(code=1) from e
    _render_report(report)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
