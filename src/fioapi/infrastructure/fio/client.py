"""HTTP client for the Fio banka transaction-export API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from fioapi.domain.banking.exceptions import InvalidRequestError
from fioapi.domain.banking.value_objects import (
    AccountInfo,
    AccountStatementFormat,
    DownloadAddressing,
    LastStatementInfo,
    ParsedReport,
    PeriodAddressing,
    RawPayload,
    ReportFormat,
    SinceLastDownloadAddressing,
    StatementAddressing,
    TransactionReportFormat,
    coerce_format,
)
from fioapi.domain.shared.time import today_at_bank
from fioapi.domain.shared.value_objects import ApiToken
from fioapi.infrastructure.fio.error_mapper import map_status, map_transport_error
from fioapi.infrastructure.fio.log_redaction import install_token_redaction
from fioapi.infrastructure.fio.payload_parser import (
    parse_last_statement_info,
    parse_report,
)
from fioapi.infrastructure.fio.request_builder import (
    as_transaction_format,
    build_last_statement_path,
    build_report_path,
    build_server_bookmark_path,
    build_set_last_date_path,
    build_set_last_id_path,
    resolve_since_last_download,
)

if TYPE_CHECKING:
    from fioapi.config.settings import Settings
    from fioapi.domain.banking.ports import DownloadMarkerPort

logger = logging.getLogger(__name__)

BASE_URL = "https://fioapi.fio.cz/v1/rest"
DEFAULT_TIMEOUT = 10.0


class FioClient:
    """Async client wrapper for the bank's REST API.

    Every fetch is exactly one HTTP round trip: no retries, no caching.
    Non-2xx responses and transport failures are raised as the closed
    FioError taxonomy. The only state the client writes is the download
    marker, and only through the explicit marker operations.
    """

    def __init__(
        self,
        token: str | ApiToken,
        marker_store: DownloadMarkerPort | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        today: Callable[[], date] = today_at_bank,
    ):
        try:
            self._token = token if isinstance(token, ApiToken) else ApiToken(token)
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(str(e)) from e
        install_token_redaction(self._token)

        self._marker_store = marker_store
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None
        self._today = today

        logger.info("Initialized Fio API client for %s", self._base_url)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        marker_store: DownloadMarkerPort | None = None,
    ) -> FioClient:
        if settings.api_token is None:
            msg = "FIO_API_TOKEN is not configured"
            raise InvalidRequestError(msg)
        return cls(
            settings.api_token.get_secret_value(),
            marker_store,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> FioClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    async def fetch_report(
        self,
        addressing: DownloadAddressing,
        fmt: ReportFormat | str = TransactionReportFormat.JSON,
    ) -> RawPayload:
        """Fetch one report in the requested format without parsing it.

        Raises UnsupportedFormatError for an unknown format tag, or for a
        statement-only format with period addressing, before any request
        is sent.
        """
        fmt = coerce_format(fmt)
        if not isinstance(addressing, StatementAddressing):
            fmt = as_transaction_format(fmt)

        if isinstance(addressing, SinceLastDownloadAddressing):
            addressing = await self.resolve_since_last_download()

        path = build_report_path(addressing, fmt, self._token)
        logger.debug("Fetching report %s as %s", addressing, fmt.value)
        response = await self._get(path)
        return RawPayload(content=response.content, fmt=fmt)

    async def fetch_transaction_report_for_period(
        self,
        date_from: date,
        date_to: date,
        fmt: TransactionReportFormat | str = TransactionReportFormat.JSON,
    ) -> RawPayload:
        """Fetch transactions booked between two dates (inclusive)."""
        try:
            addressing = PeriodAddressing(date_from=date_from, date_to=date_to)
        except ValidationError as e:
            raise InvalidRequestError(_first_error(e)) from e
        return await self.fetch_report(addressing, fmt)

    async def fetch_account_statement(
        self,
        year: int,
        statement_id: int,
        fmt: AccountStatementFormat | str = AccountStatementFormat.JSON,
    ) -> RawPayload:
        """Fetch an official account statement by year and number."""
        try:
            addressing = StatementAddressing(year=year, statement_id=statement_id)
        except ValidationError as e:
            raise InvalidRequestError(_first_error(e)) from e
        return await self.fetch_report(addressing, fmt)

    async def fetch_last_account_statement_info(self) -> LastStatementInfo:
        """Retrieve year and number of the last issued account statement."""
        logger.debug("Fetching last account statement metadata")
        response = await self._get(build_last_statement_path(self._token))
        return parse_last_statement_info(response.content)

    # -------------------------------------------------------------------------
    # Since last download (local marker)
    # -------------------------------------------------------------------------

    async def resolve_since_last_download(self) -> PeriodAddressing:
        """Date range the next "since last download" request will cover."""
        marker = await self._require_marker_store().get_last_marker()
        addressing = resolve_since_last_download(marker, self._today())
        if marker is None:
            logger.info("No download marker yet, using %s", addressing)
        return addressing

    async def fetch_transaction_report_since_last_download(
        self,
        fmt: TransactionReportFormat | str = TransactionReportFormat.JSON,
    ) -> RawPayload:
        """Fetch everything since the download marker.

        Does not parse and does not advance the marker: call
        mark_downloaded() once the payload has been processed.
        """
        return await self.fetch_report(SinceLastDownloadAddressing(), fmt)

    async def mark_downloaded(self, covered_until: date | ParsedReport) -> date:
        """Advance the marker after the caller consumed a report.

        Parameters
        ----------
        covered_until
            The last date the consumed report covers, or the parsed report
            itself (its header end date is used)

        Returns
        -------
        The marker value written
        """
        if isinstance(covered_until, ParsedReport):
            marker = covered_until.covered_until
            if marker is None:
                msg = "report carries no end date and no transactions"
                raise InvalidRequestError(msg)
        else:
            marker = covered_until

        await self._require_marker_store().set_marker(marker)
        logger.info("Download marker advanced to %s", marker)
        return marker

    async def set_last_unsuccessful_download_date(self, download_date: date) -> None:
        """Write the marker without a fetch, e.g. to recover a known-bad state."""
        await self._require_marker_store().set_marker(download_date)
        logger.info("Download marker set to %s", download_date)

    def _require_marker_store(self) -> DownloadMarkerPort:
        if self._marker_store is None:
            msg = "no download marker store configured"
            raise InvalidRequestError(msg)
        return self._marker_store

    # -------------------------------------------------------------------------
    # Bank-side bookmark
    # -------------------------------------------------------------------------

    async def fetch_transaction_report_since_server_bookmark(
        self,
        fmt: TransactionReportFormat | str = TransactionReportFormat.JSON,
    ) -> RawPayload:
        """Fetch everything since the bookmark the bank keeps for this token.

        The bank moves its bookmark on every successful call.
        """
        fmt = as_transaction_format(coerce_format(fmt))
        logger.debug("Fetching report since server bookmark as %s", fmt.value)
        response = await self._get(build_server_bookmark_path(fmt, self._token))
        return RawPayload(content=response.content, fmt=fmt)

    async def set_server_bookmark_transaction_id(self, transaction_id: int) -> None:
        """Set the bank-side bookmark to the last downloaded transaction ID."""
        path = build_set_last_id_path(self._token, transaction_id)
        logger.info("Updating server bookmark to transaction id %d", transaction_id)
        await self._get(path)

    async def set_server_bookmark_date(self, download_date: date) -> None:
        """Set the bank-side bookmark to the last unsuccessful download date."""
        path = build_set_last_date_path(self._token, download_date)
        logger.info("Updating server bookmark to date %s", download_date)
        await self._get(path)

    # -------------------------------------------------------------------------
    # Parsing (offline)
    # -------------------------------------------------------------------------

    def parse_transactions(self, data: bytes | str | RawPayload) -> ParsedReport:
        """Parse a structured report; works on stored fixtures as well."""
        if isinstance(data, RawPayload):
            return parse_report(data.content, data.fmt)
        return parse_report(data)

    def parse_account_info(self, data: bytes | str | RawPayload) -> AccountInfo:
        return self.parse_transactions(data).account

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self._base_url}{path}"
        logger.debug("GET request to %s", self._token.redact(url))

        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            # httpx exception text may contain the tokenized URL
            error = map_transport_error(e)
            logger.warning("Request failed: %s", error)
            raise error from None

        logger.debug("Received status %d", response.status_code)
        if response.is_success:
            return response

        error = map_status(response.status_code, self._token.redact(response.text))
        logger.warning("Bank rejected request: %s", error)
        raise error


def _first_error(error: ValidationError) -> str:
    details = error.errors()[0]
    return str(details["msg"]).removeprefix("Value error, ")
