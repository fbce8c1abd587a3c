"""Tests for FioClient against a mocked transport."""

import logging
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest
from pydantic import SecretStr

from fioapi.config import Settings
from fioapi.domain.banking.exceptions import (
    InvalidRequestError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransportError,
    UnauthorizedError,
    UnsupportedFormatError,
)
from fioapi.domain.banking.value_objects import (
    AccountStatementFormat,
    PeriodAddressing,
    SinceLastDownloadAddressing,
    StatementAddressing,
    TransactionReportFormat,
)
from fioapi.domain.shared.exceptions import FioError, FioErrorKind
from fioapi.infrastructure.fio import BASE_URL, FioClient
from fioapi.infrastructure.fio.request_builder import MAX_LOOKBACK_DAYS
from fioapi.infrastructure.persistence import InMemoryDownloadMarkerStore

TODAY = date(2024, 5, 31)


class RecordingTransport:
    """Mock transport answering every request with one canned response."""

    def __init__(self, response: httpx.Response | Exception):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return httpx.Response(
            self.response.status_code,
            content=self.response.content,
            headers=self.response.headers,
        )

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def _client(
    token: str,
    transport: RecordingTransport,
    marker_store=None,
) -> FioClient:
    return FioClient(
        token,
        marker_store,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
        today=lambda: TODAY,
    )


@pytest.fixture
def ok_transport(sample_report_bytes) -> RecordingTransport:
    return RecordingTransport(httpx.Response(200, content=sample_report_bytes))


class TestFioClientInit:
    """Tests for client construction."""

    def test_rejects_short_token(self):
        with pytest.raises(InvalidRequestError):
            FioClient("too-short")

    def test_default_base_url(self, api_token):
        assert FioClient(api_token).base_url == BASE_URL

    def test_base_url_trailing_slash_removed(self, api_token):
        client = FioClient(api_token, base_url="http://localhost:8080/rest/")

        assert client.base_url == "http://localhost:8080/rest"

    def test_from_settings(self, api_token):
        settings = Settings(
            api_token=SecretStr(api_token),
            base_url="http://localhost:9000",
            timeout_seconds=3,
        )

        client = FioClient.from_settings(settings)

        assert client.base_url == "http://localhost:9000"

    def test_from_settings_without_token(self):
        with pytest.raises(InvalidRequestError):
            FioClient.from_settings(Settings(api_token=None))

    @pytest.mark.asyncio
    async def test_close_keeps_injected_client_open(self, api_token, ok_transport):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(ok_transport))

        async with FioClient(api_token, http_client=http_client):
            pass

        assert not http_client.is_closed
        await http_client.aclose()


class TestFetchReport:
    """Tests for fetching reports."""

    @pytest.mark.asyncio
    async def test_fetch_period(self, api_token, ok_transport, sample_report_bytes):
        client = _client(api_token, ok_transport)

        payload = await client.fetch_transaction_report_for_period(
            date(2024, 1, 1),
            date(2024, 1, 31),
        )

        assert payload.content == sample_report_bytes
        assert payload.fmt == TransactionReportFormat.JSON
        assert ok_transport.paths == [
            f"/v1/rest/periods/{api_token}/2024-01-01/2024-01-31/transactions.json",
        ]

    @pytest.mark.asyncio
    async def test_fetch_period_raw_format(self, api_token):
        transport = RecordingTransport(httpx.Response(200, content=b"a;b;c\n"))
        client = _client(api_token, transport)

        payload = await client.fetch_transaction_report_for_period(
            date(2024, 1, 1),
            date(2024, 1, 2),
            TransactionReportFormat.CSV,
        )

        assert payload.text == "a;b;c\n"
        assert not payload.is_structured
        assert transport.paths[0].endswith("transactions.csv")

    @pytest.mark.asyncio
    async def test_fetch_period_rejects_inverted_range(self, api_token, ok_transport):
        """Test an inverted range fails before any request is sent."""
        client = _client(api_token, ok_transport)

        with pytest.raises(InvalidRequestError):
            await client.fetch_transaction_report_for_period(
                date(2024, 2, 1),
                date(2024, 1, 1),
            )

        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_fetch_statement_pdf(self, api_token):
        transport = RecordingTransport(httpx.Response(200, content=b"%PDF-1.4"))
        client = _client(api_token, transport)

        payload = await client.fetch_account_statement(
            2024,
            3,
            AccountStatementFormat.PDF,
        )

        assert payload.is_binary
        assert payload.content == b"%PDF-1.4"
        assert transport.paths == [f"/v1/rest/by-id/{api_token}/2024/3/transactions.pdf"]

    @pytest.mark.asyncio
    async def test_fetch_statement_rejects_bad_year(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        with pytest.raises(InvalidRequestError):
            await client.fetch_account_statement(12, 1)

        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_fetch_report_with_addressing(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        await client.fetch_report(StatementAddressing(year=2023, statement_id=1))

        assert ok_transport.paths[0].endswith("/2023/1/transactions.json")

    @pytest.mark.asyncio
    async def test_format_tag_string(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        payload = await client.fetch_transaction_report_for_period(TODAY, TODAY, "CSV")

        assert payload.fmt == TransactionReportFormat.CSV
        assert ok_transport.paths[0].endswith("transactions.csv")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "addressing",
        [
            PeriodAddressing(date_from=TODAY, date_to=TODAY),
            StatementAddressing(year=2024, statement_id=1),
        ],
    )
    async def test_unknown_format_tag(self, api_token, ok_transport, addressing):
        """Test an unknown tag fails typed, before any request is sent."""
        client = _client(api_token, ok_transport)

        with pytest.raises(UnsupportedFormatError) as exc_info:
            await client.fetch_report(addressing, "docx")

        assert exc_info.value.kind == FioErrorKind.UNSUPPORTED_FORMAT
        assert exc_info.value.fmt == "docx"
        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_period_rejects_statement_only_format(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        with pytest.raises(UnsupportedFormatError) as exc_info:
            await client.fetch_report(
                PeriodAddressing(date_from=TODAY, date_to=TODAY),
                AccountStatementFormat.PDF,
            )

        assert exc_info.value.fmt == "pdf"
        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_since_last_download_rejects_format_before_marker_read(
        self,
        api_token,
        ok_transport,
    ):
        client = _client(api_token, ok_transport)

        with pytest.raises(UnsupportedFormatError):
            await client.fetch_report(SinceLastDownloadAddressing(), "mt940")

        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_empty_range_is_not_an_error(self, api_token, empty_report_bytes):
        transport = RecordingTransport(httpx.Response(200, content=empty_report_bytes))
        client = _client(api_token, transport)

        payload = await client.fetch_transaction_report_for_period(
            date(2024, 2, 1),
            date(2024, 2, 5),
        )

        assert client.parse_transactions(payload).transactions == ()

    @pytest.mark.asyncio
    async def test_fetch_last_statement_info(self, api_token):
        transport = RecordingTransport(httpx.Response(200, text="2024,5"))
        client = _client(api_token, transport)

        info = await client.fetch_last_account_statement_info()

        assert (info.year, info.statement_id) == (2024, 5)
        assert transport.paths == [f"/v1/rest/lastStatement/{api_token}/statement"]


class TestErrorHandling:
    """Tests for HTTP and transport failures."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "error_cls"),
        [
            (401, UnauthorizedError),
            (404, NotFoundError),
            (409, RateLimitedError),
            (500, ServerError),
        ],
    )
    async def test_status_raises_typed_error(self, api_token, status_code, error_cls):
        transport = RecordingTransport(httpx.Response(status_code, text="nope"))
        client = _client(api_token, transport)

        with pytest.raises(error_cls) as exc_info:
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.reason == "nope"

    @pytest.mark.asyncio
    async def test_no_retry(self, api_token):
        """Test a failed request is sent exactly once."""
        transport = RecordingTransport(httpx.Response(503))
        client = _client(api_token, transport)

        with pytest.raises(ServerError):
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_token_never_in_error(self, api_token):
        """Test a body echoing the URL doesn't leak the token."""
        body = f"Invalid request /periods/{api_token}/x"
        transport = RecordingTransport(httpx.Response(422, text=body))
        client = _client(api_token, transport)

        with pytest.raises(FioError) as exc_info:
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        assert exc_info.value.kind == FioErrorKind.UNAUTHORIZED
        assert api_token not in str(exc_info.value)
        assert api_token not in repr(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self, api_token):
        transport = RecordingTransport(httpx.ConnectError("connection refused"))
        client = _client(api_token, transport)

        with pytest.raises(TransportError) as exc_info:
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        assert exc_info.value.kind == FioErrorKind.TRANSPORT
        assert exc_info.value.__cause__ is None
        assert api_token not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self, api_token):
        transport = RecordingTransport(httpx.ReadTimeout("read timed out"))
        client = _client(api_token, transport)

        with pytest.raises(TransportError):
            await client.fetch_last_account_statement_info()

    @pytest.mark.asyncio
    async def test_token_not_logged(self, api_token, ok_transport, caplog):
        client = _client(api_token, ok_transport)

        with caplog.at_level("DEBUG", logger="fioapi"):
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        assert "<token>" in caplog.text
        assert api_token not in caplog.text

    @pytest.mark.asyncio
    async def test_token_not_in_httpx_request_log(
        self,
        api_token,
        ok_transport,
        caplog,
    ):
        """Test the HTTP library's INFO request line is masked as well."""
        client = _client(api_token, ok_transport)

        with caplog.at_level(logging.INFO, logger="httpx"):
            await client.fetch_transaction_report_for_period(TODAY, TODAY)

        httpx_records = [r for r in caplog.records if r.name == "httpx"]
        assert httpx_records
        assert "<token>" in httpx_records[0].getMessage()
        assert all(api_token not in r.getMessage() for r in caplog.records)
        assert api_token not in caplog.text


class TestSinceLastDownload:
    """Tests for the local download marker semantics."""

    @pytest.mark.asyncio
    async def test_marker_start_and_today_end(self, api_token, ok_transport):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 1))
        client = _client(api_token, ok_transport, store)

        await client.fetch_transaction_report_since_last_download()

        assert ok_transport.paths == [
            f"/v1/rest/periods/{api_token}/2024-05-01/2024-05-31/transactions.json",
        ]

    @pytest.mark.asyncio
    async def test_first_run_uses_lookback(self, api_token, ok_transport):
        client = _client(api_token, ok_transport, InMemoryDownloadMarkerStore())

        addressing = await client.resolve_since_last_download()

        assert addressing == PeriodAddressing(
            date_from=TODAY - timedelta(days=MAX_LOOKBACK_DAYS),
            date_to=TODAY,
        )

    @pytest.mark.asyncio
    async def test_fetch_does_not_advance_marker(self, api_token, ok_transport):
        """Test a fetch alone leaves the marker untouched."""
        store = InMemoryDownloadMarkerStore(date(2024, 5, 1))
        client = _client(api_token, ok_transport, store)

        await client.fetch_transaction_report_since_last_download()
        await client.fetch_transaction_report_since_last_download()

        assert await store.get_last_marker() == date(2024, 5, 1)
        assert len(set(ok_transport.paths)) == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_does_not_advance_marker(self, api_token):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 1))
        client = _client(api_token, RecordingTransport(httpx.Response(409)), store)

        with pytest.raises(RateLimitedError):
            await client.fetch_transaction_report_since_last_download()

        assert await store.get_last_marker() == date(2024, 5, 1)

    @pytest.mark.asyncio
    async def test_mark_downloaded_with_date(self, api_token, ok_transport):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 1))
        client = _client(api_token, ok_transport, store)

        marker = await client.mark_downloaded(date(2024, 5, 31))

        assert marker == date(2024, 5, 31)
        assert await store.get_last_marker() == date(2024, 5, 31)

    @pytest.mark.asyncio
    async def test_mark_downloaded_with_report(self, api_token, ok_transport):
        """Test the consumed report's end date becomes the marker."""
        store = InMemoryDownloadMarkerStore()
        client = _client(api_token, ok_transport, store)

        payload = await client.fetch_transaction_report_since_last_download()
        report = client.parse_transactions(payload)
        await client.mark_downloaded(report)

        assert await store.get_last_marker() == date(2023, 1, 2)

    @pytest.mark.asyncio
    async def test_next_fetch_starts_at_new_marker(self, api_token, ok_transport):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 1))
        client = _client(api_token, ok_transport, store)

        await client.fetch_transaction_report_since_last_download()
        await client.mark_downloaded(date(2024, 5, 20))
        await client.fetch_report(SinceLastDownloadAddressing())

        assert "/2024-05-20/2024-05-31/" in ok_transport.paths[-1]

    @pytest.mark.asyncio
    async def test_mark_downloaded_rejects_empty_report(
        self,
        api_token,
        ok_transport,
    ):
        client = _client(api_token, ok_transport, InMemoryDownloadMarkerStore())
        report = client.parse_transactions(b'{"accountStatement": {"info": {}}}')

        with pytest.raises(InvalidRequestError):
            await client.mark_downloaded(report)

    @pytest.mark.asyncio
    async def test_set_last_unsuccessful_download_date(self, api_token, ok_transport):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 20))
        client = _client(api_token, ok_transport, store)

        await client.set_last_unsuccessful_download_date(date(2024, 4, 1))

        assert await store.get_last_marker() == date(2024, 4, 1)
        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_recovery_date_starts_next_fetch(self, api_token, ok_transport):
        """Test the next fetch covers the recovery date up to today."""
        store = InMemoryDownloadMarkerStore(date(2024, 5, 20))
        client = _client(api_token, ok_transport, store)

        await client.set_last_unsuccessful_download_date(date(2024, 4, 1))
        await client.fetch_transaction_report_since_last_download()

        assert "/2024-04-01/2024-05-31/" in ok_transport.paths[0]

    @pytest.mark.asyncio
    async def test_default_today_is_the_bank_day(
        self,
        api_token,
        ok_transport,
        monkeypatch,
    ):
        """Test the range ends on the Prague date, not the UTC date."""
        monkeypatch.setattr(
            "fioapi.domain.shared.time.utc_now",
            lambda: datetime(2024, 5, 31, 22, 30, tzinfo=timezone.utc),
        )
        client = FioClient(
            api_token,
            InMemoryDownloadMarkerStore(date(2024, 5, 20)),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(ok_transport)),
        )

        addressing = await client.resolve_since_last_download()

        assert addressing.date_to == date(2024, 6, 1)

    @pytest.mark.asyncio
    async def test_requires_marker_store(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        with pytest.raises(InvalidRequestError):
            await client.fetch_transaction_report_since_last_download()

        assert ok_transport.requests == []


class TestServerBookmark:
    """Tests for the bank-side bookmark endpoints."""

    @pytest.mark.asyncio
    async def test_fetch_since_server_bookmark(self, api_token, ok_transport):
        client = _client(api_token, ok_transport)

        await client.fetch_transaction_report_since_server_bookmark()

        assert ok_transport.paths == [f"/v1/rest/last/{api_token}/transactions.json"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fmt", ["docx", AccountStatementFormat.PDF])
    async def test_fetch_since_server_bookmark_rejects_format(
        self,
        api_token,
        ok_transport,
        fmt,
    ):
        client = _client(api_token, ok_transport)

        with pytest.raises(UnsupportedFormatError):
            await client.fetch_transaction_report_since_server_bookmark(fmt)

        assert ok_transport.requests == []

    @pytest.mark.asyncio
    async def test_fetch_since_server_bookmark_format_tag(
        self,
        api_token,
        ok_transport,
    ):
        client = _client(api_token, ok_transport)

        payload = await client.fetch_transaction_report_since_server_bookmark("xml")

        assert payload.fmt == TransactionReportFormat.XML
        assert ok_transport.paths[0].endswith("/transactions.xml")

    @pytest.mark.asyncio
    async def test_set_bookmark_id(self, api_token):
        transport = RecordingTransport(httpx.Response(200))
        client = _client(api_token, transport)

        await client.set_server_bookmark_transaction_id(26000000001)

        assert transport.paths == [f"/v1/rest/set-last-id/{api_token}/26000000001/"]

    @pytest.mark.asyncio
    async def test_set_bookmark_date(self, api_token):
        transport = RecordingTransport(httpx.Response(200))
        client = _client(api_token, transport)

        await client.set_server_bookmark_date(date(2024, 5, 1))

        assert transport.paths == [f"/v1/rest/set-last-date/{api_token}/2024-05-01/"]

    @pytest.mark.asyncio
    async def test_set_bookmark_date_leaves_local_marker(self, api_token):
        store = InMemoryDownloadMarkerStore(date(2024, 5, 20))
        client = _client(api_token, RecordingTransport(httpx.Response(200)), store)

        await client.set_server_bookmark_date(date(2024, 5, 1))

        assert await store.get_last_marker() == date(2024, 5, 20)


class TestOfflineParsing:
    """Tests for parsing through the client façade."""

    def test_parse_transactions(self, api_token, period_report_bytes):
        report = FioClient(api_token).parse_transactions(period_report_bytes)

        assert len(report.transactions) == 3

    def test_parse_account_info(self, api_token, sample_report_bytes):
        info = FioClient(api_token).parse_account_info(sample_report_bytes)

        assert info.account_id == "2000000000"
