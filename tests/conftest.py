"""Root pytest configuration for shared fixtures and auto-skip behavior.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests (no network)
    │   ├── domain/
    │   ├── infrastructure/
    │   └── presentation/
    ├── external/              # Real bank calls (requires FIO_API_TOKEN)
    └── fixtures/              # Stored report payloads

Environment Variables:
    RUN_EXTERNAL=1       Run @pytest.mark.external tests against the bank

Pytest Options:
    --run-external       Run external bank tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from fioapi.config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

# Load a local .env.test for external tests (never committed)
if (PROJECT_ROOT / ".env.test").exists():
    load_dotenv(PROJECT_ROOT / ".env.test")

# A syntactically valid token; the bank never sees it
TEST_TOKEN = "t" * 32 + "0123456789abcdef" * 2


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.external",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "external: Tests connecting to the real bank API (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip external tests unless explicitly enabled."""
    run_external = config.getoption("--run-external") or os.environ.get(
        "RUN_EXTERNAL",
        "",
    ).lower() in ("1", "true", "yes")

    if run_external:
        return

    skip_external = pytest.mark.skip(
        reason="External test - run with --run-external or RUN_EXTERNAL=1",
    )
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "external" in item_markers:
            item.add_marker(skip_external)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def api_token() -> str:
    return TEST_TOKEN


@pytest.fixture
def sample_report_bytes() -> bytes:
    """Report covering two days with one credit, as the bank returns it."""
    return (FIXTURES_DIR / "report_sample.json").read_bytes()


@pytest.fixture
def period_report_bytes() -> bytes:
    """Report over a period with a debit, a credit and a fee."""
    return (FIXTURES_DIR / "report_period.json").read_bytes()


@pytest.fixture
def empty_report_bytes() -> bytes:
    """Report for a valid range with no transactions."""
    return (FIXTURES_DIR / "report_empty.json").read_bytes()
