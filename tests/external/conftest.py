"""
Configuration for external service tests (real bank connection).

These tests require a real read-only API token and network access.
They are skipped by default unless explicitly enabled.

Enable with: --run-external or RUN_EXTERNAL=1
"""

import os

import pytest


@pytest.fixture(scope="session")
def live_token() -> str:
    """
    Provide the API token for external tests.

    Skips tests if no token is configured.
    """
    token = os.environ.get("FIO_API_TOKEN")
    if not token:
        pytest.skip("API token not configured. Set FIO_API_TOKEN in .env.test")
    return token
