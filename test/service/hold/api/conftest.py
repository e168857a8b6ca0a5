"""
API test configuration

The production app over HOLD_STORE_BACKEND=memory (set in the root conftest);
the store and the policy cache are reset between tests.
"""

from collections.abc import Generator

from fastapi.testclient import TestClient
import pytest

from src.main import app
from src.platform.config.di import container


@pytest.fixture(scope='module')
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_hold_state() -> Generator[None, None, None]:
    yield
    container.in_memory_hold_store().clear()
    container.partner_policy_provider().invalidate()
