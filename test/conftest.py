"""
Test Configuration and Fixtures

This module sets the environment before application modules read settings.
Hold fixtures (in-memory store, unit of work factory, clock) live in
test/service/hold/conftest.py.

Architecture:
- Unit tests (test/**/unit/): in-memory store, no infrastructure
- API tests (test/**/api/): FastAPI TestClient over the in-memory backend
- Integration tests (test/**/integration/): real PostgreSQL, skipped when unreachable
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# settings and the DI container read the environment at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['POSTGRES_DB'] = 'travel_hold_test_db'
    else:
        os.environ['POSTGRES_DB'] = f'travel_hold_test_db_{worker_id}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['HOLD_STORE_BACKEND'] = 'memory'
    os.environ['ENABLE_HOLD_SWEEPER'] = 'false'
    os.environ.setdefault('DB_POOL_SIZE', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')


_early_setup_test_environment()

