"""
conftest.py - Shared pytest fixtures for mock backend tests

Provides:
- A controllable clock fixed at 2026-10-18 12:00 UTC
- A seeded random stream so generated ledgers are reproducible (pulled in by
  the generator fixture)
- Small ledgers (3 blocks at heights 100-102, 10 second block time)
- A FastAPI TestClient wired to one of those ledgers
"""

import random

import pytest
from fastapi.testclient import TestClient

from mockserver import config
from mockserver import explorer_api
from mockserver.generator import LedgerGenerator
from mockserver.ledger import LedgerStore
from mockserver.resolver import MockServer

from tests.fake_clock import BLOCK_TIME_MS, START_HEIGHT, FakeClock


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def seeded_random():
    random.seed(20261018)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return LedgerStore()


@pytest.fixture
def generator(store, clock, seeded_random):
    return LedgerGenerator(
        store,
        block_time_ms=BLOCK_TIME_MS,
        start_months_before_today=6,
        txs_per_block_min=1,
        txs_per_block_max=3,
        clock=clock,
        start_height=START_HEIGHT,
    )


@pytest.fixture
def server(store, generator, clock):
    """MockServer over three pre-populated blocks at heights 100, 101, 102."""
    generator.prepopulate(3)
    return MockServer(store=store, generator=generator, clock=clock)


@pytest.fixture
def client(server):
    explorer_api.limiter.enabled = False
    explorer_api.app.state.mock_server = server
    with TestClient(explorer_api.app) as test_client:
        yield test_client
    explorer_api.app.state.mock_server = None
    explorer_api.limiter.enabled = config.RATE_LIMIT_ENABLED
