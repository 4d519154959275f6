"""Pytest configuration and fixtures."""

import asyncio

import pytest

from liquidity.lifecycle import PoolOrchestrator
from tests.helpers import ASSET_NAME, FakeFunder, FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    """In-memory network gateway."""
    return FakeGateway()


@pytest.fixture
def funder() -> FakeFunder:
    """Funder that always succeeds."""
    return FakeFunder()


@pytest.fixture
def orchestrator(funder: FakeFunder, gateway: FakeGateway) -> PoolOrchestrator:
    """Orchestrator in the uninitialized stage."""
    return PoolOrchestrator(funder=funder, gateway_factory=lambda: gateway)


@pytest.fixture
def funded_orchestrator(orchestrator: PoolOrchestrator) -> PoolOrchestrator:
    """Orchestrator with both accounts funded."""
    outcome = asyncio.run(orchestrator.create_and_fund_accounts())
    assert outcome.success, outcome.message
    return orchestrator


@pytest.fixture
def pool_orchestrator(funded_orchestrator: PoolOrchestrator) -> PoolOrchestrator:
    """Orchestrator with the pool created for ASSET_NAME."""
    outcome = asyncio.run(funded_orchestrator.create_pool(ASSET_NAME))
    assert outcome.success, outcome.message
    return funded_orchestrator
