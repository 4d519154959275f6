"""Fake collaborators for driving the orchestrator without a network.

Usage:
    from tests.helpers import FakeFunder, FakeGateway

    gateway = FakeGateway()
    orchestrator = PoolOrchestrator(funder=FakeFunder(), gateway_factory=lambda: gateway)
"""

from __future__ import annotations

import asyncio

from stellar_sdk import TransactionEnvelope

from liquidity.config import DEFAULT_NETWORK_CONFIG
from liquidity.errors import AccountNotFound, FundingError, SubmissionRejected
from liquidity.models.results import AccountState, SubmissionResult
from tests.helpers.constants import START_SEQUENCE


class FakeFunder:
    """Funder that records requests and can fail on a given call.

    Args:
        fail_on_call: 1-based index of the request that should fail
    """

    def __init__(self, fail_on_call: int | None = None) -> None:
        self.fail_on_call = fail_on_call
        self.requests: list[str] = []
        self.funded: list[str] = []

    async def request_funding(self, public_key: str) -> None:
        self.requests.append(public_key)
        if len(self.requests) == self.fail_on_call:
            raise FundingError(public_key, "friendbot returned HTTP 400")
        self.funded.append(public_key)


class FakeGateway:
    """In-memory gateway tracking sequence numbers like the ledger does.

    Attributes:
        fetched: Public keys passed to fetch_account_state, in order
        submitted: Envelopes passed to submit, in order
        reject_with: If set, every submission is rejected with this reason
        hold: If set, submit waits on this event before answering
        closed: True once aclose has been called
    """

    def __init__(self) -> None:
        self.sequences: dict[str, int] = {}
        self.missing: set[str] = set()
        self.fetched: list[str] = []
        self.submitted: list[TransactionEnvelope] = []
        self.reject_with: str | None = None
        self.hold: asyncio.Event | None = None
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.fetched) + len(self.submitted)

    async def fetch_account_state(self, public_key: str) -> AccountState:
        self.fetched.append(public_key)
        if public_key in self.missing:
            raise AccountNotFound(public_key)
        return AccountState(
            account_id=public_key,
            sequence=self.sequences.get(public_key, START_SEQUENCE),
        )

    async def submit(self, envelope: TransactionEnvelope) -> SubmissionResult:
        self.submitted.append(envelope)
        if self.hold is not None:
            await self.hold.wait()

        tx_hash = envelope.hash_hex()
        if self.reject_with is not None:
            raise SubmissionRejected(self.reject_with, tx_hash=tx_hash)

        transaction = envelope.transaction
        self.sequences[transaction.source.account_id] = transaction.sequence
        return SubmissionResult(
            hash=tx_hash,
            success=True,
            explorer_url=DEFAULT_NETWORK_CONFIG.transaction_url(tx_hash),
        )
