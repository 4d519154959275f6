"""Soroban JSON-RPC gateway: account state and transaction submission.

Each call is a single suspending round trip over a shared, read-only
``httpx.AsyncClient``. Submission is awaited to a final ledger status; a
broadcast transaction cannot be recalled, so only the wait is bounded.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from typing import TYPE_CHECKING, Any, Protocol

import httpx
import structlog
from stellar_sdk import Keypair
from stellar_sdk import xdr as stellar_xdr

from liquidity.config import DEFAULT_NETWORK_CONFIG, NetworkConfig
from liquidity.errors import AccountNotFound, NetworkError, SubmissionRejected, SubmissionTimeout
from liquidity.models.results import AccountState, SubmissionResult

if TYPE_CHECKING:
    from stellar_sdk import TransactionEnvelope

logger = structlog.get_logger()

# sendTransaction statuses
SEND_PENDING = "PENDING"
SEND_DUPLICATE = "DUPLICATE"
SEND_TRY_AGAIN_LATER = "TRY_AGAIN_LATER"
SEND_ERROR = "ERROR"

# getTransaction statuses
TX_SUCCESS = "SUCCESS"
TX_FAILED = "FAILED"
TX_NOT_FOUND = "NOT_FOUND"


class NetworkGateway(Protocol):
    """What the orchestrator needs from the network."""

    async def fetch_account_state(self, public_key: str) -> AccountState:
        """Current sequence of a funded account."""
        ...

    async def submit(self, envelope: TransactionEnvelope) -> SubmissionResult:
        """Broadcast a signed envelope and wait for its final status."""
        ...

    async def aclose(self) -> None:
        """Release any connection the gateway holds."""
        ...


def account_ledger_key(public_key: str) -> str:
    """Base64 XDR ledger key addressing the account entry of ``public_key``."""
    account_id = Keypair.from_public_key(public_key).xdr_account_id()
    key = stellar_xdr.LedgerKey(
        stellar_xdr.LedgerEntryType.ACCOUNT,
        account=stellar_xdr.LedgerKeyAccount(account_id=account_id),
    )
    return key.to_xdr()


def decode_account_sequence(entry_xdr: str) -> int:
    """Sequence number from a base64 XDR account ledger entry.

    Raises:
        NetworkError: If the entry is not an account entry
    """
    data = stellar_xdr.LedgerEntryData.from_xdr(entry_xdr)
    if data.account is None:
        raise NetworkError("Ledger entry is not an account entry")
    return data.account.seq_num.sequence_number.int64


class SorobanGateway:
    """Network gateway backed by a Soroban RPC endpoint.

    Args:
        config: Endpoint and timing configuration
        client: Optional pre-built client (tests inject one with a mock transport).
            If None, one is created and owned by the gateway.
    """

    def __init__(
        self,
        config: NetworkConfig = DEFAULT_NETWORK_CONFIG,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout)
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> SorobanGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if the gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _rpc(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Perform one JSON-RPC call and return its ``result`` object.

        Raises:
            NetworkError: On transport failure, HTTP error status, or a
                JSON-RPC error object in the response
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            response = await self._client.post(self.config.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as err:
            raise NetworkError(f"{method} failed: {err}") from err
        except ValueError as err:
            raise NetworkError(f"{method} returned invalid JSON") from err

        if body.get("error") is not None:
            error = body["error"]
            raise NetworkError(f"{method} failed: {error.get('message', error)}")
        result = body.get("result")
        if not isinstance(result, dict):
            raise NetworkError(f"{method} returned no result")
        return result

    async def fetch_account_state(self, public_key: str) -> AccountState:
        """Fetch the current sequence number of ``public_key``.

        Raises:
            AccountNotFound: If the account has not been funded on-ledger
            NetworkError: If the endpoint fails
        """
        result = await self._rpc("getLedgerEntries", {"keys": [account_ledger_key(public_key)]})
        entries = result.get("entries") or []
        if not entries:
            raise AccountNotFound(public_key)

        sequence = decode_account_sequence(entries[0]["xdr"])
        logger.debug("account_state_fetched", public_key=public_key, sequence=sequence)
        return AccountState(account_id=public_key, sequence=sequence)

    async def submit(self, envelope: TransactionEnvelope) -> SubmissionResult:
        """Broadcast ``envelope`` and wait until the ledger settles it.

        Never retried: a rejection is reported with its raw reason and the
        caller rebuilds from fresh account state.

        Raises:
            SubmissionRejected: If the transaction is refused or fails on-ledger
            SubmissionTimeout: If no final status arrives in time
            NetworkError: If the endpoint fails
        """
        tx_hash = envelope.hash_hex()
        result = await self._rpc("sendTransaction", {"transaction": envelope.to_xdr()})
        status = result.get("status")
        tx_hash = result.get("hash", tx_hash)
        logger.info("transaction_sent", tx_hash=tx_hash, status=status)

        if status == SEND_ERROR:
            reason = result.get("errorResultXdr") or "transaction refused by the network"
            raise SubmissionRejected(f"{SEND_ERROR}: {reason}", tx_hash=tx_hash)
        if status == SEND_TRY_AGAIN_LATER:
            raise SubmissionRejected(
                f"{SEND_TRY_AGAIN_LATER}: network is congested, retry the action",
                tx_hash=tx_hash,
            )
        if status not in (SEND_PENDING, SEND_DUPLICATE):
            raise NetworkError(f"sendTransaction returned unknown status: {status}")

        return await self._await_confirmation(tx_hash)

    async def _await_confirmation(self, tx_hash: str) -> SubmissionResult:
        """Poll getTransaction until SUCCESS or FAILED, or the wait runs out."""
        started = time.monotonic()
        deadline = started + self.config.confirmation_timeout

        while True:
            result = await self._rpc("getTransaction", {"hash": tx_hash})
            status = result.get("status")

            if status == TX_SUCCESS:
                return SubmissionResult(
                    hash=tx_hash,
                    success=True,
                    explorer_url=self.config.transaction_url(tx_hash),
                    ledger=result.get("ledger"),
                )
            if status == TX_FAILED:
                reason = result.get("resultXdr") or "transaction failed on-ledger"
                raise SubmissionRejected(f"{TX_FAILED}: {reason}", tx_hash=tx_hash)
            if status != TX_NOT_FOUND:
                raise NetworkError(f"getTransaction returned unknown status: {status}")

            if time.monotonic() >= deadline:
                raise SubmissionTimeout(tx_hash, time.monotonic() - started)
            await asyncio.sleep(self.config.poll_interval)
