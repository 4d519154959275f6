"""Network configuration for the orchestrator."""

import os
from dataclasses import dataclass

from liquidity.constants import (
    TESTNET_EXPLORER_URL,
    TESTNET_FRIENDBOT_URL,
    TESTNET_PASSPHRASE,
    TESTNET_RPC_URL,
    TX_TIMEOUT_SECONDS,
)


@dataclass(frozen=True)
class NetworkConfig:
    """Endpoint and timing configuration, fixed for the process lifetime.

    Attributes:
        rpc_url: Soroban JSON-RPC endpoint
        network_passphrase: Passphrase the envelopes are signed for
        friendbot_url: Faucet endpoint used to fund new accounts
        explorer_base_url: Prefix for transaction links (``{base}/tx/{hash}``)
        request_timeout: HTTP timeout per request, in seconds
        poll_interval: Delay between transaction status polls, in seconds
        confirmation_timeout: Longest wait for a submitted transaction to settle;
            the validity window plus a few seconds of ledger close time
    """

    rpc_url: str = TESTNET_RPC_URL
    network_passphrase: str = TESTNET_PASSPHRASE
    friendbot_url: str = TESTNET_FRIENDBOT_URL
    explorer_base_url: str = TESTNET_EXPLORER_URL
    request_timeout: float = 30.0
    poll_interval: float = 1.0
    confirmation_timeout: float = TX_TIMEOUT_SECONDS + 5.0

    def transaction_url(self, tx_hash: str) -> str:
        """Explorer link for a submitted transaction."""
        return f"{self.explorer_base_url.rstrip('/')}/tx/{tx_hash}"

    @classmethod
    def from_env(cls) -> "NetworkConfig":
        """Build a config from ``LIQUIDITY_*`` environment variables.

        The passphrase is not configurable: the orchestrator only targets
        the test network.
        """
        defaults = cls()
        return cls(
            rpc_url=os.environ.get("LIQUIDITY_RPC_URL", defaults.rpc_url),
            friendbot_url=os.environ.get("LIQUIDITY_FRIENDBOT_URL", defaults.friendbot_url),
            explorer_base_url=os.environ.get("LIQUIDITY_EXPLORER_URL", defaults.explorer_base_url),
            request_timeout=float(
                os.environ.get("LIQUIDITY_REQUEST_TIMEOUT", str(defaults.request_timeout))
            ),
            poll_interval=float(
                os.environ.get("LIQUIDITY_POLL_INTERVAL", str(defaults.poll_interval))
            ),
        )


# Default configuration instance
DEFAULT_NETWORK_CONFIG = NetworkConfig()
