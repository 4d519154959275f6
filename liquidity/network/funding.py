"""Testnet faucet (Friendbot) funding collaborator."""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from liquidity.config import DEFAULT_NETWORK_CONFIG, NetworkConfig
from liquidity.errors import FundingError

logger = structlog.get_logger()


class Funder(Protocol):
    """Funds a freshly generated account so it exists on-ledger."""

    async def request_funding(self, public_key: str) -> None:
        """Fund ``public_key``; raises FundingError on failure."""
        ...


class FriendbotFunder:
    """Funds accounts through the testnet Friendbot.

    Args:
        config: Supplies the Friendbot URL and request timeout
        client: Optional pre-built client. If None, one is created per request.
    """

    def __init__(
        self,
        config: NetworkConfig = DEFAULT_NETWORK_CONFIG,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client = client

    async def request_funding(self, public_key: str) -> None:
        """Ask Friendbot to create and fund ``public_key``.

        Raises:
            FundingError: If the request fails or Friendbot refuses
        """
        try:
            if self._client is not None:
                response = await self._client.get(
                    self.config.friendbot_url, params={"addr": public_key}
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
                    response = await client.get(
                        self.config.friendbot_url, params={"addr": public_key}
                    )
        except httpx.HTTPError as err:
            logger.error("funding_request_failed", public_key=public_key, error=str(err))
            raise FundingError(public_key, str(err)) from err

        if response.is_error:
            logger.error(
                "funding_refused",
                public_key=public_key,
                status_code=response.status_code,
            )
            raise FundingError(public_key, f"friendbot returned HTTP {response.status_code}")

        logger.info("account_funded", public_key=public_key)
