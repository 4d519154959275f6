"""Pool lifecycle orchestrator.

The orchestrator is the single writer of the lifecycle stage. Stages only
move forward:

    uninitialized -> accounts_funded -> pool_created -> traded -> withdrawn

Each action is a sequential chain of suspending network calls. Only one
action runs at a time: every action for an account builds on that
account's latest sequence number, so overlapping submissions would race
and be rejected with txBAD_SEQ.

A failed action leaves the stage exactly as it was. The ledger applies a
transaction's operations atomically, but the orchestrator has no rollback
for work done by earlier, already-confirmed transactions; every retry is
operator-initiated and rebuilds from freshly fetched account state.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from liquidity.assets import compute_pool_identifier, define_custom_asset, derive_pool_share_asset
from liquidity.builder import (
    build_envelope,
    change_trust,
    deposit_liquidity,
    path_payment_strict_receive,
    withdraw_liquidity,
)
from liquidity.config import DEFAULT_NETWORK_CONFIG, NetworkConfig
from liquidity.constants import (
    DEPOSIT_MAX_AMOUNT_A,
    DEPOSIT_MAX_AMOUNT_B,
    NATIVE_ASSET_CODE,
    TRADE_SEND_MAX,
)
from liquidity.errors import (
    ActionInProgress,
    ActionUnavailable,
    LiquidityError,
    SubmissionRejected,
)
from liquidity.identity import IdentityProvider
from liquidity.models.lifecycle import Action, LifecycleStage, PoolState, Role
from liquidity.models.results import ActionOutcome, PoolStatus, SubmissionResult
from liquidity.models.types import validate_amount
from liquidity.network.funding import Funder
from liquidity.network.gateway import NetworkGateway, SorobanGateway

logger = structlog.get_logger()

# Prefix of the operator-facing message when an action fails
FAILURE_MESSAGES: dict[Action, str] = {
    Action.SETUP_ACCOUNTS: "Failed to set up accounts",
    Action.CREATE_POOL: "Failed to create liquidity pool",
    Action.TRADE: "Failed to trade assets",
    Action.WITHDRAW: "Failed to withdraw funds",
}

# (message, transaction link) produced by a successful action body
StepResult = tuple[str, str | None]


class PoolOrchestrator:
    """State machine driving a single pool through its lifecycle.

    Args:
        funder: Funds newly created accounts
        config: Network configuration shared by every action
        gateway_factory: Builds the network gateway once accounts are funded.
            Defaults to a SorobanGateway for ``config``.
        identity: Keypair holder. A fresh IdentityProvider if None.
    """

    def __init__(
        self,
        funder: Funder,
        config: NetworkConfig = DEFAULT_NETWORK_CONFIG,
        gateway_factory: Callable[[], NetworkGateway] | None = None,
        identity: IdentityProvider | None = None,
    ) -> None:
        self.funder = funder
        self.config = config
        self.identity = identity or IdentityProvider()
        self.state = PoolState()
        self.gateway: NetworkGateway | None = None
        self._gateway_factory = gateway_factory or (lambda: SorobanGateway(config))

    # -------------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------------

    def _unavailable_reason(self, action: Action) -> str | None:
        """Why ``action`` cannot run in the current stage, or None if it can."""
        stage = self.state.stage
        if action is Action.SETUP_ACCOUNTS:
            if stage is not LifecycleStage.UNINITIALIZED:
                return "accounts are already set up"
        elif action is Action.CREATE_POOL:
            if not stage.at_least(LifecycleStage.ACCOUNTS_FUNDED):
                return "accounts are not funded yet"
            if stage.at_least(LifecycleStage.POOL_CREATED):
                return "the pool has already been created"
        elif action is Action.TRADE:
            if not stage.at_least(LifecycleStage.POOL_CREATED) or self.state.custom_asset is None:
                return "the pool has not been created yet"
        elif action is Action.WITHDRAW:
            if not stage.at_least(LifecycleStage.POOL_CREATED) or self.state.pool_id is None:
                return "the pool has not been created yet"
        return None

    def can_trigger(self, action: Action) -> bool:
        """True if ``action`` may be triggered now (idle and stage allows it)."""
        return not self.state.busy and self._unavailable_reason(action) is None

    def enabled_actions(self) -> list[Action]:
        return [action for action in Action if self.can_trigger(action)]

    def status(self) -> PoolStatus:
        """Snapshot of the lifecycle for display."""
        custom_asset = self.state.custom_asset
        return PoolStatus(
            stage=self.state.stage,
            busy=self.state.busy,
            running=self.state.running,
            enabled_actions=self.enabled_actions(),
            asset_code=custom_asset.code if custom_asset is not None else None,
            pool_id=self.state.pool_id,
            operator_public_key=self.identity.public_key(Role.OPERATOR),
            trader_public_key=self.identity.public_key(Role.TRADER),
        )

    # -------------------------------------------------------------------------
    # Single-flight runner
    # -------------------------------------------------------------------------

    async def _run(self, action: Action, body: Callable[[], Awaitable[StepResult]]) -> ActionOutcome:
        """Run ``body`` as ``action`` under the busy flag.

        This is the one place errors become operator-facing outcomes. The
        busy flag is set before the first suspension point and always
        cleared, so a second trigger during the await is rejected.
        """
        if self.state.busy:
            running = self.state.running.value if self.state.running else None
            err = ActionInProgress(action.value, running)
            logger.warning("action_rejected_busy", action=action.value, running=err.running)
            return ActionOutcome.failed(action, str(err), self.state.stage)

        reason = self._unavailable_reason(action)
        if reason is not None:
            err = ActionUnavailable(action.value, reason)
            logger.warning("action_unavailable", action=action.value, stage=self.state.stage.value)
            return ActionOutcome.failed(action, str(err), self.state.stage)

        self.state.busy = True
        self.state.running = action
        stage_before = self.state.stage
        logger.info("action_started", action=action.value, stage=stage_before.value)
        try:
            message, transaction_url = await body()
        except LiquidityError as err:
            logger.warning("action_failed", action=action.value, error=str(err))
            return ActionOutcome.failed(
                action, f"{FAILURE_MESSAGES[action]}: {err}", self.state.stage
            )
        except Exception as err:
            logger.exception("action_error", action=action.value)
            return ActionOutcome.failed(
                action, f"{FAILURE_MESSAGES[action]}: {err}", self.state.stage
            )
        finally:
            self.state.busy = False
            self.state.running = None

        logger.info(
            "action_succeeded",
            action=action.value,
            stage_before=stage_before.value,
            stage=self.state.stage.value,
            transaction_url=transaction_url,
        )
        return ActionOutcome.succeeded(action, message, self.state.stage, transaction_url)

    async def aclose(self) -> None:
        """Close the network gateway, if one was built."""
        if self.gateway is not None:
            await self.gateway.aclose()
            self.gateway = None

    def _require_gateway(self) -> NetworkGateway:
        if self.gateway is None:
            raise ActionUnavailable("network", "gateway is not connected")
        return self.gateway

    @staticmethod
    def _confirmed(result: SubmissionResult) -> SubmissionResult:
        if not result.success:
            raise SubmissionRejected("transaction was not applied", tx_hash=result.hash)
        return result

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def create_and_fund_accounts(self) -> ActionOutcome:
        """Create the operator and trader accounts and fund both.

        Either both accounts are funded or the action fails as a whole; the
        keypairs are then discarded so a retry starts from scratch.
        """
        return await self._run(Action.SETUP_ACCOUNTS, self._setup_accounts)

    async def _setup_accounts(self) -> StepResult:
        try:
            operator = self.identity.create_role(Role.OPERATOR)
            trader = self.identity.create_role(Role.TRADER)
            for keypair in (operator, trader):
                await self.funder.request_funding(keypair.public_key)
        except Exception:
            self.identity.reset()
            raise

        self.gateway = self._gateway_factory()
        self.state.stage = self.state.stage.advance_to(LifecycleStage.ACCOUNTS_FUNDED)
        return (
            "Accounts set up successfully! DeFi and Trader accounts are now funded and ready for use.",
            None,
        )

    async def create_pool(self, asset_name: str) -> ActionOutcome:
        """Issue ``asset_name`` from the operator and seed the pool with it.

        The envelope holds the pool-share trustline first and the deposit
        second; the deposit is invalid without the trustline.
        """

        async def body() -> StepResult:
            gateway = self._require_gateway()
            operator = self.identity.keypair(Role.OPERATOR)

            # Derived synchronously within this action, never read back from state
            custom_asset = define_custom_asset(asset_name, operator.public_key)
            pool_share_asset = derive_pool_share_asset(custom_asset)
            pool_id = compute_pool_identifier(pool_share_asset)

            account = await gateway.fetch_account_state(operator.public_key)
            envelope = build_envelope(
                account,
                [
                    change_trust(pool_share_asset),
                    deposit_liquidity(pool_id, DEPOSIT_MAX_AMOUNT_A, DEPOSIT_MAX_AMOUNT_B),
                ],
                operator,
                self.config.network_passphrase,
            )
            result = self._confirmed(await gateway.submit(envelope))

            self.state.custom_asset = custom_asset
            self.state.pool_share_asset = pool_share_asset
            self.state.pool_id = pool_id
            self.state.stage = self.state.stage.advance_to(LifecycleStage.POOL_CREATED)
            logger.info("pool_created", asset_code=custom_asset.code, pool_id=pool_id)
            return (
                f"Liquidity pool created successfully with asset {asset_name}! "
                f"Initial deposit: {DEPOSIT_MAX_AMOUNT_A} {NATIVE_ASSET_CODE} "
                f"and {DEPOSIT_MAX_AMOUNT_B} {asset_name}.",
                result.explorer_url,
            )

        return await self._run(Action.CREATE_POOL, body)

    async def trade_assets(self, trade_quantity: str) -> ActionOutcome:
        """Buy exactly ``trade_quantity`` of the custom asset for native, as the trader."""

        async def body() -> StepResult:
            quantity = validate_amount(trade_quantity)
            gateway = self._require_gateway()
            trader = self.identity.keypair(Role.TRADER)
            custom_asset = self.state.custom_asset
            if custom_asset is None:
                raise ActionUnavailable(Action.TRADE.value, "the pool has not been created yet")

            account = await gateway.fetch_account_state(trader.public_key)
            envelope = build_envelope(
                account,
                [
                    change_trust(custom_asset),
                    path_payment_strict_receive(
                        destination=trader.public_key,
                        send_max=TRADE_SEND_MAX,
                        dest_asset=custom_asset,
                        dest_amount=quantity,
                    ),
                ],
                trader,
                self.config.network_passphrase,
            )
            result = self._confirmed(await gateway.submit(envelope))

            self.state.stage = self.state.stage.advance_to(LifecycleStage.TRADED)
            return (
                f"Successfully traded {quantity} {custom_asset.code} for {NATIVE_ASSET_CODE}!",
                result.explorer_url,
            )

        return await self._run(Action.TRADE, body)

    async def withdraw_funds(self, withdraw_amount: str) -> ActionOutcome:
        """Redeem ``withdraw_amount`` pool shares for the operator.

        Both minimums are zero, so there is no slippage protection: the
        withdrawal accepts whatever split of reserves the pool holds.
        """

        async def body() -> StepResult:
            amount = validate_amount(withdraw_amount)
            gateway = self._require_gateway()
            operator = self.identity.keypair(Role.OPERATOR)
            pool_id = self.state.pool_id
            if pool_id is None:
                raise ActionUnavailable(Action.WITHDRAW.value, "the pool has not been created yet")

            account = await gateway.fetch_account_state(operator.public_key)
            envelope = build_envelope(
                account,
                [withdraw_liquidity(pool_id, amount)],
                operator,
                self.config.network_passphrase,
            )
            result = self._confirmed(await gateway.submit(envelope))

            self.state.stage = self.state.stage.advance_to(LifecycleStage.WITHDRAWN)
            return (
                f"Successfully withdrew {amount} shares from the liquidity pool!",
                result.explorer_url,
            )

        return await self._run(Action.WITHDRAW, body)
