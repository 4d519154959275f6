"""API endpoints for the pool orchestrator.

Each action endpoint is the trigger boundary: inputs are validated and
the action's availability is checked before the orchestrator is called.
A disabled action answers 409 with the outcome and makes no network call.
"""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from liquidity.config import NetworkConfig
from liquidity.errors import ActionInProgress, ActionUnavailable
from liquidity.lifecycle import PoolOrchestrator
from liquidity.models.lifecycle import Action
from liquidity.models.results import ActionOutcome, PoolStatus
from liquidity.models.types import Amount
from liquidity.network.funding import FriendbotFunder

logger = structlog.get_logger()

router = APIRouter()


class CreatePoolRequest(BaseModel):
    asset_name: str = Field(alias="assetName", min_length=1)

    model_config = {"populate_by_name": True}


class TradeRequest(BaseModel):
    trade_quantity: Amount = Field(alias="tradeQuantity")

    model_config = {"populate_by_name": True}


class WithdrawRequest(BaseModel):
    withdraw_amount: Amount = Field(alias="withdrawAmount")

    model_config = {"populate_by_name": True}


@lru_cache(maxsize=1)
def get_default_orchestrator() -> PoolOrchestrator:
    """Process-wide orchestrator for the configured network."""
    config = NetworkConfig.from_env()
    return PoolOrchestrator(funder=FriendbotFunder(config), config=config)


async def close_default_orchestrator() -> None:
    """Release the network client of the process-wide orchestrator, if one was built."""
    if get_default_orchestrator.cache_info().currsize == 0:
        return
    await get_default_orchestrator().aclose()
    get_default_orchestrator.cache_clear()


def get_orchestrator() -> PoolOrchestrator:
    """Dependency provider for the orchestrator instance.

    Override this in tests to inject one with fake collaborators:
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    """
    return get_default_orchestrator()


def _disabled(orchestrator: PoolOrchestrator, action: Action) -> JSONResponse | None:
    """409 response if ``action`` cannot be triggered right now, else None."""
    if orchestrator.can_trigger(action):
        return None

    state = orchestrator.state
    if state.busy:
        running = state.running.value if state.running else None
        error: Exception = ActionInProgress(action.value, running)
    else:
        error = ActionUnavailable(action.value, f"not allowed in stage {state.stage.value}")
    logger.info("action_disabled", action=action.value, stage=state.stage.value, busy=state.busy)

    outcome = ActionOutcome.failed(action, str(error), state.stage)
    return JSONResponse(status_code=409, content=outcome.model_dump(mode="json", by_alias=True))


@router.get("/status")
async def status(orchestrator: PoolOrchestrator = Depends(get_orchestrator)) -> PoolStatus:
    """Current stage, busy flag and enabled actions."""
    return orchestrator.status()


@router.post("/accounts", response_model=ActionOutcome)
async def setup_accounts(
    orchestrator: PoolOrchestrator = Depends(get_orchestrator),
) -> ActionOutcome | JSONResponse:
    """Create and fund the operator and trader accounts."""
    disabled = _disabled(orchestrator, Action.SETUP_ACCOUNTS)
    if disabled is not None:
        return disabled
    return await orchestrator.create_and_fund_accounts()


@router.post("/pool", response_model=ActionOutcome)
async def create_pool(
    request: CreatePoolRequest,
    orchestrator: PoolOrchestrator = Depends(get_orchestrator),
) -> ActionOutcome | JSONResponse:
    """Issue the named asset and seed the pool."""
    disabled = _disabled(orchestrator, Action.CREATE_POOL)
    if disabled is not None:
        return disabled
    return await orchestrator.create_pool(request.asset_name)


@router.post("/trade", response_model=ActionOutcome)
async def trade(
    request: TradeRequest,
    orchestrator: PoolOrchestrator = Depends(get_orchestrator),
) -> ActionOutcome | JSONResponse:
    """Buy an exact quantity of the custom asset through the pool."""
    disabled = _disabled(orchestrator, Action.TRADE)
    if disabled is not None:
        return disabled
    return await orchestrator.trade_assets(request.trade_quantity)


@router.post("/withdraw", response_model=ActionOutcome)
async def withdraw(
    request: WithdrawRequest,
    orchestrator: PoolOrchestrator = Depends(get_orchestrator),
) -> ActionOutcome | JSONResponse:
    """Redeem pool shares for the operator."""
    disabled = _disabled(orchestrator, Action.WITHDRAW)
    if disabled is not None:
        return disabled
    return await orchestrator.withdraw_funds(request.withdraw_amount)
