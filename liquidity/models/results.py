"""Pydantic models for network state and action outcomes."""

from pydantic import BaseModel, Field

from liquidity.models.lifecycle import Action, LifecycleStage
from liquidity.models.types import HexDigest, PublicKey


class AccountState(BaseModel):
    """On-ledger state of an account needed to build a transaction."""

    account_id: PublicKey = Field(alias="accountId", description="Account public key")
    sequence: int = Field(ge=0, description="Current (last consumed) sequence number")

    model_config = {"populate_by_name": True, "frozen": True}


class SubmissionResult(BaseModel):
    """Result of submitting one envelope. Produced per submission, not retained."""

    hash: HexDigest = Field(description="Transaction hash")
    success: bool
    explorer_url: str | None = Field(
        default=None,
        alias="explorerUrl",
        description="Explorer link, present only on success",
    )
    ledger: int | None = Field(default=None, description="Ledger the transaction landed in")

    model_config = {"populate_by_name": True, "frozen": True}


class ActionOutcome(BaseModel):
    """Operator-facing result of an action."""

    action: Action
    success: bool
    message: str
    is_error: bool = Field(alias="isError")
    transaction_url: str | None = Field(default=None, alias="transactionUrl")
    stage: LifecycleStage

    model_config = {"populate_by_name": True}

    @classmethod
    def succeeded(
        cls,
        action: Action,
        message: str,
        stage: LifecycleStage,
        transaction_url: str | None = None,
    ) -> "ActionOutcome":
        """Create a success outcome."""
        return cls(
            action=action,
            success=True,
            message=message,
            is_error=False,
            transaction_url=transaction_url,
            stage=stage,
        )

    @classmethod
    def failed(cls, action: Action, message: str, stage: LifecycleStage) -> "ActionOutcome":
        """Create a failure outcome (never carries a transaction link)."""
        return cls(action=action, success=False, message=message, is_error=True, stage=stage)


class PoolStatus(BaseModel):
    """Snapshot of the orchestrator for the presentation layer."""

    stage: LifecycleStage
    busy: bool
    running: Action | None = None
    enabled_actions: list[Action] = Field(default_factory=list, alias="enabledActions")
    asset_code: str | None = Field(default=None, alias="assetCode")
    pool_id: HexDigest | None = Field(default=None, alias="poolId")
    operator_public_key: str | None = Field(default=None, alias="operatorPublicKey")
    trader_public_key: str | None = Field(default=None, alias="traderPublicKey")

    model_config = {"populate_by_name": True}
