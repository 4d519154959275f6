"""Models for the pool lifecycle: stages, state and results."""

from liquidity.models.lifecycle import Action, LifecycleStage, PoolState, Role
from liquidity.models.results import AccountState, ActionOutcome, PoolStatus, SubmissionResult
from liquidity.models.types import Amount, HexDigest, PublicKey

__all__ = [
    # Types
    "Amount",
    "HexDigest",
    "PublicKey",
    # Lifecycle
    "Action",
    "LifecycleStage",
    "PoolState",
    "Role",
    # Results
    "AccountState",
    "ActionOutcome",
    "PoolStatus",
    "SubmissionResult",
]
