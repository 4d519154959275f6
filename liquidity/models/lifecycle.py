"""Lifecycle stage and orchestrator-owned pool state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stellar_sdk import Asset, LiquidityPoolAsset


class LifecycleStage(str, Enum):
    """Pool lifecycle stages, in the only order they may be reached."""

    UNINITIALIZED = "uninitialized"
    ACCOUNTS_FUNDED = "accounts_funded"
    POOL_CREATED = "pool_created"
    TRADED = "traded"
    WITHDRAWN = "withdrawn"

    @property
    def rank(self) -> int:
        """Position of this stage in the lifecycle (0 = uninitialized)."""
        return _STAGE_ORDER.index(self)

    def at_least(self, other: LifecycleStage) -> bool:
        """True if this stage has reached ``other`` or gone past it."""
        return self.rank >= other.rank

    def advance_to(self, target: LifecycleStage) -> LifecycleStage:
        """Return the later of this stage and ``target``.

        Stages never regress: advancing to an earlier stage is a no-op.
        """
        return target if target.rank > self.rank else self


_STAGE_ORDER = list(LifecycleStage)


class Action(str, Enum):
    """Operator-triggered actions."""

    SETUP_ACCOUNTS = "setup_accounts"
    CREATE_POOL = "create_pool"
    TRADE = "trade"
    WITHDRAW = "withdraw"


class Role(str, Enum):
    """Account roles held by the identity provider."""

    OPERATOR = "operator"
    TRADER = "trader"


@dataclass
class PoolState:
    """All mutable orchestrator state in one place.

    Written only by PoolOrchestrator. The derived assets and pool id are
    cached after a confirmed CreatePool and are always recomputable from
    the asset code and issuer.

    Attributes:
        stage: Current lifecycle stage
        busy: True while an action is in flight
        running: The action currently in flight, if any
        custom_asset: The issued asset (set once the pool exists)
        pool_share_asset: Pool share asset for (native, custom_asset)
        pool_id: Hex pool identifier derived from pool_share_asset
    """

    stage: LifecycleStage = LifecycleStage.UNINITIALIZED
    busy: bool = False
    running: Action | None = None
    custom_asset: Asset | None = None
    pool_share_asset: LiquidityPoolAsset | None = None
    pool_id: str | None = None

    @property
    def pool_known(self) -> bool:
        """True once the pool assets and identifier are cached."""
        return (
            self.custom_asset is not None
            and self.pool_share_asset is not None
            and self.pool_id is not None
        )
