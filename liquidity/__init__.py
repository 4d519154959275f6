"""Liquidity pool lifecycle orchestrator for the Stellar test network."""

__version__ = "0.1.0"

from liquidity.lifecycle import PoolOrchestrator  # noqa: E402
from liquidity.models.lifecycle import Action, LifecycleStage  # noqa: E402

__all__ = ["Action", "LifecycleStage", "PoolOrchestrator", "__version__"]
