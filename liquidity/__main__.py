"""Run the whole pool lifecycle from the command line.

Usage:
    python -m liquidity --asset EKOLANCE --trade 10 --withdraw 50
    python -m liquidity --serve
"""

import argparse
import asyncio
import sys

import structlog

from liquidity.config import NetworkConfig
from liquidity.lifecycle import PoolOrchestrator
from liquidity.log_config import configure_logging
from liquidity.models.results import ActionOutcome
from liquidity.network.funding import FriendbotFunder
from liquidity.network.gateway import SorobanGateway

logger = structlog.get_logger()


def print_outcome(outcome: ActionOutcome) -> None:
    marker = "ERROR" if outcome.is_error else "OK"
    print(f"[{marker}] {outcome.message}")
    if outcome.transaction_url:
        print(f"       {outcome.transaction_url}")


async def run_lifecycle(asset: str, trade: str, withdraw: str, config: NetworkConfig) -> bool:
    """Set up accounts, create the pool, trade, then withdraw.

    Stops at the first failed action.

    Returns:
        True if every action succeeded
    """
    async with SorobanGateway(config) as gateway:
        orchestrator = PoolOrchestrator(
            funder=FriendbotFunder(config),
            config=config,
            gateway_factory=lambda: gateway,
        )
        steps = [
            orchestrator.create_and_fund_accounts,
            lambda: orchestrator.create_pool(asset),
            lambda: orchestrator.trade_assets(trade),
            lambda: orchestrator.withdraw_funds(withdraw),
        ]
        for step in steps:
            outcome = await step()
            print_outcome(outcome)
            if not outcome.success:
                return False

        logger.info("lifecycle_complete", stage=orchestrator.state.stage.value)
        return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Drive a testnet liquidity pool lifecycle")
    parser.add_argument("--asset", default="EKOLANCE", help="Code of the asset to issue")
    parser.add_argument("--trade", default="10", help="Units of the asset the trader buys")
    parser.add_argument("--withdraw", default="50", help="Pool shares the operator redeems")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP API instead")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.serve:
        from liquidity.api.main import run

        run()
        return

    configure_logging(debug=args.debug)
    ok = asyncio.run(
        run_lifecycle(
            asset=args.asset,
            trade=args.trade,
            withdraw=args.withdraw,
            config=NetworkConfig.from_env(),
        )
    )
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
