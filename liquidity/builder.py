"""Transaction envelope assembly and signing.

Operations are appended in exactly the order the caller supplies them.
Ordering constraints between operations (a trustline before the deposit or
payment that needs it) are the caller's responsibility; the builder never
reorders.

An envelope is single-use: it binds the sequence number that follows the
fetched account state. After a failed submission, rebuild from freshly
fetched state rather than resubmitting.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from stellar_sdk import (
    Account,
    Asset,
    ChangeTrust,
    Keypair,
    LiquidityPoolAsset,
    LiquidityPoolDeposit,
    LiquidityPoolWithdraw,
    PathPaymentStrictReceive,
    Price,
    TransactionBuilder,
    TransactionEnvelope,
)

from liquidity.constants import (
    BASE_FEE,
    DEPOSIT_PRICE,
    TESTNET_PASSPHRASE,
    TX_TIMEOUT_SECONDS,
    WITHDRAW_MIN_AMOUNT_A,
    WITHDRAW_MIN_AMOUNT_B,
)
from liquidity.errors import SignerMismatch
from liquidity.models.results import AccountState

if TYPE_CHECKING:
    from stellar_sdk.operation import Operation

logger = structlog.get_logger()


# =============================================================================
# Operation factories
# =============================================================================


def change_trust(asset: Asset | LiquidityPoolAsset) -> ChangeTrust:
    """Establish a trustline (maximum limit) to ``asset``."""
    return ChangeTrust(asset=asset)


def deposit_liquidity(pool_id: str, max_amount_a: str, max_amount_b: str) -> LiquidityPoolDeposit:
    """Deposit up to the given amounts at a fixed 1:1 price band."""
    price = Price(*DEPOSIT_PRICE)
    return LiquidityPoolDeposit(
        liquidity_pool_id=pool_id,
        max_amount_a=max_amount_a,
        max_amount_b=max_amount_b,
        min_price=price,
        max_price=price,
    )


def path_payment_strict_receive(
    destination: str,
    send_max: str,
    dest_asset: Asset,
    dest_amount: str,
) -> PathPaymentStrictReceive:
    """Pay at most ``send_max`` native to receive exactly ``dest_amount`` of ``dest_asset``.

    The path is empty: the ledger routes directly through the pool.
    """
    return PathPaymentStrictReceive(
        destination=destination,
        send_asset=Asset.native(),
        send_max=send_max,
        dest_asset=dest_asset,
        dest_amount=dest_amount,
        path=[],
    )


def withdraw_liquidity(pool_id: str, amount: str) -> LiquidityPoolWithdraw:
    """Redeem ``amount`` pool shares, accepting any split of the reserves."""
    return LiquidityPoolWithdraw(
        liquidity_pool_id=pool_id,
        amount=amount,
        min_amount_a=WITHDRAW_MIN_AMOUNT_A,
        min_amount_b=WITHDRAW_MIN_AMOUNT_B,
    )


# =============================================================================
# Envelope
# =============================================================================


def build_envelope(
    account_state: AccountState,
    operations: Sequence[Operation],
    signer: Keypair,
    network_passphrase: str = TESTNET_PASSPHRASE,
) -> TransactionEnvelope:
    """Assemble and sign a time-bounded envelope.

    Args:
        account_state: Freshly fetched state of the source account
        operations: Operations, applied by the ledger in this order
        signer: Keypair of the source account
        network_passphrase: Network the signature is bound to

    Returns:
        Signed envelope, valid for TX_TIMEOUT_SECONDS from now

    Raises:
        SignerMismatch: If ``signer`` does not own the source account
        ValueError: If ``operations`` is empty
    """
    if signer.public_key != account_state.account_id:
        raise SignerMismatch(account_state.account_id, signer.public_key)
    if not operations:
        raise ValueError("An envelope needs at least one operation")

    # A new Account per build, so a retry never reuses a consumed sequence
    source = Account(account_state.account_id, account_state.sequence)
    builder = TransactionBuilder(
        source_account=source,
        network_passphrase=network_passphrase,
        base_fee=BASE_FEE,
    )
    for operation in operations:
        builder.append_operation(operation)
    envelope = builder.set_timeout(TX_TIMEOUT_SECONDS).build()
    envelope.sign(signer)

    logger.debug(
        "envelope_built",
        source=account_state.account_id,
        sequence=account_state.sequence + 1,
        operations=[type(op).__name__ for op in operations],
        tx_hash=envelope.hash_hex(),
    )
    return envelope
