"""Tests for envelope assembly and the operation factories."""

import time

import pytest
from stellar_sdk import (
    Asset,
    ChangeTrust,
    LiquidityPoolDeposit,
    LiquidityPoolWithdraw,
    PathPaymentStrictReceive,
    Price,
)

from liquidity.assets import define_custom_asset, derive_pool_share_asset, pool_identifier_for
from liquidity.builder import (
    build_envelope,
    change_trust,
    deposit_liquidity,
    path_payment_strict_receive,
    withdraw_liquidity,
)
from liquidity.constants import BASE_FEE, TESTNET_PASSPHRASE, TX_TIMEOUT_SECONDS
from liquidity.errors import SignerMismatch
from liquidity.models.results import AccountState
from tests.helpers import ASSET_NAME, ISSUER, ISSUER_KEYPAIR, OTHER_KEYPAIR

POOL_ID = pool_identifier_for(ASSET_NAME, ISSUER)


@pytest.fixture
def account_state() -> AccountState:
    return AccountState(account_id=ISSUER, sequence=41)


class TestOperationFactories:
    """Tests for the operation factories."""

    def test_deposit_fixed_price_band(self):
        op = deposit_liquidity(POOL_ID, "100", "100")

        assert isinstance(op, LiquidityPoolDeposit)
        assert op.liquidity_pool_id == POOL_ID
        assert op.min_price == Price(1, 1)
        assert op.max_price == Price(1, 1)

    def test_path_payment_native_to_custom(self):
        custom = Asset(ASSET_NAME, ISSUER)

        op = path_payment_strict_receive(OTHER_KEYPAIR.public_key, "1000", custom, "10")

        assert isinstance(op, PathPaymentStrictReceive)
        assert op.send_asset == Asset.native()
        assert op.dest_asset == custom
        assert op.path == []
        assert op.source is None

    def test_withdraw_zero_minimums(self):
        op = withdraw_liquidity(POOL_ID, "50")

        assert isinstance(op, LiquidityPoolWithdraw)
        assert str(op.min_amount_a) == "0"
        assert str(op.min_amount_b) == "0"


class TestBuildEnvelope:
    """Tests for build_envelope."""

    def test_preserves_operation_order(self, account_state):
        """Operations come out in exactly the order they went in."""
        pool_share = derive_pool_share_asset(define_custom_asset(ASSET_NAME, ISSUER))
        operations = [
            withdraw_liquidity(POOL_ID, "1"),
            change_trust(pool_share),
            deposit_liquidity(POOL_ID, "100", "100"),
        ]

        envelope = build_envelope(account_state, operations, ISSUER_KEYPAIR)

        assert [type(op) for op in envelope.transaction.operations] == [
            LiquidityPoolWithdraw,
            ChangeTrust,
            LiquidityPoolDeposit,
        ]

    def test_fee_sequence_and_network(self, account_state):
        envelope = build_envelope(
            account_state, [withdraw_liquidity(POOL_ID, "1")], ISSUER_KEYPAIR
        )

        assert envelope.transaction.fee == BASE_FEE
        assert envelope.transaction.sequence == 42
        assert envelope.network_passphrase == TESTNET_PASSPHRASE

    def test_fee_scales_with_operations(self, account_state):
        operations = [withdraw_liquidity(POOL_ID, "1"), withdraw_liquidity(POOL_ID, "2")]

        envelope = build_envelope(account_state, operations, ISSUER_KEYPAIR)

        assert envelope.transaction.fee == 2 * BASE_FEE

    def test_validity_window(self, account_state):
        before = int(time.time())

        envelope = build_envelope(
            account_state, [withdraw_liquidity(POOL_ID, "1")], ISSUER_KEYPAIR
        )

        time_bounds = envelope.transaction.preconditions.time_bounds
        assert time_bounds.min_time == 0
        assert before + TX_TIMEOUT_SECONDS <= time_bounds.max_time
        assert time_bounds.max_time <= int(time.time()) + TX_TIMEOUT_SECONDS

    def test_signed_once_by_source(self, account_state):
        envelope = build_envelope(
            account_state, [withdraw_liquidity(POOL_ID, "1")], ISSUER_KEYPAIR
        )

        assert len(envelope.signatures) == 1
        signature = envelope.signatures[0]
        assert signature.signature_hint == ISSUER_KEYPAIR.signature_hint()
        # Raises if the signature does not verify
        ISSUER_KEYPAIR.verify(envelope.hash(), signature.signature)

    def test_signer_mismatch(self, account_state):
        with pytest.raises(SignerMismatch) as exc_info:
            build_envelope(account_state, [withdraw_liquidity(POOL_ID, "1")], OTHER_KEYPAIR)

        assert exc_info.value.source == ISSUER
        assert exc_info.value.signer == OTHER_KEYPAIR.public_key

    def test_empty_operations(self, account_state):
        with pytest.raises(ValueError, match="at least one operation"):
            build_envelope(account_state, [], ISSUER_KEYPAIR)

    def test_rebuild_from_same_state_same_sequence(self, account_state):
        """Rebuilding from one state reuses its next sequence; fresh state is the caller's job."""
        operations = [withdraw_liquidity(POOL_ID, "1")]

        first = build_envelope(account_state, operations, ISSUER_KEYPAIR)
        second = build_envelope(account_state, operations, ISSUER_KEYPAIR)

        assert first.transaction.sequence == second.transaction.sequence == 42
        assert account_state.sequence == 41
