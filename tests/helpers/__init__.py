"""Test helpers module for shared test utilities.

- constants: Fixed keys and lifecycle inputs
- factories: Fake funder and gateway collaborators
"""

from tests.helpers.constants import (
    ASSET_NAME,
    ISSUER,
    ISSUER_KEYPAIR,
    NO_TRUST_REASON,
    OTHER_ISSUER,
    OTHER_KEYPAIR,
    START_SEQUENCE,
    TRADE_QUANTITY,
    WITHDRAW_AMOUNT,
)
from tests.helpers.factories import FakeFunder, FakeGateway

__all__ = [
    # Constants
    "ASSET_NAME",
    "ISSUER",
    "ISSUER_KEYPAIR",
    "NO_TRUST_REASON",
    "OTHER_ISSUER",
    "OTHER_KEYPAIR",
    "START_SEQUENCE",
    "TRADE_QUANTITY",
    "WITHDRAW_AMOUNT",
    # Factories
    "FakeFunder",
    "FakeGateway",
]
