"""Shared type definitions for orchestrator models.

These types are used across the lifecycle, result and API models.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from stellar_sdk import StrKey

from liquidity.constants import AMOUNT_DECIMALS, MAX_AMOUNT_STROOPS, NATIVE_ASSET_CODE
from liquidity.errors import InvalidAmount, InvalidAssetCode

# Alphanumeric, 1-12 characters (covers both alphanum4 and alphanum12 assets)
ASSET_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{1,12}")

_STROOPS_PER_UNIT = Decimal(10) ** AMOUNT_DECIMALS


def validate_amount(value: Any) -> str:
    """Validate and normalize a positive Stellar amount.

    Args:
        value: Amount as string, int or Decimal (e.g. "50", 50, "0.5")

    Returns:
        Normalized decimal string without exponent or trailing zeros

    Raises:
        InvalidAmount: If value is not numeric, not positive, has more than
            7 fractional digits, or exceeds the int64 stroop range
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise InvalidAmount(f"Amount must be a string or number, got {type(value).__name__}")

    text = value.strip() if isinstance(value, str) else str(value)
    if not text:
        raise InvalidAmount("Amount is required")

    try:
        amount = Decimal(text)
    except InvalidOperation as err:
        raise InvalidAmount(f"Amount must be a decimal number: '{text}'") from err

    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite: '{text}'")
    if amount <= 0:
        raise InvalidAmount(f"Amount must be positive: '{text}'")

    stroops = amount * _STROOPS_PER_UNIT
    if stroops != stroops.to_integral_value():
        raise InvalidAmount(f"Amount has more than {AMOUNT_DECIMALS} decimal places: '{text}'")
    if stroops > MAX_AMOUNT_STROOPS:
        raise InvalidAmount(f"Amount overflow: '{text}'")

    normalized = amount.normalize()
    # normalize() turns 100 into 1E+2
    return f"{normalized:f}"


def validate_asset_code(code: Any) -> str:
    """Validate a custom asset code.

    Raises:
        InvalidAssetCode: If code is empty, longer than 12 characters,
            contains non-alphanumeric characters, or names the native asset
    """
    if not isinstance(code, str):
        raise InvalidAssetCode(f"Asset code must be a string, got {type(code).__name__}")
    if not ASSET_CODE_PATTERN.fullmatch(code):
        raise InvalidAssetCode(
            f"Invalid asset code '{code}' (must be 1-12 alphanumeric characters)"
        )
    if code.upper() == NATIVE_ASSET_CODE:
        raise InvalidAssetCode(f"Asset code '{code}' is reserved for the native asset")
    return code


def is_valid_public_key(public_key: str) -> bool:
    """Check if a string is a valid ``G...`` account id."""
    if not isinstance(public_key, str):
        return False
    return StrKey.is_valid_ed25519_public_key(public_key)


# Stellar amount as normalized decimal string (validated)
Amount = Annotated[
    str,
    BeforeValidator(validate_amount),
    Field(description="Positive amount with at most 7 decimal places"),
]

# Ed25519 account id in strkey form
PublicKey = Annotated[str, Field(pattern=r"^G[A-Z2-7]{55}$")]

# SHA-256 digest as lowercase hex
HexDigest = Annotated[str, Field(pattern=r"^[a-f0-9]{64}$")]
