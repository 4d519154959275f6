"""Asset registry: the custom asset, its pool share asset and the pool id.

Everything here is pure. The pool identifier is a SHA-256 digest over the
XDR of the pool parameters (type, ordered asset pair, fee), so the same
asset code, issuer and fee always address the same pool without any
network lookup.
"""

from __future__ import annotations

from stellar_sdk import Asset, LiquidityPoolAsset

from liquidity.constants import POOL_FEE_BPS, POOL_TYPE
from liquidity.errors import InvalidAssetCode
from liquidity.models.types import is_valid_public_key, validate_asset_code


def define_custom_asset(code: str, issuer_public_key: str) -> Asset:
    """Define the custom asset issued by ``issuer_public_key``.

    Args:
        code: Asset code, 1-12 alphanumeric characters
        issuer_public_key: Issuer account id (``G...``)

    Returns:
        The credit asset

    Raises:
        InvalidAssetCode: If the code or issuer is malformed
    """
    validate_asset_code(code)
    if not is_valid_public_key(issuer_public_key):
        raise InvalidAssetCode(f"Invalid issuer for asset '{code}': {issuer_public_key}")
    return Asset(code, issuer_public_key)


def derive_pool_share_asset(
    custom_asset: Asset,
    fee_bps: int = POOL_FEE_BPS,
) -> LiquidityPoolAsset:
    """Pool share asset for the (native, ``custom_asset``) pair.

    The pair is put in canonical order before construction; for a native
    pair the native asset always comes first.
    """
    native = Asset.native()
    if LiquidityPoolAsset.is_valid_lexicographic_order(native, custom_asset):
        asset_a, asset_b = native, custom_asset
    else:
        asset_a, asset_b = custom_asset, native
    return LiquidityPoolAsset(asset_a, asset_b, fee_bps)


def compute_pool_identifier(
    pool_share_asset: LiquidityPoolAsset,
    pool_type: str = POOL_TYPE,
) -> str:
    """Deterministic pool identifier as 64 lowercase hex characters.

    Raises:
        ValueError: If ``pool_type`` is not a supported pool type
    """
    if pool_type != POOL_TYPE:
        raise ValueError(f"Unsupported pool type: {pool_type}")
    return pool_share_asset.liquidity_pool_id


def pool_identifier_for(code: str, issuer_public_key: str, fee_bps: int = POOL_FEE_BPS) -> str:
    """Recompute the pool identifier straight from the asset parameters."""
    custom_asset = define_custom_asset(code, issuer_public_key)
    return compute_pool_identifier(derive_pool_share_asset(custom_asset, fee_bps))
