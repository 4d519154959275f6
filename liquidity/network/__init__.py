"""Network collaborators: the Soroban RPC gateway and the testnet faucet."""

from liquidity.network.funding import FriendbotFunder, Funder
from liquidity.network.gateway import NetworkGateway, SorobanGateway

__all__ = [
    "FriendbotFunder",
    "Funder",
    "NetworkGateway",
    "SorobanGateway",
]
