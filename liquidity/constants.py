"""Protocol constants for the liquidity pool orchestrator.

Centralizes network endpoints and the fixed parameters of the pool
lifecycle (fees, deposit sizes, trade bounds).
"""

from stellar_sdk import Network

# Stellar test network endpoints
TESTNET_RPC_URL = "https://soroban-testnet.stellar.org"
TESTNET_FRIENDBOT_URL = "https://friendbot.stellar.org"
TESTNET_EXPLORER_URL = "https://stellar.expert/explorer/testnet"
TESTNET_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE

# Base fee per operation, in stroops (1 XLM = 10^7 stroops)
BASE_FEE = 100

# Validity window baked into every envelope (seconds)
TX_TIMEOUT_SECONDS = 30

# Pool parameters
POOL_TYPE = "constant_product"
# Fee in basis points (30 = 0.3%), the only fee tier the ledger accepts
POOL_FEE_BPS = 30

# Initial deposit: 100 native against 100 custom at a 1:1 price
DEPOSIT_MAX_AMOUNT_A = "100"
DEPOSIT_MAX_AMOUNT_B = "100"
DEPOSIT_PRICE = (1, 1)

# Most native the trader is willing to spend in a single path payment
TRADE_SEND_MAX = "1000"

# Withdrawals accept any split of the underlying reserves
WITHDRAW_MIN_AMOUNT_A = "0"
WITHDRAW_MIN_AMOUNT_B = "0"

NATIVE_ASSET_CODE = "XLM"

# Stellar amounts are int64 stroops rendered with 7 decimals
AMOUNT_DECIMALS = 7
MAX_AMOUNT_STROOPS = 2**63 - 1
