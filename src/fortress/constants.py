"""Protocol symbols and static asset metadata.

Contract addresses are deployment data and live in the registry JSON, see
``fortress.registry``. This module only holds what does not change between
deployments of the same protocol.
"""

# Derivative (market) tokens are named after their underlying with this prefix
DERIVATIVE_PREFIX = "f"

# Market tokens always carry 8 decimals; the oracle and exchange rates 18
DERIVATIVE_DECIMALS = 8
ORACLE_DECIMALS = 18

# Network gas asset; its market takes the amount as transaction value
NATIVE_ASSET = "BNB"

# Quote asset for prices when none is given
DEFAULT_QUOTE_ASSET = "USDC"

# Protocol contracts
COMPTROLLER = "Comptroller"
LENS = "FortressLens"
GOVERNANCE_TOKEN = "FTS"
STABLECOIN = "FAI"

# Underlying assets that may have a lending market
UNDERLYINGS: tuple[str, ...] = (
    "BNB",
    "BUSD",
    "USDT",
    "USDC",
    "DAI",
    "BTCB",
    "ETH",
    "LTC",
    "XRP",
    "BCH",
    "DOT",
    "LINK",
    "FIL",
    "BETH",
    "ADA",
)

DEFAULT_DECIMALS: dict[str, int] = {
    "BNB": 18,
    "BUSD": 18,
    "USDT": 6,
    "USDC": 6,
    "DAI": 18,
    "BTCB": 18,
    "ETH": 18,
    "LTC": 18,
    "XRP": 18,
    "BCH": 18,
    "DOT": 18,
    "LINK": 18,
    "FIL": 18,
    "BETH": 18,
    "ADA": 18,
    "FTS": 18,
    "FAI": 18,
}

# Per chain id overrides of DEFAULT_DECIMALS (BEP-20 stablecoins on BSC mainnet)
NETWORK_DECIMAL_OVERRIDES: dict[int, dict[str, int]] = {
    56: {"USDC": 18, "USDT": 18},
}

# Default expiry for delegation signatures (far future unix timestamp)
DEFAULT_DELEGATION_EXPIRY = 10**10

# Largest value a uint256 contract argument can hold
MAX_UINT256 = 2**256 - 1
