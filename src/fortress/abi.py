"""Minimal ABI fragments for the protocol contracts the SDK calls."""


def _function(name: str, inputs=(), outputs=(), mutability: str = "nonpayable") -> dict:
    """Build a function ABI entry from (name, type) pairs."""
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


BEP20 = [
    _function("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")], "view"),
    _function("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")]),
    _function("balanceOf", [("account", "address")], [("", "uint256")], "view"),
]

# Market token for BEP-20 underlyings
F_BEP20 = [
    _function("mint", [("mintAmount", "uint256")], [("", "uint256")]),
    _function("redeem", [("redeemTokens", "uint256")], [("", "uint256")]),
    _function("redeemUnderlying", [("redeemAmount", "uint256")], [("", "uint256")]),
    _function("borrow", [("borrowAmount", "uint256")], [("", "uint256")]),
    _function("repayBorrow", [("repayAmount", "uint256")], [("", "uint256")]),
    _function(
        "repayBorrowBehalf",
        [("borrower", "address"), ("repayAmount", "uint256")],
        [("", "uint256")],
    ),
    _function("exchangeRateCurrent", [], [("", "uint256")]),
]

# Market token for the native gas asset: amounts travel as msg.value
F_BNB = [
    _function("mint", [], [], "payable"),
    _function("redeem", [("redeemTokens", "uint256")], [("", "uint256")]),
    _function("redeemUnderlying", [("redeemAmount", "uint256")], [("", "uint256")]),
    _function("borrow", [("borrowAmount", "uint256")], [("", "uint256")]),
    _function("repayBorrow", [], [], "payable"),
    _function("repayBorrowBehalf", [("borrower", "address")], [], "payable"),
    _function("exchangeRateCurrent", [], [("", "uint256")]),
]

COMPTROLLER = [
    _function("oracle", [], [("", "address")], "view"),
    _function("claimFortress", [("holder", "address")], []),
    _function("mintFAI", [("mintFAIAmount", "uint256")], [("", "uint256")]),
    _function("repayFAI", [("repayFAIAmount", "uint256")], [("", "uint256")]),
    _function("getMintableFAI", [("minter", "address")], [("", "uint256"), ("", "uint256")], "view"),
    _function("getFAIMintRate", [], [("", "uint256")], "view"),
    _function("mintedFAIOf", [("owner", "address")], [("", "uint256")], "view"),
    _function("mintedFAIs", [("", "address")], [("", "uint256")], "view"),
    _function("faiController", [], [("", "address")], "view"),
    _function("faiMintRate", [], [("", "uint256")], "view"),
    _function("mintFAIGuardianPaused", [], [("", "bool")], "view"),
    _function("repayFAIGuardianPaused", [], [("", "bool")], "view"),
]

PRICE_ORACLE = [
    _function("getUnderlyingPrice", [("fToken", "address")], [("", "uint256")], "view"),
]

GOVERNANCE_TOKEN = [
    _function("balanceOf", [("account", "address")], [("", "uint256")], "view"),
    _function("nonces", [("", "address")], [("", "uint256")], "view"),
    _function("delegate", [("delegatee", "address")], []),
    _function(
        "delegateBySig",
        [
            ("delegatee", "address"),
            ("nonce", "uint256"),
            ("expiry", "uint256"),
            ("v", "uint8"),
            ("r", "bytes32"),
            ("s", "bytes32"),
        ],
        [],
    ),
]

LENS = [
    {
        "type": "function",
        "name": "getFTSBalanceMetadataExt",
        "inputs": [
            {"name": "fts", "type": "address"},
            {"name": "comptroller", "type": "address"},
            {"name": "account", "type": "address"},
        ],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "balance", "type": "uint256"},
                    {"name": "votes", "type": "uint256"},
                    {"name": "delegate", "type": "address"},
                    {"name": "allocated", "type": "uint256"},
                ],
            }
        ],
        "stateMutability": "nonpayable",
    },
]


def market_abi(derivative_symbol: str, native_derivative: str) -> list[dict]:
    """Pick the market ABI for a market token symbol."""
    return F_BNB if derivative_symbol == native_derivative else F_BEP20
