"""Pytest configuration and fixtures."""

import os
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import pytest

# Set test environment
os.environ["FORTRESS_PRIVATE_KEY"] = ""
os.environ["FORTRESS_REGISTRY_PATH"] = ""
os.environ["FORTRESS_DEBUG"] = "true"

from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.config import Settings
from fortress.registry import AssetRegistry
from fortress.signing.local import LocalSigner

# Throwaway key, never funded
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


def addr(n: int) -> str:
    """Deterministic test address."""
    return "0x%040x" % n


OWNER = addr(0xA11CE)
ORACLE = addr(0x20)

TEST_ADDRESSES = {
    "Comptroller": addr(1),
    "FortressLens": addr(2),
    "FTS": addr(3),
    "FAI": addr(4),
    "DAI": addr(5),
    "fDAI": addr(6),
    "USDC": addr(7),
    "fUSDC": addr(8),
    "fBNB": addr(9),
    "BTCB": addr(0x10),
    "fBTCB": addr(0x11),
}

TEST_ORACLE_ASSETS = {"FTS": addr(0x30)}


@dataclass
class SentTx:
    to: str
    method: str
    args: tuple
    params: dict = field(default_factory=dict)


class FakeChain(ChainBackend):
    """In-memory chain backend recording every call.

    Responses are registered per (address, method); a callable response is
    called with the read arguments, an exception response is raised.
    """

    def __init__(self, account: Optional[str] = OWNER):
        self.account = account
        self.responses: dict[tuple[str, str], Any] = {}
        self.send_errors: dict[str, Exception] = {}
        self.reads: list[tuple[str, str, tuple]] = []
        self.sends: list[SentTx] = []
        self.waited: list[str] = []

    def respond(self, address: str, method: str, value: Any):
        self.responses[(address.lower(), method)] = value

    def fail_send(self, method: str, error: Exception):
        self.send_errors[method] = error

    @property
    def calls(self) -> int:
        return len(self.reads) + len(self.sends)

    async def read(self, address: str, method: str, args: Sequence[Any], abi: list[dict]) -> Any:
        self.reads.append((address, method, tuple(args)))
        value = self.responses[(address.lower(), method)]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*args)
        return value

    async def send(
        self,
        address: str,
        method: str,
        args: Sequence[Any],
        abi: list[dict],
        tx_params: Optional[dict] = None,
    ) -> TransactionHandle:
        params = dict(tx_params or {})
        self.sends.append(SentTx(address, method, tuple(args), params))
        if method in self.send_errors:
            raise self.send_errors[method]
        return TransactionHandle(
            tx_hash="0x%064x" % len(self.sends),
            to=address,
            method=method,
            args=tuple(args),
            value=int(params.get("value", 0)),
        )

    async def wait_for_receipt(
        self,
        handle: TransactionHandle,
        timeout: float = 120,
        confirmations: int = 1,
    ) -> TransactionHandle:
        self.waited.append(handle.tx_hash)
        handle.receipt = {"status": 1, "blockNumber": 1, "transactionHash": handle.tx_hash}
        return handle

    async def get_account_address(self) -> str:
        return self.account

    async def get_chain_id(self) -> int:
        return 97


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the developer's environment."""
    return Settings(
        _env_file=None,
        network="testnet",
        chain_id=97,
        private_key=None,
        registry_path=None,
        confirmation_timeout=5,
    )


@pytest.fixture
def registry() -> AssetRegistry:
    """Testnet registry (USDC keeps its default 6 decimals)."""
    return AssetRegistry(
        network="testnet",
        chain_id=97,
        addresses=TEST_ADDRESSES,
        oracle_assets=TEST_ORACLE_ASSETS,
    )


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def signer() -> LocalSigner:
    return LocalSigner(TEST_PRIVATE_KEY)
